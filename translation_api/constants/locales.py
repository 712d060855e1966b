"""Locale and tag constants.

Locales outside SUPPORTED_LOCALES are still accepted by the API; this list
drives the populate script and the /locales metadata.
"""

SUPPORTED_LOCALES = {
    'en': 'English',
    'fr': 'French',
    'es': 'Spanish',
    'de': 'German',
    'it': 'Italian',
    'pt': 'Portuguese',
    'ru': 'Russian',
    'zh': 'Chinese',
    'ja': 'Japanese',
    'ko': 'Korean',
}

# Tags created by scripts/populate_translations.py
DEFAULT_TAGS = [
    'mobile',
    'desktop',
    'web',
    'api',
    'admin',
    'frontend',
    'backend',
    'email',
    'notification',
    'dashboard',
]
