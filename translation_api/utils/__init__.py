"""Shared utilities for the translation API.

Reusable helpers shared across route modules.
"""

from translation_api.utils.auth import (
    token_required,
    revoke_current_token,
    register_token_blocklist,
)
from translation_api.utils.validation import (
    validate_translation_payload,
    validate_tag_payload,
    parse_tags_arg,
    parse_translation_filters,
)

__all__ = [
    'token_required',
    'revoke_current_token',
    'register_token_blocklist',
    'validate_translation_payload',
    'validate_tag_payload',
    'parse_tags_arg',
    'parse_translation_filters',
]
