"""Request validation helpers.

Each validator returns an error message, or None when the payload is valid.
"""

import re

from translation_api.repositories.criteria import (
    DEFAULT_PER_PAGE,
    MAX_PER_PAGE,
    TranslationFilters,
)

TRANSLATION_FIELDS = {'key', 'locale', 'content', 'tags'}
TAG_FIELDS = {'name', 'slug', 'description'}

MAX_KEY_LENGTH = 255
MAX_LOCALE_LENGTH = 10
MAX_TAG_LENGTH = 100

SLUG_REGEX = re.compile(r'^[a-z0-9]+(?:-[a-z0-9]+)*$')


def _validate_tags(tags):
    if tags is None:
        return None
    if not isinstance(tags, list):
        return "tags must be a list"
    for tag in tags:
        if not isinstance(tag, str) or not tag.strip():
            return "Each tag must be a non-empty string"
        if len(tag) > MAX_TAG_LENGTH:
            return f"Each tag must be at most {MAX_TAG_LENGTH} characters"
        if not re.search(r'[a-zA-Z0-9]', tag):
            return f"Tag '{tag}' must contain at least one letter or digit"
    return None


def validate_translation_payload(data, partial=False):
    """Validate a create (partial=False) or update (partial=True) payload."""
    if not isinstance(data, dict):
        return "Request body must be a JSON object"

    unknown = set(data.keys()) - TRANSLATION_FIELDS
    if unknown:
        return f"Unknown fields: {', '.join(sorted(unknown))}"

    if not partial:
        missing = [f for f in ('key', 'locale', 'content') if not data.get(f)]
        if missing:
            return f"Missing required fields: {', '.join(missing)}"

    length_limits = {
        'key': MAX_KEY_LENGTH,
        'locale': MAX_LOCALE_LENGTH,
        'content': None,
    }

    for field, max_len in length_limits.items():
        if field in data and data[field] is not None:
            if not isinstance(data[field], str):
                return f"{field} must be a string"
            if max_len and len(data[field]) > max_len:
                return f"{field} must be at most {max_len} characters"
            if field != 'content' and not data[field].strip():
                return f"{field} must not be empty"

    return _validate_tags(data.get('tags'))


def validate_tag_payload(data, partial=False):
    if not isinstance(data, dict):
        return "Request body must be a JSON object"

    unknown = set(data.keys()) - TAG_FIELDS
    if unknown:
        return f"Unknown fields: {', '.join(sorted(unknown))}"

    if not partial and not data.get('name'):
        return "name is required"

    for field in ('name', 'slug', 'description'):
        if field in data and data[field] is not None and not isinstance(data[field], str):
            return f"{field} must be a string"

    if data.get('name') is not None and len(data['name']) > MAX_TAG_LENGTH:
        return f"name must be at most {MAX_TAG_LENGTH} characters"

    if data.get('name') is not None and not re.search(r'[a-zA-Z0-9]', data['name']):
        return "name must contain at least one letter or digit"

    if data.get('slug') is not None and not SLUG_REGEX.match(data['slug']):
        return "slug may only contain lowercase letters, digits and single dashes"

    return None


def parse_tags_arg(args):
    """Tags may be repeated (?tags=a&tags=b) or comma separated (?tags=a,b)."""
    tags = []
    for value in args.getlist('tags') + args.getlist('tags[]'):
        tags.extend(t.strip() for t in value.split(',') if t.strip())
    return tags


def parse_translation_filters(args):
    """Build TranslationFilters from query args.

    Returns:
        (filters, error_message); error_message is None when valid.
    """
    tags = parse_tags_arg(args)

    try:
        page = int(args.get('page', 1))
        per_page = int(args.get('per_page', DEFAULT_PER_PAGE))
    except (TypeError, ValueError):
        return None, "page and per_page must be integers"

    if page < 1:
        return None, "page must be at least 1"
    if per_page < 1 or per_page > MAX_PER_PAGE:
        return None, f"per_page must be between 1 and {MAX_PER_PAGE}"

    locale = args.get('locale') or None
    if locale and len(locale) > MAX_LOCALE_LENGTH:
        return None, f"locale must be at most {MAX_LOCALE_LENGTH} characters"

    filters = TranslationFilters(
        locale=locale,
        key_contains=args.get('key') or None,
        tags=tags,
        content=args.get('content') or None,
        page=page,
        per_page=per_page,
    )
    return filters, None
