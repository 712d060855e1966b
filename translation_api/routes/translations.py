"""Translation routes: CRUD, search, bulk import, export and locales."""

from datetime import datetime, timezone

from flask import Blueprint, current_app, request, jsonify
from sqlalchemy.exc import IntegrityError

from translation_api.constants import SUPPORTED_LOCALES
from translation_api.services import get_translation_service
from translation_api.utils import (
    token_required,
    validate_translation_payload,
    parse_tags_arg,
    parse_translation_filters,
)
import logging

logger = logging.getLogger(__name__)

translations_bp = Blueprint('translations', __name__)

MAX_IMPORT_ROWS = 10000
DUPLICATE_MESSAGE = 'A translation with this key and locale already exists'


def _page_response(pagination):
    return jsonify({
        'translations': [t.to_dict() for t in pagination.items],
        'total': pagination.total,
        'page': pagination.page,
        'per_page': pagination.per_page,
        'pages': pagination.pages,
        'has_more': pagination.has_next
    }), 200


@translations_bp.route('', methods=['GET'])
@token_required
def list_translations(current_user_id):
    """List translations, newest first.

    Query params:
    - locale: exact locale
    - key: substring of the key
    - tags: tag slugs (repeated or comma separated)
    - page, per_page (default 15, max 100)
    """
    filters, error = parse_translation_filters(request.args)
    if error:
        return jsonify({'error': error}), 400

    # Only search() applies the content filter
    filters.content = None
    return _page_response(get_translation_service().list_translations(filters))


@translations_bp.route('/search', methods=['GET'])
@token_required
def search_translations(current_user_id):
    """Search translations; accepts the list filters plus `content`."""
    filters, error = parse_translation_filters(request.args)
    if error:
        return jsonify({'error': error}), 400

    return _page_response(get_translation_service().search_translations(filters))


@translations_bp.route('', methods=['POST'])
@token_required
def create_translation(current_user_id):
    """Create a translation. Tags are given by name and created when missing."""
    data = request.get_json(silent=True)

    error = validate_translation_payload(data)
    if error:
        return jsonify({'error': error}), 400

    try:
        translation = get_translation_service().create_translation(data)
    except IntegrityError:
        return jsonify({'error': DUPLICATE_MESSAGE}), 409

    return jsonify({
        'message': 'Translation created successfully',
        'translation': translation
    }), 201


@translations_bp.route('/<int:translation_id>', methods=['GET'])
@token_required
def get_translation(current_user_id, translation_id):
    translation = get_translation_service().get_translation(translation_id)
    if not translation:
        return jsonify({'error': 'Translation not found'}), 404

    return jsonify({'translation': translation}), 200


@translations_bp.route('/lookup/<string:locale>/<path:key>', methods=['GET'])
@token_required
def get_translation_by_key(current_user_id, locale, key):
    """Get the translation of one key in one locale."""
    translation = get_translation_service().get_translation_by_key(key, locale)
    if not translation:
        return jsonify({'error': 'Translation not found'}), 404

    return jsonify({'translation': translation}), 200


@translations_bp.route('/<int:translation_id>', methods=['PUT'])
@token_required
def update_translation(current_user_id, translation_id):
    """Update a translation. Omitted fields keep their values."""
    data = request.get_json(silent=True)

    error = validate_translation_payload(data, partial=True)
    if error:
        return jsonify({'error': error}), 400

    service = get_translation_service()
    try:
        updated = service.update_translation(translation_id, data)
    except IntegrityError:
        return jsonify({'error': DUPLICATE_MESSAGE}), 409

    if not updated:
        return jsonify({'error': 'Translation not found'}), 404

    return jsonify({
        'message': 'Translation updated successfully',
        'translation': service.get_translation(translation_id)
    }), 200


@translations_bp.route('/<int:translation_id>', methods=['DELETE'])
@token_required
def delete_translation(current_user_id, translation_id):
    deleted = get_translation_service().delete_translation(translation_id)
    if not deleted:
        return jsonify({'error': 'Translation not found'}), 404

    return jsonify({'message': 'Translation deleted successfully'}), 200


@translations_bp.route('/import', methods=['POST'])
@token_required
def import_translations(current_user_id):
    """Bulk insert translations in one transaction.

    Body: {"translations": [{"key": ..., "locale": ..., "content": ...}, ...]}
    Either every row is stored or none is.
    """
    data = request.get_json(silent=True) or {}
    rows = data.get('translations')

    if not isinstance(rows, list) or not rows:
        return jsonify({'error': 'translations must be a non-empty list'}), 400

    if len(rows) > MAX_IMPORT_ROWS:
        return jsonify({'error': f'At most {MAX_IMPORT_ROWS} translations per import'}), 400

    for index, row in enumerate(rows):
        if isinstance(row, dict) and 'tags' in row:
            return jsonify({'error': f'Row {index}: tags are not supported on import'}), 400
        error = validate_translation_payload(row)
        if error:
            return jsonify({'error': f'Row {index}: {error}'}), 400

    clean_rows = [
        {'key': row['key'], 'locale': row['locale'], 'content': row['content']}
        for row in rows
    ]

    try:
        imported = get_translation_service().import_translations(clean_rows)
    except IntegrityError:
        logger.warning(f"Import of {len(clean_rows)} translations rejected by a uniqueness constraint")
        return jsonify({'error': f'Import rolled back: {DUPLICATE_MESSAGE.lower()}'}), 409

    return jsonify({
        'message': 'Translations imported successfully',
        'imported': imported
    }), 201


@translations_bp.route('/export', methods=['GET'])
def export_translations():
    """Export translations for frontend apps (no authentication).

    Query params:
    - locale: export one locale as {key: content}
    - tags: only translations carrying any of these tag slugs
    Without filters every locale is exported as {locale: {key: content}}.
    """
    locale = request.args.get('locale') or None
    tags = parse_tags_arg(request.args) or None

    export = get_translation_service().export_translations(locale, tags)

    response = jsonify({
        'translations': export,
        'meta': {
            'locale': locale,
            'tags': tags,
            'generated_at': datetime.now(timezone.utc).isoformat()
        }
    })

    if current_app.config.get('CDN_ENABLED'):
        response.headers['Cache-Control'] = 'public, max-age=3600'
        response.headers['CDN-Cache-Control'] = 'public, max-age=86400'
        response.headers['Surrogate-Control'] = 'max-age=86400'

    return response, 200


@translations_bp.route('/locales', methods=['GET'])
def get_locales():
    """Locales that currently have translations."""
    locales = get_translation_service().get_available_locales()

    return jsonify({
        'locales': locales,
        'names': {code: SUPPORTED_LOCALES.get(code) for code in locales}
    }), 200
