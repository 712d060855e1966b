"""Tag routes."""

from flask import Blueprint, request, jsonify
from sqlalchemy.exc import IntegrityError
from translation_api.repositories import TagData, TagPatch
from translation_api.services import get_tag_repository
from translation_api.utils import token_required, validate_tag_payload

tags_bp = Blueprint('tags', __name__)


@tags_bp.route('', methods=['GET'])
@token_required
def list_tags(current_user_id):
    """Get all tags ordered by name."""
    tags = get_tag_repository().list_all()
    return jsonify({'tags': tags, 'total': len(tags)}), 200


@tags_bp.route('/<int:tag_id>', methods=['GET'])
@token_required
def get_tag(current_user_id, tag_id):
    tag = get_tag_repository().find(tag_id)
    if not tag:
        return jsonify({'error': 'Tag not found'}), 404
    return jsonify({'tag': tag}), 200


@tags_bp.route('/slug/<string:slug>', methods=['GET'])
@token_required
def get_tag_by_slug(current_user_id, slug):
    tag = get_tag_repository().find_by_slug(slug)
    if not tag:
        return jsonify({'error': 'Tag not found'}), 404
    return jsonify({'tag': tag}), 200


@tags_bp.route('', methods=['POST'])
@token_required
def create_tag(current_user_id):
    """Create a tag; the slug is derived from the name unless given."""
    data = request.get_json(silent=True)

    error = validate_tag_payload(data)
    if error:
        return jsonify({'error': error}), 400

    try:
        tag = get_tag_repository().create(TagData(
            name=data['name'].strip(),
            slug=data.get('slug'),
            description=data.get('description')
        ))
    except IntegrityError:
        return jsonify({'error': 'A tag with this name or slug already exists'}), 409

    return jsonify({'message': 'Tag created successfully', 'tag': tag}), 201


@tags_bp.route('/<int:tag_id>', methods=['PUT'])
@token_required
def update_tag(current_user_id, tag_id):
    data = request.get_json(silent=True)

    error = validate_tag_payload(data, partial=True)
    if error:
        return jsonify({'error': error}), 400

    repository = get_tag_repository()
    try:
        updated = repository.update(tag_id, TagPatch.from_dict(data))
    except IntegrityError:
        return jsonify({'error': 'A tag with this name or slug already exists'}), 409

    if not updated:
        return jsonify({'error': 'Tag not found'}), 404

    return jsonify({'message': 'Tag updated successfully', 'tag': repository.find(tag_id)}), 200


@tags_bp.route('/<int:tag_id>', methods=['DELETE'])
@token_required
def delete_tag(current_user_id, tag_id):
    if not get_tag_repository().delete(tag_id):
        return jsonify({'error': 'Tag not found'}), 404
    return jsonify({'message': 'Tag deleted successfully'}), 200
