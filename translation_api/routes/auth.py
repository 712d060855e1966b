"""Authentication routes: registration, login, logout and current user."""

from flask import Blueprint, request, jsonify
from flask_jwt_extended import create_access_token
from translation_api import db
from translation_api.models import User
from translation_api.utils import token_required, revoke_current_token
import logging
import re

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)

# Email validation regex
EMAIL_REGEX = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')

MIN_PASSWORD_LENGTH = 8


def _token_response(user, status=200):
    token = create_access_token(identity=str(user.id))
    return jsonify({
        'access_token': token,
        'token_type': 'Bearer',
        'user': user.to_dict()
    }), status


@auth_bp.route('/register', methods=['POST'])
def register():
    """Register a new API user and return a token."""
    data = request.get_json(silent=True)

    if not data or not all(data.get(k) for k in ['name', 'email', 'password']):
        return jsonify({'error': 'Missing required fields'}), 400

    name = str(data['name']).strip()
    email = str(data['email']).strip().lower()
    password = str(data['password'])

    if not EMAIL_REGEX.match(email):
        return jsonify({'error': 'Invalid email format'}), 400

    if len(password) < MIN_PASSWORD_LENGTH:
        return jsonify({'error': f'Password must be at least {MIN_PASSWORD_LENGTH} characters'}), 400

    if User.query.filter_by(email=email).first():
        return jsonify({'error': 'Email already registered'}), 409

    user = User(name=name, email=email)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()

    logger.info(f"Registered user {user.id}")
    return _token_response(user, 201)


@auth_bp.route('/login', methods=['POST'])
def login():
    """Exchange email and password for an access token."""
    data = request.get_json(silent=True)

    if not data or not data.get('email') or not data.get('password'):
        return jsonify({'error': 'Email and password are required'}), 400

    user = User.query.filter_by(email=str(data['email']).strip().lower()).first()

    if not user or not user.check_password(str(data['password'])):
        return jsonify({'error': 'Invalid credentials'}), 401

    return _token_response(user)


@auth_bp.route('/me', methods=['GET'])
@token_required
def me(current_user_id):
    """Get the authenticated user."""
    user = db.session.get(User, current_user_id)
    if not user:
        return jsonify({'error': 'User not found'}), 404

    return jsonify({'user': user.to_dict()}), 200


@auth_bp.route('/logout', methods=['POST'])
@token_required
def logout(current_user_id):
    """Revoke the token used for this request."""
    revoke_current_token()
    return jsonify({'message': 'Logged out successfully'}), 200
