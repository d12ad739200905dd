import logging

from flask import Blueprint, jsonify
from flask_login import current_user, login_user, logout_user
from sqlalchemy.exc import IntegrityError

from ..extensions import login_manager
from ..schemas import LoginRequest, RegisterRequest, parse_json
from ..storage import storage

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)


@login_manager.user_loader
def load_user(user_id):
    return storage.users.get(int(user_id))


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({'message': 'Unauthorized'}), 401


@auth_bp.route('/register', methods=['POST'])
def register():
    data = parse_json(RegisterRequest)

    if storage.users.get_by_username(data.username):
        return jsonify({'message': 'Username already exists'}), 400
    try:
        user = storage.users.create(data.username, data.password, data.role, data.name)
    except IntegrityError:
        return jsonify({'message': 'Username already exists'}), 400

    login_user(user)
    logger.info(f"Registered {user.role} '{user.username}'")
    return jsonify(user.to_dict()), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    data = parse_json(LoginRequest)

    user = storage.users.get_by_username(data.username)
    if user is None or not user.check_password(data.password):
        return jsonify({'message': 'Invalid username or password'}), 401

    login_user(user)
    logger.info(f"User '{user.username}' logged in")
    return jsonify(user.to_dict())


@auth_bp.route('/logout', methods=['POST'])
def logout():
    logout_user()
    return jsonify({'message': 'Logged out'})


@auth_bp.route('/user', methods=['GET'])
def me():
    if not current_user.is_authenticated:
        return jsonify({'message': 'Unauthorized'}), 401
    return jsonify(current_user.to_dict())
