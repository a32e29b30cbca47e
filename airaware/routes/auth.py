"""
Registration, login and token identity routes.
"""
import logging
from flask import Blueprint, jsonify, g
from sqlalchemy.exc import IntegrityError
from airaware import db
from airaware.models import User
from airaware.utils.auth import generate_token, token_required
from airaware.utils.audit_logger import audit_log
from airaware.utils.validators import BODY_REQUIRED, credentials, json_body, validate_registration

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/register', methods=['POST'])
def register():
    """Create an account and return a signed token."""
    data = json_body()
    if data is None:
        return jsonify({'error': BODY_REQUIRED}), 400

    errors = validate_registration(data)
    if errors:
        return jsonify({'error': errors[0]}), 400

    email, password = credentials(data)
    if User.find_by_email(email):
        return jsonify({'error': 'Email already registered'}), 409

    user = User(email=email)
    user.set_password(password)

    try:
        db.session.add(user)
        db.session.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        db.session.rollback()
        return jsonify({'error': 'Email already registered'}), 409
    except Exception:
        db.session.rollback()
        logger.exception('Registration failed')
        return jsonify({'error': 'Server error'}), 500

    token = generate_token(user.id, user.email)

    audit_log('REGISTER', 'user', resource_id=str(user.id), user_id=str(user.id))

    return jsonify({
        'token': token,
        'user': user.to_public_dict(),
    }), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    """Password login. Unknown email and wrong password give the same 401."""
    data = json_body()
    if data is None:
        return jsonify({'error': BODY_REQUIRED}), 400

    email, password = credentials(data)
    if not email or not password:
        return jsonify({'error': 'email and password are required'}), 400

    user = User.find_by_email(email)
    if not user or not user.check_password(password):
        audit_log('LOGIN_FAILED', 'user',
                  details={'reason': 'not_found' if not user else 'bad_password'},
                  user_id=str(user.id) if user else 'anonymous')
        return jsonify({'error': 'Invalid credentials'}), 401

    token = generate_token(user.id, user.email)

    audit_log('LOGIN', 'user', resource_id=str(user.id), user_id=str(user.id))

    return jsonify({
        'token': token,
        'user': user.to_public_dict(),
    }), 200


@auth_bp.route('/me', methods=['GET'])
@token_required
def me():
    return jsonify({'user': {'id': g.user_id, 'email': g.user_email}}), 200
