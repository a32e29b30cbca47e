"""
Profile routes for the authenticated user.
"""
import logging
from flask import Blueprint, jsonify, g
from airaware import db
from airaware.models import User
from airaware.utils.auth import token_required
from airaware.utils.audit_logger import audit_log
from airaware.utils.validators import BODY_REQUIRED, json_body, validate_profile_update

logger = logging.getLogger(__name__)

user_bp = Blueprint('user', __name__)


@user_bp.route('/me', methods=['GET'])
@token_required
def get_me():
    user = db.session.get(User, g.user_id)
    if not user:
        return jsonify({'error': 'User not found'}), 404

    return jsonify({'user': user.to_dict()}), 200


@user_bp.route('/me', methods=['PATCH'])
@token_required
def update_me():
    """Update allow-listed profile fields. Other keys are ignored."""
    data = json_body()
    if data is None:
        return jsonify({'error': BODY_REQUIRED}), 400

    updates, errors = validate_profile_update(data)
    if errors:
        return jsonify({'error': errors}), 400

    if not updates:
        return jsonify({'error': 'No valid fields provided to update'}), 400

    user = db.session.get(User, g.user_id)
    if not user:
        return jsonify({'error': 'User not found'}), 404

    for field, value in updates.items():
        setattr(user, field, value)

    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception('Profile update failed for user %s', g.user_id)
        return jsonify({'error': 'Server error'}), 500

    audit_log('UPDATE', 'user', resource_id=str(user.id),
              details={'action': 'profile_update', 'fields_changed': sorted(updates.keys())})

    return jsonify({
        'message': 'Profile updated',
        'user': user.to_dict(),
    }), 200


@user_bp.route('/me', methods=['DELETE'])
@token_required
def delete_me():
    """Delete the account along with its locations, thresholds and alerts."""
    user = db.session.get(User, g.user_id)
    if not user:
        return jsonify({'error': 'User not found'}), 404

    try:
        db.session.delete(user)
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception('Account deletion failed for user %s', g.user_id)
        return jsonify({'error': 'Server error'}), 500

    audit_log('DELETE', 'user', resource_id=str(g.user_id),
              details={'action': 'account_deleted'})

    return jsonify({'message': 'Account deleted'}), 200
