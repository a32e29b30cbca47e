"""
Sensitivity threshold routes.
"""
import logging
from flask import Blueprint, jsonify, g
from airaware import db
from airaware.models import Threshold
from airaware.models.threshold import DEFAULT_TRIGGER_AQI
from airaware.utils.auth import token_required
from airaware.utils.audit_logger import audit_log
from airaware.utils.validators import BODY_REQUIRED, json_body, parse_sensitivity

logger = logging.getLogger(__name__)

thresholds_bp = Blueprint('thresholds', __name__)


def _threshold_response(threshold, status):
    return jsonify({
        'thresholds': threshold.to_dict(),
        'effectiveTriggerAqi': threshold.effective_trigger_aqi,
    }), status


@thresholds_bp.route('', methods=['GET'])
@thresholds_bp.route('/', methods=['GET'])
@token_required
def get_thresholds():
    threshold = Threshold.get_for_user(g.user_id)
    if not threshold:
        return jsonify({'error': 'No thresholds found'}), 404

    return _threshold_response(threshold, 200)


@thresholds_bp.route('', methods=['POST'])
@thresholds_bp.route('/', methods=['POST'])
@token_required
def set_thresholds():
    """Save the user's sensitivity choice, replacing any earlier one."""
    data = json_body()
    if data is None:
        return jsonify({'error': BODY_REQUIRED}), 400

    fields, error = parse_sensitivity(data.get('sensitivity'))
    if error:
        return jsonify({'error': error}), 400

    threshold = Threshold.get_for_user(g.user_id)
    if not threshold:
        threshold = Threshold(user_id=g.user_id)
        db.session.add(threshold)

    threshold.trigger_aqi = fields['trigger_aqi']
    threshold.use_default = fields['use_default']
    db.session.commit()

    audit_log('CREATE', 'threshold', resource_id=str(threshold.id), details=fields)

    return _threshold_response(threshold, 201)


@thresholds_bp.route('', methods=['PATCH'])
@thresholds_bp.route('/', methods=['PATCH'])
@token_required
def update_thresholds():
    data = json_body()
    if data is None:
        return jsonify({'error': BODY_REQUIRED}), 400

    fields, error = parse_sensitivity(data.get('sensitivity'))
    if error:
        return jsonify({'error': error}), 400

    threshold = Threshold.get_for_user(g.user_id)
    if not threshold:
        return jsonify({'error': 'No thresholds found. Use POST /api/thresholds first.'}), 404

    threshold.trigger_aqi = fields['trigger_aqi']
    threshold.use_default = fields['use_default']
    db.session.commit()

    audit_log('UPDATE', 'threshold', resource_id=str(threshold.id), details=fields)

    return _threshold_response(threshold, 200)


@thresholds_bp.route('/defaults', methods=['GET'])
def get_default_thresholds():
    return jsonify({
        'defaults': {
            'useDefault': True,
            'triggerAqi': DEFAULT_TRIGGER_AQI,
            'sensitivity': 'moderate',
        },
    }), 200
