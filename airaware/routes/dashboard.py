"""
Dashboard routes.
"""
import logging
from flask import Blueprint, jsonify, g
from airaware import db
from airaware.models import Location
from airaware.services.air_quality import fetch_and_store_reading
from airaware.services.dashboard import build_dashboard_payload
from airaware.services.openweather import OpenWeatherError
from airaware.utils.auth import token_required

logger = logging.getLogger(__name__)

dashboard_bp = Blueprint('dashboard', __name__)


@dashboard_bp.route('', methods=['GET'])
@dashboard_bp.route('/', methods=['GET'])
@token_required
def get_dashboard():
    """Build the dashboard from stored data, fetching a first reading if none exists."""
    try:
        payload = build_dashboard_payload(g.user_id)

        location = payload['location']
        if location and not payload['current']:
            try:
                fetch_and_store_reading(location['label'], location['latitude'], location['longitude'])
            except OpenWeatherError as e:
                db.session.rollback()
                logger.warning('Initial reading fetch failed for %s: %s', location['label'], e)
            else:
                payload = build_dashboard_payload(g.user_id)
    except Exception:
        db.session.rollback()
        logger.exception('Dashboard build failed for user %s', g.user_id)
        return jsonify({'error': 'Server error'}), 500

    return jsonify(payload), 200


@dashboard_bp.route('/refresh', methods=['POST'])
@token_required
def refresh_dashboard():
    """Pull a fresh reading for the active location and rebuild the dashboard."""
    location = Location.get_active(g.user_id)
    if not location:
        return jsonify({
            'state': {'needs_location': True},
            'message': 'Set your location before refreshing.',
        }), 200

    try:
        reading_id = fetch_and_store_reading(location.label, location.latitude, location.longitude)
    except OpenWeatherError as e:
        db.session.rollback()
        logger.warning('Refresh failed for %s: %s', location.label, e)
        return jsonify({'error': 'Failed to refresh air quality'}), 502
    except Exception:
        db.session.rollback()
        logger.exception('Refresh failed for user %s', g.user_id)
        return jsonify({'error': 'Server error'}), 500

    try:
        payload = build_dashboard_payload(g.user_id)
    except Exception:
        logger.exception('Dashboard build failed for user %s', g.user_id)
        return jsonify({'error': 'Server error'}), 500

    payload['meta'] = {'refreshed': True, 'reading_id': reading_id}
    return jsonify(payload), 200
