"""
Public air pollution trend routes.
"""
import json
import logging
import math
from flask import Blueprint, request, jsonify
from airaware.services import openweather
from airaware.services.air_quality import fetch_history
from airaware.services.openweather import OpenWeatherError

logger = logging.getLogger(__name__)

air_bp = Blueprint('air', __name__)

DEFAULT_HOURS = 12
MAX_HOURS = 120


def _parse_hours(raw):
    if raw is None or raw == '':
        return DEFAULT_HOURS
    try:
        hours = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(hours) or hours < 1 or hours > MAX_HOURS:
        return None
    return int(hours) if hours.is_integer() else hours


@air_bp.route('/trends', methods=['GET'])
def get_trends():
    """Pollution history for a city over the last 1-120 hours."""
    city = (request.args.get('city') or '').strip()
    hours = _parse_hours(request.args.get('hours'))

    if not city:
        return jsonify({'error': 'city is required'}), 400
    if hours is None:
        return jsonify({'error': 'hours must be 1..120'}), 400

    try:
        matches = openweather.geocode_city(city, country=None)
        if not matches:
            return jsonify({'error': 'City not found'}), 404

        match = matches[0]
        resolved = {
            'lat': match['lat'],
            'lon': match['lon'],
            'name': match.get('name'),
            'country': match.get('country'),
        }

        history = fetch_history(resolved['lat'], resolved['lon'], hours)
    except OpenWeatherError as e:
        detail = json.dumps(e.body) if isinstance(e.body, (dict, list)) else str(e.body or e)
        logger.warning('Trend lookup failed for %s: %s', city, e)
        return jsonify({'error': 'Failed to fetch trends', 'detail': detail}), 500

    return jsonify({
        'city': city,
        'resolved': resolved,
        'hours': hours,
        **history,
    }), 200
