"""
Location routes: resolve, save, switch and delete the user's locations.
"""
import logging
from flask import Blueprint, request, jsonify, g
from airaware import db
from airaware.models import Location
from airaware.services.location import resolve_location, LocationError
from airaware.utils.auth import token_required
from airaware.utils.audit_logger import audit_log
from airaware.utils.validators import BODY_REQUIRED, json_body, location_input_error

logger = logging.getLogger(__name__)

location_bp = Blueprint('location', __name__)


def _location_input(source):
    return source.get('city'), source.get('postcode')


@location_bp.route('', methods=['GET'])
@location_bp.route('/', methods=['GET'])
@token_required
def get_location():
    location = Location.get_active(g.user_id)
    if not location:
        return jsonify({'error': 'No saved location found'}), 404

    return jsonify({'location': location.to_dict()}), 200


@location_bp.route('', methods=['POST'])
@location_bp.route('/', methods=['POST'])
@token_required
def set_location():
    """Resolve a city or postcode and make it the new home location."""
    data = json_body()
    if data is None:
        return jsonify({'error': BODY_REQUIRED}), 400
    city, postcode = _location_input(data)

    error = location_input_error(city, postcode)
    if error:
        return jsonify({'error': error}), 400

    try:
        resolved = resolve_location(city=city, postcode=postcode)
    except LocationError as e:
        return jsonify({'error': str(e)}), 400

    location = Location.create_home(
        g.user_id, resolved['label'], resolved['latitude'], resolved['longitude']
    )

    audit_log('CREATE', 'location', resource_id=str(location.id),
              details={'label': location.label})

    return jsonify({'location': location.to_dict()}), 201


@location_bp.route('', methods=['PATCH'])
@location_bp.route('/', methods=['PATCH'])
@token_required
def update_location():
    """Re-resolve the active location in place; id and home flag are kept."""
    data = json_body()
    if data is None:
        return jsonify({'error': BODY_REQUIRED}), 400
    city, postcode = _location_input(data)

    error = location_input_error(city, postcode)
    if error:
        return jsonify({'error': error}), 400

    location = Location.get_active(g.user_id)
    if not location:
        return jsonify({'error': 'No saved location found. Use POST /api/location first.'}), 404

    try:
        resolved = resolve_location(city=city, postcode=postcode)
    except LocationError as e:
        return jsonify({'error': str(e)}), 400

    location.label = resolved['label']
    location.latitude = resolved['latitude']
    location.longitude = resolved['longitude']

    db.session.commit()

    audit_log('UPDATE', 'location', resource_id=str(location.id),
              details={'label': location.label})

    return jsonify({'location': location.to_dict()}), 200


@location_bp.route('', methods=['DELETE'])
@location_bp.route('/', methods=['DELETE'])
@token_required
def delete_location():
    """Delete the active location row."""
    location = Location.get_active(g.user_id)
    if not location:
        return jsonify({'error': 'No saved location found'}), 404

    payload = location.to_dict()
    db.session.delete(location)
    db.session.commit()

    audit_log('DELETE', 'location', resource_id=str(payload['id']))

    return jsonify({'message': 'Location removed', 'location': payload}), 200


@location_bp.route('/<int:location_id>', methods=['DELETE'])
@token_required
def delete_saved_location(location_id):
    """
    Remove a saved search. Every row with the same coordinates goes with it;
    if the home location was removed the newest remaining one becomes home.
    """
    result = Location.delete_cluster(g.user_id, location_id)
    if result is None:
        return jsonify({'error': 'Location not found for this user'}), 404

    deleted_count, deleted_home = result

    if deleted_home:
        remaining = Location.distinct_for_user(g.user_id)
        if remaining:
            Location.promote(g.user_id, remaining[0].id)

    audit_log('DELETE', 'location', resource_id=str(location_id),
              details={'deleted_count': deleted_count, 'deleted_home': deleted_home})

    return jsonify({
        'message': 'Location removed',
        'deletedCount': deleted_count,
        'deletedHome': deleted_home,
    }), 200


@location_bp.route('/select', methods=['PATCH'])
@token_required
def select_location():
    """Promote one of the user's saved locations to home."""
    data = json_body()
    if data is None:
        return jsonify({'error': BODY_REQUIRED}), 400

    location_id = data.get('locationId')
    if not location_id:
        return jsonify({'error': 'locationId is required'}), 400

    # bool is an int subclass; true would otherwise select id 1
    if isinstance(location_id, (bool, float)):
        return jsonify({'error': 'locationId must be an integer'}), 400

    try:
        location_id = int(location_id)
    except (TypeError, ValueError):
        return jsonify({'error': 'locationId must be an integer'}), 400

    location = Location.promote(g.user_id, location_id)
    if not location:
        return jsonify({'error': 'Location not found for this user'}), 404

    audit_log('UPDATE', 'location', resource_id=str(location.id),
              details={'action': 'select_home'})

    return jsonify({'location': location.to_dict()}), 200


@location_bp.route('/history', methods=['GET'])
@token_required
def get_location_history():
    locations = Location.distinct_for_user(g.user_id)
    return jsonify({'locations': [loc.to_dict() for loc in locations]}), 200


@location_bp.route('/validate', methods=['GET'])
def validate_location():
    """Check that a city or postcode resolves, without saving anything."""
    city, postcode = _location_input(request.args)

    error = location_input_error(city, postcode)
    if error:
        return jsonify({'error': error}), 400

    try:
        result = resolve_location(city=city, postcode=postcode)
    except LocationError as e:
        return jsonify({'error': str(e)}), 400

    return jsonify({'result': result}), 200
