"""
Resolve a city or UK postcode to a labelled coordinate.
"""
import logging
import re
from airaware.services import openweather
from airaware.services.openweather import OpenWeatherError, MissingApiKeyError

logger = logging.getLogger(__name__)


class LocationError(Exception):
    """Input could not be turned into a location. The message is client-safe."""


def normalise_postcode(postcode):
    return re.sub(r'\s+', ' ', postcode.strip().upper())


def resolve_location(city=None, postcode=None):
    """
    Geocode exactly one of ``city`` or ``postcode``.

    Returns ``{'label': 'Name, CC', 'latitude': float, 'longitude': float}``.
    Raises LocationError for bad input or a failed lookup.
    """
    city = city.strip() if isinstance(city, str) else None
    postcode = normalise_postcode(postcode) if isinstance(postcode, str) else None

    if (not city and not postcode) or (city and postcode):
        raise LocationError('Provide either a city or a postcode')

    if city:
        return _resolve_city(city)
    return _resolve_postcode(postcode)


def _resolve_city(city):
    try:
        results = openweather.geocode_city(city)
    except MissingApiKeyError as e:
        raise LocationError(str(e)) from e
    except OpenWeatherError as e:
        raise LocationError('Failed to resolve city') from e

    if not results:
        raise LocationError('City not found')

    match = results[0]
    return {
        'label': f"{match.get('name')}, {match.get('country')}",
        'latitude': match['lat'],
        'longitude': match['lon'],
    }


def _resolve_postcode(postcode):
    try:
        result = openweather.geocode_postcode(postcode)
    except MissingApiKeyError as e:
        raise LocationError(str(e)) from e
    except OpenWeatherError as e:
        raise LocationError('Failed to resolve postcode') from e

    country = result.get('country')
    label = f'{postcode}, {country}'

    # A failed reverse lookup only costs us a nicer label
    try:
        reverse = openweather.reverse_geocode(result['lat'], result['lon'])
    except OpenWeatherError:
        logger.info('Reverse geocode failed for postcode %s, using postcode label', postcode)
        reverse = []

    if reverse and reverse[0].get('name'):
        label = f"{reverse[0]['name']}, {country}"

    return {
        'label': label,
        'latitude': result['lat'],
        'longitude': result['lon'],
    }
