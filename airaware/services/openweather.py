"""
OpenWeather geocoding and air-pollution API client.
"""
import os
import logging
import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'https://api.openweathermap.org'
DEFAULT_TIMEOUT = 10
COUNTRY_CODE = 'GB'


class OpenWeatherError(Exception):
    """Raised when an OpenWeather call fails or returns an unusable body."""

    def __init__(self, message, status_code=None, body=None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class MissingApiKeyError(OpenWeatherError):
    pass


def _api_key():
    key = os.getenv('OPENWEATHER_API_KEY')
    if not key:
        raise MissingApiKeyError('Missing OpenWeather API key')
    return key


def _get(path, params):
    base_url = os.getenv('OPENWEATHER_BASE_URL', DEFAULT_BASE_URL).rstrip('/')
    timeout = float(os.getenv('OPENWEATHER_TIMEOUT', DEFAULT_TIMEOUT))
    query = dict(params, appid=_api_key())

    try:
        resp = requests.get(f'{base_url}{path}', params=query, timeout=timeout)
    except requests.RequestException as e:
        logger.warning('OpenWeather request to %s failed: %s', path, e)
        raise OpenWeatherError(f'OpenWeather request failed: {e}') from e

    try:
        data = resp.json()
    except ValueError:
        data = None

    if not resp.ok:
        logger.warning('OpenWeather %s returned %s', path, resp.status_code)
        raise OpenWeatherError(
            f'OpenWeather API error: {resp.status_code}',
            status_code=resp.status_code,
            body=data if data is not None else resp.text,
        )

    return data


def geocode_city(city, country=COUNTRY_CODE, limit=1):
    """Direct geocoding. Returns the list of matches (possibly empty)."""
    query = f'{city},{country}' if country else city
    data = _get('/geo/1.0/direct', {'q': query, 'limit': limit})
    return data if isinstance(data, list) else []


def geocode_postcode(postcode, country=COUNTRY_CODE):
    """Zip geocoding. Returns a dict with lat, lon, name, country."""
    data = _get('/geo/1.0/zip', {'zip': f'{postcode},{country}'})
    if not isinstance(data, dict) or 'lat' not in data or 'lon' not in data:
        raise OpenWeatherError('Postcode not found', body=data)
    return data


def reverse_geocode(lat, lon, limit=1):
    data = _get('/geo/1.0/reverse', {'lat': lat, 'lon': lon, 'limit': limit})
    return data if isinstance(data, list) else []


def get_current_pollution(lat, lon):
    """Raw current air pollution response for a coordinate."""
    if lat is None or lon is None:
        raise OpenWeatherError('Latitude and longitude are required')
    return _get('/data/2.5/air_pollution', {'lat': lat, 'lon': lon})


def get_pollution_history(lat, lon, start, end):
    """Raw air pollution history between two unix timestamps."""
    return _get('/data/2.5/air_pollution/history', {
        'lat': lat,
        'lon': lon,
        'start': start,
        'end': end,
    })
