"""
Fetch, store and normalise air pollution readings.
"""
import logging
import time
from datetime import datetime, timezone
from airaware import db
from airaware.models.reading import AirQualityReading
from airaware.services import openweather
from airaware.services.openweather import OpenWeatherError

logger = logging.getLogger(__name__)

# OpenWeather component name -> our column name
COMPONENT_MAP = {
    'pm2_5': 'pm25',
    'pm10': 'pm10',
    'no2': 'no2',
    'o3': 'o3',
    'so2': 'so2',
    'co': 'co',
}


def _components(record):
    components = record.get('components') or {}
    return {ours: components.get(theirs) for theirs, ours in COMPONENT_MAP.items()}


def fetch_and_store_reading(area_label, latitude, longitude):
    """
    Pull the current reading for a coordinate and store it under ``area_label``.
    Returns the reading id; an existing row for the same observation is reused.
    """
    data = openweather.get_current_pollution(latitude, longitude)

    points = (data or {}).get('list') or []
    if not points:
        raise OpenWeatherError('No air quality data returned', body=data)
    point = points[0]

    observed_at = datetime.fromtimestamp(point['dt'], tz=timezone.utc).replace(tzinfo=None)

    existing = AirQualityReading.query.filter_by(
        area_label=area_label, observed_at=observed_at
    ).first()
    if existing:
        return existing.id

    reading = AirQualityReading(
        source='public_api',
        area_label=area_label,
        latitude=latitude,
        longitude=longitude,
        observed_at=observed_at,
        aqi=(point.get('main') or {}).get('aqi'),
        **_components(point),
    )
    db.session.add(reading)
    db.session.commit()

    logger.info('Stored reading %s for %s (aqi=%s)', reading.id, area_label, reading.aqi)
    return reading.id


def normalise_history_point(record):
    """One history record -> {ts (ms), aqi, pm25, pm10, no2, o3, so2, co}."""
    point = {
        'ts': record['dt'] * 1000,
        'aqi': (record.get('main') or {}).get('aqi'),
    }
    components = _components(record)
    for field in ('pm25', 'pm10', 'no2', 'o3', 'so2', 'co'):
        point[field] = components[field]
    return point


def fetch_history(lat, lon, hours, now=None):
    """Pollution history for the last ``hours`` hours, normalised for charts."""
    end = int(now if now is not None else time.time())
    start = int(end - hours * 3600)

    data = openweather.get_pollution_history(lat, lon, start, end)
    points = [normalise_history_point(r) for r in (data or {}).get('list') or []]

    return {'start': start, 'end': end, 'points': points}
