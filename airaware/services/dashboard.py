"""
Dashboard payload assembly.

Joins the user's preferences, active location, thresholds, latest reading,
recent alerts, recommendations and trend into one response.
"""
from airaware import db
from airaware.models import (
    User, Location, Threshold, AirQualityReading, RiskAssessment, Recommendation,
)
from airaware.models.reading import POLLUTANT_FIELDS
from airaware.models.threshold import DEFAULT_TRIGGER_AQI

ALERT_LIMIT = 10
TREND_LIMIT = 24

READING_EXPLANATION = 'Based on the latest air quality reading for your area.'


def derive_risk_level(aqi, trigger_aqi):
    if not aqi:
        return 'Low'
    if aqi >= trigger_aqi:
        return 'High'
    if aqi == trigger_aqi - 1:
        return 'Medium'
    return 'Low'


def derive_dominant_pollutant(pollutants):
    """Largest concentration wins; ties go to the earlier field in POLLUTANT_FIELDS."""
    if not pollutants:
        return 'Unknown'

    best_name, best_value = None, None
    for name in POLLUTANT_FIELDS:
        value = pollutants.get(name)
        if value is None:
            continue
        try:
            value = float(value)
        except (TypeError, ValueError):
            continue
        if value != value:  # NaN
            continue
        if best_value is None or value > best_value:
            best_name, best_value = name, value

    return best_name.upper() if best_name else 'Unknown'


def _user_block(user):
    if not user:
        return None
    return {
        'condition_type': user.condition_type,
        'sensitivity_level': user.sensitivity_level,
        'accessibility_mode': user.accessibility_mode,
        'analytics_opt_in': user.analytics_opt_in,
        'accepted_disclaimer_at': user.accepted_disclaimer_at.isoformat() if user.accepted_disclaimer_at else None,
    }


def _thresholds_block(threshold):
    if not threshold:
        return {
            'trigger_aqi': None,
            'use_default': True,
            'effective_trigger_aqi': DEFAULT_TRIGGER_AQI,
        }
    return {
        'trigger_aqi': threshold.trigger_aqi,
        'use_default': threshold.use_default,
        'updated_at': threshold.updated_at.isoformat() if threshold.updated_at else None,
        'effective_trigger_aqi': threshold.effective_trigger_aqi,
    }


def _status_block(current, alerts, trigger_aqi):
    latest_alert = alerts[0] if alerts else None
    if latest_alert:
        return {
            'aqi_label': current.aqi if current else None,
            'risk_level': latest_alert.risk_level,
            'dominant_pollutant': latest_alert.dominant_pollutant,
            'explanation': latest_alert.explanation,
        }
    if current:
        return {
            'aqi_label': current.aqi,
            'risk_level': derive_risk_level(current.aqi, trigger_aqi),
            'dominant_pollutant': derive_dominant_pollutant(current.pollutants()),
            'explanation': READING_EXPLANATION,
        }
    return None


def build_dashboard_payload(user_id):
    user = db.session.get(User, user_id)
    location = Location.get_active(user_id)
    threshold = Threshold.get_for_user(user_id)
    thresholds = _thresholds_block(threshold)

    if not location:
        return {
            'user': _user_block(user),
            'location': None,
            'thresholds': thresholds,
            'current': None,
            'status': None,
            'recommendations': [],
            'alerts': [],
            'trend': [],
        }

    trigger_aqi = thresholds['effective_trigger_aqi']
    current = AirQualityReading.latest_for_area(location.label)
    alerts = RiskAssessment.recent_for_user(user_id, ALERT_LIMIT)
    status = _status_block(current, alerts, trigger_aqi)

    recommendations = []
    if status:
        condition_type = user.condition_type if user else None
        recommendations = [
            r.to_dict() for r in Recommendation.matching(condition_type, status['risk_level'])
        ]

    trend = AirQualityReading.trend_for_area(location.label, TREND_LIMIT)

    return {
        'user': _user_block(user),
        'location': location.to_dict(),
        'thresholds': thresholds,
        'current': current.to_current_dict() if current else None,
        'status': status,
        'recommendations': recommendations,
        'alerts': [a.to_dict() for a in alerts],
        'trend': [t.to_trend_dict() for t in trend],
    }
