from .user import User
from .location import Location
from .threshold import Threshold
from .reading import AirQualityReading
from .risk_assessment import RiskAssessment
from .recommendation import Recommendation

__all__ = [
    'User',
    'Location',
    'Threshold',
    'AirQualityReading',
    'RiskAssessment',
    'Recommendation',
]
