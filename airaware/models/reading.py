"""
Air quality reading model.
"""
from datetime import datetime
from airaware import db

# Order matters: ties for the dominant pollutant go to the first listed
POLLUTANT_FIELDS = ['pm25', 'no2', 'o3', 'so2', 'pm10', 'co']


class AirQualityReading(db.Model):
    """
    A single observation for an area.
    Readings are keyed by area label rather than by user, so every user whose
    location resolves to the same label shares them.
    """
    __tablename__ = 'air_quality_readings'

    id = db.Column(db.Integer, primary_key=True)
    source = db.Column(db.String(50), nullable=False, default='public_api')
    area_label = db.Column(db.String(255), nullable=False, index=True)
    latitude = db.Column(db.Float, nullable=True)
    longitude = db.Column(db.Float, nullable=True)
    observed_at = db.Column(db.DateTime, nullable=False)

    aqi = db.Column(db.Integer, nullable=True)
    pm25 = db.Column(db.Float, nullable=True)
    pm10 = db.Column(db.Float, nullable=True)
    no2 = db.Column(db.Float, nullable=True)
    o3 = db.Column(db.Float, nullable=True)
    so2 = db.Column(db.Float, nullable=True)
    co = db.Column(db.Float, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint('area_label', 'observed_at', name='uq_reading_area_observed'),
        db.Index('ix_reading_area_observed', 'area_label', 'observed_at'),
    )

    def pollutants(self):
        return {field: getattr(self, field) for field in POLLUTANT_FIELDS}

    def to_current_dict(self):
        """Shape used for the dashboard's ``current`` block."""
        return {
            'observed_at': self.observed_at.isoformat() if self.observed_at else None,
            'aqi': self.aqi,
            'pollutants': self.pollutants(),
        }

    def to_trend_dict(self):
        return {
            'observed_at': self.observed_at.isoformat() if self.observed_at else None,
            'aqi': self.aqi,
            'pm25': self.pm25,
            'pm10': self.pm10,
            'no2': self.no2,
            'o3': self.o3,
            'so2': self.so2,
            'co': self.co,
        }

    @staticmethod
    def latest_for_area(area_label):
        return (AirQualityReading.query
                .filter_by(area_label=area_label)
                .order_by(AirQualityReading.observed_at.desc())
                .first())

    @staticmethod
    def trend_for_area(area_label, limit=24):
        """Last ``limit`` readings, returned oldest first."""
        rows = (AirQualityReading.query
                .filter_by(area_label=area_label)
                .order_by(AirQualityReading.observed_at.desc())
                .limit(limit)
                .all())
        rows.reverse()
        return rows

    def __repr__(self):
        return f'<AirQualityReading {self.id}: {self.area_label} aqi={self.aqi}>'
