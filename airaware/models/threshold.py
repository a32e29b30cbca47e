"""
Per-user pollution sensitivity threshold.
"""
from datetime import datetime
from airaware import db

# "Moderate" on the OpenWeather 1-5 AQI scale
DEFAULT_TRIGGER_AQI = 3


class Threshold(db.Model):
    """One row per user. ``use_default`` means the trigger falls back to DEFAULT_TRIGGER_AQI."""
    __tablename__ = 'thresholds'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, unique=True)
    trigger_aqi = db.Column(db.Integer, nullable=True)
    use_default = db.Column(db.Boolean, nullable=False, default=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint('trigger_aqi IS NULL OR (trigger_aqi BETWEEN 1 AND 5)',
                           name='ck_thresholds_trigger_aqi_range'),
    )

    @property
    def effective_trigger_aqi(self):
        if self.use_default or self.trigger_aqi is None:
            return DEFAULT_TRIGGER_AQI
        return self.trigger_aqi

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'triggerAqi': self.trigger_aqi,
            'useDefault': self.use_default,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }

    @staticmethod
    def get_for_user(user_id):
        return Threshold.query.filter_by(user_id=user_id).first()

    def __repr__(self):
        return f'<Threshold user={self.user_id} trigger={self.trigger_aqi} default={self.use_default}>'
