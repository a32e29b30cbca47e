"""
Risk assessment (alert) model.
"""
from datetime import datetime
from airaware import db

RISK_LEVELS = ['Low', 'Medium', 'High']


def risk_rank(level):
    """Low=1, Medium=2, High=3. Anything unrecognised ranks as Low."""
    if level == 'High':
        return 3
    if level == 'Medium':
        return 2
    return 1


class RiskAssessment(db.Model):
    __tablename__ = 'risk_assessments'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    risk_level = db.Column(db.String(10), nullable=False)
    dominant_pollutant = db.Column(db.String(20), nullable=True)
    explanation = db.Column(db.Text, nullable=True)

    def to_dict(self):
        return {
            'id': self.id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'risk_level': self.risk_level,
            'dominant_pollutant': self.dominant_pollutant,
            'explanation': self.explanation,
        }

    @staticmethod
    def recent_for_user(user_id, limit=10):
        return (RiskAssessment.query
                .filter_by(user_id=user_id)
                .order_by(RiskAssessment.created_at.desc(), RiskAssessment.id.desc())
                .limit(limit)
                .all())

    def __repr__(self):
        return f'<RiskAssessment {self.id}: {self.risk_level}>'
