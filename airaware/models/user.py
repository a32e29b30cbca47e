"""
User account model.
"""
import logging
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from airaware import db

logger = logging.getLogger(__name__)

CONDITION_TYPES = ['asthma', 'allergies', 'both']
SENSITIVITY_LEVELS = ['low', 'medium', 'high']

# Fields a user may change through PATCH /api/user/me
PROFILE_FIELDS = [
    'condition_type',
    'sensitivity_level',
    'accessibility_mode',
    'analytics_opt_in',
    'accepted_disclaimer_at',
    'first_name',
    'last_name',
    'date_of_birth',
    'sex_at_birth',
    'gender',
    'nationality',
]


class User(db.Model):
    """
    A registered AirAware+ account.
    Email is stored lower-cased; the password is only ever kept as a hash.
    """
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    # Profile
    first_name = db.Column(db.String(100), nullable=True)
    last_name = db.Column(db.String(100), nullable=True)
    date_of_birth = db.Column(db.Date, nullable=True)
    sex_at_birth = db.Column(db.String(100), nullable=True)
    gender = db.Column(db.String(100), nullable=True)
    nationality = db.Column(db.String(100), nullable=True)

    # Health and preferences
    condition_type = db.Column(db.String(20), nullable=True)
    sensitivity_level = db.Column(db.String(20), nullable=True)
    accessibility_mode = db.Column(db.Boolean, nullable=False, default=False)
    analytics_opt_in = db.Column(db.Boolean, nullable=False, default=False)
    accepted_disclaimer_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    locations = db.relationship('Location', backref='user',
                                cascade='all, delete-orphan')
    threshold = db.relationship('Threshold', backref='user', uselist=False,
                                cascade='all, delete-orphan')
    risk_assessments = db.relationship('RiskAssessment', backref='user',
                                       cascade='all, delete-orphan')

    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def to_public_dict(self):
        """Fields returned alongside an auth token."""
        return {
            'id': self.id,
            'email': self.email,
            'condition_type': self.condition_type,
            'sensitivity_level': self.sensitivity_level,
        }

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'date_of_birth': self.date_of_birth.isoformat() if self.date_of_birth else None,
            'sex_at_birth': self.sex_at_birth,
            'gender': self.gender,
            'nationality': self.nationality,
            'condition_type': self.condition_type,
            'sensitivity_level': self.sensitivity_level,
            'accessibility_mode': self.accessibility_mode,
            'analytics_opt_in': self.analytics_opt_in,
            'accepted_disclaimer_at': self.accepted_disclaimer_at.isoformat() if self.accepted_disclaimer_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    @staticmethod
    def find_by_email(email: str):
        return User.query.filter_by(email=email.strip().lower()).first()

    def __repr__(self):
        return f'<User {self.id}>'
