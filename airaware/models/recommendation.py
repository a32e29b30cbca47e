"""
Health recommendation catalogue.
"""
from airaware import db
from airaware.models.risk_assessment import risk_rank

# (category, text, min_risk_level, condition_type)
DEFAULT_RECOMMENDATIONS = [
    ('Activity', 'Air quality is fine for your usual outdoor activities.', 'Low', 'any'),
    ('Activity', 'Consider shortening strenuous outdoor exercise today.', 'Medium', 'any'),
    ('Activity', 'Avoid strenuous outdoor activity and exercise indoors where possible.', 'High', 'any'),
    ('Home', 'Keep windows closed during busy traffic hours.', 'Medium', 'any'),
    ('Home', 'Run an air purifier in the rooms you use most if you have one.', 'High', 'any'),
    ('Medication', 'Carry your reliever inhaler when you go out.', 'Low', 'asthma'),
    ('Medication', 'Take your preventer inhaler as prescribed and keep your reliever close.', 'Medium', 'asthma'),
    ('Medication', 'Follow your asthma action plan and seek help if symptoms worsen.', 'High', 'asthma'),
    ('Medication', 'Take your antihistamine before heading outdoors.', 'Medium', 'allergies'),
    ('Outdoors', 'Wear wraparound sunglasses to keep irritants out of your eyes.', 'Medium', 'allergies'),
    ('Outdoors', 'Shower and change clothes after spending time outside.', 'High', 'allergies'),
    ('Medication', 'Keep both your inhaler and antihistamines with you today.', 'Medium', 'both'),
]


class Recommendation(db.Model):
    __tablename__ = 'recommendations'

    id = db.Column(db.Integer, primary_key=True)
    category = db.Column(db.String(50), nullable=False)
    text = db.Column(db.Text, nullable=False)
    min_risk_level = db.Column(db.String(10), nullable=False, default='Low')
    condition_type = db.Column(db.String(20), nullable=False, default='any')
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    def to_dict(self):
        return {
            'id': self.id,
            'category': self.category,
            'text': self.text,
        }

    @staticmethod
    def matching(condition_type, risk_level):
        """Active recommendations for the condition (or 'any') at or below the risk level."""
        conditions = ['any']
        if condition_type:
            conditions.append(condition_type)

        rows = (Recommendation.query
                .filter(Recommendation.is_active.is_(True),
                        Recommendation.condition_type.in_(conditions))
                .order_by(Recommendation.category.asc(), Recommendation.id.asc())
                .all())

        current = risk_rank(risk_level)
        return [r for r in rows if risk_rank(r.min_risk_level) <= current]

    @staticmethod
    def seed_defaults():
        """Insert any default recommendations not already present."""
        added = 0
        for category, text, min_level, condition in DEFAULT_RECOMMENDATIONS:
            exists = Recommendation.query.filter_by(category=category, text=text).first()
            if exists:
                continue
            db.session.add(Recommendation(
                category=category,
                text=text,
                min_risk_level=min_level,
                condition_type=condition,
            ))
            added += 1
        db.session.commit()
        return added

    def __repr__(self):
        return f'<Recommendation {self.id}: {self.category}>'
