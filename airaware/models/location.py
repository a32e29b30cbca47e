"""
Saved user location model.

A user keeps a history of every location they have searched for. At most one
row per user is flagged ``is_home``; the active location for the dashboard is
that row, or the newest row when none is flagged.
"""
from datetime import datetime
from airaware import db


class Location(db.Model):
    __tablename__ = 'locations'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    label = db.Column(db.String(255), nullable=False)
    latitude = db.Column(db.Float, nullable=False)
    longitude = db.Column(db.Float, nullable=False)
    is_home = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'label': self.label,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'is_home': self.is_home,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    @staticmethod
    def get_active(user_id):
        """Home row first, then most recently created."""
        return (Location.query
                .filter_by(user_id=user_id)
                .order_by(Location.is_home.desc(),
                          Location.created_at.desc(),
                          Location.id.desc())
                .first())

    @staticmethod
    def get_for_user(user_id, location_id):
        return Location.query.filter_by(id=location_id, user_id=user_id).first()

    @staticmethod
    def _demote_home(user_id):
        Location.query.filter_by(user_id=user_id, is_home=True).update(
            {'is_home': False}, synchronize_session='fetch'
        )

    @staticmethod
    def create_home(user_id, label, latitude, longitude):
        """Demote the current home row and insert a new one in one commit."""
        Location._demote_home(user_id)
        location = Location(
            user_id=user_id,
            label=label,
            latitude=latitude,
            longitude=longitude,
            is_home=True,
        )
        db.session.add(location)
        db.session.commit()
        return location

    @staticmethod
    def promote(user_id, location_id):
        """Make an existing row the user's home. Returns None if not theirs."""
        location = Location.get_for_user(user_id, location_id)
        if not location:
            return None
        Location._demote_home(user_id)
        location.is_home = True
        db.session.commit()
        return location

    @staticmethod
    def distinct_for_user(user_id):
        """Most recent row per (latitude, longitude), home first then newest."""
        rows = (Location.query
                .filter_by(user_id=user_id)
                .order_by(Location.created_at.desc(), Location.id.desc())
                .all())

        seen = set()
        unique = []
        for row in rows:
            key = (row.latitude, row.longitude)
            if key in seen:
                continue
            seen.add(key)
            unique.append(row)

        unique.sort(key=lambda r: not r.is_home)
        return unique

    @staticmethod
    def delete_cluster(user_id, location_id):
        """
        Delete every row of the user sharing the coordinates of ``location_id``.
        Returns ``(deleted_count, deleted_home)`` or None if the id is unknown.
        """
        target = Location.get_for_user(user_id, location_id)
        if not target:
            return None

        rows = Location.query.filter_by(
            user_id=user_id,
            latitude=target.latitude,
            longitude=target.longitude,
        ).all()

        deleted_home = any(r.is_home for r in rows)
        for row in rows:
            db.session.delete(row)
        db.session.commit()
        return len(rows), deleted_home

    def __repr__(self):
        return f'<Location {self.id}: {self.label}>'
