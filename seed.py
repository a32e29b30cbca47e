"""
Seed script to populate a development database.
Run from the project root: python seed.py
"""
from airaware import create_app, db
from airaware.models.recommendation import Recommendation
from airaware.models.user import User

DEMO_EMAIL = "test@airaware.com"
DEMO_PASSWORD = "Password123!"


def seed():
    app = create_app()
    with app.app_context():
        db.create_all()

        added = Recommendation.seed_defaults()
        print(f"Recommendations seeded: {added} added, {Recommendation.query.count()} total.\n")

        demo = User.find_by_email(DEMO_EMAIL)
        if demo:
            print(f"  Demo user already exists (id={demo.id}), skipping.")
        else:
            demo = User(email=DEMO_EMAIL, condition_type='asthma', sensitivity_level='medium')
            demo.set_password(DEMO_PASSWORD)
            db.session.add(demo)
            db.session.commit()
            print(f"  Created demo user (id={demo.id}, email={DEMO_EMAIL})")

        print("\nDone.")


if __name__ == "__main__":
    seed()
