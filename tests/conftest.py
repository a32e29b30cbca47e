from datetime import datetime, timedelta
from urllib.parse import urlparse

import pytest

from airaware import create_app, db
from airaware.models import User, Location, AirQualityReading, Recommendation
from airaware.utils.auth import generate_token


@pytest.fixture(autouse=True)
def env(monkeypatch):
    monkeypatch.setenv('JWT_SECRET_KEY', 'test-jwt-secret')
    monkeypatch.setenv('OPENWEATHER_API_KEY', 'test-api-key')
    monkeypatch.delenv('JWT_ACCESS_TOKEN_EXPIRES', raising=False)
    monkeypatch.delenv('OPENWEATHER_BASE_URL', raising=False)
    monkeypatch.delenv('FLASK_ENV', raising=False)
    monkeypatch.delenv('ALLOWED_ORIGINS', raising=False)


@pytest.fixture
def app(tmp_path):
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'AUDIT_LOG_FILE': str(tmp_path / 'audit.log'),
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make(email='user@airaware.com', password='Password123!', **fields):
        user = User(email=email, **fields)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user
    return _make


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def auth_headers(user):
    return {'Authorization': f'Bearer {generate_token(user.id, user.email)}'}


@pytest.fixture
def add_location(app):
    def _add(user_id, label='London, GB', latitude=51.5073, longitude=-0.1276,
             is_home=False, created_at=None):
        location = Location(
            user_id=user_id,
            label=label,
            latitude=latitude,
            longitude=longitude,
            is_home=is_home,
            created_at=created_at or datetime.utcnow(),
        )
        db.session.add(location)
        db.session.commit()
        return location
    return _add


@pytest.fixture
def add_reading(app):
    def _add(area_label='London, GB', observed_at=None, aqi=2, **pollutants):
        reading = AirQualityReading(
            area_label=area_label,
            observed_at=observed_at or datetime(2026, 10, 18, 12, 0),
            aqi=aqi,
            **pollutants,
        )
        db.session.add(reading)
        db.session.commit()
        return reading
    return _add


@pytest.fixture
def seeded_recommendations(app):
    Recommendation.seed_defaults()
    return Recommendation.query.all()


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload
        self.text = str(payload)

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError('No JSON body')
        return self._payload


@pytest.fixture
def openweather(monkeypatch):
    """
    Route requests.get calls by URL path.

    Register responses with ``openweather.respond('/geo/1.0/direct', [...])``;
    every call is recorded in ``openweather.calls`` as ``(path, params)``.
    """
    class Router:
        def __init__(self):
            self.routes = {}
            self.calls = []

        def respond(self, path, payload, status_code=200):
            self.routes[path] = FakeResponse(status_code, payload)

        def get(self, url, params=None, timeout=None):
            path = urlparse(url).path
            self.calls.append((path, dict(params or {})))
            if path not in self.routes:
                raise AssertionError(f'Unexpected OpenWeather call: {path}')
            return self.routes[path]

        def paths(self):
            return [path for path, _ in self.calls]

    router = Router()
    monkeypatch.setattr('airaware.services.openweather.requests.get', router.get)
    return router


def london_geocode():
    return [{'name': 'London', 'lat': 51.5073, 'lon': -0.1276, 'country': 'GB'}]


def pollution_point(dt, aqi=2, **components):
    return {'dt': dt, 'main': {'aqi': aqi}, 'components': components}


def hours_ago(hours):
    return datetime.utcnow() - timedelta(hours=hours)
