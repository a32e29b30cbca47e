from datetime import datetime

from airaware import db
from airaware.models import Location

from conftest import london_geocode


def _manchester_geocode():
    return [{'name': 'Manchester', 'lat': 53.4808, 'lon': -2.2426, 'country': 'GB'}]


def test_location_routes_require_auth(client):
    assert client.get('/api/location').status_code == 401
    assert client.post('/api/location', json={'city': 'London'}).status_code == 401
    assert client.get('/api/location/history').status_code == 401


def test_post_city_saves_home_location(client, user, auth_headers, openweather):
    openweather.respond('/geo/1.0/direct', london_geocode())

    resp = client.post('/api/location', headers=auth_headers, json={'city': 'London'})

    assert resp.status_code == 201
    location = resp.get_json()['location']
    assert location['label'] == 'London, GB'
    assert location['latitude'] == 51.5073
    assert location['longitude'] == -0.1276
    assert location['is_home'] is True
    assert location['user_id'] == user.id


def test_post_requires_exactly_one_input(client, auth_headers, openweather):
    for body in ({}, {'city': 'London', 'postcode': 'SW1A 1AA'}):
        resp = client.post('/api/location', headers=auth_headers, json=body)
        assert resp.status_code == 400
        assert resp.get_json()['error'] == 'Provide either a city or a postcode'
    assert openweather.calls == []


def test_post_unknown_city_is_400(client, auth_headers, openweather):
    openweather.respond('/geo/1.0/direct', [])

    resp = client.post('/api/location', headers=auth_headers, json={'city': 'Atlantis'})

    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'City not found'


def test_new_home_demotes_previous_home(client, user, auth_headers, openweather):
    openweather.respond('/geo/1.0/direct', london_geocode())
    client.post('/api/location', headers=auth_headers, json={'city': 'London'})
    openweather.respond('/geo/1.0/direct', _manchester_geocode())
    client.post('/api/location', headers=auth_headers, json={'city': 'Manchester'})

    homes = Location.query.filter_by(user_id=user.id, is_home=True).all()
    assert [h.label for h in homes] == ['Manchester, GB']
    assert Location.query.filter_by(user_id=user.id).count() == 2

    resp = client.get('/api/location', headers=auth_headers)
    assert resp.get_json()['location']['label'] == 'Manchester, GB'


def test_get_without_location_is_404(client, auth_headers):
    resp = client.get('/api/location', headers=auth_headers)

    assert resp.status_code == 404
    assert resp.get_json()['error'] == 'No saved location found'


def test_get_prefers_home_over_newer_rows(client, user, auth_headers, add_location):
    add_location(user.id, label='Home, GB', is_home=True, created_at=datetime(2026, 1, 1))
    add_location(user.id, label='Leeds, GB', latitude=53.8, longitude=-1.55,
                 created_at=datetime(2026, 6, 1))

    resp = client.get('/api/location', headers=auth_headers)

    assert resp.get_json()['location']['label'] == 'Home, GB'


def test_get_falls_back_to_newest_row(client, user, auth_headers, add_location):
    add_location(user.id, label='Old, GB', created_at=datetime(2026, 1, 1))
    add_location(user.id, label='New, GB', latitude=53.8, longitude=-1.55,
                 created_at=datetime(2026, 6, 1))

    resp = client.get('/api/location', headers=auth_headers)

    assert resp.get_json()['location']['label'] == 'New, GB'


def test_patch_updates_active_location_in_place(client, user, auth_headers, add_location, openweather):
    home = add_location(user.id, is_home=True)
    openweather.respond('/geo/1.0/direct', _manchester_geocode())

    resp = client.patch('/api/location', headers=auth_headers, json={'city': 'Manchester'})

    assert resp.status_code == 200
    location = resp.get_json()['location']
    assert location['id'] == home.id
    assert location['is_home'] is True
    assert location['label'] == 'Manchester, GB'
    assert location['latitude'] == 53.4808


def test_patch_without_location_is_404(client, auth_headers, openweather):
    resp = client.patch('/api/location', headers=auth_headers, json={'city': 'Manchester'})

    assert resp.status_code == 404
    assert openweather.calls == []


def test_delete_active_location(client, user, auth_headers, add_location):
    home = add_location(user.id, is_home=True)

    resp = client.delete('/api/location', headers=auth_headers)

    assert resp.status_code == 200
    assert resp.get_json()['location']['id'] == home.id
    assert Location.query.filter_by(user_id=user.id).count() == 0
    assert client.delete('/api/location', headers=auth_headers).status_code == 404


def test_delete_by_id_removes_cluster_and_rehomes(client, user, auth_headers, add_location):
    add_location(user.id, is_home=False, created_at=datetime(2026, 1, 1))
    home = add_location(user.id, is_home=True, created_at=datetime(2026, 2, 1))
    leeds = add_location(user.id, label='Leeds, GB', latitude=53.8, longitude=-1.55,
                         created_at=datetime(2026, 3, 1))

    resp = client.delete(f'/api/location/{home.id}', headers=auth_headers)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body['deletedCount'] == 2
    assert body['deletedHome'] is True

    remaining = Location.query.filter_by(user_id=user.id).all()
    assert [(r.id, r.is_home) for r in remaining] == [(leeds.id, True)]


def test_delete_by_id_of_another_user_is_404(client, make_user, auth_headers, add_location):
    other = make_user(email='other@airaware.com')
    theirs = add_location(other.id)

    resp = client.delete(f'/api/location/{theirs.id}', headers=auth_headers)

    assert resp.status_code == 404
    assert db.session.get(Location, theirs.id) is not None


def test_select_promotes_saved_location(client, user, auth_headers, add_location):
    home = add_location(user.id, is_home=True)
    leeds = add_location(user.id, label='Leeds, GB', latitude=53.8, longitude=-1.55)

    resp = client.patch('/api/location/select', headers=auth_headers, json={'locationId': leeds.id})

    assert resp.status_code == 200
    assert resp.get_json()['location']['is_home'] is True
    assert db.session.get(Location, home.id).is_home is False


def test_select_validation(client, make_user, auth_headers, add_location):
    assert client.patch('/api/location/select', headers=auth_headers, json={}).status_code == 400

    other = make_user(email='other@airaware.com')
    theirs = add_location(other.id)
    resp = client.patch('/api/location/select', headers=auth_headers, json={'locationId': theirs.id})
    assert resp.status_code == 404


def test_history_is_distinct_home_first_then_newest(client, user, auth_headers, add_location):
    add_location(user.id, label='London, GB', created_at=datetime(2026, 1, 1))
    newest_london = add_location(user.id, label='London, GB', created_at=datetime(2026, 4, 1))
    leeds = add_location(user.id, label='Leeds, GB', latitude=53.8, longitude=-1.55,
                         created_at=datetime(2026, 3, 1))
    york = add_location(user.id, label='York, GB', latitude=53.96, longitude=-1.08,
                        is_home=True, created_at=datetime(2026, 2, 1))

    resp = client.get('/api/location/history', headers=auth_headers)

    assert resp.status_code == 200
    ids = [loc['id'] for loc in resp.get_json()['locations']]
    assert ids == [york.id, newest_london.id, leeds.id]


def test_validate_is_public_and_does_not_save(client, openweather):
    openweather.respond('/geo/1.0/zip', {'lat': 51.501, 'lon': -0.1416, 'country': 'GB'})
    openweather.respond('/geo/1.0/reverse', [{'name': 'Westminster', 'country': 'GB'}])

    resp = client.get('/api/location/validate?postcode=sw1a1aa')

    assert resp.status_code == 200
    assert resp.get_json()['result']['label'] == 'Westminster, GB'
    assert Location.query.count() == 0


def test_validate_rejects_missing_input(client):
    resp = client.get('/api/location/validate')

    assert resp.status_code == 400


def test_non_object_body_is_400(client, auth_headers, openweather):
    for method in ('post', 'patch'):
        resp = getattr(client, method)('/api/location', headers=auth_headers, json=['London'])
        assert resp.status_code == 400
        assert resp.get_json()['error'] == 'Request body is required'

    resp = client.patch('/api/location/select', headers=auth_headers, json='1')
    assert resp.status_code == 400
    assert openweather.calls == []


def test_select_rejects_boolean_and_float_ids(client, user, auth_headers, add_location):
    first = add_location(user.id, is_home=False)
    home = add_location(user.id, label='Leeds, GB', latitude=53.8, longitude=-1.55, is_home=True)

    for value in (True, 1.0):
        resp = client.patch('/api/location/select', headers=auth_headers, json={'locationId': value})
        assert resp.status_code == 400
        assert resp.get_json()['error'] == 'locationId must be an integer'

    assert db.session.get(Location, first.id).is_home is False
    assert db.session.get(Location, home.id).is_home is True


def test_select_accepts_numeric_string(client, user, auth_headers, add_location):
    leeds = add_location(user.id, label='Leeds, GB', latitude=53.8, longitude=-1.55)

    resp = client.patch('/api/location/select', headers=auth_headers, json={'locationId': str(leeds.id)})

    assert resp.status_code == 200
    assert resp.get_json()['location']['id'] == leeds.id
