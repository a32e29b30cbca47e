import pytest

from airaware.services.location import resolve_location, normalise_postcode, LocationError

from conftest import london_geocode


def test_requires_exactly_one_of_city_or_postcode(openweather):
    for kwargs in ({}, {'city': '  '}, {'city': 'London', 'postcode': 'SW1A 1AA'}):
        with pytest.raises(LocationError, match='Provide either a city or a postcode'):
            resolve_location(**kwargs)
    assert openweather.calls == []


def test_city_resolves_to_label_and_coordinates(openweather):
    openweather.respond('/geo/1.0/direct', london_geocode())

    result = resolve_location(city='  London ')

    assert result == {'label': 'London, GB', 'latitude': 51.5073, 'longitude': -0.1276}
    path, params = openweather.calls[0]
    assert params['q'] == 'London,GB'
    assert params['limit'] == 1
    assert params['appid'] == 'test-api-key'


def test_unknown_city(openweather):
    openweather.respond('/geo/1.0/direct', [])

    with pytest.raises(LocationError, match='City not found'):
        resolve_location(city='Atlantis')


def test_city_upstream_failure(openweather):
    openweather.respond('/geo/1.0/direct', {'cod': 401, 'message': 'Invalid API key'}, status_code=401)

    with pytest.raises(LocationError, match='Failed to resolve city'):
        resolve_location(city='London')


def test_missing_api_key(openweather, monkeypatch):
    monkeypatch.delenv('OPENWEATHER_API_KEY')

    with pytest.raises(LocationError, match='Missing OpenWeather API key'):
        resolve_location(city='London')
    assert openweather.calls == []


def test_postcode_uses_reverse_geocoded_name(openweather):
    openweather.respond('/geo/1.0/zip', {'zip': 'M1 1AE', 'name': 'Manchester', 'lat': 53.48, 'lon': -2.23, 'country': 'GB'})
    openweather.respond('/geo/1.0/reverse', [{'name': 'Manchester City Centre', 'country': 'GB'}])

    result = resolve_location(postcode='m1   1ae')

    assert result == {'label': 'Manchester City Centre, GB', 'latitude': 53.48, 'longitude': -2.23}
    assert openweather.calls[0][1]['zip'] == 'M1 1AE,GB'
    assert openweather.paths() == ['/geo/1.0/zip', '/geo/1.0/reverse']


def test_postcode_falls_back_to_postcode_label(openweather):
    openweather.respond('/geo/1.0/zip', {'lat': 53.48, 'lon': -2.23, 'country': 'GB'})
    openweather.respond('/geo/1.0/reverse', {'cod': 500}, status_code=500)

    result = resolve_location(postcode='M1 1AE')

    assert result['label'] == 'M1 1AE, GB'


def test_postcode_falls_back_when_reverse_is_empty(openweather):
    openweather.respond('/geo/1.0/zip', {'lat': 53.48, 'lon': -2.23, 'country': 'GB'})
    openweather.respond('/geo/1.0/reverse', [])

    assert resolve_location(postcode='M1 1AE')['label'] == 'M1 1AE, GB'


def test_unknown_postcode(openweather):
    openweather.respond('/geo/1.0/zip', {'cod': '404', 'message': 'not found'}, status_code=404)

    with pytest.raises(LocationError, match='Failed to resolve postcode'):
        resolve_location(postcode='ZZ9 9ZZ')


def test_normalise_postcode():
    assert normalise_postcode(' sw1a   1aa ') == 'SW1A 1AA'
