import pytest
from fastapi.testclient import TestClient

import metarbar.main as main
from metarbar.services.airports import TrackedAirports
from metarbar.services.weather import MetarService


@pytest.fixture
def client():
    return TestClient(main.app)


@pytest.fixture
def use_session(monkeypatch):
    """Point the app at fresh tracked airports and a fake HTTP session."""

    def install(session, codes=("KBFI", "KSEA")):
        tracked = TrackedAirports.from_codes(codes)
        monkeypatch.setattr(main, "tracked", tracked)
        monkeypatch.setattr(main, "service", MetarService(airport_codes=tracked.codes, session=session))
        return tracked

    return install


def test_health(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_metars_for_explicit_ids(client, use_session, make_session, make_response, metar_payload):
    session = make_session(make_response(payload=metar_payload[:1]))
    use_session(session)

    r = client.get("/metars", params={"ids": "kbfi"})

    assert r.status_code == 200
    observation = r.json()["observations"][0]
    assert observation["airport_code"] == "KBFI"
    assert observation["flight_category"] == "MVFR"
    assert observation["category_color"] == "#00CCFF"
    assert observation["condensed_title"] == "KBFI MVFR OVC 2100ft 210°@8 5SM"
    assert observation["all_cloud_layers"] == ["OVC 2100ft"]
    assert session.calls[0]["params"]["ids"] == "KBFI"


def test_metars_for_explicit_ids_api_failure(client, use_session, make_session, make_response):
    use_session(make_session(make_response(status_code=500, text="boom")))

    r = client.get("/metars", params={"ids": "KBFI"})

    assert r.status_code == 502
    assert r.json()["detail"] == "HTTP error: 500"


def test_metars_refresh_tracked_keeps_last_good_set(client, use_session, make_session, make_response, metar_payload):
    use_session(make_session(
        make_response(payload=metar_payload),
        make_response(text="not json"),
    ))

    first = client.get("/metars").json()
    second = client.get("/metars").json()

    assert [o["airport_code"] for o in first["observations"]] == ["KBFI", "KSEA"]
    assert first["error"] is None
    assert [o["airport_code"] for o in second["observations"]] == ["KBFI", "KSEA"]
    assert second["error"].startswith("Parsing error:")


def test_title(client, use_session, make_session, make_response, metar_payload):
    use_session(make_session(make_response(payload=metar_payload)))

    r = client.get("/metars/title")

    assert r.json() == {"title": "KBFI MVFR OVC 2100ft 210°@8 5SM", "error": None}


def test_title_for_explicit_ids(client, use_session, make_session, make_response, metar_payload):
    session = make_session(make_response(payload=metar_payload[1:]))
    use_session(session)

    r = client.get("/metars/title", params={"ids": "ksea"})

    assert r.json() == {"title": "KSEA SPECI VFR BKN 5500ft VRB@3", "error": None}
    assert session.calls[0]["params"]["ids"] == "KSEA"


def test_title_for_explicit_ids_without_data(client, use_session, make_session, make_response):
    use_session(make_session(make_response(status_code=204)))

    r = client.get("/metars/title", params={"ids": "KZZZ"})

    assert r.json() == {"title": None, "error": None}


def test_title_for_explicit_ids_api_failure(client, use_session, make_session, make_response):
    use_session(make_session(make_response(status_code=503, text="down")))

    r = client.get("/metars/title", params={"ids": "KBFI"})

    assert r.status_code == 502
    assert r.json()["detail"] == "HTTP error: 503"


def test_title_refreshes_on_every_call(client, use_session, make_session, make_response, metar_payload):
    session = make_session(
        make_response(payload=metar_payload[:1]),
        make_response(payload=metar_payload[1:]),
    )
    use_session(session)

    first = client.get("/metars/title").json()
    second = client.get("/metars/title").json()

    assert first["title"] == "KBFI MVFR OVC 2100ft 210°@8 5SM"
    assert second["title"] == "KSEA SPECI VFR BKN 5500ft VRB@3"
    assert len(session.calls) == 2


def test_title_without_selection(client, use_session, make_session, make_response):
    use_session(make_session(make_response(payload=[])), codes=())

    r = client.get("/metars/title")

    assert r.json() == {"title": None, "error": "No airports selected"}


def test_airports_sorted_by_distance(client, use_session, make_session, make_response):
    catalog = [
        {"icaoId": "KPDX", "name": "PORTLAND INTL", "lat": 45.589, "lon": -122.597},
        {"icaoId": "KSEA", "name": "SEATTLE-TACOMA INTL", "lat": 47.449, "lon": -122.309},
    ]
    session = make_session(make_response(payload=catalog))
    use_session(session)

    r = client.get("/airports", params={"states": "@wa,@or", "lat": 47.6, "lon": -122.3})

    assert r.status_code == 200
    airports = r.json()
    assert [a["icaoId"] for a in airports] == ["KSEA", "KPDX"]
    assert airports[0]["display_name"] == "KSEA - SEATTLE-TACOMA INTL"
    assert session.calls[0]["params"]["ids"] == "@WA,@OR"


def test_tracked_add_and_remove(client, use_session, make_session, make_response):
    use_session(make_session(make_response(payload=[])), codes=("KBFI",))

    added = client.post("/tracked/kpdx").json()
    assert [a["icaoId"] for a in added["airports"]] == ["KBFI", "KPDX"]

    removed = client.delete("/tracked/KBFI").json()
    assert [a["icaoId"] for a in removed["airports"]] == ["KPDX"]

    assert client.delete("/tracked/KBFI").status_code == 404


def test_tracked_selection_drives_refresh(client, use_session, make_session, make_response):
    session = make_session(make_response(payload=[]))
    use_session(session, codes=("KBFI",))

    client.post("/tracked/KSEA")
    client.get("/metars")

    assert session.calls[-1]["params"]["ids"] == "KBFI,KSEA"
