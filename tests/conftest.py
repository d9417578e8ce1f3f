import json
import pytest


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text

    def json(self):
        return json.loads(self.text)


class FakeSession:
    """Stands in for requests: replays queued responses (or raises queued exceptions)."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


KBFI = {
    "metar_id": 712345,
    "icaoId": "KBFI",
    "receiptTime": "2023-11-14 22:15:30",
    "obsTime": 1700000000,
    "reportTime": "2023-11-14 22:00:00",
    "temp": 8.1,
    "dewp": 3.3,
    "wdir": 210,
    "wspd": 8,
    "wgst": None,
    "visib": 5,
    "altim": 1013.25,
    "slp": 1013.1,
    "qcField": 4,
    "wxString": "-RA",
    "metarType": "METAR",
    "rawOb": "KBFI 142213Z 21008KT 5SM -RA OVC021 08/03 A2992 RMK AO2",
    "mostRecent": 1,
    "lat": 47.53,
    "lon": -122.302,
    "elev": 6,
    "prior": 1,
    "name": "Seattle/Boeing Fld, WA, US",
    "clouds": [{"cover": "OVC", "base": 2100}],
}

KSEA = {
    "icaoId": "KSEA",
    "obsTime": 1700000000,
    "temp": 8,
    "dewp": 2.2,
    "wdir": "VRB",
    "wspd": 3,
    "visib": "10+",
    "altim": 30.35,
    "metarType": "SPECI",
    "rawOb": "KSEA 142213Z VRB03KT 10SM SCT042 BKN055 08/02 A3035",
    "name": "Seattle-Tacoma Intl, WA, US",
    "clouds": [{"cover": "SCT", "base": 4200}, {"cover": "BKN", "base": 5500}],
}


@pytest.fixture
def metar_payload():
    return [dict(KBFI), dict(KSEA)]


@pytest.fixture
def make_session():
    return FakeSession


@pytest.fixture
def make_response():
    return FakeResponse
