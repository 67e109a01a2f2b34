import json

import pytest
import requests


def make_response(status_code: int, body, reason: str | None = None) -> requests.Response:
    """Build a requests.Response without touching the network."""
    resp = requests.Response()
    resp.status_code = status_code
    resp.reason = reason
    resp.encoding = "utf-8"
    if isinstance(body, (bytes, str)):
        resp._content = body.encode("utf-8") if isinstance(body, str) else body
    else:
        resp._content = json.dumps(body).encode("utf-8")
    return resp


class StubSession:
    """Stands in for requests.Session; records every outbound GET."""

    def __init__(self, response: requests.Response | None = None, exc: Exception | None = None):
        self.response = response
        self.exc = exc
        self.calls: list[dict] = []

    def get(self, url, params=None, headers=None, **kwargs):
        self.calls.append({"url": url, "params": params, "headers": headers})
        if self.exc is not None:
            raise self.exc
        return self.response


@pytest.fixture
def sample_alternates():
    """Upstream payload for two alternate builds of 10305-1."""
    return {
        "count": 2,
        "next": None,
        "previous": None,
        "results": [
            {
                "set_num": "MOC-101763",
                "name": "Lion Knights' Tower",
                "year": 2022,
                "num_parts": 1204,
                "moc_img_url": "https://cdn.rebrickable.com/media/mocs/moc-101763.jpg",
                "moc_url": "https://rebrickable.com/mocs/MOC-101763/",
                "designer_name": "brickbuilder",
                "designer_url": "https://rebrickable.com/users/brickbuilder/mocs/",
            },
            {
                "set_num": "MOC-118230",
                "name": "Village Blacksmith",
                "year": 2023,
                "num_parts": 640,
                "moc_img_url": None,
                "moc_url": "https://rebrickable.com/mocs/MOC-118230/",
                "designer_name": "forge_bricks",
                "designer_url": "https://rebrickable.com/users/forge_bricks/mocs/",
            },
        ],
    }
