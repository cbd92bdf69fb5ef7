import json
from unittest.mock import MagicMock

import pytest
import requests

from acdc_issuer.composer import IssuanceClient, IssuanceRequestComposer
from acdc_issuer.config import IssuerConfig


def make_response(status_code: int, body) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    if isinstance(body, (dict, list)):
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    else:
        response._content = str(body).encode("utf-8")
    return response


@pytest.fixture
def cfg():
    return IssuerConfig(server_url="https://issuer.example.org/", default_identifier="", timeout=5.0)


@pytest.fixture
def fake_post(monkeypatch):
    post = MagicMock(return_value=make_response(200, {"said": "Ecredential"}))
    monkeypatch.setattr(requests, "post", post)
    return post


@pytest.fixture
def composer(cfg):
    return IssuanceRequestComposer(IssuanceClient(cfg))
