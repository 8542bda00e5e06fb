import json

import pytest
import requests

from podtrack.configuration import DictConfig
from podtrack.carriers.fedex_interface import FedexInterface, TokenCache
from podtrack.carriers.usps_interface import USPSInterface


class FakeResponse(object):

    def __init__(self, text='', status_code=200, json_body=None):
        self.text = text if json_body is None else json.dumps(json_body)
        self.status_code = status_code
        self._json = json_body

    def json(self):
        if self._json is None:
            raise ValueError('No JSON object could be decoded')
        return self._json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError('%d Error' % self.status_code, response=self)


class FakeTransport(object):
    """Stands in for requests.request, answering by URL fragment and
    recording every call
    """

    def __init__(self):
        self.routes = []
        self.calls = []

    def add(self, fragment, *answers):
        self.routes.append([fragment, list(answers)])

    def calls_to(self, fragment):
        return [c for c in self.calls if fragment in c['url']]

    def __call__(self, method, url, **kwargs):
        call = dict(kwargs, method=method, url=url)
        self.calls.append(call)
        for fragment, answers in self.routes:
            if fragment in url:
                # the last answer repeats once the others are used up
                answer = answers.pop(0) if len(answers) > 1 else answers[0]
                if isinstance(answer, Exception):
                    raise answer
                return answer
        raise AssertionError('Unexpected request to %s' % url)


@pytest.fixture
def transport(monkeypatch):
    fake = FakeTransport()
    monkeypatch.setattr(requests, 'request', fake)
    return fake


def token_response(token='token-1', expires_in=3600):
    return FakeResponse(json_body={
        'access_token': token,
        'token_type': 'bearer',
        'expires_in': expires_in,
        'scope': 'CXS',
    })


@pytest.fixture
def fedex_config():
    return DictConfig({'FedEx': {
        'key': 'test-key',
        'secret': 'test-secret',
        'base_url': 'https://apis-sandbox.fedex.com',
    }})


@pytest.fixture
def clock():
    now = [1000.0]
    return now


@pytest.fixture
def fedex(fedex_config, clock):
    return FedexInterface(fedex_config, TokenCache(clock=lambda: clock[0]))


@pytest.fixture
def usps():
    return USPSInterface(DictConfig({'USPS': {'userid': '123ABCDE4567'}}))


@pytest.fixture
def usps_unconfigured():
    return USPSInterface(DictConfig())


@pytest.fixture
def reply():
    """Build a fake HTTP response: reply(text=..., status_code=...)"""
    return FakeResponse


@pytest.fixture
def token_reply():
    return token_response
