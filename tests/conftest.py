"""
Shared fixtures: synthetic provider documents and a resolver on a mocked network.
"""

import copy

import httpx
import pytest

from time_workdays.core.calculator import WorkdayResolver
from time_workdays.data.schemas import Config


TIMOR_2024 = {
    "code": 0,
    "holiday": {
        "01-01": {"holiday": True, "name": "元旦", "wage": 3, "date": "2024-01-01"},
        "02-12": {"holiday": True, "name": "初三", "wage": 3, "date": "2024-02-12"},
        "02-24": {
            "holiday": False,
            "name": "春节后补班",
            "wage": 1,
            "after": True,
            "target": "春节",
            "date": "2024-02-24",
        },
    },
}

NATE_2024 = {
    "year": 2024,
    "papers": ["http://www.gov.cn/zhengce/content/202310/content_6911527.htm"],
    "days": [
        {"name": "元旦", "date": "2024-01-01", "isOffDay": True},
        {"name": "春节", "date": "2024-02-04", "isOffDay": False},  # Sunday
        {"name": "春节", "date": "2024-02-10", "isOffDay": True},  # Saturday
        {"name": "春节", "date": "2024-02-12", "isOffDay": True},  # Monday
        {"name": "春节", "date": "2024-02-13", "isOffDay": True},  # Tuesday
    ],
}


class MockNetwork:
    """Routes requests by host and records every requested URL."""

    def __init__(self, routes=None):
        self.routes = routes or {}
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.host)
        if route is None:
            return httpx.Response(404, text="not found")
        if callable(route):
            return route(request)
        return httpx.Response(200, json=route)

    @property
    def urls(self):
        return [str(r.url) for r in self.requests]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def config():
    """Default configuration."""
    return Config()


@pytest.fixture
def network():
    """Network serving the 2024 documents of both providers."""
    return MockNetwork({
        "timor.tech": TIMOR_2024,
        "raw.githubusercontent.com": NATE_2024,
        "cdn.jsdelivr.net": NATE_2024,
    })


@pytest.fixture
def resolver(config, network):
    """WorkdayResolver whose requests go to the mock network."""
    return WorkdayResolver.from_config(config, transport=network.transport)


@pytest.fixture
def timor_document():
    """A fresh copy of the synthetic timor 2024 document."""
    return copy.deepcopy(TIMOR_2024)


@pytest.fixture
def nate_document():
    """A fresh copy of the synthetic holiday-cn 2024 document."""
    return copy.deepcopy(NATE_2024)


@pytest.fixture
def make_network():
    """Factory for a MockNetwork with custom routes."""
    return MockNetwork
