"""Shared fixtures: a mocked Sheets v4 service and credential blobs"""

import json
from unittest.mock import MagicMock

import pytest

from sheets_dispatch import ToolDispatcher


@pytest.fixture
def credentials() -> str:
    return json.dumps({
        "client_id": "client-123.apps.googleusercontent.com",
        "client_secret": "shh",
        "redirect_uri": "urn:ietf:wg:oauth:2.0:oob",
        "access_token": "ya29.token",
        "refresh_token": "1//refresh",
    })


@pytest.fixture
def service() -> MagicMock:
    """Stand-in for googleapiclient's sheets v4 Resource"""
    return MagicMock(name="sheets_service")


@pytest.fixture
def spreadsheets(service) -> MagicMock:
    return service.spreadsheets.return_value


@pytest.fixture
def values_api(spreadsheets) -> MagicMock:
    return spreadsheets.values.return_value


@pytest.fixture
def factory_calls() -> list:
    return []


@pytest.fixture
def dispatcher(service, factory_calls) -> ToolDispatcher:
    def client_factory(credentials):
        factory_calls.append(credentials)
        return service

    return ToolDispatcher(client_factory=client_factory)
