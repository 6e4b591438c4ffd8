"""Shared test fixtures for subinstall."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock

import pytest
from rich.console import Console

from subinstall.client import ResourceClient

VERSION_ID = "04t000000000001AAA"
REQUEST_ID = "0Hf000000000001AAA"


class FakeClient(ResourceClient):
    """Scripted in-memory ResourceClient.

    Each retrieve pops the next scripted record for its resource type;
    the last one repeats. Exceptions in the script are raised.
    """

    def __init__(
        self,
        version_records: Optional[List[Any]] = None,
        request_records: Optional[List[Any]] = None,
        create_response: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.version_records = list(version_records or [
            {"Id": VERSION_ID, "InstallValidationStatus": "NO_ERRORS_DETECTED"},
        ])
        self.request_records = list(request_records or [
            {"Id": REQUEST_ID, "Status": "SUCCESS", "SubscriberPackageVersionKey": VERSION_ID},
        ])
        self.create_response = (
            {"id": REQUEST_ID, "success": True} if create_response is None else create_response
        )
        self.created: List[tuple] = []
        self.retrieved: List[tuple] = []

    async def create(self, resource_type, payload):
        self.created.append((resource_type, payload))
        return self.create_response

    async def retrieve(self, resource_type, resource_id, *, fields=None, criteria=None):
        self.retrieved.append((resource_type, resource_id, criteria))
        script = (
            self.version_records
            if resource_type == "SubscriberPackageVersion"
            else self.request_records
        )
        item = script.pop(0) if len(script) > 1 else script[0]
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def make_client():
    """Factory for scripted FakeClient instances."""
    return FakeClient


@pytest.fixture
def no_sleep() -> AsyncMock:
    """Sleeper that returns immediately and records the requested delays."""
    return AsyncMock(return_value=None)


@pytest.fixture
def quiet_console() -> Console:
    """Console writing into a buffer instead of the terminal."""
    return Console(file=io.StringIO(), force_terminal=False)


@pytest.fixture
def tmp_home(tmp_path: Path) -> Path:
    """Provide a temporary config home directory."""
    home = tmp_path / ".subinstall"
    home.mkdir()
    return home
