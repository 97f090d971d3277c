"""
Pytest Configuration and Shared Fixtures

Provides common test fixtures and configuration for the test suite.
"""

import asyncio
import json
import socket
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

from clinic_chat.shared.config import ClientConfig


class FakeWebSocket:
    """In-memory stand-in for a websockets client connection."""

    def __init__(self, echo: bool = False) -> None:
        self.echo = echo
        self.sent: List[str] = []
        self.incoming: asyncio.Queue = asyncio.Queue()
        self.recv_calls = 0
        self.pending_recvs = 0
        self.max_pending_recvs = 0
        self.close_calls: List[int] = []
        self.send_gate: Optional[asyncio.Event] = None
        self.send_error: Optional[BaseException] = None

    def feed(self, item: Any) -> None:
        """Queue a frame (str/bytes) or an exception for recv()."""
        self.incoming.put_nowait(item)

    async def recv(self) -> Any:
        self.recv_calls += 1
        self.pending_recvs += 1
        self.max_pending_recvs = max(self.max_pending_recvs, self.pending_recvs)
        try:
            item = await self.incoming.get()
        finally:
            self.pending_recvs -= 1
        if isinstance(item, BaseException):
            raise item
        return item

    async def send(self, message: str) -> None:
        if self.send_gate is not None:
            await self.send_gate.wait()
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(message)
        if self.echo:
            self.incoming.put_nowait(message)

    async def close(self, code: int = 1000, reason: str = "") -> None:
        self.close_calls.append(code)

    @property
    def closed(self) -> bool:
        return bool(self.close_calls)


class FakeConnector:
    """Connector returning a FakeWebSocket, or raising a given error."""

    def __init__(self, websocket: Optional[FakeWebSocket] = None,
                 error: Optional[BaseException] = None,
                 delay: float = 0.0) -> None:
        self.websocket = websocket
        self.error = error
        self.delay = delay
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    async def __call__(self, url: str, **kwargs: Any) -> FakeWebSocket:
        self.calls.append((url, kwargs))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.websocket is None:
            self.websocket = FakeWebSocket()
        return self.websocket


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Yield to the event loop until predicate() holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("Timed out waiting for condition")
        await asyncio.sleep(0.001)


@pytest.fixture
def fake_websocket_class() -> type:
    """Provide the FakeWebSocket class; instantiate it inside the event loop."""
    return FakeWebSocket


@pytest.fixture
def fake_connector_class() -> type:
    """Provide the FakeConnector class."""
    return FakeConnector


@pytest.fixture
def wait_for() -> Callable[..., Any]:
    """Provide the wait_until coroutine helper."""
    return wait_until


@pytest.fixture
def client_config() -> ClientConfig:
    """Provide a test client configuration."""
    return ClientConfig(
        endpoint_url="ws://127.0.0.1:8765/ws",
        open_timeout=1.0
    )


@pytest.fixture
def available_port() -> int:
    """Get an available port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


@pytest.fixture
def sample_appointment_record() -> Dict[str, Any]:
    """Provide one appointments.json record."""
    return {
        "id": "6f1c2a4e-3b7d-4c1e-9a52-0d8e1f7b2c31",
        "period": "1",
        "type": "Primary visit",
        "title": "General check-up",
        "patientName": "Anna Petrova",
        "room": "Room 204",
        "date": "2025-05-19",
        "startTime": "09:00",
        "endTime": "09:30",
        "hasConflict": False,
        "patientInfo": "34 years old. No known allergies."
    }


@pytest.fixture
def appointments_file(tmp_path, sample_appointment_record) -> str:
    """Write a two-record appointments file and return its path."""
    second = dict(sample_appointment_record)
    second.update({
        "id": "a3d5e7f9-1b2c-4d6e-8f01-23456789abcd",
        "period": "2",
        "title": "Blood pressure review",
        "patientName": "Ivan Sokolov",
        "date": "2025-05-20",
        "hasConflict": True,
    })
    path = tmp_path / "appointments.json"
    path.write_text(json.dumps([sample_appointment_record, second]), encoding="utf-8")
    return str(path)


@pytest.fixture
def temp_log_file(tmp_path) -> str:
    """Provide a temporary log file path."""
    return str(tmp_path / "test.log")


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration between tests."""
    import logging
    root_logger = logging.getLogger()
    original_level = root_logger.level
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    yield

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(original_level)
