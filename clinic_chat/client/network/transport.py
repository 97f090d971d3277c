"""
WebSocket Chat Transport

Holds the single chat connection of a chat screen: connect, send text
frames, receive text frames in a background task, disconnect.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Optional

from websockets.asyncio.client import connect as websocket_connect
from websockets.exceptions import ConnectionClosed, ConnectionClosedOK, WebSocketException

from clinic_chat.client.network.message_log import MessageLog
from clinic_chat.shared.constants import (
    CLOSE_CODE_NORMAL,
    DEFAULT_ENDPOINT_URL,
    DEFAULT_MAX_FRAME_SIZE,
    DEFAULT_OPEN_TIMEOUT,
)
from clinic_chat.shared.exceptions import (
    ConnectionError,
    NetworkError,
    NotConnectedError,
    ReceiveError,
    SendError,
)
from clinic_chat.shared.models import ChatEntry, ConnectionState


Connector = Callable[..., Awaitable[Any]]


@dataclass
class TransportConfig:
    """Configuration for the chat WebSocket connection."""
    endpoint_url: str = DEFAULT_ENDPOINT_URL
    close_code: int = CLOSE_CODE_NORMAL
    open_timeout: float = DEFAULT_OPEN_TIMEOUT
    ping_interval: Optional[float] = None
    max_size: int = DEFAULT_MAX_FRAME_SIZE


class ChatTransport:
    """
    Chat connection manager.

    Keeps at most one connection open. While open, a receive task awaits
    one frame at a time and appends each text frame to the message log as
    a remote entry. Outgoing text is appended as a local entry before it
    is transmitted.

    Connection, send and receive failures are logged and passed to the
    ``on_error`` callback; the transport never reconnects on its own.
    """

    def __init__(self,
                 config: Optional[TransportConfig] = None,
                 message_log: Optional[MessageLog] = None,
                 connector: Optional[Connector] = None) -> None:
        """
        Initialize the transport.

        Args:
            config: Connection configuration.
            message_log: Log receiving local and remote entries.
            connector: Coroutine factory opening the WebSocket connection.
        """
        self.config = config or TransportConfig()
        self.message_log = message_log if message_log is not None else MessageLog()
        self.logger = logging.getLogger(__name__)

        self._connector: Connector = connector or websocket_connect
        self._websocket: Optional[Any] = None
        self._receive_task: Optional["asyncio.Task[None]"] = None
        self._stop_event: Optional[asyncio.Event] = None
        self._state = ConnectionState.DISCONNECTED
        self._lock = asyncio.Lock()
        self._last_error: Optional[NetworkError] = None
        self._connection_time: Optional[datetime] = None

        # Callbacks
        self._on_connected: Optional[Callable[[], None]] = None
        self._on_disconnected: Optional[Callable[[], None]] = None
        self._on_error: Optional[Callable[[NetworkError], None]] = None
        self._on_state_change: Optional[Callable[[ConnectionState], None]] = None

    def set_callbacks(self,
                      on_connected: Optional[Callable[[], None]] = None,
                      on_disconnected: Optional[Callable[[], None]] = None,
                      on_error: Optional[Callable[[NetworkError], None]] = None,
                      on_state_change: Optional[Callable[[ConnectionState], None]] = None) -> None:
        """
        Set event callbacks.

        Args:
            on_connected: Called when the connection opens.
            on_disconnected: Called when an open connection ends.
            on_error: Called with the error when connect, send or receive fails.
            on_state_change: Called with the new state on every transition.
        """
        self._on_connected = on_connected
        self._on_disconnected = on_disconnected
        self._on_error = on_error
        self._on_state_change = on_state_change

    async def connect(self) -> bool:
        """
        Open the connection and start receiving.

        Does nothing if the connection is already opening or open.

        Returns:
            True if the connection is open, False if it failed.
        """
        async with self._lock:
            if self._state in (ConnectionState.CONNECTING, ConnectionState.OPEN):
                return True

            url = self.config.endpoint_url
            self._set_state(ConnectionState.CONNECTING)
            self.logger.info("Connecting to chat endpoint %s", url)

            try:
                websocket = await self._connector(
                    url,
                    open_timeout=self.config.open_timeout,
                    ping_interval=self.config.ping_interval,
                    max_size=self.config.max_size,
                )
            except asyncio.CancelledError:
                self.logger.info("Connecting to %s was cancelled", url)
                self._set_state(ConnectionState.DISCONNECTED)
                raise
            except (WebSocketException, OSError, asyncio.TimeoutError, ValueError) as e:
                self._set_state(ConnectionState.FAILED)
                self._report_error(ConnectionError(f"Failed to connect to {url}: {e}", address=url))
                return False

            stop_event = asyncio.Event()
            self._websocket = websocket
            self._stop_event = stop_event
            self._connection_time = datetime.now()
            self._last_error = None
            self._set_state(ConnectionState.OPEN)
            self._receive_task = asyncio.create_task(
                self._receive_loop(websocket, stop_event),
                name="chat-receive-loop"
            )
            self.logger.info("Connected to chat endpoint %s", url)

        self._fire(self._on_connected)
        return True

    async def disconnect(self) -> None:
        """
        Stop receiving and close the connection.

        Safe to call at any time and more than once, including while a
        receive is outstanding. A frame that arrives during the call is
        dropped.
        """
        async with self._lock:
            if self._stop_event is not None:
                self._stop_event.set()

            task, self._receive_task = self._receive_task, None
            websocket, self._websocket = self._websocket, None
            was_open = self._state is ConnectionState.OPEN

            if was_open:
                self._set_state(ConnectionState.CLOSED)

            if task is not None and not task.done() and task is not asyncio.current_task():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass

            if websocket is not None:
                try:
                    await websocket.close(code=self.config.close_code)
                except (WebSocketException, OSError) as e:
                    self.logger.warning("Error while closing chat connection: %s", e)

        if was_open:
            self.logger.info("Disconnected from chat endpoint %s", self.config.endpoint_url)
            self._fire(self._on_disconnected)

    async def send(self, text: str) -> ChatEntry:
        """
        Send a chat message.

        The local entry is appended before the frame is transmitted and
        stays in the log even if the transmission fails.

        Args:
            text: The message text.

        Returns:
            The local entry appended to the log.

        Raises:
            NotConnectedError: If the connection is not open.
            MessageValidationError: If the text is empty.
        """
        websocket = self._websocket
        if self._state is not ConnectionState.OPEN or websocket is None:
            raise NotConnectedError("Not connected to chat endpoint", address=self.config.endpoint_url)

        entry = self.message_log.append(ChatEntry.local(text))

        try:
            await websocket.send(text)
        except (WebSocketException, OSError) as e:
            self._report_error(SendError(f"Failed to send message: {e}", address=self.config.endpoint_url))
        else:
            self.logger.debug("Sent text frame (%d chars)", len(text))

        return entry

    async def _receive_loop(self, websocket: Any, stop_event: asyncio.Event) -> None:
        """Receive frames one at a time until the session stops."""
        while not stop_event.is_set():
            try:
                frame = await websocket.recv()
            except ConnectionClosedOK:
                if not stop_event.is_set():
                    self.logger.info("Chat endpoint closed the connection")
                    await self._end_session(websocket, ConnectionState.CLOSED, stop_event)
                return
            except ConnectionClosed as e:
                if not stop_event.is_set():
                    close_code = e.rcvd.code if e.rcvd is not None else None
                    await self._end_session(websocket, ConnectionState.FAILED, stop_event, ReceiveError(
                        f"Connection lost: {e}",
                        address=self.config.endpoint_url,
                        close_code=close_code
                    ))
                return
            except (WebSocketException, OSError) as e:
                if not stop_event.is_set():
                    await self._end_session(websocket, ConnectionState.FAILED, stop_event, ReceiveError(
                        f"Failed to receive message: {e}",
                        address=self.config.endpoint_url
                    ))
                return
            except Exception as e:
                if not stop_event.is_set():
                    self.logger.exception("Unexpected error in chat receive loop")
                    await self._end_session(websocket, ConnectionState.FAILED, stop_event, ReceiveError(
                        f"Unexpected receive failure: {e}",
                        address=self.config.endpoint_url
                    ))
                return

            if stop_event.is_set():
                self.logger.debug("Dropping frame received during disconnect")
                return

            if not isinstance(frame, str):
                self.logger.warning("Ignoring binary frame (%d bytes)", len(frame))
                continue
            if not frame:
                self.logger.debug("Ignoring empty text frame")
                continue

            self.logger.debug("Received text frame (%d chars)", len(frame))
            self.message_log.append(ChatEntry.remote(frame))

    async def _end_session(self,
                           websocket: Any,
                           state: ConnectionState,
                           stop_event: asyncio.Event,
                           error: Optional[NetworkError] = None) -> None:
        """Finish a session ended from the remote side, then release the socket."""
        stop_event.set()
        self._websocket = None
        self._set_state(state)
        if error is not None:
            self._report_error(error)
        self._fire(self._on_disconnected)

        try:
            await websocket.close(code=self.config.close_code)
        except (WebSocketException, OSError) as e:
            self.logger.warning("Error while closing chat connection: %s", e)

    def _set_state(self, state: ConnectionState) -> None:
        if state is self._state:
            return
        self.logger.debug("Chat connection state %s -> %s", self._state.value, state.value)
        self._state = state
        if self._on_state_change:
            self._fire(self._on_state_change, state)

    def _report_error(self, error: NetworkError) -> None:
        self._last_error = error
        self.logger.error("Chat %s error: %s", error.operation, error)
        if self._on_error:
            self._fire(self._on_error, error)

    def _fire(self, callback: Optional[Callable[..., None]], *args: Any) -> None:
        if callback is None:
            return
        try:
            callback(*args)
        except Exception:
            self.logger.exception("Chat transport callback %r failed", callback)

    def is_connected(self) -> bool:
        """
        Check if the connection is open.

        Returns:
            True if open, False otherwise.
        """
        return self._state is ConnectionState.OPEN and self._websocket is not None

    def get_status(self) -> ConnectionState:
        """
        Get the current connection state.

        Returns:
            Current connection state.
        """
        return self._state

    def get_last_error(self) -> Optional[NetworkError]:
        """
        Get the last connection, send or receive error.

        Returns:
            Last error, or None if no error.
        """
        return self._last_error

    def get_connection_info(self) -> Dict[str, Any]:
        """
        Get connection information.

        Returns:
            Dictionary with connection details.
        """
        return {
            "endpoint_url": self.config.endpoint_url,
            "status": self._state.value,
            "connected_at": self._connection_time,
            "last_error": str(self._last_error) if self._last_error else None,
            "message_count": len(self.message_log)
        }

    async def __aenter__(self) -> "ChatTransport":
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.disconnect()
