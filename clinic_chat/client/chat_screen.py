"""
Chat Screen

The chat sheet opened from an appointment: connects when shown, sends the
lines the user types, prints every entry as it reaches the message log and
disconnects when closed.
"""

import asyncio
import logging
import threading
from typing import Callable, Optional

from rich.console import Console
from rich.prompt import Prompt

from clinic_chat.client.network import ChatTransport, MessageLog
from clinic_chat.client.ui import ChatView
from clinic_chat.shared.config import ClientConfig
from clinic_chat.shared.constants import MESSAGE_PROMPT, QUIT_COMMAND
from clinic_chat.shared.exceptions import MessageValidationError, NetworkError, NotConnectedError
from clinic_chat.shared.models import ChatEntry


class ChatScreen:
    """
    Interactive chat with the patient.

    Input is read on a worker thread so the receive task keeps running
    while the user types.
    """

    def __init__(self,
                 config: ClientConfig,
                 console: Optional[Console] = None,
                 transport: Optional[ChatTransport] = None,
                 read_line: Optional[Callable[[], Optional[str]]] = None) -> None:
        """
        Initialize the chat screen.

        Args:
            config: Client configuration.
            console: Console to render on.
            transport: Transport to use; built from the configuration if None.
            read_line: Blocking function returning the next input line, or
                None at end of input.
        """
        self.config = config
        self.console = console or Console()
        self.logger = logging.getLogger(__name__)
        self.transport = transport or ChatTransport(config.to_transport_config(), MessageLog())
        self.message_log = self.transport.message_log
        self.view = ChatView(config.current_user_id, config.remote_user_id, config.chat_id)
        self._read_line = read_line or self._prompt_line

        self.transport.set_callbacks(
            on_connected=self._on_connected,
            on_disconnected=self._on_disconnected,
            on_error=self._on_error
        )

    async def run(self) -> MessageLog:
        """
        Run the chat until the user quits or input ends.

        Returns:
            The message log of the conversation.
        """
        self.console.print(self.view.render_header())
        self.message_log.register_listener(self._on_entry)
        try:
            if not await self.transport.connect():
                self.console.print("[bold red]Could not connect to the chat server. "
                                   "Messages cannot be sent.[/bold red]")
            await self._input_loop()
        finally:
            await self.transport.disconnect()
            self.message_log.unregister_listener(self._on_entry)
        return self.message_log

    async def _input_loop(self) -> None:
        while True:
            line = await self._next_line()
            if line is None or line.strip() == QUIT_COMMAND:
                return
            if not line:
                continue

            try:
                await self.transport.send(line)
            except NotConnectedError:
                self.console.print("[yellow]Not connected: message was not sent.[/yellow]")
            except MessageValidationError as e:
                self.console.print(f"[yellow]{e}[/yellow]")

    async def _next_line(self) -> Optional[str]:
        """
        Wait for the next input line.

        Each read runs on its own daemon thread, so a prompt still blocked
        when the chat closes does not keep the event loop from shutting down.
        """
        loop = asyncio.get_running_loop()
        future: "asyncio.Future[Optional[str]]" = loop.create_future()

        def deliver(result: Optional[str], error: Optional[BaseException]) -> None:
            if future.done():
                return
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(result)

        def reader() -> None:
            result, error = None, None
            try:
                result = self._read_line()
            except Exception as e:
                error = e
            try:
                loop.call_soon_threadsafe(deliver, result, error)
            except RuntimeError:
                # Event loop already closed; the chat has ended
                self.logger.debug("Dropping input read after the chat closed")

        threading.Thread(target=reader, name="chat-input-reader", daemon=True).start()
        return await future

    def _prompt_line(self) -> Optional[str]:
        try:
            return Prompt.ask(f"[cyan]{MESSAGE_PROMPT}[/cyan]", console=self.console,
                              default="", show_default=False)
        except EOFError:
            return None

    def _on_entry(self, entry: ChatEntry) -> None:
        self.logger.debug("Chat %s: message from %s", self.view.chat_id, self.view.sender_of(entry))
        self.console.print(self.view.render_entry(entry))

    def _on_connected(self) -> None:
        self.console.print(f"[green]Connected. Type {QUIT_COMMAND} to close the chat.[/green]")

    def _on_disconnected(self) -> None:
        self.console.print("[bold blue]Chat disconnected.[/bold blue]")

    def _on_error(self, error: NetworkError) -> None:
        self.console.print(f"[bold red]Chat error: {error}[/bold red]")
