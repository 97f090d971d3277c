"""
Chat View

Formats message log entries as chat bubbles.
"""

from typing import Iterable

from rich.align import Align
from rich.console import Group
from rich.panel import Panel
from rich.rule import Rule
from rich.text import Text

from clinic_chat.shared.constants import (
    CHAT_ID,
    CHAT_TITLE,
    CURRENT_USER_ID,
    LOCAL_BUBBLE_STYLE,
    REMOTE_BUBBLE_STYLE,
    REMOTE_USER_ID,
)
from clinic_chat.shared.models import ChatEntry


class ChatView:
    """
    Renders chat entries as bubbles.

    The current user's messages sit on the left, the remote user's on the
    right.
    """

    def __init__(self,
                 current_user_id: str = CURRENT_USER_ID,
                 remote_user_id: str = REMOTE_USER_ID,
                 chat_id: str = CHAT_ID) -> None:
        self.current_user_id = current_user_id
        self.remote_user_id = remote_user_id
        self.chat_id = chat_id

    def sender_of(self, entry: ChatEntry) -> str:
        """Get the participant id that sent the entry."""
        return self.current_user_id if entry.is_current_user else self.remote_user_id

    def render_header(self) -> Rule:
        """Render the chat sheet header naming the conversation."""
        return Rule(f"[bold]{CHAT_TITLE}[/bold] [dim]({self.chat_id})[/dim]")

    def render_entry(self, entry: ChatEntry) -> Align:
        """
        Render one entry as an aligned bubble.

        Args:
            entry: The entry to render.

        Returns:
            Aligned Text renderable.
        """
        style = LOCAL_BUBBLE_STYLE if entry.is_current_user else REMOTE_BUBBLE_STYLE
        bubble = Text(f" {entry.text} ", style=style)
        if entry.is_current_user:
            return Align.left(bubble)
        return Align.right(bubble)

    def render_history(self, entries: Iterable[ChatEntry]) -> Panel:
        """Render the whole conversation in a panel."""
        bubbles = [self.render_entry(entry) for entry in entries]
        content = Group(*bubbles) if bubbles else Text("No messages yet", style="dim italic")
        return Panel(
            content,
            title=CHAT_TITLE,
            subtitle=f"{self.current_user_id} / {self.remote_user_id}",
            border_style="green",
            expand=True,
        )
