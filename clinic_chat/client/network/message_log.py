"""
Message Log

Ordered, append-only record of the chat entries of one chat screen.
"""

import logging
import threading
from datetime import datetime
from typing import Callable, Iterator, List, Optional

from clinic_chat.shared.models import ChatEntry, LogStats, MessageOrigin


EntryListener = Callable[[ChatEntry], None]


class MessageLog:
    """
    Thread-safe, append-only chat message log.

    Entries keep the order in which they were appended. Listeners are
    notified after each append, outside the lock, so a listener may read
    the log or append to it without deadlocking.
    """

    def __init__(self) -> None:
        """Initialize an empty message log."""
        self._entries: List[ChatEntry] = []
        self._listeners: List[EntryListener] = []
        self._lock = threading.Lock()
        self._stats = LogStats()
        self.logger = logging.getLogger(__name__)

    def append(self, entry: ChatEntry) -> ChatEntry:
        """
        Append an entry to the end of the log.

        Args:
            entry: The chat entry to append.

        Returns:
            The appended entry.
        """
        if not isinstance(entry, ChatEntry):
            raise TypeError(f"MessageLog only accepts ChatEntry, got {type(entry).__name__}")

        with self._lock:
            self._entries.append(entry)
            self._stats.total_entries += 1
            if entry.origin is MessageOrigin.LOCAL:
                self._stats.local_entries += 1
            else:
                self._stats.remote_entries += 1
            self._stats.last_entry_time = datetime.now()
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(entry)
            except Exception:
                self.logger.exception("Message log listener %r failed", listener)

        return entry

    def register_listener(self, listener: EntryListener) -> None:
        """
        Register a callable invoked with every appended entry.

        Args:
            listener: The listener function.
        """
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unregister_listener(self, listener: EntryListener) -> None:
        """
        Unregister a previously registered listener.

        Args:
            listener: The listener function to remove.
        """
        with self._lock:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass  # Listener not registered

    def entries(self) -> List[ChatEntry]:
        """
        Get a snapshot of the log.

        Returns:
            List of entries in append order.
        """
        with self._lock:
            return list(self._entries)

    def entries_from(self, origin: MessageOrigin) -> List[ChatEntry]:
        """Get the entries with the given origin, in append order."""
        with self._lock:
            return [entry for entry in self._entries if entry.origin is origin]

    def last(self) -> Optional[ChatEntry]:
        """Get the most recent entry, or None if the log is empty."""
        with self._lock:
            return self._entries[-1] if self._entries else None

    def get_stats(self) -> LogStats:
        """
        Get message log statistics.

        Returns:
            Copy of the current statistics.
        """
        with self._lock:
            return LogStats(
                total_entries=self._stats.total_entries,
                local_entries=self._stats.local_entries,
                remote_entries=self._stats.remote_entries,
                last_entry_time=self._stats.last_entry_time
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[ChatEntry]:
        return iter(self.entries())
