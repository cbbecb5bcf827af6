"""Packaging session management.

A packaging session tracks one operator's tool scanning before the scanned
tools are finalized into a batch. The manager holds at most one session; it
assumes a single caller and applies no locking.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cliniio_sterilization.core.models import PackagingSession, Tool
from cliniio_sterilization.core.types import SessionStatus
from cliniio_sterilization.engine.codes import utc_now

if TYPE_CHECKING:
    from cliniio_sterilization.core.types import Clock

__all__ = ["PackagingSessionManager"]

logger = logging.getLogger(__name__)


class PackagingSessionManager:
    """Holds the current packaging session and its error field.

    Starting a session replaces any session already held, without merging or
    completing it. Ending a session drops the reference without marking it
    completed; keeping a terminal record is the persistence layer's job.
    Tool mutations are silently ignored while no session is active.

    Attributes:
        current_session: The session being scanned into, if any.
        error: Last error message surfaced to the UI, if any.

    Example:
        >>> manager = PackagingSessionManager()
        >>> session = manager.start_packaging_session("Dr. Smith")
        >>> manager.add_tool_to_session("T-001")
        >>> session.tool_ids
        ['T-001']
        >>> manager.end_packaging_session()
        >>> manager.current_session is None
        True
    """

    def __init__(self, clock: Clock | None = None) -> None:
        """Initialize the manager with no session.

        Args:
            clock: Callable returning the current time. Defaults to UTC now.
        """
        self._clock = clock or utc_now
        self.current_session: PackagingSession | None = None
        self.error: str | None = None

    @property
    def has_active_session(self) -> bool:
        return self.current_session is not None and self.current_session.status == SessionStatus.ACTIVE

    def start_packaging_session(
        self,
        operator: str,
        is_batch_mode: bool = False,
        batch_id: str | None = None,
    ) -> PackagingSession:
        """Start a new session, replacing any session currently held.

        Args:
            operator: Operator running the session.
            is_batch_mode: Whether tools are being scanned into a batch.
            batch_id: Associated batch, if any.

        Returns:
            The new, active session with no scanned tools.
        """
        if self.current_session is not None:
            logger.warning(
                "Replacing packaging session %s (%d unsaved tools) for %s",
                self.current_session.id,
                len(self.current_session.scanned_tools),
                operator,
            )

        started = self._clock()
        session = PackagingSession(
            id=f"session_{int(started.timestamp() * 1000)}",
            operator=operator,
            start_time=started,
            status=SessionStatus.ACTIVE,
            scanned_tools=[],
            is_batch_mode=is_batch_mode,
            batch_id=batch_id,
        )
        self.current_session = session
        logger.info("Started packaging session %s for %s", session.id, operator)
        return session

    def end_packaging_session(self) -> None:
        """Drop the current session reference."""
        if self.current_session is not None:
            logger.info("Ended packaging session %s", self.current_session.id)
        self.current_session = None

    def add_tool_to_session(self, tool_id: str) -> None:
        """Append a tool stub to the current session. No-op without a session.

        Scanning the same id twice records it twice.
        """
        if self.current_session is None:
            return
        self.current_session.scanned_tools.append(Tool(id=tool_id))

    def remove_tool_from_session(self, tool_id: str) -> None:
        """Remove the most recent scan of ``tool_id``. No-op without a session."""
        if self.current_session is None:
            return
        tools = self.current_session.scanned_tools
        for index in range(len(tools) - 1, -1, -1):
            if tools[index].id == tool_id:
                del tools[index]
                return

    def set_session_error(self, message: str) -> None:
        self.error = message

    def clear_session_error(self) -> None:
        """Reset the error field. Independent of the session lifecycle."""
        self.error = None
