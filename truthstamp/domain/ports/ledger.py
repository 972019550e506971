"""Ledger substrate interface hosting the protocol state."""

from typing import Any, ContextManager, Hashable, List, Optional, Protocol

from ..models.events import EventTopic, ProtocolEvent


class Ledger(Protocol):
    """Protocol for the host ledger.

    The ledger provides the clock, key-value storage, caller authorization,
    event publication and all-or-nothing transactions. Components never keep
    state outside of it.
    """

    def timestamp(self) -> int:
        """Get the current ledger time in seconds."""
        ...

    def get(self, key: Hashable, default: Any = None) -> Any:
        """Get a copy of a stored value."""
        ...

    def set(self, key: Hashable, value: Any) -> None:
        """Store a value under a key."""
        ...

    def has(self, key: Hashable) -> bool:
        """Check whether a key is stored."""
        ...

    def require_auth(self, address: str) -> None:
        """Verify the address authorized the current call.

        Raises:
            AuthorizationError: If the address did not authorize it
        """
        ...

    def authorize(self, *addresses: str) -> ContextManager[None]:
        """Authorize addresses for the calls made inside the context."""
        ...

    def transaction(self) -> ContextManager[None]:
        """Run the enclosed mutations all-or-nothing.

        Nested transactions join the outermost one.
        """
        ...

    def publish(self, topic: EventTopic, subject: Any) -> ProtocolEvent:
        """Publish an event for off-system observers."""
        ...

    def events(self, topic: Optional[EventTopic] = None) -> List[ProtocolEvent]:
        """Get published events, optionally filtered by topic."""
        ...
