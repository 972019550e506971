"""In-memory implementation of the ledger substrate."""

import contextlib
import copy
import logging
import threading
import time
from typing import Any, Callable, Dict, Hashable, Iterator, List, Optional, Set

from ...domain.errors import AuthorizationError, ProtocolError
from ...domain.models.events import EventTopic, ProtocolEvent
from ...domain.ports.ledger import Ledger

logger = logging.getLogger(__name__)


class InMemoryLedger(Ledger):
    """Process-local ledger with snapshot/rollback transactions.

    Values are copied on the way in and out, so a stored record can only
    change through ``set``. That makes a shallow copy of the storage dict a
    complete snapshot.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], int]] = None,
        mock_all_auths: bool = False,
    ):
        """Initialize the ledger.

        Args:
            clock: Source of ledger time in seconds (defaults to wall clock)
            mock_all_auths: Treat every address as authorized (test setups)
        """
        self._clock = clock or (lambda: int(time.time()))
        self._mock_all_auths = mock_all_auths
        self._storage: Dict[Hashable, Any] = {}
        self._events: List[ProtocolEvent] = []
        self._auth_frames: List[Set[str]] = []
        self._depth = 0
        self._lock = threading.RLock()

    def timestamp(self) -> int:
        return int(self._clock())

    def get(self, key: Hashable, default: Any = None) -> Any:
        if key not in self._storage:
            return default
        return copy.deepcopy(self._storage[key])

    def set(self, key: Hashable, value: Any) -> None:
        self._storage[key] = copy.deepcopy(value)

    def has(self, key: Hashable) -> bool:
        return key in self._storage

    def mock_all_auths(self, enabled: bool = True) -> None:
        """Toggle blanket authorization."""
        self._mock_all_auths = enabled

    def require_auth(self, address: str) -> None:
        if self._mock_all_auths:
            return
        if any(address in frame for frame in self._auth_frames):
            return
        logger.warning(f"🚫 Missing authorization from {address}")
        raise AuthorizationError(f"Address {address} has not authorized this call")

    @contextlib.contextmanager
    def authorize(self, *addresses: str) -> Iterator[None]:
        self._auth_frames.append(set(addresses))
        try:
            yield
        finally:
            self._auth_frames.pop()

    @contextlib.contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            if self._depth > 0:
                self._depth += 1
                try:
                    yield
                finally:
                    self._depth -= 1
                return

            storage_snapshot = dict(self._storage)
            event_count = len(self._events)
            self._depth = 1
            try:
                yield
            except BaseException as e:
                self._storage = storage_snapshot
                del self._events[event_count:]
                if isinstance(e, ProtocolError):
                    logger.warning(f"↩️ Transaction rejected: {type(e).__name__}: {e}")
                else:
                    logger.error(f"❌ Transaction aborted: {type(e).__name__}: {e}")
                raise
            finally:
                self._depth = 0

    def publish(self, topic: EventTopic, subject: Any) -> ProtocolEvent:
        event = ProtocolEvent(
            sequence=len(self._events) + 1,
            topic=topic,
            subject=str(subject),
            timestamp=self.timestamp(),
        )
        self._events.append(event)
        logger.debug(f"📣 Event {event.topic.value}: {event.subject}")
        return event

    def events(self, topic: Optional[EventTopic] = None) -> List[ProtocolEvent]:
        return [
            event.model_copy()
            for event in self._events
            if topic is None or event.topic == topic
        ]
