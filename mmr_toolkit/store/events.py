"""
Events emitted by the store and the verifier gateway.

The log is append-only. Inside a transaction events are buffered and only
reach the log when the outermost transaction commits; an aborted call leaves
no events behind.
"""

from contextlib import contextmanager
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterator, List, Optional, Type, TypeVar, Union


@dataclass(frozen=True)
class LatestBlockhashFromL1Stored:
    block_number: int
    blockhash: int


@dataclass(frozen=True)
class MmrStateUpdated:
    batch_index: int
    leaves_count: int
    root_hash: int


@dataclass(frozen=True)
class MmrProofVerified:
    batch_index: int
    latest_mmr_block: int
    new_leaves_count: int
    new_mmr_root: int
    ipfs_hash: str = ""


Event = Union[LatestBlockhashFromL1Stored, MmrStateUpdated, MmrProofVerified]
E = TypeVar("E")

EVENT_TYPES: Dict[str, Type] = {
    cls.__name__: cls
    for cls in (LatestBlockhashFromL1Stored, MmrStateUpdated, MmrProofVerified)
}


def event_to_dict(event: Event) -> Dict[str, Any]:
    return {"event": type(event).__name__, **asdict(event)}


def event_from_dict(data: Dict[str, Any]) -> Event:
    fields = dict(data)
    name = fields.pop("event")
    try:
        cls = EVENT_TYPES[name]
    except KeyError:
        raise ValueError(f"Unknown event type: {name}")
    return cls(**fields)


class EventLog:
    """Append-only event sink with transactional buffering."""

    def __init__(self, events: Optional[List[Event]] = None):
        self._events: List[Event] = list(events or [])
        self._pending: Optional[List[Event]] = None

    def emit(self, event: Event) -> None:
        if self._pending is not None:
            self._pending.append(event)
        else:
            self._events.append(event)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._pending is not None:
            # Joins the enclosing transaction
            yield
            return

        self._pending = []
        try:
            yield
        except BaseException:
            self._pending = None
            raise
        pending, self._pending = self._pending, None
        self._events.extend(pending)

    @property
    def in_transaction(self) -> bool:
        return self._pending is not None

    def events(self, event_type: Optional[Type[E]] = None) -> List[E]:
        """Committed events, optionally filtered by type."""
        if event_type is None:
            return list(self._events)
        return [e for e in self._events if isinstance(e, event_type)]

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Event]:
        return iter(list(self._events))
