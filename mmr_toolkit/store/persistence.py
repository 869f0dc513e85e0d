"""JSON persistence for a store's state and event log."""

import json
import os
from pathlib import Path
from typing import Union

from mmr_toolkit.shared.logging import get_logger
from mmr_toolkit.store.events import EventLog, event_from_dict, event_to_dict
from mmr_toolkit.store.service import MMRStore
from mmr_toolkit.store.state import GlobalState

_logger = get_logger(__name__)

PathLike = Union[str, Path]


def load_store(path: PathLike) -> MMRStore:
    """Load a store from disk, or return a fresh one if the file is absent."""
    path = Path(path)
    if not path.exists():
        _logger.debug(f"No state file at {path}, starting from empty state")
        return MMRStore()

    with open(path, "r") as f:
        data = json.load(f)

    state = GlobalState.from_dict(data.get("state") or {})
    events = EventLog([event_from_dict(e) for e in data.get("events") or []])
    return MMRStore(state, events)


def save_store(store: MMRStore, path: PathLike) -> Path:
    """Write the store to disk atomically (temp file + rename)."""
    path = Path(path)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "state": store.state.to_dict(),
        "events": [event_to_dict(e) for e in store.event_log],
    }

    tmp_path = path.with_name(path.name + ".tmp")
    with open(tmp_path, "w") as f:
        json.dump(data, f, indent=2)
    os.replace(tmp_path, path)

    return path
