from typing import List, Optional, Tuple
from engine.model import Event

class EventLog:
    """Append-only match event storage, paged by offset for polling clients."""

    def __init__(self):
        self._log: List[Event] = []
        self.match_no = 0

    def __len__(self) -> int:
        return len(self._log)

    def append_many(self, evts: List[Event]) -> Tuple[int, int]:
        """Append events and return (start_offset, end_offset)."""
        start = len(self._log)
        self._log.extend(evts)
        end = len(self._log) - 1
        return start, end

    def since(self, offset: int, limit: int = 1000) -> tuple[list[Event], int]:
        """Return events starting from offset, up to limit."""
        offset = max(0, offset)
        chunk = self._log[offset: offset + limit]
        return chunk, offset + len(chunk)

    def last(self, kind: str) -> Optional[Event]:
        """Most recent event of the given kind, if any."""
        for evt in reversed(self._log):
            if evt.kind == kind:
                return evt
        return None

    def reset(self) -> None:
        """Start a new log for a new match; offsets restart at zero."""
        self._log.clear()
        self.match_no += 1
