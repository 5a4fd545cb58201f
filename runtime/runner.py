import asyncio
import logging
from typing import Any, List, Optional
from engine.engine import Engine
from engine.model import Event, MatchState, Phase
from .eventlog import EventLog

logger = logging.getLogger(__name__)

class TickRunner:
    """Async driver that advances shots in flight on a fixed tick cadence.

    Every engine call goes through one lock, so a turn hand-off or crater is
    never observed half-applied.
    """

    def __init__(self, engine: Engine, tick_ms: Optional[int] = None, time_compression: float = 1.0):
        self.engine = engine
        # Default cadence is the engine's own time step, i.e. real time.
        self.tick_ms = tick_ms if tick_ms is not None else int(round(engine.config.dt * 1000))
        self.time_compression = time_compression
        self.sleep_s = (self.tick_ms / 1000.0) / max(0.1, time_compression)
        self.events = EventLog()
        self._task: asyncio.Task | None = None
        self._lock = asyncio.Lock()
        self._landed = asyncio.Event()
        self._landed.set()

    async def start(self):
        """Start the tick loop."""
        if self._task:
            return
        self._task = asyncio.create_task(self._loop())
        logger.info("Tick runner started (tick=%dms, compression=%.1fx)", self.tick_ms, self.time_compression)

    async def stop(self):
        """Stop the tick loop gracefully."""
        if not self._task:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Tick runner stopped")

    async def tick(self) -> List[Event]:
        """Run one engine step and log what it produced."""
        async with self._lock:
            evts: List[Event] = self.engine.step()
            self.events.append_many(evts)
            if self.engine.state.phase is not Phase.FIRING:
                self._landed.set()
        if evts:
            logger.debug("Tick produced %d events", len(evts))
        return evts

    async def _loop(self):
        """Main tick loop - step the engine, log events, sleep."""
        while True:
            await self.tick()
            await asyncio.sleep(self.sleep_s)

    async def submit_angle(self, value: Any) -> MatchState:
        async with self._lock:
            return self.engine.submit_angle(value)

    async def submit_power(self, value: Any) -> MatchState:
        """Launch a shot; it is advanced by subsequent ticks."""
        async with self._lock:
            state = self.engine.submit_power(value)
            self._landed.clear()
            return state

    async def wait_landed(self, timeout: Optional[float] = None) -> None:
        """Block until the shot in flight has been resolved."""
        await asyncio.wait_for(self._landed.wait(), timeout)

    async def new_match(self, width: Optional[int] = None, height: Optional[int] = None) -> MatchState:
        """Discard the current match, including any shot in flight."""
        async with self._lock:
            state = self.engine.new_match(width, height)
            self.events.reset()
            self._landed.set()
            return state

    async def snapshot(self) -> MatchState:
        """Get current state (thread-safe)."""
        async with self._lock:
            return self.engine.snapshot()

    def set_time_compression(self, time_compression: float):
        """Update time compression factor (1.0 = real-time, higher = faster)."""
        self.time_compression = max(0.1, min(1000.0, time_compression))
        self.sleep_s = (self.tick_ms / 1000.0) / self.time_compression
        logger.info("Time compression set to %.1fx (sleep: %.4fs)", self.time_compression, self.sleep_s)
