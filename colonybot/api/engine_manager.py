"""EngineManager — runs the ColonyLoop on a background thread.

The API reads from an atomically-swapped immutable Snapshot; the ColonyLoop
mutates WorldState exclusively on its own thread.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING

from colonybot.core.snapshot import Snapshot
from colonybot.engine.colony_loop import ColonyLoop
from colonybot.systems.generator import build_world
from colonybot.utils.event_log import EventLog, SimEvent

if TYPE_CHECKING:
    from colonybot.config import ColonyConfig

logger = logging.getLogger(__name__)


class EngineManager:
    """Manages the colony lifecycle on a background thread.

    Provides thread-safe access to:
      - latest snapshot (atomic reference swap)
      - event log (lock-guarded ring buffer)
      - control commands (start / pause / resume / step / reset)
    """

    def __init__(self, config: ColonyConfig) -> None:
        self.config = config
        self._tick_rate: float = 0.05  # seconds between ticks (20 tps default)

        self._loop: ColonyLoop | None = None

        self._snapshot_lock = threading.Lock()
        self._latest_snapshot: Snapshot | None = None
        self._event_log = EventLog()
        self._total_spawned: int = 0

        self._thread: threading.Thread | None = None
        self._running = threading.Event()
        self._paused = threading.Event()
        self._step_requested = threading.Event()
        self._stop_requested = threading.Event()

        self._build()

    # -- public properties --

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    @property
    def tick_rate(self) -> float:
        return self._tick_rate

    @tick_rate.setter
    def tick_rate(self, value: float) -> None:
        self._tick_rate = max(0.01, min(value, 2.0))

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    @property
    def total_spawned(self) -> int:
        return self._total_spawned

    # -- snapshot access --

    def get_snapshot(self) -> Snapshot | None:
        with self._snapshot_lock:
            return self._latest_snapshot

    # -- lifecycle --

    def start(self) -> None:
        if self._running.is_set():
            return
        self._stop_requested.clear()
        self._paused.clear()
        self._running.set()
        self._thread = threading.Thread(target=self._run_loop, name="colony-loop", daemon=True)
        self._thread.start()
        logger.info("EngineManager started (tick_rate=%.3fs)", self._tick_rate)

    def pause(self) -> None:
        self._paused.set()
        logger.info("EngineManager paused at tick %d", self._current_tick())

    def resume(self) -> None:
        self._paused.clear()
        logger.info("EngineManager resumed at tick %d", self._current_tick())

    def step(self) -> None:
        """Execute exactly one tick (must be paused)."""
        if not self._paused.is_set():
            self.pause()
        self._step_requested.set()

    def stop(self) -> None:
        self._stop_requested.set()
        self._paused.clear()
        self._running.clear()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)
        logger.info("EngineManager stopped.")

    def reset(self) -> None:
        """Stop, rebuild, and leave the colony ready to start."""
        self.stop()
        self._event_log.clear()
        self._total_spawned = 0
        self._build()
        logger.info("EngineManager reset.")

    def advance(self) -> bool:
        """Run one tick on the calling thread and publish the result.

        Only valid while the background thread is not running.
        """
        if self._running.is_set():
            raise RuntimeError("advance() called while the engine thread is running")
        return self._tick_and_publish()

    # -- internals --

    def _build(self) -> None:
        """Construct the world, colony and loop from config."""
        world, colony = build_world(self.config)
        self._loop = ColonyLoop(self.config, world, colony)
        snap = Snapshot.from_loop(self._loop)
        with self._snapshot_lock:
            self._latest_snapshot = snap

    def _tick_and_publish(self) -> bool:
        assert self._loop is not None
        before = len(self._loop.world.agents)
        can_continue = self._loop.tick_once()
        self._total_spawned += max(len(self._loop.world.agents) - before, 0)
        self._publish_snapshot_and_events()
        return can_continue

    def _run_loop(self) -> None:
        """Background thread main loop."""
        logger.info("Engine thread started.")

        while not self._stop_requested.is_set():
            if self._paused.is_set() and not self._step_requested.is_set():
                time.sleep(0.01)
                continue

            single_step = self._step_requested.is_set()
            if single_step:
                self._step_requested.clear()

            if not self._tick_and_publish():
                logger.info("Colony run ended at tick %d.", self._current_tick())
                break

            if not single_step:
                time.sleep(self._tick_rate)

        self._running.clear()
        logger.info("Engine thread exited.")

    def _publish_snapshot_and_events(self) -> None:
        assert self._loop is not None
        snap = Snapshot.from_loop(self._loop)
        with self._snapshot_lock:
            self._latest_snapshot = snap

        events: list[SimEvent] = self._loop.tick_events
        if events:
            self._event_log.append_many(events)

    def _current_tick(self) -> int:
        if self._loop:
            return self._loop.world.tick
        return 0
