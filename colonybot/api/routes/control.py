"""Engine lifecycle endpoints.

``step`` on a stopped engine runs the tick on the request thread through
``EngineManager.advance()``, so the response already carries the new tick.
With the engine thread alive it queues a single tick and pauses the thread.
"""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, Query

from colonybot.api.dependencies import get_engine_manager
from colonybot.api.engine_manager import EngineManager
from colonybot.api.schemas import ControlResponse

router = APIRouter()


class ControlAction(str, Enum):
    start = "start"
    pause = "pause"
    resume = "resume"
    step = "step"
    reset = "reset"


def _respond(manager: EngineManager, status: str, message: str) -> ControlResponse:
    snapshot = manager.get_snapshot()
    return ControlResponse(status=status, message=message, tick=snapshot.tick if snapshot else 0)


def _step(manager: EngineManager) -> ControlResponse:
    if manager.running:
        manager.step()
        return _respond(manager, "ok", "Tick queued on the engine thread.")
    if not manager.advance():
        return _respond(manager, "noop", f"Colony stopped at max_ticks={manager.config.max_ticks}.")
    return _respond(manager, "ok", "Advanced one tick.")


@router.post("/control/{action}", response_model=ControlResponse)
def control(
    action: ControlAction,
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    if action is ControlAction.step:
        return _step(manager)

    if action is ControlAction.reset:
        manager.reset()
        return _respond(manager, "ok", f"Colony rebuilt from seed {manager.config.world_seed}.")

    if action is ControlAction.start:
        if manager.running:
            return _respond(manager, "noop", "Engine thread already running.")
        manager.start()
        return _respond(manager, "ok", "Engine thread started.")

    # pause and resume only act on a live engine thread
    if not manager.running:
        return _respond(manager, "error", f"Cannot {action.value}: engine thread is stopped.")
    if action is ControlAction.pause:
        manager.pause()
        return _respond(manager, "ok", "Engine thread paused.")
    manager.resume()
    return _respond(manager, "ok", "Engine thread resumed.")


@router.post("/speed", response_model=ControlResponse)
def set_speed(
    seconds_per_tick: float = Query(0.05, ge=0.01, le=2.0, description="Delay between background ticks"),
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    manager.tick_rate = seconds_per_tick
    return _respond(manager, "ok", f"Tick interval set to {manager.tick_rate:.3f}s.")
