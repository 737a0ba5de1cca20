from __future__ import annotations

import asyncio
import json
import logging
from collections import deque
from contextlib import asynccontextmanager
from dataclasses import asdict, dataclass
from typing import Any, AsyncIterator, Dict

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse

from ..sim.core.config import SimulationConfig
from ..sim.core.world import World

logger = logging.getLogger(__name__)

MAX_QUEUED_SNAPSHOTS = 64


@dataclass(frozen=True)
class QueuedSnapshot:
    tick: int
    payload: str


class SimulationController:
    """Ticks a world on the event loop and streams ecosystem snapshots.

    Snapshots wait in a bounded backlog until a client acknowledges them, so a
    client that connects late still sees the most recent ticks. Everything runs
    on one event loop; the backlog is never touched from another thread.
    """

    def __init__(self, config: SimulationConfig, broadcast_interval: int = 1, backlog: int = MAX_QUEUED_SNAPSHOTS):
        self.config = config
        self.world = World(config)
        self.broadcast_interval = max(1, broadcast_interval)
        self.running = False
        self.tick = 0
        self.speed_multiplier = 1.0
        self.backlog: deque[QueuedSnapshot] = deque(maxlen=max(1, backlog))
        self._last_sent: Dict[WebSocket, int] = {}
        self._lock = asyncio.Lock()
        self._loop_task: asyncio.Task | None = None

    @property
    def clients(self) -> list[WebSocket]:
        return list(self._last_sent)

    async def start(self) -> None:
        if self._loop_task is None:
            self._loop_task = asyncio.create_task(self._loop())
        self.running = True

    async def stop(self) -> None:
        self.running = False

    async def shutdown(self) -> None:
        self.running = False
        if self._loop_task is not None:
            self._loop_task.cancel()
            try:
                await self._loop_task
            except asyncio.CancelledError:
                pass
            self._loop_task = None

    async def reset(self) -> None:
        async with self._lock:
            self.world.reset()
            self.tick = 0
        self.backlog.clear()
        for client in self._last_sent:
            self._last_sent[client] = -1
        await self.broadcast()

    async def advance(self) -> None:
        """Run exactly one tick; ticks never interleave with reset."""
        async with self._lock:
            self.world.step(self.tick)
            self.tick += 1
        if self.tick % self.broadcast_interval == 0:
            await self.broadcast()

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.config.tick_interval / self.speed_multiplier)
            if not self.running:
                continue
            await self.advance()

    async def connect(self, client: WebSocket) -> None:
        self._last_sent[client] = -1
        await self._send_pending(client)

    def disconnect(self, client: WebSocket) -> None:
        if self._last_sent.pop(client, None) is not None:
            logger.info("Snapshot client disconnected")

    def acknowledge(self, tick: int) -> None:
        while self.backlog and self.backlog[0].tick <= tick:
            self.backlog.popleft()

    def status(self) -> Dict[str, Any]:
        kinds = self.world.population_by_kind()
        return {
            "running": self.running,
            "tick": self.tick,
            "alive": self.world.alive_count(),
            "biomass": self.world.biomass_count(),
            "kinds": {kind: asdict(stats) for kind, stats in kinds.items()},
        }

    async def broadcast(self) -> None:
        snapshot = self.world.snapshot(self.tick)
        message = {
            "type": "snapshot",
            "tick": snapshot.tick,
            "payload": asdict(snapshot),
        }
        self.backlog.append(QueuedSnapshot(tick=snapshot.tick, payload=json.dumps(message)))
        # clients may disconnect while we await a send
        for client in self.clients:
            if client not in self._last_sent:
                continue
            try:
                await self._send_pending(client)
            except WebSocketDisconnect:
                self.disconnect(client)

    async def _send_pending(self, client: WebSocket) -> None:
        last_sent = self._last_sent.get(client, -1)
        for item in [item for item in self.backlog if item.tick > last_sent]:
            await client.send_text(item.payload)
            last_sent = item.tick
        if client in self._last_sent:
            self._last_sent[client] = last_sent


controller = SimulationController(SimulationConfig())


@asynccontextmanager
async def _lifespan(_: FastAPI) -> AsyncIterator[None]:
    await controller.start()
    yield
    await controller.shutdown()


app = FastAPI(title="Ecosystem Simulation", lifespan=_lifespan)


@app.get("/api/status")
async def status() -> JSONResponse:
    return JSONResponse(controller.status())


@app.post("/api/control/start")
async def start_simulation() -> JSONResponse:
    await controller.start()
    return JSONResponse({"running": True})


@app.post("/api/control/stop")
async def stop_simulation() -> JSONResponse:
    await controller.stop()
    return JSONResponse({"running": False})


@app.post("/api/control/reset")
async def reset_simulation() -> JSONResponse:
    await controller.reset()
    return JSONResponse({"running": controller.running, "tick": controller.tick})


@app.post("/api/control/speed")
async def set_speed(payload: dict) -> JSONResponse:
    speed = float(payload.get("multiplier", 1.0))
    controller.speed_multiplier = max(0.1, min(5.0, speed))
    return JSONResponse({"multiplier": controller.speed_multiplier})


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    await websocket.accept()
    try:
        await controller.connect(websocket)
        while True:
            message = await websocket.receive_text()
            try:
                payload = json.loads(message)
            except json.JSONDecodeError:
                continue
            if isinstance(payload, dict) and payload.get("type") == "ack" and isinstance(payload.get("tick"), int):
                controller.acknowledge(payload["tick"])
    except WebSocketDisconnect:
        controller.disconnect(websocket)


__all__ = ["app", "controller"]
