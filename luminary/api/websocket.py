import asyncio
import contextlib
import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import BaseModel, Field, ValidationError

from luminary.errors import LuminaryError
from luminary.models.color import HSBColor
from luminary.models.light import LightEndpoint
from luminary.services.write_queue import WriteCoordinator
from luminary.store.engine import ShowEngine
from luminary.store.registry import ShowRegistry

logger = logging.getLogger(__name__)

PREVIEW_QUEUE_SIZE = 1024


class ApplyRequest(BaseModel):
    lights: List[LightEndpoint] = Field(default_factory=list)
    config: Optional[Dict[str, Any]] = None


class ApplyMessage(ApplyRequest):
    show: str = ""


class ConfigureMessage(BaseModel):
    show: str = ""
    config: Optional[Dict[str, Any]] = None


def color_payload(color: Optional[HSBColor]) -> Optional[Dict[str, float]]:
    return color.model_dump() if color is not None else None


class WebSocketManager:
    """Client connections, inbound control messages and the live preview fan-out.

    Preview updates arrive synchronously from the running show; they are
    queued and a single pump task broadcasts them as ``color`` messages.
    """

    def __init__(
        self,
        engine: ShowEngine,
        registry: ShowRegistry,
        coordinator: WriteCoordinator,
        queue_size: int = PREVIEW_QUEUE_SIZE,
    ):
        self.engine = engine
        self.registry = registry
        self.coordinator = coordinator
        self.active_connections: List[WebSocket] = []
        self._updates: "asyncio.Queue[Tuple[str, Optional[HSBColor]]]" = asyncio.Queue(maxsize=queue_size)
        self._pump_task: Optional[asyncio.Task] = None

    def start(self) -> None:
        self.engine.add_listener(self.on_color_update)
        if self._pump_task is None:
            self._pump_task = asyncio.create_task(self._pump_updates(), name="ws-preview-pump")

    async def close(self) -> None:
        self.engine.remove_listener(self.on_color_update)
        if self._pump_task is not None:
            self._pump_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._pump_task
            self._pump_task = None

    def on_color_update(self, light_id: str, color: Optional[HSBColor]) -> None:
        # Bounded backlog: drop the oldest preview when full.
        if self._updates.full():
            self._updates.get_nowait()
        self._updates.put_nowait((light_id, color))

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.append(websocket)
        await self.send_initial_state(websocket)

    def disconnect(self, websocket: WebSocket):
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)

    async def send_initial_state(self, websocket: WebSocket):
        await websocket.send_json({
            "type": "initial",
            "shows": self.registry.list(),
            "status": self.engine.status(),
            "colors": {light_id: color_payload(color) for light_id, color in self.engine.last_colors.items()},
        })

    async def broadcast_status(self):
        await self.broadcast({"type": "status", "status": self.engine.status()})

    async def broadcast(self, message: dict):
        stale: List[WebSocket] = []
        for connection in list(self.active_connections):
            try:
                await connection.send_json(message)
            except (WebSocketDisconnect, RuntimeError) as e:
                logger.debug("Dropping websocket after send failure: %s", e)
                stale.append(connection)
        for connection in stale:
            self.disconnect(connection)

    async def _pump_updates(self):
        while True:
            light_id, color = await self._updates.get()
            await self.broadcast({"type": "color", "id": light_id, "color": color_payload(color)})

    async def send_error(self, websocket: WebSocket, error: Dict[str, Any]):
        await websocket.send_json({"type": "error", **error})

    async def handle_message(self, websocket: WebSocket, data: str):
        try:
            message = json.loads(data)
            if not isinstance(message, dict):
                raise ValueError("message must be a JSON object")
            msg_type = message.get("type")

            if msg_type == "list":
                await websocket.send_json({"type": "shows", "shows": self.registry.list()})

            elif msg_type == "status":
                await websocket.send_json({"type": "status", "status": self.engine.status()})

            elif msg_type == "apply":
                request = ApplyMessage.model_validate(message)
                session = await self.engine.apply(request.show, request.lights, config=request.config or None)
                await websocket.send_json({"type": "applied", "session": session.describe()})
                await self.broadcast_status()

            elif msg_type == "stop":
                stopped = await self.engine.stop()
                if message.get("cancel_writes"):
                    self.coordinator.cancel_all()
                await websocket.send_json({"type": "stopped", "stopped": stopped})
                await self.broadcast_status()

            elif msg_type == "configure":
                request = ConfigureMessage.model_validate(message)
                config = await self.engine.configure(request.show, request.config or {})
                await self.broadcast({"type": "config", "show": request.show, "config": config.model_dump(mode="json")})

            elif msg_type == "cancel_writes":
                key = message.get("id")
                if key:
                    count = 1 if self.coordinator.cancel(str(key)) else 0
                else:
                    count = self.coordinator.cancel_all()
                await websocket.send_json({"type": "writes_cancelled", "count": count})

            else:
                await self.send_error(websocket, {"code": "unknown_message", "message": f"Unknown message type: {msg_type}"})

        except LuminaryError as e:
            await self.send_error(websocket, e.to_dict())
        except ValidationError as e:
            await self.send_error(
                websocket,
                {"code": "invalid_request", "message": "Invalid request", "details": json.loads(e.json(include_url=False))},
            )
        except ValueError as e:
            await self.send_error(websocket, {"code": "invalid_request", "message": str(e)})


async def websocket_endpoint(websocket: WebSocket, manager: WebSocketManager):
    await manager.connect(websocket)
    try:
        while True:
            data = await websocket.receive_text()
            await manager.handle_message(websocket, data)
    except WebSocketDisconnect:
        logger.debug("Websocket client disconnected")
    finally:
        manager.disconnect(websocket)
