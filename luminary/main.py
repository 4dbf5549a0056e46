import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from luminary.api.websocket import ApplyRequest, WebSocketManager, websocket_endpoint
from luminary.config import Settings
from luminary.custom_logging import setup_logging
from luminary.errors import LuminaryError
from luminary.services.audio import BufferLevelMeter, LevelSource
from luminary.services.controller import LightController, LoggingLightController
from luminary.services.write_queue import WriteCoordinator
from luminary.store.engine import ShowEngine
from luminary.store.registry import default_registry

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    "unknown_show": 404,
    "invalid_config": 422,
    "invalid_color": 422,
}


def create_app(
    settings: Optional[Settings] = None,
    controller: Optional[LightController] = None,
    level_source: Optional[LevelSource] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level, settings.log_file)

        light_controller = controller or LoggingLightController(
            debug=settings.debug_writes,
            debug_file=settings.debug_file,
        )
        source = level_source if level_source is not None else BufferLevelMeter()
        coordinator = WriteCoordinator(
            light_controller,
            debounce_interval=settings.debounce_interval,
            write_timeout=settings.write_timeout,
        )
        registry = default_registry(level_source=source)
        engine = ShowEngine(registry, coordinator)
        ws_manager = WebSocketManager(engine, registry, coordinator)
        ws_manager.start()

        # Make services available to routes
        app.state.settings = settings
        app.state.controller = light_controller
        app.state.level_source = source
        app.state.coordinator = coordinator
        app.state.registry = registry
        app.state.engine = engine
        app.state.ws_manager = ws_manager

        logger.info(
            "Luminary ready: %d shows, debounce %.0f ms",
            len(registry),
            settings.debounce_interval * 1000.0,
        )

        yield

        # Shutdown: stop the show and drop queued writes before closing the coordinator
        dropped = await engine.shutdown()
        if dropped:
            logger.info("Dropped %d pending light writes on shutdown", dropped)
        await ws_manager.close()
        await coordinator.close()

    app = FastAPI(lifespan=lifespan, title="Luminary Show Engine")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(LuminaryError)
    async def luminary_error_handler(request: Request, exc: LuminaryError):
        return JSONResponse(status_code=ERROR_STATUS.get(exc.code, 400), content=exc.to_dict())

    @app.get("/")
    async def root():
        return {"message": "Luminary Show Engine"}

    @app.get("/shows")
    async def list_shows(request: Request):
        return {"shows": request.app.state.registry.list()}

    @app.get("/status")
    async def get_status(request: Request):
        return request.app.state.engine.status()

    @app.post("/shows/{show_id}/apply")
    async def apply_show(show_id: str, body: ApplyRequest, request: Request):
        session = await request.app.state.engine.apply(show_id, body.lights, config=body.config)
        await request.app.state.ws_manager.broadcast_status()
        return session.describe()

    @app.patch("/shows/{show_id}/config")
    async def configure_show(show_id: str, changes: Dict[str, Any], request: Request):
        config = await request.app.state.engine.configure(show_id, changes)
        payload = config.model_dump(mode="json")
        await request.app.state.ws_manager.broadcast({"type": "config", "show": show_id, "config": payload})
        return {"show": show_id, "config": payload}

    @app.post("/stop")
    async def stop_show(request: Request, cancel_writes: bool = False):
        engine = request.app.state.engine
        stopped = await engine.stop()
        cancelled = engine.writer.cancel_all() if cancel_writes else 0
        await request.app.state.ws_manager.broadcast_status()
        return {"stopped": stopped, "cancelledWrites": cancelled}

    @app.websocket("/ws")
    async def websocket_route(websocket: WebSocket):
        await websocket_endpoint(websocket, websocket.app.state.ws_manager)

    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = Settings.from_env()
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
