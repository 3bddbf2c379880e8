"""
HTTP API - FastAPI application.

Endpoints:
- POST/GET /api/world-map     transient topology from the front-end
- POST/GET /api/world-memory  learned mesh records
- POST     /api/think         resolve a transcript to an action
- GET      /api/hello         liveness probe
"""

from contextlib import asynccontextmanager
from typing import Any

from fastapi import BackgroundTasks, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from wayfinder import __version__
from wayfinder.core.config import Settings, get_settings
from wayfinder.core.errors import MissingFieldError, WayfinderError
from wayfinder.core.logging import get_logger
from wayfinder.core.types import DEFAULT_PORTAL
from wayfinder.intent.resolver import IntentResolver, create_resolver
from wayfinder.memory.store import WorldMemoryStore
from wayfinder.memory.world_map import WorldMapIngestor

logger = get_logger("interfaces.http")


# ============================================================================
# Request Models
# ============================================================================


class WorldMapRequest(BaseModel):
    """Full world map pushed by the front-end"""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    world_map: dict[str, Any] | None = Field(default=None, alias="worldMap")


class LearnRequest(BaseModel):
    """Teach the router about one mesh"""

    model_config = ConfigDict(extra="allow")

    mesh: str | None = None
    action: str | None = None
    context: dict[str, Any] | None = None
    commands: list[str] | None = None


class ThinkRequest(BaseModel):
    """Transcript plus where the caller currently is"""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    transcript: str | None = None
    current_portal: str | None = Field(default=DEFAULT_PORTAL, alias="currentPortal")
    current_mesh: str | None = Field(default=None, alias="currentMesh")


# ============================================================================
# Application
# ============================================================================


def create_app(
    settings: Settings | None = None,
    store: WorldMemoryStore | None = None,
    resolver: IntentResolver | None = None,
) -> FastAPI:
    """Build the API around one explicit store and resolver."""
    settings = settings or get_settings()

    if store is None:
        store = WorldMemoryStore(settings.memory_path, settings.persistence_enabled)

    if resolver is None:
        from wayfinder.llm.fallback import create_fallback

        resolver = create_resolver(settings, store, fallback=create_fallback(settings))

    ingestor = WorldMapIngestor(store)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.load()
        logger.info(
            f"Wayfinder API ready: {len(store)} memory objects, "
            f"persistence {'on' if store.persistence_enabled else 'off'}"
        )
        yield
        logger.info("Shutting down Wayfinder API")

    app = FastAPI(
        title="Wayfinder",
        description="Voice-intent router for portal-based 3D experiences",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.resolver = resolver

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.exception_handler(WayfinderError)
    async def wayfinder_error_handler(request: Request, exc: WayfinderError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Mistyped bodies get the same {"error": ...} shape as every other failure"""
        problems = []
        for err in exc.errors():
            field = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
            problems.append(f"{field}: {err.get('msg')}" if field else err.get("msg", "invalid body"))
        return JSONResponse(status_code=422, content={"error": "Invalid request: " + "; ".join(problems)})

    # ------------------------------------------------------------------------
    # Liveness
    # ------------------------------------------------------------------------

    @app.get("/api/hello")
    async def hello():
        return {"message": "Backend is connected and running!"}

    # ------------------------------------------------------------------------
    # World Map
    # ------------------------------------------------------------------------

    @app.post("/api/world-map")
    async def update_world_map(payload: WorldMapRequest, background_tasks: BackgroundTasks):
        """Replace the world map and fold it into world memory"""
        ingestor.ingest(payload.world_map or {}, persist=False)
        background_tasks.add_task(store.persist, store.snapshot())
        return {"success": True}

    @app.get("/api/world-map")
    async def get_world_map():
        return store.world_map

    # ------------------------------------------------------------------------
    # World Memory
    # ------------------------------------------------------------------------

    @app.post("/api/world-memory")
    async def learn(payload: LearnRequest, background_tasks: BackgroundTasks):
        """Create or merge one mesh record"""
        if not payload.mesh:
            raise MissingFieldError("mesh", "Missing mesh name")

        memory = store.upsert(
            payload.mesh,
            action=payload.action,
            context=payload.context,
            commands=payload.commands,
        )
        background_tasks.add_task(store.persist, memory)
        return {"success": True, "memory": memory}

    @app.get("/api/world-memory")
    async def get_world_memory():
        return store.snapshot()

    # ------------------------------------------------------------------------
    # Reasoning
    # ------------------------------------------------------------------------

    @app.post("/api/think")
    async def think(payload: ThinkRequest):
        """Resolve a transcript to an action token"""
        if not payload.transcript or not payload.transcript.strip():
            raise MissingFieldError("transcript", "Missing transcript")

        try:
            result = await resolver.resolve(
                payload.transcript,
                current_portal=payload.current_portal or DEFAULT_PORTAL,
                current_mesh=payload.current_mesh,
            )
        except Exception as e:
            logger.error(f"Reasoning failed: {e}")
            return JSONResponse(status_code=500, content={"error": str(e)})

        return result.to_dict()

    return app


# ============================================================================
# Main Entry Point
# ============================================================================


def serve(settings: Settings | None = None) -> None:
    """Run the API with uvicorn."""
    import uvicorn

    settings = settings or get_settings()
    uvicorn.run(
        "wayfinder.interfaces.http:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
