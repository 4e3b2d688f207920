from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.config import Settings, configure_logging
from app.db.snapshot import build_store
from app.errors import HostelError, RoomConflictError, RoomNotFoundError
from app.models.room import AddRoomRequest, AllocateRequest, MessageOut, Room
from app.registry import RoomRegistry

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------
# Utils
# ---------------------------------------------------------------
def validation_message(errors) -> str:
    """pydantic 에러 목록 → "capacity: Input should be ..." 형태 한 줄"""
    parts = []
    for err in errors:
        field = ".".join(str(p) for p in err.get("loc", ())[1:])
        parts.append(f"{field}: {err['msg']}" if field else err["msg"])
    return "; ".join(parts) or "invalid request"


def get_registry(request: Request) -> RoomRegistry:
    return request.app.state.registry


# ---------------------------------------------------------------
# App
# ---------------------------------------------------------------
def create_app(settings: Optional[Settings] = None, registry: Optional[RoomRegistry] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # 요청을 받기 전에 스냅샷을 한 번만 읽는다
        if registry is None:
            app.state.registry = RoomRegistry.initialize(build_store(settings))
        else:
            app.state.registry = registry
        yield

    app = FastAPI(title="Smart Hostel API", version="1.0", lifespan=lifespan)
    app.state.settings = settings

    # -----------------------------------------------------------
    # CORS (file:// 로 연 페이지나 다른 origin 에서의 호출 허용)
    # -----------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
        max_age=86400,
    )

    @app.middleware("http")
    async def no_store_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["Cache-Control"] = "no-store"
        if request.url.path.startswith("/api/"):
            response.headers["X-Server-Time"] = datetime.now(timezone.utc).isoformat()
        return response

    # -----------------------------------------------------------
    # Error handlers
    # -----------------------------------------------------------
    @app.exception_handler(HostelError)
    async def hostel_error_handler(request: Request, exc: HostelError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message, "error": exc.code},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "message": validation_message(exc.errors()),
                "error": "invalid_input",
                "detail": jsonable_encoder(exc.errors()),
            },
        )

    # -----------------------------------------------------------
    # API
    # -----------------------------------------------------------
    @app.get("/healthz")
    def healthz(registry: RoomRegistry = Depends(get_registry)):
        return {"ok": True, "ts": datetime.now(timezone.utc).isoformat(), "rooms": len(registry)}

    # ----------------- 방 목록 ---------------------
    @app.get("/api/rooms", response_model=List[Room])
    def list_rooms(registry: RoomRegistry = Depends(get_registry)):
        return registry.list_rooms()

    # ----------------- 방 추가 ---------------------
    @app.post("/api/rooms", response_model=MessageOut, status_code=201)
    def add_room(payload: AddRoomRequest, registry: RoomRegistry = Depends(get_registry)):
        ok = registry.add_room(
            payload.room_number,
            payload.capacity,
            payload.has_ac,
            payload.has_attached_washroom,
        )
        if not ok:
            raise RoomConflictError(f"Room number {payload.room_number!r} already exists.")
        return MessageOut(message="Room added.")

    # ----------------- 조건 검색 ---------------------
    @app.get("/api/rooms/search", response_model=List[Room])
    def search_rooms(
        min_capacity: int = Query(1, alias="minCapacity"),
        needs_ac: bool = Query(False, alias="needsAC"),
        needs_washroom: bool = Query(False, alias="needsWashroom"),
        registry: RoomRegistry = Depends(get_registry),
    ):
        # 1 미만은 1로 취급
        return registry.search_rooms(max(min_capacity, 1), needs_ac, needs_washroom)

    # ----------------- 방 배정 ---------------------
    @app.post("/api/rooms/allocate", response_model=Room)
    def allocate(payload: AllocateRequest, registry: RoomRegistry = Depends(get_registry)):
        result = registry.allocate_room(payload.students, payload.needs_ac, payload.needs_washroom)
        if not result.found:
            raise RoomNotFoundError("No room available")
        return result.room

    # -----------------------------------------------------------
    # Static (web/index.html, app.js, styles.css), API 라우트 뒤에 마운트
    # -----------------------------------------------------------
    if settings.web_root.is_dir():
        app.mount("/", StaticFiles(directory=settings.web_root, html=True), name="web")
    else:
        logger.warning("Web root %s not found, static files disabled", settings.web_root.resolve())

    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings: Settings = app.state.settings
    configure_logging(settings.log_level)
    logger.info("Smart Hostel Server running on http://%s:%d", settings.host, settings.port)
    logger.info("Web root: %s", settings.web_root.resolve())
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
