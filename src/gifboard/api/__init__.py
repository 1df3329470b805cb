from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..core.errors import InvalidArgument, RegistryError
from ..core.registry import REGISTRY, RegistryStore
from .routes import mount_registries_api
from .serializers import error_to_json

logger = logging.getLogger(__name__)


def create_api_app(store: RegistryStore | None = None) -> FastAPI:
    store = store if store is not None else REGISTRY

    app = FastAPI(title="gifboard", version="0.1.0")
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RegistryError)
    async def _registry_error(request: Request, exc: RegistryError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc.detail)
        return JSONResponse(status_code=exc.status_code, content=error_to_json(exc))

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', 'invalid')}" for err in exc.errors()
        )
        err = InvalidArgument(problems or "Invalid request")
        return JSONResponse(status_code=err.status_code, content=error_to_json(err))

    mount_registries_api(app, store)

    @app.get("/healthz")
    def healthz() -> dict[str, bool]:
        return {"ok": True}

    @app.get("/api/events")
    def events() -> dict[str, int]:
        # Minimal polling endpoint.
        return {"globalRevision": store.global_revision()}

    return app
