"""FastAPI application exposing the pattern library registry snapshots."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..errors import AdapterError, ConfigError, PatternLibraryError
from ..persistence import (
    CATEGORIES_FILE,
    PATTERNS_FILE,
    REGISTRY_FILE,
    SEARCH_FILE,
    read_snapshot,
)
from ..pipeline import PatternLibrary


class HealthResponse(BaseModel):
    status: str


class BuildRequest(BaseModel):
    incremental: bool = False


class BuildResponse(BaseModel):
    status: str
    patterns: List[str]
    pages: int
    elapsed: float
    dest: str


def _default_library() -> PatternLibrary:
    return PatternLibrary.from_file(Path.cwd())


def create_app(
    library_factory: Callable[[], PatternLibrary] = _default_library,
) -> FastAPI:
    """Create the FastAPI application for previewing a pattern library build."""

    app = FastAPI(title="Pattern Library Service", version="1.0.0")
    state: Dict[str, Optional[PatternLibrary]] = {"library": None}

    async def get_library() -> PatternLibrary:
        # One library per app so snapshots and builds share a destination.
        if state["library"] is None:
            state["library"] = library_factory()
        return state["library"]

    def _snapshot(library: PatternLibrary, name: str) -> Any:
        payload = read_snapshot(library.config.base_dest, name)
        if payload is None:
            raise FileNotFoundError(f"{name} has not been built yet; POST /build first")
        return payload

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/patternlibrary.json")
    async def registry_snapshot(library: PatternLibrary = Depends(get_library)) -> Any:
        return _snapshot(library, REGISTRY_FILE)

    @app.get("/patterns.json")
    async def patterns_snapshot(library: PatternLibrary = Depends(get_library)) -> Any:
        return _snapshot(library, PATTERNS_FILE)

    @app.get("/categories.json")
    async def categories_snapshot(library: PatternLibrary = Depends(get_library)) -> Any:
        return _snapshot(library, CATEGORIES_FILE)

    @app.get("/search.json")
    async def search_index(library: PatternLibrary = Depends(get_library)) -> Any:
        return _snapshot(library, SEARCH_FILE)

    @app.post("/build", response_model=BuildResponse)
    async def build(
        payload: BuildRequest | None = None,
        library: PatternLibrary = Depends(get_library),
    ) -> BuildResponse:
        incremental = bool(payload and payload.incremental)
        # Builds render through shared template slots; run them on a worker thread.
        result = await asyncio.to_thread(library.run, incremental=incremental)
        return BuildResponse(
            status="ok",
            patterns=sorted(pattern.name for pattern in result.patterns),
            pages=len(result.pages),
            elapsed=round(result.elapsed, 3),
            dest=str(library.config.base_dest),
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(AdapterError)
    async def adapter_error_handler(_: Any, exc: AdapterError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "adapter": exc.adapter, "doc_file": exc.doc_file},
        )

    @app.exception_handler(PatternLibraryError)
    async def build_error_handler(_: Any, exc: PatternLibraryError) -> JSONResponse:
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    return app


def run_service(
    config_path: Path | None = None, host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    path = config_path or Path.cwd()
    app = create_app(lambda: PatternLibrary.from_file(path))
    uvicorn.run(app, host=host, port=port)
