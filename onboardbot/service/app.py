"""FastAPI application entrypoint for the onboardbot web front end."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, ConfigDict, Field

from .. import APP_NAME, __version__
from ..collectors import analyze_repository, fetch_learning_resources, gather_team_context
from ..logging import get_logger
from ..models import to_payload
from ..prompting.builder import synthesis_payload
from ..prompting.constants import DEFAULT_NEW_HIRE_NAME
from ..session import DemoSession, Session, SessionError
from ..templates import render_guide_markdown

_logger = get_logger("service")


class GenerateRequest(BaseModel):
    owner: str = Field(min_length=1)
    repo: str = Field(min_length=1)
    team: Optional[str] = None
    name: Optional[str] = None


class GenerateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    analysis: Dict[str, Any]
    learning_resources: List[Dict[str, Any]] = Field(alias="learningResources")
    team_context: Dict[str, Any] = Field(alias="teamContext")
    guide: str


class HealthResponse(BaseModel):
    status: str


async def build_demo_payload(session: Session, payload: GenerateRequest) -> GenerateResponse:
    """Run the collectors against ``session`` and render the guide locally.

    Nothing is written to disk; the rendered Markdown is returned inline.
    """
    team_name = payload.team or payload.repo
    new_hire_name = payload.name or DEFAULT_NEW_HIRE_NAME
    full_name = f"{payload.owner}/{payload.repo}"

    analysis = await analyze_repository(session, payload.owner, payload.repo)
    resources = await fetch_learning_resources(session, analysis.tech_stack)
    team = await gather_team_context(session, team_name, full_name)
    guide = render_guide_markdown(
        payload.owner,
        payload.repo,
        new_hire_name,
        synthesis_payload(analysis, resources, team),
    )
    return GenerateResponse(
        analysis=to_payload(analysis),
        learning_resources=to_payload(resources),
        team_context=to_payload(team),
        guide=guide,
    )


def create_app(
    session_factory: Callable[[], Session] = DemoSession,
    static_dir: Path | None = None,
) -> FastAPI:
    """Create the FastAPI application serving the demo API and optional static UI."""
    app = FastAPI(title=f"{APP_NAME} Web UI", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    async def get_session() -> Session:
        # A fresh session per request keeps demo state isolated.
        return session_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/api/generate", response_model=GenerateResponse)
    async def generate(
        payload: GenerateRequest,
        session: Session = Depends(get_session),
    ) -> GenerateResponse:
        _logger.info("Generating demo guide for %s/%s", payload.owner, payload.repo)
        try:
            return await build_demo_payload(session, payload)
        finally:
            await session.close()

    @app.exception_handler(SessionError)
    async def session_error_handler(_: Any, exc: SessionError) -> JSONResponse:
        return JSONResponse(status_code=502, content={"error": str(exc)})

    if static_dir is not None:
        if static_dir.is_dir():
            app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")
        else:
            _logger.warning("Static directory %s does not exist; serving the API only", static_dir)

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 3000, static_dir: Path | None = None
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(static_dir=static_dir)
    _logger.info("Dashboard: http://%s:%d  API: http://%s:%d/api/generate", host, port, host, port)
    uvicorn.run(app, host=host, port=port)


__all__ = [
    "GenerateRequest",
    "GenerateResponse",
    "HealthResponse",
    "build_demo_payload",
    "create_app",
    "run_service",
]
