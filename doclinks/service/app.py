"""FastAPI application entrypoint for doclinks service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, field_validator

from ..config import load_config
from ..models import RULE_COLUMNS
from ..orchestrator import DocumentResult, Orchestrator
from ..validators import LINK_INFO, LINK_TESTS


class ValidateRequest(BaseModel):
    markdown: str
    path: str = "index.md"
    ignore: List[str] = []

    @field_validator("path")
    @classmethod
    def _relative_to_root(cls, value: str) -> str:
        posix = PurePosixPath(value.replace("\\", "/"))
        if not value.strip() or posix.is_absolute() or PureWindowsPath(value).drive:
            raise ValueError("path must be relative to the service root")
        if ".." in posix.parts:
            raise ValueError("path must not contain '..'")
        return value


class IssueModel(BaseModel):
    rule: str
    message: str
    info: str
    line: Optional[int] = None


class RotModel(BaseModel):
    orig: str
    server: str
    replacement: str


class ValidateResponse(BaseModel):
    status: str
    links: List[Dict[str, Any]] = []
    issues: List[IssueModel] = []
    rot: List[RotModel] = []


class RuleModel(BaseModel):
    name: str
    template: str
    info: str


class HealthResponse(BaseModel):
    status: str


def _to_response(result: DocumentResult) -> ValidateResponse:
    if result.table is None:
        return ValidateResponse(status="empty")
    return ValidateResponse(
        status="ok" if not result.issues else "failed",
        links=result.table.to_dicts(),
        issues=[
            IssueModel(rule=issue.rule, message=issue.message, info=issue.info, line=issue.line)
            for issue in result.issues
        ],
        rot=[
            RotModel(orig=match.orig, server=match.server, replacement=match.replacement)
            for match in result.rot.rows
        ],
    )


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = Orchestrator,
    root: Path | None = None,
) -> FastAPI:
    """Create the FastAPI application exposing link validation.

    Request paths are resolved under ``root`` (the working directory by
    default), and the ``.doclinks.yml`` found there applies to every request.
    """
    service_root = (root or Path.cwd()).resolve()
    service_config = load_config(service_root)
    app = FastAPI(title="doclinks service", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/rules", response_model=List[RuleModel])
    async def rules() -> List[RuleModel]:
        return [
            RuleModel(name=name, template=LINK_TESTS[name], info=LINK_INFO[name])
            for name in RULE_COLUMNS
        ]

    @app.post("/validate", response_model=ValidateResponse)
    async def validate(
        payload: ValidateRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> ValidateResponse:
        def _run() -> DocumentResult:
            return orchestrator.validate_markdown(
                payload.markdown,
                service_root / payload.path,
                ignore=payload.ignore,
                config=orchestrator.config or service_config,
            )

        # Filesystem probes block, so keep them off the event loop.
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, _run)
        return _to_response(result)

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(
        _: Any, exc: RuntimeError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000, root: Path | None = None
) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(root=root), host=host, port=port)
