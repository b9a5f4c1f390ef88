"""HTTP surface for running pipelines."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from aria_pipeline.config import check_required_env, load_config
from aria_pipeline.errors import PipelineError
from aria_pipeline.models.pipeline_request import PipelineRequest
from aria_pipeline.orchestrator import Orchestrator


logger = logging.getLogger(__name__)


def create_app(orchestrator: Optional[Orchestrator] = None, *, config_path: Optional[Path] = None) -> FastAPI:
    """
    Builds the app. Without an orchestrator, one is built from `.env` files and the optional config file.
    Serve the returned app with any ASGI server.
    """
    if orchestrator is None:
        config = load_config(config_path)
        check_required_env(config)
        orchestrator = Orchestrator(config)
    orch: Orchestrator = orchestrator

    app = FastAPI(title="aria-pipeline")
    app.state.orchestrator = orch
    router = APIRouter(prefix="/api")

    @app.exception_handler(PipelineError)
    async def _pipeline_error_handler(request: Request, exc: PipelineError) -> JSONResponse:
        logger.error("Pipeline failed path=%s code=%s: %s", request.url.path, exc.code, exc)
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc), "code": exc.code, "step": exc.step_name},
        )

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {"status": "ok", "timestamp": int(time.time() * 1000)}

    @router.post("/pipeline")
    async def run_pipeline(body: PipelineRequest) -> JSONResponse:
        response = await orch.run_request(body)
        return JSONResponse(response.to_wire())

    app.include_router(router)
    return app
