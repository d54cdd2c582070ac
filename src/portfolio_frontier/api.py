"""HTTP service that turns portfolio facts into language-model commentary."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from typing import Any

from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from openai import OpenAI
from starlette.exceptions import HTTPException as StarletteHTTPException

from portfolio_frontier.commentary import generate_commentary_text
from portfolio_frontier.config import AppConfig

LOGGER = logging.getLogger(__name__)

ClientFactory = Callable[[str], OpenAI]


def _default_client_factory(api_key: str) -> OpenAI:
    return OpenAI(api_key=api_key)


def create_app(
    config: AppConfig | None = None,
    client_factory: ClientFactory | None = None,
) -> FastAPI:
    """Build the commentary API; ``client_factory`` maps an API key to a chat client."""
    cfg = config or AppConfig()
    factory = client_factory or _default_client_factory
    app = FastAPI(title="Portfolio Frontier Commentary")

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        LOGGER.warning("Rejected commentary request: %s", exc.errors())
        return JSONResponse(status_code=400, content={"error": "Request body must be valid JSON."})

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.post(cfg.commentary.endpoint_path)
    def commentary(facts: Any = Body(...)) -> JSONResponse:
        api_key = os.environ.get(cfg.commentary.api_key_env)
        if not api_key:
            LOGGER.error("Commentary requested but %s is not set", cfg.commentary.api_key_env)
            return JSONResponse(
                status_code=500,
                content={"error": f"Missing {cfg.commentary.api_key_env}"},
            )
        try:
            text = generate_commentary_text(facts, factory(api_key), cfg.commentary)
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("Commentary generation failed")
            return JSONResponse(status_code=500, content={"error": str(exc) or repr(exc)})
        return JSONResponse(content={"text": text})

    return app
