"""FastAPI HTTP server for the command relay.

Exposes the single command endpoint the browser terminal talks to,
plus a health check. Errors are turned into ``{"error": ...}`` bodies
at this boundary.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from termrelay import __version__
from termrelay.config.settings import Settings
from termrelay.domain.models import ResultType
from termrelay.errors import InvalidInput
from termrelay.llm.factory import build_model
from termrelay.relay.executor import ShellExecutor
from termrelay.relay.service import CommandRelay
from termrelay.sessions.store import SessionStore, build_preamble

logger = logging.getLogger(__name__)


class ExecuteCommandRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    command: str | None = Field(default=None, description="Command text typed by the user")
    session_id: str | None = Field(
        default=None, alias="sessionId", description="Client-generated session identifier"
    )


class ExecuteCommandResponse(BaseModel):
    output: str
    type: ResultType


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str = "ok"
    provider: str = ""
    model: str = ""
    sessions: int = 0


def build_relay(settings: Settings) -> CommandRelay:
    """Wire a CommandRelay from settings.

    Raises:
        ConfigError: If the configured provider has no API key.
    """
    store = SessionStore(
        preamble=build_preamble(settings.relay.preamble_prompt, settings.relay.preamble_ack),
        max_sessions=settings.sessions.max_sessions,
        ttl_seconds=settings.sessions.ttl_seconds,
    )
    executor = ShellExecutor(
        working_directory=settings.shell.working_directory,
        allowed_commands=settings.shell.allowed_commands,
        enabled=settings.shell.enabled,
        shell_executable=settings.shell.shell_executable,
    )
    return CommandRelay(
        store=store,
        model=build_model(settings),
        executor=executor,
        sentinel=settings.relay.sentinel,
    )


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def _describe_validation_errors(exc: RequestValidationError) -> str:
    """Summarize body validation failures as one line, e.g. ``command: Input should be a valid string``."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "Invalid request body: " + ("; ".join(parts) or "expected a JSON object")


def create_app(
    relay: CommandRelay | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        relay: Optional pre-built relay (for testing). Built from
            ``settings`` when omitted.
        settings: Service settings. Defaults are used when omitted.

    Raises:
        ConfigError: If no relay is given and the provider key is missing.
    """
    if settings is None:
        settings = Settings()
    if relay is None:
        relay = build_relay(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        r: CommandRelay = app.state.relay
        logger.info(
            "Relay started (provider=%s, model=%s)",
            r.model.provider_name, r.model.model,
        )
        yield
        logger.info("Relay stopped (%d sessions in memory)", len(r.store))

    app = FastAPI(
        title="termrelay",
        description="Chat terminal backend relaying commands to a language model",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.endpoint.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.relay = relay

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(400, _describe_validation_errors(exc))

    @app.get("/health")
    async def health_check() -> HealthResponse:
        r: CommandRelay = app.state.relay
        return HealthResponse(
            status="ok",
            provider=r.model.provider_name,
            model=r.model.model,
            sessions=len(r.store),
        )

    @app.post(
        "/execute-command",
        response_model=ExecuteCommandResponse,
        responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    async def execute_command(request: ExecuteCommandRequest) -> ExecuteCommandResponse | JSONResponse:
        r: CommandRelay = app.state.relay
        if not request.command or not request.command.strip():
            return _error(400, "Command is required")
        if not request.session_id:
            return _error(400, "sessionId is required")
        try:
            result = await r.handle(request.session_id, request.command)
        except InvalidInput as e:
            return _error(400, str(e))
        except Exception as e:
            logger.error("Gemini API error: %s", e)
            return _error(500, f"Gemini API error: {e}")
        return ExecuteCommandResponse(output=result.output, type=result.type)

    return app


def main() -> None:
    """Entry point for running the endpoint server standalone."""
    from termrelay.config.settings import load_settings
    from termrelay.utils.logging import setup_logging

    settings = load_settings()
    setup_logging(settings.logging)
    app = create_app(settings=settings)
    uvicorn.run(app, host=settings.endpoint.host, port=settings.endpoint.port)


if __name__ == "__main__":
    main()
