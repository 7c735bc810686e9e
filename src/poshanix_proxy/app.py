# src/poshanix_proxy/app.py
import json
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

# Load .env before settings are read
load_dotenv()

from poshanix_proxy.core.logging import setup_logging
setup_logging()

from poshanix_proxy.adapters.dispatch import UpstreamDispatcher
from poshanix_proxy.core.config import Settings, get_settings
from poshanix_proxy.core.errors import InvalidRequestError, ProxyError
from poshanix_proxy.core.service import Reply, handle_chat, handle_ocr
from poshanix_proxy.models import (
    ChatRequest,
    ErrorResponse,
    HealthResponse,
    NutritionPayload,
    OcrRequest,
    WaitingResponse,
)

log = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

SERVICE_NAME = "poshanix-ai-proxy"

_ERROR_RESPONSES: Dict[Any, Dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Missing or invalid field"},
    500: {"model": ErrorResponse, "description": "Upstream or normalization failure"},
}


# ============================================================
# Helpers
# ============================================================

async def _read_body(request: Request) -> Dict[str, Any]:
    """Empty or non-object bodies count as {} so the handlers report the missing field."""
    raw = await request.body()
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        raise InvalidRequestError("invalid JSON body")
    return data if isinstance(data, dict) else {}


def _validate(model: Type[M], body: Dict[str, Any]) -> M:
    try:
        return model.model_validate(body)
    except ValidationError as exc:
        summary = "; ".join(
            f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors()
        )
        raise InvalidRequestError(summary)


def _render(reply: Reply) -> Response:
    if isinstance(reply, str):
        return PlainTextResponse(reply)
    return JSONResponse(reply)


def _failure_detail(exc: Exception) -> str:
    # httpx timeouts are often raised with an empty message
    return str(exc) or type(exc).__name__


def get_dispatcher(request: Request) -> UpstreamDispatcher:
    state = request.app.state
    return UpstreamDispatcher(state.settings, transport=state.transport)


async def _error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


# ============================================================
# App
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    if not settings.api_key:
        log.warning("GEMINI_API_KEY not set in environment")
    log.info(
        "AI proxy ready api_type=%s endpoint=%s",
        UpstreamDispatcher(settings).api_type.value,
        settings.endpoint or "<default>",
    )
    yield


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the proxy app. `transport` replaces the outbound HTTP transport
    (tests pass an httpx.MockTransport).
    """
    settings = settings or get_settings()

    app = FastAPI(title="Poshanix AI Proxy", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.transport = transport

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, _error_handler)

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> PlainTextResponse:
        return PlainTextResponse("Poshanix AI proxy running")

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service=SERVICE_NAME)

    @app.post(
        "/api/gemini/ocr",
        responses={
            200: {
                "content": {"text/plain": {}},
                "model": NutritionPayload,
                "description": f"Parsed nutrition JSON, plain text, or {WaitingResponse.__name__}",
            },
            **_ERROR_RESPONSES,
        },
    )
    async def ocr(request: Request, dispatcher: UpstreamDispatcher = Depends(get_dispatcher)) -> Response:
        try:
            req = _validate(OcrRequest, await _read_body(request))
            reply = await handle_ocr(req.text, dispatcher)
            return _render(reply)
        except ProxyError as exc:
            raise HTTPException(status_code=exc.status_code, detail=exc.message)
        except Exception as exc:
            log.error("ocr request failed: %r", exc, exc_info=True)
            raise HTTPException(status_code=500, detail=_failure_detail(exc))

    @app.post(
        "/api/gemini/chat",
        responses={
            200: {"content": {"text/plain": {}}, "description": "Assistant reply, JSON when the model sent JSON"},
            **_ERROR_RESPONSES,
        },
    )
    async def chat(request: Request, dispatcher: UpstreamDispatcher = Depends(get_dispatcher)) -> Response:
        try:
            req = _validate(ChatRequest, await _read_body(request))
            reply = await handle_chat(req.messages, req.message, req.user_profile, dispatcher)
            return _render(reply)
        except ProxyError as exc:
            raise HTTPException(status_code=exc.status_code, detail=exc.message)
        except Exception as exc:
            log.error("chat request failed: %r", exc, exc_info=True)
            raise HTTPException(status_code=500, detail=_failure_detail(exc))

    return app


app = create_app()
