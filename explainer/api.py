"""
REST API for the concept explainer.
Thin wrappers around the shared explanation client. Stateless: each request is
independent and the inference credential never leaves the server.

Run: uvicorn explainer.api:app --reload --port 8000
"""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from explainer.config import get_settings
from explainer.errors import INVALID_BODY, ExplainerError, TransportError
from explainer.explanation import ExplanationClient, ExplanationRequest, Failure, get_client
from explainer.interaction.topics import list_topics
from explainer.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


# ---------- Lifespan ----------
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    setup_logging(settings.log_level)
    if not settings.has_api_key:
        logger.warning("GROQ_API_KEY is not set; explanation requests will fail")
    yield


# ---------- FastAPI app ----------
app = FastAPI(
    title="Concept Explainer API",
    description="Explains a concept with an LLM; single-turn and stateless",
    version="0.1.0",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------- Error handlers ----------
@app.exception_handler(ExplainerError)
async def explainer_error_handler(request: Request, exc: ExplainerError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": INVALID_BODY})


# ---------- Request models ----------
class ExplainRequest(BaseModel):
    concept: str | None = Field(default=None, description="Concept to explain, e.g. 'Binary Search'")


# ---------- Dependencies ----------
def get_explanation_client() -> ExplanationClient:
    return get_client()


def _explain(req: ExplainRequest, client: ExplanationClient) -> str:
    """Validate, call the client once, and return text. Raises ExplainerError subclasses."""
    request = ExplanationRequest.from_raw(req.concept)
    try:
        result = client.request_explanation(request.concept)
    except Exception as e:
        logger.exception("Unexpected error explaining %r", request.concept)
        raise ExplainerError(str(e)) from e
    if isinstance(result, Failure):
        raise TransportError(result.reason)
    return result.text


# ---------- Endpoints ----------
@app.post("/explain")
def explain(
    req: ExplainRequest,
    client: ExplanationClient = Depends(get_explanation_client),
) -> dict[str, Any]:
    """Explain a concept. 200 {response}; 400 on missing concept; 500 on inference failure."""
    return {"response": _explain(req, client)}


@app.post("/refresh-explain")
def refresh_explain(
    req: ExplainRequest,
    client: ExplanationClient = Depends(get_explanation_client),
) -> dict[str, Any]:
    """Same contract as /explain; the text is returned under "explanation"."""
    return {"explanation": _explain(req, client)}


@app.get("/topics")
def topics() -> dict[str, Any]:
    """Preset topics shown as shortcuts on the dashboard."""
    return {"topics": list_topics()}


@app.get("/health")
def health() -> dict[str, Any]:
    settings = get_settings()
    return {"status": "ok", "model": settings.model, "configured": settings.has_api_key}
