# prompt_receiver/app.py
import time
import datetime
from typing import Optional, Dict, Any

# Load .env BEFORE any package imports (they read env vars at import time)
from dotenv import load_dotenv
load_dotenv(override=True)

from fastapi import FastAPI, Request, Path, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response, PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field

from prompt_receiver import monitoring
from prompt_receiver.errors import (
    InvalidInput, E_INVALID_INPUT, E_NOT_FOUND, E_INVALID_ACTION, E_INTERNAL,
)
from prompt_receiver.service import PromptService
from prompt_receiver.templates import template_names

app = FastAPI(title="Prompt Receiver API")

# instantiate the service (and its store) once
service = PromptService()

# Prompts are pushed from anywhere
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


# ---------------------------------------------------------------------------
# Metrics middleware
# ---------------------------------------------------------------------------
def _route_label(request: Request) -> str:
    # route template, not the raw path: ids would make one series per prompt
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    start = time.time()
    method = request.method
    status = "500"
    try:
        response = await call_next(request)
        status = str(response.status_code)
        return response
    except Exception:
        monitoring.logger.exception("Unhandled exception in request", extra={"path": request.url.path})
        raise
    finally:
        monitoring.observe_request(start, _route_label(request), method, status)


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------
class ReceiveRequest(BaseModel):
    prompt: Optional[str] = None
    text: Optional[str] = None

    def prompt_text(self) -> Optional[str]:
        """First non-blank of `prompt` and `text`; otherwise whatever `prompt` held."""
        for value in (self.prompt, self.text):
            if value is not None and value.strip():
                return value
        return self.prompt if self.prompt is not None else self.text


class PromptActionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    action: Optional[str] = None
    prompt_id: Optional[int] = Field(default=None, alias="promptId")


class GenerateRequest(BaseModel):
    prompt: Optional[str] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _now_iso() -> str:
    return datetime.datetime.utcnow().isoformat() + "Z"


def _error(status_code: int, error_code: str, message: str, **details) -> JSONResponse:
    content: Dict[str, Any] = {
        "status": "error",
        "error_code": error_code,
        "message": message,
        "timestamp": _now_iso(),
    }
    content.update(details)
    return JSONResponse(status_code=status_code, content=content)


def _internal_error(e: Exception) -> JSONResponse:
    return _error(500, E_INTERNAL, "Internal server error", details={"exception": str(e)})


def _request_metadata(request: Request) -> Dict[str, Any]:
    headers = request.headers
    ip = headers.get("x-forwarded-for") or headers.get("x-real-ip")
    if not ip and request.client is not None:
        ip = request.client.host
    return {
        "method": request.method,
        "user_agent": headers.get("user-agent", "unknown"),
        "content_type": headers.get("content-type", "unknown"),
        "ip": ip or "unknown",
    }


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------
@app.get("/api/receive")
def receiver_status():
    return {
        "status": "success",
        "message": "Prompt receiver is running",
        "timestamp": _now_iso(),
        "endpoints": {
            "POST /api/receive": "Send a prompt in the request body",
            "GET /api/receive": "This status endpoint",
            "GET /api/get-latest-prompt": "Get the latest received prompt",
            "GET /api/prompts": "List prompts with stats",
            "POST /api/prompts": "mark_processed | clear_all",
            "GET /api/ui/latest": "Display template for the latest prompt",
            "POST /api/generate-with-v0": "Generate a component for a prompt",
        },
        "templates": template_names(),
        "stats": service.stats(),
    }


@app.post("/api/receive")
def receive_prompt(req: ReceiveRequest, request: Request):
    """
    POST /api/receive
    Body: { "prompt": "..." }   ("text" is accepted as an alias)
    """
    text = req.prompt_text()
    monitoring.logger.info("Received /api/receive request", extra={"prompt_preview": (text[:200] if text else "")})
    try:
        resp = service.ingest(text, metadata=_request_metadata(request))
        return JSONResponse(status_code=200, content=resp)
    except InvalidInput as e:
        return _error(400, E_INVALID_INPUT, str(e))
    except Exception as e:
        monitoring.logger.exception("Unexpected error in /api/receive handler")
        return _internal_error(e)


@app.get("/api/get-latest-prompt")
def get_latest_prompt():
    latest = service.latest()
    if latest is None:
        return {
            "status": "success",
            "prompt": None,
            "message": "No prompts received yet",
            "timestamp": _now_iso(),
        }
    return {
        "status": "success",
        "prompt": latest.text,
        "id": latest.id,
        "timestamp": latest.received_at,
        "processed": latest.processed,
    }


@app.get("/api/prompts")
def list_prompts(
    limit: int = Query(10, ge=0),
    offset: int = Query(0, ge=0),
    processed: Optional[bool] = None,
    search: Optional[str] = None,
):
    resp = service.list_prompts(limit=limit, offset=offset, processed=processed, search=search)
    resp["timestamp"] = _now_iso()
    return resp


@app.post("/api/prompts")
def prompt_action(req: PromptActionRequest):
    """
    POST /api/prompts
    Body: { "action": "mark_processed", "promptId": 123 } | { "action": "clear_all" }
    """
    if req.action == "mark_processed" and req.prompt_id is not None:
        prompt = service.mark_processed(req.prompt_id)
        if prompt is None:
            return _error(404, E_NOT_FOUND, "Prompt not found", prompt_id=req.prompt_id)
        return {
            "status": "success",
            "message": "Prompt marked as processed",
            "prompt": service.prompt_out(prompt),
            "timestamp": _now_iso(),
        }

    if req.action == "clear_all":
        cleared = service.clear_all()
        return {
            "status": "success",
            "message": f"Cleared {cleared} prompts",
            "cleared_count": cleared,
            "timestamp": _now_iso(),
        }

    return _error(400, E_INVALID_ACTION, "Invalid action", valid_actions=["mark_processed", "clear_all"])


@app.get("/api/prompts/{prompt_id}")
def get_prompt(prompt_id: int = Path(..., description="Prompt id to fetch")):
    prompt = service.get(prompt_id)
    if prompt is None:
        return _error(404, E_NOT_FOUND, "Prompt not found", prompt_id=prompt_id)
    return {"status": "success", "prompt": service.prompt_out(prompt)}


@app.get("/api/ui/latest")
def render_latest():
    latest = service.latest()
    if latest is None:
        return {"status": "success", "ui": None, "message": "No prompts received yet"}
    return service.render(latest)


@app.get("/api/ui/{prompt_id}")
def render_prompt(prompt_id: int = Path(..., description="Prompt id to render")):
    prompt = service.get(prompt_id)
    if prompt is None:
        return _error(404, E_NOT_FOUND, "Prompt not found", prompt_id=prompt_id)
    return service.render(prompt)


@app.post("/api/generate-with-v0")
def generate_with_v0(req: GenerateRequest):
    """
    POST /api/generate-with-v0
    Body: { "prompt": "..." }
    Upstream failures fall back to a canned component; the response is still a success.
    """
    try:
        resp = service.generate(req.prompt)
        return JSONResponse(status_code=200, content=resp)
    except InvalidInput as e:
        return _error(400, E_INVALID_INPUT, str(e))
    except Exception as e:
        monitoring.logger.exception("Unexpected error in /api/generate-with-v0 handler")
        return _internal_error(e)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/metrics")
async def metrics():
    if not monitoring.PROMETHEUS_ENABLED:
        return PlainTextResponse("Prometheus disabled", status_code=404)
    payload, content_type = monitoring.prometheus_metrics_response()
    return Response(content=payload, media_type=content_type)
