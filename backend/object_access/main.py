"""FastAPI app: CORS, security headers, error shape, object routes."""
import logging

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from object_access.api.objects import router as objects_router
from object_access.api.responses import error_response
from object_access.core.config import get_settings
from object_access.core.deps import require_metrics_access
from object_access.core.metrics import get_metrics
from object_access.core.request_logging import RequestLoggingMiddleware
from object_access.services.validation import OBJECTS_REQUIRED

settings = get_settings()
if settings.log_json:
    for h in logging.getLogger("object_access.request").handlers[:]:
        logging.getLogger("object_access.request").removeHandler(h)
    h = logging.StreamHandler()
    h.setFormatter(logging.Formatter("%(message)s"))
    logging.getLogger("object_access.request").addHandler(h)
    logging.getLogger("object_access.request").setLevel(logging.INFO)
if settings.debug:
    logging.getLogger("object_access").setLevel(logging.DEBUG)

app = FastAPI(title=settings.app_name)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins.split(","),
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.middleware("http")
async def security_headers(request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["Referrer-Policy"] = "no-referrer"
    # Signed URLs are short-lived credentials
    response.headers["Cache-Control"] = "no-store"
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return error_response(400, OBJECTS_REQUIRED)


@app.get("/healthz")
async def healthz():
    """Liveness: no auth, no backend call."""
    return {"status": "ok"}


@app.get("/metrics", response_class=Response)
async def metrics(_: None = Depends(require_metrics_access)):
    """Prometheus metrics. Set METRICS_SECRET to require the X-Metrics-Secret header."""
    body, content_type = get_metrics()
    return Response(content=body, media_type=content_type)


# Catch-all bucket routes go last so /healthz and /metrics win
app.include_router(objects_router)
