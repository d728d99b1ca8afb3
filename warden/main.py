"""FastAPI application entrypoint. No business logic; only wiring, middleware and error rendering."""

import logging
from typing import Any

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from warden.api.v1 import router as v1_router
from warden.core.config import settings
from warden.core.errors import AccessDeniedError

# asctime is local time; %z records its offset.
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt=LOG_DATEFMT,
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Warden API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_body(code: str, message: str, **extra: Any) -> dict[str, Any]:
    return {"ok": False, "code": code, "message": message, **extra}


@app.exception_handler(AccessDeniedError)
async def access_denied_handler(_request: Request, exc: AccessDeniedError) -> JSONResponse:
    """401 for authentication failures, 403 for authorization failures."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.code.value, exc.message),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Field-level issues without echoing submitted values (they may be passwords)."""
    issues = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        message = str(err.get("msg", "Invalid value")).removeprefix("Value error, ")
        issues.append({"path": loc, "message": message})
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("validation_error", "Invalid input", issues=issues),
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTPException (including unknown routes) in the standard envelope."""
    if isinstance(exc.detail, dict):
        detail = dict(exc.detail)
        code = str(detail.pop("code", "error"))
        message = str(detail.pop("message", "Error"))
        body = _error_body(code, message, **detail)
    elif exc.status_code == status.HTTP_404_NOT_FOUND:
        body = _error_body("not_found", "Not found")
    else:
        body = _error_body("error", str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the failure server-side; the client only sees a generic message."""
    logger.exception(
        "Unhandled error", extra={"path": request.url.path, "method": request.method}
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body("server_error", "Server error"),
    )


app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Warden API"}
