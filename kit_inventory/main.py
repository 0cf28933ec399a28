# main.py
from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi import Request
import json
import logging
import os

from kit_inventory.routers import inspection_router, editor_router, request_router
from kit_inventory.database import init_db
from kit_inventory.exceptions import RemoteError
from kit_inventory.services.dashboard import Dashboard, get_dashboard
from kit_inventory.utils import envelope, error_resp, is_envelope, success_resp


# Initialize database
init_db()

app = FastAPI(
    title="First Aid Inventory API",
    version="1.0.0",
    description="First-aid kit inspection inventory and restock requests",
)

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(inspection_router.router)
app.include_router(editor_router.router)
app.include_router(request_router.router)

logger = logging.getLogger("uvicorn.error")


# Uniform response middleware: wrap JSON responses in the required envelope
class UniformResponseMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        try:
            response = await call_next(request)

            # Don't wrap docs or openapi
            path = request.url.path
            if path.startswith("/docs") or path.startswith("/redoc") or path.startswith("/openapi"):
                return response

            content_type = response.headers.get("content-type", "")
            if "application/json" not in content_type:
                return response

            # Responses coming back through call_next are streamed; read the body once
            body_bytes = b"".join([chunk async for chunk in response.body_iterator])
            headers = {k: v for k, v in response.headers.items() if k.lower() != "content-length"}
            try:
                body = json.loads(body_bytes.decode()) if body_bytes else None
            except ValueError:
                return Response(content=body_bytes, status_code=response.status_code, headers=headers)

            # If already in uniform format, return as-is
            if is_envelope(body):
                return JSONResponse(content=body, status_code=response.status_code, headers=headers)

            # Wrap the original body as data
            return JSONResponse(content=envelope(True, "Operation successful", body), status_code=response.status_code, headers=headers)

        except Exception:
            logger.exception("Error in UniformResponseMiddleware")
            return error_resp("Internal server error", 500)


# attach middleware
app.add_middleware(UniformResponseMiddleware)


# Exception handlers to return uniform error shape
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # exc.detail may be dict or str
    msg = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return error_resp(msg or "Error", exc.status_code, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in exc.errors()]
    return error_resp("Invalid request", 422, {"errors": errors})


@app.exception_handler(RemoteError)
async def remote_error_handler(request: Request, exc: RemoteError):
    logger.error("Store error: %s", exc)
    return error_resp(f"Store error: {exc.detail}", 502)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    return error_resp("Internal server error", 500)


@app.get("/")
def root():
    return {"message": "First Aid Inventory API is running"}


@app.get("/health")
def health_check():
    return {"status": "healthy"}


@app.get("/api/notification")
def get_notification(dashboard: Dashboard = Depends(get_dashboard)):
    return success_resp("Dashboard status", dashboard.as_dict())
