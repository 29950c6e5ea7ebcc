# docnotes/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from docnotes.config import settings
from docnotes.core.db import init_db, close_db
from docnotes.core.bootstrap import ensure_default_moderator
from docnotes.core.errors import DocnotesError

from docnotes.api.v1.routers import entries, teams, users

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.APP_NAME)

# CORS (with Cookie)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DocnotesError)
async def docnotes_error_handler(request: Request, exc: DocnotesError):
    if exc.status_code >= 500:
        logger.error("[api] %s %s failed: %s", request.method, request.url.path, exc.message)
    elif exc.status_code in (401, 403):
        logger.info("[api] %s %s rejected: %s", request.method, request.url.path, exc.code)
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.to_dict()})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Malformed payloads get the same envelope as any other bad request
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid parameter: {field}" if field else "Invalid request"
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": {"code": "BAD_REQUEST", "message": message}},
    )


@app.on_event("startup")
async def on_startup():
    await init_db()
    # Ensure there's a default global moderator on first run
    await ensure_default_moderator()


@app.on_event("shutdown")
async def on_shutdown():
    await close_db()


# REST
app.include_router(users.router, prefix="/api/v1")
app.include_router(entries.router, prefix="/api/v1")
app.include_router(teams.router, prefix="/api/v1")


@app.get("/healthz")
def healthz():
    return {"ok": True}
