import logging
import os

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from db.session import dispose_engine, init_engine
from routers.influencers import router as influencers_router

# --------------------------------------------------
# LOGGING
# --------------------------------------------------
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)


# --------------------------------------------------
# APP
# --------------------------------------------------
app = FastAPI(
    title="Influencer Insights API",
    version="1.0.0",
    swagger_ui_parameters={
        "displayRequestDuration": True,
    },
)

# --------------------------------------------------
# DB LIFECYCLE
# --------------------------------------------------
@app.on_event("startup")
def _open_db():
    try:
        init_engine()
    except Exception:
        logger.exception("DB init failed")


@app.on_event("shutdown")
def _close_db():
    dispose_engine()


# --------------------------------------------------
# CORS
# --------------------------------------------------
def _allowed_origins() -> list[str]:
    raw = os.getenv("CORS_ALLOW_ORIGINS", "*")
    origins = [item.strip() for item in raw.split(",") if item.strip()]
    return origins or ["*"]


app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins(),
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
)


# --------------------------------------------------
# ERRORS
# --------------------------------------------------
@app.exception_handler(StarletteHTTPException)
async def _http_error(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        return JSONResponse(
            status_code=405,
            content={"error": "Method not allowed"},
            headers=getattr(exc, "headers", None),
        )
    if exc.status_code >= 500:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": "Internal server error"},
        )
    return await http_exception_handler(request, exc)


@app.exception_handler(Exception)
async def _unhandled_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# --------------------------------------------------
# ROUTERS
# --------------------------------------------------
app.include_router(influencers_router)

# --------------------------------------------------
# HEALTH CHECK
# --------------------------------------------------
@app.get("/health")
def health():
    return {"status": "ok"}
