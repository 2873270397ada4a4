import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from db import Base, engine
from errors import ProblemServiceError

# Routers
from routers.health import router as health_router
from routers.problems import router as problems_router

logger = logging.getLogger("problem-service")
logging.basicConfig(level=logging.INFO)

STATIC_DIR = Path(__file__).resolve().parent / "static"

app = FastAPI(title="Primary 5 Maths – Word Problem API")

# CORS: explicit origins from env, falling back to the local Next.js dev server
_env_origins = os.getenv("FRONTEND_ORIGIN", "").strip()
_origins = [o.strip() for o in _env_origins.split(",") if o.strip()] or [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# dev/SQLite convenience; deployed databases are managed by `alembic upgrade head`
if os.getenv("AUTO_CREATE_TABLES", "1").lower() in ("1", "true", "yes"):
    Base.metadata.create_all(bind=engine)


@app.exception_handler(ProblemServiceError)
def handle_service_error(request: Request, exc: ProblemServiceError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s: %s", request.method, request.url.path, type(exc).__name__, exc)
    else:
        logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
def handle_request_validation(request: Request, exc: RequestValidationError):
    # malformed bodies are a client error, same as missing fields
    errs = exc.errors()
    detail = errs[0].get("msg", "Invalid request") if errs else "Invalid request"
    logger.warning("%s %s -> 400: %s", request.method, request.url.path, detail)
    return JSONResponse(status_code=400, content={"error": f"Invalid request: {detail}"})


@app.exception_handler(Exception)
def handle_unexpected(request: Request, exc: Exception):
    logger.exception("%s %s failed unexpectedly", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/")
def health_root():
    return {"ok": True}


# Register routers
app.include_router(problems_router)  # /problem, /problem/{id}, /problem/submit, ...
app.include_router(health_router)  # /health/...

# Browser UI; keeps its own list of session ids in localStorage
app.mount("/app", StaticFiles(directory=STATIC_DIR, html=True), name="app")
