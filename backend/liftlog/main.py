# liftlog/main.py
import time
import logging
import uuid
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from liftlog.routers.workouts import router as workouts_router
from liftlog.routers.sets import router as sets_router
from liftlog.routers.exercises import router as exercises_router
from liftlog.db import SessionLocal  # for healthz DB check
from liftlog.repositories.base import Unauthenticated
from liftlog.settings import get_settings

log = logging.getLogger("uvicorn")
settings = get_settings()
logging.getLogger("liftlog").setLevel(settings.LOG_LEVEL.upper())

app = FastAPI(
    title="Liftlog API",
    openapi_tags=[
        {"name": "workouts", "description": "Workouts by calendar date"},
        {"name": "sets", "description": "Exercises within a workout and their sets"},
        {"name": "exercises", "description": "Shared exercise catalog"},
    ],
)


# CORS (relax for local dev; tighten origins in prod via env)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def add_request_id_and_log(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Request-ID"] = req_id
    log.info("rid=%s %s %s -> %s in %.1fms",
             req_id, request.method, request.url.path, response.status_code, duration_ms)
    return response


def _first_error_message(errors) -> str:
    if not errors:
        return "Invalid request"
    err = errors[0]
    loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
    msg = err.get("msg", "invalid value").removeprefix("Value error, ")
    return f"{'.'.join(loc)}: {msg}" if loc else msg

@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    # one actionable message (first violated rule) plus the full list
    errors = exc.errors()
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": _first_error_message(errors), "errors": jsonable_encoder(errors)},
    )

@app.exception_handler(Unauthenticated)
async def unauthenticated(request: Request, exc: Unauthenticated):
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": "Not authenticated"},
        headers={"WWW-Authenticate": "Bearer"},
    )

@app.exception_handler(IntegrityError)
async def integrity_error(request: Request, exc: IntegrityError):
    log.warning("constraint violation on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": "Constraint violation"})

@app.exception_handler(SQLAlchemyError)
async def storage_error(request: Request, exc: SQLAlchemyError):
    # session is rolled back when get_db closes it; keep internals out of the body
    log.exception("storage failure on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": "Storage failure"})

@app.get("/")
def root():
    return {"ok": True, "name": "Liftlog API"}

@app.get("/ping")
def ping():
    return {"pong": True}

@app.get("/healthz")
def healthz():
    # Quick DB sanity check
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
        return {"status": "ok"}
    except Exception as e:
        return {"status": "degraded", "error": str(e)}

@app.get("/version")
def version():
    return {"version": settings.API_VERSION}

# Routers
app.include_router(workouts_router)
app.include_router(sets_router)
app.include_router(exercises_router)
