import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.config import settings
from app.core.database import Base, engine
from app.core.errors import AppError, StoreUnavailable
from app.models.user import User  # noqa: F401
from app.models.group import Group  # noqa: F401
from app.models.membership import GroupMember  # noqa: F401
from app.models.invite import GroupInvite  # noqa: F401
from app.models.message import Message  # noqa: F401
from app.models.task import Task  # noqa: F401
from app.schemas.common import ErrorBody, ErrorEnvelope

from app.api.routes.users import router as users_router
from app.api.routes.groups import router as groups_router
from app.api.routes.messages import router as messages_router
from app.api.routes.tasks import router as tasks_router

from app.web.dev import router as dev_router

# ✅ SSE
from app.realtime.sse import router as sse_router

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%SZ"

# asctime en UTC, acorde al sufijo Z
logging.Formatter.converter = time.gmtime
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format=LOG_FORMAT,
    datefmt=LOG_DATEFMT,
)
logger = logging.getLogger(__name__)


Base.metadata.create_all(bind=engine)

app = FastAPI(title="Group Board API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    allow_credentials=True,
)


def _error(status_code: int, kind: str, detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorEnvelope(error=ErrorBody(kind=kind, detail=detail)).model_dump(),
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return _error(exc.status_code, exc.kind, exc.detail)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    detail = f"{field}: {first.get('msg', 'invalid')}" if field else "Petición inválida"
    return _error(400, "validation", detail)


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    # carrera contra una restricción única (invitación duplicada, login simultáneo)
    logger.warning("Integrity conflict on %s %s: %s", request.method, request.url.path, exc.orig)
    return _error(400, "validation", "Conflicto con datos existentes")


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Store failure on %s %s", request.method, request.url.path)
    err = StoreUnavailable("Base de datos no disponible")
    return _error(err.status_code, err.kind, err.detail)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return _error(500, "unexpected", "Internal server error")
    return _error(500, "unexpected", str(exc))


app.include_router(users_router, prefix="/api")
app.include_router(groups_router, prefix="/api")
app.include_router(messages_router, prefix="/api")
app.include_router(tasks_router, prefix="/api")

# ✅ SSE
app.include_router(sse_router, prefix="/api")

app.include_router(dev_router)


@app.get("/")
def root():
    return {"status": "ok", "message": "Group Board API funcionando"}


@app.get("/health")
def health():
    return {"ok": True}
