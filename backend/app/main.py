from fastapi import FastAPI, Request
from dotenv import load_dotenv
load_dotenv(dotenv_path="backend/.env", override=False)
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from .routers import emails, analytics
from .db.database import SessionLocal, ensure_schema
from .core.logging import init_logging
from .core.errors import NotFoundError, ValidationError, StoreError
from .services.kv_store import KVStore
from .services.email_service import count_emails
import logging, os, time, uuid

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_logging()
    ensure_schema()
    yield

app = FastAPI(title="Support Email Triage", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(emails.router, prefix="/api/emails", tags=["emails"])
app.include_router(analytics.router, prefix="/api/analytics", tags=["analytics"])


def _trace_id(request: Request) -> str:
    return getattr(request.state, "trace_id", None) or request.headers.get("X-Trace-Id", str(uuid.uuid4())[:8])

@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": "Email not found"})

@app.exception_handler(ValidationError)
async def validation_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})

@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    trace_id = _trace_id(request)
    logging.getLogger(__name__).error(
        f"store failure on {request.method} {request.url.path}: {exc}",
        extra={"trace_id": trace_id, "method": request.method, "path": request.url.path, "status": 500}
    )
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error", "trace_id": trace_id})


@app.get("/health")
def health():
    db = SessionLocal()
    try:
        total = count_emails(KVStore(db))
    finally:
        db.close()
    return {"status": "ok", "emails": total}

@app.middleware("http")
async def timing_logger(request: Request, call_next):
    trace_id = request.headers.get("X-Trace-Id", str(uuid.uuid4())[:8])
    request.state.trace_id = trace_id
    start = time.perf_counter()
    try:
        response = await call_next(request)
        duration = (time.perf_counter()-start)*1000
        logging.getLogger().info(
            f"{request.method} {request.url.path} {response.status_code} {duration:.1f}ms",
            extra={"trace_id": trace_id, "method": request.method, "path": request.url.path, "status": response.status_code, "duration_ms": round(duration,1)}
        )
        response.headers['X-Trace-Id'] = trace_id
        return response
    except Exception as exc:  # pragma: no cover
        duration = (time.perf_counter()-start)*1000
        logging.getLogger().error(
            f"ERR {request.method} {request.url.path} {type(exc).__name__}",
            exc_info=exc,
            extra={"trace_id": trace_id, "method": request.method, "path": request.url.path, "status": 500, "duration_ms": round(duration,1)}
        )
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error", "trace_id": trace_id})
