import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent
ENV_PATH = BASE_DIR / ".env"

# Load env before the db/config modules read it at import time
load_dotenv(ENV_PATH)

from fastapi import FastAPI  # noqa: E402
from fastapi.exceptions import RequestValidationError  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from slowapi.errors import RateLimitExceeded  # noqa: E402
from slowapi.middleware import SlowAPIMiddleware  # noqa: E402
from starlette.exceptions import HTTPException as StarletteHTTPException  # noqa: E402

from dental_intake.middleware.tracing import TracingMiddleware, TRACE_ID_CTX_VAR  # noqa: E402
from dental_intake.models import init_db  # noqa: E402
from dental_intake.routes import (  # noqa: E402
    catalog_routes,
    diagnosis_routes,
    lead_routes,
    second_opinion_routes,
    wizard_routes,
)
from dental_intake.services.catalog import load_catalog  # noqa: E402
from dental_intake.utils.exceptions import (  # noqa: E402
    handle_http_exception,
    handle_rate_limit,
    handle_unhandled_exception,
    handle_validation_error,
)
from dental_intake.utils.limiter import limiter  # noqa: E402

DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"
CORS_ORIGINS = [
    o.strip() for o in (os.getenv("CORS_ORIGINS") or DEFAULT_CORS_ORIGINS).split(",") if o.strip()
]


# --- logging setup ---
class JsonFormatter(logging.Formatter):
    def format(self, record):  # type: ignore[override]
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "function": record.funcName,
            "message": record.getMessage(),
        }
        trace_id = TRACE_ID_CTX_VAR.get()
        if trace_id:
            payload["trace_id"] = trace_id
        return json.dumps(payload, ensure_ascii=False)


def configure_logging() -> logging.Logger:
    logger = logging.getLogger("dental_intake")
    logger.setLevel(logging.INFO)
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    return logger


logger = configure_logging()

app = FastAPI(title="Dental Intake Backend", version="0.1.0")

# ---- Rate limiting (slowapi) ----
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(TracingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---- Error envelope ----
app.add_exception_handler(StarletteHTTPException, handle_http_exception)
app.add_exception_handler(RequestValidationError, handle_validation_error)
app.add_exception_handler(RateLimitExceeded, handle_rate_limit)
app.add_exception_handler(Exception, handle_unhandled_exception)


@app.on_event("startup")
def _startup():
    init_db()
    catalog = load_catalog()
    logger.info({"function": "startup", "catalog_version": catalog.version, "cors_origins": CORS_ORIGINS})


@app.get("/api/health")
def health():
    return {"status": "ok"}


app.include_router(catalog_routes.router)
app.include_router(diagnosis_routes.router)
app.include_router(wizard_routes.router)
app.include_router(lead_routes.router)
app.include_router(second_opinion_routes.router)
