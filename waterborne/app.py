# --- imports (top of waterborne/app.py) ---
import json
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from waterborne import __version__, settings
from waterborne.middleware.rate_limit import limiter
from waterborne.middleware.tracing import TRACE_ID_CTX_VAR, TracingMiddleware
from waterborne.routes import analysis_routes, chat_routes, knowledge_routes
from waterborne.services.knowledge_base import get_knowledge_base
from waterborne.services.localization import get_localizer
from waterborne.utils.exceptions import (
    handle_http_exception,
    handle_rate_limit,
    handle_unhandled_exception,
    handle_validation_error,
)


# --- logging setup ---
class JsonFormatter(logging.Formatter):
    def format(self, record):  # type: ignore[override]
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "function": record.funcName,
            "message": record.msg if isinstance(record.msg, dict) else record.getMessage(),
        }
        trace_id = TRACE_ID_CTX_VAR.get()
        if trace_id:
            payload["trace_id"] = trace_id
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging() -> logging.Logger:
    logger = logging.getLogger("waterborne")
    logger.setLevel(getattr(logging, settings.LOG_LEVEL, logging.INFO))
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        if settings.JSON_LOGS:
            handler.setFormatter(JsonFormatter())
        else:
            handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    return logger


logger = configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Fail fast: a ConfigurationError here stops the service from starting.
    kb = get_knowledge_base()
    get_localizer()
    logger.info({"function": "startup", **kb.summary()})
    yield


# --- app setup ---
app = FastAPI(title="Jal-Rakshak Waterborne Disease Assistant", version=__version__, lifespan=lifespan)

app.state.limiter = limiter
app.add_middleware(TracingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["x-trace-id"],
)

app.add_exception_handler(RateLimitExceeded, handle_rate_limit)
app.add_exception_handler(StarletteHTTPException, handle_http_exception)
app.add_exception_handler(RequestValidationError, handle_validation_error)
app.add_exception_handler(Exception, handle_unhandled_exception)


@app.get("/api/health")
def health():
    return {"status": "ok", "version": __version__, "knowledge_base": get_knowledge_base().summary()}


app.include_router(analysis_routes.router)
app.include_router(chat_routes.router)
app.include_router(knowledge_routes.router)
