import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from stk_relay.config import configure_logging, get_settings
from stk_relay.database import init_db
from stk_relay.providers.factory import build_provider
from stk_relay.schemas.responses import HealthResponse

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    # Raises ConfigurationError when DATABASE_URL is missing
    init_db(settings)
    app.state.provider = build_provider(settings)
    yield
    await app.state.provider.aclose()


app = FastAPI(
    title="STK Relay",
    description="Relays mobile-money STK push payment requests to Lipia and records each transaction",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected malformed request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Invalid request body"},
    )


@app.get("/", include_in_schema=False)
def index():
    return FileResponse(STATIC_DIR / "index.html")


@app.get("/health", response_model=HealthResponse)
def health_check():
    return HealthResponse(status="OK", timestamp=datetime.now(timezone.utc).isoformat())


from stk_relay.routers import callbacks, payments  # noqa: E402
app.include_router(payments.router, tags=["payments"])
app.include_router(callbacks.router, tags=["callbacks"])
