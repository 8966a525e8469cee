import logging
from contextlib import asynccontextmanager
from dataclasses import asdict
from logging.handlers import RotatingFileHandler

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

# Import settings first for logging configuration
from backend.app.core.config import APP_VERSION, settings as app_settings

# Configure logging based on settings
# DEBUG=true -> DEBUG level, else use LOG_LEVEL setting
log_level_str = "DEBUG" if app_settings.debug else app_settings.log_level.upper()
log_level = getattr(logging, log_level_str, logging.INFO)
log_format = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Create root logger
root_logger = logging.getLogger()
root_logger.setLevel(log_level)

# Console handler - always enabled
console_handler = logging.StreamHandler()
console_handler.setLevel(log_level)
console_handler.setFormatter(logging.Formatter(log_format))
root_logger.addHandler(console_handler)

# File handler - only in production or if explicitly enabled
if app_settings.log_to_file:
    app_settings.log_dir.mkdir(exist_ok=True)
    log_file = app_settings.log_dir / "filament_profiles.log"
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=5 * 1024 * 1024,  # 5MB
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(logging.Formatter(log_format))
    root_logger.addHandler(file_handler)
    logging.info("Logging to file: %s", log_file)

# Reduce noise from third-party libraries in production
if not app_settings.debug:
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.WARNING)

logging.info("%s starting - debug=%s, log_level=%s", app_settings.app_name, app_settings.debug, log_level_str)

from backend.app.api.routes import auth, lookups, profiles, protected  # noqa: E402
from backend.app.core.auth import ProtectedPathMiddleware  # noqa: E402
from backend.app.core.database import Database  # noqa: E402
from backend.app.core.errors import AuthorizationError, StorageError, ValidationError  # noqa: E402
from backend.app.core.invalidation import ViewInvalidator  # noqa: E402

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    database = Database(
        app_settings.database_url,
        echo=app_settings.debug,
        seed_lookups=app_settings.seed_lookups,
    )
    await database.open()
    app.state.database = database

    yield

    # Shutdown
    await database.close()
    logger.info("Database connections closed")


app = FastAPI(
    title=app_settings.app_name,
    description="Catalogue and share 3D printer filament profiles",
    version=APP_VERSION,
    lifespan=lifespan,
)
app.state.invalidator = ViewInvalidator()

app.add_middleware(ProtectedPathMiddleware, prefixes=app_settings.protected_paths)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=400,
        content={"detail": exc.message, "errors": [asdict(e) for e in exc.errors]},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(part) for part in error["loc"][1:]) or str(error["loc"][0]), "message": error["msg"]}
        for error in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"detail": "Invalid request", "errors": errors})


@app.exception_handler(AuthorizationError)
async def authorization_error_handler(request: Request, exc: AuthorizationError):
    return JSONResponse(status_code=403, content={"detail": str(exc)})


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    # The cause was logged where it was raised; only the generic message leaves the server
    return JSONResponse(status_code=500, content={"detail": str(exc)})


# API routes
app.include_router(profiles.router, prefix=app_settings.api_prefix)
app.include_router(lookups.router, prefix=app_settings.api_prefix)
app.include_router(auth.router, prefix=app_settings.api_prefix)
app.include_router(protected.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
