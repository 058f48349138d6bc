import logging
import sys
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError as SettingsValidationError
from pydantic_settings import SettingsError

from rep_deployer.config import Settings, get_settings
from rep_deployer.infrastructure.bridge_client import BridgeClient
from rep_deployer.infrastructure.security import RevokedSessions
from rep_deployer.infrastructure.target_registry import TargetRegistry
from rep_deployer.infrastructure.tls import relax_certificate_warnings
from rep_deployer.infrastructure.upload_ledger import UploadLedger
from rep_deployer.interfaces.api.errors import register_exception_handlers
from rep_deployer.interfaces.api.routes import register_routes
from rep_deployer.logging_config import setup_logging
from rep_deployer.server import find_available_port

logger = logging.getLogger("rep_deployer.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the configured targets on startup."""

    registry: TargetRegistry = app.state.registry
    logger.info("Available Bridge servers: %d", len(registry))
    for position, target in enumerate(registry.list(), start=1):
        logger.info("  %d. %s - %s", position, target.name, target.base_url)
    yield


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Each application owns its upload ledger, target registry and the set
    of sessions revoked by logout.
    """

    if settings is None:
        settings = get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(title="Rep Deployer", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.ledger = UploadLedger()
    app.state.registry = TargetRegistry(settings.deployment_targets())
    app.state.bridge_client = BridgeClient(
        request_timeout=settings.deploy_request_timeout_seconds,
        token_timeout=settings.identity_request_timeout_seconds,
    )
    app.state.revoked_sessions = RevokedSessions()
    app.state.started_at = time.monotonic()
    relax_certificate_warnings(
        [("Keycloak " + settings.keycloak_url, settings.keycloak_verify_certificates)]
        + [(target.name, target.verify_certificates) for target in app.state.registry.list()]
    )

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)
    register_routes(app)
    return app


def load_settings_or_exit() -> Settings:
    """Return the settings or terminate the process with a readable message."""

    try:
        return get_settings()
    except (SettingsValidationError, SettingsError) as exc:
        setup_logging()
        logger.error(
            "Invalid configuration. Set `session_secret` in config or the SESSION_SECRET "
            "environment variable and check the Bridge server list.\n%s",
            exc,
        )
        raise SystemExit(1) from exc


def run() -> None:
    """Start uvicorn, moving to the next port when the configured one is busy."""

    import uvicorn

    settings = load_settings_or_exit()
    port = find_available_port(settings.host, settings.port, settings.port_retry_limit)
    if port is None:
        logger.error(
            "Unable to find a free port after %d attempts. Set the PORT environment "
            "variable to an open port.",
            settings.port_retry_limit,
        )
        sys.exit(1)

    app = create_app(settings)
    logger.info("Rep Deployer running on http://localhost:%d", port)
    uvicorn.run(app, host=settings.host, port=port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
