"""
Application Factory

Creates and configures Flask application with all dependencies.
This factory pattern improves testability by allowing dependency injection
and configuration overrides.
"""

import logging
import os
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS

from filegate.api.auth import PRINCIPAL_HEADER
from filegate.application import (
    DependencyContainer,
    DownloadService,
    EventPublisher,
    FileService,
    OrphanSweeper,
)
from filegate.config.celery_config import make_celery
from filegate.config.file_config import FileConfig
from filegate.config.redis_config import RedisStores, connect_stores, redis_health_check
from filegate.domain.access import DownloadAuthorizer, LinkSigner
from filegate.domain.file_storage import IObjectStorage, QuotaLedger
from filegate.domain.identity import PrincipalRepository
from filegate.infrastructure.event_handlers import LoggingEventHandler
from filegate.infrastructure.storage_factory import StorageFactory

logger = logging.getLogger(__name__)


class AppConfig:
    """Application configuration."""

    def __init__(self):
        self.api_version = os.getenv("API_VERSION", "v1")
        self.flask_env = os.getenv("FLASK_ENV", "development")
        self.is_production = self.flask_env == "production"
        self.celery_enabled = os.getenv("CELERY_ENABLED", "true").lower() == "true"
        self.orphan_min_age_seconds = int(os.getenv("ORPHAN_MIN_AGE_SECONDS", 3600))
        self.files = FileConfig()


def create_app(
    config: Optional[AppConfig] = None,
    container: Optional[DependencyContainer] = None,
) -> Flask:
    """
    Create and configure Flask application.

    Args:
        config: Application configuration, uses default if None
        container: Pre-built dependency container; skips Redis and service
            initialization when given (used by tests)

    Returns:
        Configured Flask application
    """
    if config is None:
        config = AppConfig()

    app = Flask(__name__)

    CORS(
        app,
        resources={
            r"/*": {
                "origins": "*",
                "methods": ["GET", "POST", "DELETE", "OPTIONS"],
                "allow_headers": ["Content-Type", "Authorization", PRINCIPAL_HEADER],
                "expose_headers": ["Content-Type", "Content-Disposition"],
                "max_age": 3600,
            }
        },
    )

    if container is None:
        stores = _initialize_infrastructure(app, config)
        _initialize_services(app, config, stores)
    else:
        app.celery = None
        app.container = container

    _register_blueprints(app, config)
    _register_health_endpoint(app)

    return app


def _initialize_infrastructure(app: Flask, config: AppConfig) -> RedisStores:
    """
    Initialize infrastructure components (Redis, Celery).

    Args:
        app: Flask application
        config: Application configuration

    Returns:
        Redis-backed identity store and audit trail
    """
    stores = connect_stores()
    logger.info("Redis initialized")

    app.celery = None
    if not config.celery_enabled:
        logger.info("Celery disabled - orphan sweep will not run")
        return stores

    try:
        app.celery = make_celery(app)
        logger.info("Celery initialized")
    except Exception as e:
        logger.warning(f"Could not initialize Celery: {e}")

    return stores


def _initialize_services(app: Flask, config: AppConfig, stores: RedisStores) -> None:
    """
    Build services and attach them to the app through a DependencyContainer.

    All services are registered as singletons and resolved via
    ``container.resolve()`` in API handlers and tasks.

    Args:
        app: Flask application
        config: Application configuration
        stores: Redis-backed stores from _initialize_infrastructure
    """
    container = DependencyContainer()
    file_config = config.files

    principal_repository = stores.principals
    container.register_singleton(PrincipalRepository, principal_repository)

    link_signer = LinkSigner(file_config.secret)
    container.register_singleton(LinkSigner, link_signer)

    storage = StorageFactory.create_storage(file_config, link_signer)
    container.register_singleton(IObjectStorage, storage)

    event_publisher = EventPublisher()
    container.setup_event_handlers(
        event_publisher,
        [
            LoggingEventHandler(logging.getLogger("filegate.events")),
            stores.audit,
        ],
    )
    container.register_singleton(EventPublisher, event_publisher)

    quota_ledger = QuotaLedger(file_config.quota_policy())
    container.register_singleton(QuotaLedger, quota_ledger)

    file_service = FileService(
        principal_repository,
        storage,
        quota_ledger,
        event_publisher=event_publisher,
        consistency=file_config.ledger_consistency,
        delete_workers=file_config.delete_workers,
    )
    container.register_singleton(FileService, file_service)

    download_service = DownloadService(
        DownloadAuthorizer(principal_repository),
        storage,
        link_signer,
        event_publisher=event_publisher,
    )
    container.register_singleton(DownloadService, download_service)

    sweeper = OrphanSweeper(
        principal_repository, storage, min_age_seconds=config.orphan_min_age_seconds
    )
    container.register_singleton(OrphanSweeper, sweeper)

    app.container = container
    logger.info(
        f"Application services initialized: {', '.join(container.registered())}; "
        f"ledger consistency '{file_config.ledger_consistency}'"
    )


def _register_blueprints(app: Flask, config: AppConfig) -> None:
    from filegate.api.v1 import api_v1_bp

    app.register_blueprint(api_v1_bp)

    logger.info(
        f"API {config.api_version} registered at /api/{config.api_version} "
        f"with Swagger UI at /api/{config.api_version}/docs"
    )


def _get_health_status(app: Flask) -> tuple[dict, int]:
    """
    Get health status of all system components.

    Args:
        app: Flask application instance

    Returns:
        Tuple of (health_status_dict, http_status_code)
    """
    health_status = {
        "status": "ok",
        "message": "backend ready",
        "redis": "unknown",
        "celery": "unknown",
    }

    try:
        if redis_health_check():
            health_status["redis"] = "connected"
        else:
            health_status["redis"] = "disconnected"
            health_status["status"] = "degraded"
    except Exception as e:
        health_status["redis"] = f"error: {str(e)}"
        health_status["status"] = "degraded"

    # Celery only runs the orphan sweep; requests are served without it
    if getattr(app, "celery", None) is not None:
        health_status["celery"] = "available"
    else:
        health_status["celery"] = "unavailable"

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code


def _register_health_endpoint(app: Flask) -> None:
    @app.route("/health", methods=["GET"])
    def health():
        """
        Health check endpoint.
        Returns overall health status of the application and its dependencies.
        """
        health_status, status_code = _get_health_status(app)
        return jsonify(health_status), status_code
