"""Main entry point for MindMate"""
import logging
import asyncio
from typing import Optional
from mindmate.config import validate_config, LOG_LEVEL, ENABLE_METRICS, METRICS_PORT
from mindmate.db.connection import db
from mindmate.db.store import PostgresWellnessStore
from mindmate.observability.metrics import start_metrics_server
from mindmate.observability.sentry_config import init_sentry, shutdown_sentry
from mindmate.services.container import ServiceContainer, init_container

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """Configure root logging"""
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, LOG_LEVEL.upper())
    )


async def startup() -> ServiceContainer:
    """Validate config, start observability and open the database pool"""
    logger.info("Validating configuration...")
    validate_config()

    if init_sentry():
        logger.info("Sentry error tracking enabled")

    if ENABLE_METRICS:
        start_metrics_server(METRICS_PORT)

    logger.info("Initializing database connection pool...")
    await db.init_pool()

    return init_container(PostgresWellnessStore())


async def shutdown(container: Optional[ServiceContainer] = None) -> None:
    """Cancel pending work and release resources"""
    if container is not None:
        await container.aclose()

    logger.info("Closing database connection...")
    await db.close_pool()

    shutdown_sentry()
    logger.info("Shutdown complete")


async def main() -> None:
    """Main application entry point"""
    container = None
    try:
        container = await startup()
        logger.info("MindMate core is ready. Press Ctrl+C to stop.")

        # Keep running until interrupted
        await asyncio.Event().wait()

    except KeyboardInterrupt:
        logger.info("Shutting down...")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
    finally:
        await shutdown(container)


if __name__ == "__main__":
    setup_logging()
    asyncio.run(main())
