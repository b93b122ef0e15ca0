import asyncio
import logging
import signal

from rxworkflow.adapters.db.mongo import MongoRepositories, build_mongo_repositories
from rxworkflow.adapters.services import LoggingNotificationSink, ManualClaimReversalService
from rxworkflow.application.use_cases import ProcessWillCallExpirationUseCase
from rxworkflow.core.config import get_settings
from rxworkflow.core.container import Container, ServiceNames, get_container
from rxworkflow.core.structured_logger import configure_logging
from rxworkflow.workers.will_call_sweeper import run_will_call_sweeper_forever

logger = logging.getLogger("rxworkflow")


async def _init_db(settings) -> MongoRepositories:
    """Initialize MongoDB repositories for the sweeper."""
    repositories = build_mongo_repositories(settings.database)
    await repositories.ensure_indexes()
    return repositories


def register_defaults(container: Container, repositories: MongoRepositories) -> None:
    """Wire repositories and fall back to local collaborators when none are registered."""
    settings = container.settings
    container.register_singleton(ServiceNames.WORKFLOW_ITEM_REPOSITORY, repositories.workflow_items)
    container.register_singleton(ServiceNames.WILL_CALL_BIN_REPOSITORY, repositories.will_call_bins)
    if not container.has(ServiceNames.NOTIFICATION_SINK):
        container.register_singleton(ServiceNames.NOTIFICATION_SINK, LoggingNotificationSink(settings.pharmacy_name))
    if not container.has(ServiceNames.CLAIM_REVERSAL_SERVICE):
        container.register_singleton(ServiceNames.CLAIM_REVERSAL_SERVICE, ManualClaimReversalService())
    container.register_factory(
        ServiceNames.PROCESS_WILL_CALL_EXPIRATION,
        lambda: ProcessWillCallExpirationUseCase(
            bin_repository=container.get(ServiceNames.WILL_CALL_BIN_REPOSITORY),
            claim_reversal_service=container.get(ServiceNames.CLAIM_REVERSAL_SERVICE),
            notification_sink=container.get(ServiceNames.NOTIFICATION_SINK),
            workflow_repository=container.get(ServiceNames.WORKFLOW_ITEM_REPOSITORY),
            settings=settings.will_call,
        ),
    )


async def main() -> None:
    """
    Entry point for the will-call expiration sweeper.

    Run as a separate process:
        PYTHONPATH=./src python3 sweeper_startup.py
    """
    settings = get_settings()
    configure_logging(settings.logging)
    if not settings.will_call.sweeper_enabled:
        logger.info("Will-call sweeper is disabled. Set WILL_CALL_SWEEPER_ENABLED=true to enable.")
        return

    logger.info("Starting will-call sweeper...")
    logger.info(
        "Sweeper config: db=%s, interval=%ss, return_days=%s, reminders=%s",
        settings.database.db_name,
        settings.will_call.sweeper_interval_seconds,
        settings.will_call.return_days,
        settings.will_call.send_reminders,
    )

    repositories = await _init_db(settings)
    container = get_container()
    register_defaults(container, repositories)

    stop_event = asyncio.Event()

    def _signal_handler() -> None:
        logger.info("Shutdown signal received for sweeper, stopping gracefully...")
        stop_event.set()

    loop = asyncio.get_running_loop()
    if hasattr(signal, "SIGTERM"):
        loop.add_signal_handler(signal.SIGTERM, _signal_handler)
    if hasattr(signal, "SIGINT"):
        loop.add_signal_handler(signal.SIGINT, _signal_handler)

    try:
        await run_will_call_sweeper_forever(
            container.get(ServiceNames.PROCESS_WILL_CALL_EXPIRATION),
            settings=settings.will_call,
            stop_event=stop_event,
        )
    finally:
        repositories.close()
        logger.info("Sweeper MongoDB client closed.")


if __name__ == "__main__":
    asyncio.run(main())
