import asyncio
import logging
from typing import Optional

from ..application.dto.workflow_dto import ProcessWillCallExpirationResponse
from ..application.use_cases.process_will_call_expiration import ProcessWillCallExpirationUseCase
from ..core.config import WillCallSettings, get_settings

logger = logging.getLogger("rxworkflow")

MIN_INTERVAL_SECONDS = 30


async def sweep_once(use_case: ProcessWillCallExpirationUseCase) -> ProcessWillCallExpirationResponse:
    """
    Perform a single pass over the active will-call bins.
    """
    response = await use_case.execute()

    for failure in response.errors:
        logger.warning(
            "[WillCallSweeper] %s failed for bin=%s: %s",
            failure.action,
            failure.bin_id,
            failure.error,
        )

    logger.info(
        "[WillCallSweeper] Sweep done reversed=%d reminded=%d returned=%d retired=%d failures=%d",
        len(response.reversed),
        len(response.reminded),
        len(response.returned_items),
        len(response.retired),
        len(response.errors),
    )
    return response


async def run_will_call_sweeper_forever(
    use_case: ProcessWillCallExpirationUseCase,
    settings: Optional[WillCallSettings] = None,
    stop_event: Optional[asyncio.Event] = None,
) -> None:
    """
    Run the will-call sweeper in a loop, controlled by WillCallSettings.
    """
    settings = settings or get_settings().will_call
    if not settings.sweeper_enabled:
        logger.info("[WillCallSweeper] Disabled via WILL_CALL_SWEEPER_ENABLED")
        return

    interval = max(MIN_INTERVAL_SECONDS, settings.sweeper_interval_seconds)
    stop_event = stop_event or asyncio.Event()

    logger.info(
        "[WillCallSweeper] Starting (interval=%ss, return_days=%s, reminder_days_before=%s)",
        interval,
        settings.return_days,
        settings.reminder_days_before,
    )

    while not stop_event.is_set():
        try:
            await sweep_once(use_case)
        except Exception as e:  # noqa: PERF203
            logger.error("[WillCallSweeper] Sweep iteration failed: %s", e, exc_info=True)
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=interval)
        except asyncio.TimeoutError:
            pass

    logger.info("[WillCallSweeper] Stopped")
