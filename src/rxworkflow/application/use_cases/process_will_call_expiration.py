"""Process Will-Call Expiration use case.

Bins past their return date get their claim reversed and their workflow
item moved to RETURNED_TO_STOCK; bins nearing it get a pickup reminder.
A failure on one bin is recorded and the sweep moves on.

The reversal is saved on the bin before the item moves, and the bin is
stamped ``returned_to_stock_at`` only after the item has moved. Each sweep
first finishes reversed bins that were never stamped, so a failed item save
is retried without reversing the claim a second time.
"""

import logging
from datetime import datetime
from typing import Optional

from ...core.clock import Clock, SystemClock
from ...core.config import WillCallSettings
from ...core.exceptions import ConcurrentModificationError, InfrastructureError
from ...core.structured_logger import get_logger
from ...domain.entities.will_call import WillCallBin
from ...domain.entities.workflow_item import WorkflowItem
from ...domain.enums.workflow import WorkflowState
from ..dto.workflow_dto import ProcessWillCallExpirationResponse, WillCallFailure
from ..ports.repositories.will_call_bin_repo import WillCallBinRepository
from ..ports.repositories.workflow_item_repo import WorkflowItemRepository
from ..ports.services.claim_reversal_service import ClaimReversalService
from ..ports.services.notification_service import NotificationSink
from ..will_call.bins import (
    mark_reminder_sent,
    mark_returned_to_stock,
    mark_will_call_picked_up,
    mark_will_call_reversed,
    process_will_call_expiration,
)
from ..workflow.queue import transition_state

logger = logging.getLogger("rxworkflow")
audit_logger = get_logger()

SWEEPER_ACTOR_ID = "will-call-sweeper"
SWEEPER_ACTOR_NAME = "Will-Call Sweeper"

# Item states in which the claim may still be reversed
REVERSIBLE_STATES = frozenset({WorkflowState.READY, WorkflowState.RETURNED_TO_STOCK})


class ProcessWillCallExpirationUseCase:
    def __init__(
        self,
        bin_repository: WillCallBinRepository,
        claim_reversal_service: ClaimReversalService,
        notification_sink: NotificationSink,
        workflow_repository: Optional[WorkflowItemRepository] = None,
        settings: Optional[WillCallSettings] = None,
        clock: Optional[Clock] = None,
    ):
        self._bin_repository = bin_repository
        self._claim_reversal_service = claim_reversal_service
        self._notification_sink = notification_sink
        self._workflow_repository = workflow_repository
        self._settings = settings or WillCallSettings()
        self._clock = clock or SystemClock()

    async def _find_item(self, bin: WillCallBin) -> Optional[WorkflowItem]:
        if self._workflow_repository is None:
            return None
        return await self._workflow_repository.get_by_prescription_id(bin.prescription_id)

    async def _return_to_stock(
        self, bin: WillCallBin, now: datetime, response: ProcessWillCallExpirationResponse
    ) -> None:
        try:
            item = await self._find_item(bin)
            if item is not None and item.state == WorkflowState.READY:
                outcome = transition_state(
                    item,
                    WorkflowState.RETURNED_TO_STOCK,
                    actor_id=SWEEPER_ACTOR_ID,
                    actor_name=SWEEPER_ACTOR_NAME,
                    reason=f"Not picked up; returned from bin {bin.bin_location}",
                    now=now,
                )
                saved = await self._workflow_repository.save(outcome.item, expected_version=item.version)
                response.returned_items.append(saved)
            elif item is not None and item.state != WorkflowState.RETURNED_TO_STOCK:
                logger.info(
                    "Will-call bin %s: prescription %s is %s, leaving it in place",
                    bin.bin_id,
                    bin.prescription_id,
                    item.state.value,
                )
            await self._bin_repository.save(mark_returned_to_stock(bin, now), expected_version=bin.version)
        except (InfrastructureError, ConcurrentModificationError) as e:
            logger.error("Return to stock failed for bin %s: %s", bin.bin_id, e)
            response.errors.append(WillCallFailure(bin_id=bin.bin_id, action="return_to_stock", error=str(e)))

    async def _reverse(self, bin: WillCallBin, now: datetime, response: ProcessWillCallExpirationResponse) -> None:
        try:
            item = await self._find_item(bin)
            if item is not None and item.state == WorkflowState.SOLD:
                logger.warning(
                    "Will-call bin %s: prescription %s was already sold; retiring the bin",
                    bin.bin_id,
                    bin.prescription_id,
                )
                retired = mark_will_call_picked_up(bin, SWEEPER_ACTOR_ID, now)
                response.retired.append(await self._bin_repository.save(retired, expected_version=bin.version))
                return
            if item is not None and item.state not in REVERSIBLE_STATES:
                logger.warning(
                    "Will-call bin %s: prescription %s is %s, not reversing its claim",
                    bin.bin_id,
                    bin.prescription_id,
                    item.state.value,
                )
                response.skipped.append(bin)
                return

            receipt = await self._claim_reversal_service.reverse_claim(bin)
            reversed_bin = mark_will_call_reversed(
                bin, SWEEPER_ACTOR_ID, transaction_id=receipt.transaction_id, now=now
            )
            saved = await self._bin_repository.save(reversed_bin, expected_version=bin.version)
        except (InfrastructureError, ConcurrentModificationError) as e:
            logger.error("Will-call reversal failed for bin %s: %s", bin.bin_id, e)
            response.errors.append(WillCallFailure(bin_id=bin.bin_id, action="reverse", error=str(e)))
            return

        response.reversed.append(saved)
        await self._return_to_stock(saved, now, response)

    async def execute(self) -> ProcessWillCallExpirationResponse:
        now = self._clock.now()
        response = ProcessWillCallExpirationResponse()

        unfinished = await self._bin_repository.list_awaiting_restock()
        for bin in unfinished:
            await self._return_to_stock(bin, now, response)

        bins = await self._bin_repository.list_active()
        classified = process_will_call_expiration(
            bins,
            send_reminders=self._settings.send_reminders,
            reminder_days_before=self._settings.reminder_days_before,
            reminder_catch_up=self._settings.reminder_catch_up,
            now=now,
        )
        audit_logger.info(
            "will_call_bins_classified",
            active=len(bins),
            awaiting_restock=len(unfinished),
            to_reverse=len(classified.to_reverse),
            to_notify=len(classified.to_notify),
        )

        for bin in classified.to_reverse:
            await self._reverse(bin, now, response)

        for bin in classified.to_notify:
            try:
                await self._notification_sink.send_pickup_reminder(bin)
                saved = await self._bin_repository.save(mark_reminder_sent(bin, now), expected_version=bin.version)
                response.reminded.append(saved)
            except (InfrastructureError, ConcurrentModificationError) as e:
                logger.error("Pickup reminder failed for bin %s: %s", bin.bin_id, e)
                response.errors.append(WillCallFailure(bin_id=bin.bin_id, action="remind", error=str(e)))

        audit_logger.info(
            "will_call_sweep_finished",
            reversed=len(response.reversed),
            reminded=len(response.reminded),
            returned_items=len(response.returned_items),
            retired=len(response.retired),
            skipped=len(response.skipped),
            failures=len(response.errors),
        )
        return response
