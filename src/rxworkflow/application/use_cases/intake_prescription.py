"""Queue a newly received prescription."""

from typing import Optional

from ...core.clock import Clock, SystemClock
from ...core.config import QueueSettings
from ...core.structured_logger import get_logger
from ...domain.entities.workflow_item import WorkflowItem
from ...domain.enums.workflow import WorkflowPriority, WorkflowState
from ..dto.workflow_dto import IntakePrescriptionRequest
from ..ports.repositories.workflow_item_repo import WorkflowItemRepository
from ..workflow.queue import calculate_promise_time

audit_logger = get_logger()


class IntakePrescriptionUseCase:
    """Create the workflow item for a prescription and stamp its promise time."""

    def __init__(
        self,
        workflow_repository: WorkflowItemRepository,
        queue_settings: Optional[QueueSettings] = None,
        clock: Optional[Clock] = None,
    ):
        self._workflow_repository = workflow_repository
        self._queue_settings = queue_settings or QueueSettings()
        self._clock = clock or SystemClock()

    async def execute(self, request: IntakePrescriptionRequest) -> WorkflowItem:
        now = self._clock.now()
        base_minutes = {
            WorkflowPriority(priority): minutes
            for priority, minutes in self._queue_settings.promise_minutes().items()
        }
        promise_time = calculate_promise_time(
            request.priority, WorkflowState.INTAKE, from_time=now, base_minutes=base_minutes
        )

        item = WorkflowItem.create(
            prescription_id=request.prescription_id,
            rx_number=request.rx_number,
            patient_id=request.patient_id,
            patient_name=request.patient_name,
            drug_name=request.drug_name,
            quantity=request.quantity,
            priority=request.priority,
            now=now,
            patient_dob=request.patient_dob,
            strength=request.strength,
            days_supply=request.days_supply,
            directions=request.directions,
            promise_time=promise_time,
            is_controlled=request.is_controlled,
            dea_schedule=request.dea_schedule,
            requires_counseling=request.requires_counseling,
        )
        stored = await self._workflow_repository.add(item)

        audit_logger.info(
            "prescription_queued",
            item_id=stored.id,
            prescription_id=stored.prescription_id,
            priority=stored.priority,
            promise_time=stored.promise_time,
        )
        return stored
