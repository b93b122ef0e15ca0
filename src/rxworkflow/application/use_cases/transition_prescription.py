"""Transition Prescription use case.

Loads the workflow item, gathers the guard facts from the staff directory,
DUR and insurance collaborators, validates, applies and saves with a
version check. Rule rejections come back in the response; collaborator and
storage failures propagate.
"""

from typing import Optional

from ...core.clock import Clock, SystemClock
from ...core.exceptions import ConcurrentModificationError
from ...core.structured_logger import get_logger
from ...domain.enums.workflow import WorkflowState
from ...domain.errors import WorkflowItemNotFoundError
from ..dto.workflow_dto import TransitionPrescriptionRequest, TransitionPrescriptionResponse
from ..ports.repositories.workflow_item_repo import WorkflowItemRepository
from ..ports.services.dur_service import DurService
from ..ports.services.insurance_service import InsuranceService
from ..ports.services.staff_directory import StaffDirectory
from ..workflow.queue import transition_state
from ..workflow.transition_validator import (
    TransitionGuards,
    build_guards,
    validate_state_transition,
)

audit_logger = get_logger()


class TransitionPrescriptionUseCase:
    """Use case for moving one prescription through the workflow graph."""

    def __init__(
        self,
        workflow_repository: WorkflowItemRepository,
        staff_directory: StaffDirectory,
        dur_service: DurService,
        insurance_service: InsuranceService,
        clock: Optional[Clock] = None,
    ):
        self._workflow_repository = workflow_repository
        self._staff_directory = staff_directory
        self._dur_service = dur_service
        self._insurance_service = insurance_service
        self._clock = clock or SystemClock()

    async def _gather_guards(self, prescription_id: str, actor_id: str, target: WorkflowState) -> TransitionGuards:
        is_pharmacist = await self._staff_directory.is_pharmacist(actor_id)
        # DUR and claim status only gate the move into filling
        if target != WorkflowState.FILLING:
            return TransitionGuards(is_pharmacist=is_pharmacist)

        alerts = await self._dur_service.get_alerts(prescription_id)
        overrides = await self._dur_service.get_override_alert_ids(prescription_id)
        insurance_rejected = await self._insurance_service.is_rejected(prescription_id)
        return build_guards(
            is_pharmacist=is_pharmacist,
            dur_alerts=alerts,
            dur_overrides=overrides,
            insurance_rejected=insurance_rejected,
        )

    async def execute(self, request: TransitionPrescriptionRequest) -> TransitionPrescriptionResponse:
        """Execute the transition.

        Raises:
            WorkflowItemNotFoundError: no item with ``request.item_id``.
            ConcurrentModificationError: the item changed since it was loaded.
            InfrastructureError: a collaborator or the store failed.
        """
        item = await self._workflow_repository.get(request.item_id)
        if item is None:
            raise WorkflowItemNotFoundError(request.item_id)

        guards = await self._gather_guards(item.prescription_id, request.actor_id, request.to_state)
        validation = validate_state_transition(item.state, request.to_state, guards)
        if not validation.success:
            audit_logger.info(
                "transition_rejected",
                item_id=item.id,
                from_state=item.state,
                to_state=request.to_state,
                actor_id=request.actor_id,
                error=validation.error,
            )
            return TransitionPrescriptionResponse(success=False, item=item, error=validation.error)

        result = transition_state(
            item,
            request.to_state,
            actor_id=request.actor_id,
            actor_name=request.actor_name,
            reason=request.reason,
            notes=request.notes,
            now=self._clock.now(),
        )
        if not result.success:
            return TransitionPrescriptionResponse(success=False, item=item, error=result.error)

        try:
            saved = await self._workflow_repository.save(result.item, expected_version=item.version)
        except ConcurrentModificationError:
            audit_logger.warning(
                "transition_conflict",
                item_id=item.id,
                expected_version=item.version,
                to_state=request.to_state,
            )
            raise

        audit_logger.info(
            "transition_applied",
            item_id=saved.id,
            from_state=item.state,
            to_state=saved.state,
            actor_id=request.actor_id,
            version=saved.version,
        )
        return TransitionPrescriptionResponse(success=True, item=saved, state_change=result.state_change)
