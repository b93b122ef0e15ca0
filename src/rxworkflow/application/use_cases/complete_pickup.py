"""Complete Pickup use case."""

import logging
from typing import List, Optional

from ...core.clock import Clock, SystemClock
from ...core.structured_logger import get_logger
from ...domain.enums.workflow import WorkflowState
from ...domain.errors import PickupSessionNotFoundError, WorkflowItemNotFoundError
from ..dto.workflow_dto import CompletePickupRequest, CompletePickupResponse
from ..pickup.session import complete_pickup
from ..ports.repositories.pickup_session_repo import PickupSessionRepository
from ..ports.repositories.will_call_bin_repo import WillCallBinRepository
from ..ports.repositories.workflow_item_repo import WorkflowItemRepository
from ..will_call.bins import mark_will_call_picked_up
from ..workflow.queue import transition_state

logger = logging.getLogger("rxworkflow")
audit_logger = get_logger()


class CompletePickupUseCase:
    """Close a pickup session, mark every prescription SOLD and retire its bin.

    Every prescription in the session must be READY; otherwise nothing is
    written and one error per prescription is returned.
    """

    def __init__(
        self,
        pickup_repository: PickupSessionRepository,
        workflow_repository: WorkflowItemRepository,
        bin_repository: WillCallBinRepository,
        clock: Optional[Clock] = None,
    ):
        self._pickup_repository = pickup_repository
        self._workflow_repository = workflow_repository
        self._bin_repository = bin_repository
        self._clock = clock or SystemClock()

    async def execute(self, request: CompletePickupRequest) -> CompletePickupResponse:
        session = await self._pickup_repository.get(request.session_id)
        if session is None:
            raise PickupSessionNotFoundError(request.session_id)

        now = self._clock.now()
        result = complete_pickup(session, request.user_id, now=now)
        if not result.success:
            return CompletePickupResponse(success=False, session=session, errors=result.errors)

        # Resolve every item and bin before writing anything
        transitions = []
        bins = []
        errors: List[str] = []
        for rx in session.prescriptions:
            item = await self._workflow_repository.get_by_prescription_id(rx.prescription_id)
            if item is None:
                raise WorkflowItemNotFoundError(rx.prescription_id)
            if item.state != WorkflowState.READY:
                errors.append(f"Rx {rx.rx_number} is {item.state.value}, not ready for pickup")
                continue
            outcome = transition_state(
                item,
                WorkflowState.SOLD,
                actor_id=request.user_id,
                actor_name=request.user_name,
                reason=f"Picked up in session {session.id}",
                now=now,
            )
            transitions.append((item, outcome.item))

            bin = await self._bin_repository.find_by_prescription(rx.prescription_id)
            if bin is not None and bin.is_active:
                bins.append(bin)

        if errors:
            logger.warning("Pickup %s blocked: %s", session.id, "; ".join(errors))
            return CompletePickupResponse(success=False, session=session, errors=tuple(errors))

        saved_session = await self._pickup_repository.save(result.session, expected_version=session.version)
        sold = []
        for original, updated in transitions:
            sold.append(await self._workflow_repository.save(updated, expected_version=original.version))
        retired = []
        for bin in bins:
            picked_up = mark_will_call_picked_up(bin, request.user_id, now)
            retired.append(await self._bin_repository.save(picked_up, expected_version=bin.version))

        audit_logger.info(
            "pickup_completed",
            session_id=saved_session.id,
            patient_id=saved_session.selected_patient_id,
            prescriptions=len(saved_session.prescriptions),
            sold=len(sold),
            bins_retired=len(retired),
            user_id=request.user_id,
        )
        return CompletePickupResponse(success=True, session=saved_session, items=sold, retired_bins=retired)
