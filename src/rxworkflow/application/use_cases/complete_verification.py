"""Complete Verification use case."""

from typing import Optional

from ...core.clock import Clock, SystemClock
from ...core.structured_logger import get_logger
from ...domain.enums.verification import VerificationDecision
from ...domain.errors import VerificationSessionNotFoundError, WorkflowItemNotFoundError
from ..dto.workflow_dto import CompleteVerificationRequest, CompleteVerificationResponse
from ..ports.repositories.verification_session_repo import VerificationSessionRepository
from ..ports.repositories.workflow_item_repo import WorkflowItemRepository
from ..verification.session import (
    complete_verification,
    validate_verification_complete,
    workflow_target_for_decision,
)
from ..workflow.queue import transition_state

audit_logger = get_logger()


class CompleteVerificationUseCase:
    """Record the pharmacist's decision and move the prescription on.

    Approval sends the item to READY; rejection and rework send it back to
    FILLING. The session is written before the item, each with its own
    version check.
    """

    def __init__(
        self,
        verification_repository: VerificationSessionRepository,
        workflow_repository: WorkflowItemRepository,
        clock: Optional[Clock] = None,
    ):
        self._verification_repository = verification_repository
        self._workflow_repository = workflow_repository
        self._clock = clock or SystemClock()

    async def execute(self, request: CompleteVerificationRequest) -> CompleteVerificationResponse:
        session = await self._verification_repository.get(request.session_id)
        if session is None:
            raise VerificationSessionNotFoundError(request.session_id)

        item = await self._workflow_repository.get_by_prescription_id(session.prescription_id)
        if item is None:
            raise WorkflowItemNotFoundError(session.prescription_id)

        warnings = ()
        if request.decision == VerificationDecision.APPROVED:
            validation = validate_verification_complete(session, skip_pdmp=request.skip_pdmp)
            warnings = validation.warnings
            if not validation.can_complete:
                return CompleteVerificationResponse(
                    success=False,
                    session=session,
                    item=item,
                    errors=validation.errors,
                    warnings=warnings,
                )

        now = self._clock.now()
        completed = complete_verification(
            session,
            request.decision,
            notes=request.notes,
            rejection_reason=request.rejection_reason,
            now=now,
        )

        target = workflow_target_for_decision(request.decision)
        transition = transition_state(
            item,
            target,
            actor_id=session.pharmacist_id,
            actor_name=request.pharmacist_name,
            reason=request.rejection_reason or f"Verification {request.decision.value}",
            notes=request.notes,
            now=now,
        )
        if not transition.success:
            return CompleteVerificationResponse(
                success=False, session=session, item=item, errors=(transition.error,), warnings=warnings
            )

        saved_session = await self._verification_repository.save(completed, expected_version=session.version)
        saved_item = await self._workflow_repository.save(transition.item, expected_version=item.version)

        audit_logger.info(
            "verification_completed",
            session_id=saved_session.id,
            prescription_id=saved_session.prescription_id,
            decision=request.decision,
            pharmacist_id=saved_session.pharmacist_id,
            item_state=saved_item.state,
        )
        return CompleteVerificationResponse(
            success=True, session=saved_session, item=saved_item, warnings=warnings
        )
