"""
Factories for workflow test data.
"""

from datetime import date, datetime, timezone
from decimal import Decimal

from rxworkflow.application.pickup.session import create_pickup_session
from rxworkflow.application.will_call.bins import create_will_call_bin
from rxworkflow.domain.entities.pickup import (
    PatientMatch,
    PickupPrescription,
    RetailPickupSearch,
)
from rxworkflow.domain.entities.verification import DurAlert
from rxworkflow.domain.entities.will_call import WillCallBin
from rxworkflow.domain.entities.workflow_item import WorkflowItem
from rxworkflow.domain.enums.pickup import PickupSessionType
from rxworkflow.domain.enums.verification import DurSeverity
from rxworkflow.domain.enums.workflow import WorkflowPriority, WorkflowState

NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


def make_item(
    state: WorkflowState = WorkflowState.INTAKE,
    priority: WorkflowPriority = WorkflowPriority.NORMAL,
    created_at: datetime = NOW,
    **attributes,
) -> WorkflowItem:
    prescription_id = attributes.pop("prescription_id", "RX-1001")
    return WorkflowItem.create(
        prescription_id=prescription_id,
        rx_number=attributes.pop("rx_number", "6001234"),
        patient_id=attributes.pop("patient_id", "PAT-1"),
        patient_name=attributes.pop("patient_name", "Jane Smith"),
        drug_name=attributes.pop("drug_name", "Lisinopril"),
        quantity=attributes.pop("quantity", 30),
        priority=priority,
        state=state,
        now=created_at,
        **attributes,
    )


def make_alert(alert_id: str = "DUR-1", severity: DurSeverity = DurSeverity.HIGH, **kwargs) -> DurAlert:
    return DurAlert(id=alert_id, severity=severity, message=kwargs.pop("message", "Interaction"), **kwargs)


def make_prescription(
    prescription_id: str = "RX-1001",
    barcode: str = "BAG-1001",
    **kwargs,
) -> PickupPrescription:
    return PickupPrescription(
        prescription_id=prescription_id,
        rx_number=kwargs.pop("rx_number", "6001234"),
        drug_name=kwargs.pop("drug_name", "Lisinopril"),
        quantity=kwargs.pop("quantity", 30),
        barcode=barcode,
        **kwargs,
    )


def make_patient(**kwargs) -> PatientMatch:
    return PatientMatch(
        patient_id=kwargs.pop("patient_id", "PAT-1"),
        first_name=kwargs.pop("first_name", "Jane"),
        last_name=kwargs.pop("last_name", "Smith"),
        date_of_birth=kwargs.pop("date_of_birth", date(1980, 5, 17)),
        match_score=kwargs.pop("match_score", 90),
        last_pickup_date=kwargs.pop("last_pickup_date", datetime(2024, 1, 2, tzinfo=timezone.utc)),
        **kwargs,
    )


def make_pickup_session(now: datetime = NOW):
    search = RetailPickupSearch(first_name_chars="Ja", last_name_chars="Sm", date_of_birth="05/17/1980")
    return create_pickup_session(PickupSessionType.RETAIL, search, "TECH-1", station_id="REG-1", now=now)


def make_bin(placed_at: datetime = NOW, return_days: int = 10, **kwargs) -> WillCallBin:
    bin = create_will_call_bin(
        make_prescription(
            prescription_id=kwargs.pop("prescription_id", "RX-1001"),
            copay_amount=Decimal("5.00"),
        ),
        patient_id="PAT-1",
        patient_name="Jane Smith",
        bin_location=kwargs.pop("bin_location", "A-12"),
        return_days=return_days,
        now=placed_at,
    )
    return bin.with_changes(**kwargs) if kwargs else bin
