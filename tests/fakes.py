"""
In-process fakes for the collaborator ports.
"""

from typing import Dict, List, Set

from rxworkflow.application.ports.services import (
    ClaimReversalService,
    DurService,
    InsuranceService,
    NotificationSink,
    ReversalReceipt,
    StaffDirectory,
)
from rxworkflow.core.exceptions import ExternalServiceError


class FakeStaffDirectory(StaffDirectory):
    def __init__(self, pharmacists=("RPH-1",)):
        self.pharmacists = set(pharmacists)

    async def is_pharmacist(self, actor_id):
        return actor_id in self.pharmacists


class FakeDurService(DurService):
    def __init__(self, alerts=None, overrides=None):
        self.alerts: Dict[str, List] = alerts or {}
        self.overrides: Dict[str, List[str]] = overrides or {}
        self.calls = 0

    async def get_alerts(self, prescription_id):
        self.calls += 1
        return self.alerts.get(prescription_id, [])

    async def get_override_alert_ids(self, prescription_id):
        return self.overrides.get(prescription_id, [])


class FakeInsuranceService(InsuranceService):
    def __init__(self, rejected=()):
        self.rejected = set(rejected)

    async def is_rejected(self, prescription_id):
        return prescription_id in self.rejected


class FakeClaimReversalService(ClaimReversalService):
    def __init__(self, failing: Set[str] = frozenset()):
        self.failing = set(failing)
        self.reversed: List[str] = []

    async def reverse_claim(self, bin):
        if bin.prescription_id in self.failing:
            raise ExternalServiceError("claims switch", "timeout")
        self.reversed.append(bin.bin_id)
        return ReversalReceipt(transaction_id=f"TX-{bin.prescription_id}")


class FakeNotificationSink(NotificationSink):
    def __init__(self):
        self.sent: List[str] = []

    async def send_pickup_reminder(self, bin):
        self.sent.append(bin.bin_id)
