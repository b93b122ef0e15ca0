"""
Service container and local collaborator tests.
"""

import pytest

from rxworkflow.adapters.services import LoggingNotificationSink, ManualClaimReversalService
from rxworkflow.core.config import Settings
from rxworkflow.core.container import Container, ServiceNames, get_container, reset_container
from rxworkflow.core.exceptions import ConfigurationError

from factories import make_bin


@pytest.fixture(autouse=True)
def _fresh_container():
    reset_container()
    yield
    reset_container()


def test_settings_are_registered():
    settings = Settings()
    container = Container(settings)
    assert container.get(ServiceNames.SETTINGS) is settings


def test_factory_result_is_cached():
    container = Container(Settings())
    created = []
    container.register_factory(ServiceNames.NOTIFICATION_SINK, lambda: created.append(1) or LoggingNotificationSink())

    first = container.get(ServiceNames.NOTIFICATION_SINK)
    assert container.get(ServiceNames.NOTIFICATION_SINK) is first
    assert created == [1]


def test_missing_service():
    container = Container(Settings())
    with pytest.raises(ConfigurationError):
        container.get(ServiceNames.DUR_SERVICE)
    assert container.get_or_none(ServiceNames.DUR_SERVICE) is None
    assert not container.has(ServiceNames.DUR_SERVICE)


def test_clear_keeps_settings():
    container = Container(Settings())
    container.register_singleton(ServiceNames.CLAIM_REVERSAL_SERVICE, ManualClaimReversalService())
    container.clear()
    assert not container.has(ServiceNames.CLAIM_REVERSAL_SERVICE)
    assert container.has(ServiceNames.SETTINGS)


def test_global_container_is_shared():
    assert get_container() is get_container()


def test_reminder_message():
    sink = LoggingNotificationSink("Main Street Pharmacy")
    message = sink.format_message(make_bin())
    assert message == (
        "Main Street Pharmacy: your prescription 6001234 (Lisinopril) is ready. "
        "Please pick it up within 10 day(s) or it will be returned to stock."
    )


async def test_manual_reversal_has_no_transaction_id(caplog):
    receipt = await ManualClaimReversalService().reverse_claim(make_bin())
    assert receipt.transaction_id is None
    assert "Manual claim reversal required for Rx 6001234" in caplog.text
