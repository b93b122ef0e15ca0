"""
Dependency injection container for the RxWorkflow library.

Entry points register repositories, collaborators and use case factories
here by name; the engine itself never reaches into the container.
"""

from typing import Any, Callable, Dict, Optional

from .config import Settings, get_settings
from .exceptions import ConfigurationError


class ServiceNames:
    """Registry keys used by the entry points."""

    SETTINGS = "settings"
    CLOCK = "clock"

    # Repositories
    WORKFLOW_ITEM_REPOSITORY = "workflow_item_repository"
    VERIFICATION_SESSION_REPOSITORY = "verification_session_repository"
    PICKUP_SESSION_REPOSITORY = "pickup_session_repository"
    WILL_CALL_BIN_REPOSITORY = "will_call_bin_repository"

    # Collaborators
    STAFF_DIRECTORY = "staff_directory"
    DUR_SERVICE = "dur_service"
    INSURANCE_SERVICE = "insurance_service"
    NOTIFICATION_SINK = "notification_sink"
    CLAIM_REVERSAL_SERVICE = "claim_reversal_service"

    # Use cases
    PROCESS_WILL_CALL_EXPIRATION = "process_will_call_expiration"


class Container:
    """Named registry of instances and lazily built factories.

    A factory runs on first lookup and its result replaces it, so every
    later lookup returns the same object.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self._instances: Dict[str, Any] = {ServiceNames.SETTINGS: self.settings}
        self._factories: Dict[str, Callable[[], Any]] = {}

    def register_singleton(self, name: str, instance: Any) -> None:
        self._factories.pop(name, None)
        self._instances[name] = instance

    def register_factory(self, name: str, factory: Callable[[], Any]) -> None:
        self._instances.pop(name, None)
        self._factories[name] = factory

    def get(self, name: str) -> Any:
        if name not in self._instances:
            factory = self._factories.pop(name, None)
            if factory is None:
                raise ConfigurationError(f"No service registered under '{name}'", {"service": name})
            self._instances[name] = factory()
        return self._instances[name]

    def get_or_none(self, name: str) -> Optional[Any]:
        if not self.has(name):
            return None
        return self.get(name)

    def has(self, name: str) -> bool:
        return name in self._instances or name in self._factories

    def clear(self) -> None:
        """Forget everything but the settings."""
        self._instances = {ServiceNames.SETTINGS: self.settings}
        self._factories.clear()


_container: Optional[Container] = None


def get_container() -> Container:
    """Process-wide container, created on first use."""
    global _container
    if _container is None:
        _container = Container()
    return _container


def reset_container() -> None:
    global _container
    _container = None
