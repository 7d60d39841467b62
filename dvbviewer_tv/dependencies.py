"""
Dependency Injection Configuration

Holds the backend proxy and the live TV service for the running application.
Routes resolve the service through FastAPI dependencies, so tests can register
an adapter built on a fake proxy instead of the HTTP one.
"""
import logging
from typing import Any, TypeVar

from dvbviewer_tv.config import Settings
from dvbviewer_tv.services.backend_proxy import BackendProxy
from dvbviewer_tv.services.dvbviewer_tv_service import DVBViewerTvService
from dvbviewer_tv.services.live_tv_service import LiveTvService
from dvbviewer_tv.services.recording_service_proxy import RecordingServiceProxy


logger = logging.getLogger(__name__)

T = TypeVar('T')


class ServiceLocator:
    """
    Simple service locator for managing application services.

    Provides a centralized place to access configured services throughout the application.
    """

    def __init__(self):
        """Initialize the service locator."""
        self._singletons: dict[type, Any] = {}

    def register_singleton(self, service_type: type[T], instance: T) -> None:
        """
        Register a singleton service instance.

        Args:
            service_type: The service interface/type
            instance: The concrete instance to use
        """
        self._singletons[service_type] = instance
        logger.debug(f"Registered singleton: {service_type.__name__}")

    def get(self, service_type: type[T]) -> T:
        """
        Get a service instance.

        Raises:
            KeyError: If service type is not registered
        """
        if service_type in self._singletons:
            return self._singletons[service_type]
        raise KeyError(f"Service {service_type.__name__} not registered in container")

    def is_registered(self, service_type: type) -> bool:
        return service_type in self._singletons

    def reset(self) -> None:
        """Reset all registered services (mainly for testing)."""
        self._singletons = {}
        logger.debug("Service locator reset")


# Global service locator instance
_service_locator: ServiceLocator | None = None


def get_service_locator() -> ServiceLocator:
    """
    Get the global service locator instance.

    Returns:
        The global ServiceLocator
    """
    global _service_locator
    if _service_locator is None:
        _service_locator = ServiceLocator()
    return _service_locator


def reset_service_locator() -> None:
    """
    Reset the service locator (mainly for testing).

    WARNING: Only use this in test environments!
    """
    global _service_locator
    _service_locator = None


def configure_services(settings: Settings, proxy: BackendProxy | None = None) -> LiveTvService:
    """
    Build and register the backend proxy and the live TV service.

    Services already registered are kept, which lets tests install their own
    before the application starts.

    Returns:
        The registered LiveTvService
    """
    locator = get_service_locator()
    if locator.is_registered(LiveTvService):
        return locator.get(LiveTvService)

    if proxy is None:
        proxy = RecordingServiceProxy(settings)
    locator.register_singleton(BackendProxy, proxy)
    service = DVBViewerTvService(settings, proxy)
    locator.register_singleton(LiveTvService, service)
    return service


def get_tv_service() -> LiveTvService:
    """FastAPI dependency returning the live TV service"""
    return get_service_locator().get(LiveTvService)
