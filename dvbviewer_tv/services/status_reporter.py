"""
Status Reporter

Turns configuration validity and backend reachability into a ServiceStatus.
This is the only path that absorbs backend faults instead of propagating them.
"""
import logging

from dvbviewer_tv.config import PLUGIN_VERSION, Settings
from dvbviewer_tv.schemas import LiveTvServiceStatus, ServiceStatus
from dvbviewer_tv.services.backend_proxy import BackendProxy


logger = logging.getLogger(__name__)

PRODUCT_NAME = "DVBViewer Live TV Plugin"
CONNECTED_MESSAGE = "Successfully connected to DVBViewer Recording Service API"
UNAVAILABLE_MESSAGE = "Cannot connect to DVBViewer Recording Service - check your settings"


class StatusReporter:
    """Produces the live TV service status for the host"""

    def __init__(self, settings: Settings, proxy: BackendProxy, plugin_version: str = PLUGIN_VERSION):
        self._settings = settings
        self._proxy = proxy
        self._plugin_version = plugin_version

    def _unavailable(self) -> ServiceStatus:
        return ServiceStatus(
            status=LiveTvServiceStatus.UNAVAILABLE,
            status_message=UNAVAILABLE_MESSAGE,
            version=f"{PRODUCT_NAME} V{self._plugin_version}",
            has_update_available=False,
        )

    async def get_status(self) -> ServiceStatus:
        """
        Report whether the Recording Service is usable.

        Invalid configuration short-circuits without contacting the backend.
        Probe failures are logged and reported as Unavailable.

        Returns:
            A fresh ServiceStatus
        """
        validation = self._settings.validate_configuration()
        if not validation.is_valid:
            logger.warning("Configuration invalid: %s", validation.message)
            return self._unavailable()

        try:
            backend_status = await self._proxy.get_status_info()
        except Exception:
            logger.error("Exception occurred getting the DVBViewer Recording Service status", exc_info=True)
            return self._unavailable()

        return ServiceStatus(
            status=LiveTvServiceStatus.OK,
            status_message=CONNECTED_MESSAGE,
            version=f"{PRODUCT_NAME} V{self._plugin_version} - {backend_status.version}",
            has_update_available=False,
        )
