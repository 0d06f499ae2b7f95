"""Host-side callbacks the adapter reports to."""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lanwake.adapter.device import WakeOnLanDevice
    from lanwake.adapter.property import ReachabilityProperty

logger = logging.getLogger(__name__)


class AdapterListener:
    """
    Receives device lifecycle and property-change events.

    Subclass and override the hooks you care about; the defaults do nothing.
    """

    def device_added(self, device: "WakeOnLanDevice") -> None:
        pass

    def device_removed(self, device: "WakeOnLanDevice") -> None:
        pass

    def property_changed(self, device: "WakeOnLanDevice", prop: "ReachabilityProperty") -> None:
        pass


class LoggingListener(AdapterListener):
    """Listener that writes every event to the log."""

    def device_added(self, device: "WakeOnLanDevice") -> None:
        logger.info("Device added: %s (%s)", device.name, device.id)

    def device_removed(self, device: "WakeOnLanDevice") -> None:
        logger.info("Device removed: %s (%s)", device.name, device.id)

    def property_changed(self, device: "WakeOnLanDevice", prop: "ReachabilityProperty") -> None:
        logger.info("%s: %s -> %s", device.name, prop.name, prop.value)
