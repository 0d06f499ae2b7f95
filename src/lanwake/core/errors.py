"""Domain-specific errors for lanwake."""


class LanwakeError(Exception):
    """Base error for lanwake."""


class DiscoveryError(LanwakeError):
    """Raised when an ARP-table scan fails outright."""


class ProbeError(LanwakeError):
    """Raised when an ICMP reachability probe cannot be carried out."""


class WakeTransmissionError(LanwakeError):
    """Raised when a Wake-on-LAN magic packet could not be sent."""

    def __init__(self, mac_address: str, reason: str) -> None:
        self.mac_address = mac_address
        self.reason = reason
        super().__init__(f"Wake failed for {mac_address}: {reason}")


class ReadOnlyPropertyError(LanwakeError):
    """Raised when a write is attempted on a read-only property."""


class UnknownActionError(LanwakeError):
    """Raised when a device is asked to perform an action it does not expose."""


class UnknownDeviceError(LanwakeError):
    """Raised when an action targets a device id the adapter does not know."""
