"""Wake-on-LAN functionality."""

import logging

from wakeonlan import send_magic_packet

from lanwake.core.errors import WakeTransmissionError

logger = logging.getLogger(__name__)

DEFAULT_BROADCAST = "255.255.255.255"
DEFAULT_PORT = 9


def wake(mac_address: str, ip_address: str = DEFAULT_BROADCAST, port: int = DEFAULT_PORT) -> bool:
    """
    Send a Wake-on-LAN magic packet to wake a remote machine.

    Exactly one packet is sent. Success means the packet left this host, not
    that the target woke up; Wake-on-LAN has no acknowledgment.

    Args:
        mac_address: MAC address of the target machine (e.g., "AA:BB:CC:DD:EE:FF")
        ip_address: Broadcast IP address (default: 255.255.255.255)
        port: UDP port for WOL packet (default: 9)

    Returns:
        True if packet was sent successfully

    Raises:
        WakeTransmissionError: If the MAC is malformed or the socket send fails
    """
    logger.info("Sending WOL magic packet to %s via %s:%d", mac_address, ip_address, port)
    try:
        send_magic_packet(mac_address, ip_address=ip_address, port=port)
    except (OSError, ValueError) as exc:
        logger.error("WOL packet to %s failed: %s", mac_address, exc)
        raise WakeTransmissionError(mac_address, str(exc)) from exc
    logger.debug("WOL packet sent successfully")
    return True
