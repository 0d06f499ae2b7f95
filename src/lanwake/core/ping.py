"""ICMP reachability probing."""

import logging

from icmplib import ICMPLibError, async_ping

from lanwake.core.errors import ProbeError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 2.0


async def probe(ip_address: str, timeout: float = DEFAULT_TIMEOUT) -> bool:
    """
    Send a single ICMP echo request and report whether a reply arrived.

    Args:
        ip_address: Address to probe
        timeout: Seconds to wait for the reply (default: 2)

    Returns:
        True if the host replied within the timeout, False otherwise

    Raises:
        ProbeError: If the probe could not be sent (bad address, no permission, ...)
    """
    try:
        host = await async_ping(ip_address, count=1, timeout=timeout, privileged=False)
    except (ICMPLibError, OSError) as exc:
        raise ProbeError(f"ping {ip_address} failed: {exc}") from exc
    logger.debug("Ping %s: alive=%s", ip_address, host.is_alive)
    return bool(host.is_alive)
