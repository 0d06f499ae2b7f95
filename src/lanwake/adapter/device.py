"""A Wake-on-LAN capable host on the local network."""

import logging
from typing import Any, Callable, Optional

from lanwake.adapter.property import ReachabilityProperty
from lanwake.core import ping, wol
from lanwake.core.discovery import UNKNOWN_NAME, normalize_mac
from lanwake.core.errors import UnknownActionError

logger = logging.getLogger(__name__)

SCHEMA_CONTEXT = "https://iot.mozilla.org/schemas"
WAKE_ACTION = "wake"
ON_PROPERTY = "on"

PropertyChangedCallback = Callable[["WakeOnLanDevice", ReachabilityProperty], None]


def device_id_for(mac_address: str) -> str:
    """Stable device id for a MAC; the same host always maps to the same id."""
    return f"wake-on-lan-{normalize_mac(mac_address)}"


class WakeOnLanDevice:
    """
    One physical host that can be woken, and optionally pinged.

    The ``on`` property only exists when ping checking is enabled; without it
    probe results are ignored.
    """

    def __init__(
        self,
        mac_address: str,
        name: Optional[str] = None,
        check_ping: bool = False,
        on_change: Optional[PropertyChangedCallback] = None,
        broadcast_ip: str = wol.DEFAULT_BROADCAST,
        wol_port: int = wol.DEFAULT_PORT,
        ping_timeout: float = ping.DEFAULT_TIMEOUT,
    ) -> None:
        self.mac = mac_address
        self.id = device_id_for(mac_address)
        self.description = f"WoL ({mac_address})"
        self.name = name if name and name != UNKNOWN_NAME else self.description
        self.last_ip: Optional[str] = None
        self.broadcast_ip = broadcast_ip
        self.wol_port = wol_port
        self.ping_timeout = ping_timeout
        self.actions: dict[str, dict[str, str]] = {WAKE_ACTION: {"title": "Wake"}}
        self.properties: dict[str, ReachabilityProperty] = {}
        if check_ping:
            self.properties[ON_PROPERTY] = ReachabilityProperty(self, ON_PROPERTY)
        self._on_change = on_change
        self._detached = False

    def __repr__(self) -> str:
        return f"WakeOnLanDevice(id={self.id!r}, name={self.name!r})"

    def find_property(self, name: str) -> Optional[ReachabilityProperty]:
        return self.properties.get(name)

    # ── Actions ──────────────────────────────────────────────────────────────

    def wake(self) -> bool:
        """
        Send one magic packet to this device.

        Raises:
            WakeTransmissionError: If the packet could not be sent
        """
        return wol.wake(self.mac, ip_address=self.broadcast_ip, port=self.wol_port)

    def perform_action(self, action_name: str) -> bool:
        if action_name != WAKE_ACTION:
            raise UnknownActionError(f"Unknown action '{action_name}' for {self.id}")
        return self.wake()

    # ── Reachability ─────────────────────────────────────────────────────────

    async def probe(self, ip_address: str) -> None:
        """Ping ``ip_address`` once and record the outcome; never raises."""
        self.last_ip = ip_address
        try:
            alive = await ping.probe(ip_address, timeout=self.ping_timeout)
        except Exception as exc:
            logger.debug("[%s] Probe of %s failed, treating as unreachable: %s", self.id, ip_address, exc)
            alive = False
        self.on_probe_result(alive)

    def on_probe_result(self, alive: bool) -> None:
        """Apply a probe outcome, notifying only when the value flips."""
        if self._detached:
            logger.debug("[%s] Dropping probe result for detached device", self.id)
            return
        prop = self.find_property(ON_PROPERTY)
        if prop is None:
            return
        if prop.set_cached_value(alive) and self._on_change is not None:
            self._on_change(self, prop)

    def detach(self) -> None:
        """Stop accepting probe results; in-flight probes are discarded."""
        self._detached = True

    @property
    def detached(self) -> bool:
        return self._detached

    def describe(self) -> dict[str, Any]:
        return {
            "@context": SCHEMA_CONTEXT,
            "@type": [],
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "mac": self.mac,
            "actions": dict(self.actions),
            "properties": {name: prop.describe() for name, prop in self.properties.items()},
        }
