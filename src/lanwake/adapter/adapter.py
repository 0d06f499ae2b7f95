"""Adapter orchestration: discovery, registration and the reachability sweep."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

from lanwake.adapter.device import WakeOnLanDevice
from lanwake.adapter.listener import AdapterListener, LoggingListener
from lanwake.adapter.property import ReachabilityProperty
from lanwake.core import discovery, ping, wol
from lanwake.core.discovery import ArpEntry, find_entry
from lanwake.core.errors import DiscoveryError, UnknownDeviceError
from lanwake.scheduler.sweep import DEFAULT_INTERVAL, SweepTimer

logger = logging.getLogger(__name__)

Scanner = Callable[[], Awaitable[list[ArpEntry]]]


@dataclass
class AdapterConfig:
    """Configuration for a WakeOnLanAdapter."""

    devices: list[str] = field(default_factory=list)
    check_ping: bool = False
    ping_timeout: float = ping.DEFAULT_TIMEOUT
    poll_interval: float = DEFAULT_INTERVAL
    broadcast_ip: str = wol.DEFAULT_BROADCAST
    wol_port: int = wol.DEFAULT_PORT


class WakeOnLanAdapter:
    """
    Owns the configured devices and keeps their reachability current.

    Usage::

        adapter = WakeOnLanAdapter(AdapterConfig(devices=["AA:BB:CC:DD:EE:FF"], check_ping=True))
        await adapter.initialize()
        adapter.on_action_invoked("wake-on-lan-aa:bb:cc:dd:ee:ff", "wake")
        ...
        adapter.unload()

    The sweep timer runs exactly while ping checking is enabled and at least
    one device is registered.
    """

    def __init__(
        self,
        config: AdapterConfig,
        listener: Optional[AdapterListener] = None,
        scanner: Optional[Scanner] = None,
        timer: Optional[SweepTimer] = None,
    ) -> None:
        """
        Args:
            config: Devices to manage and ping settings.
            listener: Host callbacks; defaults to a LoggingListener.
            scanner: Coroutine returning the current ARP entries; defaults to ``discovery.scan``.
            timer: Sweep timer; defaults to a SweepTimer running ``self.sweep``.
        """
        self.config = config
        self.check_ping = config.check_ping
        self._listener = listener or LoggingListener()
        self._scanner = scanner or discovery.scan
        self._timer = timer or SweepTimer(self.sweep, interval=config.poll_interval)
        self._devices: dict[str, WakeOnLanDevice] = {}
        self._unloaded = False

    @property
    def devices(self) -> dict[str, WakeOnLanDevice]:
        return dict(self._devices)

    @property
    def unloaded(self) -> bool:
        return self._unloaded

    @property
    def sweeping(self) -> bool:
        return self._timer.running

    def get_device(self, device_id: str) -> Optional[WakeOnLanDevice]:
        return self._devices.get(device_id)

    # ── Discovery ────────────────────────────────────────────────────────────

    async def _discover(self) -> Optional[list[ArpEntry]]:
        """Run one scan; None if it failed."""
        try:
            return await self._scanner()
        except DiscoveryError as exc:
            logger.warning("Device discovery failed: %s", exc)
            return None

    async def initialize(self) -> None:
        """Scan once and register every configured device that was found."""
        entries = await self._discover()
        await self.on_discover(entries or [])

    async def on_discover(self, entries: list[ArpEntry]) -> list[WakeOnLanDevice]:
        """
        Create devices for the configured MACs present in ``entries``.

        Configured MACs missing from the scan are skipped; they are not
        retried later.

        Returns:
            Devices newly registered by this call
        """
        added: list[WakeOnLanDevice] = []
        for mac in self.config.devices:
            entry = find_entry(entries, mac)
            if entry is None:
                logger.info("Configured device %s not found on the network, skipping", mac)
                continue
            device = self._build_device(mac, entry)
            if not self.register_device(device):
                continue
            device.last_ip = entry.ip
            added.append(device)
            if self.check_ping:
                await device.probe(entry.ip)
        return added

    def _build_device(self, mac: str, entry: ArpEntry) -> WakeOnLanDevice:
        return WakeOnLanDevice(
            mac,
            name=entry.name,
            check_ping=self.check_ping,
            on_change=self._property_changed,
            broadcast_ip=self.config.broadcast_ip,
            wol_port=self.config.wol_port,
            ping_timeout=self.config.ping_timeout,
        )

    # ── Registration ─────────────────────────────────────────────────────────

    def register_device(self, device: WakeOnLanDevice) -> bool:
        """
        Add a device; a device whose id is already registered is ignored,
        as is any device offered after ``unload``.

        With ping checking enabled the first registration starts the sweep,
        so it must happen inside a running event loop. The timer is started
        before the device is stored; if that fails nothing is registered.

        Returns:
            True if the device was added

        Raises:
            RuntimeError: If the sweep must start and no event loop is running
        """
        if self._unloaded:
            logger.warning("Adapter unloaded, not registering %s", device.id)
            return False
        if device.id in self._devices:
            logger.debug("Device %s already registered", device.id)
            return False
        if self.check_ping and not self._timer.running:
            self._timer.start()
        self._devices[device.id] = device
        self._notify("device_added", device)
        return True

    def unregister_device(self, device: WakeOnLanDevice) -> bool:
        """
        Remove a device; unknown devices are ignored.

        Returns:
            True if the device was removed
        """
        if self._devices.pop(device.id, None) is None:
            return False
        device.detach()
        self._notify("device_removed", device)
        if not self._devices:
            self._timer.stop()
        return True

    # ── Periodic sweep ───────────────────────────────────────────────────────

    async def sweep(self) -> None:
        """
        One reachability tick: rescan, then probe every registered device
        found in the scan. Devices missing from the scan keep their state.
        """
        if self._unloaded:
            return
        entries = await self._discover()
        if entries is None:
            return
        probes = []
        for device in list(self._devices.values()):
            entry = find_entry(entries, device.mac)
            if entry is None:
                logger.debug("Device %s not in ARP table this sweep", device.id)
                continue
            probes.append(device.probe(entry.ip))
        if probes:
            await asyncio.gather(*probes)

    # ── Host entry points ────────────────────────────────────────────────────

    def on_action_invoked(self, device_id: str, action_name: str) -> bool:
        """
        Run an action on a registered device.

        Raises:
            UnknownDeviceError: If no device has ``device_id``
            UnknownActionError: If the device has no such action
            WakeTransmissionError: If the wake packet could not be sent
        """
        device = self._devices.get(device_id)
        if device is None:
            raise UnknownDeviceError(f"No device with id '{device_id}'")
        logger.info("Action '%s' requested for %s", action_name, device.name)
        return device.perform_action(action_name)

    def unload(self) -> None:
        """
        Stop the sweep and detach all devices; safe to call repeatedly.

        An unloaded adapter is terminal: it keeps its devices for inspection
        but registers no new ones and never restarts the sweep.
        """
        self._unloaded = True
        self._timer.stop()
        for device in self._devices.values():
            device.detach()

    def _property_changed(self, device: WakeOnLanDevice, prop: ReachabilityProperty) -> None:
        self._notify("property_changed", device, prop)

    def _notify(self, hook: str, *args: object) -> None:
        try:
            getattr(self._listener, hook)(*args)
        except Exception as exc:
            logger.error("Listener %s raised: %s", hook, exc)
