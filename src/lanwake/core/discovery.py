"""ARP-table device discovery (MAC -> IP -> hostname)."""

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from lanwake.core.errors import DiscoveryError

logger = logging.getLogger(__name__)

# "host.lan (192.168.1.20) at aa:bb:cc:dd:ee:ff [ether] on eth0"   (Linux)
# "? (192.168.1.20) at a:bb:c:dd:ee:ff on en0 ifscope [ethernet]"  (macOS)
_ARP_LINE_RE = re.compile(
    r"^(?P<name>\S+)\s+\((?P<ip>\d{1,3}(?:\.\d{1,3}){3})\)\s+at\s+"
    r"(?P<mac>[0-9A-Fa-f]{1,2}(?:[:\-][0-9A-Fa-f]{1,2}){5})\b"
)
_BROADCAST_MAC = "ff:ff:ff:ff:ff:ff"
UNKNOWN_NAME = "?"


@dataclass(frozen=True)
class ArpEntry:
    """One resolved neighbour from the ARP table."""

    mac: str
    ip: str
    name: str = UNKNOWN_NAME


def normalize_mac(mac_address: str) -> str:
    """Lower-case a MAC and pad every octet to two digits, ':' separated."""
    octets = re.split(r"[:\-]", mac_address.strip())
    return ":".join(octet.zfill(2) for octet in octets).lower()


def parse_arp_output(output: str) -> list[ArpEntry]:
    """
    Parse the output of ``arp -a`` into ARP entries.

    Incomplete entries and the broadcast address are skipped. When the same
    MAC shows up on more than one line the first occurrence wins.
    """
    entries: list[ArpEntry] = []
    seen: set[str] = set()
    for line in output.splitlines():
        match = _ARP_LINE_RE.match(line.strip())
        if not match:
            continue
        mac = normalize_mac(match.group("mac"))
        if mac == _BROADCAST_MAC or mac in seen:
            continue
        seen.add(mac)
        entries.append(ArpEntry(mac=mac, ip=match.group("ip"), name=match.group("name")))
    return entries


def find_entry(entries: Iterable[ArpEntry], mac_address: str) -> Optional[ArpEntry]:
    """Return the entry for ``mac_address`` (any case/separator), or None."""
    wanted = normalize_mac(mac_address)
    return next((e for e in entries if e.mac == wanted), None)


async def scan(arp_bin: str = "arp", timeout: float = 10.0) -> list[ArpEntry]:
    """
    Read the local ARP table.

    Args:
        arp_bin: Name or path of the ``arp`` binary
        timeout: Seconds to wait for the command before giving up

    Returns:
        List of ArpEntry, one per MAC address

    Raises:
        DiscoveryError: If ``arp`` is missing, times out or exits non-zero
    """
    logger.debug("Scanning ARP table with '%s -a'", arp_bin)
    try:
        process = await asyncio.create_subprocess_exec(
            arp_bin,
            "-a",
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise DiscoveryError(f"could not run {arp_bin}: {exc}") from exc

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError as exc:
        process.kill()
        raise DiscoveryError(f"{arp_bin} -a timed out after {timeout:.0f}s") from exc

    if process.returncode != 0:
        err = stderr.decode("utf-8", errors="replace").strip()
        raise DiscoveryError(f"{arp_bin} -a exited {process.returncode}: {err}")

    entries = parse_arp_output(stdout.decode("utf-8", errors="replace"))
    logger.debug("ARP scan found %d device(s)", len(entries))
    return entries
