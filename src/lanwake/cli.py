"""Command-line interface for lanwake."""

import asyncio
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

from lanwake import __version__

if TYPE_CHECKING:
    from lanwake.adapter.adapter import AdapterConfig, WakeOnLanAdapter

DEFAULT_CONFIG = Path.home() / ".config" / "lanwake" / "config.yaml"


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )


def _load_cfg(config: str) -> "AdapterConfig":
    from lanwake.config.loader import adapter_config_from, load_config, validate_config

    path = Path(config)
    if not path.exists():
        click.echo(f"Config file not found: {path}", err=True)
        sys.exit(1)
    raw = load_config(path)
    if not raw:
        click.echo("Config file is empty.", err=True)
        sys.exit(1)
    errors = validate_config(raw)
    if errors:
        click.echo("Config validation errors:", err=True)
        for e in errors:
            click.echo(f"  • {e}", err=True)
        sys.exit(1)
    return adapter_config_from(raw)


# ── Root group ────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version=__version__, prog_name="lanwake")
@click.option(
    "--config",
    "-c",
    default=str(DEFAULT_CONFIG),
    envvar="LANWAKE_CONFIG",
    show_default=True,
    help="Path to lanwake config.yaml",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config: str, verbose: bool) -> None:
    """lanwake: wake and watch hosts on the local network."""
    _setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# ── run ───────────────────────────────────────────────────────────────────────


async def _serve(adapter: "WakeOnLanAdapter") -> None:
    await adapter.initialize()
    click.echo(f"Managing {len(adapter.devices)} device(s); press Ctrl+C to stop.")
    try:
        await asyncio.Event().wait()
    finally:
        adapter.unload()


@main.command()
@click.pass_context
def run(ctx: click.Context) -> None:
    """Run the adapter until interrupted."""
    from lanwake.adapter.adapter import WakeOnLanAdapter

    adapter_config = _load_cfg(ctx.obj["config"])
    adapter = WakeOnLanAdapter(adapter_config)
    try:
        asyncio.run(_serve(adapter))
    except KeyboardInterrupt:
        click.echo("Stopped.")


# ── scan ──────────────────────────────────────────────────────────────────────


@main.command()
def scan() -> None:
    """List the hosts currently in the ARP table."""
    from lanwake.core.discovery import scan as arp_scan
    from lanwake.core.errors import DiscoveryError

    try:
        entries = asyncio.run(arp_scan())
    except DiscoveryError as exc:
        click.echo(f"✗  Scan failed: {exc}", err=True)
        sys.exit(2)

    if not entries:
        click.echo("No devices found.")
        return
    click.echo(f"{'MAC':<20} {'IP':<17} {'NAME'}")
    click.echo("─" * 60)
    for e in entries:
        click.echo(f"{e.mac:<20} {e.ip:<17} {e.name}")


# ── wake ──────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("mac_address")
@click.option("--broadcast", "-b", default="255.255.255.255", show_default=True, help="Broadcast IP")
@click.option("--port", "-p", default=9, show_default=True, type=int, help="UDP port")
def wake(mac_address: str, broadcast: str, port: int) -> None:
    """Send a Wake-on-LAN magic packet to MAC_ADDRESS."""
    from lanwake.config.loader import is_valid_mac
    from lanwake.core.errors import WakeTransmissionError
    from lanwake.core.wol import wake as send_wake

    if not is_valid_mac(mac_address):
        click.echo(f"Invalid MAC address: {mac_address}", err=True)
        sys.exit(1)
    try:
        send_wake(mac_address, ip_address=broadcast, port=port)
    except WakeTransmissionError as exc:
        click.echo(f"✗  {exc}", err=True)
        sys.exit(2)
    click.echo(f"✓  Magic packet sent to {mac_address}")


# ── devices ───────────────────────────────────────────────────────────────────


def _format_state(value: object) -> str:
    if value is None:
        return "unknown"
    return "reachable" if value else "unreachable"


@main.command()
@click.pass_context
def devices(ctx: click.Context) -> None:
    """Discover the configured devices once and show what was found."""
    from lanwake.adapter.adapter import WakeOnLanAdapter
    from lanwake.adapter.device import ON_PROPERTY, device_id_for
    from lanwake.adapter.listener import AdapterListener

    adapter_config = _load_cfg(ctx.obj["config"])
    adapter = WakeOnLanAdapter(adapter_config, listener=AdapterListener())

    async def _discover_once() -> None:
        try:
            await adapter.initialize()
        finally:
            adapter.unload()

    asyncio.run(_discover_once())

    found = adapter.devices
    if found:
        click.echo(f"{'NAME':<28} {'MAC':<20} {'IP':<17} {'STATE'}")
        click.echo("─" * 80)
        for device in found.values():
            prop = device.find_property(ON_PROPERTY)
            state = _format_state(prop.read()) if prop else "-"
            click.echo(f"{device.name:<28} {device.mac:<20} {device.last_ip or '-':<17} {state}")
    else:
        click.echo("None of the configured devices were found.")

    missing = [mac for mac in adapter_config.devices if device_id_for(mac) not in found]
    for mac in missing:
        click.echo(f"  not found: {mac}")
