"""YAML configuration loader and validator."""

import re
from pathlib import Path
from typing import Any, Optional

import yaml

from lanwake.adapter.adapter import AdapterConfig
from lanwake.core import ping, wol
from lanwake.core.errors import LanwakeError
from lanwake.scheduler.sweep import DEFAULT_INTERVAL

_MAC_RE = re.compile(r"^([0-9A-Fa-f]{2}[:\-]){5}[0-9A-Fa-f]{2}$")
_IPV4_RE = re.compile(r"^\d{1,3}(\.\d{1,3}){3}$")


class ConfigError(LanwakeError):
    """Raised for invalid or missing configuration."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("; ".join(errors))


def is_valid_mac(mac_address: str) -> bool:
    return bool(_MAC_RE.match(mac_address))


def load_config(path: Path) -> Optional[dict[str, Any]]:
    """
    Load configuration from a YAML file.

    Args:
        path: Path to the YAML config file

    Returns:
        Parsed configuration dictionary, or None if file is empty

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
    """
    with open(path) as f:
        result: Optional[dict[str, Any]] = yaml.safe_load(f)
        return result


def unwrap_manifest(config: dict[str, Any]) -> dict[str, Any]:
    """Return the adapter settings, accepting the add-on manifest form ``{moziot: {config: ...}}``."""
    moziot = config.get("moziot")
    if isinstance(moziot, dict) and isinstance(moziot.get("config"), dict):
        return moziot["config"]
    return config


def validate_config(config: dict[str, Any]) -> list[str]:
    """
    Validate a loaded configuration dictionary.

    Returns:
        List of validation error messages (empty list = valid)
    """
    if not isinstance(config, dict):
        return ["Config root must be a YAML mapping"]

    config = unwrap_manifest(config)
    errors: list[str] = []

    devices = config.get("devices")
    if devices is None:
        errors.append("'devices' key is required and must be a list of MAC addresses")
    elif not isinstance(devices, list):
        errors.append("'devices' must be a list")
    else:
        for i, mac in enumerate(devices):
            if not isinstance(mac, str) or not is_valid_mac(mac):
                errors.append(f"devices[{i}]: invalid MAC address '{mac}'")

    if "checkPing" in config and not isinstance(config["checkPing"], bool):
        errors.append("'checkPing' must be true or false")

    for key in ("pingTimeout", "pollInterval"):
        value = config.get(key)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            errors.append(f"'{key}' must be a positive number of seconds")

    port = config.get("wolPort")
    if port is not None and (isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536):
        errors.append(f"'wolPort' must be a UDP port number, got '{port}'")

    broadcast = config.get("broadcastIp")
    if broadcast is not None and not (isinstance(broadcast, str) and _IPV4_RE.match(broadcast)):
        errors.append(f"'broadcastIp' must be an IPv4 address, got '{broadcast}'")

    return errors


def adapter_config_from(config: dict[str, Any]) -> AdapterConfig:
    """
    Construct an AdapterConfig from a loaded config dict.

    Raises:
        ConfigError: If the config does not validate
    """
    errors = validate_config(config)
    if errors:
        raise ConfigError(errors)

    settings = unwrap_manifest(config)
    return AdapterConfig(
        devices=list(settings.get("devices", [])),
        check_ping=bool(settings.get("checkPing", False)),
        ping_timeout=float(settings.get("pingTimeout", ping.DEFAULT_TIMEOUT)),
        poll_interval=float(settings.get("pollInterval", DEFAULT_INTERVAL)),
        broadcast_ip=settings.get("broadcastIp", wol.DEFAULT_BROADCAST),
        wol_port=int(settings.get("wolPort", wol.DEFAULT_PORT)),
    )
