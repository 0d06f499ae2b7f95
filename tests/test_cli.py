"""Tests for the lanwake CLI."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import yaml
from click.testing import CliRunner

from lanwake.cli import main
from lanwake.core.discovery import ArpEntry
from lanwake.core.errors import DiscoveryError, WakeTransmissionError

ENTRIES = [
    ArpEntry(mac="aa:bb:cc:dd:ee:01", ip="10.0.0.5", name="?"),
    ArpEntry(mac="aa:bb:cc:dd:ee:02", ip="10.0.0.6", name="nas.lan"),
]


# ── Helpers ───────────────────────────────────────────────────────────────────


def _write_config(path: Path, **overrides: object) -> None:
    """Write a minimal valid config managing one device."""
    config: dict = {"devices": ["AA:BB:CC:DD:EE:01"], "checkPing": False}
    config.update(overrides)
    path.write_text(yaml.dump(config))


# ── _load_cfg error paths ──────────────────────────────────────────────────────


class TestLoadCfgErrors:
    """_load_cfg calls sys.exit(1) for bad configs; CliRunner captures that."""

    def test_missing_config_exits_1(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(main, ["--config", str(tmp_path / "nope.yaml"), "devices"])
        assert result.exit_code == 1

    def test_empty_config_exits_1(self, tmp_path: Path) -> None:
        cfg = tmp_path / "empty.yaml"
        cfg.write_text("")
        result = CliRunner().invoke(main, ["--config", str(cfg), "devices"])
        assert result.exit_code == 1

    def test_validation_error_exits_1(self, tmp_path: Path) -> None:
        cfg = tmp_path / "bad.yaml"
        cfg.write_text(yaml.dump({"devices": ["not-a-mac"]}))
        result = CliRunner().invoke(main, ["--config", str(cfg), "devices"])
        assert result.exit_code == 1
        assert "devices[0]" in result.output


# ── scan ──────────────────────────────────────────────────────────────────────


class TestScan:
    @patch("lanwake.core.discovery.scan", new_callable=AsyncMock)
    def test_lists_entries(self, mock_scan: AsyncMock) -> None:
        mock_scan.return_value = ENTRIES
        result = CliRunner().invoke(main, ["scan"])
        assert result.exit_code == 0
        assert "aa:bb:cc:dd:ee:01" in result.output
        assert "nas.lan" in result.output

    @patch("lanwake.core.discovery.scan", new_callable=AsyncMock)
    def test_empty_table(self, mock_scan: AsyncMock) -> None:
        mock_scan.return_value = []
        result = CliRunner().invoke(main, ["scan"])
        assert result.exit_code == 0
        assert "No devices found" in result.output

    @patch("lanwake.core.discovery.scan", new_callable=AsyncMock)
    def test_failure_exits_2(self, mock_scan: AsyncMock) -> None:
        mock_scan.side_effect = DiscoveryError("arp not installed")
        result = CliRunner().invoke(main, ["scan"])
        assert result.exit_code == 2


# ── wake ──────────────────────────────────────────────────────────────────────


class TestWake:
    @patch("lanwake.core.wol.send_magic_packet")
    def test_sends_packet(self, mock_send: MagicMock) -> None:
        result = CliRunner().invoke(main, ["wake", "AA:BB:CC:DD:EE:01"])
        assert result.exit_code == 0
        mock_send.assert_called_once_with(
            "AA:BB:CC:DD:EE:01", ip_address="255.255.255.255", port=9
        )

    @patch("lanwake.core.wol.send_magic_packet")
    def test_custom_broadcast_and_port(self, mock_send: MagicMock) -> None:
        result = CliRunner().invoke(
            main, ["wake", "AA:BB:CC:DD:EE:01", "--broadcast", "10.0.0.255", "--port", "7"]
        )
        assert result.exit_code == 0
        mock_send.assert_called_once_with("AA:BB:CC:DD:EE:01", ip_address="10.0.0.255", port=7)

    @patch("lanwake.core.wol.send_magic_packet")
    def test_invalid_mac_exits_1(self, mock_send: MagicMock) -> None:
        result = CliRunner().invoke(main, ["wake", "zz"])
        assert result.exit_code == 1
        mock_send.assert_not_called()

    @patch("lanwake.core.wol.wake")
    def test_transmission_failure_exits_2(self, mock_wake: MagicMock) -> None:
        mock_wake.side_effect = WakeTransmissionError("AA:BB:CC:DD:EE:01", "send failed")
        result = CliRunner().invoke(main, ["wake", "AA:BB:CC:DD:EE:01"])
        assert result.exit_code == 2


# ── devices ───────────────────────────────────────────────────────────────────


class TestDevices:
    @patch("lanwake.core.discovery.scan", new_callable=AsyncMock)
    def test_lists_found_and_missing(self, mock_scan: AsyncMock, tmp_path: Path) -> None:
        mock_scan.return_value = ENTRIES
        cfg = tmp_path / "config.yaml"
        _write_config(cfg, devices=["AA:BB:CC:DD:EE:02", "AA:BB:CC:DD:EE:99"])

        result = CliRunner().invoke(main, ["--config", str(cfg), "devices"])

        assert result.exit_code == 0
        assert "nas.lan" in result.output
        assert "10.0.0.6" in result.output
        assert "not found: AA:BB:CC:DD:EE:99" in result.output

    @patch("lanwake.adapter.device.ping.probe", new_callable=AsyncMock)
    @patch("lanwake.core.discovery.scan", new_callable=AsyncMock)
    def test_shows_reachability_with_ping_check(
        self, mock_scan: AsyncMock, mock_probe: AsyncMock, tmp_path: Path
    ) -> None:
        mock_scan.return_value = ENTRIES
        mock_probe.return_value = False
        cfg = tmp_path / "config.yaml"
        _write_config(cfg, checkPing=True)

        result = CliRunner().invoke(main, ["--config", str(cfg), "devices"])

        assert result.exit_code == 0
        assert "WoL (AA:BB:CC:DD:EE:01)" in result.output
        assert "unreachable" in result.output

    @patch("lanwake.core.discovery.scan", new_callable=AsyncMock)
    def test_nothing_found(self, mock_scan: AsyncMock, tmp_path: Path) -> None:
        mock_scan.return_value = []
        cfg = tmp_path / "config.yaml"
        _write_config(cfg)

        result = CliRunner().invoke(main, ["--config", str(cfg), "devices"])

        assert result.exit_code == 0
        assert "None of the configured devices were found" in result.output


# ── version ───────────────────────────────────────────────────────────────────


def test_version_option() -> None:
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "lanwake" in result.output
