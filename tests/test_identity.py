"""SSID normalization and platform lookups."""

from unittest.mock import patch

import pytest

from nju_portal.network import identity as identity_module
from nju_portal.network.identity import StaticIdentityProvider, SystemIdentityProvider, normalize_identity


@pytest.mark.parametrize("raw", [None, "", "   ", "<unknown ssid>", "<UNKNOWN SSID>", '"<unknown ssid>"'])
def test_unreadable_values_normalize_to_none(raw):
    assert normalize_identity(raw) is None


def test_quotes_are_stripped_and_case_kept():
    assert normalize_identity('"NJU-WLAN"') == "NJU-WLAN"
    assert normalize_identity("nju-wlan") == "nju-wlan"


def test_static_provider_normalizes():
    assert StaticIdentityProvider("<unknown ssid>").current_identity() is None


def _fake_commands(outputs):
    def fake_run_cmd(command):
        return outputs.get(tuple(command), "")

    return fake_run_cmd


def test_linux_reads_active_nmcli_entry():
    outputs = {
        ("nmcli", "-t", "-f", "ACTIVE,SSID", "dev", "wifi"): "no:eduroam\nyes:NJU-WLAN\n",
    }
    with patch.object(identity_module, "run_cmd", _fake_commands(outputs)):
        assert SystemIdentityProvider(platform="linux").current_identity() == "NJU-WLAN"


def test_linux_falls_back_to_iwgetid():
    outputs = {("iwgetid", "-r"): "NJU-WLAN"}
    with patch.object(identity_module, "run_cmd", _fake_commands(outputs)):
        assert SystemIdentityProvider(platform="linux").current_identity() == "NJU-WLAN"


def test_linux_without_tools_is_unknown():
    with patch.object(identity_module, "run_cmd", _fake_commands({})):
        provider = SystemIdentityProvider(platform="linux")
        assert provider.current_identity() is None
        assert provider.radio_enabled() is None
        assert "nmcli" in provider.unavailable_reason()


def test_linux_radio_state():
    outputs = {("nmcli", "radio", "wifi"): "disabled"}
    with patch.object(identity_module, "run_cmd", _fake_commands(outputs)):
        provider = SystemIdentityProvider(platform="linux")
        assert provider.radio_enabled() is False
        assert provider.unavailable_reason().startswith("Wi-Fi is turned off")


def test_macos_reads_airport_network():
    outputs = {
        ("networksetup", "-listallhardwareports"): "Hardware Port: Wi-Fi\nDevice: en0\nEthernet Address: aa",
        ("networksetup", "-getairportnetwork", "en0"): "Current Wi-Fi Network: NJU-WLAN",
    }
    with patch.object(identity_module, "run_cmd", _fake_commands(outputs)):
        assert SystemIdentityProvider(platform="darwin").current_identity() == "NJU-WLAN"


def test_windows_ignores_bssid_line():
    netsh = "    Name : Wi-Fi\n    BSSID : aa:bb:cc\n    SSID : NJU-WLAN\n    State : connected"
    outputs = {("netsh", "wlan", "show", "interfaces"): netsh}
    with patch.object(identity_module, "run_cmd", _fake_commands(outputs)):
        assert SystemIdentityProvider(platform="win32").current_identity() == "NJU-WLAN"


def test_run_cmd_missing_binary_returns_empty():
    assert identity_module.run_cmd(["definitely-not-a-real-binary-xyz"]) == ""
