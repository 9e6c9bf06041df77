"""Lookup of the currently associated Wi-Fi network."""

from __future__ import annotations

import logging
import subprocess
import sys
from typing import Optional, Protocol

UNKNOWN_SSID = "<unknown ssid>"
COMMAND_TIMEOUT = 5


def normalize_identity(raw: Optional[str]) -> Optional[str]:
    """Map empty and sentinel values to ``None``; keep real names verbatim."""

    if raw is None:
        return None
    cleaned = raw.replace('"', "").strip()
    if not cleaned or cleaned.lower() == UNKNOWN_SSID:
        return None
    return cleaned


class NetworkIdentityProvider(Protocol):
    def current_identity(self) -> Optional[str]:
        ...

    def radio_enabled(self) -> Optional[bool]:
        ...

    def unavailable_reason(self) -> str:
        ...


def run_cmd(command: list[str]) -> str:
    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            check=False,
            timeout=COMMAND_TIMEOUT,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logging.debug("Command %s unavailable: %s", command[0], exc)
        return ""
    if result.returncode != 0:
        return ""
    return result.stdout.strip()


class SystemIdentityProvider:
    """Reads the SSID with the tools each desktop platform ships."""

    def __init__(self, platform: str = sys.platform) -> None:
        self.platform = platform

    def current_identity(self) -> Optional[str]:
        if self.platform.startswith("linux"):
            raw = self._linux_ssid()
        elif self.platform == "darwin":
            raw = self._macos_ssid()
        elif self.platform.startswith("win"):
            raw = self._windows_ssid()
        else:
            raw = None
        return normalize_identity(raw)

    def radio_enabled(self) -> Optional[bool]:
        if self.platform.startswith("linux"):
            output = run_cmd(["nmcli", "radio", "wifi"]).lower()
            if output in {"enabled", "disabled"}:
                return output == "enabled"
            return None
        if self.platform == "darwin":
            device = self._macos_wifi_device()
            if not device:
                return None
            output = run_cmd(["networksetup", "-getairportpower", device])
            if output.endswith(("On", "Off")):
                return output.endswith("On")
        return None

    def unavailable_reason(self) -> str:
        if self.radio_enabled() is False:
            return "Wi-Fi is turned off, so the current network cannot be detected."
        if self.platform.startswith("linux") and not (run_cmd(["which", "nmcli"]) or run_cmd(["which", "iwgetid"])):
            return "Neither nmcli nor iwgetid is available, so the current network cannot be detected."
        return "The current network could not be detected."

    def _linux_ssid(self) -> Optional[str]:
        output = run_cmd(["nmcli", "-t", "-f", "ACTIVE,SSID", "dev", "wifi"])
        for line in output.splitlines():
            active, _, ssid = line.partition(":")
            if active == "yes":
                return ssid.replace("\\:", ":")
        return run_cmd(["iwgetid", "-r"]) or None

    def _macos_wifi_device(self) -> Optional[str]:
        output = run_cmd(["networksetup", "-listallhardwareports"])
        lines = output.splitlines()
        for idx, line in enumerate(lines):
            if "Hardware Port: Wi-Fi" in line or "Hardware Port: AirPort" in line:
                for j in range(idx + 1, min(idx + 4, len(lines))):
                    if "Device:" in lines[j]:
                        return lines[j].split(":", 1)[1].strip()
        return None

    def _macos_ssid(self) -> Optional[str]:
        device = self._macos_wifi_device()
        if not device:
            return None
        output = run_cmd(["networksetup", "-getairportnetwork", device])
        if "Current Wi-Fi Network" not in output:
            return None
        return output.split(":", 1)[1].strip()

    def _windows_ssid(self) -> Optional[str]:
        output = run_cmd(["netsh", "wlan", "show", "interfaces"])
        for line in output.splitlines():
            key, sep, value = line.strip().partition(":")
            if not sep:
                continue
            key = key.strip().lower()
            if key == "ssid":
                return value.strip()
        return None


class StaticIdentityProvider:
    """Always reports the same network; ``None`` means "cannot tell"."""

    def __init__(self, identity: Optional[str], radio: Optional[bool] = True, reason: str = "") -> None:
        self.identity = identity
        self.radio = radio
        self.reason = reason or "The current network could not be detected."

    def current_identity(self) -> Optional[str]:
        return normalize_identity(self.identity)

    def radio_enabled(self) -> Optional[bool]:
        return self.radio

    def unavailable_reason(self) -> str:
        return self.reason
