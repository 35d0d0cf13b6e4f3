"""Platform and Linux distribution detection.

Checks use the platform to pick command spellings (``cmd /c`` wrappers on
Windows) and to look up install hints per distro. Detection is cached.
"""

from __future__ import annotations

import sys as _sys
from dataclasses import dataclass
from enum import Enum, auto
from functools import lru_cache
from pathlib import Path

__all__ = [
    "LinuxDistro",
    "Platform",
    "PlatformInfo",
    "detect",
    "detect_linux_distro",
    "detect_platform",
]


class Platform(Enum):
    LINUX = auto()
    MACOS = auto()
    WINDOWS = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()


class LinuxDistro(Enum):
    """Linux distribution family, as far as package managers go."""

    DEBIAN = auto()  # apt
    FEDORA = auto()  # dnf
    ARCH = auto()  # pacman
    SUSE = auto()  # zypper, hinted like fedora (rpm)
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()


# os-release ID / ID_LIKE values per family
_DISTRO_IDS: dict[str, LinuxDistro] = {
    "debian": LinuxDistro.DEBIAN,
    "ubuntu": LinuxDistro.DEBIAN,
    "linuxmint": LinuxDistro.DEBIAN,
    "pop": LinuxDistro.DEBIAN,
    "fedora": LinuxDistro.FEDORA,
    "rhel": LinuxDistro.FEDORA,
    "centos": LinuxDistro.FEDORA,
    "rocky": LinuxDistro.FEDORA,
    "almalinux": LinuxDistro.FEDORA,
    "arch": LinuxDistro.ARCH,
    "manjaro": LinuxDistro.ARCH,
    "endeavouros": LinuxDistro.ARCH,
    "suse": LinuxDistro.SUSE,
    "opensuse": LinuxDistro.SUSE,
    "sles": LinuxDistro.SUSE,
}


@dataclass(frozen=True, slots=True)
class PlatformInfo:
    """Detected platform and (on Linux) distro family."""

    platform: Platform
    distro: LinuxDistro = LinuxDistro.UNKNOWN

    @property
    def is_windows(self) -> bool:
        return self.platform == Platform.WINDOWS

    @property
    def hint_key(self) -> str:
        """Key used to look up install hints (e.g. "debian", "macos").

        "default" when the platform, or on Linux the distro family, is unknown.
        """
        match self.platform:
            case Platform.MACOS:
                return "macos"
            case Platform.WINDOWS:
                return "windows"
            case Platform.UNKNOWN:
                return "default"
            case Platform.LINUX:
                pass
        match self.distro:
            case LinuxDistro.DEBIAN:
                return "debian"
            case LinuxDistro.FEDORA | LinuxDistro.SUSE:
                return "fedora"
            case LinuxDistro.ARCH:
                return "arch"
            case LinuxDistro.UNKNOWN:
                return "default"

    def __str__(self) -> str:
        if self.distro != LinuxDistro.UNKNOWN:
            return f"{self.platform}-{self.distro}"
        return str(self.platform)


@lru_cache(maxsize=1)
def detect_platform() -> Platform:
    """Map ``sys.platform`` to a Platform (cached)."""
    system = _sys.platform
    if system.startswith("linux"):
        return Platform.LINUX
    if system == "darwin":
        return Platform.MACOS
    if system in ("win32", "cygwin", "msys"):
        return Platform.WINDOWS
    return Platform.UNKNOWN


def _read_os_release() -> str | None:
    try:
        return Path("/etc/os-release").read_text(encoding="utf-8")
    except OSError:
        return None


def _os_release_ids(content: str) -> list[str]:
    """ID followed by the ID_LIKE entries, lowercased and unquoted."""
    fields: dict[str, str] = {}
    for line in content.splitlines():
        key, sep, value = line.partition("=")
        if sep:
            fields[key.strip()] = value.strip().strip("\"'").lower()
    ids = [fields.get("ID", "")]
    ids.extend(fields.get("ID_LIKE", "").split())
    return [i for i in ids if i]


@lru_cache(maxsize=1)
def detect_linux_distro() -> LinuxDistro:
    """Detect the distribution family from /etc/os-release (cached).

    UNKNOWN when not on Linux, when the file is unreadable, or when
    neither ID nor ID_LIKE names a known family.
    """
    if detect_platform() != Platform.LINUX:
        return LinuxDistro.UNKNOWN

    content = _read_os_release()
    if content is None:
        return LinuxDistro.UNKNOWN

    for distro_id in _os_release_ids(content):
        # "opensuse-tumbleweed", "opensuse-leap"
        family = _DISTRO_IDS.get(distro_id) or _DISTRO_IDS.get(distro_id.split("-")[0])
        if family is not None:
            return family
    return LinuxDistro.UNKNOWN


@lru_cache(maxsize=1)
def detect() -> PlatformInfo:
    return PlatformInfo(platform=detect_platform(), distro=detect_linux_distro())
