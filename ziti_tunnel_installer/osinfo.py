"""
OS detection and OpenZiti suite mapping.

OpenZiti publishes its Debian packages under Ubuntu LTS suite names. Ubuntu
hosts use their own codename; Debian releases are mapped onto the Ubuntu LTS
whose userland they most closely match.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from .errors import OSReleaseError, UnsupportedOSError

MIN_DEBIAN_MAJOR = 10

DEBIAN_SUITE_MAP: Dict[str, str] = {
    "trixie": "jammy",  # Debian 13 -> 22.04
    "bookworm": "jammy",  # Debian 12 -> 22.04
    "bullseye": "focal",  # Debian 11 -> 20.04
    "buster": "bionic",  # Debian 10 -> 18.04
}

OVERRIDE_HINT = "Set UBUNTU_LTS_OVERRIDE (or --suite-override) and retry."


@dataclass(frozen=True)
class OSRelease:
    """The subset of /etc/os-release the installer branches on."""

    id: str
    id_like: Tuple[str, ...] = ()
    codename: str = ""
    version_id: str = ""
    ubuntu_codename: str = ""
    pretty_name: str = ""

    @classmethod
    def from_mapping(cls, data: Dict[str, str]) -> "OSRelease":
        return cls(
            id=data.get("ID", "").lower(),
            id_like=tuple(data.get("ID_LIKE", "").lower().split()),
            codename=data.get("VERSION_CODENAME", "").lower(),
            version_id=data.get("VERSION_ID", ""),
            ubuntu_codename=data.get("UBUNTU_CODENAME", "").lower(),
            pretty_name=data.get("PRETTY_NAME", ""),
        )

    def describe(self) -> str:
        return (
            f"ID={self.id} ID_LIKE={' '.join(self.id_like)} "
            f"VERSION_CODENAME={self.codename} VERSION_ID={self.version_id}"
        )


def parse_os_release(text: str) -> Dict[str, str]:
    """Parse os-release ``KEY=value`` lines into a dict, unquoting values."""
    info: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        info[key.strip()] = value
    return info


def read_os_release(path: Union[str, Path] = "/etc/os-release") -> OSRelease:
    path = Path(path)
    try:
        text = path.read_text()
    except OSError as e:
        raise OSReleaseError(f"Missing or unreadable {path}: {e}") from e
    return OSRelease.from_mapping(parse_os_release(text))


def classify_family(os_release: OSRelease) -> Optional[str]:
    """
    Return "ubuntu", "debian" or None for an unsupported family.

    Ubuntu is checked first since Ubuntu itself declares ID_LIKE=debian.
    """
    names = (os_release.id,) + os_release.id_like
    if "ubuntu" in names:
        return "ubuntu"
    if "debian" in names:
        return "debian"
    return None


def debian_major(version_id: str) -> Optional[int]:
    """
    Return the major version from VERSION_ID, or None when it is empty.

    Raises:
        UnsupportedOSError: If the major version is not numeric
    """
    major = version_id.split(".", 1)[0].strip()
    if not major:
        return None
    if not major.isdigit():
        raise UnsupportedOSError(f"Unsupported Debian version ({version_id}).")
    return int(major)


def resolve_suite(os_release: OSRelease, override: Optional[str] = None) -> str:
    """
    Map the detected OS onto the OpenZiti APT suite name.

    Args:
        os_release: Parsed OS descriptor
        override: Suite to use verbatim, bypassing detection entirely

    Returns:
        The suite name, e.g. "jammy"

    Raises:
        UnsupportedOSError: For unknown families, Debian < 10 or an
            unmapped Debian codename
    """
    if override:
        return override

    family = classify_family(os_release)
    if family == "ubuntu":
        suite = os_release.ubuntu_codename or os_release.codename
        if not suite:
            raise UnsupportedOSError(
                f"Could not determine the Ubuntu codename. {OVERRIDE_HINT}"
            )
        return suite

    if family == "debian":
        major = debian_major(os_release.version_id)
        if major is not None and major < MIN_DEBIAN_MAJOR:
            raise UnsupportedOSError(
                f"Unsupported Debian version ({os_release.version_id}). "
                f"Debian {MIN_DEBIAN_MAJOR}+ required."
            )
        try:
            return DEBIAN_SUITE_MAP[os_release.codename]
        except KeyError:
            raise UnsupportedOSError(
                f"Unsupported Debian codename '{os_release.codename}'. {OVERRIDE_HINT}"
            ) from None

    raise UnsupportedOSError(
        f"Unsupported distro: ID={os_release.id} ID_LIKE={' '.join(os_release.id_like)}"
    )
