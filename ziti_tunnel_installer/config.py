"""Installer configuration."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_LOG_FILE = "/var/log/ziti-edge-tunnel-install.log"
DEFAULT_OS_RELEASE = "/etc/os-release"


# ----------------------------------------------------------------
# Configuration Dataclass
# ----------------------------------------------------------------
@dataclass(frozen=True)
class Config:
    """Configuration settings for a single installer run."""

    # Runtime inputs (CLI options / environment)
    IDENTITY_JWT: Optional[Path] = None
    LOG_FILE: Path = Path(DEFAULT_LOG_FILE)
    SUITE_OVERRIDE: Optional[str] = None
    OS_RELEASE: Path = Path(DEFAULT_OS_RELEASE)
    DEBUG: bool = False

    # File paths
    APT_LIST: Path = Path("/etc/apt/sources.list.d/openziti.list")
    KEYRING: Path = Path("/usr/share/keyrings/openziti.gpg")

    # OpenZiti package repository
    KEY_URL: str = "https://get.openziti.io/tun/package-repos.gpg"
    REPO_URL: str = "https://packages.openziti.org/zitipax-openziti-deb-stable"
    REPO_COMPONENT: str = "main"
    PREREQUISITES: tuple = ("curl", "gpg", "ca-certificates")

    # Package, binary and service
    PACKAGE: str = "ziti-edge-tunnel"
    BINARY: str = "ziti-edge-tunnel"
    SERVICE: str = "ziti-edge-tunnel.service"

    # DNS
    RESOLVER_SERVICE: str = "systemd-resolved"
    INTERCEPT_DNS_ADDR: str = "100.64.0.2"

    def apt_source_line(self, suite: str) -> str:
        """Return the one-line APT source entry for the given suite."""
        return (
            f"deb [signed-by={self.KEYRING}] {self.REPO_URL} "
            f"{suite} {self.REPO_COMPONENT}\n"
        )
