"""
The installer pipeline.

ZitiInstaller runs each phase in order and stops at the first failure. Phase
methods raise InstallerError subclasses; the CLI turns those into exit codes.
"""

import logging
import os
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

from .commands import command_exists, run_command
from .config import Config
from .errors import (
    BinaryMissingError,
    CommandError,
    EnrollmentError,
    IdentityFileError,
    NotRootError,
)
from .logging_setup import add_file_handler
from .osinfo import OSRelease, read_os_release, resolve_suite
from .ui import (
    NordColors,
    display_panel,
    print_section,
    print_status_report,
    print_success,
)

NONINTERACTIVE = {"DEBIAN_FRONTEND": "noninteractive"}


def derive_identity_name(jwt_path: Union[str, Path]) -> str:
    """
    Return the identity name for an enrollment file: its basename with the
    final extension stripped ("alice.jwt" -> "alice").
    """
    base = Path(jwt_path).name
    head, sep, _ = base.rpartition(".")
    if sep and head:
        return head
    return base


class ZitiInstaller:
    """Core class that runs all install phases sequentially."""

    def __init__(self, config: Config, logger: Optional[logging.Logger] = None):
        self.config = config
        self.logger = logger or logging.getLogger("ziti_install")
        self.os_release: Optional[OSRelease] = None
        self.suite: Optional[str] = None
        self.identity_name: Optional[str] = None
        self.current_phase: Optional[str] = None
        self.status: Dict[str, Dict[str, str]] = {
            title: {"status": "pending", "message": ""} for title, _ in self.phases()
        }

    def phases(self) -> List[Tuple[str, Callable[[], Optional[str]]]]:
        return [
            ("Preflight", self.preflight),
            ("Detect OS", self.detect_os),
            ("OpenZiti Repository", self.provision_repository),
            ("Install ziti-edge-tunnel", self.install_package),
            ("Enable Service", self.activate_service),
            ("Identity Enrollment", self.enroll_identity),
            ("Resolver Note", self.resolver_advisory),
        ]

    # --- Status tracking ---
    def _mark(self, status: str, message: str = "") -> None:
        if self.current_phase is not None:
            self.status[self.current_phase] = {"status": status, "message": message}

    def warn(self, message: str) -> None:
        """Log a non-fatal problem and flag the current phase as a warning."""
        self.logger.warning(message)
        self._mark("warning", message)

    def print_summary(self) -> None:
        print_status_report(self.status, "ziti-edge-tunnel Install Report")

    # --- Phase: Preflight ---
    def preflight(self) -> str:
        self.check_root()
        log_file = add_file_handler(self.logger, self.config.LOG_FILE)
        return f"root confirmed, logging to {log_file}"

    def check_root(self) -> None:
        """Ensure the installer runs with root privileges."""
        if os.geteuid() != 0:
            raise NotRootError("Run as root (use sudo).")
        self.logger.debug("Root privileges confirmed.")

    # --- Phase: OS detection & suite mapping ---
    def detect_os(self) -> str:
        self.os_release = read_os_release(self.config.OS_RELEASE)
        self.logger.info(self.os_release.describe())

        override = self.config.SUITE_OVERRIDE
        if override:
            self.logger.info("Suite override '%s' supplied; skipping detection.", override)
        self.suite = resolve_suite(self.os_release, override)
        self.logger.info(
            "Using Ubuntu suite '%s' for OpenZiti APT repo mapping.", self.suite
        )
        return f"{self.os_release.pretty_name or self.os_release.id} -> {self.suite}"

    # --- Phase: Repository ---
    def provision_repository(self) -> str:
        """Install prerequisites, the OpenZiti signing key and the APT source."""
        cfg = self.config

        self.logger.info("Installing prerequisites: %s", " ".join(cfg.PREREQUISITES))
        run_command(["apt-get", "update"])
        run_command(
            ["apt-get", "install", "-y", *cfg.PREREQUISITES], env=NONINTERACTIVE
        )

        self.logger.info("Importing OpenZiti signing key into %s", cfg.KEYRING)
        cfg.KEYRING.parent.mkdir(parents=True, exist_ok=True)
        cfg.KEYRING.parent.chmod(0o755)
        key = run_command(["curl", "-sSLf", cfg.KEY_URL], text=False).stdout
        run_command(
            ["gpg", "--batch", "--yes", "--dearmor", "-o", str(cfg.KEYRING)],
            text=False,
            input=key,
        )
        cfg.KEYRING.chmod(cfg.KEYRING.stat().st_mode | 0o444)

        cfg.APT_LIST.parent.mkdir(parents=True, exist_ok=True)
        cfg.APT_LIST.write_text(cfg.apt_source_line(self.suite))
        self.logger.info("Wrote APT source %s", cfg.APT_LIST)
        return f"{cfg.APT_LIST} ({self.suite})"

    # --- Phase: Package ---
    def install_package(self) -> str:
        cfg = self.config
        run_command(["apt-get", "update"])
        run_command(["apt-get", "install", "-y", cfg.PACKAGE], env=NONINTERACTIVE)
        if not command_exists(cfg.BINARY):
            raise BinaryMissingError(f"Binary not found after install: {cfg.BINARY}")
        print_success(f"{cfg.PACKAGE} installed.")
        return f"{cfg.BINARY} on PATH"

    # --- Phase: Service ---
    def activate_service(self) -> str:
        """Enable and start the service; a failing status query only warns."""
        cfg = self.config
        run_command(["systemctl", "enable", "--now", cfg.SERVICE])

        status = run_command(
            ["systemctl", "--no-pager", "--full", "status", cfg.SERVICE], check=False
        )
        if status.stdout and status.stdout.strip():
            display_panel(
                status.stdout.strip(), style=NordColors.FROST_3, title=cfg.SERVICE
            )
        if status.returncode != 0:
            self.warn(f"Service status reported non-zero (exit {status.returncode})")
            return ""
        return f"{cfg.SERVICE} enabled and started"

    # --- Phase: Enrollment ---
    def enroll_identity(self) -> str:
        jwt_path = self.config.IDENTITY_JWT
        if not jwt_path:
            self.logger.info("No IDENTITY_JWT provided; skipping enrollment")
            self._mark("skipped", "no IDENTITY_JWT")
            return ""

        jwt_path = Path(jwt_path)
        if not jwt_path.is_file():
            raise IdentityFileError(f"JWT not found: {jwt_path}")

        self.identity_name = derive_identity_name(jwt_path)
        jwt = jwt_path.read_text(encoding="utf-8").rstrip("\n")
        result = run_command(
            [
                self.config.BINARY,
                "add",
                "--jwt",
                jwt,
                "--identity",
                self.identity_name,
            ],
            check=False,
            redact=(jwt,),
        )
        if result.returncode != 0:
            detail = (result.stderr or "").strip()
            raise EnrollmentError(
                f"Enrollment failed for identity '{self.identity_name}' "
                f"(exit {result.returncode})" + (f": {detail}" if detail else "")
            )
        self.logger.info("Enrolled identity '%s'", self.identity_name)
        return f"identity '{self.identity_name}' enrolled"

    # --- Phase: Resolver ---
    def resolver_advisory(self) -> str:
        """Report whether systemd-resolved is active. Never fatal."""
        cfg = self.config
        try:
            result = run_command(
                ["systemctl", "is-active", cfg.RESOLVER_SERVICE], check=False
            )
            active = result.returncode == 0 and result.stdout.strip() == "active"
        except CommandError as e:
            self.logger.debug("Resolver check could not run: %s", e)
            active = False

        if active:
            self.logger.info(
                "%s active; Ziti DNS should auto-configure", cfg.RESOLVER_SERVICE
            )
            return f"{cfg.RESOLVER_SERVICE} active"
        self.warn(
            f"{cfg.RESOLVER_SERVICE} not active; ensure resolver can reach "
            f"{cfg.INTERCEPT_DNS_ADDR} if using intercept DNS"
        )
        return ""

    # --- Driver ---
    def run(self) -> None:
        """
        Run every phase in order.

        Raises:
            InstallerError: From the first phase that fails; the phase is
                marked failed before the error propagates
            OSError: From file writes in the repository phase
        """
        for title, phase in self.phases():
            self.current_phase = title
            self._mark("in_progress")
            print_section(title)
            try:
                message = phase()
            except BaseException as e:
                self._mark("failed", str(e) or type(e).__name__)
                raise
            if self.status[title]["status"] == "in_progress":
                self._mark("success", message or "")
        self.current_phase = None
        self.logger.info("Complete. Logs: %s", self.config.LOG_FILE)
