"""Global pytest fixtures and configuration."""

import logging
import subprocess
from pathlib import Path

import pytest

from ziti_tunnel_installer.commands import format_command
from ziti_tunnel_installer.config import Config
from ziti_tunnel_installer.errors import CommandError
from ziti_tunnel_installer.logging_setup import LOGGER_NAME

DEBIAN_12 = """\
PRETTY_NAME="Debian GNU/Linux 12 (bookworm)"
NAME="Debian GNU/Linux"
VERSION_ID="12"
VERSION="12 (bookworm)"
VERSION_CODENAME=bookworm
ID=debian
"""

DEBIAN_9 = """\
PRETTY_NAME="Debian GNU/Linux 9 (stretch)"
VERSION_ID="9"
VERSION_CODENAME=stretch
ID=debian
"""

UBUNTU_2204 = """\
PRETTY_NAME="Ubuntu 22.04.4 LTS"
NAME="Ubuntu"
VERSION_ID="22.04"
VERSION_CODENAME=jammy
ID=ubuntu
ID_LIKE=debian
UBUNTU_CODENAME=jammy
"""

FEDORA_40 = """\
NAME="Fedora Linux"
VERSION_ID=40
ID=fedora
PRETTY_NAME="Fedora Linux 40 (Workstation Edition)"
"""


class FakeRunner:
    """
    Stand-in for run_command that records every command.

    Results are matched by command prefix; unmatched commands succeed with
    empty output. A "gpg ... -o PATH" call writes its stdin to PATH.
    """

    def __init__(self):
        self.calls = []
        self.inputs = []
        self.envs = []
        self.results = {}
        self.missing = set()

    def set(self, *prefix, returncode=0, stdout="", stderr=""):
        self.results[tuple(prefix)] = (returncode, stdout, stderr)

    def called(self, *prefix):
        return [c for c in self.calls if tuple(c[: len(prefix)]) == prefix]

    def __call__(
        self,
        command,
        capture_output=True,
        text=True,
        check=True,
        env=None,
        input=None,
        redact=(),
    ):
        self.calls.append(list(command))
        self.inputs.append(input)
        self.envs.append(env)
        cmd_str = format_command(command, redact)
        if command[0] in self.missing:
            raise CommandError(cmd_str, None)

        returncode, stdout, stderr = 0, ("" if text else b"KEYDATA"), ""
        for prefix, result in self.results.items():
            if tuple(command[: len(prefix)]) == prefix:
                returncode, stdout, stderr = result

        if command[0] == "gpg" and "-o" in command:
            Path(command[command.index("-o") + 1]).write_bytes(input or b"")

        if check and returncode != 0:
            raise CommandError(cmd_str, returncode, stderr)
        return subprocess.CompletedProcess(command, returncode, stdout, stderr)


@pytest.fixture(autouse=True)
def reset_logger():
    """Log everything during a test, then detach handlers so log files are closed."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    yield
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def write_os_release(tmp_path):
    def _write(content, name="os-release"):
        path = tmp_path / name
        path.write_text(content)
        return path

    return _write


@pytest.fixture
def fake_runner(monkeypatch):
    runner = FakeRunner()
    monkeypatch.setattr("ziti_tunnel_installer.installer.run_command", runner)
    return runner


@pytest.fixture
def as_root(monkeypatch):
    monkeypatch.setattr("ziti_tunnel_installer.installer.os.geteuid", lambda: 0, raising=False)


@pytest.fixture
def binary_present(monkeypatch):
    monkeypatch.setattr(
        "ziti_tunnel_installer.installer.command_exists", lambda name: True
    )


@pytest.fixture
def make_config(tmp_path, write_os_release):
    """Build a Config whose system paths all live under tmp_path."""

    def _make(os_release=DEBIAN_12, **overrides):
        values = dict(
            LOG_FILE=tmp_path / "log" / "install.log",
            OS_RELEASE=write_os_release(os_release),
            APT_LIST=tmp_path / "etc" / "apt" / "sources.list.d" / "openziti.list",
            KEYRING=tmp_path / "usr" / "share" / "keyrings" / "openziti.gpg",
        )
        values.update(overrides)
        return Config(**values)

    return _make
