"""Command-line entry point for the ziti-edge-tunnel installer."""

import logging
import signal
import sys
import traceback
from pathlib import Path
from typing import Optional

import click

from . import VERSION
from .config import DEFAULT_LOG_FILE, DEFAULT_OS_RELEASE, Config
from .errors import CommandError, ExitCode, InstallerError
from .installer import ZitiInstaller
from .logging_setup import LOGGER_NAME, setup_logger
from .ui import console, create_header

APP_NAME: str = "Ziti Tunnel Setup"


def failure_origin(exc: BaseException) -> str:
    """
    Return "file:line" of the installer code that issued the failing call,
    skipping library frames and the command runner itself.
    """
    package_dir = Path(__file__).resolve().parent
    frames = traceback.extract_tb(exc.__traceback__)
    for frame in reversed(frames):
        path = Path(frame.filename).resolve()
        if path.parent == package_dir and path.name != "commands.py":
            return f"{path.name}:{frame.lineno}"
    return "unknown"


# ----------------------------------------------------------------
# Signal Handling
# ----------------------------------------------------------------
def signal_handler(signum, frame) -> None:
    sig_name = signal.Signals(signum).name
    logging.getLogger(LOGGER_NAME).error("Installer interrupted by %s.", sig_name)
    sys.exit(128 + signum)


def install_signal_handlers() -> None:
    for sig in (signal.SIGTERM, signal.SIGHUP):
        signal.signal(sig, signal_handler)


def run(config: Config, show_banner: bool = True) -> int:
    """
    Run the installer and return the process exit code.

    Args:
        config: Settings for this run
        show_banner: Print the ASCII art header first

    Returns:
        An ExitCode value
    """
    logger = setup_logger(config.DEBUG)
    if show_banner:
        console.print(create_header(APP_NAME, VERSION))

    installer = ZitiInstaller(config, logger)
    try:
        installer.run()
    except CommandError as e:
        logger.error("failed at %s: %s", failure_origin(e), e)
        if e.stderr:
            logger.error(e.stderr)
        code = e.exit_code
    except InstallerError as e:
        logger.error(str(e))
        code = e.exit_code
    except OSError as e:
        logger.error("failed at %s: %s", failure_origin(e), e)
        code = ExitCode.COMMAND_FAILED
    except KeyboardInterrupt:
        logger.error("Installation interrupted by user.")
        code = ExitCode.INTERRUPTED
    except SystemExit:
        installer.print_summary()
        raise
    except Exception as e:
        logger.error("failed at %s: %s: %s", failure_origin(e), type(e).__name__, e)
        code = ExitCode.COMMAND_FAILED
    else:
        code = ExitCode.SUCCESS

    installer.print_summary()
    return int(code)


# ----------------------------------------------------------------
# Main CLI Entry Point with Click
# ----------------------------------------------------------------
@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--identity-jwt",
    envvar="IDENTITY_JWT",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Enrollment JWT; the identity is named after the file",
)
@click.option(
    "--log-file",
    envvar="LOG_FILE",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_LOG_FILE,
    show_default=True,
    help="Install log file",
)
@click.option(
    "--suite-override",
    envvar="UBUNTU_LTS_OVERRIDE",
    default=None,
    help="OpenZiti APT suite to use instead of the detected one (e.g. jammy)",
)
@click.option(
    "--os-release",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_OS_RELEASE,
    show_default=True,
    help="os-release file to detect the distribution from",
)
@click.option("--no-banner", is_flag=True, help="Skip the ASCII art header")
@click.option("--debug", is_flag=True, help="Show command output on the console")
@click.version_option(VERSION, prog_name="ziti-tunnel-install")
def main(
    identity_jwt: Optional[Path],
    log_file: Path,
    suite_override: Optional[str],
    os_release: Path,
    no_banner: bool,
    debug: bool,
) -> None:
    """
    Install and enable OpenZiti ziti-edge-tunnel on Debian or Ubuntu.

    Must be run as root.
    """
    install_signal_handlers()
    config = Config(
        IDENTITY_JWT=identity_jwt,
        LOG_FILE=log_file,
        SUITE_OVERRIDE=suite_override or None,
        OS_RELEASE=os_release,
        DEBUG=debug,
    )
    sys.exit(run(config, show_banner=not no_banner))
