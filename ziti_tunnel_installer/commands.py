"""External command execution helpers."""

import logging
import os
import shlex
import shutil
import subprocess
from typing import Dict, List, Optional, Sequence, Union

from .errors import CommandError

logger = logging.getLogger("ziti_install")

REDACTED = "********"


def format_command(command: Sequence[str], redact: Sequence[str] = ()) -> str:
    """Return a shell-quoted display form of command with secrets masked."""
    return " ".join(
        REDACTED if arg in redact else shlex.quote(arg) for arg in command
    )


def command_exists(command: str) -> bool:
    """Return True if command resolves on PATH."""
    return shutil.which(command) is not None


def _log_output(label: str, output: Union[str, bytes, None]) -> None:
    if not output or isinstance(output, bytes):
        return
    for line in output.rstrip().splitlines():
        logger.debug("%s %s", label, line)


def run_command(
    command: List[str],
    capture_output: bool = True,
    text: bool = True,
    check: bool = True,
    env: Optional[Dict[str, str]] = None,
    input: Union[str, bytes, None] = None,
    redact: Sequence[str] = (),
) -> subprocess.CompletedProcess:
    """
    Run a command, logging it and its captured output.

    Args:
        command: Command as a list of strings
        capture_output: Whether to capture stdout/stderr
        text: Whether to decode output as text
        check: Raise CommandError on a non-zero exit status
        env: Extra environment variables merged over os.environ
        input: Data passed to the command's stdin
        redact: Argument values masked in every log line

    Returns:
        CompletedProcess instance with command results

    Raises:
        CommandError: If the executable is missing, or it exits non-zero
            and check is True
    """
    cmd_str = format_command(command, redact)
    logger.debug("Executing: %s", cmd_str)

    run_env = None
    if env:
        run_env = os.environ.copy()
        run_env.update(env)

    try:
        result = subprocess.run(
            command,
            capture_output=capture_output,
            text=text,
            errors="replace" if text else None,
            env=run_env,
            input=input,
        )
    except FileNotFoundError:
        logger.error("Command not found: %s", command[0])
        raise CommandError(cmd_str, None) from None

    _log_output("stdout:", result.stdout)
    _log_output("stderr:", result.stderr)

    if check and result.returncode != 0:
        stderr = result.stderr if isinstance(result.stderr, str) else ""
        if isinstance(result.stderr, bytes):
            stderr = result.stderr.decode(errors="replace")
        raise CommandError(cmd_str, result.returncode, stderr.strip())
    return result
