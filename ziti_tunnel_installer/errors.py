"""Exit codes and the exceptions that carry them up to the CLI."""

from enum import IntEnum
from typing import Optional


class ExitCode(IntEnum):
    SUCCESS = 0
    PRECONDITION_FAILED = 1
    UNSUPPORTED_OS = 2
    BINARY_MISSING = 4
    IDENTITY_FILE_MISSING = 5
    ENROLLMENT_FAILED = 6
    COMMAND_FAILED = 99
    INTERRUPTED = 130


class InstallerError(Exception):
    """Base class for failures that abort the install with a specific exit code."""

    exit_code: ExitCode = ExitCode.COMMAND_FAILED


class NotRootError(InstallerError):
    exit_code = ExitCode.PRECONDITION_FAILED


class LogSetupError(InstallerError):
    exit_code = ExitCode.PRECONDITION_FAILED


class OSReleaseError(InstallerError):
    exit_code = ExitCode.PRECONDITION_FAILED


class UnsupportedOSError(InstallerError):
    exit_code = ExitCode.UNSUPPORTED_OS


class BinaryMissingError(InstallerError):
    exit_code = ExitCode.BINARY_MISSING


class IdentityFileError(InstallerError):
    exit_code = ExitCode.IDENTITY_FILE_MISSING


class EnrollmentError(InstallerError):
    exit_code = ExitCode.ENROLLMENT_FAILED


class CommandError(InstallerError):
    """
    An external command exited non-zero or could not be started.

    Attributes:
        command: Display form of the command, with secrets already redacted
        returncode: Exit status, or None when the executable was not found
        stderr: Captured standard error, if any
    """

    exit_code = ExitCode.COMMAND_FAILED

    def __init__(
        self, command: str, returncode: Optional[int], stderr: str = ""
    ) -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        if returncode is None:
            detail = "executable not found"
        else:
            detail = f"exit status {returncode}"
        super().__init__(f"{command} ({detail})")
