"""
Exit codes and error types for the vidpro dispatcher
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for the vidpro CLI"""
    SUCCESS = 0
    FAILURE = 1
    INTERRUPTED = 130


class VidproError(Exception):
    """Base exception for vidpro errors"""

    def __init__(self, message: str, exit_code: int = ExitCode.FAILURE):
        super().__init__(message)
        self.exit_code = exit_code


class UsageError(VidproError):
    """Too few arguments or otherwise invalid input for a command"""

    def __init__(self, message: str, usage: str = None):
        super().__init__(message)
        self.usage = usage


class UnknownCommandError(VidproError):
    """The requested verb is not in the dispatch table"""

    def __init__(self, verb: str):
        super().__init__(f"Unknown command: {verb}")
        self.verb = verb


class MissingToolError(VidproError):
    """A required external script, directory or binary is not available"""


class ConfigError(VidproError):
    """Configuration could not be loaded or is invalid"""


class ProcessFailedError(VidproError):
    """An external process exited with a non-zero status"""

    def __init__(self, program: str, returncode: int, details: str = None):
        # negative return codes mean the child was killed by a signal
        exit_code = returncode if returncode > 0 else ExitCode.FAILURE
        super().__init__(f"{program} failed (exit code {returncode})", exit_code=exit_code)
        self.program = program
        self.returncode = returncode
        self.details = details
