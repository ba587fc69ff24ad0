"""
External process execution
"""

import shutil
import subprocess
from typing import Optional, Tuple

from .errors import MissingToolError, ProcessFailedError
from .models import Invocation
from .rich_console import RichOutput, rich_output


class Runner:
    """Runs Invocations synchronously, never through a shell"""

    def __init__(self, output: Optional[RichOutput] = None, dry_run: bool = False, debug: bool = False):
        self.output = output or rich_output
        self.dry_run = dry_run
        self.debug = debug

    def require(self, program: str):
        """Fail before invocation when a binary is not on PATH"""
        if self.dry_run:
            return
        if shutil.which(program) is None:
            raise MissingToolError(f"{program} not found. Please make it available in PATH.")

    def run(self, invocation: Invocation, capture: bool = False) -> Tuple[int, str, str]:
        """Execute and return (returncode, stdout, stderr)

        Without capture the child writes straight to the terminal and both
        returned streams are empty.
        """
        if self.dry_run:
            self.output.print_command(invocation, prefix="DRY-RUN")
            return 0, '', ''
        if self.debug:
            self.output.print_command(invocation)

        try:
            if capture:
                p = subprocess.run(invocation.argv, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)
                return p.returncode, p.stdout, p.stderr
            p = subprocess.run(invocation.argv)
            return p.returncode, '', ''
        except FileNotFoundError:
            raise MissingToolError(f"{invocation.program} not found")
        except PermissionError:
            raise MissingToolError(f"{invocation.program} is not executable")

    def check(self, invocation: Invocation, capture: bool = False) -> Tuple[str, str]:
        """Execute and raise ProcessFailedError on a non-zero exit"""
        code, out, err = self.run(invocation, capture=capture)
        if code != 0:
            raise ProcessFailedError(invocation.program, code, err.strip() or None)
        return out, err
