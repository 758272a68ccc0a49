"""Running govc commands and collecting their exit codes and output."""

from __future__ import annotations

import subprocess
from abc import ABC, abstractmethod
from collections.abc import Sequence


class CliRunner(ABC):
    """Something that runs a govc command line."""

    @abstractmethod
    def run(self, args: Sequence[str]) -> int:
        """Run the command and return its exit code."""

    @abstractmethod
    def run_with_output(self, args: Sequence[str]) -> tuple[str, int]:
        """Run the command and return its standard output and exit code.

        Raises OSError when the output cannot be collected. The exception
        may carry an ``exit_code`` attribute with the command's exit code.
        """


class GovcRunner(CliRunner):
    """Runs commands through the govc executable."""

    def __init__(self, executable: str = "govc") -> None:
        self.executable = executable

    def run(self, args: Sequence[str]) -> int:
        completed = subprocess.run([self.executable, *args], check=False)
        return completed.returncode

    def run_with_output(self, args: Sequence[str]) -> tuple[str, int]:
        completed = subprocess.run(
            [self.executable, *args],
            stdout=subprocess.PIPE,
            check=False,
        )
        output = completed.stdout.decode("utf-8", errors="replace")
        return output, completed.returncode