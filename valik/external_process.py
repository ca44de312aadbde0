"""Running child programs and collecting their output."""

from __future__ import annotations

import os
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, TextIO


class ExternalProcessError(RuntimeError):
    """An external program could not be found or started."""


@dataclass(frozen=True)
class ProcessResult:
    """Captured output and exit status of a finished child process."""

    stdout: str
    stderr: str
    status: int


def find_executable(name: str) -> Path:
    """Resolve a program name: paths are used as given, bare names are searched in PATH."""
    if not name:
        raise ExternalProcessError("executable name can't be empty")
    if os.path.dirname(name):
        return Path(name)
    env_path = os.environ.get("PATH")
    if env_path is None:
        raise ExternalProcessError("PATH variable is not accessible")
    for directory in env_path.split(":"):
        candidate = Path(directory) / name
        if candidate.exists():
            return candidate
    raise ExternalProcessError(f"Can not find {name} inside of PATH paths")


def run_external(args: Sequence[str], cwd: str | os.PathLike | None = None) -> ProcessResult:
    """Run a program to completion in cwd and return its output and exit status."""
    if not args:
        raise ExternalProcessError("no program given")
    executable = find_executable(args[0])
    try:
        completed = subprocess.run(
            [str(executable), *map(str, args[1:])],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as error:
        raise ExternalProcessError(f"Running {executable} failed") from error
    return ProcessResult(completed.stdout, completed.stderr, completed.returncode)


def check_success(args: Sequence[str], result: ProcessResult, stream: TextIO | None = None) -> bool:
    """Report a failed call with its arguments and error output; True on success."""
    if result.status == 0:
        return True
    out = sys.stderr if stream is None else stream
    out.write("External process failed\n")
    out.write("call:" + "".join(f" {arg}" for arg in args) + "\n")
    out.write(result.stderr + "\n")
    return False