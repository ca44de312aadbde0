"""Settings taken from environment variables for distributed searches."""

from __future__ import annotations

import os
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

_TEMPLATE_SUFFIX = "XXXXXX"
_ANY_WRITE = stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH


def create_temporary_path(name: str | os.PathLike) -> Path:
    """Create a fresh directory in the system temporary directory.

    name is relative and ends in 'XXXXXX', e.g. 'valik/call_XXXXXX'; the X's
    are replaced by a unique suffix.
    """
    relative = Path(name)
    if relative.is_absolute():
        raise ValueError("Must be given a relative file")
    if not relative.name.endswith(_TEMPLATE_SUFFIX):
        raise ValueError(f"Temporary folder name must end in {_TEMPLATE_SUFFIX}: {relative}")
    path = Path(tempfile.gettempdir()) / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    prefix = relative.name[: -len(_TEMPLATE_SUFFIX)]
    return Path(tempfile.mkdtemp(prefix=prefix, dir=path.parent))


@dataclass
class EnvVarPack:
    """Temporary directory and helper programs, overridable by VALIK_* variables."""

    tmp_path: Path
    stellar_exec: str = "stellar"
    merge_exec: str = "cat"

    @classmethod
    def from_environment(cls, environ: Mapping[str, str] | None = None) -> EnvVarPack:
        """Read VALIK_TMP, VALIK_STELLAR and VALIK_MERGE, creating a temporary directory if needed."""
        env = os.environ if environ is None else environ
        tmp = env.get("VALIK_TMP")
        if tmp is not None:
            tmp_path = Path(tmp)
            writable = tmp_path.exists() and bool(tmp_path.stat().st_mode & _ANY_WRITE)
            if not tmp_path.is_dir() or not writable:
                raise ValueError(
                    f"Directory $VALIK_TMP={tmp} must exist and write permission must be granted"
                )
        else:
            tmp_path = create_temporary_path("valik/stellar_call_XXXXXX")
        return cls(
            tmp_path=tmp_path,
            stellar_exec=env.get("VALIK_STELLAR", "stellar"),
            merge_exec=env.get("VALIK_MERGE", "cat"),
        )