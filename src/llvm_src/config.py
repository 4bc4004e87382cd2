"""Environment-driven build options."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

BUILD_SUBDIR = "llvm-build"

HOST_VAR = "HOST"
TARGET_VAR = "TARGET"
OUT_DIR_VAR = "OUT_DIR"
PROFILE_VAR = "PROFILE"
JOBS_VAR = "NUM_JOBS"


@dataclass(frozen=True, slots=True)
class BuildOptions:
    host: str | None = None
    target: str | None = None
    out_dir: Path | None = None
    profile: str | None = None
    jobs: str | None = None


def build_dir_for(out_dir: str | Path) -> Path:
    """Return the effective build root for a caller-provided output directory."""
    return Path(out_dir) / BUILD_SUBDIR


def parse_jobs(value: str | int | None) -> str | None:
    """Normalize a parallelism hint; anything but a positive integer means unset."""
    if value is None:
        return None
    try:
        jobs = int(value)
    except ValueError:
        return None
    return str(jobs) if jobs > 0 else None


def load_options(environ: Mapping[str, str] | None = None) -> BuildOptions:
    """Read the build variables once from ``environ`` (``os.environ`` by default)."""
    env = os.environ if environ is None else environ
    out_dir = _read(env, OUT_DIR_VAR)
    return BuildOptions(
        host=_read(env, HOST_VAR),
        target=_read(env, TARGET_VAR),
        out_dir=build_dir_for(out_dir) if out_dir is not None else None,
        profile=_read(env, PROFILE_VAR),
        jobs=parse_jobs(_read(env, JOBS_VAR)),
    )


def _read(env: Mapping[str, str], name: str) -> str | None:
    value = env.get(name)
    if value is None or not value.strip():
        return None
    return value
