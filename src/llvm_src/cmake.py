"""CMake configure/build/install driver.

Drives a CMake source tree the same way cargo's cmake integration does:
configure into ``<out_dir>/build``, then build the ``install`` target with
``<out_dir>`` as the install prefix.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from llvm_src.config import parse_jobs
from llvm_src.errors import BuildToolError
from llvm_src.observability import StructuredLogger

OUTPUT_TAIL = 2000

_SYSTEM_NAMES = {
    "linux": "Linux",
    "windows": "Windows",
    "darwin": "Darwin",
    "macos": "Darwin",
    "ios": "iOS",
    "android": "Android",
    "freebsd": "FreeBSD",
    "netbsd": "NetBSD",
    "openbsd": "OpenBSD",
    "none": "Generic",
}


def default_cmake() -> str:
    return os.environ.get("CMAKE") or "cmake"


def system_name_for(triple: str) -> str | None:
    """Map a target triple to a ``CMAKE_SYSTEM_NAME`` value, if known."""
    parts = triple.split("-")[1:]
    # Android triples also carry "linux".
    if any(part.startswith("android") for part in parts):
        return _SYSTEM_NAMES["android"]
    for part in parts:
        if part in _SYSTEM_NAMES:
            return _SYSTEM_NAMES[part]
    return None


@dataclass(slots=True)
class CMakeConfig:
    source_dir: Path
    host: str
    target: str
    out_dir: Path
    profile: str
    defines: Mapping[str, str] = field(default_factory=dict)
    jobs: str | None = None
    env: Mapping[str, str] = field(default_factory=dict)
    cmake: str = field(default_factory=default_cmake)
    logger: StructuredLogger = field(default_factory=StructuredLogger)

    @property
    def build_dir(self) -> Path:
        return self.out_dir / "build"

    def cross_defines(self) -> dict[str, str]:
        if self.host == self.target:
            return {}
        defines = {
            "CMAKE_SYSTEM_PROCESSOR": self.target.split("-", 1)[0],
            "CMAKE_C_COMPILER_TARGET": self.target,
            "CMAKE_CXX_COMPILER_TARGET": self.target,
        }
        system_name = system_name_for(self.target)
        if system_name is not None:
            defines["CMAKE_SYSTEM_NAME"] = system_name
        return defines

    def configure_command(self) -> tuple[str, ...]:
        defines = {
            "CMAKE_INSTALL_PREFIX": str(self.out_dir),
            "CMAKE_BUILD_TYPE": self.profile,
            **self.cross_defines(),
            **self.defines,
        }
        return (
            self.cmake,
            "-S",
            str(self.source_dir),
            "-B",
            str(self.build_dir),
            *(f"-D{key}={value}" for key, value in sorted(defines.items())),
        )

    def build_command(self) -> tuple[str, ...]:
        command = [
            self.cmake,
            "--build",
            str(self.build_dir),
            "--target",
            "install",
            "--config",
            self.profile,
        ]
        jobs = parse_jobs(self.jobs)
        if jobs is not None:
            command.extend(["--parallel", jobs])
        return tuple(command)

    def run(self) -> Path:
        """Configure, build and install; return the install prefix."""
        self._ensure_prerequisites()
        try:
            self.build_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise BuildToolError(
                "Unable to create the cmake build directory.",
                hint="Point the output directory at a writable location.",
                context={"phase": "prepare", "path": str(self.build_dir), "error": str(exc)},
            ) from exc
        self._invoke("configure", self.configure_command())
        self._invoke("compile", self.build_command())
        return self.out_dir

    def _child_env(self) -> dict[str, str]:
        env = {**os.environ, **self.env}
        jobs = parse_jobs(self.jobs)
        if jobs is not None:
            env["NUM_JOBS"] = jobs
        return env

    def _invoke(self, phase: str, command: tuple[str, ...]) -> None:
        self.logger.log(
            operation="cmake",
            phase=phase,
            message=f"running cmake {phase}",
            command=command,
        )
        try:
            result = subprocess.run(
                command,
                env=self._child_env(),
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            self.logger.log(
                operation="cmake",
                phase=phase,
                message=f"cmake {phase} could not be started",
                level="error",
                command=command,
            )
            raise BuildToolError(
                f"cmake {phase} could not be started.",
                hint="Check that the cmake executable is runnable.",
                context={"phase": phase, "error": str(exc), "command": " ".join(command)},
            ) from exc
        if result.returncode != 0:
            self.logger.log(
                operation="cmake",
                phase=phase,
                message=f"cmake {phase} failed",
                level="error",
                command=command,
                returncode=result.returncode,
            )
            # Ninja and MSBuild report compiler errors on stdout.
            raise BuildToolError(
                f"cmake {phase} failed.",
                hint="Check the cmake output for details.",
                context={
                    "phase": phase,
                    "returncode": str(result.returncode),
                    "stderr": _tail(result.stderr),
                    "stdout": _tail(result.stdout),
                    "command": " ".join(command),
                },
            )
        self.logger.log(
            operation="cmake",
            phase=phase,
            message=f"cmake {phase} finished",
            command=command,
            returncode=result.returncode,
        )

    def _ensure_prerequisites(self) -> None:
        if shutil.which(self.cmake) is None:
            raise BuildToolError(
                f"`{self.cmake}` was not found in PATH.",
                hint="Install CMake or point the CMAKE environment variable at it.",
                context={"operation": "prepare"},
            )
        if not (self.source_dir / "CMakeLists.txt").is_file():
            raise BuildToolError(
                "Source directory does not contain a CMakeLists.txt.",
                hint="Make sure the bundled LLVM sources were unpacked next to the package.",
                context={"operation": "prepare", "source_dir": str(self.source_dir)},
            )


def _tail(output: str | None) -> str:
    return output[-OUTPUT_TAIL:] if output else ""
