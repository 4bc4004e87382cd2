"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pytest

BUILD_VARIABLES = ("HOST", "TARGET", "OUT_DIR", "PROFILE", "NUM_JOBS", "CMAKE")


@dataclass
class FakeResult:
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""


@dataclass
class CMakeSpy:
    """Stands in for ``subprocess.run``; the install step drops fake libraries."""

    libs: tuple[str, ...] = ("libLLVMCore.a", "libLLVMSupport.a")
    fail_phase: str | None = None
    stderr: str = "CMake Error: something broke"
    stdout: str = ""
    calls: list[tuple[str, ...]] = field(default_factory=list)
    envs: list[dict[str, str]] = field(default_factory=list)

    def __call__(self, command: Sequence[str], **kwargs: object) -> FakeResult:
        command = tuple(command)
        self.calls.append(command)
        env = kwargs.get("env")
        self.envs.append(dict(env) if isinstance(env, dict) else {})
        phase = "compile" if "--build" in command else "configure"
        if phase == self.fail_phase:
            return FakeResult(returncode=2, stdout=self.stdout, stderr=self.stderr)
        if phase == "compile":
            lib_dir = Path(command[command.index("--build") + 1]) / "lib"
            lib_dir.mkdir(parents=True, exist_ok=True)
            for name in self.libs:
                (lib_dir / name).write_bytes(b"")
        return FakeResult()


@pytest.fixture(autouse=True)
def clean_build_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's HOST/TARGET/... out of the tests."""
    for name in BUILD_VARIABLES:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cmake_spy(monkeypatch: pytest.MonkeyPatch) -> CMakeSpy:
    spy = CMakeSpy()
    monkeypatch.setattr("llvm_src.cmake.subprocess.run", spy)
    monkeypatch.setattr("llvm_src.cmake.shutil.which", lambda _: "/usr/bin/cmake")
    return spy


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    source = tmp_path / "llvm-project" / "llvm"
    source.mkdir(parents=True)
    (source / "CMakeLists.txt").write_text("project(LLVM)\n", encoding="utf-8")
    return source
