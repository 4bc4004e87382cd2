"""Build artifacts and cargo metadata emission."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from llvm_src.errors import ArtifactScanError, UnexpectedArtifactNameError


@dataclass(frozen=True, slots=True)
class Artifacts:
    """Paths and library names produced by :meth:`llvm_src.Build.build`."""

    include_dir: Path
    lib_dir: Path
    libs: tuple[str, ...] = ()

    @classmethod
    def for_out_dir(cls, out_dir: Path, libs: tuple[str, ...] = ()) -> Artifacts:
        return cls(include_dir=out_dir / "include", lib_dir=out_dir / "lib", libs=libs)

    def metadata_lines(self) -> list[str]:
        lines = [f"cargo:include={self.include_dir}", f"cargo:lib={self.lib_dir}"]
        lines.extend(f"cargo:rustc-link-lib={lib}" for lib in self.libs)
        return lines

    def print_cargo_metadata(self, stream: TextIO | None = None) -> None:
        out = sys.stdout if stream is None else stream
        for line in self.metadata_lines():
            print(line, file=out)


def strip_extension(file_name: str) -> str:
    """Drop the final extension segment: ``libLLVMCore.a`` -> ``libLLVMCore``."""
    index = file_name.rfind(".")
    if index < 0:
        raise UnexpectedArtifactNameError(
            "Library artifact has no file extension.",
            hint="The build tool is expected to emit `<name>.<ext>` files only.",
            context={"file": file_name},
        )
    return file_name[:index]


def _entry_name(entry: os.DirEntry[str], lib_dir: Path) -> str:
    try:
        entry.name.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ArtifactScanError(
            "Library artifact name is not valid UTF-8.",
            hint="Cargo metadata is UTF-8 text; rename or remove the file.",
            context={
                "path": str(lib_dir),
                "file": entry.name.encode("utf-8", "backslashreplace").decode("utf-8"),
            },
        ) from exc
    return entry.name


def scan_libs(lib_dir: Path, *, sort: bool = False) -> tuple[str, ...]:
    """List library base names in ``lib_dir``, regular files only.

    Every name is checked before anything is returned, so a bad entry never
    yields a partial list.
    """
    try:
        with os.scandir(lib_dir) as entries:
            names = [
                strip_extension(_entry_name(entry, lib_dir))
                for entry in entries
                if entry.is_file(follow_symlinks=False)
            ]
    except OSError as exc:
        raise ArtifactScanError(
            "Unable to read the library output directory.",
            hint="The cmake build should have produced it; check the build log.",
            context={"path": str(lib_dir), "error": str(exc)},
        ) from exc
    if sort:
        names.sort()
    return tuple(names)
