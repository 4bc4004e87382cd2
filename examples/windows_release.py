"""Release build of LLVM for x86_64 Windows (MSVC), printing cargo metadata."""

from __future__ import annotations

import os
from pathlib import Path

from llvm_src import Build


def main() -> None:
    os.environ["NUM_JOBS"] = "12"
    build = (
        Build.from_env()
        .set_host("x86_64-pc-windows-msvc")
        .set_target("x86_64-pc-windows-msvc")
        .set_profile("Release")
        .set_out_dir(Path("target"))
    )
    artifacts = build.build()
    artifacts.print_cargo_metadata()


if __name__ == "__main__":
    main()
