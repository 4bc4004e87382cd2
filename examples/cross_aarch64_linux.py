"""Cross-compile LLVM for aarch64 Linux with assertions enabled."""

from __future__ import annotations

import sys

from llvm_src import Build, LlvmSrcError


def main() -> int:
    build = (
        Build.from_env()
        .set_host("x86_64-unknown-linux-gnu")
        .set_target("aarch64-unknown-linux-gnu")
        .set_profile("Debug")
        .set_out_dir("target/aarch64")
        .set_jobs(8)
        .define("LLVM_ENABLE_ASSERTIONS", "ON")
        .define("LLVM_TARGETS_TO_BUILD", "AArch64")
    )
    build.sort_libs = True
    try:
        artifacts = build.build()
    except LlvmSrcError as exc:
        print(exc, file=sys.stderr)
        return 1
    artifacts.print_cargo_metadata()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
