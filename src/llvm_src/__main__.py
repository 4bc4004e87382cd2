"""CLI for building LLVM and printing cargo metadata.

Usage:
    python -m llvm_src --host x86_64-pc-windows-msvc --target x86_64-pc-windows-msvc \
        --profile Release --out-dir target --jobs 12
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from llvm_src.build import Build
from llvm_src.errors import LlvmSrcError


def _positive_int(value: str) -> int:
    try:
        jobs = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid job count: {value!r}") from None
    if jobs < 1:
        raise argparse.ArgumentTypeError(f"job count must be at least 1, got {jobs}")
    return jobs


def _key_value(value: str) -> tuple[str, str]:
    key, sep, rest = value.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {value!r}")
    return key, rest


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="llvm-src",
        description="Build the bundled LLVM sources and print cargo metadata",
    )
    parser.add_argument("--host", help="Host triple (defaults to $HOST)")
    parser.add_argument("--target", help="Target triple (defaults to $TARGET)")
    parser.add_argument("--profile", help="CMake build type (defaults to $PROFILE)")
    parser.add_argument(
        "--out-dir",
        type=Path,
        help="Output directory; the build goes to <out-dir>/llvm-build (defaults to $OUT_DIR)",
    )
    parser.add_argument(
        "--source-dir",
        type=Path,
        help="CMake source tree to build instead of the bundled LLVM sources",
    )
    parser.add_argument(
        "--jobs",
        type=_positive_int,
        help="Parallel build jobs (defaults to $NUM_JOBS)",
    )
    parser.add_argument(
        "-D",
        "--define",
        action="append",
        default=[],
        type=_key_value,
        metavar="KEY=VALUE",
        help="Extra CMake cache entry, e.g. -D LLVM_ENABLE_ASSERTIONS=ON",
    )
    parser.add_argument(
        "--env",
        action="append",
        default=[],
        type=_key_value,
        metavar="KEY=VALUE",
        help="Environment variable for the cmake processes",
    )
    parser.add_argument(
        "--sort-libs",
        action="store_true",
        help="Emit libraries in lexicographic order instead of directory order",
    )
    parser.add_argument("--log-file", type=Path, help="Write structured build logs as JSON lines")
    return parser


def configure(args: argparse.Namespace) -> Build:
    build = Build.from_env()
    if args.host:
        build.set_host(args.host)
    if args.target:
        build.set_target(args.target)
    if args.profile:
        build.set_profile(args.profile)
    if args.out_dir is not None:
        build.set_out_dir(args.out_dir)
    if args.jobs is not None:
        build.set_jobs(args.jobs)
    for key, value in args.define:
        build.define(key, value)
    for key, value in args.env:
        build.set_env(key, value)
    if args.source_dir is not None:
        build.source_dir = args.source_dir
    build.sort_libs = args.sort_libs
    return build


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    build = configure(args)
    try:
        artifacts = build.build()
    except LlvmSrcError as exc:
        print(f"error[{exc.code}]: {exc}", file=sys.stderr)
        return 1
    finally:
        if args.log_file is not None:
            build.logger.to_json_lines(args.log_file)
    artifacts.print_cargo_metadata()
    return 0


if __name__ == "__main__":
    sys.exit(main())
