"""Configurator and invoker for the bundled LLVM build."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from llvm_src.artifacts import Artifacts, scan_libs
from llvm_src.cmake import CMakeConfig
from llvm_src.config import BuildOptions, build_dir_for, load_options
from llvm_src.errors import MissingConfigurationError
from llvm_src.observability import StructuredLogger

LLVM_VERSION = "15.0.7"
SOURCE_DIR = Path(__file__).resolve().parent / f"llvm-{LLVM_VERSION}" / "llvm"


@dataclass(frozen=True, slots=True)
class ResolvedBuild:
    host: str
    target: str
    out_dir: Path
    profile: str
    jobs: str | None = None


@dataclass(slots=True)
class Build:
    """Builder for an LLVM build.

    ``Build.from_env()`` picks up ``HOST``, ``TARGET``, ``OUT_DIR`` and
    ``PROFILE`` from the environment; ``Build()`` starts empty. Anything
    missing must be supplied through the setters before :meth:`build`:

        artifacts = (
            Build.from_env()
            .set_host("x86_64-unknown-linux-gnu")
            .set_target("x86_64-unknown-linux-gnu")
            .set_profile("Release")
            .set_out_dir("target")
            .build()
        )
        artifacts.print_cargo_metadata()
    """

    host: str | None = None
    target: str | None = None
    out_dir: Path | None = None
    profile: str | None = None
    jobs: str | None = None
    sort_libs: bool = False
    source_dir: Path = SOURCE_DIR
    defines: dict[str, str] = field(default_factory=dict)
    env: dict[str, str] = field(default_factory=dict)
    logger: StructuredLogger = field(default_factory=StructuredLogger, compare=False, repr=False)

    @classmethod
    def from_options(cls, options: BuildOptions) -> Build:
        return cls(
            host=options.host,
            target=options.target,
            out_dir=options.out_dir,
            profile=options.profile,
            jobs=options.jobs,
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Build:
        """Create a build from ``HOST``, ``TARGET``, ``OUT_DIR``, ``PROFILE`` and ``NUM_JOBS``."""
        return cls.from_options(load_options(environ))

    def set_host(self, host: str) -> Build:
        """Set the host triple."""
        self.host = host
        return self

    def set_target(self, target: str) -> Build:
        """Set the target triple."""
        self.target = target
        return self

    def set_out_dir(self, out_dir: str | Path) -> Build:
        """Set the output directory; the build itself lives in ``<out_dir>/llvm-build``."""
        self.out_dir = build_dir_for(out_dir)
        return self

    def set_profile(self, profile: str) -> Build:
        """Set the CMake build type, e.g. ``Release`` or ``Debug``."""
        self.profile = profile
        return self

    def set_jobs(self, jobs: int) -> Build:
        if jobs < 1:
            raise ValueError(f"jobs must be a positive integer, got {jobs}")
        self.jobs = str(jobs)
        return self

    def define(self, key: str, value: str) -> Build:
        self.defines[key] = value
        return self

    def set_env(self, key: str, value: str) -> Build:
        """Set an environment variable for the cmake processes only."""
        self.env[key] = value
        return self

    def validate(self) -> ResolvedBuild:
        if self.host is None:
            raise MissingConfigurationError("host")
        if self.target is None:
            raise MissingConfigurationError("target")
        if self.profile is None:
            raise MissingConfigurationError("profile")
        if self.out_dir is None:
            raise MissingConfigurationError("out_dir")
        return ResolvedBuild(
            host=self.host,
            target=self.target,
            out_dir=self.out_dir,
            profile=self.profile,
            jobs=self.jobs,
        )

    def build(self) -> Artifacts:
        """Run cmake over the bundled sources and collect the produced libraries."""
        resolved = self.validate()
        self.logger.log(
            operation="build",
            phase="configure",
            message="starting LLVM build",
            extra={
                "host": resolved.host,
                "target": resolved.target,
                "profile": resolved.profile,
                "out_dir": str(resolved.out_dir),
            },
        )
        CMakeConfig(
            source_dir=self.source_dir,
            host=resolved.host,
            target=resolved.target,
            out_dir=resolved.out_dir,
            profile=resolved.profile,
            defines=dict(self.defines),
            env=dict(self.env),
            jobs=resolved.jobs,
            logger=self.logger,
        ).run()

        libs = scan_libs(resolved.out_dir / "build" / "lib", sort=self.sort_libs)
        self.logger.log(
            operation="build",
            phase="scan",
            message=f"found {len(libs)} libraries",
            extra={"libs": list(libs)},
        )
        return Artifacts.for_out_dir(resolved.out_dir, libs)
