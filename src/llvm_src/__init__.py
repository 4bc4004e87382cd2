"""Build the bundled LLVM sources with CMake and export the results to cargo."""

from .artifacts import Artifacts
from .build import LLVM_VERSION, SOURCE_DIR, Build, ResolvedBuild
from .config import BuildOptions, load_options
from .errors import (
    ArtifactScanError,
    BuildToolError,
    ErrorCode,
    LlvmSrcError,
    MissingConfigurationError,
    UnexpectedArtifactNameError,
)

__all__ = [
    "LLVM_VERSION",
    "SOURCE_DIR",
    "ArtifactScanError",
    "Artifacts",
    "Build",
    "BuildOptions",
    "BuildToolError",
    "ErrorCode",
    "LlvmSrcError",
    "MissingConfigurationError",
    "ResolvedBuild",
    "UnexpectedArtifactNameError",
    "load_options",
]
