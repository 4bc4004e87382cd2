"""Typed error model with stable, machine-readable error codes."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum


class ErrorCode(StrEnum):
    """Stable error identifiers surfaced by the library and the CLI."""

    MISSING_HOST = "E_MISSING_HOST"
    MISSING_TARGET = "E_MISSING_TARGET"
    MISSING_OUT_DIR = "E_MISSING_OUT_DIR"
    MISSING_PROFILE = "E_MISSING_PROFILE"
    BUILD_TOOL = "E_BUILD_TOOL"
    ARTIFACT_SCAN = "E_ARTIFACT_SCAN"
    UNEXPECTED_ARTIFACT_NAME = "E_UNEXPECTED_ARTIFACT_NAME"


class LlvmSrcError(Exception):
    """Base error class that carries code, optional hint, and context."""

    code: str
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code.value
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        if self.context:
            for k, v in self.context.items():
                if v:
                    parts.append(f"  {k}: {v}")
        return "\n".join(parts)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": str(self),
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


_MISSING_CODES: dict[str, tuple[ErrorCode, str]] = {
    "host": (ErrorCode.MISSING_HOST, "HOST"),
    "target": (ErrorCode.MISSING_TARGET, "TARGET"),
    "out_dir": (ErrorCode.MISSING_OUT_DIR, "OUT_DIR"),
    "profile": (ErrorCode.MISSING_PROFILE, "PROFILE"),
}


class MissingConfigurationError(LlvmSrcError):
    """A required build parameter was neither set explicitly nor in the environment."""

    field: str

    def __init__(self, field: str, *, context: Mapping[str, str] | None = None) -> None:
        if field not in _MISSING_CODES:
            raise ValueError(f"Unknown configuration field: {field}")
        code, variable = _MISSING_CODES[field]
        super().__init__(
            f"{variable} not set",
            code=code,
            hint=f"Export {variable} or call Build.set_{field}() before build().",
            context=context,
        )
        self.field = field


class BuildToolError(LlvmSrcError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.BUILD_TOOL, hint=hint, context=context)


class ArtifactScanError(LlvmSrcError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.ARTIFACT_SCAN, hint=hint, context=context)


class UnexpectedArtifactNameError(LlvmSrcError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.UNEXPECTED_ARTIFACT_NAME,
            hint=hint,
            context=context,
        )


__all__ = [
    "ArtifactScanError",
    "BuildToolError",
    "ErrorCode",
    "LlvmSrcError",
    "MissingConfigurationError",
    "UnexpectedArtifactNameError",
]
