"""Typed pipeline error model with stable, machine-readable error codes."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum

SUPPORT_URL = "https://github.com/jkvargas/russimp-sys"


class ErrorCode(StrEnum):
    """Stable error identifiers reported by every pipeline stage."""

    CONFIGURATION = "E_CONFIGURATION"
    ACQUISITION = "E_ACQUISITION"
    NATIVE_BUILD = "E_NATIVE_BUILD"
    GENERATION = "E_GENERATION"


class AssimpBuildError(Exception):
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


class ConfigurationError(AssimpBuildError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.CONFIGURATION, hint=hint, context=context)


class AcquisitionError(AssimpBuildError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.ACQUISITION, hint=hint, context=context)


class NativeBuildError(AssimpBuildError):
    """Native build failure; ``output`` holds the build system's own diagnostics."""

    output: str

    def __init__(
        self,
        message: str,
        *,
        output: str = "",
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.NATIVE_BUILD, hint=hint, context=context)
        self.output = output

    def __str__(self) -> str:
        rendered = super().__str__()
        if self.output:
            return f"{rendered}\n{self.output}"
        return rendered


class GenerationError(AssimpBuildError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.GENERATION,
            hint=hint or f"For details see {SUPPORT_URL}",
            context=context,
        )


__all__ = [
    "AcquisitionError",
    "AssimpBuildError",
    "ConfigurationError",
    "ErrorCode",
    "GenerationError",
    "NativeBuildError",
    "SUPPORT_URL",
]
