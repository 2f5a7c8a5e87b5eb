"""Error hierarchy for gfmify.

Rendering and stripping are best-effort: malformed URLs, unknown code
languages and disallowed markup are recovered from locally and never
surface to the caller.  The classes below exist for the two places where
an error *is* raised:

* :class:`GfmifyOptionsError` -- invalid :class:`~gfmify.config.RenderOptions`
  values, raised at construction time.
* :class:`GfmifyMathError` -- the math engine rejected a formula.  Raised
  by :func:`gfmify.converter.math.render_math` and always caught by the
  math pre-pass, which keeps the original text.

Every class inherits from :class:`GfmifyError` and carries a machine-readable
``code`` (from :class:`ErrorCode`), a human-readable ``message``, an optional
structured ``context`` dict, and an optional ``cause``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error gfmify can raise."""

    INVALID_OPTIONS = "INVALID_OPTIONS"
    CONVERSION_ERROR = "CONVERSION_ERROR"
    MATH_RENDER_ERROR = "MATH_RENDER_ERROR"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class GfmifyError(Exception):
    """Base exception for all gfmify errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
        Keys and expected types are documented per subclass.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class GfmifyOptionsError(GfmifyError, ValueError):
    """A :class:`~gfmify.config.RenderOptions` field has an invalid value.

    Context keys: ``field``, ``value``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.INVALID_OPTIONS,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Conversion errors
# ---------------------------------------------------------------------------

class GfmifyConversionError(GfmifyError):
    """Base class for errors raised by a conversion collaborator.

    Context varies by subclass.
    """

    def __init__(
        self,
        code: str = ErrorCode.CONVERSION_ERROR,
        message: str = "Conversion error",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            context=context,
            cause=cause,
        )


class GfmifyMathError(GfmifyConversionError):
    """The math engine could not convert a LaTeX expression.

    Context keys: ``expression``, ``display``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.MATH_RENDER_ERROR,
            message=message,
            context=context,
            cause=cause,
        )
