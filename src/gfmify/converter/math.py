"""Math conversion: LaTeX to MathML.

Two text-level passes run before tokenization:

* :func:`mathify` (render path) replaces every math span with MathML::

      $$ <expr> $$     ->  display-mode MathML  (whitespace inside both
                            delimiters is mandatory)
      <ws>$<expr>$      ->  " " + inline MathML (the expression must start
                            and end with a non-whitespace character)

  When the engine rejects an expression the original match text is kept
  and a warning is logged.

* :func:`strip_math` (plain-text path) removes the same spans entirely.

Fenced ```` ```math ```` blocks are rendered by the code-block rule
through :func:`render_math` in display mode.
"""

from __future__ import annotations

import logging
import re

from latex2mathml.converter import convert

from gfmify.errors import GfmifyMathError
from gfmify.observability.metrics import MetricsHook, NoopMetricsHook

logger = logging.getLogger("gfmify.math")

BLOCK_MATH_RE = re.compile(r"\$\$\s(.+?)\s\$\$")
INLINE_MATH_RE = re.compile(r"\s\$((?=\S).*?(?=\S))\$")


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

def render_math(expression: str, *, display: bool) -> str:
    """Convert a LaTeX *expression* to a MathML fragment.

    Parameters
    ----------
    expression:
        LaTeX source without delimiters.
    display:
        ``True`` for display (block) mode, ``False`` for inline mode.

    Raises
    ------
    GfmifyMathError
        If the engine cannot convert the expression.
    """
    mode = "block" if display else "inline"
    try:
        return convert(expression, display=mode)
    except Exception as exc:
        raise GfmifyMathError(
            f"Could not render {mode} math: {exc}",
            context={"expression": expression, "display": mode},
            cause=exc,
        ) from exc


# ---------------------------------------------------------------------------
# Text passes
# ---------------------------------------------------------------------------

def mathify(markdown: str, metrics: MetricsHook | None = None) -> str:
    """Replace block and inline math spans in *markdown* with MathML.

    Block math is substituted first, so inline matching only sees what the
    block pass left behind.
    """
    hook = metrics or NoopMetricsHook()

    def _fallback(match: re.Match[str], err: GfmifyMathError) -> str:
        logger.warning(
            "math rendering failed",
            extra={"extra_fields": {
                "display": err.context.get("display"),
                "expression": err.context.get("expression"),
                "error": str(err.cause or err),
            }},
        )
        hook.increment(
            "gfmify.math_errors_total",
            tags={"display": err.context.get("display", "")},
        )
        return match.group(0)

    def _block(match: re.Match[str]) -> str:
        try:
            return render_math(match.group(1).strip(), display=True)
        except GfmifyMathError as err:
            return _fallback(match, err)

    def _inline(match: re.Match[str]) -> str:
        try:
            return " " + render_math(match.group(1), display=False)
        except GfmifyMathError as err:
            return _fallback(match, err)

    markdown = BLOCK_MATH_RE.sub(_block, markdown)
    return INLINE_MATH_RE.sub(_inline, markdown)


def strip_math(markdown: str) -> str:
    """Remove block and inline math spans from *markdown*."""
    return INLINE_MATH_RE.sub("", BLOCK_MATH_RE.sub("", markdown))
