"""Markdown-to-HTML pipeline.

:func:`render` runs the stages in order:

1. **Pre-pass** -- the emoji transform, then (with ``allow_math``) the math
   substitution of :func:`~gfmify.converter.math.mathify`.
2. **Render** -- mistune tokenizes the text and :class:`GfmRenderer` turns
   the tokens into HTML, with the block or the inline grammar.
3. **Sanitize** -- unless disabled, the HTML is filtered through the
   resolved allow-list.
"""

from __future__ import annotations

import time

from gfmify.config import RenderOptions
from gfmify.converter.math import mathify
from gfmify.converter.renderer import GfmRenderer, github_extras, render_inline
from gfmify.converter.tokens import create_tokenizer
from gfmify.observability.metrics import NoopMetricsHook
from gfmify.sanitize import build_allow_list, sanitize_html


def render(markdown: str, options: RenderOptions | None = None) -> str:
    """Render GitHub-flavoured Markdown to sanitized HTML.

    Parameters
    ----------
    markdown:
        Untrusted Markdown source.
    options:
        Render options.  Defaults to ``RenderOptions()``.

    Returns
    -------
    str
        HTML restricted to the allow-list resolved from *options*, or the
        raw renderer output when ``disable_html_sanitization`` is set.

    Examples
    --------
    >>> render("[x](#top)")
    '<p><a href="#top">x</a></p>\\n'
    """
    options = options or RenderOptions()
    metrics = options.metrics or NoopMetricsHook()
    start = time.monotonic()

    if options.emojify is not None:
        markdown = options.emojify(markdown)
    if options.allow_math:
        markdown = mathify(markdown, metrics)

    renderer = options.renderer or GfmRenderer(
        base_url=options.base_url,
        allow_math=options.allow_math,
    )
    md = create_tokenizer(options, renderer=renderer)
    github_extras(md)

    if options.inline:
        html = render_inline(md, markdown)
    else:
        html = md(markdown)

    if not options.disable_html_sanitization:
        html = sanitize_html(
            html,
            build_allow_list(options),
            media_base_url=options.media_base_url,
        )

    mode = "inline" if options.inline else "block"
    metrics.increment("gfmify.render_total", tags={"mode": mode})
    metrics.timing(
        "gfmify.render_duration_ms", (time.monotonic() - start) * 1000
    )
    return html
