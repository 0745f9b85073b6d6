"""SVG bar chart of the top languages.

Layout (all units are SVG user units):

    Top languages:                     <- title, baseline at header_offset
              Rust  ████████████████   <- one row per entry, line_height apart
                Go  ████████
    caption                            <- footer, one line below the last row

Labels are right-aligned against a fixed 450 wide bar area (plus a 20 margin)
on the right side of the canvas. Bar widths are proportional to the largest
entry. The canvas height is computed up front so the document is built in a
single pass.
"""

from __future__ import annotations
import enum
import math
from dataclasses import dataclass, field
from typing import FrozenSet, Sequence

from lxml import etree
from lxml.builder import ElementMaker

from .errors import EmptyInputError, InvalidConfigError
from .usage import RankedEntry

SVG_NS = "http://www.w3.org/2000/svg"
E = ElementMaker(namespace=SVG_NS, nsmap={None: SVG_NS})

BAR_MAX_WIDTH = 450
BAR_MARGIN = 20
BAR_AREA_INSET = BAR_MAX_WIDTH + BAR_MARGIN
CHAR_WIDTH_RATIO = 0.6  # monospace glyph advance relative to font size
CAPTION_FONT_PX = 8

TITLE = "Top languages:"
CAPTION = "Language sizes as detected by GitHub across owned repositories."


class Theme(enum.Enum):
    LIGHT = "light"
    DARK = "dark"

    @property
    def foreground(self) -> str:
        return _FOREGROUND[self]


_FOREGROUND = {
    Theme.LIGHT: "#24292f",
    Theme.DARK: "#c9d1d9",
}


@dataclass(frozen=True)
class RenderConfig:
    width: float = 600.0
    font_size: float = 12.0
    top_n: int = 5
    ignored: FrozenSet[str] = field(default_factory=lambda: frozenset({"HTML"}))
    text_width: float = 150.0
    theme: Theme = Theme.DARK

    def validate(self):
        for name in ("width", "font_size", "text_width"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise InvalidConfigError(f"{name} must be a finite number, got {value}",
                                         field=name, value=value)
        if self.width <= BAR_AREA_INSET:
            raise InvalidConfigError(
                f"width {self.width} leaves no room for labels (bar area takes {BAR_AREA_INSET})",
                field="width", value=self.width)
        if self.font_size <= 0:
            raise InvalidConfigError(f"font_size must be > 0, got {self.font_size}",
                                     field="font_size", value=self.font_size)
        # labels are right-aligned at width - 470 and may run past x=0
        if self.text_width <= 0:
            raise InvalidConfigError(f"text_width must be > 0, got {self.text_width}",
                                     field="text_width", value=self.text_width)
        if self.top_n < 0:
            raise InvalidConfigError(f"top_n must be >= 0, got {self.top_n}",
                                     field="top_n", value=self.top_n)
        if not isinstance(self.theme, Theme):
            raise InvalidConfigError(f"unknown theme {self.theme!r}", field="theme", value=self.theme)

    @property
    def line_height(self) -> float:
        return self.font_size * 1.5

    @property
    def header_offset(self) -> float:
        return self.line_height


def fmt_num(value: float) -> str:
    return f"{value:.3f}".rstrip("0").rstrip(".")


def truncate_label(text: str, max_chars: int) -> str:
    if len(text) <= max_chars:
        return text
    if max_chars <= 1:
        return "…"
    return text[:max_chars - 1] + "…"


def canvas_height(count: int, config: RenderConfig) -> float:
    return config.header_offset + config.line_height * (count + 1) + config.line_height


def bar_widths(entries: Sequence[RankedEntry]) -> list:
    max_size = entries[0][1]
    if max_size == 0:
        return [0.0 for _ in entries]
    return [BAR_MAX_WIDTH * size / max_size for _, size in entries]


def _style(config: RenderConfig) -> str:
    fg = config.theme.foreground
    return (
        "\ntext\n{\n"
        "font-family: monospace;\n"
        f"fill: {fg};\n"
        f"font-size: {fmt_num(config.font_size)}px;\n"
        "}\n"
        ".LangBar\n{\n"
        f"fill: {fg};\n"
        "}\n"
    )


def render(entries: Sequence[RankedEntry], config: RenderConfig = RenderConfig()) -> str:
    """Render ranked (language, size) pairs as an SVG document string.

    Raises InvalidConfigError for unusable geometry and EmptyInputError when
    ``entries`` is empty.
    """
    config.validate()
    if not entries:
        raise EmptyInputError("no languages to render")

    line_height = config.line_height
    header = config.header_offset
    label_x = config.width - BAR_AREA_INSET
    bar_x = config.width - BAR_MAX_WIDTH
    max_chars = max(1, int(config.text_width // (config.font_size * CHAR_WIDTH_RATIO)))

    svg = E.svg(
        E.style(_style(config)),
        E.text(TITLE, x="0", y=fmt_num(header)),
        version="1.1",
        baseProfile="full",
        width=fmt_num(config.width),
        height=fmt_num(canvas_height(len(entries), config)),
    )
    for i, ((name, _), bar_w) in enumerate(zip(entries, bar_widths(entries))):
        svg.append(E.text(
            truncate_label(name, max_chars),
            {"text-anchor": "end"},
            x=fmt_num(label_x),
            y=fmt_num(header + line_height * (i + 1)),
        ))
        svg.append(E.rect(
            {"class": "LangBar"},
            x=fmt_num(bar_x),
            y=fmt_num(header + line_height * i + config.font_size * 0.5),
            width=fmt_num(bar_w),
            height=fmt_num(config.font_size),
        ))
    svg.append(E.text(
        CAPTION,
        x="0",
        y=fmt_num(header + line_height * (len(entries) + 1)),
        style=f"font-size: {CAPTION_FONT_PX}px",
    ))
    return etree.tostring(svg, encoding="unicode", pretty_print=True)
