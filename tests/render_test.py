"""SVG layout: bar proportions, positions, themes and config validation."""
import pathlib
import sys

import pytest
from lxml import etree

repo_root = pathlib.Path(__file__).resolve().parents[1]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from toplangs.errors import EmptyInputError, InvalidConfigError
from toplangs.render import CAPTION, TITLE, RenderConfig, Theme, fmt_num, render

NS = {"s": "http://www.w3.org/2000/svg"}


def parse(svg):
    return etree.fromstring(svg.encode("utf-8"))


def bars(root):
    return root.findall("s:rect", NS)


def test_bar_widths_proportional():
    root = parse(render([("X", 100), ("Y", 50)], RenderConfig()))
    x, y = [float(r.get("width")) for r in bars(root)]
    assert x == 450
    assert y == x / 2


def test_zero_sizes_give_zero_width_bars():
    root = parse(render([("X", 0), ("Y", 0)], RenderConfig()))
    assert [float(r.get("width")) for r in bars(root)] == [0, 0]


def test_render_is_deterministic():
    entries = [("Python", 1500), ("Rust", 500), ("Shell", 40)]
    assert render(entries, RenderConfig()) == render(entries, RenderConfig())


def test_layout_positions():
    cfg = RenderConfig(width=600, font_size=12)
    root = parse(render([("Python", 300), ("Go", 100)], cfg))
    assert root.get("width") == "600"
    # header 18 + 18 * (2 + 1) + 18
    assert float(root.get("height")) == 90

    texts = root.findall("s:text", NS)
    assert [t.text for t in texts] == [TITLE, "Python", "Go", CAPTION]
    title, py, go, caption = texts
    assert float(title.get("y")) == 18
    assert float(py.get("y")) == 36 and float(go.get("y")) == 54
    assert py.get("x") == "130" and py.get("text-anchor") == "end"
    assert float(caption.get("y")) == 72
    assert caption.get("style") == "font-size: 8px"

    r1, r2 = bars(root)
    assert r1.get("x") == "150" and r1.get("class") == "LangBar"
    assert float(r1.get("y")) == 24 and float(r2.get("y")) == 42
    assert float(r1.get("height")) == 12
    assert float(r2.get("width")) == 150


def test_theme_colours_in_style():
    dark = parse(render([("C", 1)], RenderConfig(theme=Theme.DARK)))
    light = parse(render([("C", 1)], RenderConfig(theme=Theme.LIGHT)))
    dark_css = dark.find("s:style", NS).text
    light_css = light.find("s:style", NS).text
    assert Theme.DARK.foreground in dark_css
    assert Theme.LIGHT.foreground in light_css
    assert Theme.DARK.foreground != Theme.LIGHT.foreground
    assert "font-family: monospace;" in dark_css
    assert "font-size: 12px;" in dark_css
    assert dark_css.count(Theme.DARK.foreground) == 2


def test_labels_escaped_and_truncated():
    cfg = RenderConfig(text_width=60)  # 60 // 7.2 -> 8 chars
    root = parse(render([("C<++>", 2), ("Jupyter Notebook", 1)], cfg))
    labels = [t.text for t in root.findall("s:text", NS)][1:3]
    assert labels == ["C<++>", "Jupyter…"]


def test_empty_entries_rejected():
    with pytest.raises(EmptyInputError):
        render([], RenderConfig())


@pytest.mark.parametrize("kwargs, field", [
    ({"width": 470}, "width"),
    ({"font_size": 0}, "font_size"),
    ({"text_width": 0}, "text_width"),
    ({"width": float("inf")}, "width"),
    ({"width": float("nan")}, "width"),
    ({"font_size": float("nan")}, "font_size"),
    ({"font_size": float("inf")}, "font_size"),
    ({"text_width": float("inf")}, "text_width"),
    ({"top_n": -2}, "top_n"),
    ({"theme": "blue"}, "theme"),
])
def test_invalid_config(kwargs, field):
    with pytest.raises(InvalidConfigError) as exc:
        render([("C", 1)], RenderConfig(**kwargs))
    assert exc.value.field == field


def test_fmt_num():
    assert fmt_num(18.0) == "18"
    assert fmt_num(0) == "0"
    assert fmt_num(1 / 3) == "0.333"
    assert fmt_num(22.5) == "22.5"


def test_default_config_renders():
    RenderConfig().validate()
    root = parse(render([("Python", 3), ("Go", 1)]))
    assert root.get("width") == "600"
    assert [t.text for t in root.findall("s:text", NS)][1:3] == ["Python", "Go"]


def test_text_column_wider_than_label_area():
    # labels end at x=30 and may extend past the left edge
    cfg = RenderConfig(width=500, text_width=200)
    root = parse(render([("Jupyter Notebook", 1)], cfg))
    label = root.findall("s:text", NS)[1]
    assert label.get("x") == "30"
    assert label.text == "Jupyter Notebook"
