"""Top languages SVG generator for a GitHub profile."""

from .errors import ApiError, DataFormatError, EmptyInputError, InvalidConfigError, ToplangsError
from .render import RenderConfig, Theme, render
from .usage import aggregate, rank

__version__ = "0.1.0"

__all__ = [
    "aggregate", "rank", "render", "RenderConfig", "Theme",
    "ToplangsError", "DataFormatError", "InvalidConfigError", "EmptyInputError", "ApiError",
]
