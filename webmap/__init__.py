"""Static pattern-based analysis of web application source trees."""

__version__ = "1.0.0"

from .dispatcher import Dispatcher, render_json  # noqa: E402

__all__ = ["Dispatcher", "render_json", "__version__"]
