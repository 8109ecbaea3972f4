__version__ = "0.1.0"

from .main import app  # noqa: E402

__all__ = ["__version__", "app"]
