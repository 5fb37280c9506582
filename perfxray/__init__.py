"""perf-xray static performance anti-pattern scanner package."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("perf-xray")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "1.0.0-dev"

__all__ = ["__version__"]
