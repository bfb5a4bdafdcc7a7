"""Working-directory listing, classification, and safe writes."""

from importlib import metadata as _metadata

from .errors import SaveError, WorkdirError
from .models import FileInfo, Listing, listing_payload
from .working import WorkingDirectory

__all__ = [
    "FileInfo",
    "Listing",
    "SaveError",
    "WorkdirError",
    "WorkingDirectory",
    "listing_payload",
    "__version__",
]


def __getattr__(name: str):
    if name == "__version__":
        return _metadata.version("workdir")
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__():
    return sorted(list(globals().keys()) + ["__version__"])
