"""vosealias: O(1) weighted discrete sampling with Vose's alias method."""

from importlib.metadata import PackageNotFoundError, version as _dist_version

from vosealias.alias import (
    AliasTable,
    aliases,
    build,
    probabilities,
    reconstruct_probabilities,
    sample,
)
from vosealias.config import default_generator
from vosealias.errors import InvalidInput, PreconditionViolation

try:
    __version__ = _dist_version("vosealias")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0"

__all__ = [
    "__version__",
    # Core
    "AliasTable",
    "build",
    "sample",
    # Introspection
    "aliases",
    "probabilities",
    "reconstruct_probabilities",
    # Errors
    "InvalidInput",
    "PreconditionViolation",
    "default_generator",
]
