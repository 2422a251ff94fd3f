"""Domain layer: constants, errors and schemas."""

from .errors import ErrorCodes, FsError
from .schemas import DirEntry, DirPhase, ResponseKind, RouteDecision

__all__ = [
    "ErrorCodes",
    "FsError",
    "DirEntry",
    "DirPhase",
    "ResponseKind",
    "RouteDecision",
]
