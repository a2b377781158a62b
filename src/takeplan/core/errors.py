# takeplan/core/errors.py
from __future__ import annotations


class TakeplanError(Exception):
    """Base class for all takeplan failures."""


class MalformedInput(TakeplanError, ValueError):
    """Problem text does not follow the declared counts / layout."""


class MissingFile(TakeplanError, FileNotFoundError):
    """An input or checkpoint file is absent when required."""


class CorruptCheckpoint(TakeplanError, ValueError):
    """A checkpoint could not be deserialized into a consistent state."""


class EngineInvariantError(TakeplanError, AssertionError):
    """The engine was asked to commit something the state no longer allows."""
