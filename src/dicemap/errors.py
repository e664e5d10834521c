from __future__ import annotations


class DiceMapError(Exception):
    """Base class for every error raised by the map core."""


class OutOfRange(DiceMapError, IndexError):
    """A vertex, territory id or grid position lies outside the valid bounds."""


class InvalidConfiguration(DiceMapError, ValueError):
    """Construction parameters cannot produce a playable map."""


class InvalidState(DiceMapError, ValueError):
    """A territory was asked to hold a value it cannot hold."""
