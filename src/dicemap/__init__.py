from .config import MapConfig
from .errors import DiceMapError, InvalidConfiguration, InvalidState, OutOfRange

__all__ = [
    "MapConfig",
    "DiceMapError",
    "InvalidConfiguration",
    "InvalidState",
    "OutOfRange",
]
