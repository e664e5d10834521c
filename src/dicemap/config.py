from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidConfiguration


@dataclass(frozen=True)
class MapConfig:
    rows: int = 8
    cols: int = 8
    victims: int = 6
    max_dice: int = 8
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.rows <= 0 or self.cols <= 0:
            raise InvalidConfiguration(
                f"Map dimensions must be positive, got {self.rows}x{self.cols}."
            )
        if self.victims < 0:
            raise InvalidConfiguration(f"Victim count cannot be negative, got {self.victims}.")
        if self.victims >= self.num_territories:
            raise InvalidConfiguration(
                f"{self.victims} victims leave no active territory on a "
                f"{self.rows}x{self.cols} map."
            )
        if self.max_dice <= 0:
            raise InvalidConfiguration(f"Dice cap must be positive, got {self.max_dice}.")

    @property
    def num_territories(self) -> int:
        return self.rows * self.cols

    @property
    def num_active(self) -> int:
        return self.num_territories - self.victims
