from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass
class MapState:
    """Array snapshot of a finished map, indexed by territory id.

    ``owners`` holds the player index (``-1`` for victims), ``dice`` the dice
    count (``0`` for victims) and ``victims`` a boolean mask.
    """

    owners: np.ndarray
    dice: np.ndarray
    victims: np.ndarray
    rows: int
    cols: int
    num_players: int

    def clone(self) -> "MapState":
        return MapState(
            owners=self.owners.copy(),
            dice=self.dice.copy(),
            victims=self.victims.copy(),
            rows=self.rows,
            cols=self.cols,
            num_players=self.num_players,
        )

    def grid_view(self, values: np.ndarray) -> np.ndarray:
        return values.reshape(self.rows, self.cols)

    def territory_counts(self) -> np.ndarray:
        return np.array(
            [count_territories(self.owners, player) for player in range(self.num_players)],
            dtype=np.int64,
        )

    def dice_totals(self) -> np.ndarray:
        return np.array(
            [count_dice(self.owners, self.dice, player) for player in range(self.num_players)],
            dtype=np.int64,
        )


def count_territories(owners: np.ndarray, player: int) -> int:
    return int(np.sum(owners == player))


def count_dice(owners: np.ndarray, dice: np.ndarray, player: int) -> int:
    return int(np.sum(dice[owners == player]))
