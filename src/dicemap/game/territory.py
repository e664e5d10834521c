from __future__ import annotations

import weakref
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from dicemap.errors import InvalidState

if TYPE_CHECKING:
    from .map import GameMap


UNSET = -1


@dataclass(eq=False)
class Player:
    """Player identity handed in by the turn layer; compared by identity."""

    name: str


class Territory:
    """One grid cell of a map: owner, dice and row-major id.

    The id is fixed at creation. The owning map is held through a weak
    reference so the record never keeps the map alive. Row and column are
    derived from the map's column count.
    """

    def __init__(
        self,
        id: int = UNSET,
        owner: Optional[Player] = None,
        dice: int = UNSET,
        game_map: Optional["GameMap"] = None,
    ) -> None:
        self._id = id
        self.owner = owner
        self._dice = UNSET
        if dice != UNSET:
            self.dice = dice
        self._map_ref = weakref.ref(game_map) if game_map is not None else None

    @classmethod
    def on_map(cls, game_map: "GameMap", territory_id: int) -> "Territory":
        return cls(id=territory_id, game_map=game_map)

    def __repr__(self) -> str:
        return f"Territory(id={self._id}, owner={self.owner!r}, dice={self._dice})"

    @property
    def id(self) -> int:
        return self._id

    @property
    def dice(self) -> int:
        return self._dice

    @dice.setter
    def dice(self, value: int) -> None:
        if value < 0:
            raise InvalidState(f"Territory {self._id} cannot hold {value} dice.")
        self._dice = value

    @property
    def is_unset(self) -> bool:
        return self._dice == UNSET

    @property
    def game_map(self) -> "GameMap":
        game_map = self._map_ref() if self._map_ref is not None else None
        if game_map is None:
            raise InvalidState(f"Territory {self._id} is not attached to a map.")
        return game_map

    @property
    def row(self) -> int:
        return self._id // self.game_map.cols

    @property
    def col(self) -> int:
        return self._id % self.game_map.cols
