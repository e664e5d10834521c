from __future__ import annotations

import logging
from collections import deque
from enum import Enum
from typing import FrozenSet, Iterable, Iterator, List, Sequence, Set, Tuple

import numpy as np

from dicemap.config import MapConfig
from dicemap.errors import InvalidConfiguration, OutOfRange
from .graph import Graph
from .state import MapState
from .territory import Player, Territory

logger = logging.getLogger(__name__)

# right, down, left, up
GRID_STEPS: Tuple[Tuple[int, int], ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))

DICE_PER_HOLDING = 3


class MapPhase(Enum):
    UNCONSTRUCTED = "unconstructed"
    GRID_ALLOCATED = "grid_allocated"
    GRAPH_BUILT = "graph_built"
    CONNECTIVITY_REPAIRED = "connectivity_repaired"
    PARTITIONED = "partitioned"
    DICE_ASSIGNED = "dice_assigned"


class GameMap:
    """Grid of territories wired into a connected graph and dealt to players.

    Construction runs every phase in order: grid allocation, victim
    selection, BFS wiring over the grid, connectivity repair, ownership
    partitioning and dice distribution. Once ``__init__`` returns the map is
    in ``MapPhase.DICE_ASSIGNED`` and every active territory is reachable
    from every other one through the graph.
    """

    def __init__(
        self,
        players: Sequence[Player],
        config: MapConfig | None = None,
        rng: np.random.Generator | None = None,
        victim_ids: Iterable[int] | None = None,
    ) -> None:
        self.config = config or MapConfig()
        self.players: Tuple[Player, ...] = tuple(players)
        if not self.players:
            raise InvalidConfiguration("A map needs at least one player.")
        self.rows = self.config.rows
        self.cols = self.config.cols
        self.num_territories = self.config.num_territories
        self.max_dice = self.config.max_dice
        fixed_victims = self._validate_victims(victim_ids)
        self.num_victims = (
            len(fixed_victims) if fixed_victims is not None else self.config.victims
        )
        self.num_active = self.num_territories - self.num_victims
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.repairs: List[Tuple[int, int]] = []
        self.phase = MapPhase.UNCONSTRUCTED

        self.grid: List[List[Territory]] = self._allocate_grid()
        self.phase = MapPhase.GRID_ALLOCATED

        self.victim_ids: FrozenSet[int] = (
            fixed_victims if fixed_victims is not None else self._select_victims()
        )
        self.graph = self._build_graph()
        self.phase = MapPhase.GRAPH_BUILT

        self._repair_connectivity()
        self.phase = MapPhase.CONNECTIVITY_REPAIRED

        self._partition_territories()
        self.phase = MapPhase.PARTITIONED

        self._distribute_dice()
        self.phase = MapPhase.DICE_ASSIGNED
        logger.debug(
            "Map %dx%d ready: %d active territories, %d victims, %d repairs",
            self.rows,
            self.cols,
            self.num_active,
            self.num_victims,
            len(self.repairs),
        )

    # ------------------------------------------------------------------
    # construction phases
    # ------------------------------------------------------------------

    def _validate_victims(self, victim_ids: Iterable[int] | None) -> FrozenSet[int] | None:
        if victim_ids is None:
            return None
        ids = list(victim_ids)
        victims = frozenset(ids)
        if len(victims) != len(ids):
            raise InvalidConfiguration(f"Victim ids must be distinct, got {ids}.")
        for victim in victims:
            if victim < 0 or victim >= self.num_territories:
                raise InvalidConfiguration(
                    f"Victim id {victim} out of range 0..{self.num_territories - 1}."
                )
        if len(victims) >= self.num_territories:
            raise InvalidConfiguration("Victims leave no active territory.")
        return victims

    def _allocate_grid(self) -> List[List[Territory]]:
        return [
            [Territory.on_map(self, self.territory_id(row, col)) for col in range(self.cols)]
            for row in range(self.rows)
        ]

    def _select_victims(self) -> FrozenSet[int]:
        if self.num_victims == 0:
            return frozenset()
        chosen = self.rng.choice(self.num_territories, size=self.num_victims, replace=False)
        return frozenset(int(victim) for victim in chosen)

    def _build_graph(self) -> Graph:
        graph = Graph(self.num_territories)
        for victim in sorted(self.victim_ids):
            graph.deactivate(victim)

        start = self._first_active_id()
        visited = {start}
        queue = deque([start])
        while queue:
            current = queue.popleft()
            row, col = self.position(current)
            for d_row, d_col in GRID_STEPS:
                n_row, n_col = row + d_row, col + d_col
                if not self._in_grid(n_row, n_col):
                    continue
                neighbor = self.territory_id(n_row, n_col)
                if neighbor in self.victim_ids or neighbor in visited:
                    continue
                graph.add_edge(current, neighbor)
                visited.add(neighbor)
                queue.append(neighbor)
        logger.debug("Grid walk reached %d of %d active territories", len(visited), self.num_active)
        return graph

    def _repair_connectivity(self) -> None:
        # smallest active id, hence the first reached candidate for every repair
        anchor = self._first_active_id()
        reached = self.graph.reachable(anchor)
        for territory_id in self.graph.active_vertices():
            if territory_id in reached:
                continue
            self.graph.add_edge(anchor, territory_id)
            self.repairs.append((territory_id, anchor))
            logger.info("Forcefully connecting isolated territory %d to %d", territory_id, anchor)
            reached |= self.graph.reachable(territory_id)
        logger.debug("All %d active territories are connected", len(reached))

    def _partition_territories(self) -> None:
        pool = [
            territory
            for territory in self.territories()
            if territory.id not in self.victim_ids and territory.owner is None
        ]
        per_player, extra = divmod(len(pool), len(self.players))

        for _ in range(per_player):
            for player in self.players:
                territory = pool.pop(int(self.rng.integers(len(pool))))
                territory.owner = player

        for _ in range(extra):
            territory = pool.pop(int(self.rng.integers(len(pool))))
            territory.owner = self.players[int(self.rng.integers(len(self.players)))]

    def _distribute_dice(self) -> None:
        holdings = [self.territories_of(player) for player in self.players]
        min_holding = min(len(owned) for owned in holdings)
        dice_per_player = DICE_PER_HOLDING * min_holding

        for player, owned in zip(self.players, holdings):
            budget = dice_per_player
            for territory in owned:
                territory.dice = 1
                budget -= 1

            while budget > 0 and not all(t.dice >= self.max_dice for t in owned):
                territory = owned[int(self.rng.integers(len(owned)))]
                if territory.dice < self.max_dice:
                    territory.dice += 1
                    budget -= 1
            if budget > 0:
                logger.debug(
                    "Player %s capped out with %d dice left over", player, budget
                )

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------

    def territory_id(self, row: int, col: int) -> int:
        if not self._in_grid(row, col):
            raise OutOfRange(f"Position ({row}, {col}) is outside the {self.rows}x{self.cols} grid.")
        return row * self.cols + col

    def position(self, territory_id: int) -> Tuple[int, int]:
        if territory_id < 0 or territory_id >= self.num_territories:
            raise OutOfRange(
                f"Territory id {territory_id} out of range 0..{self.num_territories - 1}."
            )
        return divmod(territory_id, self.cols)

    def territory(self, row: int, col: int) -> Territory:
        if not self._in_grid(row, col):
            raise OutOfRange(f"Position ({row}, {col}) is outside the {self.rows}x{self.cols} grid.")
        return self.grid[row][col]

    def territory_by_id(self, territory_id: int) -> Territory:
        row, col = self.position(territory_id)
        return self.grid[row][col]

    def territories(self) -> Iterator[Territory]:
        for row in self.grid:
            yield from row

    def active_territories(self) -> List[Territory]:
        return [t for t in self.territories() if t.id not in self.victim_ids]

    def is_victim(self, territory_id: int) -> bool:
        self.position(territory_id)
        return territory_id in self.victim_ids

    def grid_neighbors(self, territory: Territory) -> List[Territory]:
        row, col = self.position(territory.id)
        neighbors = []
        if row > 0:
            neighbors.append(self.grid[row - 1][col])
        if row < self.rows - 1:
            neighbors.append(self.grid[row + 1][col])
        if col > 0:
            neighbors.append(self.grid[row][col - 1])
        if col < self.cols - 1:
            neighbors.append(self.grid[row][col + 1])
        return neighbors

    def enemy_neighbors(self, territory: Territory) -> List[Territory]:
        return [
            neighbor
            for neighbor in self.grid_neighbors(territory)
            if neighbor.owner is not None and neighbor.owner is not territory.owner
        ]

    def are_adjacent(self, first: Territory, second: Territory) -> bool:
        return self.graph.is_edge(first.id, second.id)

    def territories_of(self, player: Player) -> List[Territory]:
        return [
            territory
            for territory in self.territories()
            if territory.owner is player and territory.id not in self.victim_ids
        ]

    def count_territories(self, player: Player) -> int:
        return len(self.territories_of(player))

    def count_dice(self, player: Player) -> int:
        return sum(territory.dice for territory in self.territories_of(player))

    def largest_cluster(self, player: Player) -> int:
        """Size of the largest grid-connected group of territories owned by ``player``."""
        seen: Set[int] = set()
        largest = 0
        for territory in self.territories_of(player):
            if territory.id in seen:
                continue
            seen.add(territory.id)
            queue = deque([territory])
            size = 0
            while queue:
                current = queue.popleft()
                size += 1
                for neighbor in self.grid_neighbors(current):
                    if (
                        neighbor.id not in seen
                        and neighbor.owner is player
                        and neighbor.id not in self.victim_ids
                    ):
                        seen.add(neighbor.id)
                        queue.append(neighbor)
            largest = max(largest, size)
        return largest

    def to_state(self) -> MapState:
        owners = np.full(self.num_territories, -1, dtype=np.int64)
        dice = np.zeros(self.num_territories, dtype=np.int64)
        victims = np.zeros(self.num_territories, dtype=bool)
        for territory in self.territories():
            if territory.id in self.victim_ids:
                victims[territory.id] = True
                continue
            for index, player in enumerate(self.players):
                if territory.owner is player:
                    owners[territory.id] = index
                    break
            if not territory.is_unset:
                dice[territory.id] = territory.dice
        return MapState(
            owners=owners,
            dice=dice,
            victims=victims,
            rows=self.rows,
            cols=self.cols,
            num_players=len(self.players),
        )

    def _first_active_id(self) -> int:
        for territory_id in range(self.num_territories):
            if territory_id not in self.victim_ids:
                return territory_id
        raise InvalidConfiguration("Victims leave no active territory.")

    def _in_grid(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols
