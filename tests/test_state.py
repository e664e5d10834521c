from __future__ import annotations

import numpy as np

from dicemap.config import MapConfig
from dicemap.game.map import GameMap
from dicemap.game.state import count_dice, count_territories
from dicemap.game.territory import Player


def build_map() -> GameMap:
    players = [Player("red"), Player("blue"), Player("green")]
    return GameMap(players, MapConfig(rows=5, cols=6, victims=5), rng=np.random.default_rng(2))


def test_state_matches_map_queries() -> None:
    game_map = build_map()
    state = game_map.to_state()

    assert state.owners.shape == (30,)
    assert state.num_players == 3
    assert set(np.flatnonzero(state.victims).tolist()) == set(game_map.victim_ids)
    assert np.all(state.owners[state.victims] == -1)
    assert np.all(state.dice[state.victims] == 0)
    for index, player in enumerate(game_map.players):
        assert count_territories(state.owners, index) == game_map.count_territories(player)
        assert count_dice(state.owners, state.dice, index) == game_map.count_dice(player)
    assert state.territory_counts().sum() == game_map.num_active


def test_grid_view_is_row_major() -> None:
    game_map = build_map()
    state = game_map.to_state()
    grid = state.grid_view(state.dice)
    assert grid.shape == (5, 6)
    expected = [
        [0 if game_map.is_victim(cell.id) else cell.dice for cell in row]
        for row in game_map.grid
    ]
    assert grid.tolist() == expected


def test_clone_is_independent() -> None:
    state = build_map().to_state()
    copy = state.clone()
    copy.owners[:] = 0
    copy.dice[:] = 0
    assert not np.array_equal(state.dice, copy.dice)
    assert np.array_equal(state.dice_totals(), build_map().to_state().dice_totals())
