from __future__ import annotations

import argparse
import logging

from dicemap.config import MapConfig
from dicemap.game.map import GameMap
from dicemap.game.territory import Player


def build_players(count: int) -> list[Player]:
    return [Player(name=f"Player {index + 1}") for index in range(count)]


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a territory map and report holdings.")
    parser.add_argument("--rows", type=int, default=8)
    parser.add_argument("--cols", type=int, default=8)
    parser.add_argument("--victims", type=int, default=6)
    parser.add_argument("--max-dice", type=int, default=8)
    parser.add_argument("--players", type=int, default=2)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    config = MapConfig(
        rows=args.rows,
        cols=args.cols,
        victims=args.victims,
        max_dice=args.max_dice,
        seed=args.seed,
    )
    game_map = GameMap(build_players(args.players), config)

    state = game_map.to_state()
    print(state.grid_view(state.owners))
    print(f"Victims: {sorted(game_map.victim_ids)}")
    print(f"Connected: {game_map.graph.is_connected()}, repairs: {len(game_map.repairs)}")
    for player in game_map.players:
        print(
            f"{player.name}: territories={game_map.count_territories(player)}, "
            f"dice={game_map.count_dice(player)}, "
            f"largest cluster={game_map.largest_cluster(player)}"
        )


if __name__ == "__main__":
    main()
