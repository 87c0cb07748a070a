"""CLI: Build history trees, index their information sets and print tree statistics."""

from __future__ import annotations

import argparse
import time

from spieltree.algorithms.config import TreeBuildConfig
from spieltree.algorithms.history_tree import HistoryTree
from spieltree.algorithms.info_sets import get_all_info_sets
from spieltree.envs.registry import load_game, registered_games
from spieltree.policies.policy import first_action_policy, uniform_policy
from spieltree.utils.tree_registry import record_tree_stats

POLICIES = {
    'uniform': uniform_policy,
    'first_action': first_action_policy,
}


def build_one(config: TreeBuildConfig) -> list:
    """Build one tree per configured player; returns the stats entry of each."""
    game = load_game(config.game)
    policy = POLICIES[config.policy](game)

    entries = []
    for player in config.players:
        print(f"\n=== BUILD HISTORY TREE: {config.game} (player {player}) ===")
        start_time = time.time()
        tree = HistoryTree(game.new_initial_state(), player,
                           progress_interval=config.progress_interval)
        if config.validate:
            tree.validate()
        info_sets = get_all_info_sets(tree, player, policy)
        elapsed = time.time() - start_time

        stats = tree.stats()
        print(f"Histories: {stats['num_histories']} "
              f"(decision {stats['node_type_counts']['decision']}, "
              f"chance {stats['node_type_counts']['chance']}, "
              f"terminal {stats['node_type_counts']['terminal']})")
        print(f"Information sets: {len(info_sets)} ({config.policy} policy), took {elapsed:.2f}s")

        entry = {
            "schema_version": 1,
            "tree_kind": "history_tree",
            "game": config.game,
            "player": int(player),
            "policy": config.policy,
            "num_histories": int(stats['num_histories']),
            "num_info_sets": int(len(info_sets)),
            "node_type_counts": stats['node_type_counts'],
        }
        if config.record_stats:
            if record_tree_stats(entry, config.registry_path):
                print("Recorded tree stats in registry")
            else:
                print("SKIP: identical stats already in registry")
        entries.append(entry)

    return entries


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Build history trees and index information sets")
    parser.add_argument(
        "games",
        nargs="+",
        choices=registered_games(),
        help="Which games to enumerate",
    )
    parser.add_argument(
        "--player",
        type=int,
        action="append",
        choices=[0, 1],
        help="Designated player (repeatable, default: both)",
    )
    parser.add_argument(
        "--policy",
        choices=sorted(POLICIES),
        default="uniform",
        help="Policy of the other player for reach probabilities",
    )
    parser.add_argument(
        "--progress-interval",
        type=int,
        default=None,
        help="Print progress every N histories",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Re-check every node against its game state after building.",
    )
    parser.add_argument(
        "--record-stats",
        action="store_true",
        help="Append the tree statistics to the JSON registry.",
    )
    parser.add_argument(
        "--registry",
        default=None,
        help="Registry file (default: data/trees/history_tree_registry.json)",
    )

    args = parser.parse_args(argv)

    players = tuple(args.player) if args.player else (0, 1)
    for g in args.games:
        config = TreeBuildConfig(
            game=g,
            players=players,
            policy=args.policy,
            progress_interval=args.progress_interval,
            validate=args.validate,
            record_stats=args.record_stats,
            registry_path=args.registry,
        )
        build_one(config)


if __name__ == "__main__":
    main()
