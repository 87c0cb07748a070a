"""
Counterfactual reach probabilities and information-set grouping.

The counterfactual reach probability of a history is defined top-down:
- the root has probability 1
- a chance edge multiplies by the probability of that chance outcome
- an edge taken by the designated player multiplies by 1
- an edge taken by any other player multiplies by the probability the
  policy assigns to that action at that player's information state
"""

from collections import defaultdict
from typing import Dict, Iterator, List, Tuple

from spieltree.algorithms.history_tree import HistoryNode, HistoryTree
from spieltree.policies.policy import MissingPolicyEntryError, Policy


def walk_with_reach(tree: HistoryTree, policy: Policy) -> Iterator[Tuple[HistoryNode, float]]:
    """Yield (node, counterfactual reach probability) for every node, parents first."""
    policy_cache: Dict[str, Dict[int, float]] = {}
    to_process = [(tree.root, 1.0)]
    while to_process:
        node, reach = to_process.pop()
        yield node, reach

        if node.is_terminal():
            continue

        if node.is_chance():
            chance_probs = dict(node.state.chance_outcomes())
            edges = [(child, chance_probs[action]) for action, child in node.children.items()]
        elif node.player == tree.player_id:
            edges = [(child, 1.0) for child in node.children.values()]
        else:
            action_probs = policy_cache.get(node.info_state)
            if action_probs is None:
                try:
                    action_probs = policy.action_probabilities(node.info_state)
                except MissingPolicyEntryError as e:
                    raise MissingPolicyEntryError(
                        f"{e} (required at history '{node.history}')") from e
                policy_cache[node.info_state] = action_probs
            # Actions left out of the distribution are never played
            edges = [(child, action_probs.get(action, 0.0)) for action, child in node.children.items()]

        for child, prob in reversed(edges):
            to_process.append((child, reach * prob))


def counterfactual_reach_probabilities(tree: HistoryTree, policy: Policy) -> Dict[str, float]:
    """Reach probability of every history in the tree, terminals included."""
    return {node.history: reach for node, reach in walk_with_reach(tree, policy)}


def get_all_info_sets(tree: HistoryTree, best_responder: int, policy: Policy,
                      include_all_nodes: bool = False,
                      include_terminals: bool = False) -> Dict[str, List[Tuple[HistoryNode, float]]]:
    """
    Group histories by information state, with their counterfactual reach probabilities.

    Args:
        tree: HistoryTree built for `best_responder`
        best_responder: player the information states are computed for
        policy: joint policy of the other players
        include_all_nodes: also group chance nodes (under the chance sentinel) and
            the other players' decision nodes (under their own information states)
        include_terminals: also group terminal nodes under the terminal sentinel

    Returns:
        {info_state: [(node, reach_probability), ...]}; by default only the
        best responder's decision nodes are grouped
    """
    if best_responder != tree.player_id:
        raise ValueError(
            f"Tree was built for player {tree.player_id}, not for best responder {best_responder}")

    info_sets = defaultdict(list)
    for node, reach in walk_with_reach(tree, policy):
        if node.is_terminal():
            if include_terminals:
                info_sets[node.info_state].append((node, reach))
        elif node.is_decision() and node.player == best_responder:
            info_sets[node.info_state].append((node, reach))
        elif include_all_nodes:
            info_sets[node.info_state].append((node, reach))

    return dict(info_sets)
