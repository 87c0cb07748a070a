"""
Analytic Nash equilibria of Kuhn poker.

Player 0's equilibria form a one-parameter family: bet the lowest card with
probability alpha, the highest with 3 * alpha, and call the middle card with
1/3 + alpha after pass-bet. Player 1's strategy is the same for every alpha.
"""

from spieltree.envs.kuhn_poker.game import BET, PASS, KuhnPokerGame
from spieltree.policies.policy import TabularPolicy


def get_optimal_policy(alpha: float = 0.0) -> TabularPolicy:
    if not 0.0 <= alpha <= 1.0 / 3:
        raise ValueError(f"alpha must be in [0, 1/3], got {alpha}")
    three_alpha = 3 * alpha

    strategy = {
        # Player 0
        "0": {PASS: 1 - alpha, BET: alpha},
        "0pb": {PASS: 1.0, BET: 0.0},
        "1": {PASS: 1.0, BET: 0.0},
        "1pb": {PASS: 2.0 / 3.0 - alpha, BET: 1.0 / 3.0 + alpha},
        "2": {PASS: 1 - three_alpha, BET: three_alpha},
        "2pb": {PASS: 0.0, BET: 1.0},
        # Player 1
        "0p": {PASS: 2.0 / 3.0, BET: 1.0 / 3.0},
        "0b": {PASS: 1.0, BET: 0.0},
        "1p": {PASS: 1.0, BET: 0.0},
        "1b": {PASS: 2.0 / 3.0, BET: 1.0 / 3.0},
        "2p": {PASS: 0.0, BET: 1.0},
        "2b": {PASS: 0.0, BET: 1.0},
    }

    policy = TabularPolicy(KuhnPokerGame())
    for info_state, action_probs in strategy.items():
        policy.set_action_probabilities(info_state, action_probs)
    return policy
