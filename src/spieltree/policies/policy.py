"""
Policies: mappings from information state to a distribution over actions.

The history tree only ever asks a policy one question, "what does the acting
player do at this information state", so everything here is keyed by the
information-state string. A GameState can be passed instead, in which case
the acting player's information state is used unless another player is
named.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

import numpy as np

from spieltree.envs.base.state import Game, GameState


class MissingPolicyEntryError(LookupError):
    """The policy has no entry for a queried information state."""


def _info_state_key(state: Union[str, GameState], player: Optional[int] = None) -> str:
    if isinstance(state, GameState):
        return state.information_state_string(player)
    if player is not None:
        raise ValueError("A player can only be given together with a GameState")
    return state


class Policy(ABC):

    def __init__(self, game: Game, player_ids: Optional[Iterable[int]] = None):
        self.game = game
        if player_ids is None:
            player_ids = range(game.num_players())
        self.player_ids = list(player_ids)

    @abstractmethod
    def info_state_probabilities(self, info_state: str) -> Dict[int, float]:
        pass

    @abstractmethod
    def info_states(self) -> Iterator[str]:
        """All information states the policy has an entry for."""
        pass

    def action_probabilities(self, state: Union[str, GameState],
                             player: Optional[int] = None) -> Dict[int, float]:
        """
        Distribution at `state`. For a GameState, `player` picks whose
        information state is looked up; it defaults to the acting player.
        """
        return self.info_state_probabilities(_info_state_key(state, player))

    def get_state_policy(self, state: Union[str, GameState],
                         player: Optional[int] = None) -> List[Tuple[int, float]]:
        return sorted(self.action_probabilities(state, player).items())

    def get_state_policy_as_parallel_vectors(self, state: Union[str, GameState]):
        actions_and_probs = self.get_state_policy(state)
        return [a for a, _ in actions_and_probs], [p for _, p in actions_and_probs]

    def serialize(self, double_precision: int = -1, delimiter: str = "<~>") -> str:
        """
        One line per information state: `<info_state><delimiter><a>:<p>;<a>:<p>...`.

        A negative `double_precision` writes probabilities with full precision.
        """
        lines = []
        for info_state in self.info_states():
            entries = []
            for action, prob in self.get_state_policy(info_state):
                if double_precision < 0:
                    entries.append(f"{action}:{prob!r}")
                else:
                    entries.append(f"{action}:{prob:.{double_precision}f}")
            lines.append(f"{info_state}{delimiter}{';'.join(entries)}")
        return "\n".join(lines)


def _collect_info_states(game: Game, players: List[int]):
    """
    Walk every reachable state and collect (info_state, player, legal_actions)
    for the decision nodes of `players`, each information state once.
    """
    seen = set()
    found = []
    to_process = [game.new_initial_state()]
    while to_process:
        state = to_process.pop()
        if state.is_terminal():
            continue
        player = state.current_player()
        legal_actions = state.legal_actions()
        if not state.is_chance_node() and player in players:
            info_state = state.information_state_string(player)
            if info_state not in seen:
                seen.add(info_state)
                found.append((info_state, player, legal_actions))
        for action in reversed(legal_actions):
            to_process.append(state.child(action))
    return found


class TabularPolicy(Policy):
    """
    Explicit table over every reachable information state of `players`.

    Row i of `action_probability_array` holds the distribution for the
    information state with `state_lookup[info_state] == i`; illegal actions
    are masked out by `legal_actions_mask`. Starts out uniform.
    """

    def __init__(self, game: Game, players: Optional[Iterable[int]] = None):
        super().__init__(game, players)
        self.state_lookup: Dict[str, int] = {}
        self.states_per_player: List[List[str]] = [[] for _ in range(game.num_players())]

        entries = _collect_info_states(game, self.player_ids)
        num_actions = game.num_distinct_actions()
        self.legal_actions_mask = np.zeros((len(entries), num_actions), dtype=bool)
        for row, (info_state, player, legal_actions) in enumerate(entries):
            self.state_lookup[info_state] = row
            self.states_per_player[player].append(info_state)
            self.legal_actions_mask[row, legal_actions] = True

        num_legal = np.maximum(self.legal_actions_mask.sum(axis=1, keepdims=True), 1)
        self.action_probability_array = self.legal_actions_mask / num_legal

    def _row(self, info_state: str) -> int:
        row = self.state_lookup.get(info_state)
        if row is None:
            raise MissingPolicyEntryError(
                f"No policy entry for information state '{info_state}' "
                f"in {self.game.game_name()}")
        return row

    def info_states(self):
        return iter(self.state_lookup)

    def legal_actions(self, info_state: str) -> List[int]:
        return [int(a) for a in np.flatnonzero(self.legal_actions_mask[self._row(info_state)])]

    def info_state_probabilities(self, info_state):
        row = self._row(info_state)
        probs = self.action_probability_array[row]
        return {a: float(probs[a]) for a in self.legal_actions(info_state)}

    def set_action_probabilities(self, info_state: str, action_probs: Dict[int, float]):
        """Replace the distribution at `info_state`; unlisted legal actions get 0."""
        row = self._row(info_state)
        legal = set(self.legal_actions(info_state))
        illegal = [a for a in action_probs if a not in legal]
        if illegal:
            raise ValueError(f"Illegal actions {illegal} for information state '{info_state}'")
        self.action_probability_array[row] = 0.0
        for action, prob in action_probs.items():
            self.action_probability_array[row, action] = prob

    @classmethod
    def deserialize(cls, game: Game, serialized: str, delimiter: str = "<~>") -> 'TabularPolicy':
        policy = cls(game)
        for line in serialized.splitlines():
            if not line:
                continue
            info_state, sep, entries = line.rpartition(delimiter)
            if not sep:
                raise ValueError(f"Malformed policy line: {line!r}")
            action_probs = {}
            for entry in entries.split(";"):
                action, prob = entry.split(":")
                action_probs[int(action)] = float(prob)
            policy.set_action_probabilities(info_state, action_probs)
        return policy


def uniform_policy(game: Game) -> TabularPolicy:
    return TabularPolicy(game)


def first_action_policy(game: Game) -> TabularPolicy:
    """Deterministic policy that always plays the lowest legal action."""
    policy = TabularPolicy(game)
    for info_state in policy.info_states():
        policy.set_action_probabilities(info_state, {policy.legal_actions(info_state)[0]: 1.0})
    return policy
