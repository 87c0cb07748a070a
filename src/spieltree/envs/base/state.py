"""
Game-agnostic state interface consumed by the history tree.

Every game engine under `spieltree.envs` implements `Game` and `GameState`.
The tree only talks to states through this interface, so it never needs to
know which game it is enumerating.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

CHANCE_PLAYER = -1
TERMINAL_PLAYER = -4


class Game(ABC):
    """Static description of a game; hands out fresh initial states."""

    @classmethod
    @abstractmethod
    def game_name(cls) -> str:
        """Returns the game's string identifier."""
        pass

    @abstractmethod
    def num_players(self) -> int:
        pass

    @abstractmethod
    def num_distinct_actions(self) -> int:
        pass

    @abstractmethod
    def max_chance_outcomes(self) -> int:
        pass

    @abstractmethod
    def new_initial_state(self) -> 'GameState':
        pass


class GameState(ABC):
    """
    One position in a game, reached by a sequence of actions.

    Actions are integers. Chance outcomes are actions too; they appear in the
    history exactly like player actions. `apply_action` advances the state in
    place, `child` returns an advanced copy and leaves the receiver untouched.
    """

    def __init__(self, game: Game):
        self.game = game
        self._history: List[int] = []

    @abstractmethod
    def current_player(self) -> int:
        """Acting player id, CHANCE_PLAYER or TERMINAL_PLAYER."""
        pass

    @abstractmethod
    def _legal_player_actions(self) -> List[int]:
        pass

    @abstractmethod
    def chance_outcomes(self) -> List[Tuple[int, float]]:
        """(action, probability) pairs at a chance node, empty elsewhere."""
        pass

    @abstractmethod
    def _apply_action(self, action: int) -> None:
        pass

    @abstractmethod
    def _information_state_string(self, player: int) -> str:
        pass

    @abstractmethod
    def returns(self) -> List[float]:
        pass

    @abstractmethod
    def clone(self) -> 'GameState':
        pass

    def action_to_string(self, action: int) -> str:
        return str(action)

    def is_terminal(self) -> bool:
        return self.current_player() == TERMINAL_PLAYER

    def is_chance_node(self) -> bool:
        return self.current_player() == CHANCE_PLAYER

    def legal_actions(self) -> List[int]:
        if self.is_terminal():
            return []
        if self.is_chance_node():
            return [action for action, _ in self.chance_outcomes()]
        return self._legal_player_actions()

    def chance_outcome_probability(self, action: int) -> float:
        for outcome, prob in self.chance_outcomes():
            if outcome == action:
                return prob
        raise ValueError(
            f"Action {action} is not a chance outcome at history '{self.history_string()}'")

    def apply_action(self, action: int) -> None:
        if action not in self.legal_actions():
            raise ValueError(
                f"Illegal action {action} at history '{self.history_string()}' "
                f"in {self.game.game_name()}")
        self._apply_action(action)
        self._history.append(action)

    def child(self, action: int) -> 'GameState':
        state = self.clone()
        state.apply_action(action)
        return state

    def history(self) -> List[int]:
        return list(self._history)

    def history_string(self) -> str:
        return ", ".join(str(action) for action in self._history)

    def information_state_string(self, player: Optional[int] = None) -> str:
        if player is None:
            player = self.current_player()
            if player < 0:
                raise ValueError(
                    f"No acting player at history '{self.history_string()}'; "
                    f"pass the player explicitly")
        if not 0 <= player < self.game.num_players():
            raise ValueError(f"Invalid player id {player}")
        return self._information_state_string(player)

    def __str__(self):
        return self.history_string()
