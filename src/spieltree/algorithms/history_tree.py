"""
History tree: every reachable history of a game, indexed by history string.

The tree is built once, completely, from an initial state and a designated
player, and is read-only afterwards. Each node wraps its own game state and
caches the history string, the node type and the information-state string
seen from the designated player's side (or the acting player's, when someone
else is to move).
"""

import time
from enum import Enum
from typing import Dict, Iterator, List, Optional

from spieltree.envs.base.state import GameState


class HistoryTreeError(RuntimeError):
    """A node or the tree broke one of its structural invariants."""


class StateType(Enum):
    """Represents the kind of a history: decision, chance or terminal."""

    DECISION = 'decision'
    CHANCE = 'chance'
    TERMINAL = 'terminal'


def _game_name(state: GameState) -> str:
    return state.game.game_name()


class HistoryNode:
    """Represents one history in the tree, with its state, type and information state."""

    CHANCE_NODE_INFOSTATE = "Chance Node"
    TERMINAL_NODE_INFOSTATE = "Terminal node"

    def __init__(self, player_id: int, state: GameState):
        self.state = state
        self.history = state.history_string()
        self.player = state.current_player()
        self.children: Dict[int, 'HistoryNode'] = {}

        if state.is_terminal():
            self.type = StateType.TERMINAL
            self.info_state = self.TERMINAL_NODE_INFOSTATE
        elif state.is_chance_node():
            self.type = StateType.CHANCE
            self.info_state = self.CHANCE_NODE_INFOSTATE
        else:
            self.type = StateType.DECISION
            # Seen from the designated player unless someone else is to move
            if self.player == player_id:
                self.info_state = state.information_state_string(player_id)
            else:
                self.info_state = state.information_state_string()

    def is_terminal(self) -> bool:
        return self.type == StateType.TERMINAL

    def is_chance(self) -> bool:
        return self.type == StateType.CHANCE

    def is_decision(self) -> bool:
        return self.type == StateType.DECISION

    def add_child(self, action: int, child: 'HistoryNode'):
        if self.is_terminal():
            raise HistoryTreeError(
                f"Cannot add child {action} to terminal history '{self.history}' "
                f"in {_game_name(self.state)}")
        if action in self.children:
            raise HistoryTreeError(
                f"Duplicate child action {action} at history '{self.history}' "
                f"in {_game_name(self.state)}")
        self.children[action] = child

    def child_actions(self) -> List[int]:
        return list(self.children)

    def num_children(self) -> int:
        return len(self.children)

    def get_child(self, action: int) -> 'HistoryNode':
        child = self.children.get(action)
        if child is None:
            raise HistoryTreeError(
                f"No child for action {action} at history '{self.history}' "
                f"in {_game_name(self.state)}")
        return child

    def check_consistency(self, player_id: int):
        """Re-derive everything cached on this node from its state."""
        game_name = _game_name(self.state)
        if self.state.history_string() != self.history:
            raise HistoryTreeError(
                f"History '{self.history}' does not match state history "
                f"'{self.state.history_string()}' in {game_name}")

        expected = HistoryNode(player_id, self.state)
        if expected.type != self.type:
            raise HistoryTreeError(
                f"Node type {self.type.value} does not match state type "
                f"{expected.type.value} at history '{self.history}' in {game_name}")
        if expected.info_state != self.info_state:
            raise HistoryTreeError(
                f"Infostate '{self.info_state}' does not match state infostate "
                f"'{expected.info_state}' at history '{self.history}' in {game_name}")

        if not self.is_terminal():
            legal_actions = self.state.legal_actions()
            child_actions = self.child_actions()
            if legal_actions != child_actions:
                raise HistoryTreeError(
                    f"Child actions {child_actions} do not match legal actions "
                    f"{legal_actions} at history '{self.history}' in {game_name}")
        elif self.children:
            raise HistoryTreeError(
                f"Terminal history '{self.history}' has children in {game_name}")

    def __repr__(self):
        return f"HistoryNode(history={self.history!r}, type={self.type.value}, info_state={self.info_state!r})"


class HistoryTree:
    """
    Complete tree of histories for one designated player.

    Args:
        state: initial state of the game; the tree keeps its own copy
        player_id: player whose information states label the decision nodes
        progress_interval: if set, print progress every N registered nodes
    """

    def __init__(self, state: GameState, player_id: int, progress_interval: Optional[int] = None):
        self.player_id = player_id
        self.game_name = _game_name(state)
        self._state_to_node: Dict[str, HistoryNode] = {}

        start_time = time.time()
        if progress_interval:
            print(f"Building history tree for {self.game_name} (player {player_id})...")

        self._root = HistoryNode(player_id, state.clone())
        self._register(self._root)

        # Depth-first with an explicit stack, no recursion
        to_process = [self._root]
        while to_process:
            node = to_process.pop()
            if node.is_terminal():
                continue
            for action in node.state.legal_actions():
                child = HistoryNode(player_id, node.state.child(action))
                node.add_child(action, child)
                self._register(child)
                to_process.append(child)

                if progress_interval and len(self._state_to_node) % progress_interval == 0:
                    print(f"  Building tree: {len(self._state_to_node)} histories created...")

        if progress_interval:
            build_time = time.time() - start_time
            print(f"Tree built: {len(self._state_to_node)} histories in {build_time:.2f}s")

    def _register(self, node: HistoryNode):
        if node.history in self._state_to_node:
            raise HistoryTreeError(
                f"History '{node.history}' was generated twice in {self.game_name}")
        self._state_to_node[node.history] = node

    @property
    def root(self) -> HistoryNode:
        return self._root

    def get_by_history(self, history: str) -> Optional[HistoryNode]:
        """The node stored under `history`, or None if there is none."""
        return self._state_to_node.get(history)

    def num_histories(self) -> int:
        return len(self._state_to_node)

    def all_histories(self) -> Iterator[str]:
        return iter(self._state_to_node)

    def nodes(self) -> Iterator[HistoryNode]:
        return iter(self._state_to_node.values())

    def __len__(self):
        return self.num_histories()

    def __contains__(self, history):
        return history in self._state_to_node

    def validate(self):
        for history, node in self._state_to_node.items():
            if history != node.history:
                raise HistoryTreeError(
                    f"Index key '{history}' points at history '{node.history}' in {self.game_name}")
            node.check_consistency(self.player_id)

    def stats(self) -> dict:
        type_counts = {t.value: 0 for t in StateType}
        own_info_states = set()
        for node in self.nodes():
            type_counts[node.type.value] += 1
            if node.is_decision() and node.player == self.player_id:
                own_info_states.add(node.info_state)
        return {
            'num_histories': self.num_histories(),
            'num_info_states': len(own_info_states),
            'node_type_counts': type_counts,
        }
