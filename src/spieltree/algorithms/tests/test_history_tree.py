import pytest

from spieltree.algorithms.history_tree import HistoryNode, HistoryTree, HistoryTreeError, StateType
from spieltree.envs.base.state import CHANCE_PLAYER, TERMINAL_PLAYER, Game, GameState
from spieltree.envs.registry import load_game

# Reference history counts; they agree with the tree sizes of the OpenSpiel implementations
NUM_HISTORIES = {
    'kuhn_poker': 58,
    'leduc_poker': 9457,
    'liars_dice': 294883,
}


def build_tree(game_name, player_id):
    return HistoryTree(load_game(game_name).new_initial_state(), player_id)


def check_tree(tree, game_name, player_id):
    assert tree.num_histories() == NUM_HISTORIES[game_name]
    assert tree.root is not None

    for history in tree.all_histories():
        node = tree.get_by_history(history)
        assert node is not None
        assert node.state is not None
        assert node.state.history_string() == node.history
        assert history == node.history

        if node.type != StateType.TERMINAL:
            legal_actions = node.state.legal_actions()
            assert node.child_actions() == legal_actions
            assert node.num_children() == len(legal_actions)
        else:
            assert node.num_children() == 0

        if node.type == StateType.DECISION and node.state.current_player() != player_id:
            assert node.info_state == node.state.information_state_string()
        elif node.type == StateType.CHANCE:
            assert node.info_state == HistoryNode.CHANCE_NODE_INFOSTATE
        elif node.type == StateType.TERMINAL:
            assert node.info_state == HistoryNode.TERMINAL_NODE_INFOSTATE
        else:
            assert node.info_state == node.state.information_state_string(player_id)


@pytest.mark.parametrize("player_id", [0, 1])
@pytest.mark.parametrize("game_name", ['kuhn_poker', 'leduc_poker'])
def test_game_tree(game_name, player_id):
    check_tree(build_tree(game_name, player_id), game_name, player_id)


@pytest.mark.slow
@pytest.mark.parametrize("player_id", [0, 1])
def test_liars_dice_tree(player_id):
    tree = build_tree('liars_dice', player_id)
    check_tree(tree, 'liars_dice', player_id)
    assert tree.num_histories() == NUM_HISTORIES['liars_dice']
    assert tree.stats()['node_type_counts'] == {'decision': 147456, 'chance': 7, 'terminal': 147420}


def test_kuhn_tree_structure():
    tree = build_tree('kuhn_poker', 0)
    root = tree.root
    assert root.history == ""
    assert root.type == StateType.CHANCE
    assert root.player == CHANCE_PLAYER
    assert root.child_actions() == [0, 1, 2]

    node = tree.get_by_history("0, 1")
    assert node.type == StateType.DECISION
    assert node.info_state == "0"
    assert root.get_child(0).get_child(1) is node

    # Player 1 acts here, so the node carries player 1's view
    assert tree.get_by_history("0, 1, 0").info_state == "1p"

    leaf = tree.get_by_history("0, 1, 0, 0")
    assert leaf.is_terminal()
    assert leaf.player == TERMINAL_PLAYER
    assert leaf.child_actions() == []


def test_stats():
    stats = build_tree('kuhn_poker', 1).stats()
    assert stats['num_histories'] == 58
    assert stats['node_type_counts'] == {'decision': 24, 'chance': 4, 'terminal': 30}
    assert stats['num_info_states'] == 6

    stats = build_tree('leduc_poker', 0).stats()
    assert stats['node_type_counts'] == {'decision': 3780, 'chance': 157, 'terminal': 5520}


def test_lookup_miss_returns_none():
    tree = build_tree('kuhn_poker', 0)
    assert tree.get_by_history("0, 0") is None
    assert tree.get_by_history("0, 1, 0, 0, 0") is None
    assert "0, 0" not in tree
    assert "0, 1" in tree


def test_all_histories_is_restartable():
    tree = build_tree('kuhn_poker', 0)
    first = list(tree.all_histories())
    second = list(tree.all_histories())
    assert first == second
    assert len(set(first)) == len(tree) == 58
    assert {node.history for node in tree.nodes()} == set(first)


def test_independent_trees_agree():
    a = build_tree('leduc_poker', 1)
    b = build_tree('leduc_poker', 1)
    assert a.num_histories() == b.num_histories()
    assert set(a.all_histories()) == set(b.all_histories())


def test_tree_is_unaffected_by_later_changes_to_the_initial_state():
    state = load_game('kuhn_poker').new_initial_state()
    tree = HistoryTree(state, 0)
    state.apply_action(0)

    assert tree.root.state is not state
    assert tree.root.history == ""
    assert tree.root.state.legal_actions() == [0, 1, 2]
    tree.validate()


def test_validate_passes_on_fresh_tree():
    build_tree('kuhn_poker', 0).validate()
    build_tree('leduc_poker', 1).validate()


def test_validate_detects_corrupted_node():
    tree = build_tree('kuhn_poker', 0)
    tree.get_by_history("0, 1").info_state = "bogus"
    with pytest.raises(HistoryTreeError, match="0, 1"):
        tree.validate()

    tree = build_tree('kuhn_poker', 0)
    del tree.get_by_history("0, 1").children[1]
    with pytest.raises(HistoryTreeError, match="legal actions"):
        tree.validate()


def test_get_child_rejects_unknown_action():
    tree = build_tree('kuhn_poker', 0)
    with pytest.raises(HistoryTreeError):
        tree.root.get_child(5)


def test_add_child_twice_is_an_error():
    tree = build_tree('kuhn_poker', 0)
    node = tree.get_by_history("0, 1")
    with pytest.raises(HistoryTreeError):
        node.add_child(0, node.get_child(0))
    with pytest.raises(HistoryTreeError):
        tree.get_by_history("0, 1, 0, 0").add_child(0, node)


class _CollidingGame(Game):
    """Two chance outcomes whose states report the same history string."""

    @classmethod
    def game_name(cls):
        return 'colliding'

    def num_players(self):
        return 1

    def num_distinct_actions(self):
        return 1

    def max_chance_outcomes(self):
        return 2

    def new_initial_state(self):
        return _CollidingState(self)


class _CollidingState(GameState):

    def current_player(self):
        return TERMINAL_PLAYER if self._history else CHANCE_PLAYER

    def _legal_player_actions(self):
        return []

    def chance_outcomes(self):
        return [] if self._history else [(0, 0.5), (1, 0.5)]

    def _apply_action(self, action):
        pass

    def _information_state_string(self, player):
        return ""

    def returns(self):
        return [0.0]

    def clone(self):
        state = _CollidingState(self.game)
        state._history = list(self._history)
        return state

    def history_string(self):
        return "always the same"


def test_history_collision_is_fatal():
    with pytest.raises(HistoryTreeError, match="colliding"):
        HistoryTree(_CollidingGame().new_initial_state(), 0)


def test_progress_output(capsys):
    HistoryTree(load_game('kuhn_poker').new_initial_state(), 0, progress_interval=20)
    out = capsys.readouterr().out
    assert "Building history tree for kuhn_poker (player 0)" in out
    assert "20 histories created" in out
    assert "Tree built: 58 histories" in out


def test_silent_by_default(capsys):
    build_tree('kuhn_poker', 0)
    assert capsys.readouterr().out == ""
