import copy

from spieltree.envs.base.state import CHANCE_PLAYER, TERMINAL_PLAYER, Game, GameState
from spieltree.envs.kuhn_poker.judger import KuhnPokerJudger

PASS = 0
BET = 1

# Betting sequences after which the hand is over
TERMINAL_SEQUENCES = {
    (PASS, PASS),
    (BET, PASS),
    (BET, BET),
    (PASS, BET, PASS),
    (PASS, BET, BET),
}


class KuhnPokerGame(Game):
    """Two-player Kuhn poker with a three-card deck (0 < 1 < 2)."""

    def __init__(self):
        self._num_players = 2
        self._num_cards = 3
        self._ante = 1
        self._bet_size = 1

    @classmethod
    def game_name(cls) -> str:
        return 'kuhn_poker'

    def num_players(self) -> int:
        return self._num_players

    def num_distinct_actions(self) -> int:
        return 2

    def max_chance_outcomes(self) -> int:
        return self._num_cards

    def new_initial_state(self) -> 'KuhnPokerState':
        return KuhnPokerState(self)


class KuhnPokerState(GameState):

    def __init__(self, game: KuhnPokerGame):
        super().__init__(game)
        self.cards = []  # cards[p] is player p's private card once dealt
        self.bets = []
        self.contributions = [game._ante] * game.num_players()
        self.judger = KuhnPokerJudger()

    def current_player(self) -> int:
        if len(self.cards) < self.game.num_players():
            return CHANCE_PLAYER
        if tuple(self.bets) in TERMINAL_SEQUENCES:
            return TERMINAL_PLAYER
        return len(self.bets) % self.game.num_players()

    def _legal_player_actions(self):
        return [PASS, BET]

    def chance_outcomes(self):
        if not self.is_chance_node():
            return []
        deck = [c for c in range(self.game.max_chance_outcomes()) if c not in self.cards]
        return [(card, 1.0 / len(deck)) for card in deck]

    def _apply_action(self, action):
        if self.is_chance_node():
            self.cards.append(action)
            return

        # BET is both the opening bet and the call; passing a bet folds
        if action == BET:
            self.contributions[self.current_player()] += self.game._bet_size
        self.bets.append(action)

    def _information_state_string(self, player):
        result = str(self.cards[player]) if len(self.cards) > player else ""
        return result + "".join('b' if a == BET else 'p' for a in self.bets)

    def returns(self):
        if not self.is_terminal():
            return [0.0] * self.game.num_players()
        return self.judger.judge(self.cards, self.bets, self.contributions)

    def action_to_string(self, action):
        if self.is_chance_node():
            return f"Deal:{action}"
        return "Bet" if action == BET else "Pass"

    def clone(self):
        state = copy.copy(self)
        state._history = list(self._history)
        state.cards = list(self.cards)
        state.bets = list(self.bets)
        state.contributions = list(self.contributions)
        return state
