"""
Leduc poker.

Six cards (two suits of three ranks, rank = card // 2), one private card per
player, one public card dealt by chance between the two betting rounds.
Raises are 2 chips in the first round and 4 in the second, at most two
raises per round.
"""

import copy

from spieltree.envs.base.state import CHANCE_PLAYER, TERMINAL_PLAYER, Game, GameState
from spieltree.envs.leduc_poker.judger import LeducPokerJudger

FOLD = 0
CALL = 1
RAISE = 2

ACTION_NAMES = {FOLD: 'Fold', CALL: 'Call', RAISE: 'Raise'}


class LeducPokerGame(Game):

    def __init__(self):
        self._num_players = 2
        self._num_suits = 2
        self._num_cards = 3 * self._num_suits
        self._ante = 1
        self._raise_sizes = [2, 4]
        self._max_raises = 2
        self._starting_money = 100

    @classmethod
    def game_name(cls) -> str:
        return 'leduc_poker'

    def num_players(self) -> int:
        return self._num_players

    def num_distinct_actions(self) -> int:
        return 3

    def max_chance_outcomes(self) -> int:
        return self._num_cards

    def new_initial_state(self) -> 'LeducPokerState':
        return LeducPokerState(self)


class LeducPokerState(GameState):

    def __init__(self, game: LeducPokerGame):
        super().__init__(game)
        self.deck = list(range(game.max_chance_outcomes()))
        self.private_cards = []
        self.public_card = None
        self.round = 1
        self.round_actions = [[], []]
        self.contributions = [game._ante] * game.num_players()
        self.stakes = game._ante
        self.num_raises = 0
        self.num_calls = 0
        self.folded_player = None
        self._cur_player = CHANCE_PLAYER
        self.judger = LeducPokerJudger(game._num_suits)

    def current_player(self) -> int:
        return self._cur_player

    def _legal_player_actions(self):
        actions = []
        # Folding is only allowed when facing a bet
        if self.stakes > self.contributions[self._cur_player]:
            actions.append(FOLD)
        actions.append(CALL)
        if self.num_raises < self.game._max_raises:
            actions.append(RAISE)
        return actions

    def chance_outcomes(self):
        if not self.is_chance_node():
            return []
        return [(card, 1.0 / len(self.deck)) for card in self.deck]

    def _apply_action(self, action):
        if self.is_chance_node():
            self._deal(action)
            return

        player = self._cur_player
        self.round_actions[self.round - 1].append(action)

        if action == FOLD:
            self.folded_player = player
            self._cur_player = TERMINAL_PLAYER
            return

        if action == CALL:
            self.contributions[player] = self.stakes
            self.num_calls += 1
        else:
            self.stakes = max(self.contributions) + self.game._raise_sizes[self.round - 1]
            self.contributions[player] = self.stakes
            self.num_raises += 1
            self.num_calls = 0

        if self._round_complete():
            # Round one ends in the public deal, round two in the showdown
            self._cur_player = CHANCE_PLAYER if self.round == 1 else TERMINAL_PLAYER
        else:
            self._cur_player = 1 - player

    def _round_complete(self):
        if self.num_raises == 0:
            return self.num_calls == self.game.num_players()
        return self.num_calls == self.game.num_players() - 1

    def _deal(self, card):
        self.deck.remove(card)
        if len(self.private_cards) < self.game.num_players():
            self.private_cards.append(card)
            if len(self.private_cards) == self.game.num_players():
                self._cur_player = 0
            return

        self.public_card = card
        self.round = 2
        self.num_raises = 0
        self.num_calls = 0
        self._cur_player = 0

    def pot(self):
        return sum(self.contributions)

    def _information_state_string(self, player):
        private = self.private_cards[player] if len(self.private_cards) > player else ""
        money = " ".join(str(self.game._starting_money - c) for c in self.contributions)
        result = (
            f"[Observer: {player}][Private: {private}][Round {self.round}]"
            f"[Player: {self._cur_player}][Pot: {self.pot()}][Money: {money}]"
        )
        if self.public_card is not None:
            result += f"[Public: {self.public_card}]"
        round1 = " ".join(str(a) for a in self.round_actions[0])
        round2 = " ".join(str(a) for a in self.round_actions[1])
        return result + f"[Round1: {round1}][Round2: {round2}]"

    def returns(self):
        if not self.is_terminal():
            return [0.0] * self.game.num_players()
        return self.judger.judge(self.private_cards, self.public_card, self.contributions,
                                 folded_player=self.folded_player)

    def action_to_string(self, action):
        if self.is_chance_node():
            return f"Chance outcome:{action}"
        return ACTION_NAMES[action]

    def clone(self):
        state = copy.copy(self)
        state._history = list(self._history)
        state.deck = list(self.deck)
        state.private_cards = list(self.private_cards)
        state.round_actions = [list(actions) for actions in self.round_actions]
        state.contributions = list(self.contributions)
        return state
