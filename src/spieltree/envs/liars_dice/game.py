"""
Liar's dice.

Each player rolls one six-sided die in secret, then players alternate
raising a bid "at least <quantity> dice show <face>" until someone calls
liar. Sixes are wild for every other face.

Action ids: chance outcome o rolls face o + 1; bid b means quantity
b // 6 + 1 of face b % 6 + 1; the liar call is the id after the last bid.
"""

import copy

from spieltree.envs.base.state import CHANCE_PLAYER, TERMINAL_PLAYER, Game, GameState

NO_BID = -1


class LiarsDiceGame(Game):

    def __init__(self, dice_sides=6):
        self._num_players = 2
        self._dice_per_player = 1
        self.dice_sides = dice_sides

    @classmethod
    def game_name(cls) -> str:
        return 'liars_dice'

    def num_players(self) -> int:
        return self._num_players

    def total_num_dice(self) -> int:
        return self._num_players * self._dice_per_player

    def num_bids(self) -> int:
        return self.total_num_dice() * self.dice_sides

    def liar_action(self) -> int:
        return self.num_bids()

    def num_distinct_actions(self) -> int:
        return self.num_bids() + 1

    def max_chance_outcomes(self) -> int:
        return self.dice_sides

    def new_initial_state(self) -> 'LiarsDiceState':
        return LiarsDiceState(self)


class LiarsDiceState(GameState):

    def __init__(self, game: LiarsDiceGame):
        super().__init__(game)
        self.dice = [[] for _ in range(game.num_players())]
        self.bids = []
        self.calling_player = None
        self._cur_player = CHANCE_PLAYER
        self._cur_roller = 0

    def current_player(self) -> int:
        return self._cur_player

    def current_bid(self):
        return self.bids[-1] if self.bids else NO_BID

    def _legal_player_actions(self):
        actions = list(range(self.current_bid() + 1, self.game.num_bids()))
        # Liar can only be called on an existing bid
        if self.current_bid() != NO_BID:
            actions.append(self.game.liar_action())
        return actions

    def chance_outcomes(self):
        if not self.is_chance_node():
            return []
        sides = self.game.dice_sides
        return [(outcome, 1.0 / sides) for outcome in range(sides)]

    def _apply_action(self, action):
        if self.is_chance_node():
            self.dice[self._cur_roller].append(action + 1)
            if len(self.dice[self._cur_roller]) == self.game._dice_per_player:
                self._cur_roller += 1
            if self._cur_roller == self.game.num_players():
                self._cur_player = 0
            return

        if action == self.game.liar_action():
            self.calling_player = self._cur_player
            self._cur_player = TERMINAL_PLAYER
            return

        self.bids.append(action)
        self._cur_player = 1 - self._cur_player

    def unpack_bid(self, bid):
        sides = self.game.dice_sides
        return bid // sides + 1, bid % sides + 1

    def bid_string(self, bid):
        quantity, face = self.unpack_bid(bid)
        return f"{quantity}-{face}"

    def _information_state_string(self, player):
        result = "".join(str(face) for face in self.dice[player])
        for bid in self.bids:
            result += " " + self.bid_string(bid)
        if self.calling_player is not None:
            result += " Liar"
        return result

    def returns(self):
        if not self.is_terminal():
            return [0.0] * self.game.num_players()

        quantity, face = self.unpack_bid(self.current_bid())
        wild = self.game.dice_sides
        matches = sum(
            1 for faces in self.dice for f in faces
            if f == face or (f == wild and face != wild)
        )
        bidder = 1 - self.calling_player
        winner = bidder if matches >= quantity else self.calling_player

        payoffs = [-1.0] * self.game.num_players()
        payoffs[winner] = 1.0
        return payoffs

    def action_to_string(self, action):
        if self.is_chance_node():
            return f"Roll {action + 1}"
        if action == self.game.liar_action():
            return "Liar"
        return self.bid_string(action)

    def clone(self):
        state = copy.copy(self)
        state._history = list(self._history)
        state.dice = [list(faces) for faces in self.dice]
        state.bids = list(self.bids)
        return state
