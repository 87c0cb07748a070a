class LeducPokerJudger:

    def __init__(self, num_suits=2):
        self.num_suits = num_suits

    def judge(self, private_cards, public_card, contributions, folded_player=None):
        pot = sum(contributions)
        if folded_player is not None:
            winner = 1 - folded_player
        else:
            hand0 = self.evaluate_hand(private_cards[0], public_card)
            hand1 = self.evaluate_hand(private_cards[1], public_card)

            if hand0 > hand1:
                winner = 0
            elif hand1 > hand0:
                winner = 1
            else:
                return [0.0, 0.0]

        loser = 1 - winner

        payoffs = [0.0, 0.0]
        payoffs[winner] = float(pot - contributions[winner])
        payoffs[loser] = float(-contributions[loser])

        return payoffs

    def rank(self, card):
        return card // self.num_suits

    def evaluate_hand(self, private_card, public_card):
        private_rank = self.rank(private_card)
        public_rank = self.rank(public_card)

        if private_rank == public_rank:
            return (1, private_rank, 0)

        cards = sorted([private_rank, public_rank], reverse=True)
        return (0, cards[0], cards[1])
