class KuhnPokerJudger:

    def judge(self, cards, bets, contributions):
        """
        Payoffs for a finished hand.

        Args:
            cards: private card of each player
            bets: betting sequence (0 = pass, 1 = bet)
            contributions: chips put into the pot by each player

        Returns:
            [payoff_p0, payoff_p1]
        """
        pot = sum(contributions)
        if len(bets) >= 2 and bets[-2] == 1 and bets[-1] == 0:
            # Passing after a bet folds; the bettor takes the pot
            winner = (len(bets) - 2) % 2
        elif cards[0] > cards[1]:
            winner = 0
        else:
            winner = 1

        loser = 1 - winner

        payoffs = [0.0, 0.0]
        payoffs[winner] = float(pot - contributions[winner])
        payoffs[loser] = float(-contributions[loser])

        return payoffs
