from typing import List, Optional, Type

from spieltree.envs.base.state import Game

# Game registry - populated on first lookup
ALL_GAMES: List[Type[Game]] = []


def _populate_all_games():
    """Populate ALL_GAMES list with all game classes."""
    global ALL_GAMES
    if ALL_GAMES:
        return  # Already populated

    from spieltree.envs.kuhn_poker.game import KuhnPokerGame
    from spieltree.envs.leduc_poker.game import LeducPokerGame
    from spieltree.envs.liars_dice.game import LiarsDiceGame

    ALL_GAMES = [
        KuhnPokerGame,
        LeducPokerGame,
        LiarsDiceGame,
    ]


def registered_games() -> List[str]:
    _populate_all_games()
    return [game_cls.game_name() for game_cls in ALL_GAMES]


def find_game_class(game_name: str) -> Optional[Type[Game]]:
    _populate_all_games()
    for game_cls in ALL_GAMES:
        if game_cls.game_name() == game_name:
            return game_cls

    return None


def load_game(game_name: str) -> Game:
    game_class = find_game_class(game_name)
    if game_class is None:
        raise ValueError(f"Unknown game: {game_name} (available: {', '.join(registered_games())})")
    return game_class()
