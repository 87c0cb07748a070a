from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass
class TreeBuildConfig:
    game: str
    players: Tuple[int, ...] = (0, 1)
    policy: str = 'uniform'
    progress_interval: Optional[int] = None
    validate: bool = False
    record_stats: bool = False
    registry_path: Optional[str] = None
