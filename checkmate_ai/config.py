# checkmate_ai/config.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple
import os
import tomllib  # python >=3.11

# Piece values in pawns, scaled by MATERIAL_SCALE in the evaluator
PIECE_VALUES = {
    "PAWN": 1,
    "KNIGHT": 3,
    "BISHOP": 3,
    "ROOK": 5,
    "QUEEN": 9,
    "KING": 0,
}


class Difficulty(Enum):
    NOVICE = "novice"
    INTERMEDIATE = "intermediate"
    MASTER = "master"

    @classmethod
    def from_name(cls, name: "str | Difficulty") -> "Difficulty":
        """Accept tier names and the easy/normal/hard aliases."""
        if isinstance(name, Difficulty):
            return name
        key = name.strip().lower()
        key = DIFFICULTY_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown difficulty: {name!r}") from None


DIFFICULTY_ALIASES = {
    "easy": "novice",
    "normal": "intermediate",
    "hard": "master",
}


@dataclass
class SearchConfig:
    novice_depth: int = 1
    intermediate_depth: int = 2
    master_depth: int = 3
    master_alpha_beta: bool = True
    use_quiescence: bool = True
    order_moves: bool = True


@dataclass
class EvalConfig:
    piece_values: Dict[str, int] = field(default_factory=lambda: PIECE_VALUES.copy())
    material_scale: int = 100
    use_positional: bool = True
    use_mobility: bool = True
    mobility_weight: int = 10
    mate_score: int = 10000
    check_penalty: int = 50
    endgame_piece_threshold: int = 10  # fewer non-king pieces than this = endgame


@dataclass
class OpeningConfig:
    enabled: bool = True
    ply_limit: int = 6
    # (from, to) pairs, first legal match wins
    moves: List[Tuple[str, str]] = field(default_factory=lambda: [
        ("e2", "e4"),  # King's Pawn
        ("d2", "d4"),  # Queen's Pawn
        ("c2", "c4"),  # English
        ("g1", "f3"),  # King's Knight
        ("b1", "c3"),  # Queen's Knight
        ("e7", "e5"),
        ("d7", "d5"),
        ("g8", "f6"),
        ("c7", "c5"),  # Sicilian
        ("e7", "e6"),  # French
    ])


@dataclass
class AdvisorConfig:
    enabled: bool = True
    api_key: Optional[str] = None  # falls back to GEMINI_API_KEY
    model: str = "gemini-2.0-flash-exp"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout: float = 20.0
    confidence: float = 0.9
    source_name: str = "Gemini AI"
    requests_per_day: int = 50
    requests_per_minute: int = 15


@dataclass
class SelectorConfig:
    search_confidence: float = 0.3
    random_confidence: float = 0.1
    novice_top_probability: float = 0.6
    intermediate_top_probability: float = 0.8
    intermediate_pool: int = 3


@dataclass
class UIConfig:
    engine_name: str = "Checkmate AI"
    default_difficulty: str = "intermediate"
    default_player_color: str = "white"
    api_port: int = 8000


@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    eval: EvalConfig = field(default_factory=EvalConfig)
    opening: OpeningConfig = field(default_factory=OpeningConfig)
    advisor: AdvisorConfig = field(default_factory=AdvisorConfig)
    selector: SelectorConfig = field(default_factory=SelectorConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "eval", "opening", "advisor", "selector", "ui"):
            if section not in raw:
                continue
            target = getattr(cfg, section)
            for k, v in raw[section].items():
                if hasattr(target, k):
                    setattr(target, k, v)
        if "log_level" in raw:
            cfg.log_level = raw["log_level"]
        return cfg

    def depth_for(self, difficulty: Difficulty) -> int:
        if difficulty is Difficulty.NOVICE:
            return self.search.novice_depth
        if difficulty is Difficulty.INTERMEDIATE:
            return self.search.intermediate_depth
        return self.search.master_depth

    def advisor_api_key(self) -> Optional[str]:
        return self.advisor.api_key or os.environ.get("GEMINI_API_KEY") or None


def apply_env_overrides(cfg: Config, environ=os.environ) -> Config:
    """Apply ENGINE_* environment overrides in place."""
    override_depth = environ.get("ENGINE_SEARCH_DEPTH")
    if override_depth:
        try:
            depth = int(override_depth)
        except ValueError:
            depth = 0
        if depth >= 1:
            cfg.search.novice_depth = depth
            cfg.search.intermediate_depth = depth
            cfg.search.master_depth = depth
    log_level = environ.get("ENGINE_LOG_LEVEL")
    if log_level:
        cfg.log_level = log_level.upper()
    return cfg


# single globally importable config instance
CONFIG = apply_env_overrides(
    Config.load_from_toml(os.environ.get("ENGINE_CONFIG_TOML", "config.toml"))
)
