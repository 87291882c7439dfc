# duelchess/config.py
from dataclasses import dataclass, field
from typing import Dict, Any
import os
import tomllib  # python >=3.11

# Defaults (centipawns)
PIECE_VALUES = {
    "PAWN": 100,
    "KNIGHT": 320,
    "BISHOP": 330,
    "ROOK": 500,
    "QUEEN": 900,
    "KING": 20000,
}

# tier name -> (max_depth, random_fraction, move_filter)
DIFFICULTY_TABLE = {
    "EASY": {"max_depth": 1, "random_fraction": 0.5, "move_filter": "any"},
    "MEDIUM": {"max_depth": 2, "random_fraction": 0.3, "move_filter": "captures"},
    "HARD": {"max_depth": 3, "random_fraction": 0.1, "move_filter": "checks_then_captures"},
    "EXPERT": {"max_depth": 4, "random_fraction": 0.0, "move_filter": "any"},
}


@dataclass
class EvalConfig:
    piece_values: Dict[str, int] = field(default_factory=lambda: PIECE_VALUES.copy())
    use_positional: bool = True
    mobility_weight: int = 2
    check_penalty: int = 50
    protected_piece_bonus: int = 0  # off unless set in config.toml
    endgame_material_threshold: int = 2600


@dataclass
class DifficultyConfig:
    tiers: Dict[str, Dict[str, Any]] = field(
        default_factory=lambda: {k: dict(v) for k, v in DIFFICULTY_TABLE.items()}
    )
    default: str = "MEDIUM"


@dataclass
class UIConfig:
    engine_name: str = "DuelChess"
    api_port: int = 8000


@dataclass
class Config:
    eval: EvalConfig = field(default_factory=EvalConfig)
    difficulty: DifficultyConfig = field(default_factory=DifficultyConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        return cfg.merge(raw)

    def merge(self, raw: Dict[str, Any]) -> "Config":
        """Overlay a parsed TOML document; unknown keys are ignored."""
        for section in ("eval", "ui"):
            for k, v in raw.get(section, {}).items():
                target = getattr(self, section)
                if not hasattr(target, k):
                    continue
                current = getattr(target, k)
                # [eval.piece_values] QUEEN = 950 keeps the other pieces
                if isinstance(current, dict) and isinstance(v, dict):
                    current.update(v)
                else:
                    setattr(target, k, v)
        if "difficulty" in raw:
            diff = raw["difficulty"]
            if "default" in diff:
                self.difficulty.default = str(diff["default"]).upper()
            # [difficulty.expert] max_depth = 5
            for name, values in diff.items():
                if not isinstance(values, dict):
                    continue
                tier = self.difficulty.tiers.setdefault(name.upper(), {})
                tier.update(values)
        if "log_level" in raw:
            self.log_level = str(raw["log_level"]).upper()
        return self


# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("DUELCHESS_CONFIG_TOML", "config.toml"))
# allow env override of the log level for quick debugging
if os.environ.get("DUELCHESS_LOG_LEVEL"):
    CONFIG.log_level = os.environ["DUELCHESS_LOG_LEVEL"].upper()
