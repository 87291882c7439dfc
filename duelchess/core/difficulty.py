"""Difficulty tiers.

Every tier is one row of a table: search depth, the fraction of moves picked at
random instead of searched, and which moves the random pick is drawn from.
The table is built from ``CONFIG.difficulty`` and validated once; higher tiers
may never search shallower or play more randomly than lower ones.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional

import chess

from duelchess.config import CONFIG, DifficultyConfig
from duelchess.errors import ConfigError, UnknownDifficultyTier


class Difficulty(Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"
    EXPERT = "EXPERT"


# Weakest first; monotonicity is checked in this order.
TIER_ORDER = (Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD, Difficulty.EXPERT)

MoveFilter = Callable[[chess.Board, List[chess.Move]], List[chess.Move]]


def any_move(board: chess.Board, moves: List[chess.Move]) -> List[chess.Move]:
    return list(moves)


def captures(board: chess.Board, moves: List[chess.Move]) -> List[chess.Move]:
    return [m for m in moves if board.is_capture(m)]


def valuable_captures(board: chess.Board, moves: List[chess.Move]) -> List[chess.Move]:
    """Captures of a knight or anything bigger."""
    picked = []
    for m in moves:
        if not board.is_capture(m) or board.is_en_passant(m):
            continue
        victim = board.piece_type_at(m.to_square)
        if victim is not None and victim >= chess.KNIGHT:
            picked.append(m)
    return picked


def checks(board: chess.Board, moves: List[chess.Move]) -> List[chess.Move]:
    return [m for m in moves if board.gives_check(m)]


def checks_then_captures(board: chess.Board, moves: List[chess.Move]) -> List[chess.Move]:
    """Checking moves if there are any, otherwise captures."""
    return checks(board, moves) or captures(board, moves)


MOVE_FILTERS: Dict[str, MoveFilter] = {
    "any": any_move,
    "captures": captures,
    "valuable_captures": valuable_captures,
    "checks": checks,
    "checks_then_captures": checks_then_captures,
}


@dataclass(frozen=True)
class DifficultyProfile:
    tier: Difficulty
    max_depth: int
    random_fraction: float
    move_filter: str = "any"

    def random_pool(self, board: chess.Board, moves: List[chess.Move]) -> List[chess.Move]:
        """Moves a random pick is drawn from; all moves when the filter leaves none."""
        return MOVE_FILTERS[self.move_filter](board, moves) or list(moves)


def build_profiles(cfg: Optional[DifficultyConfig] = None) -> Dict[Difficulty, DifficultyProfile]:
    cfg = cfg or CONFIG.difficulty
    profiles = {}
    for tier in TIER_ORDER:
        raw = cfg.tiers.get(tier.value)
        if raw is None:
            raise ConfigError(f"difficulty.{tier.value.lower()} is missing")
        try:
            profile = DifficultyProfile(
                tier=tier,
                max_depth=raw["max_depth"],
                random_fraction=raw["random_fraction"],
                move_filter=raw.get("move_filter", "any"),
            )
        except KeyError as e:
            raise ConfigError(f"difficulty.{tier.value.lower()} lacks {e.args[0]}") from e
        _check_profile(profile)
        profiles[tier] = profile

    for weaker, stronger in zip(TIER_ORDER, TIER_ORDER[1:]):
        lo, hi = profiles[weaker], profiles[stronger]
        if hi.max_depth < lo.max_depth or hi.random_fraction > lo.random_fraction:
            raise ConfigError(
                f"{stronger.value} must not search shallower or play more randomly than {weaker.value}"
            )
    return profiles


def _check_profile(profile: DifficultyProfile) -> None:
    name = profile.tier.value.lower()
    if isinstance(profile.max_depth, bool) or not isinstance(profile.max_depth, int) \
            or profile.max_depth < 1:
        raise ConfigError(f"difficulty.{name}.max_depth must be a positive integer")
    if not isinstance(profile.random_fraction, (int, float)) \
            or not 0.0 <= profile.random_fraction <= 1.0:
        raise ConfigError(f"difficulty.{name}.random_fraction must be within [0, 1]")
    if profile.move_filter not in MOVE_FILTERS:
        raise ConfigError(f"difficulty.{name}.move_filter: unknown filter {profile.move_filter!r}")


PROFILES = build_profiles()


def resolve_difficulty(tier, profiles: Optional[Dict[Difficulty, DifficultyProfile]] = None) -> DifficultyProfile:
    """Map a tier (enum, name or profile) to its profile; unknown tiers raise."""
    if isinstance(tier, DifficultyProfile):
        _check_profile(tier)
        return tier
    profiles = profiles or PROFILES
    if isinstance(tier, Difficulty):
        return profiles[tier]
    if isinstance(tier, str):
        try:
            return profiles[Difficulty[tier.strip().upper()]]
        except KeyError:
            raise UnknownDifficultyTier(tier) from None
    raise UnknownDifficultyTier(tier)
