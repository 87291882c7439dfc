"""Static evaluator: material, piece-square tables and a few small positional terms.

Scores are integer centipawns from White's point of view (positive = White is
better), whoever is to move. Checkmate returns ``+/-MATE_SCORE`` and every draw
returns exactly 0.
"""

from typing import Dict, Optional

import chess

from duelchess.config import CONFIG, EvalConfig
from duelchess.core.tables import KING_ENDGAME_TABLE, PIECE_SQUARE_TABLES, table_index
from duelchess.core.utils import MATE_SCORE
from duelchess.errors import ConfigError


class Evaluator:
    def __init__(self, cfg: Optional[EvalConfig] = None):
        self.cfg = cfg or CONFIG.eval
        self.values = self._load_piece_values(self.cfg)
        for name in ("mobility_weight", "check_penalty", "protected_piece_bonus",
                     "endgame_material_threshold"):
            if not isinstance(getattr(self.cfg, name), int):
                raise ConfigError(f"eval.{name} must be an integer")

    @staticmethod
    def _load_piece_values(cfg: EvalConfig) -> Dict[chess.PieceType, int]:
        values = {}
        for pt in chess.PIECE_TYPES:
            p_name = chess.piece_name(pt).upper()
            value = cfg.piece_values.get(p_name)
            # Integers only: float sums could reorder moves between runs.
            if not isinstance(value, int) or value < 0:
                raise ConfigError(f"eval.piece_values.{p_name} must be a non-negative integer")
            values[pt] = value
        return values

    def evaluate(self, board: chess.Board) -> int:
        """Return static eval in centipawns, positive favors White."""
        # One move generation serves mate/stalemate detection and mobility.
        legal_count = board.legal_moves.count()
        in_check = board.is_check()

        if legal_count == 0:
            if in_check:
                # The side to move has been mated.
                return -MATE_SCORE if board.turn == chess.WHITE else MATE_SCORE
            return 0
        if self.is_draw(board):
            return 0

        piece_map = board.piece_map()
        endgame = self.is_endgame(piece_map)
        bonus = self.cfg.protected_piece_bonus

        score = 0
        for sq, piece in piece_map.items():
            pt = piece.piece_type
            color = piece.color

            value = self.values[pt]
            if self.cfg.use_positional:
                if pt == chess.KING and endgame:
                    table = KING_ENDGAME_TABLE
                else:
                    table = PIECE_SQUARE_TABLES[pt]
                value += table[table_index(sq, color)]

            if bonus and pt != chess.KING and board.is_attacked_by(color, sq):
                value += bonus

            score += value if color == chess.WHITE else -value

        # Side-to-move terms.
        sign = 1 if board.turn == chess.WHITE else -1
        score += sign * self.cfg.mobility_weight * legal_count
        if in_check:
            score -= sign * self.cfg.check_penalty

        return score

    def is_draw(self, board: chess.Board) -> bool:
        """Draws other than stalemate: dead position, fifty moves, threefold."""
        if board.is_insufficient_material():
            return True
        if board.halfmove_clock >= 100:
            return True
        return board.is_repetition(3)

    def non_king_material(self, piece_map: Dict[chess.Square, chess.Piece]) -> int:
        return sum(self.values[p.piece_type] for p in piece_map.values()
                   if p.piece_type != chess.KING)

    def is_endgame(self, piece_map: Dict[chess.Square, chess.Piece]) -> bool:
        return self.non_king_material(piece_map) < self.cfg.endgame_material_threshold


_default_evaluator: Optional[Evaluator] = None


def evaluate(board: chess.Board) -> int:
    """Evaluate with the process-wide default :class:`Evaluator`."""
    global _default_evaluator
    if _default_evaluator is None:
        _default_evaluator = Evaluator()
    return _default_evaluator.evaluate(board)
