import logging
import random
from dataclasses import dataclass
from typing import List, Optional

import chess

from duelchess.core.difficulty import DifficultyProfile, resolve_difficulty
from duelchess.core.evaluator import Evaluator
from duelchess.core.utils import INF, format_score, mate_score_at
from duelchess.errors import InvalidPosition

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    move: Optional[chess.Move]
    score: int  # centipawns, positive favors White
    depth: int
    nodes: int


class SearchEngine:
    """Fixed-depth minimax with alpha-beta pruning.

    White maximizes and Black minimizes the evaluator's score. The board passed
    in is searched in place with push/pop and is always handed back exactly as
    it came in, move stack included.
    """

    def __init__(self, evaluator: Optional[Evaluator] = None, seed: Optional[int] = None,
                 prune: bool = True):
        self.evaluator = evaluator or Evaluator()
        self.rng = random.Random(seed)
        self.prune = prune
        self.nodes = 0

    def choose_move(self, board: chess.Board, difficulty) -> Optional[chess.Move]:
        """Pick a move for the side to move at the given difficulty.

        Returns None when there is no legal move (checkmate or stalemate).
        """
        return self.choose(board, difficulty).move

    def choose(self, board: chess.Board, difficulty) -> SearchResult:
        """Like :meth:`choose_move` but keeps the score of the chosen move.

        Random and forced picks are not searched: their result has depth 0 and
        the score is the static evaluation after the move.
        """
        profile: DifficultyProfile = resolve_difficulty(difficulty)
        self._check_position(board)
        self.nodes = 0

        moves = self.order_moves(board)
        if not moves:
            return SearchResult(None, self.evaluator.evaluate(board), 0, 0)
        if len(moves) == 1:
            return self._unsearched(board, moves[0])

        if profile.random_fraction > 0 and self.rng.random() < profile.random_fraction:
            move = self.rng.choice(profile.random_pool(board, moves))
            logger.debug("%s: random %s pick %s", profile.tier.value,
                         profile.move_filter, move.uci())
            return self._unsearched(board, move)

        return self.search(board, profile.max_depth)

    def _unsearched(self, board: chess.Board, move: chess.Move) -> SearchResult:
        board.push(move)
        try:
            score = mate_score_at(self.evaluator.evaluate(board), 1)
        finally:
            board.pop()
        return SearchResult(move, score, 0, 0)

    def search(self, board: chess.Board, depth: int) -> SearchResult:
        """Full-width search; a position with legal moves always yields a move."""
        self._check_position(board)
        self.nodes = 0
        depth = max(depth, 1)

        moves = self.order_moves(board)
        if not moves:
            return SearchResult(None, self.evaluator.evaluate(board), 0, 0)

        maximizing = board.turn == chess.WHITE
        alpha, beta = -INF, INF
        best_move = None
        best_score = -INF if maximizing else INF

        for move in moves:
            board.push(move)
            try:
                score = self._minimax(board, depth - 1, alpha, beta, not maximizing, 1)
            finally:
                board.pop()

            # Strict comparison: the first move in ordering wins ties.
            if maximizing:
                if score > best_score:
                    best_score, best_move = score, move
                alpha = max(alpha, best_score)
            else:
                if score < best_score:
                    best_score, best_move = score, move
                beta = min(beta, best_score)

        logger.debug("depth %d nodes %d best %s score %s", depth, self.nodes,
                     best_move.uci(), format_score(best_score))
        return SearchResult(best_move, best_score, depth, self.nodes)

    def _minimax(self, board: chess.Board, depth: int, alpha: int, beta: int,
                 maximizing: bool, ply: int) -> int:
        self.nodes += 1

        if depth == 0:
            return mate_score_at(self.evaluator.evaluate(board), ply)

        moves = self.order_moves(board)
        if not moves:
            return mate_score_at(self.evaluator.evaluate(board), ply)
        if self.evaluator.is_draw(board):
            return 0

        if maximizing:
            best = -INF
            for move in moves:
                board.push(move)
                try:
                    score = self._minimax(board, depth - 1, alpha, beta, False, ply + 1)
                finally:
                    board.pop()
                best = max(best, score)
                alpha = max(alpha, best)
                if self.prune and beta <= alpha:
                    break
            return best

        best = INF
        for move in moves:
            board.push(move)
            try:
                score = self._minimax(board, depth - 1, alpha, beta, True, ply + 1)
            finally:
                board.pop()
            best = min(best, score)
            beta = min(beta, best)
            if self.prune and beta <= alpha:
                break
        return best

    def order_moves(self, board: chess.Board) -> List[chess.Move]:
        """Captures (MVV-LVA), then promotions, then quiet moves.

        The sort is stable, so equal keys keep python-chess generation order.
        """
        moves = list(board.legal_moves)
        scores = []
        for move in moves:
            if board.is_capture(move):
                scores.append(self._mvv_lva(board, move) + 100000)
            elif move.promotion:
                scores.append(50000 + move.promotion)
            else:
                scores.append(0)
        return [m for _, m in sorted(zip(scores, moves), key=lambda x: x[0], reverse=True)]

    def _mvv_lva(self, board: chess.Board, move: chess.Move) -> int:
        attacker = board.piece_type_at(move.from_square)
        if board.is_en_passant(move):
            victim_type = chess.PAWN
        else:
            victim_type = board.piece_type_at(move.to_square)
        return (victim_type * 10) - attacker

    @staticmethod
    def _check_position(board: chess.Board) -> None:
        if not board.is_valid():
            status = board.status()
            raise InvalidPosition(f"Cannot search {board.fen()}: {status!r}", status=int(status))


def choose_move(board: chess.Board, difficulty, seed: Optional[int] = None) -> Optional[chess.Move]:
    """One-shot helper around :meth:`SearchEngine.choose_move`."""
    return SearchEngine(seed=seed).choose_move(board, difficulty)
