"""A game against the engine: one board, one fixed difficulty."""

import logging
from typing import Optional

from duelchess.core.board import ChessBoard
from duelchess.core.difficulty import resolve_difficulty
from duelchess.core.evaluator import Evaluator
from duelchess.core.search import SearchEngine
from duelchess.errors import IllegalMove

logger = logging.getLogger(__name__)


class Game:
    def __init__(self, difficulty="MEDIUM", fen: Optional[str] = None, seed: Optional[int] = None):
        # Resolved up front so a bad tier fails before any move is played.
        self.profile = resolve_difficulty(difficulty)
        self.board = ChessBoard(fen)
        self.evaluator = Evaluator()
        self.search = SearchEngine(self.evaluator, seed=seed)

    @property
    def fen(self) -> str:
        return self.board.get_fen()

    def play(self, move_text: str) -> str:
        """Play a human move given in SAN or UCI; returns its SAN."""
        move = self.board.parse_move(move_text)
        if move is None:
            raise IllegalMove(move_text, self.fen)
        return self.board.push(move)

    def ai_move(self) -> Optional[str]:
        """Let the engine move; returns the SAN played, or None if it has no move."""
        if self.is_over():
            return None
        move = self.search.choose_move(self.board.board, self.profile)
        if move is None:
            return None
        san = self.board.push(move)
        logger.info("%s plays %s", self.profile.tier.value, san)
        return san

    def undo(self, plies: int = 1):
        for _ in range(plies):
            self.board.undo_move()

    def evaluate(self) -> int:
        return self.evaluator.evaluate(self.board.board)

    def status(self) -> str:
        return self.board.status()

    def is_over(self) -> bool:
        return self.board.is_game_over()

    def result(self) -> str:
        return self.board.result()
