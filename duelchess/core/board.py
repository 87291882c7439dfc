"""Board wrapper over python-chess providing move history and notation parsing."""

from typing import List, Optional

import chess

from duelchess.errors import InvalidPosition


class ChessBoard:
    def __init__(self, fen: str = None):
        """Initialize from FEN or the standard starting position."""
        self.board = self._parse_fen(fen) if fen else chess.Board()
        self.move_history: List[str] = []

    @staticmethod
    def _parse_fen(fen: str) -> chess.Board:
        try:
            return chess.Board(fen)
        except ValueError as e:
            raise InvalidPosition(f"Invalid FEN {fen!r}: {e}") from e

    def reset(self):
        """Reset to the initial position."""
        self.board.reset()
        self.move_history.clear()

    def set_fen(self, fen: str):
        """Set board state from a FEN string."""
        self.board = self._parse_fen(fen)
        self.move_history.clear()

    def get_fen(self) -> str:
        """Return the current FEN."""
        return self.board.fen()

    def parse_move(self, move_str: str) -> Optional[chess.Move]:
        """Read a move in UCI ('e2e4') or SAN ('Nf3'); None if it is not legal here."""
        text = move_str.strip()
        if not text:
            return None
        try:
            move = chess.Move.from_uci(text)
        except ValueError:
            try:
                return self.board.parse_san(text)
            except ValueError:
                return None
        return move if move in self.board.legal_moves else None

    def push(self, move: chess.Move) -> str:
        """Play a legal move and return its SAN."""
        san = self.board.san(move)
        self.board.push(move)
        self.move_history.append(san)
        return san

    def make_move(self, move_str: str) -> bool:
        """Push a UCI or SAN move. Returns True if legal."""
        move = self.parse_move(move_str)
        if move is None:
            return False
        self.push(move)
        return True

    def undo_move(self):
        """Pop the last move."""
        if self.move_history:
            self.board.pop()
            self.move_history.pop()

    def get_legal_moves(self) -> List[str]:
        """Return legal moves as UCI strings."""
        return [m.uci() for m in self.board.legal_moves]

    def legal_targets(self, square_name: str) -> List[str]:
        """Destination squares the piece on ``square_name`` may move to."""
        square = chess.parse_square(square_name)
        targets = []
        for move in self.board.legal_moves:
            name = chess.square_name(move.to_square)
            if move.from_square == square and name not in targets:
                targets.append(name)
        return targets

    def is_game_over(self) -> bool:
        """Check if the game has ended, counting claimable draws."""
        return self.board.is_game_over(claim_draw=True)

    def status(self) -> str:
        if self.board.is_checkmate():
            return "checkmate"
        if self.board.is_stalemate():
            return "stalemate"
        if self.board.is_insufficient_material():
            return "insufficient_material"
        if self.board.can_claim_fifty_moves():
            return "fifty_moves"
        if self.board.can_claim_threefold_repetition():
            return "threefold_repetition"
        if self.board.is_check():
            return "check"
        return "ongoing"

    def result(self) -> str:
        return self.board.result(claim_draw=True)
