"""Core engine components: board, evaluator, difficulty tiers and search."""

from .board import ChessBoard
from .difficulty import Difficulty, DifficultyProfile, resolve_difficulty
from .evaluator import Evaluator, evaluate
from .search import SearchEngine, SearchResult, choose_move
