"""DuelChess: the move-search engine behind the play-vs-AI mode."""

from duelchess.core import Difficulty, SearchEngine, choose_move, evaluate
from duelchess.errors import EngineError, IllegalMove, InvalidPosition, UnknownDifficultyTier
from duelchess.game import Game

__version__ = "1.0.0"
