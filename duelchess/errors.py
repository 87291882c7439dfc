"""Exception types raised by the engine and the game session."""


class EngineError(Exception):
    """Base class for every error the engine raises on purpose."""


class ConfigError(EngineError):
    """The difficulty table or evaluation weights are malformed."""


class InvalidPosition(EngineError, ValueError):
    """The board cannot be searched: bad FEN or an illegal setup."""

    def __init__(self, message: str, status: int = 0):
        super().__init__(message)
        self.status = status


class UnknownDifficultyTier(EngineError, ValueError):
    """The difficulty is not one of the configured tiers."""

    def __init__(self, tier):
        super().__init__(f"Unknown difficulty tier: {tier!r}")
        self.tier = tier


class IllegalMove(EngineError, ValueError):
    """A move that cannot be played in the current position."""

    def __init__(self, move_text: str, fen: str):
        super().__init__(f"Illegal move {move_text!r} in position {fen}")
        self.move_text = move_text
        self.fen = fen
