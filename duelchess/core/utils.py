MATE_SCORE = 900000
INF = 1000000


def format_score(score: int) -> str:
    """Render a White-positive score as ``cp N`` or ``mate N``."""
    if abs(score) > MATE_SCORE - 100:
        mate_in = (MATE_SCORE - abs(score) + 1) // 2
        return f"mate {mate_in if score > 0 else -mate_in}"
    return f"cp {score}"


def mate_score_at(score: int, ply: int) -> int:
    """Pull a mate sentinel towards zero by ``ply`` so shorter mates rank higher."""
    if score >= MATE_SCORE:
        return score - ply
    if score <= -MATE_SCORE:
        return score + ply
    return score
