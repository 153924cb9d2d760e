"""Character-budget trimming of conversation history."""

from collections.abc import Sequence

from .models import ChatTurn

DEFAULT_HISTORY_CHAR_BUDGET = 6000


def clamp_history(
    history: Sequence[ChatTurn], max_chars: int = DEFAULT_HISTORY_CHAR_BUDGET
) -> list[ChatTurn]:
    """Return the newest turns of *history* whose total content fits *max_chars*.

    Turns are taken newest first and accumulation stops at the first turn
    that would overflow the budget, so an oversized recent turn hides
    everything older than it. The result keeps chronological order and
    *history* itself is left untouched.
    """
    used = 0
    kept: list[ChatTurn] = []

    for turn in reversed(history):
        length = len(turn.content or "")
        if used + length > max_chars:
            break
        used += length
        kept.append(turn)

    kept.reverse()
    return kept
