from __future__ import annotations


def compare_outputs(actual: str | None, expected: str | None) -> bool:
    """Trim both sides, then require an exact, case-sensitive match.

    Internal whitespace, line endings and number formatting are left alone;
    ``"4 2"`` does not match ``"42"``.
    """
    return (actual or "").strip() == (expected or "").strip()


__all__ = ["compare_outputs"]
