from __future__ import annotations

from typing import List, Sequence

SOURCE_MAX_BYTES = 50_000
STDIN_MAX_BYTES = 10_000


class QuotaError(ValueError):
    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


def _too_large(text: str | None, limit: int) -> bool:
    return bool(text) and len(text.encode()) > limit


def enforce_execution_payload(
    source: str | None,
    stdin: str | None = None,
    *,
    test_inputs: Sequence[str | None] = (),
):
    errors: List[str] = []
    if not source or not source.strip():
        errors.append("Code is required")
    elif _too_large(source, SOURCE_MAX_BYTES):
        errors.append("Code for execution cannot exceed 50KB")
    if _too_large(stdin, STDIN_MAX_BYTES):
        errors.append("Input cannot exceed 10KB")
    for idx, text in enumerate(test_inputs, start=1):
        if _too_large(text, STDIN_MAX_BYTES):
            errors.append(f"Input for test case {idx} cannot exceed 10KB")
    if errors:
        raise QuotaError(errors)


__all__ = ["enforce_execution_payload", "QuotaError", "SOURCE_MAX_BYTES", "STDIN_MAX_BYTES"]
