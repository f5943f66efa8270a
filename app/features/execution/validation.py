from __future__ import annotations

import re
from typing import Dict, List, Tuple

from .languages import resolve

# Superficial checks only; nothing here parses the code.
_RULES: Dict[str, List[Tuple[re.Pattern[str], str]]] = {
    "java": [
        (re.compile(r"class\s+\w+"), "Java class definition required"),
        (re.compile(r"public\s+static\s+void\s+main"), "Main method required"),
    ],
    "cpp": [
        (re.compile(r"#include|using\s+namespace"), "Include statements recommended"),
        (re.compile(r"int\s+main\s*\("), "Main function required"),
    ],
    "c": [
        (re.compile(r"int\s+main\s*\("), "Main function required"),
    ],
    "go": [
        (re.compile(r"package\s+main"), "Main package required"),
        (re.compile(r"func\s+main\s*\("), "Main function required"),
    ],
    "rust": [
        (re.compile(r"fn\s+main\s*\("), "Main function required"),
    ],
}


def validate_code(language: str, code: str) -> List[str]:
    """Return violation messages for ``code``; unknown languages raise."""
    descriptor = resolve(language)
    return [message for pattern, message in _RULES.get(descriptor.key, []) if not pattern.search(code or "")]


__all__ = ["validate_code"]
