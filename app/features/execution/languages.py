"""Fixed mapping of logical language keys to the remote runtime naming scheme."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping

from .errors import UnsupportedLanguage


@dataclass(frozen=True)
class LanguageDescriptor:
    key: str
    runtime_name: str
    version_index: str

    @property
    def display_name(self) -> str:
        return self.key[:1].upper() + self.key[1:]


_TABLE: Mapping[str, LanguageDescriptor] = MappingProxyType({
    d.key: d
    for d in (
        LanguageDescriptor("javascript", "nodejs", "3"),
        LanguageDescriptor("python", "python3", "3"),
        LanguageDescriptor("java", "java", "3"),
        LanguageDescriptor("cpp", "cpp", "0"),
        LanguageDescriptor("c", "c", "4"),
        LanguageDescriptor("php", "php", "3"),
        LanguageDescriptor("ruby", "ruby", "3"),
        LanguageDescriptor("go", "go", "3"),
        LanguageDescriptor("rust", "rust", "0"),
    )
})

_TEMPLATES: Mapping[str, str] = MappingProxyType({
    "javascript": (
        "// JavaScript Code\n"
        "console.log(\"Hello, World!\");\n"
    ),
    "python": (
        "# Python Code\n"
        "print(\"Hello, World!\")\n"
    ),
    "java": (
        "// Java Code\n"
        "public class Main {\n"
        "    public static void main(String[] args) {\n"
        "        System.out.println(\"Hello, World!\");\n"
        "    }\n"
        "}\n"
    ),
    "cpp": (
        "// C++ Code\n"
        "#include <iostream>\n"
        "using namespace std;\n"
        "\n"
        "int main() {\n"
        "    cout << \"Hello, World!\" << endl;\n"
        "    return 0;\n"
        "}\n"
    ),
    "c": (
        "// C Code\n"
        "#include <stdio.h>\n"
        "\n"
        "int main() {\n"
        "    printf(\"Hello, World!\\n\");\n"
        "    return 0;\n"
        "}\n"
    ),
    "php": (
        "<?php\n"
        "// PHP Code\n"
        "echo \"Hello, World!\\n\";\n"
        "?>\n"
    ),
    "ruby": (
        "# Ruby Code\n"
        "puts \"Hello, World!\"\n"
    ),
    "go": (
        "// Go Code\n"
        "package main\n"
        "\n"
        "import \"fmt\"\n"
        "\n"
        "func main() {\n"
        "    fmt.Println(\"Hello, World!\")\n"
        "}\n"
    ),
    "rust": (
        "// Rust Code\n"
        "fn main() {\n"
        "    println!(\"Hello, World!\");\n"
        "}\n"
    ),
})


def list_supported() -> List[str]:
    return list(_TABLE.keys())


def resolve(key: Any) -> LanguageDescriptor:
    """Return the descriptor for ``key`` or raise ``UnsupportedLanguage``.

    Anything that is not an exact registry key (None, numbers, lists) is unsupported.
    """
    descriptor = _TABLE.get(key) if isinstance(key, str) else None
    if descriptor is None:
        raise UnsupportedLanguage(list_supported())
    return descriptor


def describe_all() -> List[Dict[str, str]]:
    return [
        {
            "key": d.key,
            "name": d.display_name,
            "remoteLanguage": d.runtime_name,
            "versionIndex": d.version_index,
        }
        for d in _TABLE.values()
    ]


def template_for(key: Any) -> str:
    descriptor = resolve(key)
    return _TEMPLATES.get(descriptor.key, "")


__all__ = [
    "LanguageDescriptor",
    "list_supported",
    "resolve",
    "describe_all",
    "template_for",
]
