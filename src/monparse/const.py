"""
Constants used by the character classes and the lexical layer.
"""

from __future__ import annotations
from typing import Final

WHITESPACES: Final[frozenset[str]] = frozenset({" ", "\n", "\t"})
NEWLINE: Final[str] = "\n"
COMMENT_START: Final[str] = "--"
DECIMAL: Final[frozenset[str]] = frozenset({"0", "1", "2", "3", "4", "5", "6", "7", "8", "9"})
LOWERCASE: Final[frozenset[str]] = frozenset("abcdefghijklmnopqrstuvwxyz")
UPPERCASE: Final[frozenset[str]] = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZ")
ALPHABETIC: Final[frozenset[str]] = LOWERCASE | UPPERCASE
ALNUM: Final[frozenset[str]] = ALPHABETIC | DECIMAL
