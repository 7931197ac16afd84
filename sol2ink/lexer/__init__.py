"""
Lexer module for the Sol2Ink compiler.

This module provides tokenization of the emitted Rust source code.
"""

from .tokens import (
    TokenType,
    Token,
    KEYWORDS,
    THREE_CHAR_OPS,
    TWO_CHAR_OPS,
    SINGLE_CHAR_OPS,
    DELIMITER_PAIRS,
)
from .lexer import Lexer

__all__ = [
    'TokenType',
    'Token',
    'KEYWORDS',
    'THREE_CHAR_OPS',
    'TWO_CHAR_OPS',
    'SINGLE_CHAR_OPS',
    'DELIMITER_PAIRS',
    'Lexer',
]
