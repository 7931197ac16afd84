"""
Token definitions for the Rust lexer.

This module contains the TokenType enum, Token dataclass, and
constant mappings for keywords and operators of the emitted ink! source.
"""

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    """Enumeration of all token types recognized by the Rust lexer."""

    # Keywords
    AS = auto()
    BREAK = auto()
    CONST = auto()
    CONTINUE = auto()
    CRATE = auto()
    DYN = auto()
    ELSE = auto()
    ENUM = auto()
    FALSE = auto()
    FN = auto()
    FOR = auto()
    IF = auto()
    IMPL = auto()
    IN = auto()
    LET = auto()
    LOOP = auto()
    MATCH = auto()
    MOD = auto()
    MUT = auto()
    PUB = auto()
    RETURN = auto()
    SELF_VALUE = auto()
    SELF_TYPE = auto()
    STRUCT = auto()
    TRAIT = auto()
    TRUE = auto()
    TYPE = auto()
    USE = auto()
    WHERE = auto()
    WHILE = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    PERCENT = auto()
    AMPERSAND = auto()
    PIPE = auto()
    CARET = auto()
    LT = auto()
    GT = auto()
    LT_EQ = auto()
    GT_EQ = auto()
    EQ_EQ = auto()
    BANG_EQ = auto()
    AMPERSAND_AMPERSAND = auto()
    PIPE_PIPE = auto()
    BANG = auto()
    LT_LT = auto()
    GT_GT = auto()
    EQ = auto()
    PLUS_EQ = auto()
    MINUS_EQ = auto()
    STAR_EQ = auto()
    SLASH_EQ = auto()
    PERCENT_EQ = auto()
    AMPERSAND_EQ = auto()
    PIPE_EQ = auto()
    CARET_EQ = auto()
    LT_LT_EQ = auto()
    GT_GT_EQ = auto()
    QUESTION = auto()
    COLON = auto()
    COLON_COLON = auto()
    THIN_ARROW = auto()
    FAT_ARROW = auto()
    DOT_DOT = auto()
    DOT_DOT_EQ = auto()
    POUND = auto()

    # Delimiters
    LPAREN = auto()
    RPAREN = auto()
    LBRACE = auto()
    RBRACE = auto()
    LBRACKET = auto()
    RBRACKET = auto()
    SEMICOLON = auto()
    COMMA = auto()
    DOT = auto()

    # Literals
    NUMBER = auto()
    HEX_NUMBER = auto()
    STRING_LITERAL = auto()
    CHAR_LITERAL = auto()
    LIFETIME = auto()
    IDENTIFIER = auto()

    # Special
    EOF = auto()


@dataclass
class Token:
    """Represents a single token from the lexer."""
    type: TokenType
    value: str
    line: int
    column: int


# Keyword to TokenType mapping
KEYWORDS = {
    'as': TokenType.AS,
    'break': TokenType.BREAK,
    'const': TokenType.CONST,
    'continue': TokenType.CONTINUE,
    'crate': TokenType.CRATE,
    'dyn': TokenType.DYN,
    'else': TokenType.ELSE,
    'enum': TokenType.ENUM,
    'false': TokenType.FALSE,
    'fn': TokenType.FN,
    'for': TokenType.FOR,
    'if': TokenType.IF,
    'impl': TokenType.IMPL,
    'in': TokenType.IN,
    'let': TokenType.LET,
    'loop': TokenType.LOOP,
    'match': TokenType.MATCH,
    'mod': TokenType.MOD,
    'mut': TokenType.MUT,
    'pub': TokenType.PUB,
    'return': TokenType.RETURN,
    'self': TokenType.SELF_VALUE,
    'Self': TokenType.SELF_TYPE,
    'struct': TokenType.STRUCT,
    'trait': TokenType.TRAIT,
    'true': TokenType.TRUE,
    'type': TokenType.TYPE,
    'use': TokenType.USE,
    'where': TokenType.WHERE,
    'while': TokenType.WHILE,
}

# Three-character operators
THREE_CHAR_OPS = {
    '<<=': TokenType.LT_LT_EQ,
    '>>=': TokenType.GT_GT_EQ,
    '..=': TokenType.DOT_DOT_EQ,
}

# Two-character operators
TWO_CHAR_OPS = {
    '&&': TokenType.AMPERSAND_AMPERSAND,
    '||': TokenType.PIPE_PIPE,
    '==': TokenType.EQ_EQ,
    '!=': TokenType.BANG_EQ,
    '<=': TokenType.LT_EQ,
    '>=': TokenType.GT_EQ,
    '<<': TokenType.LT_LT,
    '>>': TokenType.GT_GT,
    '+=': TokenType.PLUS_EQ,
    '-=': TokenType.MINUS_EQ,
    '*=': TokenType.STAR_EQ,
    '/=': TokenType.SLASH_EQ,
    '%=': TokenType.PERCENT_EQ,
    '&=': TokenType.AMPERSAND_EQ,
    '|=': TokenType.PIPE_EQ,
    '^=': TokenType.CARET_EQ,
    '::': TokenType.COLON_COLON,
    '->': TokenType.THIN_ARROW,
    '=>': TokenType.FAT_ARROW,
    '..': TokenType.DOT_DOT,
}

# Single-character operators and delimiters
SINGLE_CHAR_OPS = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '*': TokenType.STAR,
    '/': TokenType.SLASH,
    '%': TokenType.PERCENT,
    '&': TokenType.AMPERSAND,
    '|': TokenType.PIPE,
    '^': TokenType.CARET,
    '<': TokenType.LT,
    '>': TokenType.GT,
    '!': TokenType.BANG,
    '=': TokenType.EQ,
    '?': TokenType.QUESTION,
    ':': TokenType.COLON,
    '#': TokenType.POUND,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    '{': TokenType.LBRACE,
    '}': TokenType.RBRACE,
    '[': TokenType.LBRACKET,
    ']': TokenType.RBRACKET,
    ';': TokenType.SEMICOLON,
    ',': TokenType.COMMA,
    '.': TokenType.DOT,
}

# Delimiter pairs that must balance in any emitted artifact
DELIMITER_PAIRS = {
    TokenType.LPAREN: TokenType.RPAREN,
    TokenType.LBRACE: TokenType.RBRACE,
    TokenType.LBRACKET: TokenType.RBRACKET,
}
