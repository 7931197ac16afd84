"""
Lexer implementation for emitted Rust source code.

Generated artifacts are scanned back into tokens so that their structure
(balanced delimiters, keyword placement, literal shapes) can be checked
without a Rust toolchain. Trivia (whitespace, line and block comments) is
dropped; everything else, including unknown characters, is skipped or
turned into a token with its line and column.
"""

from typing import Callable, List

from .tokens import (
    Token,
    TokenType,
    KEYWORDS,
    THREE_CHAR_OPS,
    TWO_CHAR_OPS,
    SINGLE_CHAR_OPS,
)


DIGITS = '0123456789_'
HEX_DIGITS = '0123456789abcdefABCDEF_'


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == '_'


class Lexer:
    """
    Single-pass scanner over Rust source.

    Usage:
        tokens = Lexer(source).tokenize()
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1

    # =========================================================================
    # CURSOR
    # =========================================================================

    def _at(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.source[index] if index < len(self.source) else ''

    def _bump(self, count: int = 1) -> str:
        start = self.pos
        for _ in range(count):
            if self.pos >= len(self.source):
                break
            if self.source[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1
        return self.source[start:self.pos]

    def _eat_while(self, predicate: Callable[[str], bool]) -> str:
        start = self.pos
        while self._at() and predicate(self._at()):
            self._bump()
        return self.source[start:self.pos]

    def _starts_with(self, text: str) -> bool:
        return self.source.startswith(text, self.pos)

    # =========================================================================
    # TRIVIA
    # =========================================================================

    def _skip_trivia(self) -> None:
        while True:
            self._eat_while(str.isspace)
            if self._starts_with('//'):
                self._eat_while(lambda ch: ch != '\n')
            elif self._starts_with('/*'):
                self._skip_block_comment()
            else:
                return

    def _skip_block_comment(self) -> None:
        """Skip a block comment; `/* /* */ */` closes at the outer marker."""
        depth = 0
        while self._at():
            if self._starts_with('/*'):
                depth += 1
                self._bump(2)
            elif self._starts_with('*/'):
                depth -= 1
                self._bump(2)
                if depth == 0:
                    return
            else:
                self._bump()

    # =========================================================================
    # LITERALS
    # =========================================================================

    def _scan_quoted(self, quote: str) -> str:
        """Consume a quoted body with escapes, up to and including the closing quote."""
        text = self._bump()
        while self._at() and self._at() != quote:
            if self._at() == '\\':
                text += self._bump()
            text += self._bump()
        return text + self._bump()

    def _scan_raw_string(self) -> str:
        """Consume `r"..."` or `r#"..."#`; raw bodies have no escapes."""
        text = self._bump()
        hashes = self._eat_while(lambda ch: ch == '#')
        closing = '"' + hashes
        text += hashes + self._bump()
        while self._at() and not self._starts_with(closing):
            text += self._bump()
        return text + self._bump(len(closing))

    def _raw_string_ahead(self, offset: int) -> bool:
        index = offset
        while self._at(index) == '#':
            index += 1
        return self._at(index) == '"'

    def _scan_apostrophe(self) -> Token:
        """A quote starts either a char literal (`'a'`, `'\\n'`) or a lifetime (`'a`)."""
        line, column = self.line, self.column
        if self._at(1) != '\\' and self._at(2) != "'" and _is_word_char(self._at(1)):
            text = self._bump() + self._eat_while(_is_word_char)
            return Token(TokenType.LIFETIME, text, line, column)
        return Token(TokenType.CHAR_LITERAL, self._scan_quoted("'"), line, column)

    def _scan_number(self) -> Token:
        line, column = self.line, self.column
        if self._at() == '0' and self._at(1) in ('x', 'X'):
            text = self._bump(2) + self._eat_while(lambda ch: ch in HEX_DIGITS)
            kind = TokenType.HEX_NUMBER
        else:
            text = self._eat_while(lambda ch: ch in DIGITS)
            # `0..n` is a range
            if self._at() == '.' and self._at(1).isdigit():
                text += self._bump() + self._eat_while(lambda ch: ch in DIGITS)
            kind = TokenType.NUMBER
        # type suffix: u8, u128, i64, usize
        text += self._eat_while(_is_word_char)
        return Token(kind, text, line, column)

    # =========================================================================
    # WORDS AND PUNCTUATION
    # =========================================================================

    def _scan_word(self) -> Token:
        line, column = self.line, self.column
        if self._at() in ('r', 'b') and self._raw_string_ahead(1) and (
                self._at() == 'r' or self._at(1) == '"'):
            if self._at() == 'b':
                text = self._bump() + self._scan_quoted('"')
            else:
                text = self._scan_raw_string()
            return Token(TokenType.STRING_LITERAL, text, line, column)
        if self._starts_with('r#') and _is_word_char(self._at(2)):
            self._bump(2)
            return Token(TokenType.IDENTIFIER, self._eat_while(_is_word_char), line, column)
        text = self._eat_while(_is_word_char)
        return Token(KEYWORDS.get(text, TokenType.IDENTIFIER), text, line, column)

    def _scan_punct(self):
        line, column = self.line, self.column
        for width, table in ((3, THREE_CHAR_OPS), (2, TWO_CHAR_OPS), (1, SINGLE_CHAR_OPS)):
            text = self.source[self.pos:self.pos + width]
            if text in table:
                self._bump(width)
                return Token(table[text], text, line, column)
        self._bump()
        return None

    # =========================================================================
    # DRIVER
    # =========================================================================

    def next_token(self) -> Token:
        """Scan the next significant token, or EOF when the source is exhausted."""
        while True:
            self._skip_trivia()
            ch = self._at()
            if not ch:
                return Token(TokenType.EOF, '', self.line, self.column)
            if ch == '"':
                line, column = self.line, self.column
                return Token(TokenType.STRING_LITERAL, self._scan_quoted('"'), line, column)
            if ch == "'":
                return self._scan_apostrophe()
            if ch.isdigit():
                return self._scan_number()
            if ch.isalpha() or ch == '_':
                return self._scan_word()
            token = self._scan_punct()
            if token is not None:
                return token

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source.

        Returns:
            List of Token objects, ending with an EOF token.
        """
        tokens: List[Token] = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.type == TokenType.EOF:
                return tokens
