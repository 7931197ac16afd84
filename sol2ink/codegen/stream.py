"""
Token stream produced by the artifact assemblers.

An artifact is emitted as unformatted Rust source: one line per generated
item, with `_blank_!();` and `_comment_!("...");` markers that the downstream
formatter turns into blank lines and line comments.
"""

from typing import Iterable, List

from ..lexer import Lexer, Token, TokenType, DELIMITER_PAIRS


BLANK_MARKER = '_blank_!();'


def rust_string(value: str) -> str:
    """Quote a Python string as a Rust string literal."""
    escaped = (
        value.replace('\\', '\\\\')
        .replace('"', '\\"')
        .replace('\n', '\\n')
        .replace('\r', '\\r')
        .replace('\t', '\\t')
    )
    return f'"{escaped}"'


def comment_marker(text: str) -> str:
    return f'_comment_!({rust_string(text)});'


def doc_attribute(text: str) -> str:
    return f'#[doc = {rust_string(text)}]'


class TokenStream:
    """
    An emitted artifact.

    Two streams are equal when their text is equal, which makes the output of
    repeated assembly calls directly comparable.
    """

    def __init__(self, lines: Iterable[str] = ()):
        self._lines: List[str] = list(lines)

    @property
    def lines(self) -> List[str]:
        return list(self._lines)

    def extend(self, lines: Iterable[str]) -> 'TokenStream':
        self._lines.extend(lines)
        return self

    def append(self, code: str) -> 'TokenStream':
        """Append generated code, one entry per line. Empty code adds nothing."""
        if code:
            self._lines.extend(code.split('\n'))
        return self

    def blank(self) -> 'TokenStream':
        self._lines.append(BLANK_MARKER)
        return self

    def tokens(self) -> List[Token]:
        """Lex the emitted text into Rust tokens (EOF token included)."""
        return Lexer(str(self)).tokenize()

    def check_balanced(self) -> bool:
        """Return True when every (, [ and { has a matching closer in order."""
        closers = set(DELIMITER_PAIRS.values())
        stack: List[TokenType] = []
        for token in self.tokens():
            if token.type in DELIMITER_PAIRS:
                stack.append(DELIMITER_PAIRS[token.type])
            elif token.type in closers:
                if not stack or stack.pop() != token.type:
                    return False
        return not stack

    def __str__(self) -> str:
        return '\n'.join(self._lines) + '\n' if self._lines else ''

    def __eq__(self, other) -> bool:
        if not isinstance(other, TokenStream):
            return NotImplemented
        return self._lines == other._lines

    def __hash__(self):
        return hash(tuple(self._lines))

    def __contains__(self, text: str) -> bool:
        return text in str(self)

    def __repr__(self) -> str:
        return f'TokenStream({len(self._lines)} lines)'
