"""
Identifier normalization for the emitted Rust code.

Maps a raw IR identifier to a legal, non-reserved Rust identifier cased for
its syntactic role:

- TYPE:     IUniswapV1Factory -> IUniswapV1Factory, total_supply -> TotalSupply
- VALUE:    IUniswapV1Factory -> i_uniswap_v_1_factory, WETH9 -> weth_9
- CONSTANT: maxSupply -> MAX_SUPPLY

Names that are (or case into) a Rust keyword get the `_is_rust_keyword`
suffix. The discard placeholder `_` is never touched.
"""

import re
from enum import Enum
from typing import List, FrozenSet


class IdentifierRole(Enum):
    """Syntactic role of an identifier, which decides its casing."""
    TYPE = 'type'
    VALUE = 'value'
    CONSTANT = 'constant'


KEYWORD_SUFFIX = '_is_rust_keyword'

# Strict, reserved and weak keywords of Rust 2021
RUST_KEYWORDS: FrozenSet[str] = frozenset({
    'as', 'break', 'const', 'continue', 'crate', 'else', 'enum', 'extern',
    'false', 'fn', 'for', 'if', 'impl', 'in', 'let', 'loop', 'match', 'mod',
    'move', 'mut', 'pub', 'ref', 'return', 'self', 'Self', 'static', 'struct',
    'super', 'trait', 'true', 'type', 'unsafe', 'use', 'where', 'while',
    'async', 'await', 'dyn', 'abstract', 'become', 'box', 'do', 'final',
    'macro', 'override', 'priv', 'typeof', 'unsized', 'virtual', 'yield',
    'try', 'union',
})

# Acronyms before a capitalized word, capitalized words, bare acronyms, digit runs
_WORD_PATTERN = re.compile(r'[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+')


def split_words(name: str) -> List[str]:
    """Split an identifier into its words.

    Boundaries are underscores, lower to upper transitions, the end of an
    acronym (`HTTPServer` -> `HTTP`, `Server`) and letter/digit transitions.
    """
    words = []
    for chunk in name.split('_'):
        words.extend(_WORD_PATTERN.findall(chunk))
    return words


def _affixes(name: str):
    """Return the leading underscores, the core name and the trailing underscores."""
    core = name.strip('_')
    if not core:
        return name, '', ''
    start = name.index(core)
    return name[:start], core, name[start + len(core):]


def to_snake_case(name: str) -> str:
    prefix, core, suffix = _affixes(name)
    return prefix + '_'.join(word.lower() for word in split_words(core)) + suffix


def to_pascal_case(name: str) -> str:
    prefix, core, suffix = _affixes(name)
    return prefix + ''.join(word.capitalize() for word in split_words(core)) + suffix


def to_upper_snake_case(name: str) -> str:
    prefix, core, suffix = _affixes(name)
    return prefix + '_'.join(word.upper() for word in split_words(core)) + suffix


_CASERS = {
    IdentifierRole.TYPE: to_pascal_case,
    IdentifierRole.VALUE: to_snake_case,
    IdentifierRole.CONSTANT: to_upper_snake_case,
}


def normalize(name: str, role: IdentifierRole = IdentifierRole.VALUE) -> str:
    """
    Produce a safe Rust identifier for a raw name.

    Args:
        name: The raw identifier from the IR
        role: The syntactic role the identifier is emitted in

    Returns:
        The cased identifier, never a Rust keyword. Normalizing the result
        again returns it unchanged.
    """
    if name == '_':
        return name

    case = _CASERS[role]
    cased = case(name)
    if name in RUST_KEYWORDS or cased in RUST_KEYWORDS:
        cased = case(name + KEYWORD_SUFFIX)
    return cased


def type_name(name: str) -> str:
    """Normalize a type, enum variant, event or trait name."""
    return normalize(name, IdentifierRole.TYPE)


def value_name(name: str) -> str:
    """Normalize a field, function, parameter or local variable name."""
    return normalize(name, IdentifierRole.VALUE)


def constant_name(name: str) -> str:
    """Normalize a constant name."""
    return normalize(name, IdentifierRole.CONSTANT)
