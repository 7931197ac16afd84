"""
Import generation for IR to ink! lowering.

This module handles the `use` statements of the emitted artifacts: the
import set handed over by the front-end, plus the fixed imports each
artifact kind needs.
"""

from typing import Iterable, List, TYPE_CHECKING

if TYPE_CHECKING:
    from .context import CodeGenerationContext


# Fixed imports per artifact kind
CONTRACT_USES = [
    'use generated::*;',
    'use scale::Encode;',
    'use scale::Decode;',
    'use ink_storage::traits::SpreadAllocate;',
    'use openbrush::traits::Storage;',
    'use ink_lang::codegen::Env;',
    'use ink_lang::codegen::EmitEvent;',
]

IMPL_USES = [
    'pub use crate::{impls, traits::*};',
    'use openbrush::traits::Storage;',
]

TRAIT_USES = [
    'use scale::{Decode, Encode};',
]

LIBRARY_USES = [
    'use scale::{Decode, Encode};',
]


class ImportGenerator:
    """
    Generates Rust `use` statements.

    The front-end's imports are an unordered set of complete `use`
    statements; they are deduplicated and emitted sorted so that repeated
    runs produce the same output.
    """

    def __init__(self, ctx: 'CodeGenerationContext'):
        """
        Initialize the import generator.

        Args:
            ctx: The code generation context
        """
        self._ctx = ctx

    @staticmethod
    def _normalize(statement: str) -> str:
        statement = statement.strip()
        if statement and not statement.endswith(';'):
            statement += ';'
        return statement

    def generate(self, imports: Iterable[str], fixed: Iterable[str] = ()) -> str:
        """Generate the import lines of an artifact.

        Args:
            imports: The aggregate's import statements
            fixed: Imports the artifact kind always needs, emitted after

        Returns:
            The `use` statements as a string, one per line
        """
        indent = self._ctx.indent()
        lines: List[str] = []
        seen = set()
        for statement in sorted({self._normalize(s) for s in imports}) + list(fixed):
            if statement and statement not in seen:
                seen.add(statement)
                lines.append(f'{indent}{statement}')
        return '\n'.join(lines)
