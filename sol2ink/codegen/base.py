"""
Base generator class with shared utilities.

This module provides the BaseGenerator class that contains common utilities
used across all specialized generator classes in the code generation pipeline.
"""

import logging
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from .context import CodeGenerationContext

from .naming import type_name, value_name, constant_name
from .stream import doc_attribute, rust_string


logger = logging.getLogger(__name__)


class BaseGenerator:
    """
    Base class for all code generators.

    Provides shared utilities for:
    - Indentation management
    - Identifier normalization
    - Storage access
    - Unimplemented markers
    """

    def __init__(self, ctx: 'CodeGenerationContext'):
        """
        Initialize the base generator.

        Args:
            ctx: The code generation context containing all state
        """
        self._ctx = ctx

    # =========================================================================
    # INDENTATION
    # =========================================================================

    def indent(self) -> str:
        """Return the current indentation string."""
        return self._ctx.indent()

    @property
    def indent_level(self) -> int:
        """Get the current indentation level."""
        return self._ctx.indent_level

    @indent_level.setter
    def indent_level(self, value: int):
        """Set the current indentation level."""
        self._ctx.indent_level = value

    # =========================================================================
    # NAME RESOLUTION
    # =========================================================================

    def type_name(self, name: str) -> str:
        return type_name(name)

    def value_name(self, name: str) -> str:
        return value_name(name)

    def constant_name(self, name: str) -> str:
        return constant_name(name)

    def storage_access(self, name: str) -> str:
        """Access a storage field through the data accessor of the current receiver."""
        return f'{self._ctx.receiver}.data().{self.value_name(name)}'

    # =========================================================================
    # OUTPUT HELPERS
    # =========================================================================

    def doc_lines(self, comments: List[str]) -> List[str]:
        """Re-emit source comments as doc attributes at the current indent."""
        return [f'{self.indent()}{doc_attribute(comment)}' for comment in comments]

    def todo_marker(self, construct: str, detail: str = '') -> str:
        """
        Build a todo!() marker for a construct that cannot be lowered yet.

        The marker is recorded in the diagnostics collector and logged, so the
        gap is visible both in the emitted code and in the run summary.
        """
        self._ctx.diagnostics.warn_unimplemented(construct, self._ctx.location, detail)
        logger.warning('%s: %s lowered to todo!()', self._ctx.location or '<unknown>', construct)
        message = f'{construct}: {detail}' if detail else construct
        return f'todo!({rust_string(message)})'
