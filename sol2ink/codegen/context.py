"""
Code generation context for the ink! code generator.

This module provides a context class that holds all state needed during
code generation of one artifact, separating state management from the
generation logic.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..type_system import DeclarationRegistry, aggregate_kind
from .diagnostics import TranspilerDiagnostics


TOOL_NAME = 'Sol2Ink'
TOOL_VERSION = '2.1.0'
PROJECT_LINK = 'https://github.com/Brushfam/sol2ink'


@dataclass(frozen=True)
class ToolSignature:
    """Tool metadata written as a banner at the top of every artifact."""
    name: str = TOOL_NAME
    version: str = TOOL_VERSION
    link: str = PROJECT_LINK

    @property
    def banner(self) -> str:
        return f'Generated with {self.name} v{self.version}'


@dataclass
class CodeGenerationContext:
    """
    Holds all state needed during ink! code generation.

    A fresh context is built for every artifact, so nothing leaks between
    two assembly calls.
    """

    # Indentation state
    indent_level: int = 0
    indent_str: str = '    '

    # Aggregate context
    aggregate_name: str = ''
    aggregate_kind: str = ''  # 'contract', 'library', 'interface'

    # Function context
    current_function: str = ''
    receiver: str = 'self'  # 'instance' inside modifiers and constructors
    named_returns: List[str] = field(default_factory=list)

    # Declarations of the aggregate being lowered
    registry: DeclarationRegistry = field(default_factory=DeclarationRegistry)

    # Banner metadata
    signature: ToolSignature = field(default_factory=ToolSignature)

    # Diagnostics collector
    _diagnostics: Optional[TranspilerDiagnostics] = None

    @property
    def diagnostics(self) -> TranspilerDiagnostics:
        """Get the diagnostics collector, creating one if needed."""
        if self._diagnostics is None:
            self._diagnostics = TranspilerDiagnostics()
        return self._diagnostics

    @property
    def location(self) -> str:
        """Human readable position used in diagnostics (e.g., 'Token.transfer')."""
        if self.current_function:
            return f'{self.aggregate_name}.{self.current_function}'
        return self.aggregate_name

    @property
    def is_library(self) -> bool:
        return self.aggregate_kind == 'library'

    def indent(self) -> str:
        """Return the current indentation string."""
        return self.indent_str * self.indent_level

    def enter_function(
        self,
        name: str,
        receiver: str = 'self',
        named_returns: Optional[List[str]] = None,
    ) -> None:
        """Reset state for a new function, modifier or constructor body."""
        self.current_function = name
        self.receiver = receiver
        self.named_returns = list(named_returns or [])

    def leave_function(self) -> None:
        self.current_function = ''
        self.receiver = 'self'
        self.named_returns = []

    @classmethod
    def for_aggregate(
        cls,
        aggregate,
        signature: Optional[ToolSignature] = None,
        diagnostics: Optional[TranspilerDiagnostics] = None,
    ) -> 'CodeGenerationContext':
        """
        Create a context for lowering one IR aggregate.

        Args:
            aggregate: The Contract, Library or Interface to lower
            signature: Banner metadata (defaults to this tool)
            diagnostics: Collector to report into (a private one if omitted)

        Returns:
            A new CodeGenerationContext instance
        """
        return cls(
            aggregate_name=aggregate.name,
            aggregate_kind=aggregate_kind(aggregate),
            registry=DeclarationRegistry.from_aggregate(aggregate),
            signature=signature or ToolSignature(),
            _diagnostics=diagnostics,
        )
