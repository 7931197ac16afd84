"""
Declaration registry for one IR aggregate.

The DeclarationRegistry performs a first pass over a Contract, Library or
Interface to record its declarations (events, enums, structs, constants,
functions) before code generation, so that expression lowering can tell an
event call from a struct construction or an internal call from an external one.
"""

from typing import Dict, List, Optional, Set

from ..ir.nodes import (
    Contract,
    Library,
    Interface,
    Event,
    Struct,
)


class DeclarationRegistry:
    """
    Registry of the declarations of a single aggregate.

    Records:
    - Events (with their ordered field names)
    - Enums
    - Structs (with their ordered field names)
    - Constants
    - External and internal functions
    """

    def __init__(self):
        self.events: Dict[str, List[str]] = {}
        self.enums: Set[str] = set()
        self.structs: Dict[str, List[str]] = {}
        self.constants: Set[str] = set()
        self.external_functions: Set[str] = set()
        self.internal_functions: Set[str] = set()
        self.is_library: bool = False

    @classmethod
    def from_aggregate(cls, aggregate) -> 'DeclarationRegistry':
        """Build a registry from a Contract, Library or Interface."""
        registry = cls()
        registry.discover(aggregate)
        return registry

    def discover(self, aggregate) -> None:
        """Record the declarations of an aggregate."""
        for event in aggregate.events:
            self.add_event(event)
        for enum in aggregate.enums:
            self.enums.add(enum.name)
        for struct in aggregate.structs:
            self.add_struct(struct)

        if isinstance(aggregate, Interface):
            for header in aggregate.function_headers:
                self.external_functions.add(header.name)
            return

        self.is_library = isinstance(aggregate, Library)

        for contract_field in aggregate.fields:
            if contract_field.constant:
                self.constants.add(contract_field.name)

        for function in aggregate.functions:
            if function.header.external:
                self.external_functions.add(function.header.name)
            else:
                self.internal_functions.add(function.header.name)

    def add_event(self, event: Event) -> None:
        self.events[event.name] = [f.name for f in event.fields]

    def add_struct(self, struct: Struct) -> None:
        self.structs[struct.name] = [f.name for f in struct.fields]

    def is_event(self, name: str) -> bool:
        return name in self.events

    def is_struct(self, name: str) -> bool:
        return name in self.structs

    def is_enum(self, name: str) -> bool:
        return name in self.enums

    def is_constant(self, name: str) -> bool:
        return name in self.constants

    def function_kind(self, name: str) -> Optional[str]:
        """
        Classify a function name declared by the aggregate.

        Returns:
            'library', 'external', 'internal' or None when the aggregate does
            not declare the function
        """
        if name in self.external_functions or name in self.internal_functions:
            if self.is_library:
                return 'library'
            return 'external' if name in self.external_functions else 'internal'
        return None


def aggregate_kind(aggregate) -> str:
    """Return 'contract', 'library' or 'interface' for an IR aggregate."""
    if isinstance(aggregate, Contract):
        return 'contract'
    if isinstance(aggregate, Library):
        return 'library'
    if isinstance(aggregate, Interface):
        return 'interface'
    raise TypeError(f'Not an IR aggregate: {type(aggregate).__name__}')
