"""
Artifact assembly for IR to ink! lowering.

This module composes the specialized generators into the emitted artifacts:
the contract module, the trait implementation module, the trait definition
module, the library module, the interface module and the crate root.

Every assembly call builds its own context, so calls are independent of
each other and deterministic for a given input.
"""

import logging
from typing import Optional

from .base import BaseGenerator
from .context import CodeGenerationContext, ToolSignature
from .definition import DefinitionGenerator
from .diagnostics import TranspilerDiagnostics
from .expression import ExpressionGenerator
from .function import FunctionGenerator
from .imports import ImportGenerator, CONTRACT_USES, IMPL_USES, TRAIT_USES, LIBRARY_USES
from .statement import StatementGenerator
from .stream import TokenStream, BLANK_MARKER, comment_marker
from .type_converter import TypeConverter
from ..ir.nodes import Contract, Library, Interface


logger = logging.getLogger(__name__)

CRATE_ATTRIBUTES = [
    '#![cfg_attr(not(feature = "std"), no_std)]',
    '#![feature(min_specialization)]',
]

STORAGE_BOUND = 'T: Storage<Data>'


class ContractGenerator(BaseGenerator):
    """
    Assembles ink! artifacts from IR aggregates.

    This class handles:
    - The contract module (storage struct, emit shims, constructor)
    - The trait implementation module (data record, modifiers, functions)
    - The trait definition module (error type, headers, getters)
    - The library module (free functions)
    - The interface module (headers only)
    - The crate root
    """

    def __init__(
        self,
        ctx: CodeGenerationContext,
        type_converter: TypeConverter,
        expr_generator: ExpressionGenerator,
        func_generator: FunctionGenerator,
        def_generator: DefinitionGenerator,
        import_generator: ImportGenerator,
    ):
        """
        Initialize the contract generator.

        Args:
            ctx: The code generation context
            type_converter: The type converter
            expr_generator: The expression generator
            func_generator: The function generator
            def_generator: The definition generator
            import_generator: The import generator
        """
        super().__init__(ctx)
        self._type_converter = type_converter
        self._expr = expr_generator
        self._func = func_generator
        self._def = def_generator
        self._imports = import_generator

    @classmethod
    def for_aggregate(
        cls,
        aggregate,
        signature: Optional[ToolSignature] = None,
        diagnostics: Optional[TranspilerDiagnostics] = None,
    ) -> 'ContractGenerator':
        """Wire a fresh context and generator set for one aggregate."""
        ctx = CodeGenerationContext.for_aggregate(aggregate, signature, diagnostics)
        type_converter = TypeConverter(ctx)
        expr_generator = ExpressionGenerator(ctx, type_converter)
        stmt_generator = StatementGenerator(ctx, expr_generator)
        func_generator = FunctionGenerator(ctx, expr_generator, stmt_generator, type_converter)
        def_generator = DefinitionGenerator(ctx, type_converter, expr_generator)
        return cls(
            ctx,
            type_converter,
            expr_generator,
            func_generator,
            def_generator,
            ImportGenerator(ctx),
        )

    # =========================================================================
    # SHARED PIECES
    # =========================================================================

    def _blank(self) -> str:
        return f'{self.indent()}{BLANK_MARKER}'

    def signature_lines(self) -> str:
        """The banner topping every artifact."""
        signature = self._ctx.signature
        return '\n'.join([
            f'{self.indent()}{comment_marker(signature.banner)}',
            f'{self.indent()}{comment_marker(signature.link)}',
            self._blank(),
        ])

    def _trait_name(self) -> str:
        return self.type_name(self._ctx.aggregate_name)

    def _module_name(self) -> str:
        return self.value_name(self._ctx.aggregate_name)

    def _wrapper_alias(self) -> str:
        trait_name = self._trait_name()
        return '\n'.join([
            f'{self.indent()}#[openbrush::wrapper]',
            f'{self.indent()}pub type {trait_name}Ref = dyn {trait_name};',
            self._blank(),
        ])

    def _block(self, stream: TokenStream, opener: str, *parts) -> None:
        """Append `opener {`, the parts one level deeper, and the closing brace."""
        stream.append(f'{self.indent()}{opener} {{')
        self.indent_level += 1
        for part in parts:
            if callable(part):
                part = part()
            stream.append(part)
        self.indent_level -= 1
        stream.append(f'{self.indent()}}}')

    def _events(self, aggregate) -> str:
        return '\n'.join(self._def.generate_event(e) for e in aggregate.events)

    def _declarations(self, aggregate, with_events: bool = True) -> str:
        parts = [self._events(aggregate)] if with_events and aggregate.events else []
        parts.extend(self._def.generate_enum(e) for e in aggregate.enums)
        parts.extend(self._def.generate_struct(s) for s in aggregate.structs)
        return '\n'.join(parts)

    # =========================================================================
    # CONTRACT MODULE
    # =========================================================================

    def assemble_contract(self, contract: Contract) -> TokenStream:
        """Assemble the runnable contract module.

        Args:
            contract: The contract IR aggregate

        Returns:
            The token stream of the contract module
        """
        logger.debug('Assembling contract module for %s', contract.name)
        stream = TokenStream(CRATE_ATTRIBUTES + [BLANK_MARKER])
        stream.append(self.signature_lines())
        stream.extend(self.doc_lines(contract.contract_doc))
        stream.append('#[openbrush::contract]')

        contract_struct = self._def.contract_struct_name()
        self._block(
            stream,
            f'pub mod {self._module_name()}',
            lambda: self._imports.generate(contract.imports, CONTRACT_USES),
            self._blank,
            lambda: self._def.generate_constants(contract.fields),
            lambda: self._events(contract),
            self._def.generate_contract_storage,
            self._blank,
            lambda: f'{self.indent()}impl {self._trait_name()} for {contract_struct} {{}}',
            self._blank,
            lambda: self._nested(
                f'impl {self._module_name()}::Internal for {contract_struct}',
                lambda: self._func.generate_contract_emits(contract.events),
            ),
            self._blank,
            lambda: self._nested(
                f'impl {contract_struct}',
                lambda: self._func.generate_constructor(contract.constructor, contract.fields),
            ),
        )
        return stream

    def _nested(self, opener: str, *parts) -> str:
        inner = TokenStream()
        self._block(inner, opener, *parts)
        return '\n'.join(inner.lines)

    # =========================================================================
    # IMPL MODULE
    # =========================================================================

    def assemble_impl(self, contract: Contract) -> TokenStream:
        """Assemble the storage-generic implementation of the contract's trait."""
        logger.debug('Assembling impl module for %s', contract.name)
        external = [f for f in contract.functions if f.header.external]
        internal = [f for f in contract.functions if not f.header.external]

        stream = TokenStream()
        stream.append(self.signature_lines())
        stream.append(self._imports.generate(contract.imports, IMPL_USES))
        stream.blank()
        stream.append(self._def.generate_data_struct(contract.fields))
        stream.blank()
        stream.append(self._def.generate_constants(contract.fields))
        stream.append(self._func.generate_modifiers(contract.modifiers, self._trait_name()))
        stream.blank()
        self._block(
            stream,
            f'impl<{STORAGE_BOUND}> {self._trait_name()} for T',
            lambda: self._func.generate_functions(external),
            lambda: self._func.generate_getters(contract.fields),
        )
        stream.blank()
        self._block(
            stream,
            'pub trait Internal',
            lambda: self._func.generate_function_headers([f.header for f in internal]),
            lambda: self._func.generate_emit_headers(contract.events),
        )
        stream.blank()
        self._block(
            stream,
            f'impl<{STORAGE_BOUND}> Internal for T',
            lambda: self._func.generate_functions(internal),
            lambda: self._func.generate_default_emits(contract.events),
        )
        return stream

    # =========================================================================
    # TRAIT MODULE
    # =========================================================================

    def assemble_trait(self, contract: Contract) -> TokenStream:
        """Assemble the public capability trait of the contract."""
        logger.debug('Assembling trait module for %s', contract.name)
        external = [f.header for f in contract.functions if f.header.external]

        stream = TokenStream()
        stream.append(self.signature_lines())
        stream.append(self._imports.generate(contract.imports, TRAIT_USES))
        stream.blank()
        stream.append(self._def.generate_error_enum())
        stream.blank()
        stream.append(self._declarations(contract, with_events=False))
        stream.append(self._wrapper_alias())
        stream.append('#[openbrush::trait_definition]')
        self._block(
            stream,
            f'pub trait {self._trait_name()}',
            lambda: self._func.generate_function_headers(external),
            lambda: self._func.generate_getter_headers(contract.fields),
        )
        return stream

    # =========================================================================
    # LIBRARY MODULE
    # =========================================================================

    def assemble_library(self, library: Library) -> TokenStream:
        """Assemble a library as free functions with no storage."""
        logger.debug('Assembling library module for %s', library.name)
        stream = TokenStream(CRATE_ATTRIBUTES + [BLANK_MARKER])
        stream.append(self.signature_lines())
        stream.extend(self.doc_lines(library.library_doc))
        stream.append(self._imports.generate(library.imports, LIBRARY_USES))
        stream.blank()
        stream.append(self._def.generate_error_enum())
        stream.blank()
        stream.append(self._def.generate_constants(library.fields))
        stream.append(self._declarations(library, with_events=True))
        stream.append(self._func.generate_functions(library.functions))
        return stream

    # =========================================================================
    # INTERFACE MODULE
    # =========================================================================

    def assemble_interface(self, interface: Interface) -> TokenStream:
        """Assemble a headers-only capability trait."""
        logger.debug('Assembling interface module for %s', interface.name)
        stream = TokenStream()
        stream.append(self.signature_lines())
        stream.extend(self.doc_lines(interface.comments))
        stream.append(self._imports.generate(interface.imports))
        stream.blank()
        stream.append(self._declarations(interface, with_events=True))
        stream.append(self._wrapper_alias())
        stream.append('#[openbrush::trait_definition]')
        self._block(
            stream,
            f'pub trait {self._trait_name()}',
            lambda: self._func.generate_function_headers(interface.function_headers),
        )
        return stream


# =============================================================================
# ENTRY POINTS
# =============================================================================

def assemble_contract(
    contract: Contract,
    signature: Optional[ToolSignature] = None,
    diagnostics: Optional[TranspilerDiagnostics] = None,
) -> TokenStream:
    """Assemble the ink! contract module of a contract."""
    return ContractGenerator.for_aggregate(contract, signature, diagnostics).assemble_contract(contract)


def assemble_impl(
    contract: Contract,
    signature: Optional[ToolSignature] = None,
    diagnostics: Optional[TranspilerDiagnostics] = None,
) -> TokenStream:
    """Assemble the default trait implementation module of a contract."""
    return ContractGenerator.for_aggregate(contract, signature, diagnostics).assemble_impl(contract)


def assemble_trait(
    contract: Contract,
    signature: Optional[ToolSignature] = None,
    diagnostics: Optional[TranspilerDiagnostics] = None,
) -> TokenStream:
    """Assemble the trait definition module of a contract."""
    return ContractGenerator.for_aggregate(contract, signature, diagnostics).assemble_trait(contract)


def assemble_library(
    library: Library,
    signature: Optional[ToolSignature] = None,
    diagnostics: Optional[TranspilerDiagnostics] = None,
) -> TokenStream:
    """Assemble the module of a library."""
    return ContractGenerator.for_aggregate(library, signature, diagnostics).assemble_library(library)


def assemble_interface(
    interface: Interface,
    signature: Optional[ToolSignature] = None,
    diagnostics: Optional[TranspilerDiagnostics] = None,
) -> TokenStream:
    """Assemble the trait module of an interface."""
    return ContractGenerator.for_aggregate(interface, signature, diagnostics).assemble_interface(interface)


def assemble_lib(signature: Optional[ToolSignature] = None) -> TokenStream:
    """Assemble the crate root declaring the impls and traits modules."""
    signature = signature or ToolSignature()
    return TokenStream(CRATE_ATTRIBUTES + [
        BLANK_MARKER,
        comment_marker(signature.banner),
        comment_marker(signature.link),
        BLANK_MARKER,
        'pub mod impls;',
        'pub mod traits;',
        BLANK_MARKER,
        'pub use impls::*;',
    ])
