"""
Definition generation for IR to ink! lowering.

This module handles the generation of Rust code from IR declarations that
carry no behavior: enums, structs, events, constants, the error type and the
storage records.
"""

import hashlib
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .context import CodeGenerationContext
    from .expression import ExpressionGenerator
    from .type_converter import TypeConverter

from .base import BaseGenerator
from .stream import BLANK_MARKER
from ..exceptions import IRContractError
from ..ir.nodes import (
    Enum,
    Struct,
    Event,
    ContractField,
)


SCALE_DERIVES = [
    '#[derive(Default, Debug, Clone, PartialEq, Eq, Encode, Decode)]',
    '#[cfg_attr(feature = "std", derive(scale_info::TypeInfo))]',
]

ERROR_DERIVES = [
    '#[derive(Debug, Encode, Decode, PartialEq, Eq)]',
    '#[cfg_attr(feature = "std", derive(scale_info::TypeInfo))]',
]


def storage_key(aggregate_name: str) -> int:
    """Derive the 32-bit storage key of an aggregate from its name.

    The key is stable per name. Distinct names collide with probability
    about 2**-32 per pair, so keys are distinct in practice, not by proof.
    """
    digest = hashlib.blake2b(aggregate_name.encode('utf-8'), digest_size=4).digest()
    return int.from_bytes(digest, 'big')


class DefinitionGenerator(BaseGenerator):
    """
    Generates Rust code from IR declarations.

    This class handles:
    - Enum and struct definitions (SCALE encodable)
    - Event definitions (with topics)
    - Constant definitions
    - The error type
    - The storage data record and the contract storage struct
    """

    def __init__(
        self,
        ctx: 'CodeGenerationContext',
        type_converter: 'TypeConverter',
        expr_generator: Optional['ExpressionGenerator'] = None,
    ):
        """
        Initialize the definition generator.

        Args:
            ctx: The code generation context
            type_converter: The type converter
            expr_generator: Optional expression generator for constant values
        """
        super().__init__(ctx)
        self._type_converter = type_converter
        self._expr = expr_generator

    def _blank(self) -> str:
        return f'{self.indent()}{BLANK_MARKER}'

    # =========================================================================
    # ENUMS
    # =========================================================================

    def generate_enum(self, enum: Enum) -> str:
        """Generate a Rust enum; the first variant is the default one.

        Args:
            enum: The enum IR node

        Returns:
            Rust enum code
        """
        lines = self.doc_lines(enum.comments)
        lines.extend(f'{self.indent()}{derive}' for derive in SCALE_DERIVES)
        lines.append(f'{self.indent()}pub enum {self.type_name(enum.name)} {{')
        self.indent_level += 1
        for i, value in enumerate(enum.values):
            lines.extend(self.doc_lines(value.comments))
            if i == 0:
                lines.append(f'{self.indent()}#[default]')
            lines.append(f'{self.indent()}{self.type_name(value.name)},')
        self.indent_level -= 1
        lines.append(f'{self.indent()}}}')
        lines.append(self._blank())
        return '\n'.join(lines)

    # =========================================================================
    # STRUCTS
    # =========================================================================

    def generate_struct(self, struct: Struct) -> str:
        """Generate a Rust struct, keeping the declared field order."""
        lines = self.doc_lines(struct.comments)
        lines.extend(f'{self.indent()}{derive}' for derive in SCALE_DERIVES)
        lines.append(f'{self.indent()}pub struct {self.type_name(struct.name)} {{')
        self.indent_level += 1
        for member in struct.fields:
            lines.extend(self.doc_lines(member.comments))
            rust_type = self._type_converter.ir_type_to_rust(member.field_type)
            lines.append(f'{self.indent()}pub {self.value_name(member.name)}: {rust_type},')
        self.indent_level -= 1
        lines.append(f'{self.indent()}}}')
        lines.append(self._blank())
        return '\n'.join(lines)

    # =========================================================================
    # EVENTS
    # =========================================================================

    def generate_event(self, event: Event) -> str:
        """Generate an ink! event; indexed fields become topics."""
        lines = self.doc_lines(event.comments)
        lines.append(f'{self.indent()}#[ink(event)]')
        lines.append(f'{self.indent()}pub struct {self.type_name(event.name)} {{')
        self.indent_level += 1
        for event_field in event.fields:
            lines.extend(self.doc_lines(event_field.comments))
            if event_field.indexed:
                lines.append(f'{self.indent()}#[ink(topic)]')
            rust_type = self._type_converter.ir_type_to_rust(event_field.field_type)
            lines.append(f'{self.indent()}{self.value_name(event_field.name)}: {rust_type},')
        self.indent_level -= 1
        lines.append(f'{self.indent()}}}')
        lines.append(self._blank())
        return '\n'.join(lines)

    # =========================================================================
    # CONSTANTS
    # =========================================================================

    def generate_constant(self, const: ContractField) -> str:
        """Generate a Rust constant bound to the field's initial value.

        Raises:
            IRContractError: If the constant has no initial value
        """
        if const.initial_value is None:
            raise IRContractError(
                f'{self._ctx.aggregate_name}: constant {const.name} has no value'
            )
        rust_type = self._type_converter.ir_type_to_rust(const.field_type)
        value = self._expr.generate(const.initial_value)
        lines = self.doc_lines(const.comments)
        lines.append(f'{self.indent()}pub const {self.constant_name(const.name)}: {rust_type} = {value};')
        return '\n'.join(lines)

    def generate_constants(self, fields: List[ContractField]) -> str:
        constants = [self.generate_constant(f) for f in fields if f.constant]
        if not constants:
            return ''
        constants.append(self._blank())
        return '\n'.join(constants)

    # =========================================================================
    # ERROR TYPE
    # =========================================================================

    def generate_error_enum(self) -> str:
        lines = [f'{self.indent()}{derive}' for derive in ERROR_DERIVES]
        lines.append(f'{self.indent()}pub enum Error {{')
        lines.append(f'{self.indent()}    Custom(String),')
        lines.append(f'{self.indent()}}}')
        return '\n'.join(lines)

    # =========================================================================
    # STORAGE
    # =========================================================================

    def generate_data_struct(self, fields: List[ContractField]) -> str:
        """Generate the upgradeable storage record of the non-constant fields.

        The record always ends with a reserved slot so that fields can be
        added later without changing the layout key.
        """
        lines = [
            f'{self.indent()}pub const STORAGE_KEY: u32 = 0x{storage_key(self._ctx.aggregate_name):08x};',
            self._blank(),
            f'{self.indent()}#[derive(Default, Debug)]',
            f'{self.indent()}#[openbrush::upgradeable_storage(STORAGE_KEY)]',
            f'{self.indent()}pub struct Data {{',
        ]
        self.indent_level += 1
        for storage_field in fields:
            if storage_field.constant:
                continue
            lines.extend(self.doc_lines(storage_field.comments))
            rust_type = self._type_converter.ir_type_to_rust(storage_field.field_type)
            lines.append(f'{self.indent()}pub {self.value_name(storage_field.name)}: {rust_type},')
        lines.append(f'{self.indent()}pub _reserved: Option<()>,')
        self.indent_level -= 1
        lines.append(f'{self.indent()}}}')
        return '\n'.join(lines)

    def contract_struct_name(self) -> str:
        return f'{self.type_name(self._ctx.aggregate_name)}Contract'

    def generate_contract_storage(self) -> str:
        """Generate the #[ink(storage)] struct holding the data record."""
        return '\n'.join([
            f'{self.indent()}#[ink(storage)]',
            f'{self.indent()}#[derive(Default, SpreadAllocate, Storage)]',
            f'{self.indent()}pub struct {self.contract_struct_name()} {{',
            f'{self.indent()}    #[storage_field]',
            f'{self.indent()}    data: impls::Data,',
            f'{self.indent()}}}',
        ])
