"""
Type mappings and conversion utilities for IR types to Rust.

This module contains the mapping table and functions for lowering IR types
to their ink! equivalents, including integer width selection.
"""

from typing import Optional

from ..ir.nodes import (
    Type,
    AccountId,
    Bool,
    String,
    Int,
    Uint,
    Bytes,
    DynamicBytes,
    Named,
    Array,
    Mapping,
    Unit,
)


# =============================================================================
# TYPE MAPPING CONSTANTS
# =============================================================================

# Types whose Rust spelling does not depend on any parameter
SIMPLE_TYPE_MAP = {
    AccountId: 'AccountId',
    Bool: 'bool',
    String: 'String',
    DynamicBytes: 'Vec<u8>',
    Unit: '()',
}

# Native integer widths, smallest first
RUST_INTEGER_WIDTHS = (8, 16, 32, 64, 128)

MAX_INTEGER_WIDTH = RUST_INTEGER_WIDTHS[-1]

RUST_INTEGER_TYPES = frozenset(
    f'{sign}{width}' for sign in ('u', 'i') for width in RUST_INTEGER_WIDTHS
)

# Rust types that are not Copy; reading them out of storage needs a clone
CLONE_TYPES = (String, DynamicBytes, Array, Named)


# =============================================================================
# TYPE CONVERSION FUNCTIONS
# =============================================================================

def rust_integer_width(size: int) -> int:
    """
    Get the smallest native Rust integer width holding `size` bits.

    Widths above 128 bits are capped at 128.

    Args:
        size: The declared bit width (e.g., 8, 24, 256)

    Returns:
        One of 8, 16, 32, 64, 128
    """
    for width in RUST_INTEGER_WIDTHS:
        if size <= width:
            return width
    return MAX_INTEGER_WIDTH


def ir_type_to_rust(ir_type: Optional[Type], name_type=None) -> str:
    """
    Convert an IR Type to its Rust equivalent.

    Args:
        ir_type: The IR type to convert; None lowers like Unit
        name_type: Callable normalizing user type names (defaults to identity)

    Returns:
        The Rust type string
    """
    if ir_type is None:
        return '()'

    simple = SIMPLE_TYPE_MAP.get(type(ir_type))
    if simple is not None:
        return simple

    if isinstance(ir_type, Uint):
        return f'u{rust_integer_width(ir_type.size)}'
    if isinstance(ir_type, Int):
        return f'i{rust_integer_width(ir_type.size)}'
    if isinstance(ir_type, Bytes):
        return f'[u8; {ir_type.size}]'
    if isinstance(ir_type, Named):
        return name_type(ir_type.name) if name_type else ir_type.name
    if isinstance(ir_type, Array):
        # Fixed lengths have no counterpart in ink! storage
        return f'Vec<{ir_type_to_rust(ir_type.element, name_type)}>'
    if isinstance(ir_type, Mapping):
        keys = [ir_type_to_rust(key, name_type) for key in ir_type.keys]
        value = ir_type_to_rust(ir_type.value, name_type)
        if len(keys) == 1:
            return f'Mapping<{keys[0]}, {value}>'
        return f'Mapping<({", ".join(keys)}), {value}>'

    return f'todo!("type {type(ir_type).__name__}")'


def is_integer_type(rust_type: str) -> bool:
    """Check whether a Rust type string is a native integer type."""
    return rust_type in RUST_INTEGER_TYPES


def needs_clone(ir_type: Optional[Type]) -> bool:
    """Check whether a value of this type must be cloned when read from storage."""
    return isinstance(ir_type, CLONE_TYPES)
