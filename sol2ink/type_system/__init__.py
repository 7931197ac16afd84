"""
Types module for the Sol2Ink compiler.

This module provides the declaration registry and type lowering utilities.
"""

from .registry import DeclarationRegistry, aggregate_kind
from .mappings import (
    ir_type_to_rust,
    rust_integer_width,
    is_integer_type,
    needs_clone,
    SIMPLE_TYPE_MAP,
    RUST_INTEGER_WIDTHS,
)

__all__ = [
    'DeclarationRegistry',
    'aggregate_kind',
    'ir_type_to_rust',
    'rust_integer_width',
    'is_integer_type',
    'needs_clone',
    'SIMPLE_TYPE_MAP',
    'RUST_INTEGER_WIDTHS',
]
