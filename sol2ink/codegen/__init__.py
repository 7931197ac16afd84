"""
Code generation module for the Sol2Ink compiler.

This module lowers IR aggregates into ink!/OpenBrush Rust token streams.
"""

from .context import CodeGenerationContext, ToolSignature
from .base import BaseGenerator
from .naming import IdentifierRole, normalize, RUST_KEYWORDS, KEYWORD_SUFFIX
from .stream import TokenStream, BLANK_MARKER
from .type_converter import TypeConverter
from .expression import ExpressionGenerator
from .statement import StatementGenerator
from .function import FunctionGenerator
from .definition import DefinitionGenerator
from .imports import ImportGenerator
from .contract import (
    ContractGenerator,
    assemble_contract,
    assemble_impl,
    assemble_trait,
    assemble_library,
    assemble_interface,
    assemble_lib,
)
from .diagnostics import TranspilerDiagnostics, Diagnostic, DiagnosticSeverity

__all__ = [
    'CodeGenerationContext',
    'ToolSignature',
    'BaseGenerator',
    'IdentifierRole',
    'normalize',
    'RUST_KEYWORDS',
    'KEYWORD_SUFFIX',
    'TokenStream',
    'BLANK_MARKER',
    'TypeConverter',
    'ExpressionGenerator',
    'StatementGenerator',
    'FunctionGenerator',
    'DefinitionGenerator',
    'ImportGenerator',
    'ContractGenerator',
    'assemble_contract',
    'assemble_impl',
    'assemble_trait',
    'assemble_library',
    'assemble_interface',
    'assemble_lib',
    'TranspilerDiagnostics',
    'Diagnostic',
    'DiagnosticSeverity',
]
