"""
Sol2Ink: IR to ink! compiler

This package lowers the typed intermediate representation of Solidity-like
contracts into the source tree of an equivalent ink!/OpenBrush project.

Module Structure:
- ir/: IR nodes and the JSON loader (Contract, Library, Interface, ...)
- lexer/: Rust tokenization of emitted artifacts (TokenType, Token, Lexer)
- type_system/: Declaration registry and type lowering tables
- codegen/: Code generation (assemble_* entry points + specialized generators)
- sol2ink.py: Compiler driver and CLI

Usage:
    from sol2ink import load_aggregate_file, assemble_contract

    contract = load_aggregate_file('ir/Token.json')
    print(assemble_contract(contract))
"""

from .codegen import (
    ToolSignature,
    TokenStream,
    TranspilerDiagnostics,
    assemble_contract,
    assemble_impl,
    assemble_trait,
    assemble_library,
    assemble_interface,
    assemble_lib,
)
from .codegen.context import TOOL_VERSION
from .exceptions import Sol2InkError, IRContractError, IRLoadError
from .ir import load_aggregate, load_aggregate_file
from .sol2ink import Sol2InkCompiler

__version__ = TOOL_VERSION

__all__ = [
    'ToolSignature',
    'TokenStream',
    'TranspilerDiagnostics',
    'assemble_contract',
    'assemble_impl',
    'assemble_trait',
    'assemble_library',
    'assemble_interface',
    'assemble_lib',
    'Sol2InkError',
    'IRContractError',
    'IRLoadError',
    'load_aggregate',
    'load_aggregate_file',
    'Sol2InkCompiler',
]
