"""
IR module for the Sol2Ink lowering engine.

This module provides the typed intermediate representation consumed by the
code generator and a loader for JSON-encoded IR documents.
"""

from .nodes import (
    # Base
    IRNode,
    # Types
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
    # Operations
    Operation,
    # Expressions
    Expression,
    ArraySubscript,
    MappingSubscript,
    Assign,
    BinaryOperation,
    Condition,
    UnaryOperation,
    FunctionCall,
    MemberAccess,
    NumberLiteral,
    BoolLiteral,
    StringLiteral,
    New,
    TypeExpression,
    Variable,
    VariableDeclaration,
    Tuple,
    Ternary,
    # Statements
    Statement,
    Assembly,
    Block,
    Break,
    Continue,
    DoWhile,
    Emit,
    Error,
    ExpressionStatement,
    For,
    If,
    Return,
    Revert,
    RevertNamedArgs,
    Try,
    UncheckedBlock,
    VariableDefinition,
    While,
    ModifierPlaceholder,
    # Declarations
    ContractField,
    EventField,
    Event,
    EnumField,
    Enum,
    StructField,
    Struct,
    FunctionParam,
    FunctionHeader,
    Function,
    Modifier,
    # Aggregates
    Contract,
    Library,
    Interface,
)
from .loader import load_aggregate, load_aggregate_file

__all__ = [
    # Base
    'IRNode',
    # Types
    'Type',
    'AccountId',
    'Bool',
    'String',
    'Int',
    'Uint',
    'Bytes',
    'DynamicBytes',
    'Named',
    'Array',
    'Mapping',
    'Unit',
    # Operations
    'Operation',
    # Expressions
    'Expression',
    'ArraySubscript',
    'MappingSubscript',
    'Assign',
    'BinaryOperation',
    'Condition',
    'UnaryOperation',
    'FunctionCall',
    'MemberAccess',
    'NumberLiteral',
    'BoolLiteral',
    'StringLiteral',
    'New',
    'TypeExpression',
    'Variable',
    'VariableDeclaration',
    'Tuple',
    'Ternary',
    # Statements
    'Statement',
    'Assembly',
    'Block',
    'Break',
    'Continue',
    'DoWhile',
    'Emit',
    'Error',
    'ExpressionStatement',
    'For',
    'If',
    'Return',
    'Revert',
    'RevertNamedArgs',
    'Try',
    'UncheckedBlock',
    'VariableDefinition',
    'While',
    'ModifierPlaceholder',
    # Declarations
    'ContractField',
    'EventField',
    'Event',
    'EnumField',
    'Enum',
    'StructField',
    'Struct',
    'FunctionParam',
    'FunctionHeader',
    'Function',
    'Modifier',
    # Aggregates
    'Contract',
    'Library',
    'Interface',
    # Loading
    'load_aggregate',
    'load_aggregate_file',
]
