"""
IR node definitions for the Sol2Ink lowering engine.

This module contains the dataclasses representing the typed intermediate
representation handed to the code generator by the front-end: types,
expressions, statements, declarations and the three top-level aggregates
(Contract, Library, Interface).

Nodes are frozen; the code generator only ever reads them.
"""

import enum
from dataclasses import dataclass, field
from typing import Optional, List, Set


# =============================================================================
# BASE NODE
# =============================================================================

@dataclass(frozen=True)
class IRNode:
    """Base class for all IR nodes."""
    pass


# =============================================================================
# TYPES
# =============================================================================

@dataclass(frozen=True)
class Type(IRNode):
    """Base class for all IR types."""
    pass


@dataclass(frozen=True)
class AccountId(Type):
    """An account handle (Solidity `address`)."""
    pass


@dataclass(frozen=True)
class Bool(Type):
    pass


@dataclass(frozen=True)
class String(Type):
    pass


@dataclass(frozen=True)
class Int(Type):
    """Signed integer of the given bit width."""
    size: int = 256


@dataclass(frozen=True)
class Uint(Type):
    """Unsigned integer of the given bit width."""
    size: int = 256


@dataclass(frozen=True)
class Bytes(Type):
    """Fixed-size byte array (bytes1 .. bytes32)."""
    size: int = 32


@dataclass(frozen=True)
class DynamicBytes(Type):
    pass


@dataclass(frozen=True)
class Named(Type):
    """Reference to a user defined enum or struct."""
    name: str


@dataclass(frozen=True)
class Array(Type):
    """Array of `element`; `length` is None for dynamic arrays."""
    element: Type
    length: Optional['Expression'] = None


@dataclass(frozen=True)
class Mapping(Type):
    """Associative map. More than one key type means a composite key."""
    keys: List[Type]
    value: Type


@dataclass(frozen=True)
class Unit(Type):
    """The empty type (no value)."""
    pass


# =============================================================================
# OPERATIONS
# =============================================================================

class Operation(enum.Enum):
    """Operators appearing in binary, unary and assignment expressions."""

    ADD = '+'
    SUBTRACT = '-'
    MUL = '*'
    DIV = '/'
    MODULO = '%'
    POW = '**'
    BITWISE_AND = '&'
    BITWISE_OR = '|'
    XOR = '^'
    SHIFT_LEFT = '<<'
    SHIFT_RIGHT = '>>'
    EQUAL = '=='
    NOT_EQUAL = '!='
    LESS_THAN = '<'
    LESS_THAN_EQUAL = '<='
    GREATER_THAN = '>'
    GREATER_THAN_EQUAL = '>='
    LOGICAL_AND = '&&'
    LOGICAL_OR = '||'
    NOT = '!'
    BITWISE_NOT = '~'
    NEGATE = 'neg'
    ADD_ONE = '++'
    SUBTRACT_ONE = '--'
    ASSIGN = '='
    ADD_ASSIGN = '+='
    SUBTRACT_ASSIGN = '-='
    MUL_ASSIGN = '*='
    DIV_ASSIGN = '/='
    MODULO_ASSIGN = '%='
    AND_ASSIGN = '&='
    OR_ASSIGN = '|='
    XOR_ASSIGN = '^='
    SHIFT_LEFT_ASSIGN = '<<='
    SHIFT_RIGHT_ASSIGN = '>>='

    @property
    def is_comparison(self) -> bool:
        return self in _NEGATIONS

    @property
    def assignment_base(self) -> Optional['Operation']:
        """For a compound assignment (`+=`) return its arithmetic operation (`+`)."""
        return _ASSIGNMENT_BASES.get(self)

    def negate(self) -> 'Operation':
        """Return the comparison with the opposite truth value.

        Only defined for comparisons; logical operators need their operands
        negated too and are rejected.
        """
        try:
            return _NEGATIONS[self]
        except KeyError:
            raise ValueError(f'{self.name} has no negated form') from None


_NEGATIONS = {
    Operation.EQUAL: Operation.NOT_EQUAL,
    Operation.NOT_EQUAL: Operation.EQUAL,
    Operation.LESS_THAN: Operation.GREATER_THAN_EQUAL,
    Operation.LESS_THAN_EQUAL: Operation.GREATER_THAN,
    Operation.GREATER_THAN: Operation.LESS_THAN_EQUAL,
    Operation.GREATER_THAN_EQUAL: Operation.LESS_THAN,
}

_ASSIGNMENT_BASES = {
    Operation.ADD_ASSIGN: Operation.ADD,
    Operation.SUBTRACT_ASSIGN: Operation.SUBTRACT,
    Operation.MUL_ASSIGN: Operation.MUL,
    Operation.DIV_ASSIGN: Operation.DIV,
    Operation.MODULO_ASSIGN: Operation.MODULO,
    Operation.AND_ASSIGN: Operation.BITWISE_AND,
    Operation.OR_ASSIGN: Operation.BITWISE_OR,
    Operation.XOR_ASSIGN: Operation.XOR,
    Operation.SHIFT_LEFT_ASSIGN: Operation.SHIFT_LEFT,
    Operation.SHIFT_RIGHT_ASSIGN: Operation.SHIFT_RIGHT,
}


# =============================================================================
# EXPRESSION NODES
# =============================================================================

@dataclass(frozen=True)
class Expression(IRNode):
    """Base class for all expression nodes."""
    pass


@dataclass(frozen=True)
class ArraySubscript(Expression):
    """Index into an array (e.g., arr[i])."""
    array: Expression
    index: Optional[Expression] = None


@dataclass(frozen=True)
class MappingSubscript(Expression):
    """Lookup in a mapping; nested Solidity subscripts arrive as one composite key."""
    mapping: Expression
    keys: List[Expression] = field(default_factory=list)


@dataclass(frozen=True)
class Assign(Expression):
    """Plain (`=`) or compound (`+=`, ...) assignment."""
    target: Expression
    value: Expression
    operation: Operation = Operation.ASSIGN


@dataclass(frozen=True)
class BinaryOperation(Expression):
    """Arithmetic, bitwise or logical binary operation (e.g., a + b)."""
    left: Expression
    operation: Operation
    right: Expression


@dataclass(frozen=True)
class Condition(Expression):
    """A boolean condition; `right` is None for unary conditions like `!x`."""
    left: Expression
    operation: Operation
    right: Optional[Expression] = None


@dataclass(frozen=True)
class UnaryOperation(Expression):
    """Unary operation (e.g., !x, -y, x++, --x)."""
    operation: Operation
    operand: Expression
    is_prefix: bool = True


@dataclass(frozen=True)
class FunctionCall(Expression):
    """Function or method call."""
    function: Expression
    arguments: List[Expression] = field(default_factory=list)


@dataclass(frozen=True)
class MemberAccess(Expression):
    """Member access (e.g., obj.member)."""
    expression: Expression
    member: str


@dataclass(frozen=True)
class NumberLiteral(Expression):
    value: str


@dataclass(frozen=True)
class BoolLiteral(Expression):
    value: bool


@dataclass(frozen=True)
class StringLiteral(Expression):
    """String literal made of one or more adjacent source fragments."""
    parts: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class New(Expression):
    """A `new` expression; only array construction is supported."""
    expression: Expression


@dataclass(frozen=True)
class TypeExpression(Expression):
    """A type used in value position (casts, `new T[](n)`)."""
    type: Type


@dataclass(frozen=True)
class Variable(Expression):
    """Reference to a variable; `is_storage` marks contract storage fields."""
    name: str
    is_storage: bool = False


@dataclass(frozen=True)
class VariableDeclaration(Expression):
    """Declaration used as an expression (`uint x` in `uint x = 1`)."""
    type: Type
    name: str


@dataclass(frozen=True)
class Tuple(Expression):
    """Tuple expression (e.g., (a, b)); None marks a skipped slot."""
    elements: List[Optional[Expression]] = field(default_factory=list)


@dataclass(frozen=True)
class Ternary(Expression):
    """Conditional expression (a ? b : c)."""
    condition: Expression
    if_true: Expression
    if_false: Expression


# =============================================================================
# STATEMENT NODES
# =============================================================================

@dataclass(frozen=True)
class Statement(IRNode):
    """Base class for all statement nodes."""
    pass


@dataclass(frozen=True)
class Assembly(Statement):
    """Inline assembly block, kept as raw text."""
    code: str = ''


@dataclass(frozen=True)
class Block(Statement):
    statements: List[Statement] = field(default_factory=list)


@dataclass(frozen=True)
class Break(Statement):
    pass


@dataclass(frozen=True)
class Continue(Statement):
    pass


@dataclass(frozen=True)
class DoWhile(Statement):
    body: Statement
    condition: Expression


@dataclass(frozen=True)
class Emit(Statement):
    """Event emission; the expression must be a call to a named event."""
    expression: Expression


@dataclass(frozen=True)
class Error(Statement):
    """A statement the front-end failed to parse."""
    message: str = ''


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    expression: Expression


@dataclass(frozen=True)
class For(Statement):
    """For loop; every header piece is optional."""
    init: Optional[Statement] = None
    condition: Optional[Expression] = None
    post: Optional[Expression] = None
    body: Optional[Statement] = None


@dataclass(frozen=True)
class If(Statement):
    condition: Expression
    if_true: Statement
    if_false: Optional[Statement] = None


@dataclass(frozen=True)
class Return(Statement):
    expression: Optional[Expression] = None


@dataclass(frozen=True)
class Revert(Statement):
    """Revert with an optional custom error name and its arguments."""
    error: Optional[str] = None
    arguments: List[Expression] = field(default_factory=list)


@dataclass(frozen=True)
class RevertNamedArgs(Statement):
    """Revert with named arguments (`revert E({a: 1})`)."""
    pass


@dataclass(frozen=True)
class Try(Statement):
    expression: Expression


@dataclass(frozen=True)
class UncheckedBlock(Statement):
    statements: List[Statement] = field(default_factory=list)


@dataclass(frozen=True)
class VariableDefinition(Statement):
    declaration: VariableDeclaration
    initial_value: Optional[Expression] = None


@dataclass(frozen=True)
class While(Statement):
    condition: Expression
    body: Statement


@dataclass(frozen=True)
class ModifierPlaceholder(Statement):
    """The `_;` of a modifier body, where the wrapped function runs."""
    pass


# =============================================================================
# DECLARATIONS
# =============================================================================

@dataclass(frozen=True)
class ContractField(IRNode):
    """State variable of a contract or library."""
    field_type: Type
    name: str
    comments: List[str] = field(default_factory=list)
    initial_value: Optional[Expression] = None
    constant: bool = False
    public: bool = False


@dataclass(frozen=True)
class EventField(IRNode):
    field_type: Type
    name: str
    indexed: bool = False
    comments: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Event(IRNode):
    name: str
    fields: List[EventField] = field(default_factory=list)
    comments: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class EnumField(IRNode):
    name: str
    comments: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Enum(IRNode):
    name: str
    values: List[EnumField] = field(default_factory=list)
    comments: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class StructField(IRNode):
    name: str
    field_type: Type
    comments: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Struct(IRNode):
    name: str
    fields: List[StructField] = field(default_factory=list)
    comments: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class FunctionParam(IRNode):
    """Function parameter or return parameter; `_` marks an unnamed slot."""
    name: str
    param_type: Type


@dataclass(frozen=True)
class FunctionHeader(IRNode):
    name: str
    params: List[FunctionParam] = field(default_factory=list)
    external: bool = False
    view: bool = False
    payable: bool = False
    return_params: List[FunctionParam] = field(default_factory=list)
    modifiers: List[Expression] = field(default_factory=list)
    comments: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Function(IRNode):
    header: FunctionHeader
    body: List[Statement] = field(default_factory=list)


@dataclass(frozen=True)
class Modifier(IRNode):
    header: FunctionHeader
    statements: List[Statement] = field(default_factory=list)
    comments: List[str] = field(default_factory=list)


# =============================================================================
# AGGREGATES
# =============================================================================

@dataclass(frozen=True)
class Contract(IRNode):
    name: str
    fields: List[ContractField] = field(default_factory=list)
    constructor: Function = field(default_factory=lambda: Function(FunctionHeader('constructor')))
    events: List[Event] = field(default_factory=list)
    enums: List[Enum] = field(default_factory=list)
    structs: List[Struct] = field(default_factory=list)
    functions: List[Function] = field(default_factory=list)
    imports: Set[str] = field(default_factory=set)
    contract_doc: List[str] = field(default_factory=list)
    modifiers: List[Modifier] = field(default_factory=list)


@dataclass(frozen=True)
class Library(IRNode):
    """A Solidity library; its functions become free functions."""
    name: str
    fields: List[ContractField] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)
    enums: List[Enum] = field(default_factory=list)
    structs: List[Struct] = field(default_factory=list)
    functions: List[Function] = field(default_factory=list)
    imports: Set[str] = field(default_factory=set)
    library_doc: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Interface(IRNode):
    name: str
    events: List[Event] = field(default_factory=list)
    enums: List[Enum] = field(default_factory=list)
    structs: List[Struct] = field(default_factory=list)
    function_headers: List[FunctionHeader] = field(default_factory=list)
    imports: Set[str] = field(default_factory=set)
    comments: List[str] = field(default_factory=list)
