"""
Expression generation for IR to ink! lowering.

This module handles the generation of Rust code from IR expression nodes,
including literals, variables, operators, function calls, and member/index
access. Map writes, preconditions, struct construction and calls into the
aggregate itself change shape instead of translating literally.
"""

import re
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .context import CodeGenerationContext

from .base import BaseGenerator
from .stream import rust_string
from .type_converter import TypeConverter
from ..ir.nodes import (
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
    Operation,
)


DEFAULT_ERROR_MESSAGE = 'No error message provided'

PRECONDITION_FUNCTIONS = ('require', 'assert')

_SCIENTIFIC_LITERAL = re.compile(r'^([0-9][0-9_]*)[eE]([0-9]+)$')


class ExpressionGenerator(BaseGenerator):
    """
    Generates Rust code from IR expression nodes.

    This class handles all expression types including:
    - Literals (numbers, strings, booleans)
    - Variables (storage, constants, locals)
    - Binary, unary and conditional operations
    - Assignments (plain, compound, and inserts into maps)
    - Function calls (preconditions, casts, struct literals, self calls)
    - Member access (fields, enum variants)
    - Index access (arrays, maps)
    - New expressions (arrays)
    - Tuples and ternaries
    """

    def __init__(
        self,
        ctx: 'CodeGenerationContext',
        type_converter: TypeConverter,
    ):
        """
        Initialize the expression generator.

        Args:
            ctx: The code generation context
            type_converter: The type converter for type-related operations
        """
        super().__init__(ctx)
        self._type_converter = type_converter

    # =========================================================================
    # MAIN DISPATCH
    # =========================================================================

    def generate(self, expr: Optional[Expression]) -> str:
        """Generate Rust expression from IR node.

        Args:
            expr: The expression IR node

        Returns:
            The Rust code string
        """
        if expr is None:
            return ''

        if isinstance(expr, Variable):
            return self.generate_variable(expr)
        elif isinstance(expr, NumberLiteral):
            return self.generate_number_literal(expr)
        elif isinstance(expr, BoolLiteral):
            return 'true' if expr.value else 'false'
        elif isinstance(expr, StringLiteral):
            return rust_string(' '.join(expr.parts))
        elif isinstance(expr, Assign):
            return self.generate_assign(expr)
        elif isinstance(expr, BinaryOperation):
            return self.generate_binary_operation(expr)
        elif isinstance(expr, Condition):
            return self.generate_condition(expr)
        elif isinstance(expr, UnaryOperation):
            return self.generate_unary_operation(expr)
        elif isinstance(expr, FunctionCall):
            return self.generate_function_call(expr)
        elif isinstance(expr, MemberAccess):
            return self.generate_member_access(expr)
        elif isinstance(expr, MappingSubscript):
            return self.generate_map_read(expr)
        elif isinstance(expr, ArraySubscript):
            return self.generate_array_subscript(expr)
        elif isinstance(expr, New):
            return self.generate_new_expression(expr)
        elif isinstance(expr, TypeExpression):
            return self._type_converter.ir_type_to_rust(expr.type)
        elif isinstance(expr, VariableDeclaration):
            return self.generate_variable_declaration(expr)
        elif isinstance(expr, Tuple):
            return self.generate_tuple(expr)
        elif isinstance(expr, Ternary):
            return self.generate_ternary(expr)

        return self.todo_marker('expression', type(expr).__name__)

    def generate_arguments(self, args: List[Expression]) -> str:
        return ', '.join(self.generate(arg) for arg in args)

    # =========================================================================
    # LITERALS AND VARIABLES
    # =========================================================================

    def generate_number_literal(self, lit: NumberLiteral) -> str:
        """Generate a Rust integer literal; scientific notation is expanded."""
        match = _SCIENTIFIC_LITERAL.match(lit.value)
        if match:
            mantissa, exponent = match.groups()
            return str(int(mantissa.replace('_', '')) * 10 ** int(exponent))
        return lit.value

    def generate_variable(self, var: Variable) -> str:
        """Generate a variable reference.

        Storage variables always go through the data accessor.
        """
        if var.is_storage:
            return self.storage_access(var.name)
        registry = self._ctx.registry
        if registry.is_constant(var.name):
            return self.constant_name(var.name)
        if registry.is_enum(var.name) or registry.is_struct(var.name):
            return self.type_name(var.name)
        return self.value_name(var.name)

    def generate_variable_declaration(self, decl: VariableDeclaration) -> str:
        rust_type = self._type_converter.ir_type_to_rust(decl.type)
        return f'let mut {self.value_name(decl.name)}: {rust_type}'

    # =========================================================================
    # OPERATORS
    # =========================================================================

    def _needs_parens(self, expr: Expression) -> bool:
        """Check if an operand must be parenthesized to keep its grouping."""
        if isinstance(expr, (BinaryOperation, Assign, Ternary)):
            return True
        if isinstance(expr, Condition):
            return expr.right is not None
        return False

    def _operand(self, expr: Expression) -> str:
        code = self.generate(expr)
        if self._needs_parens(expr):
            return f'({code})'
        return code

    def generate_binary_operation(self, op: BinaryOperation) -> str:
        left = self._operand(op.left)
        right = self._operand(op.right)
        if op.operation == Operation.POW:
            return f'{left}.pow({right} as u32)'
        return f'{left} {op.operation.value} {right}'

    def generate_condition(self, cond: Condition) -> str:
        """Generate a boolean condition; a condition without right side is unary."""
        if cond.right is None:
            if cond.operation == Operation.NOT:
                return f'!{self._operand(cond.left)}'
            return self.generate(cond.left)
        return f'{self._operand(cond.left)} {cond.operation.value} {self._operand(cond.right)}'

    def generate_negated_condition(self, cond: Expression) -> str:
        """Generate the negation of a condition.

        Comparisons flip their operator; anything else is wrapped in `!( )`.
        """
        if isinstance(cond, Condition) and cond.right is not None and cond.operation.is_comparison:
            negated = cond.operation.negate()
            return f'{self._operand(cond.left)} {negated.value} {self._operand(cond.right)}'
        return f'!({self.generate(cond)})'

    def generate_unary_operation(self, op: UnaryOperation) -> str:
        if op.operation in (Operation.ADD_ONE, Operation.SUBTRACT_ONE):
            # Increments only appear in statement position: both forms are the same
            compound = Operation.ADD_ASSIGN if op.operation == Operation.ADD_ONE else Operation.SUBTRACT_ASSIGN
            return self.generate_assign(Assign(op.operand, NumberLiteral('1'), compound))

        operand = self._operand(op.operand)
        if op.operation in (Operation.NOT, Operation.BITWISE_NOT):
            return f'!{operand}'
        if op.operation == Operation.NEGATE:
            return f'-{operand}'
        return f'{op.operation.value}{operand}'

    def generate_ternary(self, op: Ternary) -> str:
        cond = self.generate(op.condition)
        return f'if {cond} {{ {self.generate(op.if_true)} }} else {{ {self.generate(op.if_false)} }}'

    # =========================================================================
    # ASSIGNMENT
    # =========================================================================

    def generate_assign(self, assign: Assign) -> str:
        """Generate an assignment.

        Map slots cannot be assigned through an index, so writes into a
        MappingSubscript become an insert on the map.
        """
        if isinstance(assign.target, MappingSubscript):
            return self._generate_map_insert(assign)

        target = self.generate(assign.target)
        value = self.generate(assign.value)
        if assign.operation == Operation.ASSIGN:
            return f'{target} = {value}'
        return f'{target} {assign.operation.value} {value}'

    def _generate_map_insert(self, assign: Assign) -> str:
        subscript = assign.target
        mapping = self.generate(subscript.mapping)
        key = self._map_key(subscript.keys)
        value = self.generate(assign.value)

        base = assign.operation.assignment_base
        if base is not None:
            current = f'{mapping}.get(&{key}).unwrap_or_default()'
            value = f'{current} {base.value} {self._operand(assign.value)}'
            return f'{mapping}.insert(&{key}, &({value}))'
        return f'{mapping}.insert(&{key}, &{value})'

    # =========================================================================
    # INDEX ACCESS
    # =========================================================================

    def _map_key(self, keys: List[Expression]) -> str:
        """A single key is passed as is; composite keys become a tuple."""
        if len(keys) == 1:
            return self.generate(keys[0])
        return f'({self.generate_arguments(keys)})'

    def generate_map_read(self, subscript: MappingSubscript) -> str:
        mapping = self.generate(subscript.mapping)
        return f'{mapping}.get(&{self._map_key(subscript.keys)}).unwrap_or_default()'

    def generate_array_subscript(self, subscript: ArraySubscript) -> str:
        array = self.generate(subscript.array)
        if subscript.index is None:
            return self.todo_marker('array subscript', 'missing index')
        index = self.generate(subscript.index)
        if isinstance(subscript.index, (Variable, NumberLiteral)):
            return f'{array}[{index} as usize]'
        return f'{array}[({index}) as usize]'

    # =========================================================================
    # MEMBER ACCESS
    # =========================================================================

    def generate_member_access(self, access: MemberAccess) -> str:
        """Generate member access; `E.V` on a known enum becomes `E::V`."""
        base = access.expression
        if (isinstance(base, Variable) and not base.is_storage
                and self._ctx.registry.is_enum(base.name)):
            return f'{self.type_name(base.name)}::{self.type_name(access.member)}'
        return f'{self._operand(base)}.{self.value_name(access.member)}'

    # =========================================================================
    # FUNCTION CALLS
    # =========================================================================

    def generate_function_call(self, call: FunctionCall, propagate: bool = True) -> str:
        """Generate Rust code for a function call.

        With `propagate` off, a call into the aggregate yields the bare
        `Result` instead of unwrapping it with `?`.

        Handles, in order:
        - Preconditions (`require`, `assert`)
        - Type casts (callee is a type)
        - Struct construction (callee names a known struct)
        - Calls into the aggregate's own functions, propagating failure with `?`
        """
        callee = call.function

        if isinstance(callee, TypeExpression):
            if len(call.arguments) != 1:
                return self.todo_marker('type cast', f'{len(call.arguments)} arguments')
            return self._type_converter.generate_type_cast(callee.type, self.generate(call.arguments[0]))

        if isinstance(callee, Variable) and not callee.is_storage:
            name = callee.name
            if name in PRECONDITION_FUNCTIONS:
                return self.generate_precondition(call)
            if self._ctx.registry.is_struct(name):
                return self.generate_struct_literal(name, call.arguments)
            kind = self._ctx.registry.function_kind(name)
            if kind is not None:
                return self._generate_self_call(name, kind, call.arguments, propagate)

        return f'{self._operand(callee)}({self.generate_arguments(call.arguments)})'

    def is_precondition(self, expr: Expression) -> bool:
        """Check if an expression lowers to a precondition block."""
        return (isinstance(expr, FunctionCall)
                and isinstance(expr.function, Variable)
                and expr.function.name in PRECONDITION_FUNCTIONS)

    def generate_precondition(self, call: FunctionCall) -> str:
        """Generate `if !(cond) { return Err(...) }` for require/assert."""
        if not call.arguments:
            return self.todo_marker('precondition', 'missing condition')
        condition = self.generate_negated_condition(call.arguments[0])
        if call.function.name == 'require' and len(call.arguments) > 1:
            message = self.generate(call.arguments[1])
        else:
            message = rust_string(DEFAULT_ERROR_MESSAGE)
        return f'if {condition} {{ return Err(Error::Custom(String::from({message}))) }}'

    def generate_struct_literal(self, name: str, args: List[Expression]) -> str:
        field_names = self._ctx.registry.structs[name]
        if len(field_names) != len(args):
            return self.todo_marker('struct construction', f'{name} with {len(args)} arguments')
        fields = ', '.join(
            f'{self.value_name(field_name)}: {self.generate(arg)}'
            for field_name, arg in zip(field_names, args)
        )
        return f'{self.type_name(name)} {{ {fields} }}'

    def _generate_self_call(self, name: str, kind: str, args: List[Expression],
                            propagate: bool = True) -> str:
        arguments = self.generate_arguments(args)
        suffix = '?' if propagate else ''
        if kind == 'library':
            return f'{self.value_name(name)}({arguments}){suffix}'
        prefix = '_' if kind == 'internal' else ''
        return f'{self._ctx.receiver}.{prefix}{self.value_name(name)}({arguments}){suffix}'

    # =========================================================================
    # NEW / TUPLES
    # =========================================================================

    def generate_new_expression(self, expr: New) -> str:
        """Generate `vec![T::default(); n]` for `new T[](n)`.

        Any other `new` (contract deployment) is not supported.
        """
        inner = expr.expression
        if (isinstance(inner, FunctionCall) and isinstance(inner.function, ArraySubscript)
                and len(inner.arguments) == 1):
            element = inner.function.array
            if isinstance(element, TypeExpression):
                rust_type = self._type_converter.ir_type_to_rust(element.type)
            else:
                rust_type = self.generate(element)
            if not rust_type.isidentifier():
                rust_type = f'<{rust_type}>'
            return f'vec![{rust_type}::default(); {self.generate(inner.arguments[0])}]'
        return self.todo_marker('new', 'only array construction is supported')

    def generate_tuple(self, expr: Tuple) -> str:
        elements = ['_' if element is None else self.generate(element) for element in expr.elements]
        return f'({", ".join(elements)})'
