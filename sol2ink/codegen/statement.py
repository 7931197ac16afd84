"""
Statement generation for IR to ink! lowering.

This module handles the generation of Rust code from IR statement nodes.
Three loop forms collapse into `loop`/`while`, returns wrap their value in
`Ok`, failures become `Err` values, and emits go through `_emit_*` helpers.
"""

import logging
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .context import CodeGenerationContext
    from .expression import ExpressionGenerator

from .base import BaseGenerator
from .stream import comment_marker, rust_string
from ..exceptions import IRContractError
from ..ir.nodes import (
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
    FunctionCall,
    StringLiteral,
    Variable,
)


logger = logging.getLogger(__name__)

UNCHECKED_OPEN = '<<< Please handle unchecked blocks manually'
UNCHECKED_CLOSE = '>>> Please handle unchecked blocks manually'
CONTINUE_SKIPS_POST = 'continue skips the loop increment; please review manually'


def custom_error(message: str) -> str:
    """Build `Err(Error::Custom(String::from(<message>)))` from a lowered message."""
    return f'Err(Error::Custom(String::from({message})))'


def _continues_enclosing_loop(stmt: Optional[Statement]) -> bool:
    """Whether a `continue` in `stmt` targets the loop that owns it, not a nested one."""
    if isinstance(stmt, Continue):
        return True
    if isinstance(stmt, (Block, UncheckedBlock)):
        return any(_continues_enclosing_loop(s) for s in stmt.statements)
    if isinstance(stmt, If):
        return _continues_enclosing_loop(stmt.if_true) or _continues_enclosing_loop(stmt.if_false)
    return False


class StatementGenerator(BaseGenerator):
    """
    Generates Rust code from IR statement nodes.

    This class handles all statement types including:
    - Blocks (flattened into the enclosing body)
    - Variable definitions
    - Control flow (if, for, while, do-while)
    - Returns, breaks, continues
    - Emit (events), revert and try
    - Unchecked blocks
    - Assembly and other unsupported statements (todo!() markers)
    """

    def __init__(
        self,
        ctx: 'CodeGenerationContext',
        expr_generator: 'ExpressionGenerator',
    ):
        """
        Initialize the statement generator.

        Args:
            ctx: The code generation context
            expr_generator: The expression generator
        """
        super().__init__(ctx)
        self._expr = expr_generator

    # =========================================================================
    # MAIN DISPATCH
    # =========================================================================

    def generate(self, stmt: Statement) -> str:
        """Generate Rust code from a statement IR node.

        Args:
            stmt: The statement IR node

        Returns:
            The Rust code string (one or more indented lines)
        """
        if isinstance(stmt, Block):
            return self.generate_block(stmt)
        elif isinstance(stmt, ExpressionStatement):
            return self._generate_expression_statement(stmt)
        elif isinstance(stmt, VariableDefinition):
            return self.generate_variable_definition(stmt)
        elif isinstance(stmt, If):
            return self.generate_if_statement(stmt)
        elif isinstance(stmt, For):
            return self.generate_for_statement(stmt)
        elif isinstance(stmt, While):
            return self.generate_while_statement(stmt)
        elif isinstance(stmt, DoWhile):
            return self.generate_do_while_statement(stmt)
        elif isinstance(stmt, Return):
            return self.generate_return_statement(stmt)
        elif isinstance(stmt, Emit):
            return self.generate_emit_statement(stmt)
        elif isinstance(stmt, Revert):
            return self.generate_revert_statement(stmt)
        elif isinstance(stmt, Try):
            return self.generate_try_statement(stmt)
        elif isinstance(stmt, UncheckedBlock):
            return self.generate_unchecked_block(stmt)
        elif isinstance(stmt, Break):
            return f'{self.indent()}break;'
        elif isinstance(stmt, Continue):
            return f'{self.indent()}continue;'
        elif isinstance(stmt, Assembly):
            return self._todo_statement('assembly')
        elif isinstance(stmt, Error):
            return self._todo_statement('parse error', stmt.message)
        elif isinstance(stmt, RevertNamedArgs):
            return self._todo_statement('revert with named arguments')
        elif isinstance(stmt, ModifierPlaceholder):
            return self._todo_statement('modifier placeholder', 'nested inside a block')

        return self._todo_statement('statement', type(stmt).__name__)

    def generate_statements(self, statements: List[Statement]) -> List[str]:
        """Generate a list of statements at the current indent."""
        lines = [self.generate(stmt) for stmt in statements]
        # Empty blocks produce no code
        return [line for line in lines if line]

    def _todo_statement(self, construct: str, detail: str = '') -> str:
        return f'{self.indent()}{self.todo_marker(construct, detail)};'

    # =========================================================================
    # BLOCKS
    # =========================================================================

    def generate_block(self, block: Block) -> str:
        """Blocks are flattened into the enclosing body."""
        return '\n'.join(self.generate_statements(block.statements))

    def _generate_body_statements(self, body: Optional[Statement], lines: List[str]) -> None:
        """Generate statements from a body (Block or single statement) one level deeper."""
        self.indent_level += 1
        if isinstance(body, Block):
            lines.extend(self.generate_statements(body.statements))
        elif body is not None:
            lines.append(self.generate(body))
        self.indent_level -= 1

    def _break_unless(self, condition) -> List[str]:
        """`if !(c) { break }` at one level deeper than the current indent."""
        self.indent_level += 1
        cond = self._expr.generate(condition)
        lines = [
            f'{self.indent()}if !({cond}) {{',
            f'{self.indent()}    break',
            f'{self.indent()}}}',
        ]
        self.indent_level -= 1
        return lines

    # =========================================================================
    # EXPRESSION STATEMENTS
    # =========================================================================

    def _generate_expression_statement(self, stmt: ExpressionStatement) -> str:
        expr = self._expr.generate(stmt.expression)
        if self._expr.is_precondition(stmt.expression):
            return f'{self.indent()}{expr}'
        return f'{self.indent()}{expr};'

    def generate_variable_definition(self, stmt: VariableDefinition) -> str:
        """Generate `let mut x: T = init;`; without initializer the default is used."""
        declaration = self._expr.generate(stmt.declaration)
        if stmt.initial_value is not None:
            value = self._expr.generate(stmt.initial_value)
        else:
            value = 'Default::default()'
        return f'{self.indent()}{declaration} = {value};'

    # =========================================================================
    # CONTROL FLOW
    # =========================================================================

    def generate_if_statement(self, stmt: If) -> str:
        """Generate an if statement; no else branch is emitted when absent."""
        lines = []
        cond = self._expr.generate(stmt.condition)
        lines.append(f'{self.indent()}if {cond} {{')
        self._generate_body_statements(stmt.if_true, lines)
        lines.append(f'{self.indent()}}}')

        if stmt.if_false is not None:
            if isinstance(stmt.if_false, If):
                lines[-1] = f'{self.indent()}}} else {self.generate_if_statement(stmt.if_false).strip()}'
            else:
                lines[-1] = f'{self.indent()}}} else {{'
                self._generate_body_statements(stmt.if_false, lines)
                lines.append(f'{self.indent()}}}')

        return '\n'.join(lines)

    def generate_for_statement(self, stmt: For) -> str:
        """Generate `init; loop { if !(cond) { break } body post; }`."""
        lines = []
        if stmt.init is not None:
            lines.append(self.generate(stmt.init))
        if stmt.post is not None and _continues_enclosing_loop(stmt.body):
            self._ctx.diagnostics.warn_manual_review('continue in for loop', self._ctx.location)
            lines.append(f'{self.indent()}{comment_marker(CONTINUE_SKIPS_POST)}')
        lines.append(f'{self.indent()}loop {{')
        if stmt.condition is not None:
            lines.extend(self._break_unless(stmt.condition))
        self._generate_body_statements(stmt.body, lines)
        if stmt.post is not None:
            self.indent_level += 1
            lines.append(f'{self.indent()}{self._expr.generate(stmt.post)};')
            self.indent_level -= 1
        lines.append(f'{self.indent()}}}')
        return '\n'.join(lines)

    def generate_while_statement(self, stmt: While) -> str:
        lines = []
        cond = self._expr.generate(stmt.condition)
        lines.append(f'{self.indent()}while {cond} {{')
        self._generate_body_statements(stmt.body, lines)
        lines.append(f'{self.indent()}}}')
        return '\n'.join(lines)

    def generate_do_while_statement(self, stmt: DoWhile) -> str:
        """Generate `loop { body if !(cond) { break } }`."""
        lines = []
        lines.append(f'{self.indent()}loop {{')
        self._generate_body_statements(stmt.body, lines)
        lines.extend(self._break_unless(stmt.condition))
        lines.append(f'{self.indent()}}}')
        return '\n'.join(lines)

    # =========================================================================
    # RETURN
    # =========================================================================

    def named_return_value(self) -> str:
        """The value of the named return parameters (`x` or `(a, b)`)."""
        names = [self.value_name(name) for name in self._ctx.named_returns]
        if len(names) == 1:
            return names[0]
        return f'({", ".join(names)})'

    def generate_return_statement(self, stmt: Return) -> str:
        """Generate a return; the value is always wrapped in Ok."""
        if stmt.expression is not None:
            value = self._expr.generate(stmt.expression)
        elif self._ctx.named_returns:
            value = self.named_return_value()
        else:
            value = '()'
        return f'{self.indent()}return Ok({value});'

    # =========================================================================
    # EMIT / REVERT / TRY
    # =========================================================================

    def generate_emit_statement(self, stmt: Emit) -> str:
        """Generate a call to the `_emit_<event>` helper.

        Raises:
            IRContractError: If the emitted expression is not a call to a named event
        """
        call = stmt.expression
        if not (isinstance(call, FunctionCall) and isinstance(call.function, Variable)):
            raise IRContractError(
                f'{self._ctx.location}: emit expects a call to a named event, '
                f'got {type(call).__name__}'
            )

        event_name = call.function.name
        if not self._ctx.registry.is_event(event_name):
            self._ctx.diagnostics.warn_unknown_event(event_name, self._ctx.location)
            logger.warning('%s: emit of undeclared event %s', self._ctx.location, event_name)

        args = self._expr.generate_arguments(call.arguments)
        helper = f'_emit_{self.value_name(event_name)}'
        return f'{self.indent()}{self._ctx.receiver}.{helper}({args});'

    def generate_revert_statement(self, stmt: Revert) -> str:
        """Generate `return Err(Error::Custom(...))`.

        The message is the string argument if there is one, else the error
        name, else the first argument, else a fixed text.
        """
        string_args = [arg for arg in stmt.arguments if isinstance(arg, StringLiteral)]
        if string_args:
            message = self._expr.generate(string_args[0])
        elif stmt.error:
            message = rust_string(stmt.error)
        elif stmt.arguments:
            message = self._expr.generate(stmt.arguments[0])
        else:
            message = rust_string('Reverted')
        return f'{self.indent()}return {custom_error(message)};'

    def generate_try_statement(self, stmt: Try) -> str:
        """Generate a failure check of the tried expression."""
        if isinstance(stmt.expression, FunctionCall):
            expr = self._expr.generate_function_call(stmt.expression, propagate=False)
        else:
            expr = self._expr.generate(stmt.expression)
        return '\n'.join([
            f'{self.indent()}if {expr}.is_err() {{',
            f'{self.indent()}    return {custom_error(rust_string("Try failed"))}',
            f'{self.indent()}}}',
        ])

    # =========================================================================
    # UNCHECKED
    # =========================================================================

    def generate_unchecked_block(self, stmt: UncheckedBlock) -> str:
        """Pass the statements through between manual-review markers."""
        self._ctx.diagnostics.warn_manual_review('unchecked block', self._ctx.location)
        lines = [f'{self.indent()}{comment_marker(UNCHECKED_OPEN)}']
        lines.extend(self.generate_statements(stmt.statements))
        lines.append(f'{self.indent()}{comment_marker(UNCHECKED_CLOSE)}')
        return '\n'.join(lines)
