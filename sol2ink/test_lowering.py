#!/usr/bin/env python3
"""
Unit tests for expression and statement lowering.

Run with: python3 -m pytest sol2ink/test_lowering.py
"""

import unittest

from sol2ink.codegen import (
    CodeGenerationContext,
    ExpressionGenerator,
    StatementGenerator,
    TypeConverter,
)
from sol2ink.exceptions import IRContractError
from sol2ink.ir import (
    AccountId,
    Bool,
    Uint,
    Array,
    Mapping,
    Operation,
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
    Try,
    UncheckedBlock,
    VariableDefinition,
    While,
    ModifierPlaceholder,
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
    Contract,
    Library,
)


TOKEN = Contract(
    name='Token',
    fields=[
        ContractField(Uint(256), 'totalSupply', public=True),
        ContractField(Mapping([AccountId()], Uint(256)), 'balances', public=True),
        ContractField(Mapping([AccountId(), AccountId()], Uint(256)), 'allowances'),
        ContractField(Array(Uint(256)), 'values'),
        ContractField(Bool(), 'paused'),
        ContractField(Uint(256), 'maxSupply', initial_value=NumberLiteral('1000'), constant=True),
    ],
    events=[
        Event('Transfer', [
            EventField(AccountId(), 'from', indexed=True),
            EventField(AccountId(), 'to', indexed=True),
            EventField(Uint(256), 'value'),
        ]),
    ],
    enums=[Enum('Status', [EnumField('Active'), EnumField('Paused')])],
    structs=[Struct('Point', [StructField('x', Uint(64)), StructField('y', Uint(64))])],
    functions=[
        Function(FunctionHeader(
            'transfer',
            [FunctionParam('to', AccountId()), FunctionParam('amount', Uint(256))],
            external=True,
        )),
        Function(FunctionHeader('mint', [FunctionParam('to', AccountId())])),
    ],
)

SAFE_MATH = Library(
    name='SafeMath',
    functions=[Function(FunctionHeader(
        'add',
        [FunctionParam('a', Uint(256)), FunctionParam('b', Uint(256))],
        return_params=[FunctionParam('_', Uint(256))],
    ))],
)


def storage(name):
    return Variable(name, is_storage=True)


def var(name):
    return Variable(name)


def call(name, *args):
    return FunctionCall(Variable(name), list(args))


def make_generators(aggregate=TOKEN):
    ctx = CodeGenerationContext.for_aggregate(aggregate)
    type_converter = TypeConverter(ctx)
    expr = ExpressionGenerator(ctx, type_converter)
    stmt = StatementGenerator(ctx, expr)
    return ctx, expr, stmt


class TestMapAssignment(unittest.TestCase):
    """Test that writes into map slots become inserts."""

    def setUp(self):
        self.ctx, self.expr, _ = make_generators()
        self.slot = MappingSubscript(storage('balances'), [var('to')])

    def test_single_key_insert(self):
        code = self.expr.generate(Assign(self.slot, var('amount')))
        self.assertEqual(code, 'self.data().balances.insert(&to, &amount)')

    def test_composite_key_insert(self):
        slot = MappingSubscript(storage('allowances'), [var('owner'), var('spender')])
        code = self.expr.generate(Assign(slot, var('amount')))
        self.assertEqual(code, 'self.data().allowances.insert(&(owner, spender), &amount)')

    def test_compound_assignment(self):
        code = self.expr.generate(Assign(self.slot, var('amount'), Operation.ADD_ASSIGN))
        self.assertEqual(
            code,
            'self.data().balances.insert(&to, '
            '&(self.data().balances.get(&to).unwrap_or_default() + amount))',
        )

    def test_compound_assignment_parenthesizes_value(self):
        value = BinaryOperation(var('a'), Operation.MUL, var('b'))
        code = self.expr.generate(Assign(self.slot, value, Operation.SUBTRACT_ASSIGN))
        self.assertTrue(code.endswith('unwrap_or_default() - (a * b)))'))

    def test_increment_of_map_slot(self):
        code = self.expr.generate(UnaryOperation(Operation.ADD_ONE, self.slot))
        self.assertEqual(
            code,
            'self.data().balances.insert(&to, '
            '&(self.data().balances.get(&to).unwrap_or_default() + 1))',
        )

    def test_map_read(self):
        self.assertEqual(
            self.expr.generate(self.slot),
            'self.data().balances.get(&to).unwrap_or_default()',
        )

    def test_plain_compound_assignment(self):
        code = self.expr.generate(Assign(storage('totalSupply'), var('amount'), Operation.ADD_ASSIGN))
        self.assertEqual(code, 'self.data().total_supply += amount')


class TestPreconditions(unittest.TestCase):
    """Test require/assert rewriting into early error returns."""

    def setUp(self):
        self.ctx, self.expr, self.stmt = make_generators()

    def test_require_with_message_flips_comparison(self):
        cond = Condition(var('amount'), Operation.GREATER_THAN, NumberLiteral('0'))
        code = self.expr.generate(call('require', cond, StringLiteral(['Amount is zero'])))
        self.assertEqual(
            code,
            'if amount <= 0 { return Err(Error::Custom(String::from("Amount is zero"))) }',
        )

    def test_require_without_message_uses_default(self):
        code = self.expr.generate(call('require', var('ok')))
        self.assertEqual(
            code,
            'if !(ok) { return Err(Error::Custom(String::from("No error message provided"))) }',
        )

    def test_assert_uses_default_message(self):
        cond = Condition(var('a'), Operation.EQUAL, var('b'))
        code = self.expr.generate(call('assert', cond))
        self.assertEqual(
            code,
            'if a != b { return Err(Error::Custom(String::from("No error message provided"))) }',
        )

    def test_logical_condition_is_wrapped(self):
        cond = Condition(var('a'), Operation.LOGICAL_AND, var('b'))
        code = self.expr.generate(call('require', cond))
        self.assertTrue(code.startswith('if !(a && b) {'))

    def test_statement_has_no_semicolon(self):
        code = self.stmt.generate(ExpressionStatement(call('require', var('ok'))))
        self.assertFalse(code.endswith(';'))


class TestExpressions(unittest.TestCase):
    """Test the remaining expression rewrites."""

    def setUp(self):
        self.ctx, self.expr, _ = make_generators()

    def test_storage_variable_uses_accessor(self):
        self.assertEqual(self.expr.generate(storage('totalSupply')), 'self.data().total_supply')

    def test_storage_receiver_follows_context(self):
        self.ctx.enter_function('onlyOwner', receiver='instance')
        self.assertEqual(self.expr.generate(storage('paused')), 'instance.data().paused')
        self.ctx.leave_function()
        self.assertEqual(self.expr.generate(storage('paused')), 'self.data().paused')

    def test_local_and_constant_names(self):
        self.assertEqual(self.expr.generate(var('newOwner')), 'new_owner')
        self.assertEqual(self.expr.generate(var('maxSupply')), 'MAX_SUPPLY')

    def test_enum_variant(self):
        self.assertEqual(self.expr.generate(MemberAccess(var('Status'), 'Paused')), 'Status::Paused')

    def test_member_access(self):
        self.assertEqual(self.expr.generate(MemberAccess(var('point'), 'xValue')), 'point.x_value')

    def test_struct_literal(self):
        code = self.expr.generate(call('Point', NumberLiteral('1'), NumberLiteral('2')))
        self.assertEqual(code, 'Point { x: 1, y: 2 }')

    def test_struct_literal_arity_mismatch_is_marked(self):
        code = self.expr.generate(call('Point', NumberLiteral('1')))
        self.assertTrue(code.startswith('todo!('))
        self.assertEqual(self.ctx.diagnostics.count, 1)

    def test_self_calls_propagate_failure(self):
        self.assertEqual(self.expr.generate(call('transfer', var('to'))), 'self.transfer(to)?')
        self.assertEqual(self.expr.generate(call('mint', var('to'))), 'self._mint(to)?')

    def test_library_calls_are_free_functions(self):
        _, expr, _ = make_generators(SAFE_MATH)
        self.assertEqual(expr.generate(call('add', var('a'), var('b'))), 'add(a, b)?')

    def test_unknown_calls_pass_through(self):
        self.assertEqual(self.expr.generate(call('keccak256', var('data'))), 'keccak_256(data)')

    def test_integer_cast(self):
        code = self.expr.generate(FunctionCall(TypeExpression(Uint(128)), [var('x')]))
        self.assertEqual(code, '(x as u128)')

    def test_from_cast(self):
        code = self.expr.generate(FunctionCall(TypeExpression(AccountId()), [NumberLiteral('0')]))
        self.assertEqual(code, 'AccountId::from(0)')

    def test_new_array(self):
        inner = FunctionCall(ArraySubscript(TypeExpression(Uint(256))), [var('n')])
        self.assertEqual(self.expr.generate(New(inner)), 'vec![u128::default(); n]')

    def test_other_new_is_marked(self):
        code = self.expr.generate(New(call('Token')))
        self.assertTrue(code.startswith('todo!("new'))
        self.assertEqual(self.ctx.diagnostics.warnings[0].code, 'W001')

    def test_string_fragments_joined(self):
        self.assertEqual(self.expr.generate(StringLiteral(['Hello', 'world'])), '"Hello world"')

    def test_string_escaping(self):
        self.assertEqual(self.expr.generate(StringLiteral(['say "hi"'])), '"say \\"hi\\""')

    def test_literals(self):
        self.assertEqual(self.expr.generate(BoolLiteral(True)), 'true')
        self.assertEqual(self.expr.generate(NumberLiteral('1e18')), '1000000000000000000')
        self.assertEqual(self.expr.generate(NumberLiteral('42')), '42')

    def test_power(self):
        code = self.expr.generate(BinaryOperation(var('a'), Operation.POW, NumberLiteral('2')))
        self.assertEqual(code, 'a.pow(2 as u32)')

    def test_nested_binary_operations_keep_grouping(self):
        inner = BinaryOperation(var('a'), Operation.ADD, var('b'))
        code = self.expr.generate(BinaryOperation(inner, Operation.MUL, var('c')))
        self.assertEqual(code, '(a + b) * c')

    def test_array_subscript(self):
        self.assertEqual(
            self.expr.generate(ArraySubscript(storage('values'), var('i'))),
            'self.data().values[i as usize]',
        )
        index = BinaryOperation(var('i'), Operation.ADD, NumberLiteral('1'))
        self.assertEqual(
            self.expr.generate(ArraySubscript(storage('values'), index)),
            'self.data().values[(i + 1) as usize]',
        )

    def test_unary_operations(self):
        self.assertEqual(self.expr.generate(UnaryOperation(Operation.NOT, var('ok'))), '!ok')
        self.assertEqual(self.expr.generate(UnaryOperation(Operation.NEGATE, var('x'))), '-x')
        self.assertEqual(self.expr.generate(UnaryOperation(Operation.SUBTRACT_ONE, var('i'))), 'i -= 1')

    def test_unary_condition(self):
        self.assertEqual(self.expr.generate(Condition(storage('paused'), Operation.NOT)), '!self.data().paused')

    def test_ternary(self):
        code = self.expr.generate(Ternary(var('c'), var('a'), var('b')))
        self.assertEqual(code, 'if c { a } else { b }')

    def test_tuple_with_skipped_slot(self):
        self.assertEqual(self.expr.generate(Tuple([var('a'), None])), '(a, _)')


class TestLoops(unittest.TestCase):
    """Test loop normalization."""

    def setUp(self):
        self.ctx, self.expr, self.stmt = make_generators()
        self.cond = Condition(var('i'), Operation.LESS_THAN, var('n'))
        self.increment = UnaryOperation(Operation.ADD_ONE, var('i'))

    def test_while(self):
        code = self.stmt.generate(While(self.cond, Block([ExpressionStatement(self.increment)])))
        self.assertEqual(code, 'while i < n {\n    i += 1;\n}')

    def test_do_while(self):
        code = self.stmt.generate(DoWhile(Block([ExpressionStatement(self.increment)]), self.cond))
        self.assertEqual(
            code,
            'loop {\n'
            '    i += 1;\n'
            '    if !(i < n) {\n'
            '        break\n'
            '    }\n'
            '}',
        )

    def test_for(self):
        loop = For(
            init=VariableDefinition(VariableDeclaration(Uint(256), 'i'), NumberLiteral('0')),
            condition=self.cond,
            post=self.increment,
            body=Block([ExpressionStatement(Assign(var('total'), var('i'), Operation.ADD_ASSIGN))]),
        )
        self.assertEqual(
            self.stmt.generate(loop),
            'let mut i: u128 = 0;\n'
            'loop {\n'
            '    if !(i < n) {\n'
            '        break\n'
            '    }\n'
            '    total += i;\n'
            '    i += 1;\n'
            '}',
        )

    def test_for_without_header(self):
        code = self.stmt.generate(For(body=Block([Break()])))
        self.assertEqual(code, 'loop {\n    break;\n}')
        self.assertNotIn('if !', code)

    def test_continue_in_for_is_flagged(self):
        skip = If(var('skip'), Block([Continue()]))
        code = self.stmt.generate(For(condition=self.cond, post=self.increment, body=Block([skip])))
        self.assertTrue(code.startswith(
            '_comment_!("continue skips the loop increment; please review manually");\nloop {'
        ))
        self.assertEqual(self.ctx.diagnostics.warnings[0].code, 'W003')
        self.assertEqual(self.ctx.diagnostics.warnings[0].construct, 'continue in for loop')

    def test_continue_of_nested_loop_is_not_flagged(self):
        inner = While(self.cond, Block([Continue()]))
        self.stmt.generate(For(post=self.increment, body=Block([inner])))
        self.assertEqual(self.ctx.diagnostics.count, 0)


class TestStatements(unittest.TestCase):
    """Test the remaining statement lowering."""

    def setUp(self):
        self.ctx, self.expr, self.stmt = make_generators()

    def test_if_without_else(self):
        code = self.stmt.generate(If(var('ok'), Block([Return()])))
        self.assertEqual(code, 'if ok {\n    return Ok(());\n}')
        self.assertNotIn('else', code)

    def test_if_else_chain(self):
        code = self.stmt.generate(If(var('a'), Block([Break()]), If(var('b'), Block([Continue()]))))
        self.assertEqual(code, 'if a {\n    break;\n} else if b {\n    continue;\n}')

    def test_if_else(self):
        code = self.stmt.generate(If(var('a'), Break(), Continue()))
        self.assertEqual(code, 'if a {\n    break;\n} else {\n    continue;\n}')

    def test_return_wraps_in_ok(self):
        self.assertEqual(self.stmt.generate(Return(var('x'))), 'return Ok(x);')
        self.assertEqual(self.stmt.generate(Return()), 'return Ok(());')

    def test_return_of_named_returns(self):
        self.ctx.enter_function('balanceOf', named_returns=['balance'])
        self.assertEqual(self.stmt.generate(Return()), 'return Ok(balance);')

    def test_variable_definition_without_value(self):
        code = self.stmt.generate(VariableDefinition(VariableDeclaration(Bool(), 'found')))
        self.assertEqual(code, 'let mut found: bool = Default::default();')

    def test_emit(self):
        code = self.stmt.generate(Emit(call('Transfer', var('sender'), var('recipient'), var('amount'))))
        self.assertEqual(code, 'self._emit_transfer(sender, recipient, amount);')
        self.assertEqual(self.ctx.diagnostics.count, 0)

    def test_emit_of_non_call_raises(self):
        with self.assertRaises(IRContractError):
            self.stmt.generate(Emit(var('Transfer')))

    def test_emit_of_unknown_event_warns(self):
        with self.assertLogs('sol2ink.codegen.statement', level='WARNING'):
            code = self.stmt.generate(Emit(call('Approval')))
        self.assertEqual(code, 'self._emit_approval();')
        self.assertEqual(self.ctx.diagnostics.warnings[0].code, 'W002')

    def test_try(self):
        code = self.stmt.generate(Try(call('externalCall')))
        self.assertEqual(
            code,
            'if external_call().is_err() {\n'
            '    return Err(Error::Custom(String::from("Try failed")))\n'
            '}',
        )

    def test_try_checks_own_call_result_without_unwrapping(self):
        external = self.stmt.generate(Try(call('transfer', var('to'), var('amount'))))
        internal = self.stmt.generate(Try(call('mint', var('to'))))
        self.assertTrue(external.startswith('if self.transfer(to, amount).is_err() {'))
        self.assertTrue(internal.startswith('if self._mint(to).is_err() {'))
        self.assertNotIn('?', external + internal)

    def test_try_on_library_call(self):
        _, _, stmt = make_generators(SAFE_MATH)
        code = stmt.generate(Try(call('add', var('a'), var('b'))))
        self.assertTrue(code.startswith('if add(a, b).is_err() {'))

    def test_revert_messages(self):
        self.assertEqual(
            self.stmt.generate(Revert()),
            'return Err(Error::Custom(String::from("Reverted")));',
        )
        self.assertEqual(
            self.stmt.generate(Revert('InsufficientBalance', [var('needed')])),
            'return Err(Error::Custom(String::from("InsufficientBalance")));',
        )
        self.assertEqual(
            self.stmt.generate(Revert(None, [StringLiteral(['Not allowed'])])),
            'return Err(Error::Custom(String::from("Not allowed")));',
        )

    def test_unchecked_block(self):
        body = [ExpressionStatement(Assign(var('x'), NumberLiteral('1'), Operation.ADD_ASSIGN))]
        code = self.stmt.generate(UncheckedBlock(body))
        self.assertEqual(
            code,
            '_comment_!("<<< Please handle unchecked blocks manually");\n'
            'x += 1;\n'
            '_comment_!(">>> Please handle unchecked blocks manually");',
        )
        self.assertEqual(self.ctx.diagnostics.warnings[0].code, 'W003')

    def test_block_is_flattened(self):
        self.assertEqual(self.stmt.generate(Block([Break(), Block([]), Continue()])), 'break;\ncontinue;')


class TestNoSilentDrops(unittest.TestCase):
    """Test that every unsupported construct leaves a marker and a diagnostic."""

    def setUp(self):
        self.ctx, self.expr, self.stmt = make_generators()

    def test_assembly(self):
        with self.assertLogs('sol2ink.codegen.base', level='WARNING'):
            code = self.stmt.generate(Assembly('mstore(0, 1)'))
        self.assertEqual(code, 'todo!("assembly");')
        diagnostic = self.ctx.diagnostics.warnings[0]
        self.assertEqual(diagnostic.construct, 'assembly')
        self.assertEqual(diagnostic.location, 'Token')

    def test_parse_error(self):
        code = self.stmt.generate(Error('unexpected token'))
        self.assertEqual(code, 'todo!("parse error: unexpected token");')

    def test_nested_modifier_placeholder(self):
        code = self.stmt.generate(If(var('a'), Block([ModifierPlaceholder()])))
        self.assertIn('todo!("modifier placeholder', code)

    def test_every_marker_is_counted(self):
        self.stmt.generate_statements([Assembly(), Error('x'), Assembly()])
        self.assertEqual(self.ctx.diagnostics.count, 3)
        self.assertEqual(
            self.ctx.diagnostics.get_summary(),
            'Sol2Ink warnings: 2 assembly, 1 parse error',
        )


if __name__ == '__main__':
    unittest.main(verbosity=2)
