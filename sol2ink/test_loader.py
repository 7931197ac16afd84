#!/usr/bin/env python3
"""
Unit tests for IR loading, token streams and the compiler driver.

Run with: python3 -m pytest sol2ink/test_loader.py
"""

import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path

from sol2ink import Sol2InkCompiler
from sol2ink.codegen import TokenStream, BLANK_MARKER
from sol2ink.codegen.diagnostics import TranspilerDiagnostics
from sol2ink.exceptions import IRLoadError, Sol2InkError
from sol2ink.ir import (
    Contract,
    Interface,
    Library,
    Mapping,
    AccountId,
    Uint,
    Operation,
    Assign,
    load_aggregate,
    load_aggregate_file,
)
from sol2ink.lexer import Lexer, TokenType
from sol2ink.sol2ink import main


TOKEN_DOCUMENT = {
    'kind': 'Contract',
    'name': 'Token',
    'fields': [
        {
            'kind': 'ContractField',
            'name': 'balances',
            'field_type': {
                'kind': 'Mapping',
                'keys': [{'kind': 'AccountId'}],
                'value': {'kind': 'Uint', 'size': 256},
            },
            'public': True,
        },
    ],
    'functions': [
        {
            'kind': 'Function',
            'header': {
                'kind': 'FunctionHeader',
                'name': 'mint',
                'external': True,
                'params': [
                    {'kind': 'FunctionParam', 'name': 'to', 'param_type': {'kind': 'AccountId'}},
                ],
            },
            'body': [
                {
                    'kind': 'ExpressionStatement',
                    'expression': {
                        'kind': 'Assign',
                        'target': {
                            'kind': 'MappingSubscript',
                            'mapping': {'kind': 'Variable', 'name': 'balances', 'is_storage': True},
                            'keys': [{'kind': 'Variable', 'name': 'to'}],
                        },
                        'value': {'kind': 'NumberLiteral', 'value': '1'},
                        'operation': 'ADD_ASSIGN',
                    },
                },
            ],
        },
    ],
    'imports': ['use ink_prelude::vec::Vec;'],
}

LIBRARY_DOCUMENT = {'kind': 'Library', 'name': 'SafeMath'}

INTERFACE_DOCUMENT = {
    'kind': 'Interface',
    'name': 'IToken',
    'function_headers': [{'kind': 'FunctionHeader', 'name': 'mint', 'external': True}],
}


class TestLoadAggregate(unittest.TestCase):
    """Test building IR aggregates from JSON documents."""

    def test_contract(self):
        contract = load_aggregate(TOKEN_DOCUMENT)
        self.assertIsInstance(contract, Contract)
        self.assertEqual(contract.name, 'Token')
        self.assertEqual(contract.fields[0].field_type, Mapping([AccountId()], Uint(256)))
        self.assertTrue(contract.fields[0].public)
        self.assertEqual(contract.imports, {'use ink_prelude::vec::Vec;'})

    def test_operation_by_name(self):
        contract = load_aggregate(TOKEN_DOCUMENT)
        expression = contract.functions[0].body[0].expression
        self.assertIsInstance(expression, Assign)
        self.assertEqual(expression.operation, Operation.ADD_ASSIGN)

    def test_defaults(self):
        contract = load_aggregate({'kind': 'Contract', 'name': 'Empty'})
        self.assertEqual(contract.fields, [])
        self.assertEqual(contract.constructor.header.name, 'constructor')
        self.assertIsInstance(load_aggregate(LIBRARY_DOCUMENT), Library)
        self.assertIsInstance(load_aggregate(INTERFACE_DOCUMENT), Interface)

    def test_top_level_must_be_aggregate(self):
        with self.assertRaises(IRLoadError):
            load_aggregate({'kind': 'Event', 'name': 'Transfer'})
        with self.assertRaises(IRLoadError):
            load_aggregate(['Contract'])

    def test_unknown_kind(self):
        document = {'kind': 'Contract', 'name': 'X', 'fields': [{'kind': 'Slot'}]}
        with self.assertRaisesRegex(IRLoadError, "unknown node kind 'Slot'"):
            load_aggregate(document)

    def test_unknown_field(self):
        document = {'kind': 'Contract', 'name': 'X', 'owner': 'alice'}
        with self.assertRaisesRegex(IRLoadError, "has no field 'owner'"):
            load_aggregate(document)

    def test_unknown_operation(self):
        document = json.loads(json.dumps(TOKEN_DOCUMENT))
        document['functions'][0]['body'][0]['expression']['operation'] = 'SPACESHIP'
        with self.assertRaisesRegex(IRLoadError, 'unknown operation'):
            load_aggregate(document)

    def test_missing_required_field(self):
        with self.assertRaises(IRLoadError):
            load_aggregate({'kind': 'Contract'})

    def test_errors_share_base_class(self):
        self.assertTrue(issubclass(IRLoadError, Sol2InkError))

    def test_load_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'token.json')
            with open(path, 'w') as f:
                json.dump(TOKEN_DOCUMENT, f)
            self.assertEqual(load_aggregate_file(path).name, 'Token')

    def test_load_invalid_json(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'broken.json')
            with open(path, 'w') as f:
                f.write('{"kind": ')
            with self.assertRaisesRegex(IRLoadError, 'invalid JSON'):
                load_aggregate_file(path)

    def test_load_non_utf8(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'latin.json')
            with open(path, 'wb') as f:
                f.write(b'{"kind": "Contract", "name": "\xff\xfe"}')
            with self.assertRaisesRegex(IRLoadError, 'not UTF-8'):
                load_aggregate_file(path)

    def test_load_missing_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaisesRegex(IRLoadError, 'cannot read'):
                load_aggregate_file(os.path.join(tmp, 'absent.json'))


class TestLexer(unittest.TestCase):
    """Test tokenization of emitted Rust."""

    def test_keywords_and_paths(self):
        tokens = Lexer('pub fn new() -> Self { openbrush::traits }').tokenize()
        types = [t.type for t in tokens]
        self.assertEqual(types[0], TokenType.PUB)
        self.assertEqual(types[1], TokenType.FN)
        self.assertIn(TokenType.THIN_ARROW, types)
        self.assertIn(TokenType.SELF_TYPE, types)
        self.assertIn(TokenType.COLON_COLON, types)
        self.assertEqual(types[-1], TokenType.EOF)

    def test_strings_hide_delimiters(self):
        tokens = Lexer('_comment_!("unbalanced ( { [");').tokenize()
        strings = [t for t in tokens if t.type == TokenType.STRING_LITERAL]
        self.assertEqual(len(strings), 1)
        self.assertEqual(strings[0].value, '"unbalanced ( { ["')

    def test_nested_block_comments(self):
        tokens = Lexer('/* outer /* inner */ still comment */ x').tokenize()
        self.assertEqual([t.value for t in tokens], ['x', ''])

    def test_numbers_with_suffix(self):
        tokens = Lexer('1_000u128 0xff 2 as u32').tokenize()
        self.assertEqual(tokens[0].value, '1_000u128')
        self.assertEqual(tokens[1].type, TokenType.HEX_NUMBER)
        self.assertEqual(tokens[3].type, TokenType.AS)

    def test_char_literals_and_lifetimes(self):
        tokens = Lexer("fn f<'a>(c: &'a str) { let x = 'y'; let n = '\\n'; }").tokenize()
        lifetimes = [t.value for t in tokens if t.type == TokenType.LIFETIME]
        chars = [t.value for t in tokens if t.type == TokenType.CHAR_LITERAL]
        self.assertEqual(lifetimes, ["'a", "'a"])
        self.assertEqual(chars, ["'y'", "'\\n'"])

    def test_raw_and_byte_strings(self):
        tokens = Lexer('r#"a "quoted" ("#; b"xy"; r"z"').tokenize()
        strings = [t.value for t in tokens if t.type == TokenType.STRING_LITERAL]
        self.assertEqual(strings, ['r#"a "quoted" ("#', 'b"xy"', 'r"z"'])

    def test_raw_identifier(self):
        tokens = Lexer('r#type').tokenize()
        self.assertEqual(tokens[0].type, TokenType.IDENTIFIER)
        self.assertEqual(tokens[0].value, 'type')

    def test_three_char_operators(self):
        tokens = Lexer('x <<= 1; 0..=n').tokenize()
        types = [t.type for t in tokens]
        self.assertIn(TokenType.LT_LT_EQ, types)
        self.assertIn(TokenType.DOT_DOT_EQ, types)

    def test_positions(self):
        tokens = Lexer('a\n  b').tokenize()
        self.assertEqual((tokens[1].line, tokens[1].column), (2, 3))


class TestTokenStream(unittest.TestCase):
    """Test the artifact container."""

    def test_append_splits_lines(self):
        stream = TokenStream().append('a\nb').append('').blank()
        self.assertEqual(stream.lines, ['a', 'b', BLANK_MARKER])
        self.assertEqual(str(stream), f'a\nb\n{BLANK_MARKER}\n')

    def test_lines_is_a_copy(self):
        stream = TokenStream(['x'])
        stream.lines.append('y')
        self.assertEqual(stream.lines, ['x'])

    def test_equality(self):
        self.assertEqual(TokenStream(['a']), TokenStream(['a']))
        self.assertNotEqual(TokenStream(['a']), TokenStream(['b']))
        self.assertEqual(hash(TokenStream(['a'])), hash(TokenStream(['a'])))
        self.assertIn('fn x', TokenStream(['pub fn x() {}']))

    def test_check_balanced(self):
        self.assertTrue(TokenStream(['fn f() { let v = vec![1]; }']).check_balanced())
        self.assertFalse(TokenStream(['fn f() { ']).check_balanced())
        self.assertFalse(TokenStream(['fn f( }']).check_balanced())
        self.assertFalse(TokenStream(['}']).check_balanced())


class TestDiagnostics(unittest.TestCase):
    """Test the diagnostics collector."""

    def test_summary(self):
        diagnostics = TranspilerDiagnostics()
        self.assertEqual(diagnostics.get_summary(), 'No Sol2Ink warnings.')
        diagnostics.warn_unimplemented('assembly', 'Token.f')
        diagnostics.warn_manual_review('unchecked block', 'Token.g')
        self.assertEqual(diagnostics.count, 2)
        self.assertEqual(
            diagnostics.get_summary(),
            'Sol2Ink warnings: 1 assembly, 1 unchecked block',
        )

    def test_print_summary(self):
        diagnostics = TranspilerDiagnostics(verbose=True)
        diagnostics.warn_unknown_event('Approval', 'Token.approve')
        out = io.StringIO()
        diagnostics.print_summary(file=out)
        self.assertIn('Sol2Ink warnings (1):', out.getvalue())
        self.assertIn('Approval', out.getvalue())

    def test_unimplemented_detail(self):
        diagnostics = TranspilerDiagnostics()
        diagnostics.warn_unimplemented('new', 'Factory.deploy', 'contract deployment')
        self.assertEqual(diagnostics.warnings[0].code, 'W001')
        self.assertIn('(contract deployment)', diagnostics.warnings[0].message)


class TestCompiler(unittest.TestCase):
    """Test artifact paths and file output of the compiler driver."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.source = self.tmp / 'ir'
        self.source.mkdir()
        for name, document in [
            ('token.json', TOKEN_DOCUMENT),
            ('safe_math.json', LIBRARY_DOCUMENT),
            ('i_token.json', INTERFACE_DOCUMENT),
        ]:
            with open(self.source / name, 'w') as f:
                json.dump(document, f)
        self.output = self.tmp / 'out'

    def tearDown(self):
        self._tmp.cleanup()

    def test_artifact_paths(self):
        compiler = Sol2InkCompiler(str(self.source), str(self.output))
        results = compiler.compile_directory()
        self.assertEqual(
            sorted(str(p) for p in results),
            sorted(str(Path(p)) for p in [
                'contracts/token/lib.rs',
                'src/impls/token.rs',
                'src/traits/token.rs',
                'src/traits/i_token.rs',
                'src/libs/safe_math.rs',
                'src/lib.rs',
            ]),
        )

    def test_bad_documents_are_skipped(self):
        with open(self.source / 'broken.json', 'w') as f:
            f.write('not json')
        compiler = Sol2InkCompiler(str(self.source), str(self.output))
        with self.assertLogs('sol2ink.sol2ink', level='ERROR'):
            results = compiler.compile_directory()
        self.assertIn(Path('src') / 'impls' / 'token.rs', results)

    def test_non_utf8_documents_are_skipped(self):
        with open(self.source / 'latin.json', 'wb') as f:
            f.write(b'{"kind": "Contract", "name": "\xff\xfe"}')
        compiler = Sol2InkCompiler(str(self.source), str(self.output))
        with self.assertLogs('sol2ink.sol2ink', level='ERROR'):
            results = compiler.compile_directory()
        self.assertIn(Path('contracts') / 'token' / 'lib.rs', results)

    def test_write_output(self):
        compiler = Sol2InkCompiler(str(self.source), str(self.output))
        written = compiler.write_output(compiler.compile_directory())
        self.assertEqual(len(written), 6)
        impl = (self.output / 'src' / 'impls' / 'token.rs').read_text()
        self.assertIn('fn mint(&mut self, to: AccountId) -> Result<(), Error> {', impl)
        infos = [d for d in compiler.diagnostics.diagnostics if d.code == 'I001']
        self.assertEqual(len(infos), 6)

    def test_compile_aggregate_rejects_other_nodes(self):
        compiler = Sol2InkCompiler()
        with self.assertRaises(TypeError):
            compiler.compile_aggregate(AccountId())

    def test_cli_writes_files(self):
        exit_code = main([str(self.source), '-o', str(self.output)])
        self.assertEqual(exit_code, 0)
        self.assertTrue((self.output / 'src' / 'lib.rs').exists())
        self.assertTrue((self.output / 'contracts' / 'token' / 'lib.rs').exists())

    def test_cli_stdout(self):
        out = io.StringIO()
        with redirect_stdout(out):
            exit_code = main([str(self.source / 'token.json'), '--stdout'])
        self.assertEqual(exit_code, 0)
        self.assertIn('pub mod token {', out.getvalue())
        self.assertFalse(self.output.exists())

    def test_cli_missing_input(self):
        self.assertEqual(main([str(self.tmp / 'missing')]), 1)


if __name__ == '__main__':
    unittest.main(verbosity=2)
