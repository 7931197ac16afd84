"""
Function generation for IR to ink! lowering.

This module handles the generation of Rust code from IR functions and
everything that has a function shape in the output: trait headers, getters,
modifiers, event-emission shims and the constructor.
"""

from typing import List, Tuple as TupleType, TYPE_CHECKING

if TYPE_CHECKING:
    from .context import CodeGenerationContext
    from .expression import ExpressionGenerator
    from .statement import StatementGenerator
    from .type_converter import TypeConverter

from .base import BaseGenerator
from .stream import BLANK_MARKER
from ..ir.nodes import (
    Function,
    FunctionHeader,
    FunctionParam,
    Modifier,
    ModifierPlaceholder,
    ContractField,
    Event,
    Statement,
    Return,
    Revert,
    If,
    Block,
    Expression,
    FunctionCall,
    Variable,
    Mapping,
)


class FunctionGenerator(BaseGenerator):
    """
    Generates Rust code from IR functions.

    This class handles:
    - Function bodies (external, internal and library functions)
    - Function headers for traits
    - Storage getters and their trait headers
    - Modifiers as higher-order wrapping functions
    - Event-emission shims
    - The contract constructor
    """

    def __init__(
        self,
        ctx: 'CodeGenerationContext',
        expr_generator: 'ExpressionGenerator',
        stmt_generator: 'StatementGenerator',
        type_converter: 'TypeConverter',
    ):
        """
        Initialize the function generator.

        Args:
            ctx: The code generation context
            expr_generator: The expression generator
            stmt_generator: The statement generator
            type_converter: The type converter
        """
        super().__init__(ctx)
        self._expr = expr_generator
        self._stmt = stmt_generator
        self._type_converter = type_converter

    def _blank(self) -> str:
        return f'{self.indent()}{BLANK_MARKER}'

    # =========================================================================
    # SIGNATURES
    # =========================================================================

    def _function_name(self, header: FunctionHeader) -> str:
        """External functions keep their name; internal ones get a `_` prefix."""
        if header.external or self._ctx.is_library:
            return self.value_name(header.name)
        return f'_{self.value_name(header.name)}'

    def _generate_params(self, params: List[FunctionParam]) -> List[str]:
        return [
            f'{self.value_name(p.name)}: {self._type_converter.ir_type_to_rust(p.param_type)}'
            for p in params
        ]

    def _generate_signature(self, header: FunctionHeader, with_receiver: bool = True) -> str:
        params = self._generate_params(header.params)
        if with_receiver:
            params.insert(0, '&self' if header.view else '&mut self')
        result = self._type_converter.result_type(header.return_params)
        return f'fn {self._function_name(header)}({", ".join(params)}) -> {result}'

    def _message_attribute(self, header: FunctionHeader) -> str:
        if header.payable:
            return '#[ink(message, payable)]'
        return '#[ink(message)]'

    def generate_function_header(self, header: FunctionHeader) -> str:
        """Generate a trait method declaration (no body).

        External functions are ink! messages; internal ones are not.
        """
        lines = self.doc_lines(header.comments)
        if header.external:
            lines.append(f'{self.indent()}{self._message_attribute(header)}')
        lines.append(f'{self.indent()}{self._generate_signature(header)};')
        lines.append(self._blank())
        return '\n'.join(lines)

    def generate_function_headers(self, headers: List[FunctionHeader]) -> str:
        return '\n'.join(self.generate_function_header(h) for h in headers)

    # =========================================================================
    # FUNCTIONS
    # =========================================================================

    def _modifier_attribute(self, modifier: Expression) -> str:
        """Generate `#[modifiers(name(args))]` for a modifier applied to a function."""
        if isinstance(modifier, FunctionCall) and isinstance(modifier.function, Variable):
            name = self.value_name(modifier.function.name)
            return f'#[modifiers({name}({self._expr.generate_arguments(modifier.arguments)}))]'
        if isinstance(modifier, Variable):
            return f'#[modifiers({self.value_name(modifier.name)})]'
        return f'#[modifiers({self._expr.generate(modifier)})]'

    def generate_function(self, func: Function) -> str:
        """Generate a function with its body.

        Named return parameters are declared up front and returned at the
        end unless every path already returns.
        """
        header = func.header
        named_returns = [p.name for p in header.return_params if p.name != '_']
        self._ctx.enter_function(header.name, named_returns=named_returns)

        lines = self.doc_lines(header.comments)
        for modifier in header.modifiers:
            lines.append(f'{self.indent()}{self._modifier_attribute(modifier)}')

        if self._ctx.is_library:
            signature = f'pub {self._generate_signature(header, with_receiver=False)}'
        elif header.external:
            signature = self._generate_signature(header)
        else:
            signature = f'default {self._generate_signature(header)}'
        lines.append(f'{self.indent()}{signature} {{')

        self.indent_level += 1
        for name in named_returns:
            lines.append(f'{self.indent()}let mut {self.value_name(name)} = Default::default();')
        lines.extend(self._stmt.generate_statements(func.body))
        if not self._all_paths_return(func.body):
            if not header.return_params:
                lines.append(f'{self.indent()}Ok(())')
            elif named_returns and len(named_returns) == len(header.return_params):
                lines.append(f'{self.indent()}Ok({self._stmt.named_return_value()})')
        self.indent_level -= 1

        lines.append(f'{self.indent()}}}')
        lines.append(self._blank())
        self._ctx.leave_function()
        return '\n'.join(lines)

    def generate_functions(self, functions: List[Function]) -> str:
        return '\n'.join(self.generate_function(f) for f in functions)

    def _all_paths_return(self, statements: List[Statement]) -> bool:
        """Check if all code paths through statements end with a return or revert."""
        if not statements:
            return False

        last_stmt = statements[-1]

        if isinstance(last_stmt, (Return, Revert)):
            return True

        if isinstance(last_stmt, Block):
            return self._all_paths_return(last_stmt.statements)

        if isinstance(last_stmt, If):
            if last_stmt.if_false is None:
                return False
            return (self._all_paths_return([last_stmt.if_true])
                    and self._all_paths_return([last_stmt.if_false]))

        return False

    # =========================================================================
    # GETTERS
    # =========================================================================

    def _getter_parts(self, storage_field: ContractField) -> TupleType[List[str], str, str]:
        """Return the parameters, return type and body expression of a getter.

        Maps cannot be returned whole; their getter takes the key instead.
        """
        name = self.value_name(storage_field.name)
        field_type = storage_field.field_type
        access = f'self.data().{name}'

        if isinstance(field_type, Mapping):
            key_types = [self._type_converter.ir_type_to_rust(k) for k in field_type.keys]
            if len(key_types) == 1:
                params = [f'key: {key_types[0]}']
                key = 'key'
            else:
                params = [f'key_{i}: {t}' for i, t in enumerate(key_types)]
                key = f'({", ".join(f"key_{i}" for i in range(len(key_types)))})'
            value_type = self._type_converter.ir_type_to_rust(field_type.value)
            return params, value_type, f'{access}.get(&{key}).unwrap_or_default()'

        rust_type = self._type_converter.ir_type_to_rust(field_type)
        if self._type_converter.needs_clone(field_type):
            access += '.clone()'
        return [], rust_type, access

    @staticmethod
    def getter_fields(fields: List[ContractField]) -> List[ContractField]:
        """Fields that get an accessor: public and not constant."""
        return [f for f in fields if f.public and not f.constant]

    def generate_getter(self, storage_field: ContractField) -> str:
        params, rust_type, body = self._getter_parts(storage_field)
        name = self.value_name(storage_field.name)
        return '\n'.join([
            f'{self.indent()}fn {name}({", ".join(["&self"] + params)}) -> {rust_type} {{',
            f'{self.indent()}    {body}',
            f'{self.indent()}}}',
            self._blank(),
        ])

    def generate_getter_header(self, storage_field: ContractField) -> str:
        params, rust_type, _ = self._getter_parts(storage_field)
        name = self.value_name(storage_field.name)
        return '\n'.join([
            f'{self.indent()}#[ink(message)]',
            f'{self.indent()}fn {name}({", ".join(["&self"] + params)}) -> {rust_type};',
            self._blank(),
        ])

    def generate_getters(self, fields: List[ContractField]) -> str:
        return '\n'.join(self.generate_getter(f) for f in self.getter_fields(fields))

    def generate_getter_headers(self, fields: List[ContractField]) -> str:
        return '\n'.join(self.generate_getter_header(f) for f in self.getter_fields(fields))

    # =========================================================================
    # MODIFIERS
    # =========================================================================

    def generate_modifier(self, modifier: Modifier, trait_name: str) -> str:
        """Generate a modifier as a function wrapping its continuation `body`.

        Statements before the placeholder run first, then the continuation,
        then the statements after it; the continuation's result is returned.
        A modifier that returns early never calls the continuation.
        """
        self._ctx.enter_function(modifier.header.name, receiver='instance')
        params = ['instance: &mut T', 'body: F'] + self._generate_params(modifier.header.params)

        lines = self.doc_lines(modifier.comments)
        lines.append(f'{self.indent()}#[modifier_definition]')
        lines.append(
            f'{self.indent()}pub fn {self.value_name(modifier.header.name)}<T, F, R>'
            f'({", ".join(params)}) -> Result<R, Error>'
        )
        lines.append(f'{self.indent()}where')
        lines.append(f'{self.indent()}    T: {trait_name},')
        lines.append(f'{self.indent()}    F: FnOnce(&mut T) -> Result<R, Error>,')
        lines.append(f'{self.indent()}{{')

        self.indent_level += 1
        placeholder = next(
            (i for i, s in enumerate(modifier.statements) if isinstance(s, ModifierPlaceholder)),
            None,
        )
        if placeholder is None:
            lines.extend(self._stmt.generate_statements(modifier.statements))
            lines.append(f'{self.indent()}body(instance)')
        else:
            lines.extend(self._stmt.generate_statements(modifier.statements[:placeholder]))
            lines.append(f'{self.indent()}let result = body(instance);')
            lines.extend(self._stmt.generate_statements(modifier.statements[placeholder + 1:]))
            lines.append(f'{self.indent()}result')
        self.indent_level -= 1

        lines.append(f'{self.indent()}}}')
        lines.append(self._blank())
        self._ctx.leave_function()
        return '\n'.join(lines)

    def generate_modifiers(self, modifiers: List[Modifier], trait_name: str) -> str:
        return '\n'.join(self.generate_modifier(m, trait_name) for m in modifiers)

    # =========================================================================
    # EMIT SHIMS
    # =========================================================================

    def _emit_name(self, event: Event) -> str:
        return f'_emit_{self.value_name(event.name)}'

    def _event_params(self, event: Event) -> List[str]:
        return [
            f'{self.value_name(f.name)}: {self._type_converter.ir_type_to_rust(f.field_type)}'
            for f in event.fields
        ]

    def generate_emit_header(self, event: Event) -> str:
        """Generate `fn _emit_e(&self, fields...);` for the Internal trait."""
        params = ', '.join(['&self'] + self._event_params(event))
        return f'{self.indent()}fn {self._emit_name(event)}({params});\n{self._blank()}'

    def generate_default_emit(self, event: Event) -> str:
        """Generate the no-op default used where no concrete environment exists."""
        unnamed = [f'_: {self._type_converter.ir_type_to_rust(f.field_type)}' for f in event.fields]
        params = ', '.join(['&self'] + unnamed)
        return f'{self.indent()}default fn {self._emit_name(event)}({params}) {{}}\n{self._blank()}'

    def generate_contract_emit(self, event: Event) -> str:
        """Generate the contract-level shim dispatching the event to the environment."""
        params = ', '.join(['&self'] + self._event_params(event))
        fields = ', '.join(self.value_name(f.name) for f in event.fields)
        event_value = f'{self.type_name(event.name)} {{ {fields} }}' if fields else self.type_name(event.name)
        return '\n'.join([
            f'{self.indent()}fn {self._emit_name(event)}({params}) {{',
            f'{self.indent()}    self.env().emit_event({event_value});',
            f'{self.indent()}}}',
            self._blank(),
        ])

    def generate_emit_headers(self, events: List[Event]) -> str:
        return '\n'.join(self.generate_emit_header(e) for e in events)

    def generate_default_emits(self, events: List[Event]) -> str:
        return '\n'.join(self.generate_default_emit(e) for e in events)

    def generate_contract_emits(self, events: List[Event]) -> str:
        return '\n'.join(self.generate_contract_emit(e) for e in events)

    # =========================================================================
    # CONSTRUCTOR
    # =========================================================================

    def generate_constructor(self, constructor: Function, fields: List[ContractField]) -> str:
        """Generate the #[ink(constructor)] initializing the contract storage.

        Field initializers run before the constructor body.
        """
        self._ctx.enter_function('constructor', receiver='instance')
        params = ', '.join(self._generate_params(constructor.header.params))

        lines = self.doc_lines(constructor.header.comments)
        lines.append(f'{self.indent()}#[ink(constructor)]')
        lines.append(f'{self.indent()}pub fn new({params}) -> Self {{')
        lines.append(f'{self.indent()}    ink_lang::codegen::initialize_contract(|instance: &mut Self| {{')

        self.indent_level += 2
        for storage_field in fields:
            if storage_field.constant or storage_field.initial_value is None:
                continue
            value = self._expr.generate(storage_field.initial_value)
            lines.append(f'{self.indent()}{self.storage_access(storage_field.name)} = {value};')
        lines.extend(self._stmt.generate_statements(constructor.body))
        self.indent_level -= 2

        lines.append(f'{self.indent()}    }})')
        lines.append(f'{self.indent()}}}')
        self._ctx.leave_function()
        return '\n'.join(lines)
