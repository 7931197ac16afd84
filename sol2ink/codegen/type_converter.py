"""
Type conversion utilities for code generation.

This module provides the TypeConverter class that lowers IR types to Rust
types during code generation and builds the type-dependent expressions
(casts, return types, default values).
"""

from typing import List, Optional

from .base import BaseGenerator
from ..ir.nodes import Type, FunctionParam
from ..type_system import ir_type_to_rust, is_integer_type, needs_clone


class TypeConverter(BaseGenerator):
    """
    Handles IR to Rust type conversions.

    This class provides context-aware type conversion that:
    - Converts IR types to Rust types
    - Normalizes user type names
    - Builds return types from return parameter lists
    - Generates type cast expressions
    """

    # =========================================================================
    # MAIN TYPE CONVERSION
    # =========================================================================

    def ir_type_to_rust(self, ir_type: Optional[Type]) -> str:
        """Convert an IR type to a Rust type.

        Args:
            ir_type: The IR type node to convert

        Returns:
            The Rust type string
        """
        rust_type = ir_type_to_rust(ir_type, self.type_name)
        if rust_type.startswith('todo!'):
            return self.todo_marker('type', type(ir_type).__name__)
        return rust_type

    def return_type(self, return_params: List[FunctionParam]) -> str:
        """Build the success type of a function from its return parameters."""
        if not return_params:
            return '()'
        types = [self.ir_type_to_rust(param.param_type) for param in return_params]
        if len(types) == 1:
            return types[0]
        return f'({", ".join(types)})'

    def result_type(self, return_params: List[FunctionParam]) -> str:
        return f'Result<{self.return_type(return_params)}, Error>'

    def needs_clone(self, ir_type: Optional[Type]) -> bool:
        return needs_clone(ir_type)

    # =========================================================================
    # TYPE CASTS
    # =========================================================================

    def generate_type_cast(self, target: Type, value: str) -> str:
        """Generate a cast of an already lowered expression.

        Integer targets use `as`; everything else goes through `From`.
        """
        rust_type = self.ir_type_to_rust(target)
        if is_integer_type(rust_type):
            return f'({value} as {rust_type})'
        if rust_type.isidentifier():
            return f'{rust_type}::from({value})'
        # Generic and array types need the qualified path form
        return f'<{rust_type}>::from({value})'
