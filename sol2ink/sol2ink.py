#!/usr/bin/env python3
"""
Sol2Ink compiler driver.

This driver turns JSON-encoded IR aggregates, as produced by the front-end,
into the source tree of an ink!/OpenBrush project:

- contracts/<name>/lib.rs: the runnable contract module
- src/impls/<name>.rs: the default implementation of the contract's trait
- src/traits/<name>.rs: the contract's trait (and the trait of an interface)
- src/libs/<name>.rs: the free functions of a library
- src/lib.rs: the crate root

Usage:
    sol2ink ir/ -o generated/
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

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
from .codegen.naming import to_snake_case
from .exceptions import Sol2InkError
from .ir import load_aggregate_file
from .type_system import aggregate_kind


logger = logging.getLogger(__name__)

CRATE_ROOT = Path('src') / 'lib.rs'


class Sol2InkCompiler:
    """Main compiler class that maps IR aggregates to artifact files."""

    def __init__(
        self,
        source_dir: str = '.',
        output_dir: str = './generated',
        signature: Optional[ToolSignature] = None,
        verbose: bool = False,
    ):
        self.source_dir = Path(source_dir)
        self.output_dir = Path(output_dir)
        self.signature = signature or ToolSignature()
        self.diagnostics = TranspilerDiagnostics(verbose=verbose)

    def compile_aggregate(self, aggregate) -> Dict[Path, TokenStream]:
        """Assemble every artifact of one aggregate, keyed by relative path.

        Raises:
            TypeError: If the aggregate is not a Contract, Library or Interface
        """
        kind = aggregate_kind(aggregate)
        snake = to_snake_case(aggregate.name)
        args = (aggregate, self.signature, self.diagnostics)

        if kind == 'contract':
            return {
                Path('contracts') / snake / 'lib.rs': assemble_contract(*args),
                Path('src') / 'impls' / f'{snake}.rs': assemble_impl(*args),
                Path('src') / 'traits' / f'{snake}.rs': assemble_trait(*args),
            }
        if kind == 'interface':
            return {Path('src') / 'traits' / f'{snake}.rs': assemble_interface(*args)}
        return {Path('src') / 'libs' / f'{snake}.rs': assemble_library(*args)}

    def compile_file(self, filepath: str) -> Dict[Path, TokenStream]:
        """Load one IR document and assemble its artifacts."""
        logger.debug('Loading IR from %s', filepath)
        return self.compile_aggregate(load_aggregate_file(filepath))

    def compile_directory(self, pattern: str = '**/*.json') -> Dict[Path, TokenStream]:
        """Compile all IR documents matching the pattern, plus the crate root.

        A document that fails to load or violates the IR contract is logged
        and skipped; the other documents are still compiled.
        """
        results: Dict[Path, TokenStream] = {}
        for ir_file in sorted(self.source_dir.glob(pattern)):
            try:
                results.update(self.compile_file(str(ir_file)))
            except Sol2InkError as e:
                logger.error('Error compiling %s: %s', ir_file, e)
        if results:
            results[CRATE_ROOT] = assemble_lib(self.signature)
        return results

    def write_output(self, results: Dict[Path, TokenStream]) -> List[Path]:
        """Write assembled artifacts below the output directory."""
        written = []
        for rel_path, stream in sorted(results.items()):
            path = self.output_dir / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w') as f:
                f.write(str(stream))
            logger.info('Written: %s', path)
            self.diagnostics.info_artifact_written(str(rel_path), str(path))
            written.append(path)
        return written


# =============================================================================
# CLI INTERFACE
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    import argparse

    parser = argparse.ArgumentParser(description='Sol2Ink: IR to ink! compiler')
    parser.add_argument('input', help='Input IR JSON file or directory')
    parser.add_argument('-o', '--output', default='generated', help='Output directory')
    parser.add_argument('--stdout', action='store_true', help='Print to stdout instead of files')
    parser.add_argument('--pattern', default='**/*.json',
                        help='Glob of IR documents when the input is a directory')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Debug logging and per-construct diagnostics')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s',
    )

    input_path = Path(args.input)
    if input_path.is_file():
        compiler = Sol2InkCompiler(str(input_path.parent), args.output, verbose=args.verbose)
        try:
            results = compiler.compile_file(str(input_path))
        except Sol2InkError as e:
            logger.error('Error compiling %s: %s', input_path, e)
            return 1
        results[CRATE_ROOT] = assemble_lib(compiler.signature)
    elif input_path.is_dir():
        compiler = Sol2InkCompiler(str(input_path), args.output, verbose=args.verbose)
        results = compiler.compile_directory(args.pattern)
    else:
        logger.error('%s is not a valid file or directory', args.input)
        return 1

    if args.stdout:
        for rel_path, stream in sorted(results.items()):
            print(f'// {rel_path}')
            print(stream)
    else:
        compiler.write_output(results)

    compiler.diagnostics.print_summary()
    return 0


if __name__ == '__main__':
    sys.exit(main())
