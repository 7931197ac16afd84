"""
Diagnostics raised while lowering IR into ink! artifacts.

Anything the code generator cannot translate becomes a `todo!()` marker in
the output and a W001 entry here; every marker has its entry, so finishing
a port starts from the printed summary. Codes:

    W001  construct lowered to a todo!() marker
    W002  emit of an event the aggregate does not declare
    W003  construct passed through that needs a human look
    I001  artifact written to disk
"""

import sys
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import List


class DiagnosticSeverity(Enum):
    WARNING = 'warning'
    INFO = 'info'


@dataclass
class Diagnostic:
    """One recorded finding, located as `Aggregate.member` where known."""
    severity: DiagnosticSeverity
    code: str
    message: str
    location: str = ''
    construct: str = ''

    def __str__(self) -> str:
        where = f'{self.location}: ' if self.location else ''
        return f'[{self.severity.value}] {where}{self.message} ({self.code})'


class TranspilerDiagnostics:
    """
    Shared collector threaded through every generator of a compilation.

    Usage:
        diag = TranspilerDiagnostics()
        diag.warn_unimplemented('assembly', 'Token.transfer')
        diag.print_summary()
    """

    def __init__(self, verbose: bool = False):
        self._diagnostics: List[Diagnostic] = []
        self._verbose = verbose

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return list(self._diagnostics)

    @property
    def warnings(self) -> List[Diagnostic]:
        return self._of(DiagnosticSeverity.WARNING)

    @property
    def count(self) -> int:
        return len(self._diagnostics)

    def _of(self, severity: DiagnosticSeverity) -> List[Diagnostic]:
        return [d for d in self._diagnostics if d.severity == severity]

    def _record(self, severity: DiagnosticSeverity, code: str, message: str,
                location: str, construct: str) -> None:
        self._diagnostics.append(Diagnostic(severity, code, message, location, construct))

    # =========================================================================
    # RECORDING
    # =========================================================================

    def warn_unimplemented(self, construct: str, location: str = '', detail: str = '') -> None:
        """Record a construct that became a todo!() marker."""
        suffix = f' ({detail})' if detail else ''
        self._record(
            DiagnosticSeverity.WARNING, 'W001',
            f'{construct} is not supported yet; emitted a todo!() marker{suffix}',
            location, construct,
        )

    def warn_unknown_event(self, event_name: str, location: str = '') -> None:
        self._record(
            DiagnosticSeverity.WARNING, 'W002',
            f'Event "{event_name}" is not declared here; '
            f'its emit helper must come from elsewhere.',
            location, 'emit',
        )

    def warn_manual_review(self, construct: str, location: str = '') -> None:
        self._record(
            DiagnosticSeverity.WARNING, 'W003',
            f'{construct} was passed through and needs manual review.',
            location, construct,
        )

    def info_artifact_written(self, location: str, path: str) -> None:
        self._record(DiagnosticSeverity.INFO, 'I001', f'Wrote {path}', location, 'artifact')

    # =========================================================================
    # REPORTING
    # =========================================================================

    def _warnings_by_construct(self) -> Counter:
        return Counter(w.construct or 'other' for w in self.warnings)

    def print_summary(self, file=None) -> None:
        """Write the grouped warnings (and, when verbose, every entry) to stderr or `file`."""
        out = file if file is not None else sys.stderr
        warnings = self.warnings
        if warnings:
            print(f'\nSol2Ink warnings ({len(warnings)}):', file=out)
            for construct, total in sorted(self._warnings_by_construct().items()):
                print(f'  {construct}: {total} occurrence(s)', file=out)
                if self._verbose:
                    for d in warnings:
                        if (d.construct or 'other') == construct:
                            print(f'    {d}', file=out)

        infos = self._of(DiagnosticSeverity.INFO)
        if infos and self._verbose:
            print(f'\nSol2Ink info ({len(infos)}):', file=out)
            for d in infos:
                print(f'  {d}', file=out)

    def get_summary(self) -> str:
        """One-line summary such as `Sol2Ink warnings: 2 assembly, 1 emit`."""
        grouped = self._warnings_by_construct()
        if not grouped:
            return 'No Sol2Ink warnings.'
        parts = ', '.join(f'{total} {construct}' for construct, total in sorted(grouped.items()))
        return f'Sol2Ink warnings: {parts}'
