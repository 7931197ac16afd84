"""
Exceptions raised by the Sol2Ink compiler.

Constructs the compiler cannot translate yet are not errors: they lower to
`todo!()` markers and are reported through the diagnostics collector. The
exceptions here are for input the front-end should never have produced.
"""


class Sol2InkError(Exception):
    """Base class for all Sol2Ink errors."""


class IRContractError(Sol2InkError):
    """The IR violates the front-end contract (e.g. emit of a non-event call)."""


class IRLoadError(Sol2InkError):
    """A serialized IR document could not be turned into IR nodes."""
