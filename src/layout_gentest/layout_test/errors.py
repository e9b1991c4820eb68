"""Error taxonomy for layout-test generation.

Every error raised by the generator derives from ``GentestError`` so that the
pipeline can fail one fixture without affecting the others.
"""


class GentestError(Exception):
    """Base class for all layout-test generation errors."""


class NodeReferenceError(GentestError):
    """An instruction references an undeclared, duplicated or already-parented node."""

    def __init__(self, node_id: str, message: str):
        self.node_id = node_id
        super().__init__(f"{message}: '{node_id}'")


class ScopeStateError(GentestError):
    """Prologue/epilogue calls are unbalanced or an instruction is out of scope."""


class EmptyProgramError(ScopeStateError):
    """The instruction sequence has nothing to render."""


class ExtractionError(GentestError):
    """The browser produced zero, several or malformed diagnostic payloads."""


class ConfigurationError(GentestError):
    """The configuration names something that does not exist."""
