"""
Error Reporting

Single fatal error kind for normalization (PreconditionViolation), plus the
metadata-definition and internal error types. Errors propagate to the caller;
nothing in exprnorm catches them.
"""

import os
import sys
from typing import Any, List, Optional

from ..utils.config import (
    PRECONDITION_VIOLATION_CODE,
    IMPLEMENTATION_ERROR_CODE,
    ERROR_NOTE_PREFIX,
)


# ---------------------------------------------------------------------------
# ANSI color helpers: off under NO_COLOR, forced by EXPRNORM_COLOR, otherwise
# only when stderr is a terminal
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    explicit = os.environ.get("EXPRNORM_COLOR", "").lower()
    if explicit in ("0", "false", "no", "never"):
        return False
    if explicit in ("1", "true", "yes", "always"):
        return True
    isatty = getattr(sys.stderr, "isatty", None)
    return bool(isatty and isatty())

_BOLD   = "\033[1m"
_RED    = "\033[31m"
_CYAN   = "\033[36m"
_RESET  = "\033[0m"

def _style(text: str, *codes: str, color: bool = True) -> str:
    if not color:
        return text
    prefix = "".join(codes)
    return f"{prefix}{text}{_RESET}" if prefix else text


def _format_diagnostic(
    message: str,
    code: Optional[str],
    subject: Optional[str] = None,
    help: Optional[str] = None,
    note: Optional[str] = None,
    color: bool = False,
) -> str:
    """
    Render a diagnostic in rustc style.

    Example output (plain, no color)::

        error[E0601]: expression not supported: `get_Name` is not a property accessor
          | (call (parameter "x") "get_Name" ())
          = note: no instance property `Name` on `Person`
    """
    out: List[str] = []
    code_str = f"[{code}]" if code else ""
    out.append(
        _style(f"error{code_str}", _BOLD, _RED, color=color)
        + _style(f": {message}", _BOLD, color=color)
    )
    pad = "  "
    if subject:
        for line in subject.split("\n"):
            out.append(_style(f"{pad}| ", _BOLD, _CYAN, color=color) + line)
    if note:
        out.append(
            _style(f"{pad}{ERROR_NOTE_PREFIX}", _BOLD, _CYAN, color=color)
            + _style("note: ", _BOLD, color=color)
            + note
        )
    if help:
        out.append(
            _style(f"{pad}{ERROR_NOTE_PREFIX}", _BOLD, _CYAN, color=color)
            + _style("help: ", _BOLD, color=color)
            + help
        )
    return "\n".join(out)


# ============================================================================
# Exception Classes
# ============================================================================

class ExprNormError(Exception):
    """Base exception for all exprnorm errors"""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class PreconditionViolation(ExprNormError):
    """
    A call matched the getter/setter accessor shape (special-name, get_/set_
    prefix) but the metadata did not round-trip to the same method: either no
    property/indexer was found, or the one found is backed by another method.

    Fatal: normalization is aborted, no partial tree is returned. Embedding
    systems report it as "expression not supported".
    """
    def __init__(self,
                 message: str,
                 node: Optional[Any] = None,
                 method: Optional[Any] = None,
                 error_code: str = PRECONDITION_VIOLATION_CODE,
                 help: Optional[str] = None,
                 note: Optional[str] = None):
        super().__init__(message)
        self.node = node
        self.method = method
        self.error_code = error_code
        self.help_text = help
        self.note_text = note

    def __str__(self):
        subject = None
        if self.node is not None:
            from ..ir.serialization import serialize_ir
            subject = serialize_ir(self.node)
        return _format_diagnostic(
            self.message,
            self.error_code,
            subject=subject,
            help=self.help_text,
            note=self.note_text,
            color=_use_color(),
        )


class MetadataError(ExprNormError):
    """Invalid descriptor-table definition (duplicate member, bad signature)"""


class ExprNormImplementationError(Exception):
    """
    Error in exprnorm itself (not in the caller's expression tree).

    Use this for internal errors:
    - Visitor dispatch on a node kind nobody handles
    - Invalid internal state

    Never use this for unsupported input trees - use PreconditionViolation instead.
    """
    def __init__(self, message: str, error_code: str = IMPLEMENTATION_ERROR_CODE):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self):
        return f"[{self.error_code}] {self.message}"
