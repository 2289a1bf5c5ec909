"""
Unit tests for error types and diagnostic rendering
"""

import io
import sys

from exprnorm.shared.errors import (
    ExprNormError, PreconditionViolation, MetadataError, ExprNormImplementationError,
)


class _Terminal(io.StringIO):
    def isatty(self):
        return True


class TestDiagnostics:
    def test_plain_rendering(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        err = PreconditionViolation("expression not supported: bad", note="n", help="h")
        assert str(err) == "error[E0601]: expression not supported: bad\n  = note: n\n  = help: h"

    def test_color_opt_out(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("EXPRNORM_COLOR", "never")
        assert "\033[" not in str(PreconditionViolation("x"))

    def test_no_color_when_not_a_terminal(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("EXPRNORM_COLOR", raising=False)
        monkeypatch.setattr(sys, "stderr", io.StringIO())
        assert "\033[" not in str(PreconditionViolation("x"))

    def test_color_on_terminal(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("EXPRNORM_COLOR", raising=False)
        monkeypatch.setattr(sys, "stderr", _Terminal())
        assert "\033[" in str(PreconditionViolation("x"))

    def test_color_forced(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("EXPRNORM_COLOR", "always")
        monkeypatch.setattr(sys, "stderr", io.StringIO())
        assert "\033[" in str(PreconditionViolation("x"))


class TestHierarchy:
    def test_user_facing_errors_share_base(self):
        assert issubclass(PreconditionViolation, ExprNormError)
        assert issubclass(MetadataError, ExprNormError)
        assert not issubclass(ExprNormImplementationError, ExprNormError)

    def test_implementation_error_code(self):
        assert str(ExprNormImplementationError("boom")) == "[E9999] boom"

    def test_message_attribute(self):
        assert MetadataError("dup").message == "dup"
        assert str(MetadataError("dup")) == "dup"
