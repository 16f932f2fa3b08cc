"""Server and client binders."""

from agreement.binders.context import CallContext, HeaderSupplier, Validator
from agreement.binders.diagnostics import BindingReport, Diagnostic, DiagnosticKind, Observer
from agreement.binders.server import implement
from agreement.binders.client import AgreementProxy, proxy

__all__ = [
    "CallContext",
    "HeaderSupplier",
    "Validator",
    "BindingReport",
    "Diagnostic",
    "DiagnosticKind",
    "Observer",
    "implement",
    "AgreementProxy",
    "proxy",
]
