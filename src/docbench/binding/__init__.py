"""Harness-facing database bindings."""

from docbench.binding.base import Binding, Status
from docbench.binding.documentdb import DocumentDBBinding

__all__ = ["Binding", "DocumentDBBinding", "Status"]
