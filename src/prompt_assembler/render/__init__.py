"""Prompt rendering: fragment substitution and template rendering."""

from .data import ARGS_KEY, VALUE_KEY, build_context, load_structured_data
from .placeholders import ensure_trailing_newline, substitute_placeholders
from .template import create_environment, render_template

__all__ = [
    "ARGS_KEY",
    "VALUE_KEY",
    "build_context",
    "create_environment",
    "ensure_trailing_newline",
    "load_structured_data",
    "render_template",
    "substitute_placeholders",
]
