"""Template prompt rendering with Jinja2.

Templates load from the prompt's base directory and render against the
context built from one structured data file. The environment keeps trailing
newlines and uses ``StrictUndefined``: a reference to a name missing from the
context fails the render instead of producing empty text.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    TemplateNotFound,
)

from prompt_assembler.errors import TemplateNotFoundError, TemplateRenderError

from .data import build_context, load_structured_data

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from jinja2 import Template

    from prompt_assembler.types import StructuredData

log = logging.getLogger(__name__)


def create_environment(base_dir: Path) -> Environment:
    """Build an environment that loads templates from ``base_dir``."""
    return Environment(  # nosec B701 - renders plain-text prompts, not HTML
        loader=FileSystemLoader(str(base_dir)),
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
    )


def load_template(env: Environment, prompt_name: str, template: Path) -> Template:
    """Fetch ``template`` from ``env``.

    Raises:
        TemplateNotFoundError: The template does not exist.
        TemplateRenderError: The template exists but does not compile.
    """
    name = template.as_posix()
    try:
        return env.get_template(name)
    except TemplateNotFound as e:
        raise TemplateNotFoundError(
            f"prompt '{prompt_name}' template '{name}' not found"
        ) from e
    except (TemplateError, UnicodeDecodeError) as e:
        raise TemplateRenderError(
            f"compiling template '{name}' for prompt '{prompt_name}': {e}"
        ) from e


def render_template(
    prompt_name: str,
    base_dir: Path,
    template: Path,
    data: StructuredData,
    args: Sequence[str] = (),
) -> str:
    """Render a template prompt.

    The template is located before the data file is read. A data root that is
    not a mapping is wrapped under ``value``; ``args`` appear under ``_args``.

    Raises:
        TemplateNotFoundError: The template does not exist.
        DataFileError: The data file is missing or malformed.
        TemplateRenderError: Compilation or rendering failed.
    """
    env = create_environment(base_dir)
    compiled = load_template(env, prompt_name, template)

    context = build_context(load_structured_data(data), args)

    try:
        rendered = compiled.render(context)
    except Exception as e:
        raise TemplateRenderError(
            f"rendering template '{template.as_posix()}' for prompt "
            f"'{prompt_name}': {e}"
        ) from e

    log.debug("Rendered template %s for prompt %r", template, prompt_name)
    return rendered
