"""Command-line interface for prompt-assembler.

Commands:
- ``list [--json]``: prompt names, or full metadata as JSON
- ``show NAME [--json]``: one prompt's metadata (JSON adds the raw files)
- ``validate [--json]``: every error and warning in the configuration
- ``parts FILE...``: raw concatenation of files, without substitution
- ``render NAME [ARG...]``: render a prompt to stdout

Exit codes: 0 success, 1 render or usage failure, 2 invalid configuration,
127 unreadable configuration file or directory.
"""

from __future__ import annotations

import argparse
from datetime import UTC, datetime
import json
import logging
from pathlib import Path
import sys
from typing import TYPE_CHECKING, Any

from prompt_assembler import __version__
from prompt_assembler.assembler import PromptAssembler
from prompt_assembler.config import ConfigDiagnostics, diagnostic_lines
from prompt_assembler.errors import (
    ConfigDirectoryError,
    ConfigReadError,
    DataRequiredError,
    InvalidConfigError,
    PromptAssemblerError,
    StructuredDataNotAcceptedError,
    UnknownPromptError,
)
from prompt_assembler.settings import load_settings
from prompt_assembler.types import StructuredData, TemplateKind

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from prompt_assembler.settings import Settings
    from prompt_assembler.types import PromptProfile, PromptSpec

SCHEMA_VERSION = 1

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_CONFIG = 2
EXIT_IO = 127


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        "prompt-assembler",
        description="Assemble prompts from a layered prompt library.",
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=None,
        help="configuration directory (default: $XDG_CONFIG_HOME/prompt-assembler)",
    )
    parser.add_argument("--log-level", default=None, help="logging level")

    sub = parser.add_subparsers(dest="cmd", required=True)

    p_list = sub.add_parser("list", help="list available prompts")
    p_list.add_argument("--json", action="store_true")

    p_show = sub.add_parser("show", help="show prompt metadata")
    p_show.add_argument("name", metavar="PROMPT")
    p_show.add_argument("--json", action="store_true")

    p_validate = sub.add_parser("validate", help="validate configuration files")
    p_validate.add_argument("--json", action="store_true")

    p_parts = sub.add_parser(
        "parts", help="concatenate raw prompt parts without substitution"
    )
    p_parts.add_argument("files", metavar="FILE", nargs="+")

    p_render = sub.add_parser("render", help="render a prompt")
    p_render.add_argument("name", metavar="PROMPT")
    p_render.add_argument("args", metavar="ARG", nargs=argparse.REMAINDER)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(
            {"config_dir": args.config_dir, "log_level": args.log_level}
        )
    except PromptAssemblerError as e:
        _emit_error(e)
        return EXIT_FAILURE

    logging.basicConfig(
        level=settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    handlers: dict[str, Callable[[argparse.Namespace, Settings], int]] = {
        "list": _cmd_list,
        "show": _cmd_show,
        "validate": _cmd_validate,
        "parts": _cmd_parts,
        "render": _cmd_render,
    }
    try:
        return handlers[args.cmd](args, settings)
    except InvalidConfigError as e:
        _emit_diagnostics(e.diagnostics)
        return EXIT_INVALID_CONFIG
    except (ConfigReadError, ConfigDirectoryError) as e:
        _emit_error(e)
        return EXIT_IO
    except PromptAssemblerError as e:
        _emit_error(e)
        return EXIT_FAILURE


# --- Commands ---


def _cmd_list(args: argparse.Namespace, settings: Settings) -> int:
    assembler = PromptAssembler.from_directory(settings.config_dir)
    if args.json:
        payload = _envelope(
            prompts=[
                _prompt_to_json(name, spec)
                for name, spec in assembler.prompt_specs().items()
            ]
        )
        _write_json(payload)
        return EXIT_OK

    if not _ensure_prompts(assembler):
        return EXIT_FAILURE
    for name in assembler.available_prompts():
        sys.stdout.write(name + "\n")
    return EXIT_OK


def _cmd_show(args: argparse.Namespace, settings: Settings) -> int:
    assembler = PromptAssembler.from_directory(settings.config_dir)
    spec = assembler.prompt_spec(args.name)
    if spec is None:
        sys.stderr.write(f"error: unknown prompt '{args.name}'\n")
        return EXIT_FAILURE

    if args.json:
        profile = assembler.prompt_profile(args.name)
        _write_json(_prompt_to_json(args.name, spec, profile))
    else:
        for line in _describe_prompt(args.name, spec):
            sys.stdout.write(line + "\n")
    return EXIT_OK


def _cmd_validate(args: argparse.Namespace, settings: Settings) -> int:
    try:
        assembler = PromptAssembler.from_directory(settings.config_dir)
    except InvalidConfigError as e:
        if args.json:
            _write_json(_envelope(**e.diagnostics.to_dict()))
        else:
            _emit_diagnostics(e.diagnostics)
        return EXIT_INVALID_CONFIG

    diagnostics = ConfigDiagnostics(warnings=assembler.warnings)
    if args.json:
        _write_json(_envelope(**diagnostics.to_dict()))
    else:
        _emit_diagnostics(diagnostics)
        sys.stdout.write("configuration is valid\n")
    return EXIT_OK


def _cmd_parts(args: argparse.Namespace, settings: Settings) -> int:
    assembler = PromptAssembler.from_directory(settings.config_dir)
    sys.stdout.write(assembler.assemble_parts(Path.cwd(), args.files))
    return EXIT_OK


def _cmd_render(args: argparse.Namespace, settings: Settings) -> int:
    assembler = PromptAssembler.from_directory(settings.config_dir)
    if not _ensure_prompts(assembler):
        return EXIT_FAILURE

    name: str = args.name
    spec = assembler.prompt_spec(name)
    if spec is None:
        raise UnknownPromptError(name)

    stdin_arg = _read_piped_stdin() if spec.stdin_supported else None
    positional = list(args.args)

    if isinstance(spec.kind, TemplateKind):
        if not positional:
            raise DataRequiredError(
                f"prompt '{name}' requires a data file (JSON or TOML)",
                hint="Pass a .json or .toml file as the first argument.",
            )
        data = StructuredData.from_path(positional.pop(0))
        if stdin_arg is not None:
            positional.insert(0, stdin_arg)
        output = assembler.render_prompt(name, positional, data)
    else:
        if stdin_arg is not None:
            positional.insert(0, stdin_arg)
        if positional and StructuredData.looks_like_data_file(positional[0]):
            raise StructuredDataNotAcceptedError(
                f"prompt '{name}' does not accept structured data"
            )
        output = assembler.render_prompt(name, positional)

    sys.stdout.write(output)
    return EXIT_OK


# --- Helpers ---


def _ensure_prompts(assembler: PromptAssembler) -> bool:
    if assembler.has_prompts():
        return True
    sys.stderr.write(
        "error: no prompts defined; ensure config.toml exists with prompt entries\n"
    )
    return False


def _read_piped_stdin() -> str | None:
    """Return piped stdin minus one trailing line break, or None."""
    stream = sys.stdin
    if stream is None or stream.isatty():
        return None
    buffer = stream.read()
    if not buffer:
        return None
    if buffer.endswith("\n"):
        buffer = buffer[:-1]
        if buffer.endswith("\r"):
            buffer = buffer[:-1]
    return buffer


def _timestamp(value: datetime | None = None) -> str:
    moment = value if value is not None else datetime.now(UTC)
    return moment.astimezone(UTC).isoformat().replace("+00:00", "Z")


def _envelope(**body: Any) -> dict[str, Any]:
    return {"schema_version": SCHEMA_VERSION, "generated_at": _timestamp(), **body}


def _prompt_to_json(
    name: str, spec: PromptSpec, profile: PromptProfile | None = None
) -> dict[str, Any]:
    meta = spec.metadata
    out: dict[str, Any] = {"name": name, "kind": spec.kind.label}
    if meta.description is not None:
        out["description"] = meta.description
    if meta.tags:
        out["tags"] = list(meta.tags)
    if meta.variables:
        out["vars"] = [
            {
                "name": var.name,
                "required": var.required,
                "type": var.kind.value,
                **({"description": var.description} if var.description else {}),
            }
            for var in meta.variables
        ]
    out["stdin_supported"] = spec.stdin_supported
    if meta.source.last_modified is not None:
        out["last_modified"] = _timestamp(meta.source.last_modified)
    out["source_path"] = str(meta.source.path)
    if profile is not None:
        out["profile"] = _profile_to_json(profile)
    return out


def _profile_to_json(profile: PromptProfile) -> dict[str, Any]:
    out: dict[str, Any] = {"kind": profile.kind}
    if profile.parts:
        out["parts"] = [
            {"path": str(part.path), "content": part.content} for part in profile.parts
        ]
    if profile.template is not None:
        out["template"] = {
            "path": str(profile.template.path),
            "content": profile.template.content,
        }
    out["content"] = profile.content
    return out


def _describe_prompt(name: str, spec: PromptSpec) -> list[str]:
    meta = spec.metadata
    lines = [f"name: {name}", f"kind: {spec.kind.label}"]
    if meta.description:
        lines.append(f"description: {meta.description}")
    if meta.tags:
        lines.append(f"tags: {', '.join(meta.tags)}")
    lines.append(f"stdin supported: {'yes' if spec.stdin_supported else 'no'}")
    if meta.source.last_modified is not None:
        lines.append(f"last modified: {_timestamp(meta.source.last_modified)}")
    lines.append(f"source: {meta.source.path}")
    if meta.variables:
        lines.append("vars:")
        for var in meta.variables:
            detail = f"  - {var.name} ({var.kind.value})"
            if var.required:
                detail += " [required]"
            if var.description:
                detail += f": {var.description}"
            lines.append(detail)
    return lines


def _write_json(payload: dict[str, Any]) -> None:
    sys.stdout.write(json.dumps(payload, indent=2) + "\n")


def _emit_diagnostics(diagnostics: ConfigDiagnostics) -> None:
    for line in diagnostic_lines(diagnostics):
        sys.stderr.write(line + "\n")


def _emit_error(err: PromptAssemblerError) -> None:
    sys.stderr.write(f"error: {err}\n")
    if err.hint:
        sys.stderr.write(f"hint: {err.hint}\n")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
