"""Rendering of the final answer: plain text, JSON, YAML or nothing."""

import json
from enum import Enum
from typing import TextIO

import yaml

from arc_ask.backends.base import BackendResult
from arc_ask.errors import InvalidInputError, SerializationError


class OutputMode(str, Enum):
    TABLE = "table"
    PLAIN = "plain"
    JSON = "json"
    YAML = "yaml"
    QUIET = "quiet"


OUTPUT_CHOICES = [mode.value for mode in OutputMode]


def resolve_output_mode(
    output: str | None = None,
    json_flag: bool = False,
    yaml_flag: bool = False,
    quiet: bool = False,
) -> OutputMode:
    """Combine --output with the --json/--yaml/--quiet shortcuts.

    Asking for two different modes is an error; repeating the same one is not.
    """
    requested = set()
    if output:
        try:
            requested.add(OutputMode(output.strip().lower()))
        except ValueError:
            raise InvalidInputError(
                f"invalid output format '{output}'",
                hint=f"Choose one of: {', '.join(OUTPUT_CHOICES)}",
            )
    if json_flag:
        requested.add(OutputMode.JSON)
    if yaml_flag:
        requested.add(OutputMode.YAML)
    if quiet:
        requested.add(OutputMode.QUIET)

    if len(requested) > 1:
        names = ", ".join(sorted(mode.value for mode in requested))
        raise InvalidInputError(f"conflicting output formats requested: {names}", hint="Pick a single output format")
    return requested.pop() if requested else OutputMode.TABLE


def result_fields(result: BackendResult) -> dict[str, str]:
    """Structured form of a result. Every key is always present."""
    return {
        "response": (result.text or "").strip(),
        "provider": result.provider or "",
        "model": result.model or "",
        "backend": result.backend or "",
    }


def render_response(result: BackendResult, mode: OutputMode, out: TextIO) -> None:
    if mode is OutputMode.QUIET:
        return

    if mode is OutputMode.JSON:
        try:
            out.write(json.dumps(result_fields(result), indent=2, ensure_ascii=False) + "\n")
        except (TypeError, ValueError) as e:
            raise SerializationError("failed to encode JSON output", cause=e) from e
        return

    if mode is OutputMode.YAML:
        try:
            out.write(yaml.safe_dump(result_fields(result), sort_keys=False, allow_unicode=True))
        except yaml.YAMLError as e:
            raise SerializationError("failed to encode YAML output", cause=e) from e
        return

    out.write((result.text or "").strip() + "\n")
