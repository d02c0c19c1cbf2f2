"""Prompt resolution for arc-ask.

Turns the positional argument, template variables, collected input and context
files into the single ResolvedPrompt sent to a backend.
"""

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable, Mapping, TextIO

from arc_ask.errors import InvalidInputError, NotFoundError, ReadError, TemplateError, TemplateNotFound
from arc_ask.templates import TemplateStore

logger = logging.getLogger(__name__)

TEMPLATE_SIGIL = "@"
INPUT_VAR = "Input"
PROG = "arc-ask"


@dataclass(frozen=True)
class ResolvedPrompt:
    """The final system/user prompt and model for one backend call."""

    system: str
    user: str
    model: str
    template: str | None = None


def effective_model(model_flag: str | None, template_model: str | None, default_model: str) -> str:
    """--model beats the template's pinned model, which beats the configured default."""
    if model_flag:
        return model_flag
    if template_model:
        return template_model
    return default_model


def build_variables(variables: Mapping[str, str] | None, input_text: str) -> dict[str, str]:
    """Copy the caller's bindings and set the reserved Input key.

    Input always reflects the collected input: a user binding named Input is
    overwritten, even when the collected input is empty.
    """
    data = dict(variables or {})
    if INPUT_VAR in data:
        logger.debug(f"Ignoring --var {INPUT_VAR}=...; collected input takes precedence")
    data[INPUT_VAR] = input_text
    return data


def resolve_template(
    name: str,
    variables: Mapping[str, str] | None,
    input_text: str,
    default_model: str,
    store: TemplateStore,
) -> tuple[str, str, str]:
    """Load and render template ``name``; return (system, user, model)."""
    try:
        template = store.load(name)
    except TemplateNotFound as e:
        raise NotFoundError(
            f"template '{name}' not found",
            hint=f"Check available templates with: {PROG} --list-templates",
            suggestions=[
                f"{PROG} --list-templates",
                f"Create template at: {store.template_path(name)}",
            ],
        ) from e

    data = build_variables(variables, input_text)
    system, user = template.render(data)
    model = template.model or default_model
    logger.debug(f"Rendered template '{name}' (model={model})")
    return system, user, model


def assemble_prompt(question: str | None, input_text: str) -> str:
    """Combine a direct question with collected input."""
    if not question and not input_text:
        raise InvalidInputError(
            "no prompt or question specified",
            suggestions=[
                f"Ask a direct question: {PROG} \"What is this?\"",
                f"Use a template: {PROG} @detect-errors",
                f"List templates: {PROG} --list-templates",
            ],
        )
    question = question or ""
    if input_text:
        return f"{question}\n\nInput:\n{input_text}"
    return question


def resolve_prompt(
    question: str | None,
    variables: Mapping[str, str] | None,
    input_text: str,
    model_flag: str | None,
    default_model: str,
    store: TemplateStore,
) -> ResolvedPrompt:
    """Resolve the positional argument into a ResolvedPrompt.

    A leading ``@`` selects a template; anything else is a direct question.
    """
    if question and question.startswith(TEMPLATE_SIGIL):
        name = question[len(TEMPLATE_SIGIL):]
        system, user, template_model = resolve_template(name, variables, input_text, default_model, store)
        model = effective_model(model_flag, template_model, default_model)
        return ResolvedPrompt(system=system, user=user, model=model, template=name)

    user = assemble_prompt(question, input_text)
    return ResolvedPrompt(system="", user=user, model=effective_model(model_flag, None, default_model))


def _context_paths(files: Iterable[str] | None) -> list[str]:
    paths = []
    for raw in files or []:
        path = raw.strip()
        if path.startswith(TEMPLATE_SIGIL):
            path = path[len(TEMPLATE_SIGIL):]
        if path:
            paths.append(path)
    return paths


def merge_context(prompt: str, files: Iterable[str] | None) -> str:
    """Append each context file to ``prompt`` under a ``Context (<path>):`` label.

    Every path is checked before any file is read, so a missing file or a
    directory anywhere in the list fails without reading the others.
    """
    paths = _context_paths(files)
    for path in paths:
        try:
            os.stat(path)
        except OSError as e:
            raise ReadError(
                f"failed to read context '{path}'",
                cause=e,
                hint="Ensure the file exists and is accessible",
            ) from e
        if Path(path).is_dir():
            raise InvalidInputError(
                f"context path '{path}' is a directory",
                hint="Provide a file path (e.g., README.md)",
            )

    parts = [prompt]
    for path in paths:
        try:
            with open(path, "rb") as f:
                data = f.read()
        except OSError as e:
            raise ReadError(f"failed to read context '{path}'", cause=e) from e
        logger.debug(f"Adding context {path} ({len(data)} bytes)")
        parts.append(f"\n\nContext ({path}):\n")
        parts.append(data.decode("utf-8", errors="surrogateescape"))

    return "".join(parts)


def list_templates(store: TemplateStore, out: TextIO) -> None:
    """Print every discoverable template with its description.

    A template that fails to load is reported on its own line; the rest are
    still listed.
    """
    names = store.list_names()
    prompts_dir = store.prompts_dir

    if not names:
        out.write(f"No templates found in {prompts_dir}\n")
        out.write("\nCreate a template with:\n")
        out.write(f"  mkdir -p {prompts_dir}\n")
        out.write(f"  $EDITOR {prompts_dir}/my-template.yaml\n")
        return

    out.write(f"Available templates ({len(names)} found):\n\n")
    for name in names:
        try:
            template = store.load(name)
        except (TemplateError, NotFoundError) as e:
            out.write(f"  @{name:<25} (error loading: {e})\n")
            continue
        out.write(f"  @{name:<25} {template.description or 'No description'}\n")

    out.write(f"\nUsage: {PROG} @template-name\n")
    out.write(f"Template directory: {prompts_dir}\n")


def build_prompt(
    question: str | None,
    variables: Mapping[str, str] | None,
    input_text: str,
    context_files: Iterable[str] | None,
    model_flag: str | None,
    default_model: str,
    store: TemplateStore,
) -> ResolvedPrompt:
    """Resolve the prompt and append context files to its user text."""
    resolved = resolve_prompt(question, variables, input_text, model_flag, default_model, store)
    user = merge_context(resolved.user, context_files)
    if user is resolved.user:
        return resolved
    return replace(resolved, user=user)
