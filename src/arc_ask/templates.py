"""Prompt templates for arc-ask.

Templates are named, reusable prompt definitions. User templates live in
``<PROMPTS_DIR>/<name>.yaml``; a small set of built-in templates is loaded from
templates.yaml in this package directory. A user file shadows a built-in one
with the same name.

Template bodies use Jinja placeholders (``{{ Input }}``). Every placeholder must
be bound when rendering; an unbound name is an error rather than an empty string.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml
from jinja2 import Environment, StrictUndefined, TemplateError as JinjaTemplateError

from arc_ask.errors import RenderError, TemplateError, TemplateNotFound

logger = logging.getLogger(__name__)

# Path to the built-in templates (in the same directory as this module)
BUILTIN_TEMPLATES_PATH = Path(__file__).parent / "templates.yaml"
TEMPLATE_SUFFIXES = (".yaml", ".yml")

_jinja_env = Environment(undefined=StrictUndefined, autoescape=False, keep_trailing_newline=True)


@dataclass(frozen=True)
class Template:
    """A named prompt definition, immutable once loaded."""

    name: str
    user: str
    system: str = ""
    model: str | None = None
    description: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)
    source: str | None = None

    @classmethod
    def from_dict(cls, name: str, data: Any, source: str | None = None) -> "Template":
        """Build a Template from a parsed YAML document."""
        if not isinstance(data, dict):
            raise TemplateError(f"template '{name}' must be a mapping", hint=source)

        user = data.get("user")
        if not isinstance(user, str) or not user.strip():
            raise TemplateError(f"template '{name}' has no user prompt", hint="Add a non-empty 'user' field")

        metadata = data.get("metadata") or {}
        if not isinstance(metadata, dict):
            raise TemplateError(f"template '{name}' metadata must be a mapping")
        metadata = dict(metadata)

        description = metadata.pop("description", None) or data.get("description")
        model = data.get("model")

        return cls(
            name=name,
            user=user,
            system=str(data.get("system") or ""),
            model=str(model).strip() if model else None,
            description=str(description).strip() if description else None,
            metadata=metadata,
            source=source,
        )

    def render(self, variables: Mapping[str, str]) -> tuple[str, str]:
        """Render (system, user) with ``variables``.

        Raises:
            RenderError: a placeholder is unbound or the template is malformed.
        """
        # One mapping, not keywords: any binding name is allowed, including "self"
        try:
            system = _jinja_env.from_string(self.system).render(dict(variables)) if self.system else ""
            user = _jinja_env.from_string(self.user).render(dict(variables))
        except JinjaTemplateError as e:
            raise RenderError(
                f"failed to render template '{self.name}'",
                cause=e,
                hint="Check that all required variables are provided",
            ) from e
        return system, user


def _load_builtin_templates(yaml_path: Path = BUILTIN_TEMPLATES_PATH) -> dict[str, Any]:
    """Load the raw built-in definitions, keyed by name."""
    try:
        with open(yaml_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        logger.error(f"Built-in templates file not found: {yaml_path}")
        return {}
    except yaml.YAMLError as e:
        logger.error(f"Error parsing {yaml_path}: {e}")
        return {}

    if not data:
        logger.warning(f"Empty templates file at {yaml_path}")
        return {}
    templates = data.get("templates") or {}
    logger.debug(f"Loaded {len(templates)} built-in templates from {yaml_path}")
    return dict(templates)


class TemplateStore:
    """Finds and loads templates from the prompts directory and built-ins."""

    def __init__(self, prompts_dir: str | Path, builtins: Mapping[str, Any] | None = None):
        self.prompts_dir = Path(prompts_dir).expanduser()
        self._builtins = dict(_load_builtin_templates() if builtins is None else builtins)

    def template_path(self, name: str) -> Path:
        """Where a user template called ``name`` is expected to live."""
        return self.prompts_dir / f"{name}.yaml"

    def _find_file(self, name: str) -> Path | None:
        for suffix in TEMPLATE_SUFFIXES:
            path = self.prompts_dir / f"{name}{suffix}"
            if path.is_file():
                return path
        return None

    def load(self, name: str) -> Template:
        """Load the template called exactly ``name``.

        Raises:
            TemplateNotFound: no user file or built-in has that name.
            TemplateError: the file exists but is not a valid template.
        """
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            raise TemplateNotFound(name)

        path = self._find_file(name)
        if path is not None:
            try:
                with open(path, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise TemplateError(f"failed to parse template '{name}'", cause=e, hint=str(path)) from e
            except OSError as e:
                raise TemplateError(f"failed to read template '{name}'", cause=e, hint=str(path)) from e
            return Template.from_dict(name, data, source=str(path))

        if name in self._builtins:
            return Template.from_dict(name, self._builtins[name], source="builtin")

        raise TemplateNotFound(name)

    def list_names(self) -> list[str]:
        """All discoverable template names, sorted and de-duplicated."""
        names = set(self._builtins)
        if self.prompts_dir.is_dir():
            for path in self.prompts_dir.iterdir():
                if path.suffix in TEMPLATE_SUFFIXES and path.is_file():
                    names.add(path.stem)
        return sorted(names)
