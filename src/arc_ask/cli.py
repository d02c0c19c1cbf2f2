import argparse
import logging
import sys
import traceback
from typing import Sequence, TextIO

from rich.text import Text

from arc_ask.backends import AskOptions, BackendResult, get_backend
from arc_ask.core import PROG, build_prompt, list_templates
from arc_ask.errors import CLIError, InvalidInputError
from arc_ask.output import OUTPUT_CHOICES, render_response, resolve_output_mode
from arc_ask.templates import TemplateStore
from arc_ask.utils.config import BACKENDS, DEFAULT_MODEL, PROVIDERS, Config
from arc_ask.utils.input_handler import gather_input
from arc_ask.utils.logging import get_console, setup_logging

logger = logging.getLogger(__name__)
console = get_console()

EXAMPLES = f"""examples:
  # Summarize errors from stdin
  cat logs.txt | {PROG} "what's wrong?"

  # Apply a template to a captured tmux pane
  {PROG} @detect-errors --pane fe:4.1

  # Capture directly from a pane with extra lines + context
  {PROG} @summarize --pane api:1.0 --lines 300 --context README.md

  # Force a specific model and emit JSON for scripting
  git diff --staged | {PROG} "summarize these changes" --model claude-haiku-4-5-20251001 --output json

  # Discover template inventory
  {PROG} --list-templates
"""


def parse_var(value: str) -> tuple[str, str]:
    """Parse a KEY=VALUE template variable."""
    key, sep, val = value.partition("=")
    key = key.strip()
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"invalid variable '{value}', expected KEY=VALUE")
    return key, val


class ArgumentParser(argparse.ArgumentParser):
    """argparse parser whose usage errors are reported like every other CLIError."""

    def error(self, message: str):
        raise InvalidInputError(message, hint=f"Run '{PROG} --help' for usage")


def build_parser() -> argparse.ArgumentParser:
    parser = ArgumentParser(
        prog=PROG,
        description=(
            "Ask an AI agent a question about stdin input or a direct question. "
            "If the prompt starts with @, the named template is loaded from the prompts directory. "
            "Reads from stdin if it is piped; use --pane to capture a tmux pane instead."
        ),
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("prompt", nargs="?", default=None, help="Question, or @template-name")
    parser.add_argument("--provider", type=str, default=None, help=f"AI provider override ({', '.join(PROVIDERS)})")
    parser.add_argument("-m", "--model", type=str, default=None, help=f"Model to use (default: template model, then {DEFAULT_MODEL})")
    parser.add_argument("--pane", type=str, default=None, help="Auto-capture from tmux pane (e.g., session:0.0)")
    parser.add_argument("-v", "--var", type=parse_var, action="append", default=[], metavar="KEY=VALUE", help="Template variable (repeatable)")
    parser.add_argument("--lines", type=int, default=200, help="Lines to capture from pane (0=all)")
    parser.add_argument("--list-templates", action="store_true", help="List available prompt templates")
    parser.add_argument("-c", "--context", action="append", default=[], metavar="FILE", help="Add context file (repeatable)")
    parser.add_argument("--max-tokens", type=int, default=0, help="Maximum tokens for response (0 = default)")
    parser.add_argument("--temperature", type=float, default=0.0, help="Temperature for generation (0 = default)")
    parser.add_argument("-o", "--output", choices=OUTPUT_CHOICES, default=None, help="Output format (default: table)")
    parser.add_argument("--json", action="store_true", help="Shortcut for --output json")
    parser.add_argument("--yaml", action="store_true", help="Shortcut for --output yaml")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress output; only the exit code reports success")
    parser.add_argument("--tools", action="append", default=[], metavar="NAMES", help="Enable tools, comma-separated (bridge backend only)")
    parser.add_argument("--backend", choices=BACKENDS, default=None, help="Backend strategy (default from config: direct)")
    parser.add_argument("--verbose", action="store_true", help="Show request payloads and token usage")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging output.")
    return parser


def parse_arguments(argv: Sequence[str] | None = None) -> argparse.Namespace:
    args = build_parser().parse_args(argv)
    args.var = dict(args.var)
    args.tools = [name.strip() for raw in args.tools for name in raw.split(",") if name.strip()]
    return args


def report_error(error: CLIError) -> None:
    """Print a CLIError as '<prog>: message' followed by its hint and suggestions."""
    console.print(Text.assemble((f"{PROG}: ", "bold red"), str(error)), soft_wrap=True)
    for line in error.format_lines():
        console.print(Text(line, style="dim"), soft_wrap=True)


def run_app(
    args: argparse.Namespace,
    config: Config,
    stdin: TextIO | None = None,
    out: TextIO | None = None,
) -> BackendResult | None:
    """Run one request end to end; returns None for --list-templates."""
    out = out if out is not None else sys.stdout
    store = TemplateStore(config.PROMPTS_DIR)

    if args.list_templates:
        list_templates(store, out)
        return None

    mode = resolve_output_mode(args.output, args.json, args.yaml, args.quiet)
    if args.max_tokens < 0:
        raise InvalidInputError("--max-tokens must be 0 or greater")
    if args.temperature < 0:
        raise InvalidInputError("--temperature must be 0 or greater")
    backend = get_backend(config, backend=args.backend, provider=args.provider)

    source = gather_input(args.pane, args.lines, stdin=stdin)
    prompt = build_prompt(
        args.prompt,
        args.var,
        source.text,
        args.context,
        args.model,
        config.DEFAULT_MODEL,
        store,
    )
    logger.debug(f"Resolved prompt: template={prompt.template} model={prompt.model} input={source.kind.value}")

    options = AskOptions(max_tokens=args.max_tokens, temperature=args.temperature, tools=args.tools)
    result = backend.ask(prompt, options)
    render_response(result, mode, out)
    return result


def main(argv: Sequence[str] | None = None) -> int:
    try:
        args = parse_arguments(argv)
    except CLIError as e:
        report_error(e)
        return 1
    setup_logging(args.debug)

    try:
        config_obj = Config()
    except Exception as e:
        # Pydantic validation errors or an unreadable .env file
        report_error(CLIError("error initializing configuration", cause=e))
        return 1
    if args.verbose:
        config_obj.VERBOSE = True

    try:
        run_app(args, config_obj)
    except CLIError as e:
        report_error(e)
        if config_obj.VERBOSE and e.__cause__ is not None:
            traceback.print_exception(e.__cause__)
        return 1
    except KeyboardInterrupt:
        console.print("[bold yellow]Interrupted![/bold yellow]")
        return 130
    return 0
