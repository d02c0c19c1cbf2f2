#!/usr/bin/env python
import sys
from rich.console import Console
from rich.markup import escape
from arc_ask.cli import main as cli_main # Import the main function from cli
from arc_ask.core import PROG

console = Console(stderr=True)

def main() -> None:

    try:
        code = cli_main()
    except Exception as e:
        console.print(f"[bold red]{PROG}: An unexpected error occurred in the application:[/bold red] {escape(str(e))}")
        code = 1
    sys.exit(code)

if __name__ == "__main__":
    main()
