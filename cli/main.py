"""CLI entry point and argument parsing"""

import sys
import argparse
from rich.console import Console
from cli.cli_app import ConverterCLI
from web import setup_debug_logging


console = Console()


def main():
    """Entry point for the CLI"""
    parser = argparse.ArgumentParser(description="YouTube Music to Spotify Playlist Converter")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    parser.add_argument("--bind", "-b", default=None, help="Override bind address of the callback front (default: from config)")
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Check the stored session once and exit (exit code 1 when not logged in)"
    )

    args = parser.parse_args()

    if args.debug:
        setup_debug_logging()

    try:
        cli = ConverterCLI(debug=args.debug, bind_address=args.bind)

        if args.headless:
            sys.exit(0 if cli.run_headless() else 1)

        cli.run()

    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        console.print("Goodbye!")
    except Exception as e:
        console.print(f"\n[red]Fatal error:[/red] {e}")
        if args.debug:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
