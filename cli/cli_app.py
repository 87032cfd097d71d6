"""Main CLI application class for the Playlist Converter client"""

import asyncio
import threading
import time
from typing import Optional
from rich.markup import escape
from rich.prompt import Prompt, Confirm
from rich.panel import Panel
from rich.table import Table

from context import AppContext
from conversion import ConversionOutcome
from session import SessionStatus
from settings import CALLBACK_PATH, LOGIN_TIMEOUT
from web import FrontServer
from cli.debug_setup import setup_debug_console
from cli.status_display import show_conversion_result, show_token_status


class ConverterCLI:
    """Interactive interface for logging in and converting playlists"""

    def __init__(
        self,
        debug: bool = False,
        bind_address: str = None,
        context: Optional[AppContext] = None,
    ):
        self.context = context or AppContext()
        self.front_server = FrontServer(self.context, bind_address=bind_address)
        self.server_thread: Optional[threading.Thread] = None
        self.server_running = False
        self.debug = debug
        self.bind_address = self.front_server.bind_address

        self.console = setup_debug_console(debug, self.bind_address)
        if debug:
            self.console.print("[yellow]Debug mode enabled - verbose logging will be written to the debug log[/yellow]")

        self.loop = asyncio.new_event_loop()
        asyncio.set_event_loop(self.loop)

    @property
    def session(self):
        return self.context.session

    def clear_screen(self):
        """Clear the terminal screen"""
        self.console.clear()

    def display_header(self):
        """Display application header"""
        self.console.print("\n")
        self.console.print(Panel.fit(
            "[bold cyan]YouTube Music to Spotify Playlist Converter[/bold cyan]\n"
            "[dim]Log in with Spotify, then convert a public YouTube Music playlist[/dim]",
            border_style="cyan"
        ))

    def display_status(self):
        """Display session and web front status"""
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column(style="cyan", width=20)
        table.add_column()

        state = self.session.state
        if state.status is SessionStatus.LOGGED_IN:
            table.add_row("Session:", f"[green]✓ Logged in as [bold]{escape(state.user.label)}[/bold][/green]")
        elif state.status is SessionStatus.AUTHENTICATING:
            table.add_row("Session:", "[yellow]Checking...[/yellow]")
        else:
            table.add_row("Session:", "[red]✗ Not logged in[/red]")

        if self.server_running:
            table.add_row("Callback route:", f"[green]{self.front_server.base_url}{CALLBACK_PATH}[/green]")
        else:
            table.add_row("Callback route:", "[dim]Not listening[/dim]")

        self.console.print(table)

        message = self.context.view_state()["error"]
        if message:
            self.console.print(f"[red]Error: {escape(message)}[/red]")
        self.console.print()

    def display_menu(self):
        """Display main menu options"""
        self.console.print("[bold]Main Menu:[/bold]")
        self.console.print()

        if not self.session.logged_in:
            self.console.print("  [cyan]1[/cyan]. Login with Spotify")
            self.console.print("  [dim]2. Convert playlist (requires login)[/dim]")
            self.console.print("  [dim]3. Logout[/dim]")
        else:
            self.console.print("  [cyan]1[/cyan]. Re-check session")
            self.console.print("  [cyan]2[/cyan]. Convert playlist")
            self.console.print("  [cyan]3[/cyan]. Logout")

        self.console.print("  [cyan]4[/cyan]. Token details")
        self.console.print("  [cyan]5[/cyan]. Exit")
        self.console.print()

    def start_server(self):
        """Start the web front so the callback route can receive the login redirect"""
        if self.server_running:
            return

        self.server_thread = threading.Thread(target=self.front_server.run, daemon=True)
        self.server_thread.start()
        self.server_running = True
        # Give uvicorn a moment to bind before the browser is sent to us
        time.sleep(0.5)

    def stop_server(self):
        """Stop the web front"""
        if not self.server_running:
            return

        self.front_server.stop()
        if self.server_thread:
            self.server_thread.join(timeout=5)
        self.server_running = False

    def check_session(self):
        """Verify the stored credential with the backend"""
        with self.console.status("Checking session..."):
            self.loop.run_until_complete(self.session.check_status())

    def login(self) -> bool:
        """Hand off to the backend login and wait for the callback route"""
        self.start_server()
        self.context.callback_received.clear()

        login_url = self.session.login()
        self.console.print("\n[bold]Opening browser to:[/bold]")
        self.console.print(f"[dim]{login_url}[/dim]\n")
        self.console.print(f"Waiting for the redirect to {self.front_server.base_url}{CALLBACK_PATH} ...")

        if not self.context.callback_received.wait(timeout=LOGIN_TIMEOUT):
            self.console.print("[red]✗ Login timed out[/red]")
            return False

        # The browser's home view may already have consumed the flashed reason
        outcome = self.context.last_callback
        if outcome is not None and not outcome.ok:
            self.context.flash.consume()
            self.console.print(f"[red]✗ {escape(outcome.error.message)}[/red]")

        self.check_session()
        if self.session.logged_in:
            self.console.print(f"\n[bold green]✓ Logged in as {escape(self.session.user.label)}[/bold green]")
            return True
        return False

    def convert(self):
        """Prompt for a playlist and submit the conversion"""
        if not self.session.logged_in:
            self.console.print("[red]✗ Please log in with Spotify to convert playlists.[/red]")
            return

        playlist_url = Prompt.ask("YouTube Music playlist URL").strip()
        if not playlist_url:
            self.console.print("[yellow]No playlist URL given[/yellow]")
            return
        playlist_name = Prompt.ask("New Spotify playlist name (optional)", default="")

        with self.console.status("Converting..."):
            result = self.loop.run_until_complete(self.context.convert(playlist_url, playlist_name))

        if result is None:
            return

        if result.outcome is ConversionOutcome.FAILURE and not self.session.logged_in:
            # The session ended during the request; one notice is enough
            self.console.print("[yellow]Your session has expired. Please log in again.[/yellow]")
            return

        show_conversion_result(result, self.console)

    def logout(self):
        """Forget the stored credential"""
        self.session.logout()
        self.console.print("\n[green]✓ Logged out[/green]\n")

    def run(self):
        """Main CLI loop"""
        self.check_session()

        while True:
            self.clear_screen()
            self.display_header()
            self.display_status()
            self.display_menu()

            choice = Prompt.ask("Select option", choices=["1", "2", "3", "4", "5"])

            if choice == "1":
                if self.session.logged_in:
                    self.check_session()
                else:
                    self.login()
                input("\nPress Enter to continue...")

            elif choice == "2":
                self.convert()
                input("\nPress Enter to continue...")

            elif choice == "3":
                if self.session.logged_in and Confirm.ask("Log out?"):
                    self.logout()
                input("\nPress Enter to continue...")

            elif choice == "4":
                show_token_status(self.context.storage, self.console)
                input("\nPress Enter to continue...")

            elif choice == "5":
                self.stop_server()
                self.console.print("\n[cyan]Goodbye![/cyan]\n")
                break

    def run_headless(self) -> bool:
        """Check the session once and report it (non-interactive)

        Returns:
            True if logged in
        """
        self.loop.run_until_complete(self.session.check_status())
        state = self.session.state

        if state.logged_in:
            self.console.print(f"[green]✓ Logged in as {escape(state.user.label)}[/green]")
            return True

        self.console.print("[red]✗ Not logged in[/red]")
        if self.session.error:
            self.console.print(f"[red]Error: {escape(self.session.error)}[/red]")
        self.console.print("Run the interactive CLI and choose option 1 to log in.")
        return False
