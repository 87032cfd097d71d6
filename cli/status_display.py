"""Status display functionality for CLI"""

from typing import Optional

from rich.markup import escape
from rich.table import Table

from conversion import ConversionOutcome, ConversionResult
from utils.storage import TokenStorage


def show_token_status(storage: TokenStorage, console):
    """
    Display detailed token status

    Args:
        storage: TokenStorage instance
        console: Rich console for output
    """
    status = storage.get_status()

    table = Table(title="Token Status Details")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Has Tokens", "Yes" if status["has_tokens"] else "No")
    table.add_row("Is Expired", "Yes" if status["is_expired"] else "No")
    table.add_row("Refresh Token", "Stored" if status["has_refresh_token"] else "None")

    if status["expires_at"]:
        table.add_row("Expires At", status["expires_at"])
        table.add_row("Time Until Expiry", status["time_until_expiry"])

    table.add_row("Token File", str(storage.token_file))

    console.print(table)


def _count(value: Optional[int]) -> str:
    return "N/A" if value is None else str(value)


def show_conversion_result(result: ConversionResult, console):
    """
    Render a conversion result

    Args:
        result: The result to render
        console: Rich console for output
    """
    if result.outcome is ConversionOutcome.FAILURE:
        console.print(f"[red]Error: {escape(result.message or '')}[/red]")
        return

    if result.outcome is ConversionOutcome.PARTIAL:
        console.print(f"[yellow]Error: {escape(result.message or '')}[/yellow]")

    console.print("\n[bold]Conversion Results[/bold]")
    if result.playlist_url:
        console.print(f"Created Spotify playlist: [bold]{escape(result.playlist_name or result.playlist_url)}[/bold]")
        console.print(f"[dim]{result.playlist_url}[/dim]")
    else:
        console.print("Playlist creation may have failed, or no tracks were found to add.")

    console.print(f"Processed {_count(result.total_source_tracks)} tracks from YouTube.")
    console.print(f"Found {_count(result.matched_tracks)} matching tracks on Spotify.")
    if result.playlist_url:
        console.print(f"Added {_count(result.added_tracks)} tracks to the new playlist.")

    if result.api_errors:
        console.print("\n[bold yellow]API Issues Encountered:[/bold yellow]")
        for error in result.api_errors:
            console.print(f"  • {error}", markup=False)

    if result.unmatched_tracks:
        console.print("\n[bold]Tracks Not Found on Spotify:[/bold]")
        for track in result.unmatched_tracks:
            console.print(f"  • {track}", markup=False)
