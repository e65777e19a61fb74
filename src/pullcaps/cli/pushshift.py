"""PushShift API verification commands."""

import typer
from rich.table import Table

from pullcaps.cli.common import console, run_async_command
from pullcaps.config import get_settings
from pullcaps.pushshift import PushShiftClient, PushShiftFetchError, RateLimitError

app = typer.Typer(help="PushShift API commands")


@app.command("rate-limit")
def show_rate_limit() -> None:
    """Show the rate limit advertised by the PushShift server.

    Examples:
        pullcaps pushshift rate-limit
    """

    async def _check() -> None:
        settings = get_settings()

        try:
            async with PushShiftClient() as client:
                meta = await client.get_meta()
                limiter = client.rate_limiter
        except RateLimitError as e:
            console.print("[red]Error:[/red] Rate limit exceeded")
            if e.retry_after is not None:
                console.print(f"  Retry after: {e.retry_after:.0f}s")
            raise typer.Exit(1) from None
        except PushShiftFetchError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1) from None

        table = Table(title="PushShift API Rate Limit")
        table.add_column("Setting", style="bold")
        table.add_column("Value", justify="right")

        table.add_row("Server limit (per minute)", str(meta.server_ratelimit_per_minute))
        table.add_row("Sustained rate (per second)", f"{meta.requests_per_second:.2f}")
        if limiter is not None:
            table.add_row("Client limiter (per minute)", str(limiter.requests_per_minute))
        else:
            table.add_row("Client limiter", "[yellow]disabled[/yellow]")
        table.add_row("Stream spacing (ms)", str(settings.pacing.min_request_interval_ms))
        if meta.api_version:
            table.add_row("API version", meta.api_version)

        console.print(table)

        if limiter is not None and limiter.requests_per_minute > meta.server_ratelimit_per_minute:
            console.print(
                "\n[yellow]Warning:[/yellow] The shared limiter allows more requests "
                "than the server advertises; expect 429 responses."
            )

    run_async_command(_check())
