"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from reply_suggest.config import REMOTE_PROVIDERS, Credentials, load_config
from reply_suggest.errors import EngineError, ProviderError
from reply_suggest.models.reminder import ReminderRef, SuggestionRequest, Tone
from reply_suggest.pipeline.coordinator import build_engine, build_source

app = typer.Typer(
    name="reply-suggest",
    help="Reply suggestions for reminders about unanswered messages",
    no_args_is_help=True,
)
console = Console()

TONE_COLORS = {
    Tone.PROFESSIONAL: "blue",
    Tone.CASUAL: "cyan",
    Tone.FRIENDLY: "green",
    Tone.APOLOGETIC: "yellow",
    Tone.ENTHUSIASTIC: "magenta",
}

SAMPLE_REMINDER = ReminderRef(title="Hey, can we meet tomorrow?", platform="whatsapp")


def _setup_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.INFO,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


def _mask(value: str | None) -> str:
    return f"{value[:10]}..." if value else "-"


@app.command()
def suggest(
    title: str = typer.Argument(help="Reminder title, e.g. 'Reply to John about project'"),
    platform: str = typer.Option("whatsapp", "--platform", "-p", help="whatsapp, email, instagram, linkedin, ..."),
    context: str = typer.Option(None, "--context", "-c", help="What the message is about"),
    tone: str = typer.Option(None, "--tone", "-t", help="professional, casual, friendly, apologetic, enthusiastic"),
    note: str = typer.Option(None, "--note", help="Reminder note"),
    as_json: bool = typer.Option(False, "--json", help="Print the response payload as JSON"),
    config_path: Path = typer.Option(None, "--config", help="config.yaml path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log each provider attempt"),
) -> None:
    """Generate reply suggestions for a reminder."""
    _setup_logging(verbose)
    if tone and Tone.parse(tone) is None:
        console.print(f"[red]Unknown tone: {tone}[/red]")
        raise typer.Exit(1)

    config = load_config(config_path)
    request = SuggestionRequest(
        reminder=ReminderRef(title=title, platform=platform, note=note),
        context=context,
        preferred_tone=tone,
    )

    async def _run():
        async with build_engine(config, Credentials.from_env()) as engine:
            if as_json:
                return await engine.generate(request)
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True,
            ) as progress:
                task = progress.add_task("Generating suggestions...", total=None)

                def on_attempt(provider: str, outcome: str) -> None:
                    progress.update(task, description=f"{provider}: {outcome}")

                return await engine.generate(request, on_attempt=on_attempt)

    try:
        result = asyncio.run(_run())
    except EngineError as exc:
        console.print(f"[red]Failed to generate suggestions: {exc}[/red]")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(result.to_payload(), ensure_ascii=False, indent=2))
        return

    table = Table(title=f"Replies for {platform}: {title}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Tone")
    table.add_column("Reply")
    for i, suggestion in enumerate(result.suggestions, 1):
        color = TONE_COLORS[suggestion.tone]
        table.add_row(str(i), f"[{color}]{suggestion.tone.value}[/{color}]", suggestion.text)
    console.print(table)

    failed = [a.provider for a in result.attempts if a.outcome != "ok"]
    console.print(
        f"[dim]Answered by: {result.provider_tag}"
        + (f" (skipped: {', '.join(failed)})" if failed else "")
        + "[/dim]"
    )


@app.command()
def providers(
    config_path: Path = typer.Option(None, "--config", help="config.yaml path"),
) -> None:
    """Show the provider chain and credential status."""
    config = load_config(config_path)
    credentials = Credentials.from_env()

    table = Table(title="Provider chain")
    table.add_column("Order", justify="right")
    table.add_column("Provider")
    table.add_column("Credential")
    for i, name in enumerate([*config.engine.providers, "templates"], 1):
        if name in REMOTE_PROVIDERS:
            status = credentials.status(name)
            color = "green" if status == "configured" else "yellow"
            table.add_row(str(i), name, f"[{color}]{status}[/{color}]")
        else:
            table.add_row(str(i), name, "[dim]not needed[/dim]")
    console.print(table)


@app.command()
def check(
    provider: str = typer.Argument(help="gemini, huggingface, openai or claude"),
    config_path: Path = typer.Option(None, "--config", help="config.yaml path"),
) -> None:
    """Send a sample message to one provider and show what comes back."""
    if provider not in REMOTE_PROVIDERS:
        console.print(f"[red]Unknown provider: {provider}. Choose from {', '.join(REMOTE_PROVIDERS)}[/red]")
        raise typer.Exit(1)

    config = load_config(config_path)
    credentials = Credentials.from_env()
    source = build_source(provider, config, credentials, http_client=None)

    async def _run():
        try:
            return await source.try_generate(SAMPLE_REMINDER)
        finally:
            close = getattr(source, "aclose", None)
            if close is not None:
                await close()

    with console.status(f"Calling {provider}..."):
        try:
            suggestions = asyncio.run(_run())
        except ProviderError as exc:
            details = getattr(exc, "body", None)
            console.print(
                Panel(
                    f"[red]{type(exc).__name__}: {exc}[/red]"
                    + (f"\n{details}" if details else ""),
                    title=f"{provider} failed",
                )
            )
            raise typer.Exit(1)

    body = "\n".join(f"[{s.tone.value}] {s.text}" for s in suggestions)
    console.print(
        Panel(
            f"{body}\n\n[dim]key: {_mask(credentials.for_provider(provider))}[/dim]",
            title=f"{provider} ok",
        )
    )


if __name__ == "__main__":
    app()
