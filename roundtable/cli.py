"""Click CLI: loads config and builds the session, then runs one question or an interactive loop."""

import asyncio
import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.logging import RichHandler

from config.config_loader import MODES, load_config
from roundtable.errors import UnknownAdvisorError
from roundtable.orchestrator import RoundOrchestrator
from roundtable.output import TurnPrinter, console, print_advisors
from roundtable.session import Session

logger = logging.getLogger(__name__)

_HELP_TEXT = """\
Type a question to ask the enabled advisors, or a command:
  /advisors           list advisors and whether they are enabled
  /toggle <id>        enable or disable one advisor
  /mode chat|debate   switch between independent answers and a debate
  /rounds <n>         number of debate rounds
  /clear              start a fresh conversation
  /help               show this text
  /quit               leave"""


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _apply_options(session: Session, mode: str | None, rounds: int | None, advisors_arg: str | None) -> None:
    """Apply CLI overrides. Raises ValueError or UnknownAdvisorError on bad input."""
    if mode is not None:
        session.set_mode(mode)
    if rounds is not None:
        session.set_rounds(rounds)
    if advisors_arg:
        session.registry.enable_only(a.strip() for a in advisors_arg.split(",") if a.strip())


def _handle_command(session: Session, line: str) -> tuple[bool, str]:
    """Apply one /command to the session. Returns (keep_running, feedback)."""
    command, _, arg = line.strip().partition(" ")
    arg = arg.strip()

    if command in ("/quit", "/exit"):
        return False, ""
    if command == "/help":
        return True, _HELP_TEXT
    if command == "/advisors":
        print_advisors(session.registry)
        return True, ""
    if command == "/toggle":
        if arg not in session.registry:
            return True, f"Unknown advisor: {arg or '(none)'}"
        session.toggle_advisor(arg)
        state = "enabled" if session.registry.get(arg).enabled else "disabled"
        return True, f"{session.registry.get(arg).display_name} {state}"
    if command == "/mode":
        if arg not in MODES:
            return True, f"Mode must be one of: {', '.join(MODES)}"
        session.set_mode(arg)
        return True, f"Mode: {arg}"
    if command == "/rounds":
        try:
            session.set_rounds(int(arg))
        except ValueError:
            return True, f"Rounds must be a number between 1 and {session.max_rounds}"
        return True, f"Rounds: {session.rounds}"
    if command == "/clear":
        session.clear()
        return True, "Conversation cleared"
    return True, f"Unknown command: {command} (try /help)"


async def _ask(orchestrator: RoundOrchestrator, printer: TurnPrinter, question: str) -> bool:
    """Submit one question. Returns False if it was refused for an unknown advisor."""
    with console.status("Consulting advisors…") as status:
        printer.status = status
        try:
            await orchestrator.submit(question)
        except UnknownAdvisorError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            return False
        finally:
            printer.status = None
    return True


async def _interactive(orchestrator: RoundOrchestrator, printer: TurnPrinter) -> None:
    session = orchestrator.session
    console.print("[bold cyan]Roundtable[/bold cyan]: advisory council")
    console.print(_HELP_TEXT, style="dim")
    while True:
        try:
            line = await asyncio.to_thread(console.input, f"[bold]{session.mode.value}>[/bold] ")
        except (EOFError, KeyboardInterrupt):
            console.print()
            return
        if not line.strip():
            continue
        if line.startswith("/"):
            keep_running, feedback = _handle_command(session, line)
            if feedback:
                console.print(feedback, style="dim")
            if not keep_running:
                return
            continue
        await _ask(orchestrator, printer, line)


@click.command()
@click.argument("question", required=False)
@click.option("--mode", type=click.Choice(MODES), default=None, help="chat or debate (default: from config)")
@click.option("--rounds", default=None, type=int, help="Number of debate rounds (default: from config)")
@click.option("--advisors", "advisors_arg", default=None, help="Comma-separated advisor ids to enable")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Settings file (default: bundled settings.yaml)",
)
@click.option("--verbose", is_flag=True, help="Enable DEBUG-level logging")
def main(
    question: str | None,
    mode: str | None,
    rounds: int | None,
    advisors_arg: str | None,
    config_path: Path | None,
    verbose: bool,
) -> None:
    """Roundtable -- ask several AI advisors at once, or let them debate.

    \b
    Examples:
      roundtable "Should we expand to Europe?"
      roundtable "Build or buy our billing system?" --mode debate --rounds 2
      roundtable "Hire now or wait?" --advisors claude,gpt,grok
      roundtable
    """
    load_dotenv()
    _setup_logging(verbose)

    try:
        config = load_config(config_path) if config_path else load_config()
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        sys.exit(1)

    orchestrator = RoundOrchestrator.from_config(config)
    session = orchestrator.session

    try:
        _apply_options(session, mode, rounds, advisors_arg)
    except (ValueError, UnknownAdvisorError) as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        sys.exit(1)

    printer = TurnPrinter(session)
    session.subscribe(printer)

    if question:
        if not asyncio.run(_ask(orchestrator, printer, question)):
            sys.exit(1)
    else:
        asyncio.run(_interactive(orchestrator, printer))


if __name__ == "__main__":
    main()
