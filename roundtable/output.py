"""Rich console rendering of the conversation as it grows."""

import logging

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.rule import Rule
from rich.status import Status
from rich.table import Table
from rich.text import Text

from roundtable.models import Turn, TurnKind
from roundtable.registry import AdvisorRegistry
from roundtable.session import Session, SessionEvent

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)


def print_turn(turn: Turn, out: Console = console) -> None:
    """Print a single Turn the way it appears in the transcript."""
    if turn.kind is TurnKind.USER_QUERY:
        out.print(Panel(turn.text, title="[bold]You[/bold]", border_style="yellow"))
    elif turn.kind is TurnKind.ROUND_MARKER:
        out.print(Rule(f"[bold cyan]{turn.text}[/bold cyan]"))
    elif turn.kind is TurnKind.ADVISOR_REPLY:
        body = Text(turn.text, style="red") if turn.failed else Markdown(turn.text)
        out.print(
            Panel(
                body,
                title=f"[bold]{turn.author_name}[/bold]",
                subtitle=f"Round {turn.round_number}" if turn.round_number else None,
                border_style="red" if turn.failed else "dim",
            )
        )
    elif turn.is_consensus:
        out.print(Rule("[bold green]Roundtable Consensus[/bold green]"))
        if turn.failed:
            out.print(Text(turn.text, style="red"))
        else:
            out.print(Markdown(turn.text))


def print_advisors(registry: AdvisorRegistry, out: Console = console) -> None:
    table = Table(title="Advisors", show_lines=False)
    table.add_column("id", style="bold")
    table.add_column("Name")
    table.add_column("Perspective", style="dim")
    table.add_column("Model", style="dim")
    table.add_column("Enabled")
    for advisor in registry.list():
        table.add_row(
            advisor.id,
            advisor.display_name,
            advisor.short_persona,
            advisor.model_identifier,
            "[green]on[/green]" if advisor.enabled else "[red]off[/red]",
        )
    out.print(table)


def _status_line(session: Session) -> str:
    if session.synthesizing:
        return "Synthesizing consensus…"
    names = [session.registry.get(advisor_id).display_name for advisor_id in sorted(session.pending)]
    prefix = f"Round {session.current_round}: " if session.current_round else ""
    if not names:
        return f"{prefix}waiting…"
    return f"{prefix}waiting for {', '.join(names)}"


class TurnPrinter:
    """Session listener that prints each Turn as soon as it lands.

    The placeholder is not printed; the status spinner covers it until the
    consensus replaces it.
    """

    def __init__(self, session: Session, out: Console = console) -> None:
        self._session = session
        self._out = out
        self.status: Status | None = None

    def __call__(self, event: SessionEvent, turn: Turn | None) -> None:
        if event in (SessionEvent.TURN_APPENDED, SessionEvent.TURN_REPLACED):
            if turn is not None and not turn.placeholder:
                print_turn(turn, self._out)
        elif self.status is not None and not self._session.is_idle:
            self.status.update(_status_line(self._session))
