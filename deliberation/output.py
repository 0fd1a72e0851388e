"""Rich console output and markdown transcript save for deliberation results."""

import logging
import re
from pathlib import Path

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from deliberation.models import DebateResult, DebateRound, QuorumResponse, SynthesisResult

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)


def _slug(text: str, max_len: int = 40) -> str:
    """Convert text to a filename-safe slug."""
    slug = re.sub(r"[^\w\s-]", "", text.lower())
    slug = re.sub(r"[\s_-]+", "-", slug).strip("-")
    return slug[:max_len]


def _preview(content: str, words: int = 50) -> str:
    """Return first N words of a text."""
    all_words = content.split()
    preview = " ".join(all_words[:words])
    if len(all_words) > words:
        preview += "..."
    return preview


def print_quorum(result: QuorumResponse, round_label: str | None = None) -> None:
    """Print responses, agreement and consensus (or its absence)."""
    title = "Deliberation" if round_label is None else f"Deliberation {round_label}"
    console.print(Rule(f"[bold cyan]{title}[/bold cyan]"))
    for resp in result.responses:
        console.print(
            Panel(
                _preview(resp.content),
                title=f"[bold]{resp.model}[/bold]",
                subtitle=f"{resp.latency_sec:.1f}s",
                border_style="dim",
            )
        )

    console.print(
        Text(
            f"Agreement: {result.agreement:.2f} | Threshold: {result.threshold:.2f} | "
            f"Common points: {len(result.common_points)}",
            style="dim",
        )
    )

    if result.disagreements:
        table = Table(title="Disagreements", show_lines=True)
        table.add_column("Topic")
        table.add_column("Positions")
        for dis in result.disagreements:
            table.add_row(dis.topic, "\n".join(f"{p.model}: {p.position}" for p in dis.positions))
        console.print(table)

    if result.consensus is None:
        console.print("[yellow]No consensus: agreement is below the quorum threshold.[/yellow]")
    else:
        console.print(Markdown(result.consensus))


def print_synthesis(result: SynthesisResult) -> None:
    console.print(Rule("[bold green]Synthesis[/bold green]"))
    source = result.synthesizer or "rule-based"
    console.print(Text(f"Synthesized by: {source}", style="dim"))
    console.print(Markdown(result.synthesis))
    for rec in result.recommendations:
        console.print(f"[cyan]*[/cyan] {rec}")


def print_round_summary(rnd: DebateRound) -> None:
    """Print a brief summary of one debate round."""
    console.print(Rule(f"[bold cyan]Round {rnd.round_number} Summary[/bold cyan]"))
    for turn in rnd.turns:
        refs = ", ".join(str(i + 1) for i in turn.referenced_turns)
        console.print(
            Panel(
                _preview(turn.content),
                title=f"[bold]{turn.model}[/bold]",
                subtitle=f"refs: {refs}" if refs else None,
                border_style="dim",
            )
        )
    console.print(Text(rnd.summary, style="dim"))


def print_debate(result: DebateResult) -> None:
    """Print the final synthesis and verdict using Rich markdown."""
    console.print(Rule("[bold green]Debate Synthesis[/bold green]"))
    console.print(
        Text(
            f"Duration: {result.duration_sec:.1f}s | Rounds: {len(result.rounds)} | "
            f"Participants: {', '.join(result.models)}",
            style="dim",
        )
    )
    console.print(Markdown(result.final_synthesis))
    if result.winner is not None:
        console.print(Rule("[bold magenta]Judge Verdict[/bold magenta]"))
        console.print(f"[bold]Winner:[/bold] {result.winner}")
        if result.judge_reasoning:
            console.print(Markdown(result.judge_reasoning))


def save_debate(result: DebateResult, output_dir: Path, slug_override: str | None = None) -> Path:
    """Save the full debate transcript as a markdown file.

    Args:
        result: The completed DebateResult.
        output_dir: Directory to save the file in.
        slug_override: If provided, use this as the filename stem instead of
            deriving one from the topic.

    Returns:
        Path to the saved file.
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    timestamp = result.timestamp.strftime("%Y%m%d_%H%M%S")
    slug = slug_override if slug_override is not None else _slug(result.topic)
    filepath = output_dir / f"{timestamp}_{slug}.md"

    lines: list[str] = [
        f"# Debate: {result.topic[:80]}",
        "",
        f"**Date:** {result.timestamp.strftime('%Y-%m-%d %H:%M:%S')}",
        f"**Participants:** {', '.join(result.models)}",
        f"**Rounds:** {len(result.rounds)}",
        f"**Duration:** {result.duration_sec:.1f}s",
        "",
        "---",
        "",
    ]

    for rnd in result.rounds:
        lines += [f"## Round {rnd.round_number}", "", f"*{rnd.summary}*", ""]
        for turn in rnd.turns:
            lines += [f"### {turn.model}", "", turn.content, ""]

    lines += ["## Synthesis", "", result.final_synthesis, ""]

    if result.winner is not None:
        lines += ["## Verdict", "", f"**Winner:** {result.winner}", ""]
        if result.judge_reasoning:
            lines += [result.judge_reasoning, ""]

    filepath.write_text("\n".join(lines), encoding="utf-8")
    logger.info("Debate saved to: %s", filepath)
    return filepath
