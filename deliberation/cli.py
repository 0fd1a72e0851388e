"""Click CLI — config loading, panel selection, deliberation/debate runs, output."""

import asyncio
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from config.config_loader import AppConfig, load_config
from deliberation.debate import DebateProtocol
from deliberation.engine import DeliberationEngine
from deliberation.errors import DeliberationError
from deliberation.healthcheck import run_health_checks
from deliberation.models import DebateConfig, DebateRound
from deliberation.output import print_debate, print_quorum, print_round_summary, print_synthesis, save_debate
from deliberation.parallel_query import ParallelQueryEngine
from deliberation.providers.base import UnknownProviderError
from deliberation.providers.registry import build_backends
from deliberation.synthesis import SynthesisAgent

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)


@dataclass
class _Context:
    config: AppConfig
    engine: ParallelQueryEngine


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _determine_panel(config: AppConfig, models_arg: str | None) -> list[str]:
    """--models overrides the configured default panel."""
    if models_arg:
        return [m.strip() for m in models_arg.split(",") if m.strip()]
    return list(config.defaults.default_panel)


def _routable(engine: ParallelQueryEngine, model_id: str | None) -> bool:
    if not model_id:
        return False
    try:
        engine.backend_for(model_id)
    except UnknownProviderError:
        return False
    return True


def _build_synthesis_agent(engine: ParallelQueryEngine, synthesizer: str | None) -> SynthesisAgent:
    """AI synthesis when the synthesizer is routable, rule-based otherwise."""
    if _routable(engine, synthesizer):
        return SynthesisAgent(backend=engine, synthesis_model=synthesizer)
    if synthesizer:
        logger.warning("Synthesizer %s has no configured backend, using rule-based synthesis", synthesizer)
    return SynthesisAgent()


def _check_and_filter_models(engine: ParallelQueryEngine, models: list[str]) -> list[str]:
    """Run health checks, print results, and ask what to do on failures.

    Returns the models that answered. Exits if the user declines to
    continue or fewer than two pass.
    """
    console.print("\n[bold]Checking models...[/bold]")
    results: dict[str, tuple[bool, str]] = asyncio.run(run_health_checks(engine, models))

    failed: list[str] = []
    for model_id in models:
        ok, err = results[model_id]
        if ok:
            console.print(f"  [green]OK  [/green] {model_id}")
        else:
            short_err = err.splitlines()[0][:120] if err else "unknown error"
            console.print(f"  [red]FAIL[/red] {model_id}: {short_err}")
            failed.append(model_id)

    working = [m for m in models if m not in failed]
    if not failed:
        console.print()
        return working

    if len(working) < 2:
        console.print("\n[bold red]Error:[/bold red] Fewer than 2 models passed the health check.")
        sys.exit(1)

    console.print(f"\n[yellow]{len(failed)} model(s) failed:[/yellow] {', '.join(failed)}")
    if not click.confirm("Continue with working models only?", default=True):
        sys.exit(0)

    console.print()
    return working


@click.group()
@click.option("--verbose", is_flag=True, help="Enable DEBUG-level logging")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True),
              help="Path to settings.yaml (default: bundled config)")
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: str | None) -> None:
    """Multi-model deliberation and debate.

    \b
    Examples:
      deliberation ask "Is coffee healthy?" --models claude-sonnet-4-5-20250929,gpt-4o
      deliberation ask "Tabs or spaces?" --rounds 3 --synthesize
      deliberation debate "Monolith vs microservices" --rounds 3 --judge gpt-4o
      deliberation models
    """
    load_dotenv()
    _setup_logging(verbose)

    try:
        config = load_config(Path(config_path)) if config_path else load_config()
    except FileNotFoundError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        sys.exit(1)

    backends = build_backends(config)
    if not backends:
        console.print("[bold red]Error:[/bold red] No backends available. Check API keys in .env.")
        sys.exit(1)

    ctx.obj = _Context(config=config, engine=ParallelQueryEngine(backends, config.routes or None))


@main.command()
@click.argument("question")
@click.option("--models", default=None, help="Comma-separated model ids (default: configured panel)")
@click.option("--threshold", default=None, type=float, help="Agreement threshold 0-1 (default: recommended)")
@click.option("--rounds", default=1, show_default=True, type=click.IntRange(min=1), help="Deliberation rounds")
@click.option("--timeout", "timeout_sec", default=None, type=float, help="Per-model timeout in seconds")
@click.option("--synthesize", is_flag=True, help="Also synthesize the final round's responses")
@click.option("--skip-health-check", is_flag=True, default=False, help="Skip the connectivity check")
@click.pass_obj
def ask(
    obj: _Context,
    question: str,
    models: str | None,
    threshold: float | None,
    rounds: int,
    timeout_sec: float | None,
    synthesize: bool,
    skip_health_check: bool,
) -> None:
    """Ask every model the same QUESTION and check for consensus."""
    panel = _determine_panel(obj.config, models)
    if not skip_health_check:
        panel = _check_and_filter_models(obj.engine, panel)

    engine = DeliberationEngine(obj.engine)
    timeout = timeout_sec if timeout_sec is not None else obj.config.defaults.timeout_sec

    async def _run() -> None:
        results = await engine.deliberate_multi_round(
            question,
            panel,
            rounds,
            threshold,
            temperature=obj.config.defaults.temperature,
            timeout_sec=timeout,
        )
        for idx, result in enumerate(results, start=1):
            print_quorum(result, round_label=f"Round {idx}" if len(results) > 1 else None)

        if synthesize:
            agent = _build_synthesis_agent(obj.engine, obj.config.defaults.synthesizer)
            print_synthesis(await agent.synthesize(question, results[-1].responses))

    try:
        asyncio.run(_run())
    except DeliberationError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        sys.exit(1)


@main.command()
@click.argument("topic")
@click.option("--models", default=None, help="Comma-separated model ids, in speaking order")
@click.option("--rounds", default=None, type=int, help="Maximum rounds (default: from config)")
@click.option("--judge", default=None, help="Model id that picks a winner (default: from config)")
@click.option("--synthesizer", default=None, help="Model id for the final synthesis (default: from config)")
@click.option("--round-budget", "round_budget", default=None, type=float,
              help="Advisory per-round time budget in seconds")
@click.option("--output", "output_path", default=None, help="Output directory (default: from config)")
@click.option("--skip-health-check", is_flag=True, default=False, help="Skip the connectivity check")
@click.pass_obj
def debate(
    obj: _Context,
    topic: str,
    models: str | None,
    rounds: int | None,
    judge: str | None,
    synthesizer: str | None,
    round_budget: float | None,
    output_path: str | None,
    skip_health_check: bool,
) -> None:
    """Run a structured multi-round debate on TOPIC."""
    defaults = obj.config.defaults
    panel = _determine_panel(obj.config, models)
    config = DebateConfig(
        topic=topic,
        models=panel,
        rounds=rounds if rounds is not None else defaults.rounds,
        judge_model=judge or defaults.judge,
        round_duration_sec=round_budget,
    )

    protocol = DebateProtocol(
        obj.engine,
        synthesis_agent=_build_synthesis_agent(obj.engine, synthesizer or defaults.synthesizer),
        max_rounds=defaults.max_rounds,
    )
    validation = protocol.validate_config(config)
    if not validation.valid:
        for err in validation.errors:
            console.print(f"[bold red]Error:[/bold red] {err}")
        sys.exit(1)

    if not skip_health_check:
        config.models = _check_and_filter_models(obj.engine, config.models)

    console.print(f"\n[bold cyan]Debate[/bold cyan] — {len(config.models)} models, up to {config.rounds} rounds")
    console.print(f"Speaking order: {', '.join(config.models)}")
    console.print(f"Topic: [italic]{topic[:80]}{'...' if len(topic) > 80 else ''}[/italic]\n")

    async def _run():
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
            transient=True,
        ) as progress:

            def on_round_complete(rnd: DebateRound) -> None:
                progress.print(f"[green]OK[/green] Round {rnd.round_number} complete ({len(rnd.turns)} turns)")

            progress.add_task("Running debate rounds...", total=None)
            return await protocol.debate(config, on_round_complete=on_round_complete)

    try:
        result = asyncio.run(_run())
    except DeliberationError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        sys.exit(1)

    for rnd in result.rounds:
        print_round_summary(rnd)
    print_debate(result)

    output_dir = Path(output_path) if output_path else defaults.output_dir
    saved_path = save_debate(result, output_dir)
    console.print(f"\n[dim]Saved to: {saved_path}[/dim]")


@main.command(name="models")
@click.pass_obj
def list_models(obj: _Context) -> None:
    """List the advisory model catalogue of every configured backend."""
    catalogue = asyncio.run(obj.engine.get_available_models())
    if not catalogue:
        click.echo("No models listed by the configured backends.")
        return
    for model_id in catalogue:
        click.echo(model_id)


if __name__ == "__main__":
    main()
