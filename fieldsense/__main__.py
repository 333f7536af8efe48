"""FieldSense CLI.

Classify fields, manage learned corrections and the training dataset, and
train the soft-match model against the configured storage backend.
"""

import asyncio
import json
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, TypeVar

import typer
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.progress import BarColumn, Progress, TextColumn, TimeElapsedColumn
from rich.table import Table

from fieldsense.api.app import configure_logging
from fieldsense.config import get_settings, is_known_type
from fieldsense.contracts import FieldDescriptor
from fieldsense.data_models import (
    FieldRule,
    TrainingProgress,
    TrainingSample,
)
from fieldsense.inference import SharedInfrastructure

app = typer.Typer(
    name="fieldsense",
    help="FieldSense - form field classification with runtime learning.",
    no_args_is_help=True,
)
console = Console()

T = TypeVar("T")

_rules_adapter = TypeAdapter(list[FieldRule])


@asynccontextmanager
async def _infrastructure() -> AsyncIterator[SharedInfrastructure]:
    settings = get_settings()
    configure_logging(settings)
    infra = await SharedInfrastructure.create(settings)
    try:
        yield infra
    finally:
        await infra.close()


def _run(command: Callable[[SharedInfrastructure], Awaitable[T]]) -> T:
    async def main() -> T:
        async with _infrastructure() as infra:
            return await command(infra)

    return asyncio.run(main())


def _read_json(path: Path) -> Any:
    if not path.exists():
        console.print(f"[red]Error: File not found: {path}[/red]")
        raise typer.Exit(1)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        console.print(f"[red]Error: Invalid JSON in {path}: {e}[/red]")
        raise typer.Exit(1) from e


# -----------------------------------------------------------------------------
# Classification
# -----------------------------------------------------------------------------


@app.command()
def classify(
    label: str | None = typer.Option(None, "--label", "-l", help="Field label"),
    name: str | None = typer.Option(None, "--name", "-n", help="name attribute"),
    field_id: str | None = typer.Option(None, "--id", help="id attribute"),
    placeholder: str | None = typer.Option(None, "--placeholder", "-p"),
    autocomplete: str | None = typer.Option(None, "--autocomplete"),
    input_type: str | None = typer.Option(None, "--type", "-t", help="input type"),
    context: str = typer.Option("", "--context", "-c", help="Nearby text"),
    strategies: list[str] | None = typer.Option(
        None,
        "--strategy",
        "-s",
        help="Strategy to run, in order (repeatable)",
    ),
    sync: bool = typer.Option(False, "--sync", help="Skip async strategies"),
) -> None:
    """Classify one field from its attributes."""
    field = FieldDescriptor(
        label=label,
        name=name,
        id=field_id,
        placeholder=placeholder,
        autocomplete=autocomplete,
        input_type=input_type,
        context_signals=context,
    )

    async def command(infra: SharedInfrastructure):
        pipeline = infra.pipeline_for(strategies)
        await infra.engine.load()
        if sync:
            return pipeline.run(field)
        return await pipeline.run_async(field)

    result = _run(command)

    console.print(
        f"\n[bold]{result.field_type}[/bold] via [cyan]{result.method}[/cyan] "
        f"(confidence {result.confidence:.2f}, {result.duration_ms:.1f}ms)\n"
    )

    table = Table(title="Decision Trace")
    table.add_column("Strategy", style="cyan")
    table.add_column("Status")
    table.add_column("Type")
    table.add_column("Confidence", justify="right")
    table.add_column("Time", justify="right", style="dim")

    durations = {t.strategy: t.duration_ms for t in result.timings}
    for entry in result.decision_trace:
        status_style = "green" if entry.status == "selected" else "dim"
        table.add_row(
            entry.strategy,
            f"[{status_style}]{entry.status}[/{status_style}]",
            entry.field_type or "-",
            f"{entry.confidence:.2f}" if entry.confidence is not None else "-",
            f"{durations.get(entry.strategy, 0.0):.1f}ms",
        )
    console.print(table)


# -----------------------------------------------------------------------------
# Model
# -----------------------------------------------------------------------------


@app.command()
def train(
    include_learned: bool = typer.Option(
        False, "--include-learned", help="Add learned entries to the dataset"
    ),
) -> None:
    """Train the soft-match model from the runtime dataset."""

    async def command(infra: SharedInfrastructure):
        samples = await infra.dataset.training_samples()
        if include_learned:
            samples += [
                TrainingSample(signals=e.signals, field_type=e.field_type)
                for e in await infra.learning.get_entries()
            ]
        console.print(f"[dim]Training on {len(samples)} samples[/dim]")

        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("{task.fields[metrics]}"),
            TimeElapsedColumn(),
            console=console,
        ) as progress:
            task = progress.add_task(
                "Training", total=infra.trainer.epochs, metrics=""
            )

            def on_progress(p: TrainingProgress) -> None:
                progress.update(
                    task,
                    completed=p.epoch,
                    metrics=f"loss={p.loss:.4f} acc={p.accuracy:.3f}",
                )

            return await infra.trainer.train_from_dataset(
                samples, on_progress=on_progress
            )

    result = _run(command)

    if not result.success:
        console.print(f"[red]Training failed: {result.error}[/red]")
        raise typer.Exit(1)

    console.print(
        f"[green]Model trained[/green]: {result.epochs} epochs, "
        f"accuracy {result.final_accuracy:.1%}, loss {result.final_loss:.4f}"
    )
    console.print(
        f"[dim]{result.entries_used} samples, {result.num_classes} classes, "
        f"vocab {result.vocab_size}, {result.duration_ms / 1000:.1f}s[/dim]"
    )


@app.command("model-info")
def model_info() -> None:
    """Show metadata of the stored model."""

    async def command(infra: SharedInfrastructure):
        return await infra.model.get_meta(), await infra.model.get_labels()

    meta, labels = _run(command)
    if meta is None:
        console.print("[yellow]No trained model stored[/yellow]")
        raise typer.Exit(1)

    table = Table(title="Stored Model", show_header=False)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_row("Trained at", meta.trained_at)
    table.add_row("Epochs", str(meta.epochs))
    table.add_row("Final accuracy", f"{meta.final_accuracy:.1%}")
    table.add_row("Final loss", f"{meta.final_loss:.4f}")
    table.add_row("Vocabulary", str(meta.vocab_size))
    table.add_row("Samples", str(meta.entries_used))
    table.add_row("Labels", ", ".join(labels))
    console.print(table)


@app.command("delete-model")
def delete_model(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete the stored model."""
    if not yes:
        typer.confirm("Delete the trained model?", abort=True)

    async def command(infra: SharedInfrastructure):
        existed = await infra.model.has_model()
        await infra.model.delete_model()
        return existed

    if _run(command):
        console.print("[green]Model deleted[/green]")
    else:
        console.print("[dim]No model stored[/dim]")


# -----------------------------------------------------------------------------
# Learned entries
# -----------------------------------------------------------------------------


@app.command()
def learned() -> None:
    """List learned corrections, most recent last."""

    async def command(infra: SharedInfrastructure):
        return await infra.learning.get_entries()

    entries = _run(command)
    if not entries:
        console.print("[dim]No learned entries[/dim]")
        return

    table = Table(title=f"Learned Entries ({len(entries)})")
    table.add_column("Signals", style="cyan")
    table.add_column("Type")
    table.add_column("Generator", style="dim")
    table.add_column("Source")
    for entry in entries:
        table.add_row(
            entry.signals, entry.field_type, entry.generator_type or "-", entry.source
        )
    console.print(table)


@app.command()
def learn(
    signals: str = typer.Argument(..., help="Field signals, e.g. 'CPF Número'"),
    field_type: str = typer.Argument(..., help="Field type, e.g. cpf"),
    generator: str | None = typer.Option(None, "--generator", "-g"),
) -> None:
    """Record a signal -> field type correction."""
    if not is_known_type(field_type):
        console.print(f"[red]Unknown field type: {field_type}[/red]")
        raise typer.Exit(1)

    async def command(infra: SharedInfrastructure):
        return await infra.learning.store(signals, field_type, generator, "auto")

    entry = _run(command)
    if entry is None:
        console.print("[red]Signals are empty after normalization[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Learned[/green] {entry.signals!r} -> {entry.field_type}")


@app.command()
def forget(signals: str = typer.Argument(..., help="Signals to forget")) -> None:
    """Remove one learned correction."""

    async def command(infra: SharedInfrastructure):
        return await infra.learning.remove(signals)

    if _run(command):
        console.print("[green]Entry removed[/green]")
    else:
        console.print("[dim]No entry for these signals[/dim]")


@app.command("clear-learned")
def clear_learned(
    rule_only: bool = typer.Option(
        False, "--rule-only", help="Only remove rule-derived entries"
    ),
) -> None:
    """Clear learned corrections."""

    async def command(infra: SharedInfrastructure):
        if rule_only:
            return await infra.learning.clear_rule_derived()
        count = await infra.learning.count()
        await infra.learning.clear_all()
        return count

    removed = _run(command)
    console.print(f"[green]Removed {removed} learned entries[/green]")


@app.command("retrain-rules")
def retrain_rules(
    path: Path = typer.Argument(..., help="JSON file with a list of field rules"),
) -> None:
    """Rebuild rule-derived learned entries from exported field rules."""
    try:
        rules = _rules_adapter.validate_python(_read_json(path))
    except ValidationError as e:
        console.print(f"[red]Invalid rules file: {e}[/red]")
        raise typer.Exit(1) from e

    async def command(infra: SharedInfrastructure):
        return await infra.learning.retrain_from_rules(rules)

    result = _run(command)

    table = Table(title="Retrain From Rules")
    table.add_column("Rule", style="dim")
    table.add_column("Status")
    table.add_column("Signals", style="cyan")
    table.add_column("Type")
    for detail in result.details:
        style = "green" if detail.status == "imported" else "yellow"
        table.add_row(
            detail.rule_id,
            f"[{style}]{detail.status}[/{style}]",
            detail.signals or "-",
            detail.field_type,
        )
    console.print(table)
    console.print(
        f"{result.imported} imported, {result.skipped} skipped "
        f"of {result.total_rules} rules ({result.duration_ms:.1f}ms)"
    )


# -----------------------------------------------------------------------------
# Dataset
# -----------------------------------------------------------------------------


@app.command("dataset-import")
def dataset_import(
    path: Path = typer.Argument(..., help="JSON file with a list of samples"),
) -> None:
    """Import labeled samples ({signals, field_type, ...}) into the dataset."""
    raw = _read_json(path)
    if not isinstance(raw, list):
        console.print("[red]Expected a JSON list of samples[/red]")
        raise typer.Exit(1)

    async def command(infra: SharedInfrastructure):
        added = await infra.dataset.import_entries(raw)
        return added, await infra.dataset.count()

    try:
        added, total = _run(command)
    except ValidationError as e:
        console.print(f"[red]Invalid sample: {e}[/red]")
        raise typer.Exit(1) from e
    console.print(f"[green]Imported {added} samples[/green] (dataset size {total})")


# -----------------------------------------------------------------------------
# Server
# -----------------------------------------------------------------------------


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8700, "--port"),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("fieldsense.api.app:create_app", host=host, port=port, factory=True)


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
