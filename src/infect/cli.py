"""Command line interface for Infect.

Commands:
    infect demo     Run the counter demo through a reactor
    infect config   Show the effective reactor configuration
"""

from dataclasses import asdict, replace

import click
from rich.console import Console
from rich.table import Table

from infect.core import (
    Reactor,
    StoppedClosed,
    StoppedIdle,
    StoppedRejected,
    ThreadPoolTaskExecutor,
)
from infect.demo import (
    Counter,
    CounterRenderer,
    CounterSnapshot,
    IncrementLater,
    counter_failure_effect,
    run_counter_task,
)
from infect.foundation.config import ReactorConfig, load_config
from infect.foundation.errors import InfectError
from infect.foundation.logging import configure_logging
from infect.foundation.threading import runtime_info

console = Console()


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to a config.yaml (default: .infect/config.yaml)",
)
@click.pass_context
def main(ctx: click.Context, debug: bool, config_path: str | None) -> None:
    """Infect - message-driven reactor core."""
    try:
        config = load_config(config_path)
    except InfectError as e:
        raise click.ClickException(str(e)) from e
    configure_logging(debug=debug, level=None if debug else config.log_level)
    ctx.obj = config


@main.command("demo")
@click.option("--steps", "-n", type=click.IntRange(min=1), default=5, help="Target counter value")
@click.option("--capacity", "-c", type=click.IntRange(min=1), default=None, help="Channel capacity")
@click.option("--delay", "-d", type=click.FloatRange(min=0.0), default=0.1, help="Seconds the first increment takes")
@click.option("--fail", is_flag=True, help="Make the delayed increment fail")
@click.option("--limit", type=click.IntRange(min=0), default=None, help="Reject increments beyond this value")
@click.pass_obj
def demo(
    config: ReactorConfig,
    steps: int,
    capacity: int | None,
    delay: float,
    fail: bool,
    limit: int | None,
) -> None:
    """Count up to STEPS with a delayed task and render feedback.

    \b
    Examples:
        infect demo                  # Count to 5
        infect demo -n 20 -c 4       # Count to 20 through a tiny channel
        infect demo --fail           # Watch a failed task become an effect
        infect demo -n 10 --limit 3  # Stop on a rejected intent
    """
    if capacity is not None:
        config = replace(config, channel_capacity=capacity)
    if config.idle_poll_interval is None:
        config = replace(config, idle_poll_interval=0.05)

    table = Table(title="Renders")
    table.add_column("#", justify="right", style="dim")
    table.add_column("value", justify="right")
    table.add_column("pending")
    table.add_column("changed")
    table.add_column("error", style="red")

    def on_render(snapshot: CounterSnapshot) -> None:
        table.add_row(
            str(table.row_count + 1),
            str(snapshot.value),
            "yes" if snapshot.pending else "",
            ", ".join(sorted(snapshot.changed)),
            snapshot.last_error or "",
        )

    model = Counter(limit=limit)
    renderer = CounterRenderer(target=steps, on_render=on_render)
    with ThreadPoolTaskExecutor(
        run_counter_task,
        max_workers=config.max_workers,
        failure_effect=counter_failure_effect,
    ) as executor:
        reactor = Reactor(model, renderer, executor, config)
        reactor.submit_intent(IncrementLater(step=1, delay=delay, fail=fail))
        outcome = reactor.run()

    console.print(table)
    match outcome:
        case StoppedIdle():
            console.print(f"[green]Idle[/green] after {model.applied} effects, value={model.value}")
        case StoppedClosed():
            console.print(f"[yellow]Channel closed[/yellow], value={model.value}")
        case StoppedRejected(reason):
            console.print(f"[red]Rejected:[/red] {reason} (value={model.value})")
            raise SystemExit(1)


@main.command("config")
@click.pass_obj
def show_config(config: ReactorConfig) -> None:
    """Show the effective reactor configuration."""
    table = Table(title="Reactor configuration")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in asdict(config).items():
        table.add_row(key, repr(value))
    for key, value in runtime_info().items():
        table.add_row(f"runtime.{key}", repr(value))
    console.print(table)


if __name__ == "__main__":
    main()
