
from __future__ import annotations
import sys
from typing import Optional
import typer
from rich import print
from rich.table import Table
from loguru import logger

from ..core.cancel import CancellationToken, cancel_on_sigint
from ..core.config import TakeplanConfig, load_config
from ..core.errors import TakeplanError
from ..core.sim import ScheduleRunner
from ..core.state import ScheduleState
from ..io.loaders import find_tasks, open_task, resolve_task
from ..io.writers import write_output
from ..models.policies import make_policy
from ..models.scoring import score_breakdown

app = typer.Typer(no_args_is_help=True, help="takeplan: pick, order and size source takes under a time budget")


def _configure_logging(cfg: TakeplanConfig, verbose: bool, quiet: bool) -> None:
    level = "DEBUG" if verbose else "WARNING" if quiet else cfg.run.log_level
    logger.remove()
    logger.add(sys.stderr, level=level)


def _load(config: Optional[str], verbose: bool, quiet: bool) -> TakeplanConfig:
    try:
        cfg = load_config(config)
    except TakeplanError as e:
        logger.error("{}", e)
        raise typer.Exit(code=1)
    _configure_logging(cfg, verbose, quiet)
    return cfg


def _summary(name: str, state: ScheduleState) -> None:
    bd = score_breakdown(state.committed, state.value_model)
    table = Table(title=f"Task {name}")
    table.add_column("takes", justify="right")
    table.add_column("items", justify="right")
    table.add_column("time used", justify="right")
    table.add_column("score", justify="right", style="bold green")
    table.add_row(str(len(state.committed)), str(bd.items_harvested),
                  f"{state.elapsed}/{state.budget}", str(bd.total))
    print(table)


@app.command("run")
def run_cmd(pick: str = typer.Argument(..., help="Task to run: first input file whose name starts with this"),
            reparse: bool = typer.Option(False, "--reparse", "-r", help="Ignore the checkpoint and parse the input again"),
            lookahead: bool = typer.Option(False, "--lookahead", "-l", help="Use the two-candidate lookahead policy"),
            config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to YAML config"),
            verbose: bool = typer.Option(False, "--verbose", "-v", help="DEBUG logging"),
            quiet: bool = typer.Option(False, "--quiet", "-q", help="Only WARN+")):
    cfg = _load(config, verbose, quiet)
    if lookahead:
        cfg.engine.strategy = "lookahead"
    try:
        files = resolve_task(pick, cfg.data)
        state = open_task(files, reparse=reparse)
        policy = make_policy(cfg.engine)
    except (TakeplanError, KeyError) as e:
        logger.error("{}", e)
        raise typer.Exit(code=1)

    store = files.store()
    every = cfg.run.checkpoint_every

    def _on_step(st: ScheduleState) -> None:
        if every and len(st.committed) % every == 0:
            store.save(st)

    token = CancellationToken()
    with cancel_on_sigint(token):
        result = ScheduleRunner(state, policy, cancel=token).run(on_step=_on_step)

    store.save(state)
    write_output(files.output_path, state.committed)
    _summary(files.name, state)
    if result.cancelled:
        print("[yellow]Run interrupted; progress saved, rerun to resume[/yellow]")


@app.command("tasks")
def tasks_cmd(config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to YAML config")):
    cfg = _load(config, False, False)
    try:
        stems = find_tasks(cfg.data)
    except TakeplanError as e:
        logger.error("{}", e)
        raise typer.Exit(code=1)
    for stem in stems:
        typer.echo(stem)


@app.command("score")
def score_cmd(pick: str = typer.Argument(..., help="Task whose checkpoint should be scored"),
              config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to YAML config")):
    cfg = _load(config, False, False)
    try:
        files = resolve_task(pick, cfg.data)
        state = files.store().load()
    except TakeplanError as e:
        logger.error("{}", e)
        raise typer.Exit(code=1)
    _summary(files.name, state)


def main():
    app()
