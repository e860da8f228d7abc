"""Command line entry point: scaffold-wizard."""

import logging
from pathlib import Path
from typing import List, Optional

import typer
import yaml

from .config import load_settings
from .engine.errors import UserCancelledError
from .engine.loader import SpecLoader, StepRegistry, build_wizard
from .engine.runner import RealActionRunner
from .scaffolding import register_actions, scaffold as run_scaffold
from .scaffolding.scaffold import COMPOSE_BUILD, COMPOSE_DETACHED
from .scaffolding.steps import OVERWRITE_EXISTING, PLATFORM, SCAFFOLD_COMPOSE, WORKSPACE_FOLDER
from .utils.diagnostics import DiagnosticCollector
from .utils.logging_config import configure_logging

logger = logging.getLogger(__name__)

app = typer.Typer(help="Multi-step wizards that add Docker files to a workspace.")


def _parse_assignments(assignments: List[str]) -> dict:
    """Turn key=value pairs into context fields; values are parsed as YAML scalars."""
    values = {}
    for assignment in assignments:
        if '=' not in assignment:
            raise typer.BadParameter(f"Expected key=value, got '{assignment}'", param_hint='--set')
        key, raw = assignment.split('=', 1)
        values[key.strip()] = yaml.safe_load(raw) if raw else ''
    return values


def _report_failure(collector: DiagnosticCollector, workspace: Path, error: Exception) -> None:
    typer.echo(f"Error: {error}", err=True)
    if collector.failures:
        typer.echo(collector.get_summary(), err=True)
        if workspace.is_dir():
            log_path = collector.save_log(str(workspace))
            typer.echo(f"Diagnostics saved to {log_path}", err=True)


@app.command()
def scaffold(
    folder: Optional[Path] = typer.Option(None, help="Workspace folder (asked if omitted)"),
    platform: Optional[str] = typer.Option(None, help="Application platform (asked if omitted)"),
    compose: Optional[bool] = typer.Option(None, "--compose/--no-compose", help="Also add docker-compose.yml"),
    overwrite: bool = typer.Option(False, help="Overwrite existing files without asking"),
    verbose: bool = typer.Option(False, help="Debug logging"),
):
    """Add a Dockerfile and .dockerignore to a workspace folder."""
    settings = load_settings(folder if folder is not None else Path.cwd())
    configure_logging("DEBUG" if verbose else settings.log_level)

    context = {
        COMPOSE_BUILD: settings.compose_build,
        COMPOSE_DETACHED: settings.compose_detached,
    }
    if folder is not None:
        context[WORKSPACE_FOLDER] = str(folder.resolve())
    if platform is not None:
        context[PLATFORM] = platform
    if compose is not None:
        context[SCAFFOLD_COMPOSE] = compose
    if overwrite or settings.overwrite_existing:
        context[OVERWRITE_EXISTING] = True

    collector = DiagnosticCollector()
    runner = RealActionRunner(verbose=verbose or settings.verbose)

    try:
        run_scaffold(context, runner=runner, default_platform=settings.default_platform,
                     collector=collector)
    except UserCancelledError:
        typer.echo("Cancelled")
        raise typer.Exit(0)
    except Exception as e:
        logger.debug("Scaffold failed", exc_info=True)
        _report_failure(collector, Path(context.get(WORKSPACE_FOLDER, '.')), e)
        raise typer.Exit(1)

    typer.echo(f"Added {len(context.get('scaffolded_files', []))} file(s)")


@app.command()
def run(
    spec_file: Path = typer.Argument(..., help="YAML wizard spec"),
    set_values: List[str] = typer.Option([], "--set", help="Pre-answer a field: key=value"),
    verbose: bool = typer.Option(False, help="Debug logging"),
):
    """Run a declarative wizard from a YAML spec."""
    context = _parse_assignments(set_values)
    workspace = Path(context.get(WORKSPACE_FOLDER, '.'))
    collector = DiagnosticCollector()
    wizard = None

    try:
        settings = load_settings(Path.cwd())
        configure_logging("DEBUG" if verbose else settings.log_level)

        spec = SpecLoader().load_file(spec_file)
        registry = StepRegistry()
        register_actions(registry)
        wizard = build_wizard(spec, registry, context,
                              runner=RealActionRunner(verbose=verbose or settings.verbose))
        wizard.run()
    except UserCancelledError:
        typer.echo("Cancelled")
        raise typer.Exit(0)
    except Exception as e:
        logger.debug("Wizard %s failed", spec_file, exc_info=True)
        if wizard is not None:
            collector.record_wizard(wizard, name=spec.name)
        else:
            collector.record_failure(
                wizard=str(spec_file),
                phase='load',
                step=spec_file.name,
                error=f"{type(e).__name__}: {e}",
                context=context,
            )
        _report_failure(collector, workspace, e)
        raise typer.Exit(1)

    typer.echo(f"{spec.title or spec.name}: done")


if __name__ == "__main__":
    app()
