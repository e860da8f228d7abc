"""Add Docker Files - the scaffolding wizard and its Compose follow-up."""

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from scaffold_wizard.engine.context import WizardContext, as_context, copy_wizard_context
from scaffold_wizard.engine.engine import Wizard
from scaffold_wizard.engine.errors import is_cancellation
from scaffold_wizard.engine.loader import StepRegistry
from scaffold_wizard.engine.runner import ActionRunner, RealActionRunner
from scaffold_wizard.utils.diagnostics import DiagnosticCollector

from .compose import compose_command, rewrite_for_new_cli
from .steps import (
    SCAFFOLD_COMPOSE,
    SCAFFOLD_TYPE,
    ChooseComposeStep,
    ChoosePlatformStep,
    ChooseWorkspaceFolderStep,
    ScaffoldFileStep,
    validate_folder,
    validate_platform,
)
from .templates import COMPOSE_FILE, DOCKERFILE, DOCKERIGNORE

logger = logging.getLogger(__name__)

TITLE = 'Add Docker Files'
COMPOSE_TITLE = 'Add Docker Compose Files'

# Context fields read by the Compose follow-up
COMPOSE_BUILD = 'compose_build'
COMPOSE_DETACHED = 'compose_detached'
DOCKER_CONTEXT_TYPE = 'docker_context_type'

ConfigureCompose = Callable[[WizardContext, ActionRunner], None]


def create_scaffold_wizard(context: WizardContext, runner: ActionRunner,
                           default_platform: Optional[str] = None) -> Wizard:
    """Build the Add Docker Files wizard around an existing context."""
    prompt_steps = [
        ChooseWorkspaceFolderStep(),
        ChooseComposeStep(),
        ChoosePlatformStep(default=default_platform),
    ]

    execute_steps = [
        ScaffoldFileStep(DOCKERIGNORE, 100),
        ScaffoldFileStep(DOCKERFILE, 200),
    ]

    return Wizard(context, prompt_steps=prompt_steps, execute_steps=execute_steps,
                  runner=runner, title=TITLE)


def scaffold(
    wizard_context: Optional[Dict[str, Any]] = None,
    prior_wizard_context: Optional[Mapping[str, Any]] = None,
    runner: Optional[ActionRunner] = None,
    configure_compose: Optional[ConfigureCompose] = None,
    default_platform: Optional[str] = None,
    collector: Optional[DiagnosticCollector] = None,
) -> WizardContext:
    """
    Run the Add Docker Files wizard.

    Args:
        wizard_context: Answers supplied up front; shared by reference
        prior_wizard_context: Context of an earlier run to carry answers from
        runner: ActionRunner for side effects (default: RealActionRunner)
        configure_compose: Follow-up run when the user opts into Compose
            (default: scaffold_compose_files)
        default_platform: Preselected answer for the platform question
        collector: Records where an operational failure happened

    Returns:
        The final context

    Raises:
        UserCancelledError: If the user backs out of a prompt
    """
    runner = runner if runner is not None else RealActionRunner()
    context = as_context(wizard_context)
    copy_wizard_context(context, prior_wizard_context)
    context[SCAFFOLD_TYPE] = 'all'

    wizard = create_scaffold_wizard(context, runner, default_platform)
    try:
        wizard.run()
    except Exception:
        if collector is not None:
            collector.record_wizard(wizard)
        raise

    if context.get(SCAFFOLD_COMPOSE):
        follow_up = configure_compose or scaffold_compose_files
        try:
            follow_up(context, runner)
        except Exception as e:
            if collector is not None and not is_cancellation(e):
                collector.record_failure(
                    wizard=COMPOSE_TITLE,
                    phase='execute',
                    step=getattr(follow_up, '__name__', 'configure_compose'),
                    error=f"{type(e).__name__}: {e}",
                    context=context.data,
                )
            raise

    return context


def scaffold_compose_files(context: WizardContext, runner: ActionRunner) -> None:
    """Write docker-compose.yml for an already-scaffolded workspace.

    Runs straight to the execute phase: the context from the first wizard
    already holds the folder and platform.
    """
    wizard = Wizard(
        context,
        execute_steps=[ScaffoldFileStep(COMPOSE_FILE, 300)],
        runner=runner,
        title=COMPOSE_TITLE,
        prepopulated=True,
    )
    wizard.execute()

    command = compose_command(
        'up',
        [COMPOSE_FILE],
        detached=context.get(COMPOSE_DETACHED, True),
        build=context.get(COMPOSE_BUILD, True),
    )
    if context.get(DOCKER_CONTEXT_TYPE) == 'aci':
        command = rewrite_for_new_cli(command)
    runner.display(f"Start it with: {command}")


def register_actions(registry: StepRegistry) -> None:
    """Expose the scaffolding steps to declarative wizards."""
    registry.register_validator('scaffold.validate_folder', validate_folder)
    registry.register_validator('scaffold.validate_platform', validate_platform)
    registry.register_action('scaffold.write_dockerignore', ScaffoldFileStep(DOCKERIGNORE, 100).execute)
    registry.register_action('scaffold.write_dockerfile', ScaffoldFileStep(DOCKERFILE, 200).execute)
    registry.register_action('scaffold.write_compose', ScaffoldFileStep(COMPOSE_FILE, 300).execute)
    registry.register_action('scaffold.configure_compose', scaffold_compose_files)
