"""Prompt and execute steps of the Add Docker Files wizard."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from scaffold_wizard.engine.runner import ActionRunner
from scaffold_wizard.engine.steps import TRUE_ANSWERS, ExecuteStep, InputPromptStep

from .templates import PLATFORMS, check_platform, render

logger = logging.getLogger(__name__)

# Context fields
WORKSPACE_FOLDER = 'workspace_folder'
SCAFFOLD_TYPE = 'scaffold_type'
SCAFFOLD_COMPOSE = 'scaffold_compose'
PLATFORM = 'platform'
OVERWRITE_EXISTING = 'overwrite_existing'
SCAFFOLDED_FILES = 'scaffolded_files'
SKIPPED_FILES = 'skipped_files'


def validate_folder(value: str, ctx: Dict[str, Any]) -> str:
    """Validate that the workspace folder exists.

    Returns:
        Absolute path of the folder

    Raises:
        ValueError: If the folder doesn't exist
    """
    path = Path(str(value).strip()).expanduser()
    if not path.is_dir():
        raise ValueError(f"Folder does not exist: {value}")
    return str(path.resolve())


def validate_platform(value: str, ctx: Dict[str, Any]) -> str:
    return check_platform(value)


class ChooseWorkspaceFolderStep(InputPromptStep):
    """Asks which folder the Docker files go in."""

    def __init__(self):
        super().__init__(
            step_id='choose_workspace_folder',
            prompt='Workspace folder to add Docker files to',
            state_key=WORKSPACE_FOLDER,
            default_value='.',
            validator=validate_folder,
        )


class ChooseComposeStep(InputPromptStep):
    def __init__(self):
        super().__init__(
            step_id='choose_compose',
            prompt='Include optional Docker Compose files?',
            state_key=SCAFFOLD_COMPOSE,
            type='boolean',
            default_value=False,
        )


class ChoosePlatformStep(InputPromptStep):
    def __init__(self, default: Optional[str] = None):
        super().__init__(
            step_id='choose_platform',
            prompt='Select application platform',
            state_key=PLATFORM,
            type='enum',
            default_value=default,
            validator=validate_platform,
            options=PLATFORMS,
        )


class ScaffoldFileStep(ExecuteStep):
    """
    Writes one rendered file into the workspace folder.

    An existing file is only replaced when overwrite_existing is set or the
    user agrees; declining keeps the file and the step still succeeds, so
    running the wizard again is harmless.
    """

    def __init__(self, file_name: str, priority: int):
        self.file_name = file_name
        self.priority = priority
        self.id = f"scaffold:{file_name}"

    def execute(self, ctx, runner: ActionRunner) -> None:
        folder = ctx.require(WORKSPACE_FOLDER)
        content = render(self.file_name, ctx.require(PLATFORM), ctx)
        path = os.path.join(folder, self.file_name)

        if runner.file_exists(path) and not ctx.get(OVERWRITE_EXISTING):
            answer = runner.get_input(f"{self.file_name} already exists. Overwrite?", False)
            if not _is_yes(answer):
                logger.info("Keeping existing %s", path)
                runner.display(f"Keeping existing {self.file_name}")
                ctx.setdefault(SKIPPED_FILES, []).append(path)
                return

        runner.write_file(path, content)
        ctx.setdefault(SCAFFOLDED_FILES, []).append(path)
        runner.display(f"✓ Created {path}")


def _is_yes(answer: Any) -> bool:
    if isinstance(answer, bool):
        return answer
    return str(answer).strip().lower() in TRUE_ANSWERS
