"""Add Docker Files scaffolding wizard - writes Dockerfile/.dockerignore into a workspace."""

from .compose import compose_command, compose_commands, rewrite_for_new_cli
from .scaffold import create_scaffold_wizard, register_actions, scaffold, scaffold_compose_files
from .steps import (
    ChooseComposeStep,
    ChoosePlatformStep,
    ChooseWorkspaceFolderStep,
    ScaffoldFileStep,
)
from .templates import PLATFORMS

__all__ = [
    'scaffold',
    'scaffold_compose_files',
    'create_scaffold_wizard',
    'register_actions',
    'ChooseWorkspaceFolderStep',
    'ChooseComposeStep',
    'ChoosePlatformStep',
    'ScaffoldFileStep',
    'PLATFORMS',
    'compose_command',
    'compose_commands',
    'rewrite_for_new_cli',
]
