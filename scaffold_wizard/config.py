"""Settings for the wizards: a YAML file in the workspace plus environment overrides."""

import logging
import os
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

SETTINGS_FILE = '.scaffold-wizard.yaml'

ENV_LOG_LEVEL = 'SCAFFOLD_WIZARD_LOG_LEVEL'
ENV_VERBOSE = 'WIZARD_VERBOSE'
ENV_PLATFORM = 'SCAFFOLD_WIZARD_PLATFORM'


class WizardSettings(BaseModel):
    """User-tunable behaviour of the scaffolding wizards."""

    model_config = ConfigDict(extra="forbid")

    log_level: str = Field("INFO", description="Logging level")
    verbose: bool = Field(False, description="Let command output flow to the terminal")
    default_platform: Optional[str] = Field(None, description="Platform used when none is given")
    compose_build: bool = Field(True, description="Add --build to compose up")
    compose_detached: bool = Field(True, description="Add -d to compose up")
    overwrite_existing: bool = Field(False, description="Overwrite existing files without asking")


def load_settings(workspace: Union[str, Path, None] = None) -> WizardSettings:
    """Load settings from <workspace>/.scaffold-wizard.yaml and the environment.

    Environment variables win over the file.

    Raises:
        ValidationError: If the file doesn't match the settings schema
    """
    data = {}

    if workspace is not None:
        settings_path = Path(workspace) / SETTINGS_FILE
        if settings_path.exists():
            with open(settings_path, 'r') as f:
                data = yaml.safe_load(f) or {}
            logger.debug("Loaded settings from %s", settings_path)

    if os.environ.get(ENV_LOG_LEVEL):
        data['log_level'] = os.environ[ENV_LOG_LEVEL]
    if os.environ.get(ENV_VERBOSE):
        data['verbose'] = True
    if os.environ.get(ENV_PLATFORM):
        data['default_platform'] = os.environ[ENV_PLATFORM]

    return WizardSettings(**data)
