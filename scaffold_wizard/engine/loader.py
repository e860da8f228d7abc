"""SpecLoader - loads declarative wizards from YAML and builds them."""

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from .engine import Wizard
from .runner import ActionRunner
from .schema import WizardSpec
from .steps import Action, ActionExecuteStep, InputPromptStep, Validator

logger = logging.getLogger(__name__)


class SpecLoader:
    """
    Loads wizard specifications from YAML files.

    Validates structure using Pydantic models.
    """

    def __init__(self, base_path: Optional[Path] = None):
        """
        Initialize loader.

        Args:
            base_path: Directory holding <name>.yaml specs (default: ./.wizards)
        """
        if base_path is None:
            base_path = Path.cwd() / ".wizards"
        self.base_path = Path(base_path)

    def load_wizard(self, name: str) -> WizardSpec:
        """
        Load a wizard spec by name from the base directory.

        Raises:
            FileNotFoundError: If spec file doesn't exist
            ValidationError: If YAML doesn't match schema
        """
        return self.load_file(self.base_path / f"{name}.yaml")

    def load_file(self, path: Union[str, Path]) -> WizardSpec:
        """Load a wizard spec from an explicit path."""
        spec_path = Path(path)

        if not spec_path.exists():
            raise FileNotFoundError(f"Wizard spec not found: {spec_path}")

        with open(spec_path, 'r') as f:
            data = yaml.safe_load(f) or {}

        logger.debug("Loaded wizard spec %s", spec_path)
        return WizardSpec(**data)


class StepRegistry:
    """Named validators and actions that declarative specs can refer to."""

    def __init__(self):
        self.validators: Dict[str, Validator] = {}
        self.actions: Dict[str, Action] = {}

    def register_validator(self, name: str, fn: Validator) -> None:
        self.validators[name] = fn

    def register_action(self, name: str, fn: Action) -> None:
        self.actions[name] = fn

    def validator(self, name: str) -> Validator:
        if name not in self.validators:
            raise ValueError(f"Unknown validator: {name}")
        return self.validators[name]

    def action(self, name: str) -> Action:
        if name not in self.actions:
            raise ValueError(f"Unknown action: {name}")
        return self.actions[name]


def build_wizard(
    spec: WizardSpec,
    registry: StepRegistry,
    context: Optional[Mapping[str, Any]] = None,
    runner: Optional[ActionRunner] = None,
) -> Wizard:
    """Turn a WizardSpec into a Wizard.

    Every validator and action name is resolved up front, so an unknown
    name fails before any step runs.
    """
    prompt_steps = [
        InputPromptStep(
            step_id=step.id,
            prompt=step.prompt,
            state_key=step.state_key,
            type=step.type,
            default_value=step.default_value,
            default_from=step.default_from,
            validator=registry.validator(step.validator) if step.validator else None,
            options=step.options,
        )
        for step in spec.prompt_steps
    ]

    execute_steps = [
        ActionExecuteStep(
            step_id=step.id,
            action=registry.action(step.action),
            priority=step.priority,
            when=step.when,
        )
        for step in spec.execute_steps
    ]

    return Wizard(
        context,
        prompt_steps=prompt_steps,
        execute_steps=execute_steps,
        runner=runner,
        title=spec.title,
    )
