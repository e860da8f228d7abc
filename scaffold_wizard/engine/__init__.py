"""Wizard engine - ordered prompt and execute steps over a shared context."""

from .context import WizardContext, copy_wizard_context, interpolate
from .engine import Wizard, WizardFailure, WizardState
from .errors import (
    MissingContextError,
    UserCancelledError,
    WizardError,
    WizardStateError,
    is_cancellation,
)
from .loader import SpecLoader, StepRegistry, build_wizard
from .runner import ActionRunner, MockActionRunner, RealActionRunner
from .schema import ExecuteStepSpec, PromptStepSpec, WizardSpec
from .steps import ActionExecuteStep, ExecuteStep, InputPromptStep, PromptStep

__all__ = [
    'Wizard',
    'WizardState',
    'WizardFailure',
    'WizardContext',
    'copy_wizard_context',
    'interpolate',
    'PromptStep',
    'ExecuteStep',
    'InputPromptStep',
    'ActionExecuteStep',
    'WizardError',
    'UserCancelledError',
    'MissingContextError',
    'WizardStateError',
    'is_cancellation',
    'SpecLoader',
    'StepRegistry',
    'build_wizard',
    'ActionRunner',
    'RealActionRunner',
    'MockActionRunner',
    'WizardSpec',
    'PromptStepSpec',
    'ExecuteStepSpec',
]
