"""Core wizard engine - runs prompt steps then execute steps on one context."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .context import WizardContext, as_context
from .errors import WizardStateError, is_cancellation
from .runner import ActionRunner, RealActionRunner
from .steps import ExecuteStep, PromptStep

logger = logging.getLogger(__name__)


class WizardState(str, Enum):
    CREATED = 'created'
    PROMPTING = 'prompting'
    PROMPTED = 'prompted'
    EXECUTING = 'executing'
    DONE = 'done'
    FAILED = 'failed'


@dataclass
class WizardFailure:
    """Where a run stopped. The exception itself is re-raised untouched."""

    phase: str
    step_id: str
    error: BaseException

    @property
    def cancelled(self) -> bool:
        return is_cancellation(self.error)


class Wizard:
    """
    Runs two ordered step pipelines against one shared context.

    Key responsibilities:
    - Prompt phase: steps in declared order, skipping those whose
      should_prompt(ctx) is False
    - Execute phase: steps in ascending priority, ties kept in declaration order
    - Stop at the first failing step and re-raise its exception unchanged
    - Record which phase and step failed; never roll anything back

    A Wizard runs once. Construct a new one per invocation.
    """

    def __init__(
        self,
        context: Optional[Mapping[str, Any]] = None,
        prompt_steps: Sequence[PromptStep] = (),
        execute_steps: Sequence[ExecuteStep] = (),
        runner: Optional[ActionRunner] = None,
        title: Optional[str] = None,
        prepopulated: bool = False,
    ):
        """
        Initialize the wizard.

        Args:
            context: Initial context; a dict is shared by reference. Fields
                already set count as caller-supplied answers.
            prompt_steps: Prompt steps in the order they should run
            execute_steps: Execute steps; order only matters between equal priorities
            runner: ActionRunner for side effects (default: RealActionRunner)
            title: Shown once when prompting starts
            prepopulated: Allow execute() without prompt(), for callers that
                already hold a complete context
        """
        self.context: WizardContext = as_context(context)
        self.prompt_steps = tuple(prompt_steps)
        self.execute_steps = tuple(execute_steps)
        self.runner = runner if runner is not None else RealActionRunner()
        self.title = title
        self.prepopulated = prepopulated

        self.state = WizardState.CREATED
        self.failure: Optional[WizardFailure] = None
        self.completed_steps: List[str] = []

    def _transition(self, allowed: Sequence[WizardState], new_state: WizardState) -> None:
        if self.state not in allowed:
            raise WizardStateError(
                f"Cannot move to {new_state.value} from {self.state.value}"
            )
        logger.debug("Wizard %s: %s -> %s", self.title or '', self.state.value, new_state.value)
        self.state = new_state

    def _fail(self, phase: str, step, error: Exception) -> None:
        self.failure = WizardFailure(phase=phase, step_id=step.step_id, error=error)
        self.state = WizardState.FAILED
        if self.failure.cancelled:
            logger.info("Wizard cancelled during %s at step %s", phase, step.step_id)
        else:
            logger.warning("Wizard failed during %s at step %s: %s", phase, step.step_id, error)

    def prompt(self) -> None:
        """Run every prompt step whose predicate holds, in declared order."""
        self._transition([WizardState.CREATED], WizardState.PROMPTING)

        if self.title:
            self.runner.display(self.title)

        for step in self.prompt_steps:
            try:
                if not step.should_prompt(self.context):
                    logger.debug("Skipping prompt step %s", step.step_id)
                    continue
                step.prompt(self.context, self.runner)
            except Exception as e:
                self._fail('prompt', step, e)
                raise
            self.completed_steps.append(step.step_id)

        self.state = WizardState.PROMPTED

    def ordered_execute_steps(self) -> List[ExecuteStep]:
        """Execute steps by ascending priority; sorted() is stable."""
        return sorted(self.execute_steps, key=lambda step: step.priority)

    def execute(self) -> None:
        """Run execute steps in priority order, stopping at the first failure."""
        allowed = [WizardState.PROMPTED]
        if self.prepopulated:
            allowed.append(WizardState.CREATED)
        self._transition(allowed, WizardState.EXECUTING)

        for step in self.ordered_execute_steps():
            try:
                if not step.should_execute(self.context):
                    logger.debug("Skipping execute step %s", step.step_id)
                    continue
                step.execute(self.context, self.runner)
            except Exception as e:
                self._fail('execute', step, e)
                raise
            self.completed_steps.append(step.step_id)

        self.state = WizardState.DONE

    def run(self) -> WizardContext:
        """Prompt, then execute. Returns the final context."""
        self.prompt()
        self.execute()
        return self.context

    @property
    def done(self) -> bool:
        return self.state is WizardState.DONE

    @property
    def data(self) -> Dict[str, Any]:
        return self.context.data
