"""Step abstractions for the wizard engine.

Two capability sets, kept separate so new steps can be added without
touching the engine:

- PromptStep: should_prompt(ctx) / prompt(ctx, runner), run in list order
- ExecuteStep: priority / execute(ctx, runner), run in ascending priority
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from .context import interpolate
from .runner import ActionRunner

Validator = Callable[[Any, Dict[str, Any]], Any]
Action = Callable[[Dict[str, Any], ActionRunner], None]

TRUE_ANSWERS = ('y', 'yes', 'true', '1')
FALSE_ANSWERS = ('n', 'no', 'false', '0')


class PromptStep(ABC):
    """Gathers or validates input before any effect is applied."""

    id: Optional[str] = None

    @property
    def step_id(self) -> str:
        return self.id or type(self).__name__

    def should_prompt(self, ctx) -> bool:
        """Return False to skip this step entirely."""
        return True

    @abstractmethod
    def prompt(self, ctx, runner: ActionRunner) -> None:
        """Ask for input and store it in ctx."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.step_id}>"


class ExecuteStep(ABC):
    """Applies a concrete effect once all inputs are known.

    Lower priority runs first. The engine performs no rollback, so each
    step must be safe to apply on its own or undo its own effect.
    """

    id: Optional[str] = None
    priority: int = 100

    @property
    def step_id(self) -> str:
        return self.id or type(self).__name__

    def should_execute(self, ctx) -> bool:
        return True

    @abstractmethod
    def execute(self, ctx, runner: ActionRunner) -> None:
        """Apply this step's effect."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.step_id} priority={self.priority}>"


def _normalize_options(options: Optional[Sequence[Union[str, Dict[str, str]]]]) -> List[Dict[str, str]]:
    normalized = []
    for option in options or []:
        if isinstance(option, dict):
            value = option['value']
            normalized.append({'value': value, 'label': option.get('label', value)})
        else:
            normalized.append({'value': option, 'label': option})
    return normalized


class InputPromptStep(PromptStep):
    """
    Declarative question stored under a single context key.

    Skipped when the key already holds a value, so caller-supplied
    answers are never asked again.
    """

    TYPES = ('string', 'boolean', 'integer', 'enum')

    def __init__(
        self,
        step_id: str,
        prompt: str,
        state_key: str,
        type: str = 'string',
        default_value: Any = None,
        default_from: Optional[str] = None,
        validator: Optional[Validator] = None,
        options: Optional[Sequence[Union[str, Dict[str, str]]]] = None,
    ):
        if type not in self.TYPES:
            raise ValueError(f"Unknown prompt type: {type}")
        if type == 'enum' and not options:
            raise ValueError(f"Enum step '{step_id}' needs options")

        self.id = step_id
        self.prompt_text = prompt
        self.state_key = state_key
        self.type = type
        self.default_value = default_value
        self.default_from = default_from
        self.validator = validator
        self.options = _normalize_options(options)

    def should_prompt(self, ctx) -> bool:
        return ctx.get(self.state_key) is None

    def prompt(self, ctx, runner: ActionRunner) -> None:
        ctx[self.state_key] = self._get_validated_input(ctx, runner)

    def _default(self, ctx) -> Any:
        default = self.default_value
        if self.default_from:
            default = ctx.get(self.default_from, default)
        return default

    def _get_validated_input(self, ctx, runner: ActionRunner) -> Any:
        """Ask until the answer converts and validates.

        A non-interactive runner gets one attempt; the ValueError propagates.
        """
        while True:
            default = self._default(ctx)

            if self.type == 'enum':
                runner.display("")
                for i, option in enumerate(self.options, 1):
                    runner.display(f"  {i}. {option['label']}")
                runner.display("")

            values = dict(ctx)
            values['current_value'] = default
            user_input = runner.get_input(interpolate(self.prompt_text, values), default)

            try:
                value = self._convert(user_input)
                if self.validator and value not in ('', None):
                    value = self.validator(value, ctx)
                return value
            except ValueError as e:
                if not runner.interactive:
                    raise
                runner.display(f"Error: {e}")

    def _convert(self, user_input: Any) -> Any:
        if isinstance(user_input, str):
            user_input = user_input.strip()

        if self.type == 'boolean':
            if isinstance(user_input, bool):
                return user_input
            answer = str(user_input).lower()
            if answer in TRUE_ANSWERS:
                return True
            if answer in FALSE_ANSWERS or answer == '':
                return False
            raise ValueError(f"Please answer yes or no, not '{user_input}'")

        if self.type == 'integer':
            if user_input == '' or isinstance(user_input, int):
                return user_input
            try:
                return int(user_input)
            except ValueError:
                raise ValueError(f"Invalid integer value: {user_input}") from None

        if self.type == 'enum':
            return self._match_option(user_input)

        return user_input

    def _match_option(self, user_input: Any) -> Any:
        text = str(user_input)
        if text.isdigit():
            index = int(text)
            if 1 <= index <= len(self.options):
                return self.options[index - 1]['value']
        for option in self.options:
            if text == option['value'] or text.lower() == option['label'].lower():
                return option['value']
        raise ValueError(f"Invalid choice: {user_input}")


class ActionExecuteStep(ExecuteStep):
    """Runs an action callable fn(ctx, runner) at a given priority.

    If `when` names a context key, the step only runs when that field is truthy.
    """

    def __init__(self, step_id: str, action: Action, priority: int = 100, when: Optional[str] = None):
        self.id = step_id
        self.action = action
        self.priority = priority
        self.when = when

    def should_execute(self, ctx) -> bool:
        if self.when is None:
            return True
        return bool(ctx.get(self.when))

    def execute(self, ctx, runner: ActionRunner) -> None:
        self.action(ctx, runner)
