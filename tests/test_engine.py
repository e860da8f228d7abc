"""Tests for Wizard - phase ordering, skipping, abort and state management."""

import pytest
from scaffold_wizard.engine.context import WizardContext
from scaffold_wizard.engine.engine import Wizard, WizardState
from scaffold_wizard.engine.errors import (
    MissingContextError,
    UserCancelledError,
    WizardStateError,
)
from scaffold_wizard.engine.runner import MockActionRunner
from scaffold_wizard.engine.steps import ExecuteStep, PromptStep


class RecordingPrompt(PromptStep):
    """Prompt step that logs its calls and optionally sets a field."""

    def __init__(self, step_id, log, sets=None, skip_if_set=None, error=None):
        self.id = step_id
        self.log = log
        self.sets = sets or {}
        self.skip_if_set = skip_if_set
        self.error = error

    def should_prompt(self, ctx):
        if self.skip_if_set:
            return self.skip_if_set not in ctx
        return True

    def prompt(self, ctx, runner):
        self.log.append(self.id)
        if self.error:
            raise self.error
        ctx.update(self.sets)


class RecordingExecute(ExecuteStep):
    """Execute step that logs its calls and optionally fails."""

    def __init__(self, step_id, priority, log, error=None, effect=None):
        self.id = step_id
        self.priority = priority
        self.log = log
        self.error = error
        self.effect = effect

    def execute(self, ctx, runner):
        self.log.append(self.id)
        if self.error:
            raise self.error
        if self.effect:
            self.effect(ctx, runner)


@pytest.fixture
def mock_runner():
    """Create a mock runner for testing."""
    return MockActionRunner()


@pytest.fixture
def log():
    return []


class TestExecuteOrdering:
    """Execute steps run by ascending priority, ties in declaration order."""

    def test_priorities_sorted_with_stable_ties(self, mock_runner, log):
        """Priorities {200, 100, 100} declared in that order run as step2, step3, step1."""
        steps = [
            RecordingExecute('step1', 200, log),
            RecordingExecute('step2', 100, log),
            RecordingExecute('step3', 100, log),
        ]
        wizard = Wizard({}, execute_steps=steps, runner=mock_runner)

        wizard.run()

        assert log == ['step2', 'step3', 'step1']

    def test_ties_across_unrelated_step_sets_keep_declaration_order(self, mock_runner, log):
        """Equal priorities from different step sets resolve by declaration order only."""
        file_steps = [RecordingExecute('write_a', 100, log), RecordingExecute('write_b', 100, log)]
        other_steps = [RecordingExecute('notify', 100, log), RecordingExecute('early', 50, log)]
        wizard = Wizard({}, execute_steps=file_steps + other_steps, runner=mock_runner)

        wizard.run()

        assert log == ['early', 'write_a', 'write_b', 'notify']

    def test_declared_order_is_not_mutated(self, mock_runner, log):
        steps = [RecordingExecute('late', 300, log), RecordingExecute('early', 1, log)]
        wizard = Wizard({}, execute_steps=steps, runner=mock_runner)

        wizard.run()

        assert [s.step_id for s in wizard.execute_steps] == ['late', 'early']

    def test_prompt_steps_never_reordered(self, mock_runner, log):
        steps = [RecordingPrompt(name, log) for name in ['c', 'a', 'b']]
        wizard = Wizard({}, prompt_steps=steps, runner=mock_runner)

        wizard.prompt()

        assert log == ['c', 'a', 'b']

    def test_should_execute_false_skips_step(self, mock_runner, log):
        class Disabled(RecordingExecute):
            def should_execute(self, ctx):
                return False

        wizard = Wizard({}, execute_steps=[Disabled('off', 1, log), RecordingExecute('on', 2, log)],
                        runner=mock_runner)

        wizard.run()

        assert log == ['on']
        assert wizard.completed_steps == ['on']


class TestSkipOnPredicate:
    def test_prepopulated_field_skips_guarded_step(self, mock_runner, log):
        """A step guarded by 'skip if field is set' is never invoked."""
        context = {'platform': 'Go'}
        step = RecordingPrompt('choose_platform', log, sets={'platform': 'Node.js'},
                               skip_if_set='platform')
        wizard = Wizard(context, prompt_steps=[step], runner=mock_runner)

        wizard.prompt()

        assert log == []
        assert context == {'platform': 'Go'}

    def test_unguarded_step_runs(self, mock_runner, log):
        step = RecordingPrompt('choose_platform', log, sets={'platform': 'Node.js'},
                               skip_if_set='platform')
        wizard = Wizard({}, prompt_steps=[step], runner=mock_runner)

        wizard.prompt()

        assert log == ['choose_platform']
        assert wizard.context['platform'] == 'Node.js'


class TestAbortOnFailure:
    def test_execute_failure_stops_later_steps(self, mock_runner, log):
        """Failing step 2 of 3 means step 3 never runs."""
        error = RuntimeError("disk full")
        steps = [
            RecordingExecute('step1', 100, log),
            RecordingExecute('step2', 200, log, error=error),
            RecordingExecute('step3', 300, log),
        ]
        wizard = Wizard({}, execute_steps=steps, runner=mock_runner)
        wizard.prompt()

        with pytest.raises(RuntimeError) as exc_info:
            wizard.execute()

        assert exc_info.value is error
        assert log == ['step1', 'step2']
        assert wizard.state == WizardState.FAILED
        assert wizard.failure.phase == 'execute'
        assert wizard.failure.step_id == 'step2'
        assert wizard.failure.error is error

    def test_prompt_failure_stops_prompts_and_execute(self, mock_runner, log):
        steps = [
            RecordingPrompt('p1', log),
            RecordingPrompt('p2', log, error=ValueError("bad input")),
            RecordingPrompt('p3', log),
        ]
        wizard = Wizard({}, prompt_steps=steps,
                        execute_steps=[RecordingExecute('e1', 100, log)], runner=mock_runner)

        with pytest.raises(ValueError, match="bad input"):
            wizard.run()

        assert log == ['p1', 'p2']
        assert wizard.failure.phase == 'prompt'
        assert wizard.failure.step_id == 'p2'

    def test_cancellation_propagates_unchanged(self, mock_runner, log):
        cancelled = UserCancelledError()
        wizard = Wizard({}, prompt_steps=[RecordingPrompt('p1', log, error=cancelled)],
                        runner=mock_runner)

        with pytest.raises(UserCancelledError) as exc_info:
            wizard.prompt()

        assert exc_info.value is cancelled
        assert wizard.failure.cancelled is True

    def test_operational_error_is_not_cancellation(self, mock_runner, log):
        wizard = Wizard({}, execute_steps=[RecordingExecute('e1', 1, log, error=OSError("denied"))],
                        runner=mock_runner)

        with pytest.raises(OSError):
            wizard.run()

        assert wizard.failure.cancelled is False

    def test_raising_should_prompt_fails_the_wizard(self, mock_runner, log):
        class ReadsUnsetField(RecordingPrompt):
            def should_prompt(self, ctx):
                return ctx['never_set'] is None

        wizard = Wizard({}, prompt_steps=[ReadsUnsetField('guarded', log), RecordingPrompt('after', log)],
                        runner=mock_runner)

        with pytest.raises(MissingContextError):
            wizard.prompt()

        assert log == []
        assert wizard.state == WizardState.FAILED
        assert wizard.failure.phase == 'prompt'
        assert wizard.failure.step_id == 'guarded'

    def test_raising_should_execute_fails_the_wizard(self, mock_runner, log):
        class ReadsUnsetField(RecordingExecute):
            def should_execute(self, ctx):
                return bool(ctx['never_set'])

        wizard = Wizard({}, execute_steps=[RecordingExecute('first', 1, log),
                                           ReadsUnsetField('guarded', 2, log),
                                           RecordingExecute('last', 3, log)],
                        runner=mock_runner)
        wizard.prompt()

        with pytest.raises(MissingContextError):
            wizard.execute()

        assert log == ['first']
        assert wizard.state == WizardState.FAILED
        assert wizard.failure.phase == 'execute'
        assert wizard.failure.step_id == 'guarded'


class TestContextPropagation:
    def test_prompt_field_visible_to_execute_step(self, mock_runner, log):
        seen = {}

        def read_field(ctx, runner):
            seen['field'] = ctx['field']

        wizard = Wizard(
            {},
            prompt_steps=[RecordingPrompt('p1', log, sets={'field': 'X'})],
            execute_steps=[RecordingExecute('e1', 100, log, effect=read_field)],
            runner=mock_runner,
        )

        wizard.run()

        assert seen == {'field': 'X'}

    def test_caller_dict_shared_by_reference(self, mock_runner, log):
        context = {}
        wizard = Wizard(context, prompt_steps=[RecordingPrompt('p1', log, sets={'answer': 42})],
                        runner=mock_runner)

        result = wizard.run()

        assert context == {'answer': 42}
        assert result.data is context

    def test_missing_field_fails_loudly(self, mock_runner, log):
        def read_missing(ctx, runner):
            ctx.require('never_set')

        wizard = Wizard({}, execute_steps=[RecordingExecute('e1', 1, log, effect=read_missing)],
                        runner=mock_runner)

        with pytest.raises(MissingContextError) as exc_info:
            wizard.run()

        assert exc_info.value.key == 'never_set'
        assert isinstance(exc_info.value, KeyError)


class TestNoRollback:
    def test_applied_effects_remain_after_abort(self, mock_runner, log):
        """Step 1 writes artifact A, step 2 fails; A still exists afterward."""
        def write_a(ctx, runner):
            runner.write_file('/workspace/A', 'artifact')

        wizard = Wizard(
            {},
            execute_steps=[
                RecordingExecute('write_a', 100, log, effect=write_a),
                RecordingExecute('fail', 200, log, error=RuntimeError("boom")),
            ],
            runner=mock_runner,
        )

        with pytest.raises(RuntimeError):
            wizard.run()

        assert mock_runner.files == {'/workspace/A': 'artifact'}
        assert wizard.completed_steps == ['write_a']


class TestEmptyWizard:
    def test_empty_lists_complete_as_noops(self, mock_runner):
        wizard = Wizard({}, runner=mock_runner)

        context = wizard.run()

        assert wizard.state == WizardState.DONE
        assert wizard.failure is None
        assert dict(context) == {}
        assert mock_runner.calls == []

    def test_none_context_becomes_empty(self, mock_runner):
        wizard = Wizard(None, runner=mock_runner)

        wizard.run()

        assert isinstance(wizard.context, WizardContext)
        assert wizard.done


class TestScenario:
    def test_two_config_files_written_in_priority_order(self, mock_runner, log):
        def writer(name):
            def write(ctx, runner):
                runner.write_file(name, f"{name} contents")
            return write

        wizard = Wizard(
            {},
            execute_steps=[
                RecordingExecute('write config B', 200, log, effect=writer('config_b')),
                RecordingExecute('write config A', 100, log, effect=writer('config_a')),
            ],
            runner=mock_runner,
        )

        wizard.run()

        assert mock_runner.written_paths() == ['config_a', 'config_b']
        assert wizard.state == WizardState.DONE
        assert wizard.failure is None


class TestStateMachine:
    def test_states_progress_through_phases(self, mock_runner):
        wizard = Wizard({}, runner=mock_runner)
        assert wizard.state == WizardState.CREATED

        wizard.prompt()
        assert wizard.state == WizardState.PROMPTED

        wizard.execute()
        assert wizard.state == WizardState.DONE

    def test_execute_before_prompt_rejected(self, mock_runner):
        wizard = Wizard({}, runner=mock_runner)

        with pytest.raises(WizardStateError):
            wizard.execute()

    def test_prepopulated_wizard_may_execute_directly(self, mock_runner, log):
        wizard = Wizard({'ready': True}, execute_steps=[RecordingExecute('e1', 1, log)],
                        runner=mock_runner, prepopulated=True)

        wizard.execute()

        assert log == ['e1']
        assert wizard.done

    def test_wizard_runs_only_once(self, mock_runner):
        wizard = Wizard({}, runner=mock_runner)
        wizard.run()

        with pytest.raises(WizardStateError):
            wizard.prompt()

    def test_failed_is_terminal(self, mock_runner, log):
        wizard = Wizard({}, prompt_steps=[RecordingPrompt('p1', log, error=RuntimeError("x"))],
                        runner=mock_runner)
        with pytest.raises(RuntimeError):
            wizard.prompt()

        with pytest.raises(WizardStateError):
            wizard.execute()
        assert wizard.state == WizardState.FAILED

    def test_title_displayed_once_when_prompting(self, mock_runner):
        wizard = Wizard({}, runner=mock_runner, title='Add Docker Files')

        wizard.run()

        assert mock_runner.calls == [('display', 'Add Docker Files')]
