"""Diagnostic utilities for wizard failures.

Captures where a wizard run stopped (phase and step), generates a
summary, and saves a detailed log for operational errors.
"""

import os
from datetime import datetime
from typing import Any, Dict, Optional

from scaffold_wizard.engine.engine import Wizard


class DiagnosticCollector:
    """Collects and manages diagnostic information for wizard failures."""

    def __init__(self):
        self.failures = []
        self.start_time = datetime.now()

    def record_failure(self, wizard: str, phase: str, step: str, error: str,
                       context: Optional[Dict[str, Any]] = None) -> None:
        """Record a wizard failure with context.

        Args:
            wizard: Title or name of the wizard that failed
            phase: Phase where failure occurred (load, prompt, execute)
            step: Id of the failing step
            error: Error message or description
            context: Additional context (workspace, platform, etc)
        """
        self.failures.append({
            'wizard': wizard,
            'phase': phase,
            'step': step,
            'error': error,
            'context': dict(context or {}),
            'timestamp': datetime.now().isoformat()
        })

    def record_wizard(self, wizard: Wizard, name: Optional[str] = None) -> bool:
        """Record the failure of a finished wizard run, if it failed.

        Cancellations are not failures and are not recorded.

        Returns:
            True if a failure was recorded
        """
        failure = wizard.failure
        if failure is None or failure.cancelled:
            return False

        self.record_failure(
            wizard=name or wizard.title or 'wizard',
            phase=failure.phase,
            step=failure.step_id,
            error=f"{type(failure.error).__name__}: {failure.error}",
            context=wizard.data,
        )
        return True

    def get_summary(self) -> str:
        """Generate human-readable summary of failures."""
        if not self.failures:
            return "No failures recorded"

        lines = [f"{len(self.failures)} wizard failure(s) detected:", ""]

        for failure in self.failures:
            lines.append(f"- {failure['wizard']} failed during {failure['phase']} at step: {failure['step']}")
            lines.append(f"  Error: {failure['error']}")

        return "\n".join(lines)

    def save_log(self, directory: str = ".") -> str:
        """Save detailed diagnostics to timestamped log file.

        Returns:
            Path to the saved log file
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = os.path.join(directory, f"wizard_diagnostic_{timestamp}.log")

        with open(log_path, 'w') as f:
            f.write("Wizard Diagnostics\n")
            f.write(f"Generated: {datetime.now()}\n")
            f.write("=" * 70 + "\n\n")

            for i, failure in enumerate(self.failures, 1):
                f.write(f"FAILURE {i}: {failure['wizard'].upper()}\n")
                f.write("-" * 40 + "\n")
                f.write(f"Phase: {failure['phase']}\n")
                f.write(f"Step: {failure['step']}\n")
                f.write(f"Error: {failure['error']}\n")
                f.write(f"Timestamp: {failure['timestamp']}\n")

                if failure['context']:
                    f.write("\nContext:\n")
                    for key, value in failure['context'].items():
                        f.write(f"  {key}: {value}\n")

                f.write("\n")

        return log_path
