"""Step execution mixin for multi-stage pipelines.

Runs each stage, reports it as complete or failed, and lets failures
propagate so the remaining stages never run.
"""

from __future__ import annotations

from typing import Any, Callable

from colorama import Fore, Style


class PipelineMixin:
    """Mixin for classes that run named, fail-fast pipeline steps.

    Usage:
        class MyGeocoder(PipelineMixin):
            MODALITY = 'geocoder'

            def run(self, text):
                cleaned = self._run_step('Clean Address', clean, text)
                return self._run_step('Parse Address', parse, cleaned)
    """

    # Must be set by the class using this mixin
    MODALITY: str

    # Print a line per step when True
    progress: bool = False

    def _run_step(self, step_name: str, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Run one step and report its outcome.

        Returns:
            The step's result

        Raises:
            Whatever the step raised, after reporting the failure
        """
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            if self.progress:
                self._log_step_failure(step_name, e)
            raise

        if self.progress:
            self._log_step_success(step_name)
        return result

    def _step_prefix(self, step_name: str) -> str:
        max_len = len('Resolve Address')  # Longest step name
        padding = max(max_len - len(step_name), 0) + 4

        modality = getattr(self, 'MODALITY', 'Pipeline').title()
        return f'{modality} -- {step_name} {"-" * padding}>'

    def _log_step_success(self, step_name: str) -> None:
        """Print success message for a pipeline step."""
        print(f'{self._step_prefix(step_name)} {Fore.GREEN}Complete{Style.RESET_ALL}')

    def _log_step_failure(self, step_name: str, error: Exception) -> None:
        """Print failure message for a pipeline step."""
        print(f'{self._step_prefix(step_name)} {Fore.RED}Failed{Style.RESET_ALL}: {error}')
