"""Observer hooks for batch validation."""

import logging
import typing

from . import result as _result

logger = logging.getLogger(__name__)

ResultCallback = typing.Callable[[_result.RecordValidationResult], None]


class ValidationHooks:
    """Hooks for batch validation events.

    All callbacks are optional. A callback that raises is logged and
    ignored; validation of the batch carries on.

    Attributes:
        before_validate: Called with the raw record before it is validated
        after_validate: Called with every result
        on_success: Called only for records that passed
        on_error: Called only for records that failed
        should_continue: Returns False to stop the batch. If None, always continues.
    """

    def __init__(
        self,
        *,
        before_validate: typing.Callable[[typing.Any], None] | None = None,
        after_validate: ResultCallback | None = None,
        on_success: ResultCallback | None = None,
        on_error: ResultCallback | None = None,
        should_continue: typing.Callable[[_result.RecordValidationResult], bool]
        | None = None,
    ) -> None:
        self.before_validate = before_validate
        self.after_validate = after_validate
        self.on_success = on_success
        self.on_error = on_error
        self.should_continue = should_continue

    @staticmethod
    def _call(name: str, callback: typing.Callable[..., typing.Any], arg: typing.Any) -> None:
        try:
            callback(arg)
        except Exception:
            logger.warning("Validation hook %s raised; ignoring", name, exc_info=True)

    def call_before_validate(self, record: typing.Any) -> None:
        if self.before_validate is not None:
            self._call("before_validate", self.before_validate, record)

    def call_after_validate(self, result: _result.RecordValidationResult) -> None:
        if self.after_validate is not None:
            self._call("after_validate", self.after_validate, result)

    def call_on_success(self, result: _result.RecordValidationResult) -> None:
        if self.on_success is not None and result.error is None:
            self._call("on_success", self.on_success, result)

    def call_on_error(self, result: _result.RecordValidationResult) -> None:
        if self.on_error is not None and result.error is not None:
            self._call("on_error", self.on_error, result)

    def check_should_continue(self, result: _result.RecordValidationResult) -> bool:
        """Check if the batch should go on.

        Args:
            result: The latest validation result

        Returns:
            True to continue. A callback that raises counts as True.
        """
        if self.should_continue is None:
            return True
        try:
            return bool(self.should_continue(result))
        except Exception:
            logger.warning("Validation hook should_continue raised; continuing", exc_info=True)
            return True
