"""Unit tests for the pylint plugin entry point."""

from unittest.mock import MagicMock

from checked_exceptions_linter.infrastructure.checker import register
from checked_exceptions_linter.use_cases.checks.event_handlers import EventHandlerChecker
from checked_exceptions_linter.use_cases.checks.substitution import SubstitutionChecker
from checked_exceptions_linter.use_cases.checks.unhandled import UnhandledExceptionChecker


class TestCheckerRegister:
    """Test register(linter) entry point."""

    def test_registers_all_checkers(self) -> None:
        linter = MagicMock()
        register(linter)
        registered = [call.args[0] for call in linter.register_checker.call_args_list]
        assert [type(c) for c in registered] == [
            UnhandledExceptionChecker,
            SubstitutionChecker,
            EventHandlerChecker,
        ]
        codes = set()
        for checker in registered:
            codes.update(checker.msgs)
        assert codes == {f"W95{n:02d}" for n in range(1, 10)}
