"""
Pylint plugin entry point - composition root for the checker plugin.
Lives in infrastructure as it creates the container and wires dependencies.
"""

from pylint.lint import PyLinter

from checked_exceptions_linter.infrastructure.di.container import CheckedExceptionsContainer
from checked_exceptions_linter.use_cases.checks.event_handlers import EventHandlerChecker
from checked_exceptions_linter.use_cases.checks.substitution import SubstitutionChecker
from checked_exceptions_linter.use_cases.checks.unhandled import UnhandledExceptionChecker


def register(linter: PyLinter) -> None:
    """Register checkers."""
    container = CheckedExceptionsContainer.get_instance()
    registry = container.get_guidance_service().get_registry()

    linter.register_checker(UnhandledExceptionChecker(
        linter, rule=container.get_unhandled_rule(), registry=registry))
    linter.register_checker(SubstitutionChecker(
        linter, rule=container.get_substitution_rule(), registry=registry))
    linter.register_checker(EventHandlerChecker(
        linter, rule=container.get_event_handler_rule(), registry=registry))
