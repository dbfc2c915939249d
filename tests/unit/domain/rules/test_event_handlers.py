"""Unit tests for EventHandlerRule (domain/rules/event_handlers.py)."""

import unittest

import astroid

from checked_exceptions_linter.domain.entities import FixMode
from tests.unit.rule_test_utils import build_rules

SOURCE = '''
class Button:
    def __init__(self):
        self.clicked = []

    def on_press(self, sender):
        """<exception cref="OSError"/>"""


def on_click(sender):
    """
    Handle a click.
    <exception cref="KeyError"/>
    <exception cref="OSError">Ignore.</exception>
    """


def on_hover(sender):
    """<exception cref="ValueError"/>"""


def quiet(sender):
    pass


def wire(counter):
    button = Button()
    button.clicked += on_click  #@
    button.clicked -= on_click  #@
    button.clicked += quiet  #@
    button.clicked += on_hover  #@
    button.clicked += button.on_press  #@
    counter += 1  #@
    button.clicked *= 2  #@
'''


class TestEventHandlerRule(unittest.TestCase):

    def setUp(self) -> None:
        _, _, self.rule = build_rules()
        (
            self.subscribe,
            self.unsubscribe,
            self.quiet,
            self.noisy,
            self.method,
            self.counter,
            self.multiply,
        ) = astroid.extract_node(SOURCE, module_name="sample")

    def test_subscribed_handler_declaring_exceptions(self) -> None:
        (diagnostic,) = self.rule.check(self.subscribe)
        self.assertEqual(diagnostic.code, "W9509")
        self.assertEqual(diagnostic.symbol, "event-handler-exception-thrown")
        self.assertEqual(diagnostic.message_args, ("on_click", "KeyError"))
        self.assertIs(diagnostic.node, self.subscribe.value)
        self.assertFalse(diagnostic.fixable)
        self.assertEqual(self.rule.fix(diagnostic, FixMode.IGNORE), [])

    def test_unsubscription_is_checked_too(self) -> None:
        (diagnostic,) = self.rule.check(self.unsubscribe)
        self.assertEqual(diagnostic.message_args, ("on_click", "KeyError"))

    def test_handler_without_contract(self) -> None:
        self.assertEqual(self.rule.check(self.quiet), [])

    def test_noise_is_filtered(self) -> None:
        self.assertEqual(self.rule.check(self.noisy), [])

    def test_bound_method_handler(self) -> None:
        (diagnostic,) = self.rule.check(self.method)
        self.assertEqual(diagnostic.message_args, ("on_press", "OSError"))

    def test_non_function_operands_and_other_operators(self) -> None:
        self.assertEqual(self.rule.check(self.counter), [])
        self.assertEqual(self.rule.check(self.multiply), [])
