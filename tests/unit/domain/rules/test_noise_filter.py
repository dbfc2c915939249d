"""Unit tests for NoiseFilter (domain/rules/noise_filter.py)."""

import unittest
from unittest.mock import MagicMock

import astroid

from checked_exceptions_linter.domain.config import ConfigurationLoader
from checked_exceptions_linter.domain.constants import NOISE_FAMILIES
from checked_exceptions_linter.domain.entities import ExceptionType
from checked_exceptions_linter.domain.rules import Violation
from checked_exceptions_linter.domain.rules.noise_filter import NoiseFilter
from tests.unit.rule_test_utils import build_rules

_BASE = ("builtins.Exception", "builtins.BaseException", "builtins.object")

KEY_ERROR = ExceptionType("builtins.KeyError", "KeyError", ("builtins.LookupError",) + _BASE)
VALUE_ERROR = ExceptionType("builtins.ValueError", "ValueError", _BASE)
UNICODE_DECODE_ERROR = ExceptionType(
    "builtins.UnicodeDecodeError",
    "UnicodeDecodeError",
    ("builtins.UnicodeError", "builtins.ValueError") + _BASE,
)
NOT_IMPLEMENTED = ExceptionType(
    "builtins.NotImplementedError", "NotImplementedError", ("builtins.RuntimeError",) + _BASE
)
UNSUPPORTED_OPERATION = ExceptionType(
    "io.UnsupportedOperation",
    "UnsupportedOperation",
    ("builtins.OSError", "builtins.Exception", "builtins.BaseException", "builtins.object", "builtins.ValueError"),
)

# One representative per family, each a subtype of its own root only.
FAMILY_MEMBERS: dict[str, ExceptionType] = {
    "flag_argument_exceptions": ExceptionType("builtins.TypeError", "TypeError", _BASE),
    "flag_format_exceptions": UNICODE_DECODE_ERROR,
    "flag_overflow_exceptions": ExceptionType(
        "builtins.OverflowError", "OverflowError", ("builtins.ArithmeticError",) + _BASE
    ),
    "flag_assertion_exceptions": ExceptionType("builtins.AssertionError", "AssertionError", _BASE),
    "flag_not_supported_exceptions": UNSUPPORTED_OPERATION,
    "flag_not_implemented_exceptions": NOT_IMPLEMENTED,
}


def _violation(exception_type: ExceptionType, line: int) -> Violation:
    return Violation(exception_type=exception_type, location=f"m.py:{line}:0", node=MagicMock())


class TestNoiseFilter(unittest.TestCase):

    def test_defaults_suppress_every_family(self) -> None:
        noise = NoiseFilter(ConfigurationLoader({}))
        self.assertFalse(noise.is_noise(KEY_ERROR))
        self.assertTrue(noise.is_noise(VALUE_ERROR))
        for member in FAMILY_MEMBERS.values():
            self.assertTrue(noise.is_noise(member), member.name)

    def test_subclasses_follow_their_family(self) -> None:
        subclass = ExceptionType("app.BadInput", "BadInput", ("builtins.ValueError",) + _BASE)
        noise = NoiseFilter(ConfigurationLoader({}))
        self.assertTrue(noise.is_noise(subclass))

    def test_flagged_family_is_reported(self) -> None:
        noise = NoiseFilter(ConfigurationLoader({"flag_not_implemented_exceptions": True}))
        self.assertFalse(noise.is_noise(NOT_IMPLEMENTED))

    def test_each_family_can_be_flagged_alone(self) -> None:
        for flag, member in FAMILY_MEMBERS.items():
            noise = NoiseFilter(ConfigurationLoader({flag: True}))
            self.assertFalse(noise.is_noise(member), flag)
            for other_flag, other in FAMILY_MEMBERS.items():
                if other_flag != flag:
                    self.assertTrue(noise.is_noise(other), f"{flag} -> {other.name}")

    def test_nearest_family_root_decides(self) -> None:
        argument_only = NoiseFilter(ConfigurationLoader({"flag_argument_exceptions": True}))
        self.assertTrue(argument_only.is_noise(UNICODE_DECODE_ERROR))
        self.assertTrue(argument_only.is_noise(UNSUPPORTED_OPERATION))
        self.assertFalse(argument_only.is_noise(VALUE_ERROR))

    def test_every_family_has_a_config_flag(self) -> None:
        self.assertEqual(set(FAMILY_MEMBERS), set(NOISE_FAMILIES))

    def test_filter_preserves_order(self) -> None:
        noise = NoiseFilter(ConfigurationLoader({}))
        violations = [_violation(KEY_ERROR, 3), _violation(VALUE_ERROR, 4), _violation(KEY_ERROR, 1)]
        self.assertEqual([v.location for v in noise.filter(violations)], ["m.py:3:0", "m.py:1:0"])


class TestNestedFamiliesThroughRules(unittest.TestCase):
    """Families nested under ValueError are reported when flagged on their own."""

    SOURCE = '''
import io


def decode():
    raise UnicodeDecodeError("utf-8", b"", 0, 1, "bad")


def seek():
    raise io.UnsupportedOperation("seek")
'''

    @classmethod
    def setUpClass(cls) -> None:
        cls.module = astroid.parse(cls.SOURCE, module_name="nested")

    def test_format_family_alone(self) -> None:
        rule, _, _ = build_rules({"flag_format_exceptions": True})
        (diagnostic,) = rule.check(self.module["decode"])
        self.assertEqual(diagnostic.message_args, ("UnicodeDecodeError",))
        self.assertEqual(rule.check(self.module["seek"]), [])

    def test_not_supported_family_alone(self) -> None:
        rule, _, _ = build_rules({"flag_not_supported_exceptions": True})
        (diagnostic,) = rule.check(self.module["seek"])
        self.assertEqual(diagnostic.code, "W9501")
        self.assertEqual(rule.check(self.module["decode"]), [])


class TestViolationIdentity(unittest.TestCase):
    """Violations compare by (type, location) only."""

    def test_node_does_not_distinguish(self) -> None:
        self.assertEqual(_violation(KEY_ERROR, 3), _violation(KEY_ERROR, 3))
        self.assertEqual(len({_violation(KEY_ERROR, 3), _violation(KEY_ERROR, 3)}), 1)

    def test_location_distinguishes(self) -> None:
        self.assertNotEqual(_violation(KEY_ERROR, 3), _violation(KEY_ERROR, 4))

    def test_exception_type_identity_is_qname(self) -> None:
        self.assertEqual(KEY_ERROR, ExceptionType("builtins.KeyError", "KeyError"))
        self.assertTrue(KEY_ERROR.is_subtype_of(ExceptionType("builtins.LookupError", "LookupError")))
        self.assertFalse(VALUE_ERROR.is_subtype_of(KEY_ERROR))
