"""Unit tests for ExceptionFlowAnalyzer (domain/rules/exception_flow.py)."""

import unittest

import astroid

from checked_exceptions_linter.domain.rules.declarations import DeclarationExtractor
from checked_exceptions_linter.domain.rules.exception_flow import ExceptionFlowAnalyzer
from checked_exceptions_linter.domain.services.member_resolver import MemberResolver

PRELUDE = '''
class FieldAccessError(Exception):
    pass

def read(path):
    """<exception cref="FieldAccessError"/>"""
    raise FieldAccessError(path)
'''


class TestExceptionFlowAnalyzer(unittest.TestCase):

    def setUp(self) -> None:
        resolver = MemberResolver()
        self.analyzer = ExceptionFlowAnalyzer(DeclarationExtractor(resolver=resolver), resolver)

    def _thrown(self, source: str, name: str = "subject") -> list[tuple[str, int]]:
        module = astroid.parse(PRELUDE + source, module_name="sample")
        violations = self.analyzer.thrown_unhandled(module[name])
        return [(v.exception_type.name, v.node.lineno) for v in violations]

    def test_raise_is_thrown(self) -> None:
        self.assertEqual(self._thrown("def subject():\n    raise KeyError('k')\n"), [("KeyError", 9)])

    def test_raise_of_class_without_call(self) -> None:
        self.assertEqual(self._thrown("def subject():\n    raise KeyError\n"), [("KeyError", 9)])

    def test_call_contributes_callee_contract(self) -> None:
        self.assertEqual(
            self._thrown("def subject():\n    value = read('x')\n"), [("FieldAccessError", 9)]
        )

    def test_caught_by_exact_handler(self) -> None:
        source = (
            "def subject():\n"
            "    try:\n"
            "        read('x')\n"
            "    except FieldAccessError:\n"
            "        pass\n"
        )
        self.assertEqual(self._thrown(source), [])

    def test_caught_by_supertype_handler(self) -> None:
        source = (
            "def subject():\n"
            "    try:\n"
            "        raise KeyError('k')\n"
            "    except (OSError, LookupError):\n"
            "        pass\n"
        )
        self.assertEqual(self._thrown(source), [])

    def test_supertype_not_caught_by_subtype_handler(self) -> None:
        source = (
            "def subject():\n"
            "    try:\n"
            "        raise Exception('boom')\n"
            "    except FieldAccessError:\n"
            "        pass\n"
        )
        self.assertEqual(self._thrown(source), [("Exception", 10)])

    def test_rethrow_reports_handler_types(self) -> None:
        source = (
            "def subject():\n"
            "    try:\n"
            "        read('x')\n"
            "    except FieldAccessError:\n"
            "        raise\n"
        )
        self.assertEqual(self._thrown(source), [("FieldAccessError", 12)])

    def test_raise_in_handler_is_not_caught_by_sibling_handler(self) -> None:
        source = (
            "def subject():\n"
            "    try:\n"
            "        pass\n"
            "    except OSError:\n"
            "        raise KeyError('k')\n"
            "    except KeyError:\n"
            "        pass\n"
        )
        self.assertEqual(self._thrown(source), [("KeyError", 12)])

    def test_outer_try_catches_raise_in_inner_handler(self) -> None:
        source = (
            "def subject():\n"
            "    try:\n"
            "        try:\n"
            "            pass\n"
            "        except OSError:\n"
            "            raise KeyError('k')\n"
            "    except KeyError:\n"
            "        pass\n"
        )
        self.assertEqual(self._thrown(source), [])

    def test_bare_except_catches_everything(self) -> None:
        source = (
            "def subject():\n"
            "    try:\n"
            "        raise KeyError('k')\n"
            "    except:\n"
            "        pass\n"
        )
        self.assertEqual(self._thrown(source), [])

    def test_bare_except_with_bare_raise_does_not_catch(self) -> None:
        source = (
            "def subject():\n"
            "    try:\n"
            "        raise KeyError('k')\n"
            "    except:\n"
            "        raise\n"
        )
        self.assertEqual(self._thrown(source), [("KeyError", 10)])

    def test_unreachable_raise_after_return(self) -> None:
        source = "def subject():\n    return 1\n    raise KeyError('k')\n"
        self.assertEqual(self._thrown(source), [])

    def test_unreachable_raise_after_exhaustive_if(self) -> None:
        source = (
            "def subject(flag):\n"
            "    if flag:\n"
            "        return 1\n"
            "    else:\n"
            "        return 2\n"
            "    raise KeyError('k')\n"
        )
        self.assertEqual(self._thrown(source), [])

    def test_raise_in_constant_false_branch(self) -> None:
        source = "def subject():\n    if False:\n        raise KeyError('k')\n"
        self.assertEqual(self._thrown(source), [])

    def test_conditional_raise_is_reachable(self) -> None:
        source = "def subject(flag):\n    if flag:\n        return 1\n    raise KeyError('k')\n"
        self.assertEqual(self._thrown(source), [("KeyError", 11)])

    def test_nested_function_is_separate_body(self) -> None:
        source = (
            "def subject():\n"
            "    def inner():\n"
            "        raise KeyError('k')\n"
            "    callback = lambda: read('x')\n"
            "    return inner, callback\n"
        )
        self.assertEqual(self._thrown(source), [])

    def test_lambda_body(self) -> None:
        module = astroid.parse(PRELUDE + "subject = lambda: read('x')\n", module_name="sample")
        lam = next(module.nodes_of_class(astroid.nodes.Lambda))
        violations = self.analyzer.thrown_unhandled(lam)
        self.assertEqual([v.exception_type.name for v in violations], ["FieldAccessError"])
        self.assertIs(violations[0].node, lam.body)

    def test_same_type_on_one_statement_is_reported_once(self) -> None:
        source = "def subject():\n    read('a') or read('b')\n"
        self.assertEqual(self._thrown(source), [("FieldAccessError", 9)])

    def test_constructor_contract(self) -> None:
        source = (
            "class Conn:\n"
            "    def __init__(self, url):\n"
            '        """<exception cref="OSError"/>"""\n'
            "        self.url = url\n"
            "\n"
            "def subject():\n"
            "    return Conn('db')\n"
        )
        self.assertEqual(self._thrown(source), [("OSError", 14)])

    def test_property_read_and_write(self) -> None:
        source = (
            "class Box:\n"
            "    @property\n"
            "    def value(self):\n"
            '        """\n'
            '        <exception cref="KeyError">Get.</exception>\n'
            '        <exception cref="IndexError">Set.</exception>\n'
            '        """\n'
            "        return 1\n"
            "\n"
            "    @value.setter\n"
            "    def value(self, v):\n"
            "        pass\n"
            "\n"
            "def reader():\n"
            "    return Box().value\n"
            "\n"
            "def writer():\n"
            "    box = Box()\n"
            "    box.value = 2\n"
        )
        self.assertEqual(self._thrown(source, "reader"), [("KeyError", 22)])
        self.assertEqual(self._thrown(source, "writer"), [("IndexError", 26)])

    def test_subscript_uses_item_methods(self) -> None:
        source = (
            "class Table:\n"
            "    def __getitem__(self, key):\n"
            '        """<exception cref="KeyError"/>"""\n'
            "\n"
            "    def __setitem__(self, key, value):\n"
            '        """<exception cref="OSError"/>"""\n'
            "\n"
            "def subject():\n"
            "    table = Table()\n"
            "    table['a'] = table['b']\n"
        )
        self.assertEqual(
            sorted(self._thrown(source)), [("KeyError", 17), ("OSError", 17)]
        )

    def test_augmented_property_assignment_reads_and_writes(self) -> None:
        source = (
            "class Box:\n"
            "    @property\n"
            "    def value(self):\n"
            '        """\n'
            '        <exception cref="KeyError">Get.</exception>\n'
            '        <exception cref="OSError">Set.</exception>\n'
            '        """\n'
            "        return 1\n"
            "\n"
            "    @value.setter\n"
            "    def value(self, v):\n"
            "        pass\n"
            "\n"
            "def subject():\n"
            "    box = Box()\n"
            "    box.value += 1\n"
        )
        self.assertEqual(
            sorted(self._thrown(source)), [("KeyError", 23), ("OSError", 23)]
        )
