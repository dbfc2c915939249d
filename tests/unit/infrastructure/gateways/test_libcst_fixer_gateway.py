"""Unit tests for LibCSTFixerGateway."""

from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from checked_exceptions_linter.domain.entities import (
    CommentTarget,
    ExceptionDeclaration,
    TransformationPlan,
    TransformationType,
)
from checked_exceptions_linter.domain.exceptions import UnknownTransformationError
from checked_exceptions_linter.infrastructure.gateways.libcst_fixer_gateway import LibCSTFixerGateway


def _declare(function_name: str, target_line: int, short: str, short_form: bool = True) -> TransformationPlan:
    return TransformationPlan.declare_exceptions(
        function_name=function_name,
        target_line=target_line,
        declarations=[ExceptionDeclaration(name=f"builtins.{short}", short_name=short)],
        short_form=short_form,
        target=CommentTarget(title=function_name),
    )


class TestLibCSTFixerGateway:
    """Plans applied to files on disk."""

    def test_no_plans_leaves_file_untouched(self) -> None:
        gateway = LibCSTFixerGateway()
        with TemporaryDirectory() as tmpdir:
            test_file = Path(tmpdir) / "test.py"
            test_file.write_text("def hello():\n    pass\n")
            assert gateway.apply_fixes(str(test_file), []) is False

    def test_declare_plan_writes_docstring(self) -> None:
        gateway = LibCSTFixerGateway()
        with TemporaryDirectory() as tmpdir:
            test_file = Path(tmpdir) / "test.py"
            test_file.write_text("def hello():\n    raise KeyError('k')\n")
            assert gateway.apply_fixes(str(test_file), [_declare("hello", 1, "KeyError")]) is True
            assert test_file.read_text() == (
                "def hello():\n"
                '    """<exception cref="KeyError"></exception>\n'
                '    """\n'
                "    raise KeyError('k')\n"
            )
            # Second run finds the entry and changes nothing.
            assert gateway.apply_fixes(str(test_file), [_declare("hello", 1, "KeyError")]) is False

    def test_plans_apply_bottom_up(self) -> None:
        gateway = LibCSTFixerGateway()
        source = "def first():\n    pass\n\n\ndef second():\n    pass\n"
        with TemporaryDirectory() as tmpdir:
            test_file = Path(tmpdir) / "test.py"
            test_file.write_text(source)
            plans = [_declare("first", 1, "KeyError"), _declare("second", 5, "OSError")]
            assert gateway.apply_fixes(str(test_file), plans) is True
            content = test_file.read_text()
            assert 'def first():\n    """<exception cref="KeyError"></exception>' in content
            assert 'def second():\n    """<exception cref="OSError"></exception>' in content

    def test_handle_and_import_plans(self) -> None:
        gateway = LibCSTFixerGateway()
        source = "import json\n\n\ndef caller(parser):\n    section(parser, 'main')\n"
        with TemporaryDirectory() as tmpdir:
            test_file = Path(tmpdir) / "test.py"
            test_file.write_text(source)
            plans = [
                TransformationPlan.add_import("configparser", ["NoSectionError"]),
                TransformationPlan.handle_exceptions(5, ["NoSectionError"]),
            ]
            assert gateway.apply_fixes(str(test_file), plans) is True
            assert test_file.read_text() == (
                "import json\n"
                "from configparser import NoSectionError\n"
                "\n"
                "\n"
                "def caller(parser):\n"
                "    try:\n"
                "        section(parser, 'main')\n"
                "    except NoSectionError:\n"
                "        pass\n"
            )

    def test_syntax_error_returns_false(self) -> None:
        gateway = LibCSTFixerGateway()
        with TemporaryDirectory() as tmpdir:
            test_file = Path(tmpdir) / "broken.py"
            test_file.write_text("def broken(:\n")
            assert gateway.apply_fixes(str(test_file), [_declare("broken", 1, "KeyError")]) is False
            assert test_file.read_text() == "def broken(:\n"

    def test_missing_file_returns_false(self) -> None:
        gateway = LibCSTFixerGateway()
        with TemporaryDirectory() as tmpdir:
            missing = str(Path(tmpdir) / "missing.py")
            assert gateway.apply_fixes(missing, [_declare("f", 1, "KeyError")]) is False

    def test_unknown_plan_type_raises(self) -> None:
        gateway = LibCSTFixerGateway()
        plan = TransformationPlan(transformation_type="rename", params={})  # type: ignore[arg-type]
        with pytest.raises(UnknownTransformationError):
            gateway._plan_to_transformer(plan)

    def test_plan_types_map_to_transformers(self) -> None:
        gateway = LibCSTFixerGateway()
        for plan in (
            _declare("f", 1, "KeyError"),
            TransformationPlan.handle_exceptions(2, ["KeyError"]),
            TransformationPlan.add_import("configparser", ["Error"]),
        ):
            transformer = gateway._plan_to_transformer(plan)
            assert transformer is not None
        assert TransformationType.ADD_IMPORT.value == "add_import"
