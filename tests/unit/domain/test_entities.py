"""Unit tests for domain entities (domain/entities.py)."""

import unittest

import astroid

from checked_exceptions_linter.domain.entities import AccessorScope, ExceptionType


class TestExceptionTypeImportPath(unittest.TestCase):

    def test_top_level_class(self) -> None:
        exception_type = ExceptionType(
            "configparser.NoSectionError", "NoSectionError", module="configparser"
        )
        self.assertEqual(exception_type.import_path(), ("configparser", "NoSectionError"))

    def test_nested_class_imports_outermost(self) -> None:
        exception_type = ExceptionType("pkg.errors.Outer.Inner", "Inner", module="pkg.errors")
        self.assertEqual(exception_type.import_path(), ("pkg.errors", "Outer"))

    def test_without_module_assumes_top_level(self) -> None:
        exception_type = ExceptionType("pkg.errors.Failure", "Failure")
        self.assertEqual(exception_type.import_path(), ("pkg.errors", "Failure"))

    def test_from_classdef_records_module(self) -> None:
        module = astroid.parse(
            "class Outer:\n    class Inner(Exception):\n        pass\n", module_name="pkg.errors"
        )
        inner = module["Outer"]["Inner"]
        exception_type = ExceptionType.from_classdef(inner)
        self.assertEqual(exception_type.qname, "pkg.errors.Outer.Inner")
        self.assertEqual(exception_type.module, "pkg.errors")
        self.assertEqual(exception_type.import_path(), ("pkg.errors", "Outer"))


class TestAccessorScopeMarker(unittest.TestCase):

    def test_markers(self) -> None:
        self.assertEqual(AccessorScope.GET.marker, "Get.")
        self.assertEqual(AccessorScope.SET.marker, "Set.")
        self.assertEqual(AccessorScope.NONE.marker, "")
        self.assertEqual(AccessorScope.BOTH.marker, "")
