"""Unit tests for AstroidGateway."""

from pathlib import Path
from tempfile import TemporaryDirectory

from checked_exceptions_linter.infrastructure.gateways.astroid_gateway import AstroidGateway


class TestAstroidGateway:

    def test_parses_file(self) -> None:
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "sample.py"
            path.write_text("def f():\n    return 1\n")
            module = AstroidGateway().parse_file(str(path))
            assert module is not None
            assert module.name == "sample"
            assert module.file == str(path)
            assert "f" in module.locals

    def test_module_name_follows_packages(self) -> None:
        with TemporaryDirectory() as tmpdir:
            package = Path(tmpdir) / "app" / "storage"
            package.mkdir(parents=True)
            (Path(tmpdir) / "app" / "__init__.py").write_text("")
            (package / "__init__.py").write_text("")
            (package / "files.py").write_text("x = 1\n")
            module = AstroidGateway().parse_file(str(package / "files.py"))
            assert module is not None
            assert module.name == "app.storage.files"
            init = AstroidGateway().parse_file(str(package / "__init__.py"))
            assert init is not None
            assert init.name == "app.storage"

    def test_syntax_error_returns_none(self) -> None:
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "broken.py"
            path.write_text("def broken(:\n")
            assert AstroidGateway().parse_file(str(path)) is None

    def test_missing_file_returns_none(self) -> None:
        with TemporaryDirectory() as tmpdir:
            assert AstroidGateway().parse_file(str(Path(tmpdir) / "missing.py")) is None
