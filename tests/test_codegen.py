"""Tests for rendering, writing and the command-line entry point."""

import ast
import json

import pytest

from conduit.__main__ import main
from conduit.codegen import generate, is_up_to_date, render
from conduit.context_builder import build_context
from conduit.route_parser import parse_service
from conduit.schema import ServiceSchema


class TestRender:
    def test_deterministic(self, todo_definition):
        """Two independent emissions of the same definition are identical."""
        first = render(build_context(parse_service(todo_definition)))
        second = render(build_context(parse_service(json.loads(json.dumps(todo_definition)))))
        assert first == second

    def test_compiles(self, todo_source):
        compile(todo_source, "todo_api.py", "exec")

    def test_top_level_classes(self, todo_source):
        tree = ast.parse(todo_source)
        classes = [node.name for node in tree.body if isinstance(node, ast.ClassDef)]
        assert classes == [
            "TodoAPIParams",
            "TodoAPIPathBuilder",
            "TodoAPI",
            "TodoAPIClient",
            "TodoAPIRoutes",
        ]

    def test_user_imports_emitted(self, todo_source):
        assert "from todo_app.models import CreateTodoRequest, Todo, UpdateTodoRequest\n" in todo_source

    def test_optional_query_param_guarded(self, todo_source):
        assert '        if completed is not None:\n            query["completed"] = completed\n' in todo_source

    def test_required_query_param_always_sent(self):
        service = ServiceSchema("SearchAPI").get("search", "/search", params={"q": "str"}, returns="list[str]")
        source = render(build_context(service.build()))
        assert '        query["q"] = q\n' in source
        assert "if q is not None" not in source

    def test_no_timestamp_or_absolute_path(self, todo_source):
        assert "/tmp" not in todo_source
        assert "todo_api.json" not in todo_source

    def test_ends_with_single_newline(self, todo_source):
        assert todo_source.endswith(")\n")
        assert not todo_source.endswith("\n\n")

    def test_empty_service_compiles(self):
        source = render(build_context(ServiceSchema("EmptyAPI").build()))
        compile(source, "empty_api.py", "exec")
        assert "        pass\n" in source

    def test_docstrings_with_quotes_compile(self):
        service = ServiceSchema("QuoteAPI", doc='A "quoted"\nservice').get(
            "echo", "/echo", returns="str", doc='Multi-line\ndoc ending in "quote"'
        )
        source = render(build_context(service.build()))
        compile(source, "quote_api.py", "exec")


class TestGenerate:
    def test_writes_file(self, todo_service, tmp_path):
        context = build_context(todo_service)
        path = generate(context, tmp_path / "out" / "todo_api.py")
        assert path.read_text() == render(context)

    def test_up_to_date(self, todo_service, tmp_path):
        context = build_context(todo_service)
        path = tmp_path / "todo_api.py"
        assert not is_up_to_date(context, path)
        generate(context, path)
        assert is_up_to_date(context, path)
        path.write_text(path.read_text() + "# edited\n")
        assert not is_up_to_date(context, path)


class TestMain:
    """Test the python -m conduit entry point."""

    @pytest.fixture
    def definition_file(self, tmp_path, todo_definition):
        path = tmp_path / "service.json"
        path.write_text(json.dumps(todo_definition))
        return path

    def test_generate(self, definition_file, tmp_path, capsys, todo_source):
        output = tmp_path / "todo_api.py"
        assert main([str(definition_file), "-o", str(output)]) == 0
        assert output.read_text() == todo_source
        assert "5 routes" in capsys.readouterr().out

    def test_default_output_path(self, definition_file, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("CONDUIT_OUTPUT", raising=False)
        assert main([str(definition_file)]) == 0
        assert (tmp_path / "todo_api.py").exists()

    def test_stdout(self, definition_file, capsys, todo_source):
        assert main([str(definition_file), "--stdout"]) == 0
        assert capsys.readouterr().out == todo_source

    def test_check(self, definition_file, tmp_path):
        output = tmp_path / "todo_api.py"
        assert main([str(definition_file), "-o", str(output), "--check"]) == 1
        main([str(definition_file), "-o", str(output)])
        assert main([str(definition_file), "-o", str(output), "--check"]) == 0

    def test_definition_error_exit_status(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({
            "service": "Bad",
            "methods": [{"name": "x", "method": "PUT", "path": "/x", "returns": "str"}],
        }))
        assert main([str(path), "--stdout"]) == 1
        assert "InvalidMethod" in capsys.readouterr().err

    def test_missing_definition(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.json")]) == 1
        assert "cannot read" in capsys.readouterr().err

    def test_env_default(self, definition_file, tmp_path, monkeypatch):
        output = tmp_path / "from_env.py"
        monkeypatch.setenv("CONDUIT_DEFINITION", str(definition_file))
        monkeypatch.setenv("CONDUIT_OUTPUT", str(output))
        assert main([]) == 0
        assert output.exists()
