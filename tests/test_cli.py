"""Tests for the command-line interface."""

import ast
import json

import pytest
from click.testing import CliRunner

from gql_typegen.cli import build_options, main
from introspection_builders import shop_document


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def schema_file(tmp_path):
    path = tmp_path / "introspection.json"
    path.write_text(json.dumps(shop_document()))
    return path


def scalar_args():
    return ["--scalar", "DateTime=datetime", "--scalar", "Money=decimal.Decimal"]


class TestGenerate:
    def test_writes_models(self, runner, schema_file, tmp_path):
        output = tmp_path / "out" / "models.py"
        result = runner.invoke(
            main,
            ["generate", "-s", str(schema_file), "-o", str(output), "-n", "shop", *scalar_args()],
        )
        assert result.exit_code == 0, result.output
        source = output.read_text()
        ast.parse(source)
        assert source.startswith('"""Generated GraphQL models for shop.')
        assert "Done!" in result.output

    def test_unknown_scalar_reports_and_writes_nothing(self, runner, schema_file, tmp_path):
        output = tmp_path / "models.py"
        result = runner.invoke(main, ["generate", "-s", str(schema_file), "-o", str(output)])
        assert result.exit_code != 0
        assert "Unknown scalar type 'Money'" in result.output
        assert not output.exists()

    def test_schema_or_url_required(self, runner, tmp_path):
        result = runner.invoke(main, ["generate", "-o", str(tmp_path / "models.py")])
        assert result.exit_code == 2
        assert "exactly one of --schema or --url" in result.output

    def test_bad_scalar_option(self, runner, schema_file, tmp_path):
        result = runner.invoke(
            main,
            ["generate", "-s", str(schema_file), "-o", str(tmp_path / "m.py"), "--scalar", "Money"],
        )
        assert result.exit_code == 2
        assert "KEY=VALUE" in result.output

    def test_file_header_and_overrides(self, runner, schema_file, tmp_path):
        output = tmp_path / "models.py"
        result = runner.invoke(
            main,
            [
                "generate",
                "-s",
                str(schema_file),
                "-o",
                str(output),
                *scalar_args(),
                "--override",
                "Order.createdAt=date",
                "--file-header",
                "# Generated - do not edit",
            ],
        )
        assert result.exit_code == 0, result.output
        source = output.read_text()
        assert source.startswith("# Generated - do not edit\n\n")
        assert "createdAt: _Optional[date] = None" in source
        assert "from datetime import date" in source

    def test_enums_as_string(self, runner, schema_file, tmp_path):
        output = tmp_path / "models.py"
        result = runner.invoke(
            main,
            ["generate", "-s", str(schema_file), "-o", str(output), *scalar_args(), "--enums-as-string"],
        )
        assert result.exit_code == 0, result.output
        assert "class OrderStatusStringValues:" in output.read_text()

    def test_config_file(self, runner, schema_file, tmp_path):
        config = tmp_path / "typegen.json"
        config.write_text(
            json.dumps(
                {
                    "namespace": "from_config",
                    "scalars": {"DateTime": "datetime", "Money": "decimal.Decimal"},
                }
            )
        )
        output = tmp_path / "models.py"
        result = runner.invoke(
            main, ["generate", "-s", str(schema_file), "-o", str(output), "-c", str(config)]
        )
        assert result.exit_code == 0, result.output
        assert "models for from_config." in output.read_text()

    def test_bad_config(self, runner, schema_file, tmp_path):
        config = tmp_path / "typegen.json"
        config.write_text(json.dumps({"scalar": {}}))
        result = runner.invoke(
            main,
            ["generate", "-s", str(schema_file), "-o", str(tmp_path / "m.py"), "-c", str(config)],
        )
        assert result.exit_code == 1
        assert "Unknown config keys: scalar" in result.output

    def test_verbose(self, runner, schema_file, tmp_path):
        result = runner.invoke(
            main,
            ["generate", "-s", str(schema_file), "-o", str(tmp_path / "m.py"), *scalar_args(), "-v"],
        )
        assert result.exit_code == 0, result.output
        assert "Namespace: generated" in result.output
        assert "Classes:" in result.output


class TestBuildOptions:
    def test_command_line_beats_config(self, tmp_path):
        config = tmp_path / "typegen.json"
        config.write_text(
            json.dumps(
                {
                    "namespace": "from_config",
                    "scalars": {"DateTime": "str", "Money": "float"},
                    "overrides": {"Order.total": "Decimal"},
                }
            )
        )
        options = build_options(
            str(config),
            namespace="shop",
            scalars=("DateTime=datetime",),
            overrides=("Order.id=int",),
            enums_as_string=True,
        )
        assert options.namespace == "shop"
        assert dict(options.scalar_name_to_type_name) == {"DateTime": "datetime", "Money": "float"}
        assert dict(options.type_field_to_type_name_override) == {
            ("Order", "total"): "Decimal",
            ("Order", "id"): "int",
        }
        assert options.enum_members_as_string is True

    def test_defaults_without_config(self):
        options = build_options(None, None, (), (), False)
        assert options.namespace == "generated"
        assert not options.enum_members_as_string
