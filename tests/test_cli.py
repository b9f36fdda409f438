import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import yaml
from click.testing import CliRunner

from asyncapi_kit.cli import main
from asyncapi_kit.document.models import Document, Info

FIXTURES = Path(__file__).parent / "fixtures"


class TestCliGenerate:
    def test_generate_yaml(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", str(FIXTURES / "streetlights.yaml"),
            "-o", str(tmp_path / "out"),
            "--seed", "1",
        ])

        assert result.exit_code == 0, result.output
        output_file = tmp_path / "out" / "urn-example-streetlights.asyncapi.yaml"
        assert output_file.exists()
        data = yaml.safe_load(output_file.read_text())
        assert data["asyncapi"] == "3.0.0"
        assert set(data["operations"]) == {"onLightMeasured", "turnOn"}
        assert "Generated 1 document(s)" in result.output

    def test_generate_json_without_examples(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", str(FIXTURES / "streetlights.yaml"),
            "-o", str(tmp_path),
            "--format", "json",
            "--no-examples",
        ])

        assert result.exit_code == 0, result.output
        data = json.loads((tmp_path / "urn-example-streetlights.asyncapi.json").read_text())
        assert "examples" not in data["channels"]["lightMeasured"]["messages"]["lightMeasured"]

    def test_format_from_environment(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(
            main,
            ["generate", str(FIXTURES / "streetlights.yaml"), "-o", str(tmp_path)],
            env={"ASYNCAPI_KIT_FORMAT": "json"},
        )

        assert result.exit_code == 0, result.output
        assert (tmp_path / "urn-example-streetlights.asyncapi.json").exists()

    @patch("asyncapi_kit.cli.DocumentGenerator")
    def test_generate_uses_generator(self, MockGen, tmp_path):
        mock_gen = MagicMock()
        mock_gen.generate.return_value = [Document(info=Info(title="Mocked API", version="1"))]
        MockGen.return_value = mock_gen

        runner = CliRunner()
        result = runner.invoke(main, ["generate", str(FIXTURES / "streetlights.yaml"), "-o", str(tmp_path)])

        assert result.exit_code == 0, result.output
        mock_gen.generate.assert_called_once()
        assert (tmp_path / "mocked-api.asyncapi.yaml").exists()

    def test_generate_rejects_bad_description(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text(yaml.safe_dump({
            "title": "Broken",
            "version": "1",
            "channels": [{"name": "a"}],
            "operations": [{"channel": "missing", "action": "send", "operation_id": "x"}],
        }))

        runner = CliRunner()
        result = runner.invoke(main, ["generate", str(bad), "-o", str(tmp_path / "out")])

        assert result.exit_code != 0
        assert "known channel" in result.output


    def test_generate_rejects_malformed_yaml(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("title: [unclosed\n")

        runner = CliRunner()
        result = runner.invoke(main, ["generate", str(bad), "-o", str(tmp_path / "out")])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert not isinstance(result.exception, yaml.YAMLError)


class TestCliValidate:
    def test_valid_document(self):
        runner = CliRunner()
        result = runner.invoke(main, ["validate", str(FIXTURES / "streetlights.asyncapi.yaml")])

        assert result.exit_code == 0, result.output
        assert "is valid" in result.output

    def test_invalid_document(self, tmp_path):
        doc = tmp_path / "empty.asyncapi.yaml"
        doc.write_text("asyncapi: 3.0.0\ninfo:\n  title: Empty\n  version: '1'\n")

        runner = CliRunner()
        result = runner.invoke(main, ["validate", str(doc)])

        assert result.exit_code != 0
        assert "channels" in result.output
        assert "validation error(s)" in result.output

    def test_not_an_asyncapi_document(self):
        runner = CliRunner()
        result = runner.invoke(main, ["validate", str(FIXTURES / "streetlights.yaml")])

        assert result.exit_code != 0
        assert "is not an AsyncAPI document" in result.output


class TestCliResolve:
    def test_resolve_operation(self):
        runner = CliRunner()
        result = runner.invoke(main, ["resolve", str(FIXTURES / "streetlights.asyncapi.yaml"), "receiveLightMeasurement"])

        assert result.exit_code == 0, result.output
        assert "Operation: receiveLightMeasurement (receive)" in result.output
        assert "Channel: lightMeasured" in result.output
        assert "Message: lightMeasured" in result.output
        assert "lightMeasuredAvro" not in result.output

    def test_unknown_operation(self):
        runner = CliRunner()
        result = runner.invoke(main, ["resolve", str(FIXTURES / "streetlights.asyncapi.yaml"), "nope"])

        assert result.exit_code != 0
        assert "No operation with id 'nope'" in result.output

    def test_missing_channel(self, tmp_path):
        doc = tmp_path / "orphan.yaml"
        doc.write_text(yaml.safe_dump({
            "asyncapi": "3.0.0",
            "operations": {"orphan": {"operationId": "orphan", "action": "send", "channel": {"$ref": "#/channels/gone"}}},
        }))

        runner = CliRunner()
        result = runner.invoke(main, ["resolve", str(doc), "orphan"])

        assert result.exit_code != 0
        assert "Channel not found for operation orphan." in result.output


class TestCliExample:
    def test_example_payload(self):
        runner = CliRunner()
        result = runner.invoke(main, ["example", str(FIXTURES / "light_measured.schema.yaml"), "--seed", "3"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert set(payload) == {"id", "lumens", "sentAt", "tags"}
        assert payload["tags"] == ["string", "string"]

    def test_required_only(self):
        runner = CliRunner()
        result = runner.invoke(main, ["example", str(FIXTURES / "light_measured.schema.yaml"), "--required-only"])

        assert result.exit_code == 0, result.output
        assert set(json.loads(result.output)) == {"id", "lumens"}

    def test_not_a_schema(self, tmp_path):
        f = tmp_path / "list.yaml"
        f.write_text("- a\n- b\n")

        runner = CliRunner()
        result = runner.invoke(main, ["example", str(f)])

        assert result.exit_code != 0
        assert "does not contain a JSON Schema" in result.output

    def test_malformed_schema(self, tmp_path):
        f = tmp_path / "bad.yaml"
        f.write_text("type: [unclosed\n")

        runner = CliRunner()
        result = runner.invoke(main, ["example", str(f)])

        assert result.exit_code == 1
        assert "Unable to read" in result.output
