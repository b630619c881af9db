"""
Tests for the mergeguard command-line interface.

Tests cover:
- scan / catalog listings
- protect then restore through a map file
- validate exit codes
- render / preview with JSON variable files
- translate dry-runs
"""

import json

import pytest
from typer.testing import CliRunner

from mergeguard import __version__
from mergeguard.cli import app

runner = CliRunner()


@pytest.fixture
def template_file(tmp_path):
    path = tmp_path / "template.json"
    path.write_text(json.dumps({
        "name": "Welcome",
        "subject": "Hi *|FNAME|*",
        "from_name": "*|GLOBAL:BRAND|*",
        "from_email": "news@example.com",
        "code": "<p>{{greeting}} *|FNAME|*</p>*|IF:VIP|*<b>VIP</b>*|END:IF|*",
        "text": "{{greeting}} *|FNAME|*",
        "created_at": "2024-01-01",
    }), encoding="utf-8")
    return path


@pytest.fixture
def vars_file(tmp_path):
    path = tmp_path / "vars.json"
    path.write_text(json.dumps({"FNAME": "Ana", "greeting": "Hello"}), encoding="utf-8")
    return path


class TestGeneral:
    def test_version(self):
        """Test --version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_missing_input(self):
        """Test an error without text or file."""
        result = runner.invoke(app, ["scan"])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_missing_file(self, tmp_path):
        """Test an error for a missing file."""
        result = runner.invoke(app, ["scan", "--input", str(tmp_path / "nope.txt")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_demo(self):
        """Test the demo runs."""
        result = runner.invoke(app, ["demo"])
        assert result.exit_code == 0
        assert "All placeholders preserved" in result.output


class TestScanAndCatalog:
    def test_scan_json(self):
        """Test scan --json."""
        result = runner.invoke(app, ["scan", "--text", "Hi *|FNAME|* {{url}}", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [d["raw"] for d in data] == ["*|FNAME|*", "{{url}}"]
        assert data[0]["format"] == "simple-var"
        assert (data[0]["start"], data[0]["end"]) == (3, 12)

    def test_scan_table(self, tmp_path):
        """Test scan table output from a file."""
        path = tmp_path / "body.txt"
        path.write_text("*|GLOBAL:SIG|*", encoding="utf-8")
        result = runner.invoke(app, ["scan", "--input", str(path)])
        assert result.exit_code == 0
        assert "global-var" in result.output

    def test_catalog_json(self, template_file):
        """Test catalog --json ordering and descriptions."""
        result = runner.invoke(app, ["catalog", "--input", str(template_file), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [(d["format"], d["name"]) for d in data] == [
            ("simple-var", "FNAME"),
            ("template-var", "greeting"),
            ("global-var", "BRAND"),
            ("conditional", "END:IF"),
            ("conditional", "VIP"),
        ]
        assert data[0]["description"] == "Recipient first name"

    def test_catalog_rejects_non_object(self, tmp_path):
        """Test a JSON list is rejected."""
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")
        result = runner.invoke(app, ["catalog", "--input", str(path)])
        assert result.exit_code == 1

    def test_catalog_invalid_json(self, tmp_path):
        """Test broken JSON is reported."""
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")
        result = runner.invoke(app, ["catalog", "--input", str(path)])
        assert result.exit_code == 1
        assert "Invalid JSON" in result.output


class TestProtectRestore:
    def test_round_trip_through_map_file(self, tmp_path):
        """Test protect then restore via a map file."""
        map_path = tmp_path / "map.json"
        result = runner.invoke(app, ["protect", "--text", "Hello *|FNAME|* !", "--map-out", str(map_path)])
        assert result.exit_code == 0
        assert result.output.strip() == "Hello __PH_0__ !"
        assert json.loads(map_path.read_text(encoding="utf-8")) == {"__PH_0__": " *|FNAME|* "}

        result = runner.invoke(app, ["restore", "--text", "Bonjour __PH_0__  !", "--map", str(map_path)])
        assert result.exit_code == 0
        assert result.output.strip() == "Bonjour *|FNAME|* !"

    def test_protect_json(self):
        """Test protect --json."""
        result = runner.invoke(app, ["protect", "--text", "{{a}}-{{b}}", "--json"])
        data = json.loads(result.output)
        assert data["protected_text"] == "__PH_0__-__PH_1__"
        assert data["token_map"] == {"__PH_0__": "{{a}}", "__PH_1__": "{{b}}"}

    def test_restore_requires_map(self):
        """Test restore needs --map."""
        result = runner.invoke(app, ["restore", "--text", "__PH_0__"])
        assert result.exit_code != 0


class TestValidate:
    def test_valid(self):
        """Test a valid translation exits 0."""
        result = runner.invoke(app, ["validate", "--original", "Hi *|FNAME|*", "--translated", "Salut *|FNAME|*"])
        assert result.exit_code == 0
        assert "All placeholders preserved" in result.output

    def test_missing_fails(self):
        """Test a missing placeholder exits 1."""
        result = runner.invoke(app, ["validate", "--original", "Hi *|FNAME|*", "--translated", "Salut"])
        assert result.exit_code == 1
        assert "Missing 1 placeholder(s)" in result.output

    def test_added_only_warns(self):
        """Test added placeholders exit 0."""
        result = runner.invoke(app, ["validate", "--original", "Hi", "--translated", "Hi *|X|*", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["is_valid"] is False
        assert data["added"] == ["*|X|*"]

    def test_files(self, tmp_path):
        """Test reading both texts from files."""
        original = tmp_path / "en.txt"
        translated = tmp_path / "fr.txt"
        original.write_text("Hi *|FNAME|*", encoding="utf-8")
        translated.write_text("Salut *|FNAME|", encoding="utf-8")
        result = runner.invoke(app, [
            "validate",
            "--original-file", str(original),
            "--translated-file", str(translated),
            "--json",
        ])
        assert result.exit_code == 1
        assert json.loads(result.output)["corrupted"] == ["*|FNAME|"]


class TestRenderPreview:
    def test_render(self, vars_file):
        """Test render with a vars file."""
        result = runner.invoke(app, ["render", "--text", "{{greeting}} *|FNAME|*!", "--vars", str(vars_file)])
        assert result.exit_code == 0
        assert result.output.strip() == "Hello Ana!"

    def test_render_keeps_unknown(self):
        """Test unknown tags are kept."""
        result = runner.invoke(app, ["render", "--text", "Hi *|LNAME|*"])
        assert result.output.strip() == "Hi *|LNAME|*"

    def test_render_null_value(self, tmp_path):
        """Test a null value keeps its placeholder."""
        path = tmp_path / "nulls.json"
        path.write_text(json.dumps({"FNAME": None}), encoding="utf-8")
        result = runner.invoke(app, ["render", "--text", "Hi *|FNAME|*", "--vars", str(path)])
        assert result.exit_code == 0
        assert result.output.strip() == "Hi *|FNAME|*"

    def test_preview_json(self, tmp_path, template_file, vars_file):
        """Test preview --json."""
        globals_path = tmp_path / "globals.json"
        globals_path.write_text(json.dumps({"BRAND": "Acme"}), encoding="utf-8")
        result = runner.invoke(app, [
            "preview",
            "--input", str(template_file),
            "--vars", str(vars_file),
            "--globals", str(globals_path),
            "--json",
        ])
        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "subject": "Hi Ana",
            "from_name": "Acme",
            "from_email": "news@example.com",
            "html_content": "<p>Hello Ana</p>",
            "text_content": "Hello Ana",
        }

    def test_preview_text(self, template_file, vars_file):
        """Test preview text output."""
        result = runner.invoke(app, ["preview", "--input", str(template_file), "--vars", str(vars_file)])
        assert result.exit_code == 0
        assert "Subject: Hi Ana" in result.output


class TestTranslate:
    def test_echo_dry_run(self):
        """Test an echo dry run."""
        result = runner.invoke(app, ["translate", "--text", "Hi *|FNAME|*", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["protected_text"] == "Hi __PH_0__"
        assert data["translated_text"] == "Hi *|FNAME|*"
        assert data["validation"]["is_valid"] is True

    def test_upper_without_protection(self):
        """Test --no-protect."""
        result = runner.invoke(app, ["translate", "--text", "hi *|fname|*", "--mode", "upper", "--no-protect", "--json"])
        data = json.loads(result.output)
        assert data["translated_text"] == "HI *|FNAME|*"
        assert data["validation"]["missing"] == ["*|fname|*"]

    def test_reverse_reports_failure(self):
        """Test a mangling mode fails validation."""
        result = runner.invoke(app, ["translate", "--text", "Dear *|FNAME|*", "--mode", "reverse"])
        assert result.exit_code == 0
        assert "Placeholder validation failed" in result.output

    def test_drift_mode_is_normalized(self):
        """Test drifted spacing is restored."""
        result = runner.invoke(app, ["translate", "--text", "Dear *|FNAME|* !", "--mode", "drift", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["translated_text"] == "Dear *|FNAME|* !"
        assert data["validation"]["is_valid"] is True

    def test_unknown_mode(self):
        """Test an unknown mode is rejected."""
        result = runner.invoke(app, ["translate", "--text", "x", "--mode", "shout"])
        assert result.exit_code == 1
        assert "Unknown dummy mode" in result.output
