"""
Tests for csv2html.py — the command-line entry point.

main() is called in-process with an argv list; output is captured with capsys.
"""
import json

import pytest

from csv2html import main
from csvreport import __version__


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("CSV2HTML_EXCLUDE_OTHER", "CSV2HTML_INCLUDE_HIDDEN",
                 "CSV2HTML_QUIET", "CSV2HTML_ENCODING"):
        monkeypatch.delenv(name, raising=False)


ENUM_WARNING = 'Warning: property "format": no enumeration for value: "ebook"'


# ── Success ──────────────────────────────────────────────────────────────────

class TestReport:
    def test_stdout(self, capsys, books_csv_path, books_template_path):
        rc = main(["-t", str(books_template_path), str(books_csv_path)])
        out, err = capsys.readouterr()
        assert rc == 0
        assert "<title>My Books</title>" in out
        assert ENUM_WARNING in err

    def test_output_file(self, capsys, tmp_path, books_csv_path, books_template_path):
        output = tmp_path / "report.html"
        rc = main(["-t", str(books_template_path), "-o", str(output),
                   str(books_csv_path)])
        out, _ = capsys.readouterr()
        assert rc == 0
        assert out == ""
        assert "<h1>My Books</h1>" in output.read_text(encoding="utf-8")

    def test_default_template_title_is_file_name(self, capsys, books_csv_path):
        assert main([str(books_csv_path)]) == 0
        out, err = capsys.readouterr()
        assert "<title>books.csv</title>" in out
        assert err == ""

    def test_title_option(self, capsys, books_csv_path):
        assert main(["--title", "Catalogue", str(books_csv_path)]) == 0
        assert "<title>Catalogue</title>" in capsys.readouterr().out

    def test_template_title_wins(self, capsys, books_csv_path, books_template_path):
        main(["-t", str(books_template_path), "--title", "Ignored", str(books_csv_path)])
        assert "<title>My Books</title>" in capsys.readouterr().out

    def test_excel_data(self, capsys, books_xlsx_path, books_template_path):
        assert main(["-t", str(books_template_path), str(books_xlsx_path)]) == 0
        assert "Moby Dick" in capsys.readouterr().out

    def test_timestamp_from_file(self, capsys, books_csv_path):
        main([str(books_csv_path)])
        out = capsys.readouterr().out
        assert "timestamp: " in out
        assert '<p class="timestamp">' in out


# ── Options ──────────────────────────────────────────────────────────────────

class TestOptions:
    def test_quiet(self, capsys, books_csv_path, books_template_path):
        assert main(["-q", "-t", str(books_template_path), str(books_csv_path)]) == 0
        assert capsys.readouterr().err == ""

    def test_quiet_from_env(self, capsys, monkeypatch, books_csv_path, books_template_path):
        monkeypatch.setenv("CSV2HTML_QUIET", "1")
        main(["-t", str(books_template_path), str(books_csv_path)])
        assert capsys.readouterr().err == ""

    def test_include_hidden(self, capsys, books_csv_path, books_template_path):
        main(["-i", "-t", str(books_template_path), str(books_csv_path)])
        assert '<div class="property hidden-property">' in capsys.readouterr().out

    def test_exclude_other(self, capsys, books_csv_path, books_template_path):
        main(["-e", "-t", str(books_template_path), str(books_csv_path)])
        assert '<div class="property other-property">' not in capsys.readouterr().out

    def test_config_file(self, capsys, tmp_path, books_csv_path, books_template_path):
        config = tmp_path / "report.json"
        config.write_text(json.dumps({"include_hidden": True, "quiet": True}))
        rc = main(["--config", str(config), "-t", str(books_template_path),
                   str(books_csv_path)])
        out, err = capsys.readouterr()
        assert rc == 0
        assert '<div class="property hidden-property">' in out
        assert err == ""

    def test_bad_config_file(self, capsys, tmp_path, books_csv_path):
        config = tmp_path / "report.json"
        config.write_text("{oops")
        assert main(["--config", str(config), str(books_csv_path)]) == 1
        assert capsys.readouterr().err.startswith(f"Error: {config}: ")

    @pytest.mark.parametrize("payload,message", [
        ("[]", "config must be a JSON object, not list"),
        ('{"exclude_othr": true}', "unknown config setting: exclude_othr"),
    ], ids=["not an object", "misspelt setting"])
    def test_rejected_config_file(self, capsys, tmp_path, books_csv_path, payload, message):
        config = tmp_path / "report.json"
        config.write_text(payload)
        assert main(["--config", str(config), str(books_csv_path)]) == 1
        out, err = capsys.readouterr()
        assert out == ""
        assert err == f"Error: {config}: {message}\n"

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert capsys.readouterr().out.strip() == f"csv2html {__version__}"

    def test_missing_argument(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main([])
        assert exc.value.code == 2


# ── Errors ───────────────────────────────────────────────────────────────────

class TestErrors:
    """Fatal errors exit 1 with one Error: line on stderr."""

    def test_bad_data(self, capsys, tmp_path):
        data = tmp_path / "bad.csv"
        data.write_text("a,a\n1,2\n")
        assert main([str(data)]) == 1
        out, err = capsys.readouterr()
        assert out == ""
        assert err == f"Error: {data}: line 1: duplicate property name: a\n"

    def test_missing_data_file(self, capsys, tmp_path):
        assert main([str(tmp_path / "nope.csv")]) == 1
        assert "Error: " in capsys.readouterr().err

    def test_bad_template(self, capsys, tmp_path, books_csv_path):
        template = tmp_path / "t.csv"
        template.write_text("T\nA,title\n_BOGUS,x\n")
        assert main(["-t", str(template), str(books_csv_path)]) == 1
        assert capsys.readouterr().err == (
            f"Error: {template}: line 3: unknown command: _BOGUS\n")

    def test_property_not_in_data(self, capsys, tmp_path, books_csv_path):
        template = tmp_path / "t.csv"
        template.write_text("T\nA,title\nG,ghost\n")
        output = tmp_path / "out.html"
        rc = main(["-t", str(template), "-o", str(output), str(books_csv_path)])
        assert rc == 1
        assert not output.exists()
        assert capsys.readouterr().err == (
            f"Error: {template}: property from template is not in the data: ghost\n")
