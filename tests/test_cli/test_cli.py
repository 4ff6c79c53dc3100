"""Tests for the cssreconcile command line."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from cssreconcile import __version__
from cssreconcile.cli.main import cli

FIXTURES = Path(__file__).parent.parent / "fixtures"


@pytest.fixture
def runner():
    return CliRunner()


def _extract_args(tmp_path: Path, *extra: str) -> list[str]:
    return [
        "extract",
        "--stylesheet", str(FIXTURES / "theme.css"),
        "--reference", str(FIXTURES / "library.css"),
        "--variables", str(FIXTURES / "_variables.scss"),
        "--output", str(tmp_path / "out.scss"),
        "--audit", str(tmp_path / "removed.css"),
        *extra,
    ]


def _snapshots(tmp_path: Path, before: str, after: str) -> list[str]:
    (tmp_path / "before.css").write_text(before)
    (tmp_path / "after.css").write_text(after)
    return [
        "validate",
        "--before", str(tmp_path / "before.css"),
        "--after", str(tmp_path / "after.css"),
        "--report", str(tmp_path / "report.txt"),
    ]


# ---------------------------------------------------------------------------
# Group
# ---------------------------------------------------------------------------


class TestGroup:
    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for name in ("extract", "validate", "bundle", "library-reference"):
            assert name in result.output


# ---------------------------------------------------------------------------
# extract
# ---------------------------------------------------------------------------


class TestExtractCommand:
    def test_success(self, runner, tmp_path):
        result = runner.invoke(cli, _extract_args(tmp_path))
        assert result.exit_code == 0, result.output
        assert "Removed 6 library rules (4 exact, 2 pattern), kept 3 custom rules" in result.output
        assert "Removed 1 empty at-rules" in result.output
        assert "Replaced 3 color/font values with variables" in result.output
        assert "Extraction complete!" in result.output
        assert (tmp_path / "out.scss").is_file()
        assert (tmp_path / "removed.css").is_file()

    def test_no_variables(self, runner, tmp_path):
        result = runner.invoke(cli, _extract_args(tmp_path, "--no-variables"))
        assert result.exit_code == 0, result.output
        assert "Replaced" not in result.output

    def test_no_patterns(self, runner, tmp_path):
        result = runner.invoke(cli, _extract_args(tmp_path, "--no-patterns"))
        assert result.exit_code == 0, result.output
        assert "(4 exact, 0 pattern), kept 5 custom rules" in result.output

    def test_pattern_file(self, runner, tmp_path):
        args = _extract_args(tmp_path, "--patterns", str(FIXTURES / "patterns.txt"))
        result = runner.invoke(cli, args)
        assert result.exit_code == 0, result.output
        assert "(4 exact, 3 pattern), kept 2 custom rules" in result.output

    def test_strip_comments(self, runner, tmp_path):
        result = runner.invoke(cli, _extract_args(tmp_path, "--strip-comments"))
        assert result.exit_code == 0, result.output
        assert "/*!" not in (tmp_path / "out.scss").read_text().split(" */", 1)[1]

    def test_title(self, runner, tmp_path):
        result = runner.invoke(cli, _extract_args(tmp_path, "--title", "Sparkle Customizations"))
        assert result.exit_code == 0, result.output
        assert (tmp_path / "out.scss").read_text().startswith("/**\n * Sparkle Customizations\n")

    def test_missing_files(self, runner, tmp_path):
        result = runner.invoke(
            cli,
            [
                "extract",
                "--stylesheet", str(tmp_path / "nope.css"),
                "--reference", str(tmp_path / "nope-ref.css"),
                "--no-variables",
                "--output", str(tmp_path / "out.scss"),
            ],
        )
        assert result.exit_code == 1
        assert "ERROR: Missing required files:" in result.output
        assert f"  - Stylesheet: {tmp_path / 'nope.css'}" in result.output
        assert f"  - Reference CSS: {tmp_path / 'nope-ref.css'}" in result.output
        assert not (tmp_path / "out.scss").exists()

    def test_parse_error(self, runner, tmp_path):
        broken = tmp_path / "broken.css"
        broken.write_text(".a { 12px; }")
        args = _extract_args(tmp_path)
        args[args.index("--stylesheet") + 1] = str(broken)
        result = runner.invoke(cli, args)
        assert result.exit_code == 1
        assert f"Parse error ({broken}, line 1" in result.output

    def test_bad_pattern_file(self, runner, tmp_path):
        patterns = tmp_path / "patterns.txt"
        patterns.write_text("prefix .a-\nbogus .b-\n")
        result = runner.invoke(cli, _extract_args(tmp_path, "--patterns", str(patterns)))
        assert result.exit_code == 1
        assert "Pattern file error" in result.output
        assert "line 2" in result.output


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


class TestValidateCommand:
    def test_identical(self, runner, tmp_path):
        result = runner.invoke(cli, _snapshots(tmp_path, ".a{color:#ABC}", ".a{color:#aabbcc}"))
        assert result.exit_code == 0
        assert "✓ VALIDATION PASSED - Files are identical" in result.output
        assert (tmp_path / "report.txt").is_file()

    def test_non_critical(self, runner, tmp_path):
        args = _snapshots(tmp_path, ".a { speak: none; }", ".a { speak: normal; }")
        result = runner.invoke(cli, args)
        assert result.exit_code == 0
        assert "✓ VALIDATION PASSED - No critical differences" in result.output
        assert "(1 non-critical differences found)" in result.output

    def test_critical(self, runner, tmp_path):
        args = _snapshots(tmp_path, ".a { color: red; }", ".b { color: red; }")
        result = runner.invoke(cli, args)
        assert result.exit_code == 1
        assert "✗ VALIDATION FAILED - Critical differences detected" in result.output
        assert "Critical differences: 2" in result.output

    def test_missing_snapshot(self, runner, tmp_path):
        result = runner.invoke(
            cli,
            ["validate", "--before", str(tmp_path / "gone.css"), "--after", str(tmp_path / "gone2.css")],
        )
        assert result.exit_code == 1
        assert "Before snapshot" in result.output
        assert "After snapshot" in result.output


# ---------------------------------------------------------------------------
# bundle / library-reference
# ---------------------------------------------------------------------------


class TestReferenceCommands:
    def test_bundle(self, runner, tmp_path):
        out = tmp_path / "ref.css"
        result = runner.invoke(
            cli,
            ["bundle", "--source", f"Library={FIXTURES / 'library.css'}", "--output", str(out)],
        )
        assert result.exit_code == 0, result.output
        assert "built from 1 source(s)" in result.output
        assert "Library" in out.read_text()

    def test_bundle_rejects_bad_source(self, runner, tmp_path):
        result = runner.invoke(cli, ["bundle", "--source", "no-equals-sign"])
        assert result.exit_code == 2
        assert "LABEL=PATH" in result.output

    def test_bundle_missing_source(self, runner, tmp_path):
        result = runner.invoke(
            cli,
            ["bundle", "--source", f"Gone={tmp_path / 'gone.css'}", "--output", str(tmp_path / "r.css")],
        )
        assert result.exit_code == 1
        assert "Gone" in result.output

    def test_library_reference(self, runner, tmp_path):
        out = tmp_path / "reference.css"
        result = runner.invoke(
            cli,
            [
                "library-reference",
                "--stylesheet", str(FIXTURES / "theme.css"),
                "--exclude", ".hero-",
                "--exclude", ".site-nav",
                "--output", str(out),
            ],
        )
        assert result.exit_code == 0, result.output
        assert "Library rules: 6" in result.output
        assert "Custom rules skipped: 3" in result.output
        assert out.is_file()
