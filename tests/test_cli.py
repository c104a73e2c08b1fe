"""Tests for the command line interface."""

import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest import mock

from prettyhtml.__main__ import main


def run(argv, stdin=""):
    out = io.StringIO()
    err = io.StringIO()
    with mock.patch("sys.stdin", io.StringIO(stdin)), redirect_stdout(out), redirect_stderr(err):
        status = main(argv)
    return status, out.getvalue(), err.getvalue()


class TestCommandLine(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def write(self, name, text):
        path = self.tmp / name
        path.write_text(text, encoding="utf-8")
        return path

    def test_stdin_to_stdout(self):
        """Without files, stdin is formatted to stdout."""
        status, out, err = run([], stdin="<div><p>Hi</p></div>")
        assert status == 0
        assert out == "<div>\n    <p>Hi</p>\n</div>\n"
        assert err == ""

    def test_file_to_stdout(self):
        """Files are formatted to stdout."""
        path = self.write("a.html", "<div><div></div></div>")
        status, out, _ = run([str(path), "--indent", "2"])
        assert status == 0
        assert out == "<div>\n  <div></div>\n</div>\n"

    def test_tabs_and_close_tag_same_line(self):
        """Layout flags reach the formatter."""
        status, out, _ = run(["--tabs", "--close-tag-same-line"], stdin='<div a="1" b="2"></div>')
        assert status == 0
        assert out == '<div\n\ta="1"\n\tb="2"></div>\n'

    def test_compact_option(self):
        """--compact replaces the compact tag set."""
        status, out, _ = run(["--compact", "b"], stdin="<li><b>x</b></li>")
        assert status == 0
        assert out == "<li>\n    <b>x</b>\n</li>\n"

    def test_write_in_place(self):
        """--write rewrites changed files."""
        path = self.write("a.html", "<div><p>Hi</p></div>")
        status, out, _ = run(["--write", str(path)])
        assert status == 0
        assert path.read_text(encoding="utf-8") == "<div>\n    <p>Hi</p>\n</div>\n"
        assert out == f"reformatted {path}\n"

    def test_check(self):
        """--check reports changed files and exits 1."""
        clean = self.write("clean.html", "<div></div>\n")
        dirty = self.write("dirty.html", "<div><p>Hi</p></div>")
        status, out, _ = run(["--check", str(clean), str(dirty)])
        assert status == 1
        assert out == f"would reformat {dirty}\n"
        assert dirty.read_text(encoding="utf-8") == "<div><p>Hi</p></div>"

    def test_check_clean(self):
        """--check exits 0 when nothing would change."""
        clean = self.write("clean.html", "<div></div>\n")
        assert run(["--check", str(clean)])[0] == 0

    def test_malformed_file(self):
        """Parse errors are reported per file with status 2."""
        path = self.write("bad.html", "<div></span>")
        status, out, err = run([str(path)])
        assert status == 2
        assert out == ""
        assert err == f'{path}: (1,6): Unexpected closing tag "span"\n'

    def test_unsupported_construct_on_stdin(self):
        """Unsupported input on stdin exits 2."""
        status, out, err = run([], stdin="{n, plural, =0 {none}}")
        assert status == 2
        assert out == ""
        assert err.startswith("<stdin>: Cannot format node of kind '#expansion'")

    def test_no_icu(self):
        """--no-icu keeps braces as text."""
        status, out, _ = run(["--no-icu"], stdin="<b>{n, plural, =0 {none}}</b>")
        assert status == 0
        assert out == "<b>{n, plural, =0 {none}}</b>\n"

    def test_missing_file(self):
        """Unreadable files exit 2."""
        status, _, err = run([str(self.tmp / "missing.html")])
        assert status == 2
        assert "missing.html" in err

    def test_invalid_indent(self):
        """Invalid options exit 2."""
        status, _, err = run(["--indent", "0"])
        assert status == 2
        assert err.startswith("prettyhtml: ")


if __name__ == "__main__":
    unittest.main()
