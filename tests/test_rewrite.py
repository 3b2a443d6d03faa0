import unittest
from pathlib import Path
from tempfile import TemporaryDirectory

from datadriven._private.util import has_blank_line
from datadriven.rewrite import RewriteBuffer


class TestRewriteBuffer(unittest.TestCase):

    def test_simple_form(self):
        buf = RewriteBuffer()
        buf.emit("cmd")
        buf.emit_expected("a\nb\n")
        self.assertEqual(buf.getvalue(), "cmd\n----\na\nb\n")

    def test_blank_line_form(self):
        buf = RewriteBuffer()
        buf.emit_expected("a\n  \nb\n")
        buf.emit("next")
        self.assertEqual(buf.getvalue(), "----\n----\na\n  \nb\n----\n----\n\nnext\n")

    def test_empty_output(self):
        buf = RewriteBuffer()
        buf.emit("cmd")
        buf.emit_expected("")
        self.assertEqual(buf.getvalue(), "cmd\n----\n")

    def test_strips_one_trailing_blank_line(self):
        buf = RewriteBuffer()
        buf.write("a\n\n\n")
        self.assertEqual(buf.getvalue(), "a\n\n")
        buf = RewriteBuffer()
        buf.write("\n\n")
        self.assertEqual(buf.getvalue(), "\n\n")

    def test_has_blank_line(self):
        self.assertTrue(has_blank_line("a\n\nb\n"))
        self.assertTrue(has_blank_line("a\n \t \n"))
        self.assertFalse(has_blank_line("a\nb\n"))
        self.assertFalse(has_blank_line(""))
        self.assertTrue(has_blank_line("\n"))
        # Only newlines end a line.
        self.assertFalse(has_blank_line("a\x0c\x0cb\n"))
        self.assertFalse(has_blank_line("a\u2028\u2028b\x85\x85c\n"))
        self.assertFalse(has_blank_line("x\r\ry"))

    def test_flush_to(self):
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "f"
            path.write_text("x" * 100)
            buf = RewriteBuffer()
            buf.emit("short")
            with open(path, "r+", encoding="utf-8", newline="") as f:
                f.read()
                self.assertEqual(buf.flush_to(f), "short\n")
            self.assertEqual(path.read_text(), "short\n")


if __name__ == "__main__":
    unittest.main()
