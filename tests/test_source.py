import pytemplate.lang.errors as errors
import pytemplate.lang.source as source
import unittest


class SourceTest(unittest.TestCase):

    def test_comments(self):
        code = '''"""
Docs.
"""
import os  # the os

# top
def f():
    # inside
    pass
'''
        source_file = source.parse(code, "f.py", package="pkg")

        self.assertEqual("f.py", source_file.path)
        self.assertEqual("pkg", source_file.package)
        self.assertEqual([(1, True, ""), (2, True, "Docs.")],
                         [(c.lineno, c.is_block, c.text) for c in source_file.comments[:2]])
        line_comments = [c.text for c in source_file.comments if not c.is_block]
        self.assertEqual(["# the os", "# top", "# inside"], line_comments)

    def test_syntax_error(self):
        with self.assertRaises(errors.ParseError) as ctx:
            source.parse("class :\n", "bad.py")
        self.assertIn("Failed to parse file", str(ctx.exception))

    def test_missing_file(self):
        with self.assertRaises(errors.ParseError):
            source.parse_file("/nonexistent/template.py")


if __name__ == "__main__":
    unittest.main()
