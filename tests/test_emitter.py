import ast
import os
import pytemplate.lang.emitter as emitter
import pytemplate.lang.errors as errors
import pytemplate.lang.request as request
import pytemplate.lang.source as source
import stat
import tempfile
import unittest


class EmitterTest(unittest.TestCase):

    def setUp(self):
        self.request = request.TemplateInstantiationRequest("templates.set", "IntSet", ["int"], "mypkg")
        self.definition = request.TemplateDefinition("Set", ["A"])

    def test_output_filename(self):
        self.assertEqual("pytemplate_IntSet.py", emitter.output_filename("IntSet"))
        self.assertEqual("pytemplate_intSet.py", emitter.output_filename("intSet"))

    def test_format_source(self):
        source_file = source.parse("x   =  (1)\n\n\n\ny = x", package="templates")
        emitter.set_package(source_file, "mypkg")

        content = emitter.format_source(source_file, self.request, self.definition)

        self.assertEqual("""\
# Code generated by pytemplate from templates.set (Set(A) -> IntSet(int)). DO NOT EDIT.
# package: mypkg

x = 1
y = x
""", content)

    def test_format_failure(self):
        source_file = source.parse("x = 1\n")
        # unparses to something that isn't python
        source_file.tree.body[0].value = ast.Constant(value=object(), kind=None)

        with self.assertRaises(errors.FormatError) as ctx:
            emitter.format_source(source_file, self.request, self.definition)
        self.assertIn("Failed to format 'IntSet'", str(ctx.exception))

    def test_emit(self):
        source_file = source.parse("x = 1\n")
        with tempfile.TemporaryDirectory() as d:
            path = emitter.emit(source_file, self.request, self.definition, output_dir=d)

            self.assertEqual(os.path.join(d, "pytemplate_IntSet.py"), path)
            self.assertEqual("mypkg", source_file.package)
            with open(path) as f:
                self.assertTrue(f.read().endswith("\nx = 1\n"))
            self.assertTrue(os.stat(path).st_mode & stat.S_IRUSR)
            self.assertTrue(os.stat(path).st_mode & stat.S_IWUSR)

    def test_write_overwrites(self):
        with tempfile.TemporaryDirectory() as d:
            path = os.path.join(d, "out.py")
            emitter.write_file(path, "x = 1\nlonger = True\n")
            emitter.write_file(path, "x = 2\n")
            with open(path) as f:
                self.assertEqual("x = 2\n", f.read())

    def test_write_failure(self):
        with self.assertRaises(errors.OutputError) as ctx:
            emitter.write_file("/nonexistent/dir/out.py", "x = 1\n")
        self.assertIn("Failed to write", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
