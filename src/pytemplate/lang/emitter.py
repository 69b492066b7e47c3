import ast
import os
import pytemplate.lang.errors as errors


OUTPUT_FILE_PREFIX = "pytemplate_"
OUTPUT_FILE_SUFFIX = ".py"

HEADER_TEMPLATE = """\
# Code generated by pytemplate from %(module)s (%(definition)s -> %(instantiation)s). DO NOT EDIT.
# package: %(package)s
"""


def set_package(source_file, package):
    source_file.package = package


def output_filename(template_name):
    """
    IntSet -> pytemplate_IntSet.py

    The same instantiation name always produces the same file, so
    re-running an instantiation overwrites the previous output.
    """
    return OUTPUT_FILE_PREFIX + template_name + OUTPUT_FILE_SUFFIX


def format_source(source_file, request, definition):
    """
    Returns the canonical source for the (rewritten) template.
    """
    try:
        body = ast.unparse(ast.fix_missing_locations(source_file.tree))
        # the generated code has to be valid python
        ast.parse(body)
    except (AttributeError, TypeError, ValueError, SyntaxError, RecursionError) as e:
        raise errors.FormatError("Failed to format '%s': %s" % (request.template_name, e)) from e
    header = HEADER_TEMPLATE % {
        "module": request.source_module,
        "definition": definition,
        "instantiation": request,
        "package": source_file.package,
    }
    return header + "\n" + body + "\n"


def write_file(path, content):
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o666)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        raise errors.OutputError("Failed to write '%s': %s" % (path, e)) from e


def emit(source_file, request, definition, output_dir="."):
    """
    Moves the template into the target package, formats it and writes it.

    Returns the path of the written file.
    """
    set_package(source_file, request.target_module)
    content = format_source(source_file, request, definition)
    path = os.path.join(output_dir, output_filename(request.template_name))
    write_file(path, content)
    return path
