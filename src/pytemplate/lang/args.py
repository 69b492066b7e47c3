import ast
import pytemplate.lang.errors as errors
import re


TEMPLATE_WITH_ARGS = re.compile(r"^(\w+)\((.*?)\)\s*$")


def parse_template_and_args(s):
    """
    Parses the replacement string Template(A, B, C), returns the name and the
    list of arguments.
    """
    matches = TEMPLATE_WITH_ARGS.match(s.strip())
    if matches is None:
        raise errors.UserInputError("Bad template replacement string %r" % s)
    return matches.group(1), parse_args(matches.group(2), s)


def parse_args(args, s=None):
    """
    "int, dict[str, int]" -> ["int", "dict[str, int]"]

    Uses the python parser so that commas nested in brackets don't split an
    argument.
    """
    if len(args.strip()) == 0:
        return []
    try:
        node = ast.parse("f(%s)" % args, mode="eval").body
    except SyntaxError as e:
        raise errors.UserInputError("Bad template replacement string %r" % (s or args)) from e
    if len(node.keywords) > 0 or any(isinstance(arg, ast.Starred) for arg in node.args):
        raise errors.UserInputError("Bad template replacement string %r" % (s or args))
    return [ast.unparse(arg) for arg in node.args]
