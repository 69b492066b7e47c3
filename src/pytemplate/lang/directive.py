"""
Finds the template directive, for ex:

    # template type Set(A)

The directive may also be a line of a bare string statement (for example the
module docstring), without the leading #.
"""
import pytemplate.lang.errors as errors
import pytemplate.lang.request as request
import re


LINE_DIRECTIVE = re.compile(r"^#\s+template\s+type\s+(\w+)\((.*?)\)\s*$")
BLOCK_DIRECTIVE = re.compile(r"^template\s+type\s+(\w+)\((.*?)\)\s*$")


def scan(source_file):
    """
    Returns the TemplateDefinition declared by the directive.
    """
    definition = None
    for comment in source_file.comments:
        match = _match(comment)
        if match is None:
            continue
        if definition is not None:
            raise errors.TemplateShapeError("Found multiple template definitions in %s" % source_file.path)
        definition = request.TemplateDefinition(match.group(1), parse_params(match.group(2)))
    if definition is None:
        raise errors.TemplateShapeError("Didn't find template definition in %s" % source_file.path)
    return definition


def parse_params(params):
    """
    "A, B" -> ["A", "B"]
    """
    if len(params.strip()) == 0:
        return []
    names = [p.strip() for p in params.split(",")]
    if "" in names:
        raise errors.TemplateShapeError("Empty template parameter in (%s)" % params)
    return names


def _match(comment):
    if comment.is_block:
        return BLOCK_DIRECTIVE.match(comment.text.strip())
    return LINE_DIRECTIVE.match(comment.text.strip())
