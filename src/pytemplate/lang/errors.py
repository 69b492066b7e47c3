"""
Everything that can go wrong while instantiating a template.

Library code raises these; only the command line entry point catches them.
"""


class TemplateError(Exception):
    """
    Base class.
    """
    pass


class UserInputError(TemplateError):
    """
    Bad replacement string, wrong number of arguments, bad instantiation name.
    """
    pass


class TemplateShapeError(TemplateError):
    """
    The template source does not have a shape we know how to instantiate.
    """
    pass


class ResolveError(TemplateError):
    """
    The template module (or the current package) cannot be located.
    """
    pass


class ParseError(TemplateError):
    pass


class RewriteError(TemplateError):
    pass


class FormatError(TemplateError):
    pass


class OutputError(TemplateError):
    pass
