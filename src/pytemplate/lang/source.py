import ast
import collections
import io
import pytemplate.lang.errors as errors
import tokenize


Comment = collections.namedtuple("Comment", ["text", "lineno", "is_block"])


class SourceFile:
    """
    A parsed template: the ast, the comments the ast does not keep, and the
    package the module belongs to.
    """

    def __init__(self, tree, comments, path, package=None):
        assert isinstance(tree, ast.Module)
        self.tree = tree
        self.comments = comments
        self.path = path
        self.package = package


def parse(code, path="<template>", package=None):
    try:
        tree = ast.parse(code, filename=path)
    except SyntaxError as e:
        raise errors.ParseError("Failed to parse file: %s" % e) from e
    comments = _get_line_comments(code, path) + _get_block_comments(tree)
    comments.sort(key=lambda c: c.lineno)
    return SourceFile(tree, comments, path, package)


def parse_file(path, package=None):
    try:
        with open(path, "r", encoding="utf-8") as f:
            code = f.read()
    except OSError as e:
        raise errors.ParseError("Failed to read file %s: %s" % (path, e)) from e
    return parse(code, path, package)


def is_block_comment(stmt):
    """
    A statement that is only a string literal: the module docstring or
    another bare string.
    """
    return (isinstance(stmt, ast.Expr) and
            isinstance(stmt.value, ast.Constant) and
            isinstance(stmt.value.value, str))


def _get_line_comments(code, path):
    comments = []
    try:
        for token in tokenize.generate_tokens(io.StringIO(code).readline):
            if token.type == tokenize.COMMENT:
                comments.append(Comment(token.string, token.start[0], is_block=False))
    except (tokenize.TokenError, SyntaxError) as e:
        raise errors.ParseError("Failed to tokenize file %s: %s" % (path, e)) from e
    return comments


def _get_block_comments(tree):
    comments = []
    for stmt in tree.body:
        if is_block_comment(stmt):
            for i, line in enumerate(stmt.value.value.splitlines()):
                comments.append(Comment(line, stmt.lineno + i, is_block=True))
    return comments
