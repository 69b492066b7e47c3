import ast
import enum
import logging
import pytemplate.lang.errors as errors
import pytemplate.lang.source as source
import pytemplate.util.identifiers as identifiers
import pytemplate.visitor.astpath as astpath


_log = logging.getLogger(__name__)


# calls that declare a type when assigned to a name: A = TypeVar("A")
TYPE_FACTORIES = ("TypeVar", "NewType", "ParamSpec", "TypeVarTuple")

# ast.TypeAlias only exists on 3.12+
_TYPE_ALIAS = getattr(ast, "TypeAlias", None)


class DeclKind(enum.Enum):
    TYPE = "type"
    FUNCTION = "function"
    VALUE = "value"
    IMPORT = "import"
    COMMENT = "comment"


class DeclarationSet:

    def __init__(self):
        # rename candidates, in source order
        self.names_to_mangle = []
        self.kept = []
        # names of the stub declarations that have been removed
        self.removed = []

    def __repr__(self):
        return "DeclarationSet(names_to_mangle=%s, removed=%s)" % (self.names_to_mangle, self.removed)


def get_kind(stmt):
    if isinstance(stmt, (ast.Import, ast.ImportFrom)):
        return DeclKind.IMPORT
    if source.is_block_comment(stmt):
        return DeclKind.COMMENT
    if isinstance(stmt, ast.ClassDef):
        return DeclKind.TYPE
    if _TYPE_ALIAS is not None and isinstance(stmt, _TYPE_ALIAS):
        return DeclKind.TYPE
    if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
        return DeclKind.FUNCTION
    if isinstance(stmt, ast.Assign):
        if isinstance(stmt.value, ast.Call) and astpath.is_attr_path_matching(TYPE_FACTORIES, stmt.value):
            return DeclKind.TYPE
        return DeclKind.VALUE
    if isinstance(stmt, ast.AnnAssign):
        return DeclKind.VALUE
    return None


def classify(tree, formal_params, log=_log):
    """
    Walks the top-level statements of the template, collects the names that
    need renaming and drops the stub declarations of the formal parameters.

    The module body is replaced with the kept statements.
    """
    decls = DeclarationSet()
    for stmt in tree.body:
        kind = get_kind(stmt)
        if kind is None:
            raise errors.TemplateShapeError(
                "Unknown top-level statement on line %d: %s" % (stmt.lineno, ast.unparse(stmt)))
        remove = _HANDLERS[kind](stmt, formal_params, decls, log)
        if remove:
            decls.removed.append(_get_declared_name(stmt))
        else:
            decls.kept.append(stmt)
    log.debug("Names to mangle = %s", decls.names_to_mangle)
    tree.body = decls.kept
    return decls


def _handle_import(stmt, formal_params, decls, log):
    return False


def _handle_comment(stmt, formal_params, decls, log):
    return False


def _handle_type(stmt, formal_params, decls, log):
    name = _get_declared_name(stmt)
    log.debug("Type %s", name)
    decls.names_to_mangle.append(name)
    # class A: ... is the stub for the formal parameter A
    return name in formal_params


def _handle_function(stmt, formal_params, decls, log):
    log.debug("FunctionDef %s", stmt.name)
    decls.names_to_mangle.append(stmt.name)
    # def A(): ... is a hook for the formal parameter A
    return stmt.name in formal_params


def _handle_value(stmt, formal_params, decls, log):
    names = _get_bound_names(stmt)
    params = [name for name in names if name in formal_params]
    if params:
        if len(names) != 1:
            raise errors.TemplateShapeError(
                "Template parameter '%s' has to be declared on its own on line %d" % (params[0], stmt.lineno))
        # A = object is the stub for the formal parameter A
        log.debug("Type %s", names[0])
        decls.names_to_mangle.append(names[0])
        return True
    for name in names:
        if identifiers.is_dunder(name):
            log.debug("Keeping module attribute %s", name)
        else:
            log.debug("Value %s", name)
            decls.names_to_mangle.append(name)
    return False


_HANDLERS = {
    DeclKind.TYPE: _handle_type,
    DeclKind.FUNCTION: _handle_function,
    DeclKind.VALUE: _handle_value,
    DeclKind.IMPORT: _handle_import,
    DeclKind.COMMENT: _handle_comment,
}


def _get_declared_name(stmt):
    if isinstance(stmt, (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)):
        return stmt.name
    if _TYPE_ALIAS is not None and isinstance(stmt, _TYPE_ALIAS):
        return stmt.name.id
    names = _get_bound_names(stmt)
    if len(names) != 1:
        raise errors.TemplateShapeError(
            "Unexpected specs on type declaration on line %d" % stmt.lineno)
    return names[0]


def _get_bound_names(stmt):
    """
    a = 1 -> [a]
    a, b = 1, 2 -> [a, b]
    a: int = 1 -> [a]
    """
    if isinstance(stmt, ast.AnnAssign):
        targets = [stmt.target]
    else:
        targets = stmt.targets
    if len(targets) != 1:
        raise errors.TemplateShapeError("Unexpected specs on assignment on line %d" % stmt.lineno)
    names = []
    _collect_names(targets[0], names, stmt.lineno)
    return names


def _collect_names(target, names, lineno):
    if isinstance(target, ast.Name):
        names.append(target.id)
    elif isinstance(target, (ast.Tuple, ast.List)):
        for el in target.elts:
            _collect_names(el, names, lineno)
    elif isinstance(target, ast.Starred):
        _collect_names(target.value, names, lineno)
    else:
        raise errors.TemplateShapeError(
            "Unexpected assignment target on line %d: %s" % (lineno, ast.unparse(target)))
