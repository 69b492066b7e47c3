import ast
import contextlib
import copy
import pytemplate.lang.declarations as declarations
import pytemplate.lang.errors as errors
import pytemplate.visitor.astpath as astpath


ALL_ATTR = "__all__"

# scopes whose bindings are not visible in the enclosing function
_NESTED_SCOPES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef, ast.Lambda)

# match captures, ast.MatchAs and ast.MatchStar only exist on 3.10+
_MATCH_CAPTURES = tuple(getattr(ast, n) for n in ("MatchAs", "MatchStar") if hasattr(ast, n))


class IdentifierRewriter(ast.NodeTransformer):
    """
    Renames every identifier that has a mapping, in one pass over the tree.

    Each node is visited once and replacement nodes are not visited again,
    so the mappings are applied simultaneously: with Set -> IntSet and
    IntSet -> Other, Set becomes IntSet, not Other.

    A name bound inside a function (a parameter, a local variable, an
    except-as name ...) shadows the top-level declaration with the same
    name, so it is left alone everywhere in that function.
    """

    def __init__(self, mapping, removed=()):
        super().__init__()
        self._mapping = mapping
        self._removed = set(removed)
        self._replacements = {name: _parse_replacement(name, r) for name, r in mapping.items()}
        self._in_annotation = False
        self._shadowed = frozenset()

    def visit_Name(self, node):
        if node.id in self._shadowed:
            return node
        replacement = self._replacements.get(node.id)
        if replacement is None:
            return node
        if isinstance(replacement, ast.Name):
            node.id = replacement.id
            return node
        if not isinstance(node.ctx, ast.Load):
            raise errors.RewriteError(
                "Cannot bind to '%s' on line %d, it is replaced with the expression '%s'" %
                (node.id, node.lineno, self._mapping[node.id]))
        return ast.copy_location(copy.deepcopy(replacement), node)

    def visit_ClassDef(self, node):
        node.name = self._rename(node.name, node)
        return self.generic_visit(node)

    def visit_FunctionDef(self, node):
        # the name, decorators, defaults and annotations belong to the
        # enclosing scope, only the body sees the function's own bindings
        node.name = self._rename(node.name, node)
        node.decorator_list = self._visit_list(node.decorator_list)
        if getattr(node, "type_params", None):
            node.type_params = self._visit_list(node.type_params)
        node.args = self.visit(node.args)
        if node.returns is not None:
            node.returns = self._visit_annotation(node.returns)
        local_names, global_names = _get_function_bindings(node)
        with self._scope(local_names, global_names):
            node.body = self._visit_list(node.body)
        return node

    visit_AsyncFunctionDef = visit_FunctionDef

    def visit_Lambda(self, node):
        node.args = self.visit(node.args)
        with self._scope(_get_arg_names(node.args)):
            node.body = self.visit(node.body)
        return node

    def visit_arg(self, node):
        # parameters are bound in the function's own scope, see visit_FunctionDef
        if node.annotation is not None:
            node.annotation = self._visit_annotation(node.annotation)
        return node

    def visit_ListComp(self, node):
        # the first iterable is evaluated in the enclosing scope
        first = node.generators[0]
        first.iter = self.visit(first.iter)
        targets = set()
        for generator in node.generators:
            _collect_target_names(generator.target, targets)
        with self._scope(targets):
            for i, generator in enumerate(node.generators):
                generator.target = self.visit(generator.target)
                if i > 0:
                    generator.iter = self.visit(generator.iter)
                generator.ifs = self._visit_list(generator.ifs)
            for field in ("elt", "key", "value"):
                if hasattr(node, field):
                    setattr(node, field, self.visit(getattr(node, field)))
        return node

    visit_SetComp = visit_ListComp
    visit_GeneratorExp = visit_ListComp
    visit_DictComp = visit_ListComp

    def visit_ExceptHandler(self, node):
        if node.name is not None:
            node.name = self._rename(node.name, node)
        return self.generic_visit(node)

    def visit_AnnAssign(self, node):
        node.target = self.visit(node.target)
        node.annotation = self._visit_annotation(node.annotation)
        if node.value is not None:
            node.value = self.visit(node.value)
        return node

    def visit_Assign(self, node):
        original_target = _get_single_name(node)
        self.generic_visit(node)
        target = _get_single_name(node)
        if target == ALL_ATTR and isinstance(node.value, (ast.List, ast.Tuple)):
            node.value.elts = self._rewrite_exports(node.value.elts)
        elif target is not None and target != original_target:
            _rewrite_type_factory_name(node.value, original_target, target)
        return node

    def visit_Global(self, node):
        node.names = [self._rename(name, node) for name in node.names]
        return node

    visit_Nonlocal = visit_Global

    def visit_Subscript(self, node):
        if self._in_annotation and astpath.is_attr_path_matching(("Literal",), node.value):
            # Literal["Set"] is a value, not a forward reference
            node.value = self.visit(node.value)
            return node
        return self.generic_visit(node)

    def visit_Constant(self, node):
        if not self._in_annotation or not isinstance(node.value, str):
            return node
        try:
            expr = ast.parse(node.value.strip(), mode="eval")
        except SyntaxError:
            return node
        expr = self.visit(expr)
        return ast.copy_location(ast.Constant(value=ast.unparse(expr.body), kind=None), node)

    def _visit_annotation(self, node):
        in_annotation, self._in_annotation = self._in_annotation, True
        try:
            return self.visit(node)
        finally:
            self._in_annotation = in_annotation

    def _visit_list(self, nodes):
        return [self.visit(n) for n in nodes]

    @contextlib.contextmanager
    def _scope(self, local_names, global_names=()):
        shadowed = self._shadowed
        self._shadowed = (shadowed - set(global_names)) | set(local_names)
        try:
            yield
        finally:
            self._shadowed = shadowed

    def _rename(self, name, node):
        if name in self._shadowed:
            return name
        replacement = self._replacements.get(name)
        if replacement is None:
            return name
        if not isinstance(replacement, ast.Name):
            raise errors.RewriteError(
                "Cannot declare '%s' on line %d, it is replaced with the expression '%s'" %
                (name, node.lineno, self._mapping[name]))
        return replacement.id

    def _rewrite_exports(self, elts):
        """
        __all__ = ["Set", "A"] -> __all__ = ["IntSet"]
        """
        new_elts = []
        for el in elts:
            if isinstance(el, ast.Constant) and isinstance(el.value, str):
                if el.value in self._removed:
                    continue
                replacement = self._replacements.get(el.value)
                if isinstance(replacement, ast.Name):
                    el = ast.copy_location(ast.Constant(value=replacement.id, kind=None), el)
            new_elts.append(el)
        return new_elts


def rewrite(tree, mapping, removed=()):
    """
    Applies the name mapping to the whole tree, returns the rewritten tree.
    """
    tree = IdentifierRewriter(mapping, removed).visit(tree)
    ast.fix_missing_locations(tree)
    return tree


def _parse_replacement(name, replacement):
    try:
        return ast.parse(replacement.strip(), mode="eval").body
    except SyntaxError as e:
        raise errors.RewriteError("Bad replacement for '%s': %r" % (name, replacement)) from e


def _rewrite_type_factory_name(value, old_name, new_name):
    """
    T = TypeVar("T") -> TIntBox = TypeVar("TIntBox")
    """
    if (isinstance(value, ast.Call) and
            astpath.is_attr_path_matching(declarations.TYPE_FACTORIES, value) and
            len(value.args) > 0 and
            isinstance(value.args[0], ast.Constant) and
            value.args[0].value == old_name):
        value.args[0] = ast.copy_location(ast.Constant(value=new_name, kind=None), value.args[0])


def _get_single_name(assign):
    if len(assign.targets) == 1 and isinstance(assign.targets[0], ast.Name):
        return assign.targets[0].id
    return None


def _get_arg_names(args):
    all_args = args.posonlyargs + args.args + args.kwonlyargs
    for arg in (args.vararg, args.kwarg):
        if arg is not None:
            all_args.append(arg)
    return set(arg.arg for arg in all_args)


def _get_function_bindings(node):
    """
    Returns (local names, global names) of the function.

    Local names are the parameters and every name bound in the body, minus
    the ones declared global or nonlocal.
    """
    local_names = _get_arg_names(node.args)
    declared = set()
    global_names = set()
    for stmt in node.body:
        for child in _walk_scope(stmt):
            if isinstance(child, ast.Name) and not isinstance(child.ctx, ast.Load):
                local_names.add(child.id)
            elif isinstance(child, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
                local_names.add(child.name)
            elif isinstance(child, ast.ExceptHandler) and child.name is not None:
                local_names.add(child.name)
            elif isinstance(child, (ast.Import, ast.ImportFrom)):
                for alias in child.names:
                    local_names.add(alias.asname or alias.name.split(".")[0])
            elif isinstance(child, _MATCH_CAPTURES) and child.name is not None:
                local_names.add(child.name)
            elif isinstance(child, ast.Global):
                declared.update(child.names)
                global_names.update(child.names)
            elif isinstance(child, ast.Nonlocal):
                declared.update(child.names)
    return local_names - declared, global_names


def _walk_scope(node):
    """
    Like ast.walk, but stays out of nested functions, classes and
    comprehension targets.
    """
    yield node
    if isinstance(node, _NESTED_SCOPES):
        return
    for child in ast.iter_child_nodes(node):
        if isinstance(child, ast.comprehension):
            for n in [child.iter] + child.ifs:
                yield from _walk_scope(n)
        else:
            yield from _walk_scope(child)


def _collect_target_names(target, names):
    for node in ast.walk(target):
        if isinstance(node, ast.Name) and isinstance(node.ctx, ast.Store):
            names.add(node.id)
