import ast
import pytemplate.lang.errors as errors
import pytemplate.visitor.rewriter as rewriter
import unittest


class RewriterTest(unittest.TestCase):

    def test_declarations_and_usages(self):
        self._t("""
class Set:

    def copy(self) -> Set:
        return Set()

def NewSet(items: list[A]=None) -> Set:
    s: Set = Set()
    return s
""", {"Set": "IntSet", "NewSet": "NewIntSet", "A": "int"}, """
class IntSet:

    def copy(self) -> IntSet:
        return IntSet()

def NewIntSet(items: list[int]=None) -> IntSet:
    s: IntSet = IntSet()
    return s
""")

    def test_simultaneous(self):
        self._t("""
x = Set()
y = IntSet()
""", {"Set": "IntSet", "IntSet": "Other"}, """
x = IntSet()
y = Other()
""")

    def test_exact_names_only(self):
        self._t("""
x = SetUp(Set, obj.Set, Settings)
""", {"Set": "IntSet"}, """
x = SetUp(IntSet, obj.Set, Settings)
""")

    def test_parameters_shadow_top_level_names(self):
        # defaults are evaluated outside the function, the body sees the parameter
        self._t("""
def f(Set=Set):
    return g(Set=Set)
""", {"Set": "IntSet"}, """
def f(Set=IntSet):
    return g(Set=Set)
""")

    def test_locals_shadow_top_level_names(self):
        self._t("""
def f(size, *rest, key=None, **kw):
    total = size + count
    helper = lambda count: count + size
    return [size for size in rest] + [count, total, helper, key, kw]
""", {"size": "sizeIntSet", "count": "countIntSet", "rest": "restIntSet", "key": "keyIntSet",
      "kw": "kwIntSet", "total": "totalIntSet", "helper": "helperIntSet", "f": "fIntSet"}, """
def fIntSet(size, *rest, key=None, **kw):
    total = size + countIntSet
    helper = lambda count: count + size
    return [size for size in rest] + [countIntSet, total, helper, key, kw]
""")

    def test_nested_functions(self):
        self._unchanged("""
def outer():
    count = 0

    def inner():
        nonlocal count
        count += 1
        return count
    return inner
""", {"count": "countIntSet", "inner": "innerIntSet"})

    def test_comprehension_targets(self):
        self._t("""
x = [Set for Set in items if Set]
y = {k: v for k, v in items}
""", {"Set": "IntSet", "items": "itemsIntSet", "k": "kIntSet"}, """
x = [Set for Set in itemsIntSet if Set]
y = {k: v for k, v in itemsIntSet}
""")

    def test_except_name(self):
        self._t("""
try:
    pass
except ValueError as error:
    print(error)
""", {"error": "errorIntSet"}, """
try:
    pass
except ValueError as errorIntSet:
    print(errorIntSet)
""")
        self._unchanged("""
def f():
    try:
        pass
    except ValueError as error:
        return error
""", {"error": "errorIntSet"})

    def test_type_factory_name(self):
        self._t("""
T = TypeVar('T')
UserId = typing.NewType('UserId', int)
S = TypeVar('Other')
""", {"T": "TIntBox", "UserId": "UserIdIntBox", "S": "SIntBox"}, """
TIntBox = TypeVar('TIntBox')
UserIdIntBox = typing.NewType('UserIdIntBox', int)
SIntBox = TypeVar('Other')
""")

    def test_expression_replacement(self):
        self._t("""
def f(a: A) -> A:
    return A()
""", {"A": "dict[str, int]"}, """
def f(a: dict[str, int]) -> dict[str, int]:
    return dict[str, int]()
""")

    def test_expression_replacement_cannot_be_bound(self):
        with self.assertRaises(errors.RewriteError):
            rewriter.rewrite(ast.parse("A = 1\n"), {"A": "list[int]"})
        with self.assertRaises(errors.RewriteError):
            rewriter.rewrite(ast.parse("class A:\n    pass\n"), {"A": "list[int]"})

    def test_forward_references(self):
        self._t("""
def f(s: 'Set', t: 'list[Set]', u: Literal['Set']) -> 'Set | None':
    pass
""", {"Set": "IntSet"}, """
def f(s: 'IntSet', t: 'list[IntSet]', u: Literal['Set']) -> 'IntSet | None':
    pass
""")

    def test_strings_outside_annotations_untouched(self):
        self._t("""
x = 'Set'
""", {"Set": "IntSet"}, """
x = 'Set'
""")

    def test_global(self):
        self._t("""
def f():
    global count
    count = 1
""", {"count": "countIntSet"}, """
def f():
    global countIntSet
    countIntSet = 1
""")

    def test_exports(self):
        self._t("""
__all__ = ['Set', 'A', 'other']
""", {"Set": "IntSet", "A": "int"}, """
__all__ = ['IntSet', 'other']
""", removed=["A"])

    def test_bad_replacement(self):
        with self.assertRaises(errors.RewriteError):
            rewriter.rewrite(ast.parse("x = A\n"), {"A": "int)"})

    def _t(self, code, mapping, expected, removed=()):
        tree = rewriter.rewrite(ast.parse(code), mapping, removed)
        self.assertEqual(expected.strip(), ast.unparse(tree))

    def _unchanged(self, code, mapping):
        self._t(code, mapping, ast.unparse(ast.parse(code)))


if __name__ == "__main__":
    unittest.main()
