import ast


def get_attr_path(node):
    """
    typing.TypeVar -> "typing.TypeVar"
    TypeVar -> "TypeVar"

    Returns None if the node isn't a chain of attributes ending in a name.
    """
    if isinstance(node, ast.Call):
        node = node.func
    path_segments = []
    if not _build_attr_path(node, path_segments):
        return None
    return ".".join(reversed(path_segments))


def is_attr_path_matching(paths, node):
    """
    Returns True if the attr path of the node is one of the given paths, or
    ends with one of them: "TypeVar" matches both TypeVar and typing.TypeVar.
    """
    assert not isinstance(paths, str)
    node_attr_path = get_attr_path(node)
    if node_attr_path is None:
        return False
    for path in paths:
        if node_attr_path == path or node_attr_path.endswith("." + path):
            return True
    return False


def _build_attr_path(node, path_segments):
    if isinstance(node, ast.Attribute):
        path_segments.append(node.attr)
        return _build_attr_path(node.value, path_segments)
    elif isinstance(node, ast.Name):
        path_segments.append(node.id)
        return True
    return False
