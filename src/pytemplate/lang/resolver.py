import collections
import os
import pytemplate.lang.errors as errors
import sys


ResolvedModule = collections.namedtuple("ResolvedModule", ["dir", "files"])


def find_module(name, search_dir, search_path=None):
    """
    Finds the python files that make up the module with the given name.

    The name is either a path (./templates/set, templates/set.py), relative
    to search_dir, or a dotted module name (templates.set) looked up in
    search_dir and then in sys.path.
    """
    if _is_path(name):
        path = os.path.normpath(os.path.join(search_dir, name))
        module = _get_module_at(path)
    else:
        module = None
        entries = [search_dir] + (sys.path if search_path is None else list(search_path))
        for entry in entries:
            module = _get_module_at(os.path.join(entry or os.curdir, *name.split(".")))
            if module is not None:
                break
    if module is None:
        raise errors.ResolveError("Import %s failed: no module named %r in %s" % (name, name, search_dir))
    return module


def find_package_name(directory):
    """
    Returns the name of the package the directory is, for ex "mypkg" for
    a directory mypkg/ that has an __init__.py.
    """
    directory = os.path.abspath(directory)
    if not os.path.isfile(os.path.join(directory, "__init__.py")):
        raise errors.ResolveError("Failed to read package in %s: no __init__.py" % directory)
    return os.path.basename(directory)


def is_test_file(filename):
    return filename.startswith("test_") or filename.endswith("_test.py")


def _is_path(name):
    return (name.startswith(os.curdir) or
            os.sep in name or
            "/" in name or
            name.endswith(".py"))


def _get_module_at(path):
    if os.path.isdir(path):
        return ResolvedModule(path, _get_source_files(path))
    if not path.endswith(".py"):
        path += ".py"
    if os.path.isfile(path):
        return ResolvedModule(os.path.dirname(path), [os.path.basename(path)])
    return None


def _get_source_files(directory):
    files = []
    for filename in sorted(os.listdir(directory)):
        if not filename.endswith(".py") or filename == "__init__.py" or is_test_file(filename):
            continue
        if os.path.isfile(os.path.join(directory, filename)):
            files.append(filename)
    return files
