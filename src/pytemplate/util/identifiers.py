import keyword


def is_identifier(name):
    return isinstance(name, str) and name.isidentifier() and not keyword.iskeyword(name)


def is_exported(name):
    """
    A name is exported (visible to users of the generated module) if it
    starts with an upper-case letter: Set, IntSet but not intSet.
    """
    return len(name) > 0 and name[0].isupper()


def is_dunder(name):
    return len(name) > 4 and name.startswith("__") and name.endswith("__")


def lower_first(name):
    return name[:1].lower() + name[1:]
