import argparse
import os
import pytemplate.lang.args
import pytemplate.lang.compiler
import pytemplate.lang.errors
import pytemplate.lang.request
import pytemplate.lang.resolver
import pytemplate.util.log
import sys


ENV_PREFIX = "PYTEMPLATE_"


def _parse_arguments(args):
    parser = argparse.ArgumentParser(
        prog="pytemplate",
        description="Instantiate a python template module",
        epilog="For example: pytemplate templates.set 'IntSet(int)'")
    parser.add_argument("module", type=str,
                        help="the module the template lives in")
    parser.add_argument("parameter", type=str,
                        help="the instantiation, Name(Arg1, Arg2, ...)")
    parser.add_argument("-p", "--package", required=False, type=str, default=None,
                        help="package the generated module belongs to, defaults to the current directory's package")
    parser.add_argument("-C", "--directory", required=False, type=str, default=None,
                        help="directory to resolve the template module in and write the generated module to")
    parser.add_argument("-v", "--verbose", required=False, action="store_true", default=None,
                        help="verbose output")
    return parser.parse_args(args)


def _get_arg_value(name, args):
    """
    Honor cmdline args and env vars.
    """
    v = getattr(args, name, None)
    if v is not None:
        return v
    return os.environ.get(ENV_PREFIX + name.upper())


def _is_true(value):
    return value is True or (isinstance(value, str) and value.lower() in ("1", "true", "yes"))


def main(argv=None):
    args = _parse_arguments(sys.argv[1:] if argv is None else argv)
    log = pytemplate.util.log.get_logger(_is_true(_get_arg_value("verbose", args)))
    try:
        directory = os.path.abspath(args.directory or os.getcwd())
        name, template_args = pytemplate.lang.args.parse_template_and_args(args.parameter)
        package = _get_arg_value("package", args)
        if package is None:
            package = pytemplate.lang.resolver.find_package_name(directory)
        request = pytemplate.lang.request.TemplateInstantiationRequest(
            source_module=args.module,
            template_name=name,
            concrete_args=template_args,
            target_module=package,
            search_dir=directory)
        log.info("%s: substituting %r with %s into package %s",
                 "pytemplate", request.source_module, request, request.target_module)
        pytemplate.lang.compiler.instantiate_module(request, output_dir=directory, log=log)
    except pytemplate.lang.errors.TemplateError as e:
        log.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
