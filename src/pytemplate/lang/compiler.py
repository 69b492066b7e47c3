import logging
import os
import pytemplate.lang.declarations as declarations
import pytemplate.lang.directive as directive
import pytemplate.lang.emitter as emitter
import pytemplate.lang.errors as errors
import pytemplate.lang.mapping as mappingm
import pytemplate.lang.resolver as resolver
import pytemplate.lang.source as source
import pytemplate.visitor.rewriter as rewriter


_log = logging.getLogger(__name__)


def instantiate(code, request, path="<template>", log=_log):
    """
    Instantiates the template source code, returns the generated source.

    Nothing is written to disk.
    """
    source_file = source.parse(code, path)
    definition = _compilation_pipeline(source_file, request, log)
    emitter.set_package(source_file, request.target_module)
    return emitter.format_source(source_file, request, definition)


def instantiate_module(request, output_dir=".", log=_log):
    """
    Finds the template module, instantiates it and writes the generated
    file into output_dir. Returns the path of the generated file.
    """
    module = resolver.find_module(request.source_module, request.search_dir)
    log.debug("Dir = %s", module.dir)
    log.debug("Python files = %s", module.files)
    if len(module.files) == 0:
        raise errors.ResolveError("No python files found for module '%s'" % request.source_module)
    if len(module.files) != 1:
        raise errors.ResolveError(
            "Found more than one python file in '%s' - can only cope with 1 for the moment, sorry" %
            request.source_module)

    template_path = os.path.join(module.dir, module.files[0])
    source_file = source.parse_file(template_path)
    definition = _compilation_pipeline(source_file, request, log)
    path = emitter.emit(source_file, request, definition, output_dir)
    log.info("Written '%s'", path)
    return path


def _compilation_pipeline(source_file, request, log):
    """
    The main work happens here: directive -> declarations -> mapping ->
    rewrite. The tree of the source file is rewritten in place.
    """
    definition = directive.scan(source_file)
    definition.check_arity(request)
    log.debug("templateName = %s, templateArgs = %s", definition.formal_name, list(definition.formal_params))

    decls = declarations.classify(source_file.tree, definition.formal_params, log)
    mapping = mappingm.build(definition, request, decls.names_to_mangle, log)
    source_file.tree = rewriter.rewrite(source_file.tree, mapping, decls.removed)
    return definition
