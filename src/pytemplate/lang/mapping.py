import logging
import pytemplate.lang.errors as errors
import pytemplate.util.identifiers as identifiers


_log = logging.getLogger(__name__)


def build(definition, request, names_to_mangle, log=_log):
    """
    Returns the old name -> new name mapping for an instantiation.

    The formal parameters map to the concrete arguments (A -> int), every
    other top-level name gets the instantiation name worked into it:
    SetIterator -> IntSetIterator, New -> NewIntSet.

    The number of arguments has to be checked before, see
    TemplateDefinition.check_arity.
    """
    mappings = {}

    # A -> int, B -> str
    for param, arg in zip(definition.formal_params, request.concrete_args):
        mappings[param] = arg

    found = False
    for name in names_to_mangle:
        if name == definition.formal_name:
            found = True
            mappings[name] = get_replacement_name(name, definition, request, log)
        elif name in mappings:
            log.debug("'%s' is already mapped to '%s', ignoring later definition", name, mappings[name])
        else:
            mappings[name] = get_replacement_name(name, definition, request, log)
    if not found:
        raise errors.TemplateShapeError("No definition for template type '%s'" % definition.formal_name)

    _check_collisions(mappings, definition)
    log.debug("mappings = %s", mappings)
    return mappings


def get_replacement_name(name, definition, request, log=_log):
    if definition.formal_name in name:
        replacement = name.replace(definition.formal_name, request.template_name, 1)
    else:
        # the name doesn't contain the template name so just suffix it
        replacement = name + request.template_name
        log.debug("Top level definition '%s' doesn't contain template name '%s', using '%s'",
                  name, definition.formal_name, replacement)
    # generated names may only be public if the instantiation is
    if not request.is_exported and identifiers.is_exported(replacement):
        replacement = identifiers.lower_first(replacement)
    if not identifiers.is_identifier(replacement):
        raise errors.TemplateShapeError(
            "Cannot rename '%s': '%s' is not a valid identifier" % (name, replacement))
    return replacement


def _check_collisions(mappings, definition):
    seen = {}
    for name, replacement in mappings.items():
        if name in definition.formal_params:
            continue
        if replacement in seen:
            raise errors.TemplateShapeError(
                "Top level definitions '%s' and '%s' both map to '%s'" % (seen[replacement], name, replacement))
        seen[replacement] = name
