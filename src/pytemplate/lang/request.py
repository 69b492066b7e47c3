import collections
import pytemplate.lang.errors as errors
import pytemplate.util.identifiers as identifiers


_Request = collections.namedtuple(
    "TemplateInstantiationRequest",
    ["source_module", "template_name", "concrete_args", "target_module", "search_dir"])


class TemplateInstantiationRequest(_Request):
    """
    What the caller asked for: instantiate the template found in
    source_module as template_name(concrete_args), into target_module.
    """
    __slots__ = ()

    def __new__(cls, source_module, template_name, concrete_args, target_module, search_dir="."):
        if not identifiers.is_identifier(template_name):
            raise errors.UserInputError("Bad template name %r" % template_name)
        concrete_args = tuple(concrete_args)
        for arg in concrete_args:
            if len(arg.strip()) == 0:
                raise errors.UserInputError("Empty argument in %s(%s)" % (template_name, ", ".join(concrete_args)))
        return super().__new__(cls, source_module, template_name, concrete_args, target_module, search_dir)

    @property
    def is_exported(self):
        return identifiers.is_exported(self.template_name)

    def __str__(self):
        return "%s(%s)" % (self.template_name, ", ".join(self.concrete_args))


class TemplateDefinition(collections.namedtuple("TemplateDefinition", ["formal_name", "formal_params"])):
    """
    What the template declares about itself, for ex:
        # template type Set(A)
    is formal_name "Set" with formal_params ("A",)
    """
    __slots__ = ()

    def __new__(cls, formal_name, formal_params):
        return super().__new__(cls, formal_name, tuple(formal_params))

    def check_arity(self, request):
        if len(self.formal_params) != len(request.concrete_args):
            raise errors.UserInputError(
                "Wrong number of arguments - template is expecting %d but %d supplied" %
                (len(self.formal_params), len(request.concrete_args)))

    def __str__(self):
        return "%s(%s)" % (self.formal_name, ", ".join(self.formal_params))
