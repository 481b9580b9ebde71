from typing import Any, Dict, Type, Union


class ModelContext:
    """
    The default model context.

    Model contexts are tag classes describing the kind of model that a formula
    is being resolved for. They are never instantiated by this package;
    instead, traits (and call handlers, see `register_call_handler`) are
    registered against them and looked up along their method resolution
    order, so that subclasses inherit the behavior of their parents.
    """


class StatisticalModel(ModelContext):
    """
    A generic statistical model, which implies an intercept unless one is
    explicitly removed.
    """


class RegressionModel(StatisticalModel):
    pass


def as_context_type(context: Union[Type, Any]) -> Type:
    return context if isinstance(context, type) else type(context)


class ModelTrait:
    """
    A boolean property of model contexts.

    Attributes:
        name: The name of the trait.
        default: The value of the trait for contexts (and their parents) for
            which no value has been registered.
    """

    def __init__(self, name: str, default: bool = False):
        self.name = name
        self.default = default
        self._registry: Dict[Type, bool] = {}

    def register(self, context: Union[Type, Any], value: bool = True) -> None:
        """
        Set the value of this trait for `context` and its subclasses.
        """
        self._registry[as_context_type(context)] = bool(value)

    def unregister(self, context: Union[Type, Any]) -> None:
        self._registry.pop(as_context_type(context), None)

    def __call__(self, context: Union[Type, Any]) -> bool:
        for cls in as_context_type(context).__mro__:
            if cls in self._registry:
                return self._registry[cls]
        return self.default

    def __repr__(self) -> str:
        return f"<ModelTrait {self.name}>"


# Whether an intercept is added to formulae that neither include nor remove one.
implicit_intercept = ModelTrait("implicit_intercept")
implicit_intercept.register(StatisticalModel, True)

# Whether the model handles the intercept itself, so that formulae may not
# include one.
drop_intercept = ModelTrait("drop_intercept")
