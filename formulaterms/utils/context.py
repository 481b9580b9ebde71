import sys
from typing import Any, Mapping, Optional, Union

from .layered_mapping import LayeredMapping


def capture_context(
    context: Optional[Union[int, Mapping[str, Any]]] = 0,
) -> Optional[Mapping[str, Any]]:
    """
    Explicitly capture the context in which the functions referenced by
    formulae should be looked up.

    Note: This function is primarily useful in libraries that wrap this
    package, allowing them to decouple the extraction of the user's namespace
    from the parsing calls, which may be several frames removed from the
    user. Passing a dictionary context is always supported as well.

    Args:
        context: The context from which functions should be inherited. When
            specified as an integer, it is interpreted as a frame offset from
            the caller's frame (i.e. 0, the default, means that all names in
            the caller's scope are made accessible when building function
            calls). Otherwise, a mapping from name to value is expected. When
            nesting in a library, account for the extra frames introduced by
            your wrappers.

    Returns:
        The context that should be later passed to the parser like:
        `parse_formula(..., context=<this object>)`.
    """
    if isinstance(context, int):
        if hasattr(sys, "_getframe"):
            frame = sys._getframe(context + 1)
            context = LayeredMapping(frame.f_locals, frame.f_globals)
        else:
            context = None  # pragma: no cover
    return context
