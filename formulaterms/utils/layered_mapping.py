from __future__ import annotations

import itertools
from collections.abc import Mapping
from typing import Any, Iterable, Iterator, List, Optional


class LayeredMapping(Mapping):
    """
    A read-only mapping that stacks multiple mappings on top of one another,
    passing key lookups through the stack from top to bottom until the key is
    found or the stack is exhausted. The layers passed in are never mutated.

    This is used to build the namespace in which the functions referenced by
    a formula are looked up: names captured from the caller's frame shadow
    the functions shipped with this package.
    """

    def __init__(self, *layers: Optional[Mapping], name: Optional[str] = None):
        self.name = name
        self._layers: List[Mapping] = self.__filter_layers(layers)

    @staticmethod
    def __filter_layers(layers: Iterable[Optional[Mapping]]) -> List[Mapping]:
        """
        Filter incoming `layers` down to those which are not null.
        """
        return [layer for layer in layers if layer is not None]

    def __getitem__(self, key: Any) -> Any:
        for layer in self._layers:
            if key in layer:
                return layer[key]
        raise KeyError(key)

    def __iter__(self) -> Iterator[Any]:
        keys = set()
        for layer in self._layers:
            for key in layer:
                if key not in keys:
                    keys.add(key)
                    yield key

    def __len__(self) -> int:
        return len(set(itertools.chain(*self._layers)))

    def with_layers(
        self,
        *layers: Optional[Mapping],
        prepend: bool = True,
        name: Optional[str] = None,
    ) -> LayeredMapping:
        """
        Return a copy of this `LayeredMapping` instance with additional layers
        added.

        Args:
            layers: The layers to add.
            prepend: Whether to add the layers before (if `True`) or after (if
                `False`) the current layers.
            name: The name of the new mapping.
        """
        layers = self.__filter_layers(layers)
        if not layers:
            return self
        new_layers = [*layers, self] if prepend else [self, *layers]
        return LayeredMapping(*new_layers, name=name)

    def __repr__(self) -> str:
        return f"<LayeredMapping{f' {self.name!r}' if self.name else ''}: {len(self._layers)} layers>"
