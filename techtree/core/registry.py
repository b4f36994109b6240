"""
Layout engine registry.

Layout modules register their engine class with ``@register_layout("name")``;
``techtree.layout`` imports every ``layout_*`` module so the table is full
before ``get_layout`` is called. Names are case-insensitive.
"""

from typing import Any, Callable, Dict, List, Type


class LayoutRegistry:
    """Name -> layout engine class."""

    _engines: Dict[str, Type] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[Type], Type]:
        key = name.lower()

        def decorator(engine_class: Type) -> Type:
            cls._engines[key] = engine_class
            return engine_class
        return decorator

    @classmethod
    def names(cls) -> List[str]:
        return sorted(cls._engines)

    @classmethod
    def create(cls, name: str, config: Any = None) -> Any:
        """
        Instantiate the engine registered under ``name``.

        Raises:
            KeyError: if no engine has that name
        """
        engine_class = cls._engines.get(name.lower())
        if engine_class is None:
            raise KeyError(f"Unknown layout '{name}'. Available: {', '.join(cls.names())}")
        return engine_class(config)


def register_layout(name: str) -> Callable[[Type], Type]:
    """Class decorator: ``@register_layout("tiered")``."""
    return LayoutRegistry.register(name)
