"""
Strategy Factory Module - Registry and factory for layout strategies.
"""

from typing import Any, Dict, List, Type

from .base import LayoutStrategy


# Global registry of strategies
_STRATEGIES: Dict[str, Type[LayoutStrategy]] = {}


def register_strategy(cls: Type[LayoutStrategy]) -> Type[LayoutStrategy]:
    """
    Decorator to register a strategy class.

    Usage:
        @register_strategy
        class MyStrategy(LayoutStrategy):
            name = "my_strategy"
            order = 50
            ...

    Args:
        cls: Strategy class to register

    Returns:
        The same class (for decorator chaining)

    Raises:
        TypeError: If cls is not a LayoutStrategy subclass
    """
    if not issubclass(cls, LayoutStrategy):
        raise TypeError(f"{cls} must be a subclass of LayoutStrategy")
    _STRATEGIES[cls.name] = cls
    return cls


def create_strategy(name: str, **kwargs: Any) -> LayoutStrategy:
    """
    Create a strategy instance by name.

    Args:
        name: Strategy name (e.g., "header_grid", "positional_fill")
        **kwargs: Additional arguments passed to strategy constructor

    Returns:
        Strategy instance

    Raises:
        ValueError: If strategy name not found
    """
    if name not in _STRATEGIES:
        available = ", ".join(_STRATEGIES.keys())
        raise ValueError(f"Unknown strategy: {name}. Available: {available}")
    return _STRATEGIES[name](**kwargs)


def get_strategy_names() -> List[str]:
    """
    Get registered strategy names in cascade order.

    Returns:
        List of strategy names, primary first
    """
    return [cls.name for cls in sorted(_STRATEGIES.values(), key=lambda c: c.order)]


def get_strategy_info() -> List[Dict[str, str]]:
    """
    Get name and description for all registered strategies.

    Returns:
        List of dicts with 'name' and 'description' keys, in cascade order
    """
    return [
        {"name": cls.name, "description": cls.description}
        for cls in sorted(_STRATEGIES.values(), key=lambda c: c.order)
    ]


def create_cascade() -> List[LayoutStrategy]:
    """Instantiate every registered strategy in cascade order."""
    return [create_strategy(name) for name in get_strategy_names()]
