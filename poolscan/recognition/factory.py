"""
Grid Reader Factory

Factory for creating grid readers and choosing one from settings.
"""

import importlib
import os
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlparse

from ..layout import LayoutConfig
from .base import GridReader


# Placeholder hosts from example configs count as unset
_PLACEHOLDER_HOSTS = ("your-api.example.com", "your-api-id")

GRID_BACKEND_ENV = "POOLSCAN_GRID_BACKEND_URL"
FRAGMENT_BACKEND_ENV = "POOLSCAN_FRAGMENT_BACKEND_URL"


def _load(path: str) -> Any:
    """Lazily import "module.attr" relative to this package."""
    module_name, attr = path.rsplit(".", 1)
    module = importlib.import_module(f".{module_name}", package=__package__)
    return getattr(module, attr)


def _build_structured(url: str, timeout: float = 30.0, **_: Any) -> GridReader:
    return _load("backend.StructuredGridReader")(url=url, timeout=timeout)


def _build_fragments(
    url: str,
    timeout: float = 30.0,
    layout: Optional[LayoutConfig] = None,
    min_fragments: int = 20,
    **_: Any
) -> GridReader:
    source = _load("backend.BackendFragmentSource")(url=url, timeout=timeout)
    return _load("readers.FragmentGridReader")(source, layout, min_fragments)


def _build_static(
    fragments_path: str,
    layout: Optional[LayoutConfig] = None,
    **_: Any
) -> GridReader:
    source = _load("readers.StaticFragmentSource").from_json(fragments_path)
    return _load("readers.FragmentGridReader")(source, layout, min_fragments=0)


# Registry of available reader kinds
_READER_REGISTRY: Dict[str, Callable[..., GridReader]] = {
    "structured": _build_structured,
    "fragments": _build_fragments,
    "static": _build_static,
}


def create_reader(kind: str, **config: Any) -> GridReader:
    """
    Create a grid reader by kind.

    Args:
        kind: Reader kind identifier. Available kinds:
            - "structured": remote structured-extraction backend (url=)
            - "fragments": remote OCR backend + layout engine (url=)
            - "static": fragments JSON file + layout engine (fragments_path=)
        **config: Kind-specific options (url, timeout, layout, min_fragments,
            fragments_path)

    Returns:
        Configured GridReader instance

    Raises:
        ValueError: If kind is not recognized

    Example:
        reader = create_reader("fragments", url="https://ocr.internal/blocks")
        grid = reader.read(image)
    """
    if kind not in _READER_REGISTRY:
        available = ", ".join(_READER_REGISTRY.keys())
        raise ValueError(f"Unknown reader kind: {kind}. Available: {available}")
    return _READER_REGISTRY[kind](**config)


def register_reader(kind: str, builder: Callable[..., GridReader]) -> None:
    """
    Register a custom reader kind.

    Args:
        kind: Reader kind identifier
        builder: Callable taking keyword config and returning a GridReader

    Raises:
        TypeError: If builder is not callable
    """
    if not callable(builder):
        raise TypeError(f"{builder!r} is not callable")
    _READER_REGISTRY[kind] = builder


def available_readers() -> List[str]:
    """
    List available reader kinds.

    Returns:
        List of registered reader kind names
    """
    return list(_READER_REGISTRY.keys())


def is_placeholder_url(url: str) -> bool:
    host = (urlparse(url.strip()).hostname or "").lower()
    return any(p in host for p in _PLACEHOLDER_HOSTS)


def resolve_url(value: Optional[str], env_name: str) -> Optional[str]:
    """
    Effective endpoint URL: environment first, then settings.

    Blank and placeholder URLs are treated as unset.
    """
    for candidate in (os.environ.get(env_name), value):
        if candidate and candidate.strip() and not is_placeholder_url(candidate):
            return candidate.strip()
    return None


def reader_from_settings(settings: Dict[str, Any]) -> GridReader:
    """
    Choose a reader by which endpoint is configured.

    The structured backend wins when set; otherwise the OCR backend.

    Args:
        settings: Settings dictionary (see poolscan.settings)

    Returns:
        Configured GridReader

    Raises:
        ValueError: If no recognition endpoint is configured
    """
    timeout = float(settings.get("request_timeout", 30.0))
    layout = LayoutConfig.from_settings(settings)

    grid_url = resolve_url(settings.get("grid_backend_url"), GRID_BACKEND_ENV)
    if grid_url:
        return create_reader("structured", url=grid_url, timeout=timeout)

    fragment_url = resolve_url(settings.get("fragment_backend_url"), FRAGMENT_BACKEND_ENV)
    if fragment_url:
        return create_reader(
            "fragments",
            url=fragment_url,
            timeout=timeout,
            layout=layout,
            min_fragments=int(settings.get("min_fragments", 20)),
        )

    raise ValueError(
        f"No recognition backend configured. Set grid_backend_url or "
        f"fragment_backend_url in settings, or {GRID_BACKEND_ENV} / {FRAGMENT_BACKEND_ENV}."
    )
