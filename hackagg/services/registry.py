# hackagg/services/registry.py

"""Construction of source adapters from the settings registry."""

import importlib
import logging
from typing import Any

from hackagg.config.settings import Settings

logger = logging.getLogger("hackagg.registry")


def load_adapter_class(dotted_path: str) -> type[Any]:
    """Dynamically import an adapter class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[Any] = getattr(module, class_name)
    return cls


def resolve_sources(
    source_ids: list[str] | None = None,
) -> list[dict[str, str]]:
    """Map source IDs to their registry entries, in registry order.

    Returns every source when *source_ids* is ``None``.

    Raises:
        ValueError: one or more IDs are not registered.
    """
    if source_ids is None:
        return list(Settings.AVAILABLE_SOURCES)
    known = {s["id"] for s in Settings.AVAILABLE_SOURCES}
    unknown = [s for s in source_ids if s not in known]
    if unknown:
        raise ValueError(
            f"Unknown source(s): {', '.join(unknown)}"
        )
    return [
        s for s in Settings.AVAILABLE_SOURCES if s["id"] in source_ids
    ]


def build_adapter(source: dict[str, str]) -> Any:
    """Instantiate the adapter of one registry entry with its credentials."""
    cls = load_adapter_class(source["adapter"])
    credentials = {
        key: value
        for key, value in Settings.SOURCE_CREDENTIALS.get(
            source["id"], {}
        ).items()
        if value
    }
    logger.debug(
        "Building adapter %s (credentials: %s)",
        source["id"],
        sorted(credentials) or "none",
    )
    return cls(**credentials)


def build_adapters(source_ids: list[str] | None = None) -> list[Any]:
    """Instantiate adapters for the selected sources, in registry order."""
    return [build_adapter(src) for src in resolve_sources(source_ids)]
