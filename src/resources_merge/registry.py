"""Registry for merge strategy factories with lazy loading.

Strategies are admitted by registration: a name maps to a factory that is
only imported when the strategy is first requested. A factory is called as
``factory(options, build_root=...)`` and must return an object with a
``merge(context)`` method.

Usage:
    from resources_merge.registry import get_strategy, register_strategy

    register_strategy("xml", "my_build.xml_merge", "build_strategy")
    strategy = get_strategy("xml", {"root_tag": "resources"}, build_root=root)
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from resources_merge.exceptions import ConfigurationError
from resources_merge.strategy import MergeStrategy

logger = logging.getLogger(__name__)

StrategyFactory = Callable[..., MergeStrategy]

# Module cache for lazy loading
_module_cache: dict[str, Any] = {}

# (module_name, factory attribute)
_STRATEGY_LOADERS: dict[str, tuple[str, str]] = {
    "regex": ("resources_merge.strategy", "RegexMergeStrategy.from_options"),
}

_FACTORIES: dict[str, StrategyFactory] = {}


def _lazy_import(module_name: str) -> Any:
    if module_name not in _module_cache:
        _module_cache[module_name] = importlib.import_module(module_name)
    return _module_cache[module_name]


def _resolve_attr(module: Any, dotted: str) -> Any:
    obj = module
    for part in dotted.split("."):
        obj = getattr(obj, part)
    return obj


def load_factory(name: str) -> StrategyFactory:
    """Return the factory registered under ``name``.

    Raises:
        ConfigurationError: If the name is unknown or its module cannot be loaded
    """
    if name in _FACTORIES:
        return _FACTORIES[name]
    if name not in _STRATEGY_LOADERS:
        available = ", ".join(list_strategies()) or "none"
        raise ConfigurationError(
            f"Unknown strategy '{name}'. Available: {available}",
            context={"strategy": name},
        )
    module_name, attr = _STRATEGY_LOADERS[name]
    return _import_factory(module_name, attr)


def load_implementation(reference: str) -> StrategyFactory:
    """Import a ``package.module:factory`` reference."""
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigurationError(
            f"Invalid implementation '{reference}', expected 'package.module:factory'",
            context={"implementation": reference},
        )
    return _import_factory(module_name, attr)


def _import_factory(module_name: str, attr: str) -> StrategyFactory:
    try:
        module = _lazy_import(module_name)
        factory = _resolve_attr(module, attr)
    except (ImportError, AttributeError) as exc:
        raise ConfigurationError(
            f"Cannot load strategy factory '{module_name}:{attr}': {exc}",
            context={"module": module_name, "factory": attr},
        ) from exc
    if not callable(factory):
        raise ConfigurationError(
            f"Strategy factory '{module_name}:{attr}' is not callable",
            context={"module": module_name, "factory": attr},
        )
    return factory


def build_strategy(
    factory: StrategyFactory, options: Mapping[str, Any], *, build_root: Path
) -> MergeStrategy:
    strategy = factory(dict(options), build_root=build_root)
    if not isinstance(strategy, MergeStrategy):
        raise ConfigurationError(
            f"Strategy factory {factory!r} returned {type(strategy).__name__}, "
            "which has no merge(context) method",
        )
    return strategy


def get_strategy(name: str, options: Mapping[str, Any], *, build_root: Path) -> MergeStrategy:
    """Build the strategy registered under ``name`` with ``options``."""
    return build_strategy(load_factory(name), options, build_root=build_root)


def list_strategies() -> list[str]:
    return sorted({*_STRATEGY_LOADERS, *_FACTORIES})


def is_strategy_available(name: str) -> bool:
    return name in _STRATEGY_LOADERS or name in _FACTORIES


def register_strategy(name: str, module_name: str, factory_name: str) -> None:
    """Register a lazily imported strategy factory.

    Args:
        name: Strategy name for lookups
        module_name: Importable module holding the factory
        factory_name: Attribute path of the factory within the module
    """
    if is_strategy_available(name):
        logger.warning("Replacing registered merge strategy '%s'", name)
    _FACTORIES.pop(name, None)
    _STRATEGY_LOADERS[name] = (module_name, factory_name)


def register_factory(name: str, factory: StrategyFactory) -> None:
    """Register an already imported strategy factory."""
    if is_strategy_available(name):
        logger.warning("Replacing registered merge strategy '%s'", name)
    _STRATEGY_LOADERS.pop(name, None)
    _FACTORIES[name] = factory


def unregister_strategy(name: str) -> None:
    _STRATEGY_LOADERS.pop(name, None)
    _FACTORIES.pop(name, None)


def clear_module_cache() -> None:
    """Clear the module cache (useful for testing)."""
    _module_cache.clear()


__all__ = [
    "StrategyFactory",
    "build_strategy",
    "clear_module_cache",
    "get_strategy",
    "is_strategy_available",
    "list_strategies",
    "load_factory",
    "load_implementation",
    "register_factory",
    "register_strategy",
    "unregister_strategy",
]
