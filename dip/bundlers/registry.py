"""
Bundler registry — the ordered list of bundlers a run drives.

Registration order is execution order: later bundlers may depend on
the side effects of earlier ones, so the registry never reorders.
"""

from __future__ import annotations

import logging

from dip.bundlers.base import BundlerFactory

logger = logging.getLogger(__name__)


class BundlerRegistry:
    """Ordered registry of bundler factories, keyed by bundler key."""

    def __init__(self, factories: list[BundlerFactory] | None = None):
        self._factories: dict[str, BundlerFactory] = {}
        for factory in factories or []:
            self.register(factory)

    def register(self, factory: BundlerFactory) -> None:
        """Register a bundler factory.

        Re-registering a key replaces the factory but keeps its
        original position.

        Args:
            factory: A Bundler subclass, or any callable taking a
                BundleConfig with a ``key`` attribute.
        """
        key = factory.key  # type: ignore[attr-defined]
        if key in self._factories:
            logger.warning("Overwriting existing bundler: %s", key)
        self._factories[key] = factory
        logger.debug("Registered bundler: %s", key)

    def unregister(self, key: str) -> None:
        """Remove a bundler from the registry."""
        self._factories.pop(key, None)

    def get(self, key: str) -> BundlerFactory | None:
        """Look up a bundler factory by key."""
        return self._factories.get(key)

    def list_bundlers(self) -> list[str]:
        """Registered bundler keys, in registration order."""
        return list(self._factories.keys())

    def factories(self) -> list[BundlerFactory]:
        """Registered factories, in registration order."""
        return list(self._factories.values())

    def __len__(self) -> int:
        return len(self._factories)

    def __contains__(self, key: object) -> bool:
        return key in self._factories
