"""Provider registry for lookup of bundled archive providers by slug.

Providers register themselves on import with the ``@register`` decorator.
The registry is a module-level mapping from ``slug`` to
:class:`~archive_aggregator.providers.base.ArchiveProvider` subclass.

Example — registering a provider::

    from archive_aggregator.providers.base import ArchiveProvider
    from archive_aggregator.providers.registry import register

    @register
    class MyArchiveProvider(ArchiveProvider):
        name = "My Archive"
        slug = "my-archive"
        ...

Example — looking one up::

    from archive_aggregator.providers.registry import get_provider, list_providers

    cls = get_provider("wayback")
    provider = cls({"limit": 100})

    list_providers()
    # [{"slug": "archive-today", "name": "Archive.today", ...}, ...]
"""

from __future__ import annotations

import importlib
import logging
import pkgutil
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from archive_aggregator.providers.base import ArchiveProvider

logger = logging.getLogger(__name__)

_REGISTRY: dict[str, type[ArchiveProvider]] = {}


def register(cls: type[ArchiveProvider]) -> type[ArchiveProvider]:
    """Decorator that registers an ``ArchiveProvider`` subclass under its ``slug``.

    Re-registering a slug overwrites the previous class and logs a warning.

    Raises:
        ValueError: If ``cls`` has no ``slug``.
    """
    slug = getattr(cls, "slug", None)
    if not slug:
        raise ValueError(f"{cls.__qualname__} must define a slug to be registered")
    if slug in _REGISTRY:
        logger.warning(
            "Provider '%s' is already registered (was %s). Overwriting with %s.",
            slug,
            _REGISTRY[slug].__qualname__,
            cls.__qualname__,
        )
    _REGISTRY[slug] = cls
    logger.debug("Registered archive provider: slug=%s class=%s", slug, cls.__qualname__)
    return cls


def get_provider(slug: str) -> type[ArchiveProvider]:
    """Return the provider class registered under *slug*.

    Raises:
        KeyError: If nothing is registered under *slug*.
    """
    autodiscover()
    try:
        return _REGISTRY[slug]
    except KeyError:
        raise KeyError(
            f"No archive provider registered for slug '{slug}'. "
            f"Registered providers: {sorted(_REGISTRY)}."
        ) from None


def list_providers() -> list[dict[str, Any]]:
    """Return ``slug``, ``name`` and ``provider_class`` for every registered provider, sorted by slug."""
    autodiscover()
    return [
        {
            "slug": slug,
            "name": cls.name,
            "provider_class": f"{cls.__module__}.{cls.__qualname__}",
        }
        for slug, cls in sorted(_REGISTRY.items())
    ]


def autodiscover() -> None:
    """Import every ``provider`` module below this package so ``@register`` runs.

    Idempotent. A provider module that fails to import is logged and skipped.
    """
    import archive_aggregator.providers as providers_pkg  # noqa: PLC0415

    for _finder, module_name, _is_pkg in pkgutil.walk_packages(
        path=providers_pkg.__path__, prefix=providers_pkg.__name__ + "."
    ):
        if module_name.endswith(".provider"):
            try:
                importlib.import_module(module_name)
            except Exception as exc:  # noqa: BLE001
                logger.error(
                    "Failed to import archive provider module '%s': %s",
                    module_name,
                    exc,
                    exc_info=True,
                )
