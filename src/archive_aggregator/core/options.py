"""Layered option resolution.

Three layers are merged key by key, the later layer winning:

1. process-wide defaults (from :class:`~archive_aggregator.config.settings.Settings`)
2. per-archive or per-provider instance options
3. per-call options

The merge is shallow and pure. Invalid numeric values never raise; they
are replaced by the default for that field.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Union

from archive_aggregator.core.models import RequestOptions

logger = logging.getLogger(__name__)

OptionsLike = Union[RequestOptions, Mapping[str, Any], None]

# field -> predicate the value must satisfy after coercion
_POSITIVE_INT_FIELDS = ("concurrency", "batch_size")
_NON_NEGATIVE_INT_FIELDS = ("retries",)
_NON_NEGATIVE_FLOAT_FIELDS = ("timeout",)
_POSITIVE_FLOAT_FIELDS = ("ttl",)


def _as_dict(options: OptionsLike) -> dict[str, Any]:
    if options is None:
        return {}
    if isinstance(options, RequestOptions):
        return options.model_dump(exclude_unset=True)
    return dict(options)


def _coerce_number(value: Any, kind: type) -> Any:
    if isinstance(value, bool):
        return None
    try:
        return kind(value)
    except (TypeError, ValueError):
        return None


def _sanitize(merged: dict[str, Any], defaults: dict[str, Any]) -> dict[str, Any]:
    """Replace absent or out-of-range numeric fields with their defaults."""
    base = RequestOptions().model_dump()

    def fallback(name: str) -> Any:
        value = defaults.get(name)
        return value if value is not None else base[name]

    for name in _POSITIVE_INT_FIELDS:
        value = _coerce_number(merged.get(name), int)
        merged[name] = value if value is not None and value >= 1 else fallback(name)
    for name in _NON_NEGATIVE_INT_FIELDS:
        value = _coerce_number(merged.get(name), int)
        merged[name] = value if value is not None and value >= 0 else fallback(name)
    for name in _NON_NEGATIVE_FLOAT_FIELDS:
        value = _coerce_number(merged.get(name), float)
        merged[name] = value if value is not None and value >= 0 else fallback(name)
    for name in _POSITIVE_FLOAT_FIELDS:
        value = _coerce_number(merged.get(name), float)
        merged[name] = value if value is not None and value > 0 else fallback(name)

    limit = _coerce_number(merged.get("limit"), int)
    merged["limit"] = limit if limit is not None and limit > 0 else None

    cache = merged.get("cache")
    merged["cache"] = cache if isinstance(cache, bool) else bool(fallback("cache"))
    return merged


def merge_options(
    defaults: OptionsLike = None,
    instance_options: OptionsLike = None,
    call_options: OptionsLike = None,
) -> RequestOptions:
    """Merge three option layers into one :class:`RequestOptions`.

    Precedence is strictly ``call_options`` > ``instance_options`` >
    ``defaults``, applied key by key. A ``None`` value in a higher layer
    does not override a lower layer.

    Args:
        defaults: Process-wide defaults. ``None`` uses the built-in
            :class:`RequestOptions` defaults.
        instance_options: Options set when the archive or provider was
            created.
        call_options: Options passed to a single fetch call.

    Returns:
        A frozen, fully specified :class:`RequestOptions`.
    """
    default_layer = _as_dict(defaults)
    merged: dict[str, Any] = dict(default_layer)
    for layer in (instance_options, call_options):
        for key, value in _as_dict(layer).items():
            if value is not None:
                merged[key] = value

    return RequestOptions(**_sanitize(merged, default_layer))
