from __future__ import annotations

from typing import Iterable, Mapping, TypeVar, Union

T = TypeVar("T")


def _key(value) -> str:
    return str(value or "").strip().upper()


def compute_absent(registered: Union[Mapping[str, T], Iterable[T]], present_keys: Iterable[str]) -> list[T]:
    """Registered entries with no matching present key, in registration order.

    ``registered`` is either a mapping of reg no -> entry, or an iterable of
    entries exposing ``reg_no``. Keys are compared case-insensitively; an entry
    without a usable key is reported absent.
    """
    present = {k for k in (_key(p) for p in present_keys) if k}

    if isinstance(registered, Mapping):
        pairs = registered.items()
    else:
        pairs = ((getattr(entry, "reg_no", None), entry) for entry in registered)

    return [entry for key, entry in pairs if not _key(key) or _key(key) not in present]
