"""
Query-string parameter store for grid state.

The grid protocol only relies on the ``ParameterStore`` contract: an ordered,
string-keyed multi-map. ``SearchParams`` is the in-process implementation used
by the codec, the dispatcher and the Dash callbacks, where the durable copy of
the store is the ``search`` property of a ``dcc.Location`` component.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Tuple
from urllib.parse import parse_qsl, urlencode

from typing_extensions import Protocol

logger = logging.getLogger(__name__)


class ParameterStore(Protocol):
    """Read/write contract over an ordered multi-valued string store."""

    def has(self, key: str) -> bool: ...

    def get(self, key: str) -> Optional[str]: ...

    def get_all(self, key: str) -> List[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def append(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def keys(self) -> List[str]: ...

    def copy(self) -> 'ParameterStore': ...


class SearchParams:
    """
    Ordered multi-map of query-string parameters.

    Mirrors the behaviour of a browser ``URLSearchParams`` object:
    ``set`` replaces the first occurrence in place and drops the rest,
    ``append`` always adds at the end, ``keys`` lists one entry per pair.
    """

    def __init__(self, pairs: Optional[Iterable[Tuple[str, str]]] = None):
        self._pairs: List[Tuple[str, str]] = [(str(k), str(v)) for k, v in (pairs or [])]

    @classmethod
    def from_query_string(cls, query: Optional[str]) -> 'SearchParams':
        """Parse ``?a=1&b=2`` (leading ``?`` optional) into a store."""
        if not query:
            return cls()
        if query.startswith('?'):
            query = query[1:]
        return cls(parse_qsl(query, keep_blank_values=True))

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> 'SearchParams':
        """Build a store from a mapping whose values are strings or lists of strings."""
        params = cls()
        for key, value in data.items():
            if isinstance(value, (list, tuple)):
                for item in value:
                    params.append(key, item)
            else:
                params.append(key, value)
        return params

    def to_query_string(self, prefix: bool = True) -> str:
        """Render the store; an empty store renders as an empty string."""
        if not self._pairs:
            return ''
        query = urlencode(self._pairs)
        return f"?{query}" if prefix else query

    def has(self, key: str) -> bool:
        return any(k == key for k, _ in self._pairs)

    def get(self, key: str) -> Optional[str]:
        for k, v in self._pairs:
            if k == key:
                return v
        return None

    def get_all(self, key: str) -> List[str]:
        return [v for k, v in self._pairs if k == key]

    def set(self, key: str, value) -> None:
        value = str(value)
        updated = []
        found = False
        for k, v in self._pairs:
            if k != key:
                updated.append((k, v))
            elif not found:
                updated.append((k, value))
                found = True
        if not found:
            updated.append((key, value))
        self._pairs = updated

    def append(self, key: str, value) -> None:
        self._pairs.append((key, str(value)))

    def delete(self, key: str) -> None:
        self._pairs = [(k, v) for k, v in self._pairs if k != key]

    def keys(self) -> List[str]:
        return [k for k, _ in self._pairs]

    def items(self) -> List[Tuple[str, str]]:
        return list(self._pairs)

    def to_dict(self) -> Dict[str, List[str]]:
        """Group values per key; two stores are equivalent when these are equal."""
        grouped: Dict[str, List[str]] = {}
        for k, v in self._pairs:
            grouped.setdefault(k, []).append(v)
        return grouped

    def copy(self) -> 'SearchParams':
        return SearchParams(self._pairs)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(list(self._pairs))

    def __len__(self) -> int:
        return len(self._pairs)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SearchParams):
            return NotImplemented
        return self._pairs == other._pairs

    def __repr__(self) -> str:
        return f"SearchParams({self._pairs!r})"

    def __str__(self) -> str:
        return self.to_query_string(prefix=False)


def ensure_search_params(params) -> SearchParams:
    """Accept a ``SearchParams``, a query string or ``None``."""
    if isinstance(params, SearchParams):
        return params
    if params is None or isinstance(params, str):
        return SearchParams.from_query_string(params)
    logger.debug(f"Converting {type(params).__name__} to SearchParams")
    return SearchParams.from_dict(dict(params))
