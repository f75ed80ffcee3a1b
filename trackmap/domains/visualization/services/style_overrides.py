"""
Style override tables for per-entity appearance.

Tables map a selector (query name or label value) to an override value. They
are built once per pipeline run from the current options and handed to the
projector as a plain value.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Iterable, Optional, Tuple, Type, TypeVar, Union

from trackmap.shared.options import TrackMapOptions

logger = logging.getLogger(__name__)

V = TypeVar("V")


@dataclass(frozen=True)
class StyleOverrideTable(Generic[V]):
    """Exact-match selector -> value lookup."""

    entries: Dict[str, V] = field(default_factory=dict)

    @classmethod
    def from_entries(
        cls,
        entries: Optional[Iterable[Any]],
        value_attr: str,
        value_type: Union[Type, Tuple[Type, ...]] = str
    ) -> 'StyleOverrideTable':
        """
        Build a table from option entries.

        Entries may be option models or plain dicts with a ``label`` selector
        and a value under ``value_attr``. Blank selectors and values of the
        wrong type are skipped. When a selector repeats, the last entry wins.
        """
        table: Dict[str, Any] = {}
        for entry in entries or []:
            selector = _read(entry, "label")
            value = _read(entry, value_attr)

            if not isinstance(selector, str) or not selector.strip():
                logger.debug(f"Skipping override with invalid selector: {entry!r}")
                continue
            if (
                value is None
                or isinstance(value, bool)
                or not isinstance(value, value_type)
                or (isinstance(value, str) and not value.strip())
            ):
                logger.debug(f"Skipping override for '{selector}' with invalid {value_attr}: {value!r}")
                continue
            if selector in table:
                logger.debug(f"Duplicate override for '{selector}'; last entry wins")

            table[selector] = value
        return cls(entries=table)

    def get(self, selector: Optional[str]) -> Optional[V]:
        if selector is None:
            return None
        return self.entries.get(selector)

    def resolve(self, selectors: Iterable[Optional[str]], default: V) -> V:
        """Value of the first matching selector, else the default."""
        for selector in selectors:
            value = self.get(selector)
            if value is not None:
                return value
        return default

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class StyleOverrides:
    """All override tables for one pipeline run."""

    marker_color: StyleOverrideTable = field(default_factory=StyleOverrideTable)
    marker_size: StyleOverrideTable = field(default_factory=StyleOverrideTable)
    marker_html: StyleOverrideTable = field(default_factory=StyleOverrideTable)
    ant_color: StyleOverrideTable = field(default_factory=StyleOverrideTable)

    @classmethod
    def from_options(cls, options: TrackMapOptions) -> 'StyleOverrides':
        return cls(
            marker_color=StyleOverrideTable.from_entries(options.marker.color_overrides_by_query, "color"),
            marker_size=StyleOverrideTable.from_entries(options.marker.size_overrides_by_query, "size", (int, float)),
            marker_html=StyleOverrideTable.from_entries(options.marker.html_overrides_by_label, "html"),
            ant_color=StyleOverrideTable.from_entries(options.ant.color_overrides_by_query, "color"),
        )


def _read(entry: Any, attr: str) -> Any:
    if isinstance(entry, dict):
        return entry.get(attr)
    return getattr(entry, attr, None)
