"""
Field extraction service for columnar frame input.

Provides business logic for:
- Probing frames for named fields under accepted aliases
- Normalizing field values (numpy scalars, NaN) without reordering them
- Zipping known columns into per-row sample records

Lookups never raise; a missing field is reported as absent so that one
incomplete frame does not abort processing of the others.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from trackmap.domains.tracking.entities.frame import Field, Frame
from trackmap.domains.tracking.entities.track import SampleRow

logger = logging.getLogger(__name__)

TRACK = "track"
LATITUDE = "latitude"
LONGITUDE = "longitude"
TIMESTAMP = "timestamp"
INTENSITY = "intensity"
POPUP = "popup"
TOOLTIP = "tooltip"

FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    TRACK: ("track", "label"),
    LATITUDE: ("latitude", "lat"),
    LONGITUDE: ("longitude", "lon", "lng", "long"),
    TIMESTAMP: ("timestamp", "time", "ts"),
    INTENSITY: ("intensity", "weight", "value"),
    POPUP: ("popup",),
    TOOLTIP: ("tooltip",),
}

# Fields whose absence is worth noting; the rest are optional decorations
EXPECTED_FIELDS = (LATITUDE, LONGITUDE, TIMESTAMP)


@dataclass(frozen=True)
class FieldLookup:
    """Result of probing a frame for one logical field."""

    name: str
    values: List[Any] = field(default_factory=list)
    source: Optional[Field] = None
    absent: bool = False

    def value_at(self, index: int) -> Any:
        """Positional value, None past the end or when absent."""
        if self.absent or index >= len(self.values):
            return None
        return self.values[index]

    @classmethod
    def missing(cls, name: str) -> 'FieldLookup':
        return cls(name=name, absent=True)


class FieldExtractor:
    """Service pulling typed, named columns out of frames."""

    def __init__(self, aliases: Optional[Dict[str, Sequence[str]]] = None):
        self.aliases: Dict[str, Tuple[str, ...]] = {
            name: tuple(a.lower() for a in names)
            for name, names in (aliases or FIELD_ALIASES).items()
        }
        self.extractor_stats = {
            "frames_processed": 0,
            "rows_extracted": 0,
            "missing_fields": 0
        }
        logger.info("FieldExtractor initialized")

    def find_field(self, frame: Frame, name: str) -> Optional[Field]:
        """Return the first field matching the logical name or one of its aliases."""
        accepted = self.aliases.get(name, (name.lower(),))
        for alias in accepted:
            for candidate in getattr(frame, "fields", None) or []:
                candidate_name = getattr(candidate, "name", None)
                if isinstance(candidate_name, str) and candidate_name.lower() == alias:
                    return candidate
        return None

    def extract(self, frame: Frame, name: str) -> FieldLookup:
        """
        Get a field's values in original order with nulls preserved.

        Args:
            frame: Frame to probe
            name: Logical field name (see FIELD_ALIASES)

        Returns:
            FieldLookup with the values, or an absent lookup
        """
        source = self.find_field(frame, name)
        if source is None:
            return FieldLookup.missing(name)

        values = _normalize_values(source.values)
        if values is None:
            logger.debug(f"Field '{source.name}' has non-sequence values; treating as absent")
            return FieldLookup.missing(name)

        return FieldLookup(name=name, values=values, source=source)

    def has_field(self, frame: Frame, name: str) -> bool:
        return not self.extract(frame, name).absent

    def frame_labels(self, frame: Frame) -> Dict[str, str]:
        """Frame labels merged with the labels carried by its latitude field."""
        labels: Dict[str, str] = dict(getattr(frame, "labels", None) or {})
        latitude = self.find_field(frame, LATITUDE)
        if latitude is not None and latitude.labels:
            labels.update(latitude.labels)
        return labels

    def rows(self, frame: Frame) -> List[SampleRow]:
        """
        Zip the known columns of a frame into row records.

        The row count is the longest present column; shorter columns are
        padded with None so every column stays aligned by index.
        """
        lookups = {name: self.extract(frame, name) for name in self.aliases}
        for name in EXPECTED_FIELDS:
            if lookups[name].absent:
                self.extractor_stats["missing_fields"] += 1
                logger.debug(f"Frame '{_frame_title(frame)}' has no '{name}' field")

        row_count = max((len(lookup.values) for lookup in lookups.values()), default=0)
        labels = self.frame_labels(frame)

        rows = [
            SampleRow(
                index=idx,
                track=lookups[TRACK].value_at(idx),
                latitude=lookups[LATITUDE].value_at(idx),
                longitude=lookups[LONGITUDE].value_at(idx),
                timestamp=lookups[TIMESTAMP].value_at(idx),
                intensity=lookups[INTENSITY].value_at(idx),
                popup=_as_text(lookups[POPUP].value_at(idx)),
                tooltip=_as_text(lookups[TOOLTIP].value_at(idx)),
                labels=labels,
            )
            for idx in range(row_count)
        ]

        self.extractor_stats["frames_processed"] += 1
        self.extractor_stats["rows_extracted"] += len(rows)
        return rows


def _normalize_values(values: Any) -> Optional[List[Any]]:
    if isinstance(values, np.ndarray):
        return [_normalize_scalar(v) for v in values.tolist()]
    if isinstance(values, (list, tuple)):
        return [_normalize_scalar(v) for v in values]
    return None


def _normalize_scalar(value: Any) -> Any:
    if isinstance(value, np.generic):
        return value.item()
    return value


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _frame_title(frame: Frame) -> str:
    return getattr(frame, "ref_id", None) or getattr(frame, "name", None) or "<unnamed>"
