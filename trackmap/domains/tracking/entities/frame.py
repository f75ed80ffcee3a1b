"""
Frame entity for columnar time-series input.

A frame is one query result: an ordered set of equal-length named fields plus
optional labels. Field presence and naming are not guaranteed; consumers probe
fields through the FieldExtractor rather than indexing them directly.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from trackmap.core.exceptions import TrackMapDataError


@dataclass
class Field:
    """Single named column of a frame."""

    name: str
    values: Sequence[Any] = field(default_factory=list)
    labels: Dict[str, str] = field(default_factory=dict)
    type: Optional[str] = None

    def __len__(self) -> int:
        try:
            return len(self.values)
        except TypeError:
            return 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Field':
        """Build a field from its JSON representation."""
        if not isinstance(data, dict):
            raise TrackMapDataError(f"Field must be an object, got {type(data).__name__}")

        name = data.get("name")
        if not isinstance(name, str):
            raise TrackMapDataError("Field is missing a string 'name'")

        values = data.get("values")
        if values is None:
            values = []
        if not isinstance(values, (list, tuple)):
            raise TrackMapDataError(f"Field '{name}' values must be an array")

        return cls(
            name=name,
            values=list(values),
            labels=_as_labels(data.get("labels")),
            type=data.get("type"),
        )


@dataclass
class Frame:
    """One input series."""

    fields: List[Field] = field(default_factory=list)
    name: Optional[str] = None
    ref_id: Optional[str] = None
    labels: Dict[str, str] = field(default_factory=dict)

    @property
    def length(self) -> int:
        """Number of rows, taken from the longest field."""
        return max((len(f) for f in self.fields), default=0)

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Frame':
        """
        Build a frame from a data-frame JSON object.

        Accepts ``{"name", "refId", "labels", "fields": [...]}`` and the
        ``{"schema": {...}, "data": {"values": [[...], ...]}}`` wire form.

        Raises:
            TrackMapDataError: If the payload cannot be read as a frame.
        """
        if not isinstance(data, dict):
            raise TrackMapDataError(f"Frame must be an object, got {type(data).__name__}")

        if "schema" in data:
            return cls._from_wire_format(data)

        raw_fields = data.get("fields", [])
        if not isinstance(raw_fields, list):
            raise TrackMapDataError("Frame 'fields' must be an array")

        return cls(
            fields=[Field.from_dict(f) for f in raw_fields],
            name=_as_text(data.get("name")),
            ref_id=_as_text(data.get("refId", data.get("ref_id"))),
            labels=_as_labels(data.get("labels")),
        )

    @classmethod
    def _from_wire_format(cls, data: Dict[str, Any]) -> 'Frame':
        schema = data.get("schema") or {}
        columns = (data.get("data") or {}).get("values", [])
        schema_fields = schema.get("fields", [])
        if not isinstance(schema_fields, list) or not isinstance(columns, list):
            raise TrackMapDataError("Frame schema fields and data values must be arrays")

        fields = []
        for idx, schema_field in enumerate(schema_fields):
            column = columns[idx] if idx < len(columns) else []
            fields.append(Field.from_dict({**schema_field, "values": column}))

        return cls(
            fields=fields,
            name=_as_text(schema.get("name")),
            ref_id=_as_text(schema.get("refId")),
            labels=_as_labels(schema.get("labels")),
        )


def frames_from_payload(payload: Any) -> List[Frame]:
    """Parse a list of frame objects, passing Frame instances through."""
    if payload is None:
        return []
    if not isinstance(payload, (list, tuple)):
        raise TrackMapDataError(f"Frames must be an array, got {type(payload).__name__}")
    return [f if isinstance(f, Frame) else Frame.from_dict(f) for f in payload]


def _as_text(raw: Any) -> Optional[str]:
    if raw is None or raw == "":
        return None
    return str(raw)


def _as_labels(raw: Any) -> Dict[str, str]:
    if not isinstance(raw, dict):
        return {}
    return {str(k): str(v) for k, v in raw.items() if v is not None}
