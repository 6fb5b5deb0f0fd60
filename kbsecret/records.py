"""
Records — Record types and the record document format

A record is a JSON document stored as <session path>/<label>.json:

    {"label": "gmail", "type": "login", "timestamp": 1700000000,
     "data": {"username": "bob@gmail.com", "password": "..."}}

Record types are a fixed registry. Field order is significant: it is the
order fields are prompted for, stored in, and printed by dump-fields.
"""

import json
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .errors import RecordError, RecordTypeUnknownError


@dataclass(frozen=True)
class RecordType:
    """Descriptor of one record type."""
    name: str
    fields: Tuple[str, ...]
    sensitive: Tuple[str, ...] = ()
    internal: Dict[str, str] = field(default_factory=dict)

    @property
    def user_fields(self) -> Tuple[str, ...]:
        """Fields supplied by the user (internal fields excluded)."""
        return tuple(f for f in self.fields if f not in self.internal)

    def is_sensitive(self, field_name: str) -> bool:
        return field_name in self.sensitive


RECORD_TYPES: Dict[str, RecordType] = {
    t.name: t for t in (
        RecordType("environment", ("variable", "value"), sensitive=("value",)),
        RecordType("login", ("username", "password"), sensitive=("password",)),
        RecordType("snippet", ("code", "description")),
        RecordType(
            "todo",
            ("todo", "status", "start", "stop"),
            internal={"status": "suspended", "start": "", "stop": ""},
        ),
        RecordType("unstructured", ("text",)),
    )
}


def record_types() -> List[str]:
    """Names of all record types, sorted."""
    return sorted(RECORD_TYPES)


def abbreviations(words: Sequence[str]) -> Dict[str, str]:
    """
    Map every unambiguous prefix of each word to that word.

    Full words always map to themselves, even when one word is a prefix
    of another. Ambiguous prefixes are absent.
    """
    table: Dict[str, str] = {}
    seen: Dict[str, int] = {}
    for word in words:
        for i in range(1, len(word) + 1):
            prefix = word[:i]
            seen[prefix] = seen.get(prefix, 0) + 1
            table[prefix] = word
    for prefix, count in seen.items():
        if count > 1:
            del table[prefix]
    for word in words:
        table[word] = word
    return table


TYPE_ALIASES = abbreviations(record_types())


def resolve_type(name: Optional[str]) -> RecordType:
    """
    Resolve a record type name or unique prefix (e.g. "env", "l").

    Raises:
        RecordTypeUnknownError: no type matches, or the prefix is ambiguous
    """
    if not name:
        raise RecordTypeUnknownError(name)

    full = TYPE_ALIASES.get(name)
    if full is None:
        candidates = [t for t in record_types() if t.startswith(name)]
        if len(candidates) > 1:
            raise RecordTypeUnknownError(name, f"ambiguous: {', '.join(candidates)}")
        raise RecordTypeUnknownError(name)
    return RECORD_TYPES[full]


@dataclass
class Record:
    """One stored record."""
    label: str
    type: str
    data: Dict[str, str]
    timestamp: int = field(default_factory=lambda: int(time.time()))

    @property
    def record_type(self) -> RecordType:
        return RECORD_TYPES[self.type]

    def fields(self) -> List[Tuple[str, str]]:
        """(field, value) pairs in the type's field order."""
        return [(f, self.data.get(f, "")) for f in self.record_type.fields]

    def to_dict(self) -> Dict:
        return {
            "label": self.label,
            "type": self.type,
            "timestamp": self.timestamp,
            "data": {f: v for f, v in self.fields()},
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_dict(cls, data: Dict) -> 'Record':
        try:
            record = cls(
                label=data["label"],
                type=data["type"],
                data=dict(data.get("data") or {}),
                timestamp=int(data.get("timestamp", 0)),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise RecordError(f"malformed record document: {e}") from e
        if record.type not in RECORD_TYPES:
            raise RecordTypeUnknownError(record.type)
        return record

    @classmethod
    def from_json(cls, text: str) -> 'Record':
        try:
            return cls.from_dict(json.loads(text))
        except ValueError as e:
            raise RecordError(f"malformed record document: {e}") from e

    @classmethod
    def build(cls, record_type: RecordType, label: str, values: Sequence[str]) -> 'Record':
        """
        Create a record from user-supplied values, in user_fields order.

        Raises:
            RecordError: wrong number of values for the type
        """
        wanted = record_type.user_fields
        if len(values) != len(wanted):
            raise RecordError(
                f"{record_type.name} records take {len(wanted)} field(s) "
                f"({', '.join(wanted)}), got {len(values)}"
            )
        data = dict(record_type.internal)
        data.update(zip(wanted, values))
        return cls(label=label, type=record_type.name, data=data)
