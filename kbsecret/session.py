"""
Session — Handle on one configured session's KBFS folder

A session is a directory inside the KBFS mount:

  teamless:  <mount>/private/<user1,user2,...>/kbsecret/<root>
  team:      <mount>/team/<team>/kbsecret/<root>

Encryption and sharing are done by KBFS; here a session is plain file I/O.
Creating a handle opens nothing. The directory is created on first write.
"""

import shutil
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from .config import ConfigManager, SessionConfig
from .errors import BackendError, RecordError
from .records import Record, RecordType


class Session:
    """A resolved session, valid for the current invocation."""

    def __init__(self, label: str, config: SessionConfig, mount: str):
        self.label = label
        self.config = config
        self.mount = Path(mount)

    def __repr__(self):
        return f"Session({self.label!r}, path={str(self.path)!r})"

    @property
    def team(self) -> Optional[str]:
        return self.config.team

    @property
    def users(self) -> List[str]:
        return list(self.config.users)

    @property
    def path(self) -> Path:
        if self.config.team:
            base = self.mount / "team" / self.config.team
        else:
            base = self.mount / "private" / ",".join(self.config.users)
        return base / "kbsecret" / self.config.root

    def _record_path(self, label: str) -> Path:
        if not label or "/" in label or label in (".", ".."):
            raise RecordError(f"invalid record label: `{label}`")
        return self.path / f"{label}.json"

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------

    def _documents(self) -> Iterator[Path]:
        try:
            if not self.path.is_dir():
                return iter(())
            return iter(sorted(self.path.glob("*.json")))
        except OSError as e:
            raise BackendError(f"could not read session `{self.label}`: {e}") from e

    def records(self, type: Optional[str] = None) -> List[Record]:
        """All records, optionally only those of one type name."""
        result = []
        for doc in self._documents():
            record = self._read(doc)
            if type is None or record.type == type:
                result.append(record)
        return result

    def record_labels(self, type: Optional[str] = None) -> List[str]:
        return [r.label for r in self.records(type)]

    def has_record(self, label: str) -> bool:
        return self._record_path(label).is_file()

    def get(self, label: str) -> Optional[Record]:
        """The record with this label, or None."""
        path = self._record_path(label)
        if not path.is_file():
            return None
        return self._read(path)

    def __getitem__(self, label: str) -> Optional[Record]:
        return self.get(label)

    def _read(self, path: Path) -> Record:
        try:
            text = path.read_text()
        except OSError as e:
            raise BackendError(f"could not read {path}: {e.strerror or e}") from e
        return Record.from_json(text)

    # -------------------------------------------------------------------------
    # Writing
    # -------------------------------------------------------------------------

    def save(self, record: Record):
        """Write a record document, creating the session folder if needed."""
        path = self._record_path(record.label)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(record.to_json())
        except OSError as e:
            raise BackendError(f"could not write {path}: {e.strerror or e}") from e

    def add_record(self, record_type: RecordType, label: str, values: Sequence[str],
                   overwrite: bool = False) -> Record:
        """
        Create and store a new record.

        Raises:
            RecordError: label already taken (without overwrite) or bad field count
        """
        if not overwrite and self.has_record(label):
            raise RecordError(f"refusing to overwrite existing record `{label}` without --force")
        record = Record.build(record_type, label, values)
        self.save(record)
        return record

    def import_record(self, record: Record, overwrite: bool = False) -> Record:
        """Store a record that came from another session."""
        if not overwrite and self.has_record(record.label):
            raise RecordError(f"refusing to overwrite existing record `{record.label}` without --force")
        copy = Record(label=record.label, type=record.type,
                      data=dict(record.data), timestamp=record.timestamp)
        self.save(copy)
        return copy

    def delete_record(self, label: str) -> bool:
        """Remove a record. Returns False if it did not exist."""
        path = self._record_path(label)
        if not path.is_file():
            return False
        try:
            path.unlink()
        except OSError as e:
            raise BackendError(f"could not delete {path}: {e.strerror or e}") from e
        return True

    def unlink(self):
        """Delete the session's folder and every record in it."""
        if not self.path.exists():
            return
        try:
            shutil.rmtree(self.path)
        except OSError as e:
            raise BackendError(f"could not delete {self.path}: {e.strerror or e}") from e


def resolve_session(config_manager: ConfigManager, label) -> Session:
    """
    Resolve a session label to a handle.

    Raises:
        SessionUnknownError: label is not configured (nothing is touched)
    """
    config = config_manager.session(label)
    return Session(label, config, config_manager.load().mount)
