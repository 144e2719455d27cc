"""Binary snapshots of documents and the inverted index."""

from __future__ import annotations

import struct
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from rtrvsearch.document import Document
from rtrvsearch.inverted_index import InvertedIndex

MAGIC = 0x53454152
VERSION = 1

_HEADER = struct.Struct("<IIQQ")
_U64 = struct.Struct("<Q")
_U32 = struct.Struct("<I")
_DOC_HEAD = struct.Struct("<QQQ")
_POSTING_HEAD = struct.Struct("<QIQ")

PathLike = Union[str, Path]


class SnapshotError(Exception):
    """A snapshot could not be written or read."""


@dataclass
class Snapshot:
    """The state restored from a snapshot file."""

    documents: dict[int, Document] = field(default_factory=dict)
    index: InvertedIndex = field(default_factory=InvertedIndex)
    next_doc_id: int = 1


def _pack_str(text: str) -> bytes:
    raw = text.encode("utf-8")
    return _U64.pack(len(raw)) + raw


def save_snapshot(
    filepath: PathLike,
    documents: Mapping[int, Document],
    index: InvertedIndex,
    next_doc_id: int,
) -> None:
    """Write documents, index and the next document id to a binary file."""
    entries = index.items()
    parts: list[bytes] = [
        _HEADER.pack(MAGIC, VERSION, len(documents), len(entries)),
        _U64.pack(next_doc_id),
    ]
    for doc_id, doc in documents.items():
        parts.append(_DOC_HEAD.pack(doc_id, doc.term_count, len(doc.fields)))
        for key, value in doc.fields.items():
            parts.append(_pack_str(key))
            parts.append(_pack_str(value))

    parts.append(_U64.pack(len(entries)))
    for term, posting_list in entries:
        parts.append(_pack_str(term))
        parts.append(_U64.pack(len(posting_list.postings)))
        for posting in posting_list.postings:
            parts.append(
                _POSTING_HEAD.pack(
                    posting.doc_id, posting.term_frequency, len(posting.positions)
                )
            )
            parts.append(struct.pack(f"<{len(posting.positions)}I", *posting.positions))

    try:
        with open(filepath, "wb") as handle:
            handle.write(b"".join(parts))
    except OSError as exc:
        raise SnapshotError(f"Cannot write snapshot {filepath}: {exc}") from exc


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._view = memoryview(data)
        self._offset = 0

    def unpack(self, layout: struct.Struct) -> tuple:
        end = self._offset + layout.size
        if end > len(self._view):
            raise SnapshotError("Snapshot is truncated")
        values = layout.unpack_from(self._view, self._offset)
        self._offset = end
        return values

    def u64(self) -> int:
        return self.unpack(_U64)[0]

    def raw(self, size: int) -> bytes:
        end = self._offset + size
        if end > len(self._view):
            raise SnapshotError("Snapshot is truncated")
        chunk = bytes(self._view[self._offset:end])
        self._offset = end
        return chunk

    def text(self) -> str:
        try:
            return self.raw(self.u64()).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SnapshotError("Snapshot holds invalid text") from exc


def load_snapshot(filepath: PathLike) -> Snapshot:
    """Read a snapshot file.

    The index is rebuilt from recorded positions, so each posting's term
    frequency becomes its number of positions and postings without positions
    are not restored.
    """
    try:
        with open(filepath, "rb") as handle:
            data = handle.read()
    except OSError as exc:
        raise SnapshotError(f"Cannot read snapshot {filepath}: {exc}") from exc

    reader = _Reader(data)
    magic, version, num_documents, _num_terms = reader.unpack(_HEADER)
    if magic != MAGIC or version != VERSION:
        raise SnapshotError("Invalid snapshot format")

    snapshot = Snapshot(next_doc_id=reader.u64())
    for _ in range(num_documents):
        doc_id, term_count, num_fields = reader.unpack(_DOC_HEAD)
        fields: dict[str, str] = {}
        for _ in range(num_fields):
            key = reader.text()
            fields[key] = reader.text()
        snapshot.documents[doc_id] = Document(
            doc_id & 0xFFFF_FFFF, fields, term_count
        )

    for _ in range(reader.u64()):
        term = reader.text()
        for _ in range(reader.u64()):
            doc_id, _frequency, pos_count = reader.unpack(_POSTING_HEAD)
            positions = reader.unpack(struct.Struct(f"<{pos_count}I"))
            for position in positions:
                snapshot.index.add_term(term, doc_id, position)
    return snapshot