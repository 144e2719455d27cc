"""The document record stored and searched by the engine."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Document:
    """A document: an identifier, named text fields and an approximate token count."""

    id: int = 0
    fields: dict[str, str] = field(default_factory=dict)
    term_count: int = 0

    def get_field(self, field_name: str) -> str:
        """Return the value of a field, or an empty string if it is absent."""
        return self.fields.get(field_name, "")

    def get_all_text(self) -> str:
        """Return the values of all fields joined by single spaces."""
        return " ".join(self.fields.values())