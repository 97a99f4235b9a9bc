"""
Entities parsed from an export file and the snapshot that caches them.
"""

import time
from typing import ClassVar, Dict, Any, Optional, Tuple
from dataclasses import dataclass, asdict, field, fields

from . import config


class _Entity:
    """Serialization shared by the entity kinds."""

    ENTITY_TYPE: ClassVar[str] = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted JSON object, tagged with the entity kind."""
        data = {config.ENTITY_TYPE_KEY: self.ENTITY_TYPE}
        for k, v in asdict(self).items():
            data[config.ENTITY_JSON_KEYS.get(k, k)] = v
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        """Create from dictionary, ignoring keys this kind does not know."""
        data = {config.ENTITY_ATTRIBUTE_NAMES.get(k, k): v for k, v in data.items()}
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass(frozen=True)
class Credential(_Entity):
    """A login: site, account and password."""
    ENTITY_TYPE: ClassVar[str] = "password"

    name: str
    password: str = ""
    url: Optional[str] = None
    username: Optional[str] = None
    note: Optional[str] = None
    folder: Optional[str] = None


@dataclass(frozen=True)
class PaymentCard(_Entity):
    """A credit or debit card."""
    ENTITY_TYPE: ClassVar[str] = "creditCard"

    name: str
    cardholder_name: Optional[str] = None
    card_number: Optional[str] = None
    expiry_date: Optional[str] = None
    cvv: Optional[str] = None
    note: Optional[str] = None
    folder: Optional[str] = None


@dataclass(frozen=True)
class SecureNote(_Entity):
    """A free-form note."""
    ENTITY_TYPE: ClassVar[str] = "secureNote"

    name: str
    note: str = ""
    folder: Optional[str] = None


def _now_millis() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Snapshot:
    """
    The result of one ingestion run.

    A snapshot is only valid for the export file whose content produced
    source_fingerprint. Entity order follows the rows of that file.
    """
    credentials: Tuple[Credential, ...] = ()
    cards: Tuple[PaymentCard, ...] = ()
    notes: Tuple[SecureNote, ...] = ()
    last_updated: int = field(default_factory=_now_millis)
    source_fingerprint: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted JSON document."""
        return {
            config.SNAPSHOT_CREDENTIALS_KEY: [e.to_dict() for e in self.credentials],
            config.SNAPSHOT_CARDS_KEY: [e.to_dict() for e in self.cards],
            config.SNAPSHOT_NOTES_KEY: [e.to_dict() for e in self.notes],
            config.SNAPSHOT_UPDATED_KEY: self.last_updated,
            config.SNAPSHOT_FINGERPRINT_KEY: self.source_fingerprint,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Snapshot':
        """
        Create from a persisted JSON document.

        Documents written by pre-encryption caches use different key names;
        those are accepted too.

        Raises:
            ValueError: If the document is not a snapshot
        """
        if not isinstance(data, dict):
            raise ValueError("Snapshot document must be a JSON object")
        data = {config.LEGACY_SNAPSHOT_KEYS.get(k, k): v for k, v in data.items()}

        try:
            return cls(
                credentials=tuple(Credential.from_dict(e) for e in data[config.SNAPSHOT_CREDENTIALS_KEY]),
                cards=tuple(PaymentCard.from_dict(e) for e in data[config.SNAPSHOT_CARDS_KEY]),
                notes=tuple(SecureNote.from_dict(e) for e in data[config.SNAPSHOT_NOTES_KEY]),
                last_updated=int(data[config.SNAPSHOT_UPDATED_KEY]),
                source_fingerprint=str(data.get(config.SNAPSHOT_FINGERPRINT_KEY) or ""),
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Malformed snapshot document: {e}") from e
