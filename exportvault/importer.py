"""
Export file ingestion.

Reads a password manager CSV export and turns each row into a Credential,
PaymentCard or SecureNote. Exports mix item kinds in one file and the column
set varies between rows, so every lookup goes through the synonym tables in
config rather than fixed columns.
"""

import io
import csv
import hashlib
import logging
from enum import Enum
from typing import List, Dict, Optional, NamedTuple

from .models import Credential, PaymentCard, SecureNote
from .errors import SourceFormatError, SourceNotFound
from . import config

logger = logging.getLogger(__name__)

FINGERPRINT_CHUNK_SIZE = 64 * 1024


class ItemKind(Enum):
    CREDENTIAL = "credential"
    CARD = "card"
    NOTE = "note"


class ParsedExport(NamedTuple):
    """Entities read from one export file, in row order."""
    credentials: List[Credential]
    cards: List[PaymentCard]
    notes: List[SecureNote]


Row = Dict[str, str]


def _lookup(row: Row, column: str) -> Optional[str]:
    """Value of a column, or None when the column is missing or empty."""
    value = row.get(column.lower())
    return value or None


def _first(row: Row, field: str) -> Optional[str]:
    """First non-empty value among the accepted spellings of a logical field."""
    for column in config.FIELD_SYNONYMS[field]:
        value = _lookup(row, column)
        if value is not None:
            return value
    return None


def _has_any(row: Row, columns: List[str]) -> bool:
    return any(_lookup(row, c) is not None for c in columns)


def infer_item_kind(row: Row) -> ItemKind:
    """
    Infer the kind of a row from the fields it carries.

    Card fields win over credential fields, which win over note fields, so
    a card that also has a password column is still a card.
    """
    if _has_any(row, config.CARD_INDICATOR_FIELDS):
        return ItemKind.CARD
    if _has_any(row, config.CREDENTIAL_INDICATOR_FIELDS):
        return ItemKind.CREDENTIAL
    if (_lookup(row, config.NOTE_INDICATOR_FIELD) is not None
            and not _has_any(row, config.NOTE_EXCLUDING_FIELDS)):
        return ItemKind.NOTE
    return ItemKind.CREDENTIAL


def classify_row(row: Row) -> ItemKind:
    """Kind of a row: its explicit type column if recognized, else inferred."""
    for column in config.TYPE_FIELD_NAMES:
        item_type = _lookup(row, column)
        if item_type is not None:
            kind = config.ITEM_TYPE_MAPPINGS.get(item_type.lower())
            if kind is not None:
                return ItemKind(kind)
            logger.debug(f"Unrecognized item type {item_type!r}, inferring from fields")
            break
    return infer_item_kind(row)


def file_fingerprint(filepath: str) -> str:
    """
    Digest of the full byte content of a file, used to detect changes.

    Raises:
        SourceNotFound: If the file does not exist
        SourceFormatError: If the file cannot be read
    """
    digest = hashlib.sha256()
    try:
        with open(filepath, 'rb') as f:
            for chunk in iter(lambda: f.read(FINGERPRINT_CHUNK_SIZE), b''):
                digest.update(chunk)
    except FileNotFoundError as e:
        raise SourceNotFound(filepath) from e
    except OSError as e:
        raise SourceFormatError(str(e)) from e
    return digest.hexdigest()


def _read_text(filepath: str) -> str:
    try:
        with open(filepath, 'r', encoding=config.SOURCE_ENCODING, newline='') as f:
            return f.read()
    except FileNotFoundError as e:
        raise SourceNotFound(filepath) from e
    except (OSError, UnicodeDecodeError) as e:
        raise SourceFormatError(str(e)) from e


class ExportImporter:
    """Parses export files into entities."""

    def parse_source(self, filepath: str) -> ParsedExport:
        """
        Parse an export file.

        Args:
            filepath: Path to the CSV export

        Returns:
            Credentials, payment cards and secure notes in file order

        Raises:
            SourceFormatError: If the file cannot be opened, decoded or read as CSV
            SourceNotFound: If the file does not exist
        """
        result = ParsedExport([], [], [])

        for row in self.read_rows(filepath):
            kind = classify_row(row)
            if kind is ItemKind.CARD:
                result.cards.append(self._parse_card(row))
            elif kind is ItemKind.NOTE:
                result.notes.append(self._parse_note(row))
            else:
                result.credentials.append(self._parse_credential(row))

        logger.info(
            f"Parsed {filepath}: {len(result.credentials)} credentials, "
            f"{len(result.cards)} cards, {len(result.notes)} notes"
        )
        return result

    def read_rows(self, filepath: str) -> List[Row]:
        """
        Read an export file into rows keyed by lowercased, trimmed column name.

        Ragged rows are kept: missing columns are absent, surplus values are
        dropped. Rows without any value are skipped. When a column name
        repeats, the first non-empty value wins.
        """
        content = _read_text(filepath)

        delimiter = self._detect_delimiter(content[:config.CSV_SNIFF_SAMPLE_SIZE])
        reader = csv.reader(io.StringIO(content, newline=''), delimiter=delimiter)

        rows = []
        try:
            columns = None
            for record in reader:
                if columns is None:
                    if record:
                        columns = [column.strip().lower() for column in record]
                    continue
                row = self._normalize(columns, record)
                if row:
                    rows.append(row)
        except csv.Error as e:
            raise SourceFormatError(f"line {reader.line_num}: {e}") from e
        return rows

    def _detect_delimiter(self, sample: str) -> str:
        sniffer = csv.Sniffer()
        try:
            return sniffer.sniff(sample, delimiters=config.CSV_DELIMITERS).delimiter
        except csv.Error:
            return config.CSV_DEFAULT_DELIMITER

    def _normalize(self, columns: List[str], values: List[str]) -> Row:
        row = {}
        # zip() drops surplus values of long rows
        for key, value in zip(columns, values):
            value = value.strip()
            if key and value and key not in row:
                row[key] = value
        return row

    def _parse_credential(self, row: Row) -> Credential:
        return Credential(
            name=_first(row, 'name') or "",
            url=_first(row, 'url'),
            username=_first(row, 'username'),
            password=_first(row, 'password') or "",
            note=_first(row, 'note'),
            folder=_first(row, 'folder'),
        )

    def _parse_card(self, row: Row) -> PaymentCard:
        return PaymentCard(
            name=_first(row, 'name') or "",
            cardholder_name=_first(row, 'cardholder_name'),
            card_number=_first(row, 'card_number'),
            expiry_date=_first(row, 'expiry_date'),
            cvv=_first(row, 'cvv'),
            note=_first(row, 'note'),
            folder=_first(row, 'folder'),
        )

    def _parse_note(self, row: Row) -> SecureNote:
        return SecureNote(
            name=_first(row, 'name') or "",
            note=_first(row, 'note') or "",
            folder=_first(row, 'folder'),
        )


def parse_source(filepath: str) -> ParsedExport:
    """Parse an export file with a default ExportImporter."""
    return ExportImporter().parse_source(filepath)
