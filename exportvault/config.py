"""
Configuration constants for the ExportVault cache.
"""

import os

# Application Metadata
APP_VERSION = "1.0.0"  # Use: Current version of the application. Type: str. Range: Semantic versioning string (e.g., "1.0.0")
APP_NAME = "ExportVault"  # Use: Full name of the application. Type: str. Range: Any valid string.
APP_DESCRIPTION = "Encrypted, self-invalidating cache of password manager CSV exports"  # Use: One-line description shown by the command-line help. Type: str. Range: Any valid string.

# Security Settings
KEY_SIZE = 32  # Use: Size of the encryption key in bytes. Corresponds to AES-256. Type: int. Range: 32 bytes (AES-256) is required by the cache format.
NONCE_SIZE = 16  # Use: Size of the random nonce (IV) in bytes generated for every AES-GCM encryption. Type: int. Range: 12 to 16 bytes; 16 is what existing caches use.
TAG_SIZE = 16  # Use: Size of the authentication tag in bytes for AES-GCM. Type: int. Range: 16 bytes (128 bits) is the recommended size for GCM.
KEY_DERIVATION_ITERATIONS = 100000  # Use: Number of iterations for PBKDF2-HMAC-SHA256 used to derive the machine key. Type: int. Range: At least 100,000. Changing it invalidates every existing cache.
KEY_DERIVATION_SALT = b"exportvault-cache-v1"  # Use: Fixed application salt for machine key derivation. Type: bytes. Range: Any constant byte string. Changing it invalidates every existing cache.
IDENTITY_SEPARATOR = "|"  # Use: Separator placed between machine identity attributes before key derivation. Type: str. Range: Any string that does not appear in hostnames or user names.

# Encrypted token field names (persisted cache file format)
TOKEN_IV_FIELD = "iv"  # Use: JSON key holding the hex-encoded nonce. Type: str. Range: "iv"
TOKEN_TAG_FIELD = "authTag"  # Use: JSON key holding the hex-encoded authentication tag. Type: str. Range: "authTag"
TOKEN_CIPHERTEXT_FIELD = "encrypted"  # Use: JSON key holding the hex-encoded ciphertext. Type: str. Range: "encrypted"

# File and Directory Names
CONFIG_DIR_NAME = ".exportvault"  # Use: Name of the hidden directory within the user's home directory where the cache file is kept. Type: str. Range: Any valid directory name.
DEFAULT_CACHE_FILE = "cache.json"  # Use: Default filename for the encrypted cache. Type: str. Range: Any valid filename.
TEMP_FILE_SUFFIX = ".tmp"  # Use: Suffix of the temporary file written before atomically replacing the cache. Type: str. Range: Any valid filename suffix.
SOURCE_PATH_ENV_VAR = "EXPORTVAULT_SOURCE"  # Use: Environment variable consulted for the export file path when none is given explicitly. Type: str. Range: Any valid environment variable name.

# Source File Discovery
DEFAULT_SOURCE_FILE = "nordpass-export.csv"  # Use: File name looked for in the default source locations. Type: str. Range: Any valid filename.
DEFAULT_SOURCE_DIRS = ["Downloads", "Desktop", "Documents"]  # Use: Directories under the home directory checked, in order, for DEFAULT_SOURCE_FILE. Type: list[str]. Range: Relative directory names.
SOURCE_DISCOVERY_DIR = ".nordpass"  # Use: Hidden directory under the home directory scanned for the most recent export. Type: str. Range: Any valid directory name.
SOURCE_DISCOVERY_KEYWORD = "nordpass"  # Use: Substring a CSV file name must contain to be picked up by the discovery scan. Type: str. Range: Lowercase string.
SOURCE_FILE_EXTENSION = ".csv"  # Use: Extension a file must have to be picked up by the discovery scan. Type: str. Range: Lowercase extension including the dot.

# CSV Parsing Settings
CSV_SNIFF_SAMPLE_SIZE = 1024  # Use: Number of characters read to detect the delimiter. Type: int. Range: Positive integer.
CSV_DELIMITERS = ",;\t|"  # Use: Delimiters the sniffer is allowed to choose from. Type: str. Range: Any string of single characters.
CSV_DEFAULT_DELIMITER = ","  # Use: Delimiter used when sniffing fails. Type: str. Range: A single character.
SOURCE_ENCODING = "utf-8-sig"  # Use: Text encoding of the export file; the -sig variant strips a leading BOM. Type: str. Range: Any codec name known to Python.

# Item Classification
TYPE_FIELD_NAMES = ["type"]  # Use: Column names holding an explicit item type, checked in order. Type: list[str]. Range: Lowercase column names.
ITEM_TYPE_MAPPINGS = {  # Use: Maps a lowercased explicit item type to the entity kind it denotes. Type: dict[str, str]. Range: Values are "credential", "card" or "note".
    'password': 'credential',
    'login': 'credential',
    'creditcard': 'card',
    'credit_card': 'card',
    'card': 'card',
    'note': 'note',
    'securenote': 'note',
    'secure_note': 'note',
}
CARD_INDICATOR_FIELDS = [  # Use: Columns whose presence marks a row as a payment card. Takes precedence over credential indicators. Type: list[str]. Range: Column names.
    'cardNumber', 'card_number', 'expiryDate', 'expiry_date', 'cvv', 'cardholderName', 'cardholder_name',
]
CREDENTIAL_INDICATOR_FIELDS = ['password', 'username', 'url']  # Use: Columns whose presence marks a row as a credential. Type: list[str]. Range: Column names.
NOTE_INDICATOR_FIELD = 'note'  # Use: Column whose presence, without password and username, marks a row as a secure note. Type: str. Range: Column name.
NOTE_EXCLUDING_FIELDS = ['password', 'username']  # Use: Columns that must be absent for NOTE_INDICATOR_FIELD to mark a secure note. Type: list[str]. Range: Column names.

FIELD_SYNONYMS = {  # Use: Ordered column spellings per logical entity field; the first non-empty column wins. Type: dict[str, list[str]]. Range: Dictionary with string keys and lists of column names as values.
    'name': ['name', 'title'],
    'url': ['url', 'website'],
    'username': ['username', 'login'],
    'password': ['password'],
    'note': ['note', 'notes'],
    'folder': ['folder', 'category'],
    'cardholder_name': ['cardholderName', 'cardholder_name', 'cardholder'],
    'card_number': ['cardNumber', 'card_number', 'number'],
    'expiry_date': ['expiryDate', 'expiry_date', 'expiry'],
    'cvv': ['cvv', 'cvc', 'securityCode'],
}

# Snapshot document keys (inside the encrypted token)
SNAPSHOT_CREDENTIALS_KEY = "credentials"  # Use: JSON key for the credential list. Type: str. Range: "credentials"
SNAPSHOT_CARDS_KEY = "cards"  # Use: JSON key for the payment card list. Type: str. Range: "cards"
SNAPSHOT_NOTES_KEY = "notes"  # Use: JSON key for the secure note list. Type: str. Range: "notes"
SNAPSHOT_UPDATED_KEY = "lastUpdated"  # Use: JSON key for the build timestamp in Unix milliseconds. Type: str. Range: "lastUpdated"
SNAPSHOT_FINGERPRINT_KEY = "sourceFingerprint"  # Use: JSON key for the fingerprint of the export file the snapshot was built from. Type: str. Range: "sourceFingerprint"
LEGACY_SNAPSHOT_KEYS = {  # Use: Key names written by pre-encryption caches, mapped to the current key names. Type: dict[str, str]. Range: Dictionary of JSON keys.
    'passwords': SNAPSHOT_CREDENTIALS_KEY,
    'creditCards': SNAPSHOT_CARDS_KEY,
    'secureNotes': SNAPSHOT_NOTES_KEY,
    'exportFileHash': SNAPSHOT_FINGERPRINT_KEY,
}
ENTITY_TYPE_KEY = "type"  # Use: JSON key tagging each cached entity with its kind. Type: str. Range: "type"
ENTITY_JSON_KEYS = {  # Use: Entity attribute names mapped to their camelCase JSON keys; unlisted attributes keep their name. Type: dict[str, str]. Range: Dictionary of JSON keys.
    'cardholder_name': 'cardholderName',
    'card_number': 'cardNumber',
    'expiry_date': 'expiryDate',
}
ENTITY_ATTRIBUTE_NAMES = {v: k for k, v in ENTITY_JSON_KEYS.items()}  # Use: Reverse of ENTITY_JSON_KEYS, applied when loading. Type: dict[str, str]. Range: Dictionary of attribute names.

# Command Line Settings
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'  # Use: Format string handed to logging.basicConfig by the entry point. Type: str. Range: Any logging format string.
SECRET_MASK_TEXT = "••••••••"  # Use: Placeholder printed instead of secrets by the list command. Type: str. Range: Any string.


def get_default_cache_path() -> str:
    """Get the default path for the encrypted cache file."""
    return os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME, DEFAULT_CACHE_FILE)
