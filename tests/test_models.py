import pytest

from exportvault.models import Credential, PaymentCard, SecureNote, Snapshot


def _snapshot():
    return Snapshot(
        credentials=(Credential(name="Example", password="pw", username="alice"),),
        cards=(PaymentCard(name="Visa", card_number="4111111111111111"),),
        notes=(SecureNote(name="Wifi", note="code"),),
        last_updated=1700000000000,
        source_fingerprint="abc123",
    )


def test_snapshot_document_keys():
    document = _snapshot().to_dict()
    assert document["lastUpdated"] == 1700000000000
    assert document["sourceFingerprint"] == "abc123"
    assert document["credentials"][0]["type"] == "password"
    assert document["notes"] == [{"type": "secureNote", "name": "Wifi", "note": "code", "folder": None}]


def test_card_document_uses_camel_case_keys():
    card = PaymentCard(name="Visa", cardholder_name="Alice", card_number="4111111111111111", expiry_date="12/27")
    document = card.to_dict()
    assert document["type"] == "creditCard"
    assert document["cardholderName"] == "Alice"
    assert document["cardNumber"] == "4111111111111111"
    assert document["expiryDate"] == "12/27"
    assert "card_number" not in document
    assert PaymentCard.from_dict(document) == card


def test_snapshot_from_document():
    snapshot = _snapshot()
    assert Snapshot.from_dict(snapshot.to_dict()) == snapshot


def test_unknown_entity_keys_are_ignored():
    credential = Credential.from_dict({"type": "password", "name": "x", "password": "p", "extra": 1})
    assert credential == Credential(name="x", password="p")


@pytest.mark.parametrize("document", [
    [],
    {},
    {"credentials": [], "cards": [], "notes": []},
    {"credentials": [{}], "cards": [], "notes": [], "lastUpdated": 1},
    {"credentials": [], "cards": [], "notes": [], "lastUpdated": "soon"},
    {"credentials": None, "cards": [], "notes": [], "lastUpdated": 1},
])
def test_malformed_document_raises_value_error(document):
    with pytest.raises(ValueError):
        Snapshot.from_dict(document)


def test_default_timestamp_is_now_in_millis():
    assert Snapshot().last_updated > 1_600_000_000_000
