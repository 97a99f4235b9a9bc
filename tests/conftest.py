import pytest

from exportvault.crypto import CryptoManager, MachineIdentity, derive_machine_key


HOME_IDENTITY = MachineIdentity(hostname="workstation", username="alice", platform="linux", arch="x86_64")
OTHER_IDENTITY = MachineIdentity(hostname="laptop", username="bob", platform="darwin", arch="arm64")


@pytest.fixture(scope="session")
def machine_key():
    """Key for HOME_IDENTITY, derived once per test session."""
    return derive_machine_key(HOME_IDENTITY)


@pytest.fixture(scope="session")
def other_machine_key():
    return derive_machine_key(OTHER_IDENTITY)


@pytest.fixture
def crypto(machine_key):
    return CryptoManager(key=machine_key)


@pytest.fixture
def other_crypto(other_machine_key):
    return CryptoManager(key=other_machine_key)


@pytest.fixture
def write_csv(tmp_path):
    """Write CSV text (or raw bytes) to a file under tmp_path and return its path."""
    def _write(content, name="export.csv"):
        path = tmp_path / name
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return str(path)
    return _write
