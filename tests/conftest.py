import pytest
from vns_core.config import load_config
from vns_core.crypto import generate_keypair, make_identifier, sign_link
from vns_core.store import RecordStore


class KeyHolder:
    def __init__(self, name, kind="p256"):
        self.private_key, self.public_key = generate_keypair(kind)
        self.uid = make_identifier(name, self.public_key)

    def sign(self, link):
        return sign_link(self.private_key, link)


@pytest.fixture
def alice():
    return KeyHolder("alice")


@pytest.fixture
def bob():
    return KeyHolder("bob", "ed25519")


@pytest.fixture
def storage_path(tmp_path):
    return tmp_path / "storage.txt"


@pytest.fixture
def store(storage_path):
    return RecordStore(load_config({"storage_path": str(storage_path)}))
