import pytest

from helpers.token_factory import Signer
from sep001.storage.memory import MemoryBlockStore


@pytest.fixture
def signer():
    """A fresh Ed25519 signer for each test."""
    return Signer.generate("EdDSA")


@pytest.fixture(scope="session")
def rsa_signer():
    """RSA keys are slow to generate: one per session."""
    return Signer.generate("RS256")


@pytest.fixture
def store():
    return MemoryBlockStore()
