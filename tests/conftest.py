import asyncio
import copy
from typing import Dict, Optional

import pytest

from src.models.connection import ConnectionRecord
from src.models.trust import SecurityState

LEAF_CERT = {
    "subject": "CN=a.example,O=Example Org,C=US",
    "issuer": "CN=R3,O=Let's Encrypt,C=US",
    "validity": {"start": 1700000000000, "end": 1707776000000},
    "serialNumber": "04:AB:CD",
    "fingerprint": {"sha256": "AA:BB:CC", "sha1": "DD:EE:FF"},
}

ROOT_CERT = {
    "subject": "CN=ISRG Root X1,O=Internet Security Research Group,C=US",
    "issuer": "CN=ISRG Root X1,O=Internet Security Research Group,C=US",
    "validity": {"start": 1433116800000, "end": 2064268800000},
    "serialNumber": "00:82:10",
    "fingerprint": {"sha256": "96:BC:EC", "sha1": "CA:BD:2A"},
}

SECURITY_INFO = {
    "state": "secure",
    "protocolVersion": "TLSv1.3",
    "cipherSuite": "TLS_AES_256_GCM_SHA384",
    "secretKeyLength": 256,
    "keaGroupName": "x25519",
    "signatureSchemeName": "ECDSA-P256-SHA256",
    "hsts": True,
    "isExtendedValidation": False,
    "usedEch": False,
    "usedPrivateDns": False,
    "certificateTransparencyStatus": "policy_compliant",
    "certificates": [LEAF_CERT, ROOT_CERT],
}


@pytest.fixture
def security_info():
    return copy.deepcopy(SECURITY_INFO)


def make_record(state="secure", cipher="TLS_AES_256_GCM_SHA384", certificates=None, **fields) -> ConnectionRecord:
    if certificates is None:
        certificates = [LEAF_CERT]
    data = {"state": state, "cipherSuite": cipher, "certificates": certificates}
    data.update(fields)
    return ConnectionRecord.from_dict(data)


@pytest.fixture
def secure_record():
    return make_record()


class StaticGlyphs:
    def __init__(self, glyphs: Optional[Dict[str, bytes]] = None):
        self.glyphs = dict(glyphs or {})

    def is_available(self, variant: str) -> bool:
        return variant in self.glyphs

    def get(self, variant: str) -> Optional[bytes]:
        return self.glyphs.get(variant)


@pytest.fixture
def loaded_glyphs():
    return StaticGlyphs({"light": b"<svg light/>", "dark": b"<svg dark/>"})


class GatedProvider:
    """Handshake provider whose results are released by the test."""

    def __init__(self):
        self._futures: Dict[str, asyncio.Future] = {}
        self.requested = []

    def _future(self, request_id: str) -> asyncio.Future:
        if request_id not in self._futures:
            self._futures[request_id] = asyncio.get_running_loop().create_future()
        return self._futures[request_id]

    def resolve(self, request_id: str, record: ConnectionRecord) -> None:
        self._future(request_id).set_result(record)

    def fail(self, request_id: str, error: Exception) -> None:
        self._future(request_id).set_exception(error)

    async def get_security_info(self, request_id: str) -> ConnectionRecord:
        self.requested.append(request_id)
        return await self._future(request_id)


class RecordingSurface:
    def __init__(self):
        self.drawn = []

    def draw(self, page_id, descriptor):
        self.drawn.append((page_id, descriptor))


async def settle(rounds: int = 5):
    for _ in range(rounds):
        await asyncio.sleep(0)
