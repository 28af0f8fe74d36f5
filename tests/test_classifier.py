import pytest

from src.core.classifier import classify, describe
from src.models.trust import TrustLevel

from conftest import make_record


@pytest.mark.parametrize("cipher", [None, "TLS_AES_128_GCM_SHA256", "TLS_RSA_WITH_RC4_128_MD5"])
@pytest.mark.parametrize("certificates", [[], None])
def test_insecure_state_always_wins(cipher, certificates):
    record = make_record(state="insecure", cipher=cipher, certificates=certificates)
    assert classify(record) is TrustLevel.INSECURE


def test_secure_without_certificates_is_broken():
    assert classify(make_record(state="secure", certificates=[])) is TrustLevel.BROKEN


def test_broken_state():
    assert classify(make_record(state="broken")) is TrustLevel.BROKEN


def test_broken_beats_weak_cipher():
    assert classify(make_record(state="broken", cipher="TLS_RSA_WITH_AES_128_CBC_SHA")) is TrustLevel.BROKEN


def test_weak_state():
    assert classify(make_record(state="weak")) is TrustLevel.WEAK


def test_weak_cipher_downgrades_secure_state():
    record = make_record(state="secure", cipher="TLS_RSA_WITH_AES_128_CBC_SHA")
    assert classify(record) is TrustLevel.WEAK
    assert describe(record) == (TrustLevel.WEAK, "lacks forward secrecy")


def test_modern_suite_is_secure():
    record = make_record(state="secure", cipher="TLS_ECDHE_RSA_WITH_AES_128_GCM_SHA256")
    assert classify(record) is TrustLevel.SECURE
    assert describe(record) == (TrustLevel.SECURE, None)


def test_weak_state_without_cipher_reason_uses_generic_message():
    level, reason = describe(make_record(state="weak", cipher="TLS_AES_128_GCM_SHA256"))
    assert level is TrustLevel.WEAK
    assert reason == "connection uses a weak protocol"


def test_reasons_for_insecure_and_broken():
    assert describe(make_record(state="insecure"))[1] == "connection is not encrypted"
    assert describe(make_record(state="broken"))[1].startswith("certificate has an issue")


@pytest.mark.parametrize("state", ["secure", "weak", "broken", "insecure"])
@pytest.mark.parametrize("cipher", [None, "TLS_RSA_WITH_AES_128_CBC_SHA", "TLS_AES_256_GCM_SHA384", "bogus"])
@pytest.mark.parametrize("certificates", [[], None])
def test_classification_is_total_and_deterministic(state, cipher, certificates):
    record = make_record(state=state, cipher=cipher, certificates=certificates)
    first = classify(record)
    assert first in set(TrustLevel)
    assert classify(record) is first
