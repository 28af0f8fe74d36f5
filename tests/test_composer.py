import pytest

from src.core.composer import DetailViewComposer, compose, format_transparency_status
from src.models.connection import ConnectionRecord
from src.models.entry import PageSecurityEntry
from src.models.exceptions import RecordValidationException
from src.models.trust import TrustLevel

from conftest import make_record


def _entry(record, status_line=None):
    return PageSecurityEntry(page_id=1, record=record, origin_url="https://a.example/", http_status_line=status_line)


def test_full_record(security_info):
    model = compose(_entry(ConnectionRecord.from_dict(security_info), "HTTP/2.0 200 OK"))
    assert model.level is TrustLevel.SECURE
    assert model.reason is None
    assert model.status_line == "HTTP/2.0 200 OK"
    assert [(r.label, r.value) for r in model.connection] == [
        ("Protocol", "TLSv1.3"),
        ("Cipher Suite", "TLS_AES_256_GCM_SHA384 (256-bit)"),
        ("Key Exchange", "x25519"),
        ("Signature", "ECDSA-P256-SHA256"),
        ("Encrypted Client Hello", "No"),
        ("Private DNS", "No"),
        ("HSTS Active", "Yes"),
        ("EV Cert", "No"),
        ("Transparency", "Policy Compliant"),
    ]


def test_absent_fields_are_omitted():
    model = compose(_entry(make_record(cipher=None)))
    assert model.connection == []


def test_cipher_without_key_length():
    model = compose(_entry(make_record(cipher="TLS_AES_128_GCM_SHA256")))
    assert model.row("Cipher Suite") == "TLS_AES_128_GCM_SHA256"


def test_certificate_chain(security_info):
    model = compose(_entry(ConnectionRecord.from_dict(security_info)))
    leaf, root = model.certificates
    assert leaf.label == "a.example"
    assert leaf.expanded is True
    assert root.label == "ISRG Root X1"
    assert root.expanded is False
    assert [(a.key, a.value) for a in leaf.subject] == [("CN", "a.example"), ("O", "Example Org"), ("C", "US")]
    assert [(a.key, a.value) for a in leaf.issuer] == [("CN", "R3"), ("O", "Let's Encrypt"), ("C", "US")]
    assert leaf.not_before == "2023-11-14"
    assert leaf.not_after == "2024-02-12"
    assert leaf.serial_number == "04:AB:CD"
    assert leaf.sha256 == "AA:BB:CC"
    assert leaf.sha1 == "DD:EE:FF"


def test_certificate_without_common_name_gets_fallback_label():
    cert = {"subject": "O=Nameless Org,C=US", "issuer": "O=Nameless Org,C=US"}
    model = compose(_entry(make_record(certificates=[cert])))
    assert model.certificates[0].label == "Details"
    assert model.certificates[0].not_before is None


def test_weak_reason_comes_from_cipher():
    model = compose(_entry(make_record(cipher="TLS_ECDHE_RSA_WITH_RC4_128_SHA")))
    assert model.level is TrustLevel.WEAK
    assert model.reason == "uses insecure RC4 cipher"


def test_broken_reason():
    model = compose(_entry(make_record(certificates=[])))
    assert model.level is TrustLevel.BROKEN
    assert "self-signed" in model.reason
    assert model.certificates == []


def test_entry_without_record_is_rejected():
    with pytest.raises(RecordValidationException):
        DetailViewComposer().compose(PageSecurityEntry(page_id=1, record=None, origin_url="https://a.example/"))


@pytest.mark.parametrize("raw,expected", [
    ("policy_compliant", "Policy Compliant"),
    ("not_enough_scts", "Not Enough Scts"),
    ("not_diverse_scts", "Not Diverse Scts"),
])
def test_transparency_status_normalization(raw, expected):
    assert format_transparency_status(raw) == expected


def test_model_to_dict(security_info):
    data = compose(_entry(ConnectionRecord.from_dict(security_info))).to_dict()
    assert data["level"] == "secure"
    assert data["certificates"][0]["label"] == "a.example"
    assert data["connection"][0] == {"label": "Protocol", "value": "TLSv1.3"}
