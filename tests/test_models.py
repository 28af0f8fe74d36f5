from datetime import datetime, timezone

import pytest

from src.models.connection import ConnectionRecord, Certificate
from src.models.events import (
    HeadersReceived,
    NavigationStateChanged,
    PageActivated,
    PageClosed,
    event_from_dict,
)
from src.models.exceptions import (
    CertificateParseException,
    ConfigurationException,
    RecordValidationException,
)
from src.models.settings import MonitorConfig
from src.models.trust import SecurityState


def test_record_from_security_info(security_info):
    record = ConnectionRecord.from_dict(security_info)
    assert record.raw_state is SecurityState.SECURE
    assert record.protocol_version == "TLSv1.3"
    assert record.secret_key_length == 256
    assert record.key_exchange_group == "x25519"
    assert record.hsts is True
    assert record.used_encrypted_hello is False
    assert len(record.certificates) == 2
    assert record.leaf.subject.startswith("CN=a.example")
    assert record.leaf.validity.not_before == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)


def test_record_is_immutable(security_info):
    record = ConnectionRecord.from_dict(security_info)
    with pytest.raises(AttributeError):
        record.cipher_suite = "TLS_RSA_WITH_RC4_128_SHA"


def test_unknown_state_rejected(security_info):
    security_info["state"] = "mostly-fine"
    with pytest.raises(RecordValidationException):
        ConnectionRecord.from_dict(security_info)


def test_missing_state_rejected():
    with pytest.raises(RecordValidationException):
        ConnectionRecord.from_dict({"cipherSuite": "TLS_AES_128_GCM_SHA256"})


def test_non_object_rejected():
    with pytest.raises(RecordValidationException):
        ConnectionRecord.from_dict(["secure"])
    with pytest.raises(RecordValidationException):
        ConnectionRecord.from_json("{not json")


def test_invalid_key_length_rejected(security_info):
    security_info["secretKeyLength"] = "lots"
    with pytest.raises(RecordValidationException):
        ConnectionRecord.from_dict(security_info)


def test_certificate_accepts_iso_validity():
    cert = Certificate.from_dict({
        "subject": "CN=x",
        "issuer": "CN=y",
        "validity": {"start": "2024-01-01T00:00:00Z", "end": "2024-04-01T00:00:00Z"},
    })
    assert cert.validity.not_after == datetime(2024, 4, 1, tzinfo=timezone.utc)
    assert cert.validity.not_before == datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_certificate_with_bad_timestamp():
    with pytest.raises(CertificateParseException):
        Certificate.from_dict({"subject": "CN=x", "issuer": "CN=y", "validity": {"start": "yesterday", "end": 0}})


def test_events_from_dict():
    assert event_from_dict({
        "type": "headers_received", "request_id": 7, "page_id": 1,
        "url": "https://a.example/", "resource_type": "image",
    }) == HeadersReceived("7", 1, "https://a.example/", main_frame=False)
    assert event_from_dict({"type": "navigation_state_changed", "page_id": 1, "status": "loading"}) == \
        NavigationStateChanged(1, "loading")
    assert event_from_dict({"type": "page_activated", "page_id": 3}) == PageActivated(3)
    assert event_from_dict({"type": "page_closed", "page_id": 3}) == PageClosed(3)


@pytest.mark.parametrize("data", [
    {"type": "teleported", "page_id": 1},
    {"type": "page_closed"},
    {"type": "navigation_state_changed", "page_id": 1, "status": "paused"},
])
def test_bad_events_rejected(data):
    with pytest.raises(RecordValidationException):
        event_from_dict(data)


def test_config_defaults_validate():
    MonitorConfig().validate()


def test_config_validation_collects_errors():
    config = MonitorConfig(theme="neon", badge_size=2, log_level="LOUD")
    with pytest.raises(ConfigurationException) as exc:
        config.validate()
    assert len(exc.value.context["errors"]) == 3


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("CERTBADGE_THEME", "dark")
    monkeypatch.setenv("CERTBADGE_GLYPH_DARK", "/tmp/dark.svg")
    monkeypatch.delenv("CERTBADGE_LOG_LEVEL", raising=False)
    config = MonitorConfig.from_env(log_level="DEBUG")
    assert config.theme == "dark"
    assert config.glyph_paths["dark"] == "/tmp/dark.svg"
    assert config.log_level == "DEBUG"
    config.validate()


@pytest.mark.parametrize("fingerprint", ["AA:BB", ["AA:BB"]])
def test_malformed_fingerprint_rejected(fingerprint):
    data = {
        "state": "secure",
        "certificates": [{"subject": "CN=a", "issuer": "CN=b", "fingerprint": fingerprint}],
    }
    with pytest.raises(CertificateParseException) as exc:
        ConnectionRecord.from_dict(data)
    assert exc.value.context["field"] == "fingerprint"


@pytest.mark.parametrize("key", ["hsts", "isExtendedValidation", "usedEch", "usedPrivateDns"])
def test_flags_must_be_booleans(security_info, key):
    security_info[key] = "false"
    with pytest.raises(RecordValidationException):
        ConnectionRecord.from_dict(security_info)
