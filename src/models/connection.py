from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple, Union
import json

from .trust import SecurityState
from .exceptions import RecordValidationException, CertificateParseException

Timestamp = Union[int, float, str, datetime]


def _to_datetime(value: Timestamp, field_name: str) -> datetime:
    """Platform timestamps arrive as epoch milliseconds; ISO-8601 strings are accepted too."""
    if isinstance(value, bool):
        raise CertificateParseException("Invalid timestamp", field=field_name, value=value)
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise CertificateParseException(f"Timestamp out of range: {e}", field=field_name, value=value)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            raise CertificateParseException(f"Invalid timestamp: {e}", field=field_name, value=value)
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    raise CertificateParseException("Invalid timestamp", field=field_name, value=value)


def _optional_bool(data: Dict[str, Any], key: str) -> Optional[bool]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise RecordValidationException("Expected a boolean", field=key, value=value)
    return value


def _optional_str(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None or value == "":
        return None
    return str(value)


@dataclass(frozen=True)
class Validity:
    not_before: datetime
    not_after: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "not_before": self.not_before.isoformat(),
            "not_after": self.not_after.isoformat(),
        }


@dataclass(frozen=True)
class Fingerprint:
    sha256: str = ""
    sha1: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"sha256": self.sha256, "sha1": self.sha1}


@dataclass(frozen=True)
class Certificate:
    subject: str
    issuer: str
    validity: Optional[Validity] = None
    serial_number: str = ""
    fingerprint: Fingerprint = field(default_factory=Fingerprint)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Certificate":
        if not isinstance(data, dict):
            raise CertificateParseException("Certificate entry must be an object", value=type(data).__name__)

        validity = None
        raw_validity = data.get("validity")
        if isinstance(raw_validity, dict):
            start = raw_validity.get("start", raw_validity.get("notBefore"))
            end = raw_validity.get("end", raw_validity.get("notAfter"))
            if start is not None and end is not None:
                validity = Validity(
                    not_before=_to_datetime(start, "validity.start"),
                    not_after=_to_datetime(end, "validity.end"),
                )

        fp = data.get("fingerprint") or {}
        if not isinstance(fp, dict):
            raise CertificateParseException("Fingerprint must be an object", field="fingerprint", value=fp)
        return cls(
            subject=str(data.get("subject") or ""),
            issuer=str(data.get("issuer") or ""),
            validity=validity,
            serial_number=str(data.get("serialNumber") or ""),
            fingerprint=Fingerprint(
                sha256=str(fp.get("sha256") or ""),
                sha1=str(fp.get("sha1") or ""),
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subject": self.subject,
            "issuer": self.issuer,
            "validity": self.validity.to_dict() if self.validity else None,
            "serial_number": self.serial_number,
            "fingerprint": self.fingerprint.to_dict(),
        }


@dataclass(frozen=True)
class ConnectionRecord:
    raw_state: SecurityState
    protocol_version: Optional[str] = None
    cipher_suite: Optional[str] = None
    secret_key_length: Optional[int] = None
    key_exchange_group: Optional[str] = None
    signature_scheme: Optional[str] = None
    certificates: Tuple[Certificate, ...] = ()
    hsts: Optional[bool] = None
    extended_validation: Optional[bool] = None
    used_encrypted_hello: Optional[bool] = None
    used_private_dns: Optional[bool] = None
    certificate_transparency_status: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.raw_state, str):
            object.__setattr__(self, "raw_state", _parse_state(self.raw_state))
        if not isinstance(self.certificates, tuple):
            object.__setattr__(self, "certificates", tuple(self.certificates))

    @property
    def leaf(self) -> Optional[Certificate]:
        return self.certificates[0] if self.certificates else None

    @property
    def has_certificates(self) -> bool:
        return len(self.certificates) > 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConnectionRecord":
        """Build a record from the platform's security-info object."""
        if not isinstance(data, dict):
            raise RecordValidationException("Security info must be an object", value=type(data).__name__)

        state = data.get("state")
        if state is None:
            raise RecordValidationException("Security info is missing its state", field="state")

        key_length = data.get("secretKeyLength")
        if key_length is not None:
            try:
                key_length = int(key_length)
            except (TypeError, ValueError):
                raise RecordValidationException("Invalid key length", field="secretKeyLength", value=key_length)

        certs = data.get("certificates") or []
        if not isinstance(certs, list):
            raise RecordValidationException("Certificates must be a list", field="certificates")

        return cls(
            raw_state=_parse_state(state),
            protocol_version=_optional_str(data, "protocolVersion"),
            cipher_suite=_optional_str(data, "cipherSuite"),
            secret_key_length=key_length,
            key_exchange_group=_optional_str(data, "keaGroupName"),
            signature_scheme=_optional_str(data, "signatureSchemeName"),
            certificates=tuple(Certificate.from_dict(c) for c in certs),
            hsts=_optional_bool(data, "hsts"),
            extended_validation=_optional_bool(data, "isExtendedValidation"),
            used_encrypted_hello=_optional_bool(data, "usedEch"),
            used_private_dns=_optional_bool(data, "usedPrivateDns"),
            certificate_transparency_status=_optional_str(data, "certificateTransparencyStatus"),
        )

    @classmethod
    def from_json(cls, text: str) -> "ConnectionRecord":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise RecordValidationException(f"Security info is not valid JSON: {e}")
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "raw_state": self.raw_state.value,
            "protocol_version": self.protocol_version,
            "cipher_suite": self.cipher_suite,
            "secret_key_length": self.secret_key_length,
            "key_exchange_group": self.key_exchange_group,
            "signature_scheme": self.signature_scheme,
            "certificates": [c.to_dict() for c in self.certificates],
            "hsts": self.hsts,
            "extended_validation": self.extended_validation,
            "used_encrypted_hello": self.used_encrypted_hello,
            "used_private_dns": self.used_private_dns,
            "certificate_transparency_status": self.certificate_transparency_status,
        }


def _parse_state(value: Any) -> SecurityState:
    if isinstance(value, SecurityState):
        return value
    try:
        return SecurityState(str(value).strip().lower())
    except ValueError:
        raise RecordValidationException("Unknown connection state", field="state", value=value)
