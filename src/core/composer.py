import re
from datetime import datetime, timezone
from typing import List, Optional

from config.constants import CERTIFICATE_FALLBACK_LABEL
from ..models.connection import Certificate, ConnectionRecord
from ..models.detail import CertificateDetail, DetailModel, DetailRow, DNAttribute
from ..models.entry import PageSecurityEntry
from ..models.exceptions import RecordValidationException
from ..utils.dn_parser import common_name, parse_distinguished_name
from .classifier import describe

_WORD_START_RE = re.compile(r"\b\w")


def _yes_no(value: bool) -> str:
    return "Yes" if value else "No"


def _format_date(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%d")


def format_transparency_status(status: str) -> str:
    """``policy_compliant`` -> ``Policy Compliant``."""
    return _WORD_START_RE.sub(lambda m: m.group(0).upper(), status.replace("_", " "))


def connection_rows(record: ConnectionRecord) -> List[DetailRow]:
    rows: List[DetailRow] = []

    if record.protocol_version:
        rows.append(DetailRow("Protocol", record.protocol_version))
    if record.cipher_suite:
        cipher = record.cipher_suite
        if record.secret_key_length:
            cipher = f"{cipher} ({record.secret_key_length}-bit)"
        rows.append(DetailRow("Cipher Suite", cipher))
    if record.key_exchange_group:
        rows.append(DetailRow("Key Exchange", record.key_exchange_group))
    if record.signature_scheme:
        rows.append(DetailRow("Signature", record.signature_scheme))

    flags = (
        ("Encrypted Client Hello", record.used_encrypted_hello),
        ("Private DNS", record.used_private_dns),
        ("HSTS Active", record.hsts),
        ("EV Cert", record.extended_validation),
    )
    for label, value in flags:
        if value is not None:
            rows.append(DetailRow(label, _yes_no(value)))

    if record.certificate_transparency_status:
        rows.append(DetailRow("Transparency", format_transparency_status(record.certificate_transparency_status)))
    return rows


def certificate_detail(cert: Certificate, expanded: bool = False) -> CertificateDetail:
    return CertificateDetail(
        label=common_name(cert.subject) or CERTIFICATE_FALLBACK_LABEL,
        subject=[DNAttribute(k, v) for k, v in parse_distinguished_name(cert.subject)],
        issuer=[DNAttribute(k, v) for k, v in parse_distinguished_name(cert.issuer)],
        not_before=_format_date(cert.validity.not_before) if cert.validity else None,
        not_after=_format_date(cert.validity.not_after) if cert.validity else None,
        serial_number=cert.serial_number,
        sha256=cert.fingerprint.sha256,
        sha1=cert.fingerprint.sha1,
        expanded=expanded,
    )


class DetailViewComposer:
    def compose(self, entry: PageSecurityEntry) -> DetailModel:
        if entry.record is None:
            raise RecordValidationException("Entry has no captured record", context={"page_id": entry.page_id})

        record = entry.record
        level, reason = describe(record)
        return DetailModel(
            level=level,
            reason=reason,
            status_line=entry.http_status_line,
            connection=connection_rows(record),
            certificates=[certificate_detail(c, expanded=(c is record.leaf)) for c in record.certificates],
        )


def compose(entry: PageSecurityEntry) -> DetailModel:
    return DetailViewComposer().compose(entry)
