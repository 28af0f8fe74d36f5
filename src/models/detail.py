from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import json

from .trust import TrustLevel


@dataclass(frozen=True)
class DetailRow:
    label: str
    value: str

    def to_dict(self) -> Dict[str, str]:
        return {"label": self.label, "value": self.value}


@dataclass(frozen=True)
class DNAttribute:
    key: str
    value: str

    def to_dict(self) -> Dict[str, str]:
        return {"key": self.key, "value": self.value}


@dataclass
class CertificateDetail:
    label: str
    subject: List[DNAttribute] = field(default_factory=list)
    issuer: List[DNAttribute] = field(default_factory=list)
    not_before: Optional[str] = None
    not_after: Optional[str] = None
    serial_number: str = ""
    sha256: str = ""
    sha1: str = ""
    expanded: bool = False

    @property
    def groups(self) -> List[Tuple[str, List[DetailRow]]]:
        """Labelled row groups in display order; subject and issuer are listed separately."""
        out: List[Tuple[str, List[DetailRow]]] = []
        if self.not_before or self.not_after:
            validity = []
            if self.not_before:
                validity.append(DetailRow("Not Before", self.not_before))
            if self.not_after:
                validity.append(DetailRow("Not After", self.not_after))
            out.append(("Period of Validity", validity))
        out.append((
            "Fingerprints & Serial",
            [
                DetailRow("Serial", self.serial_number),
                DetailRow("SHA-256", self.sha256),
                DetailRow("SHA-1", self.sha1),
            ],
        ))
        return out

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "expanded": self.expanded,
            "subject": [a.to_dict() for a in self.subject],
            "issuer": [a.to_dict() for a in self.issuer],
            "not_before": self.not_before,
            "not_after": self.not_after,
            "serial_number": self.serial_number,
            "sha256": self.sha256,
            "sha1": self.sha1,
        }


@dataclass
class DetailModel:
    level: TrustLevel
    reason: Optional[str] = None
    status_line: Optional[str] = None
    connection: List[DetailRow] = field(default_factory=list)
    certificates: List[CertificateDetail] = field(default_factory=list)

    def row(self, label: str) -> Optional[str]:
        for r in self.connection:
            if r.label == label:
                return r.value
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level.value,
            "reason": self.reason,
            "status_line": self.status_line,
            "connection": [r.to_dict() for r in self.connection],
            "certificates": [c.to_dict() for c in self.certificates],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)


@dataclass
class DetailView:
    """What a detail presenter shows: a composed model, or a message when there is nothing to show."""
    model: Optional[DetailModel] = None
    message: Optional[str] = None

    @property
    def has_model(self) -> bool:
        return self.model is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model": self.model.to_dict() if self.model else None,
            "message": self.message,
        }


@dataclass
class PageReport:
    page_id: Any
    url: Optional[str]
    badge: Dict[str, Any]
    view: DetailView

    def to_dict(self) -> Dict[str, Any]:
        return {
            "page_id": self.page_id,
            "url": self.url,
            "badge": self.badge,
            "detail": self.view.to_dict(),
        }
