from .trust import SecurityState, TrustLevel
from .connection import ConnectionRecord, Certificate, Validity, Fingerprint
from .entry import PageSecurityEntry
from .detail import DetailModel, DetailRow, DetailView, CertificateDetail, DNAttribute, PageReport
from .icon import IconDescriptor
from .events import (
    HeadersReceived,
    NavigationStateChanged,
    PageActivated,
    PageClosed,
    PageEvent,
    event_from_dict,
)
from .settings import MonitorConfig
from .exceptions import (
    CertBadgeException,
    RecordValidationException,
    AcquisitionException,
    ConfigurationException,
    AssetException,
    OutputException,
    CertificateParseException,
    UnknownRequestException,
)

__all__ = [
    "SecurityState",
    "TrustLevel",
    "ConnectionRecord",
    "Certificate",
    "Validity",
    "Fingerprint",
    "PageSecurityEntry",
    "DetailModel",
    "DetailRow",
    "DetailView",
    "CertificateDetail",
    "DNAttribute",
    "PageReport",
    "IconDescriptor",
    "HeadersReceived",
    "NavigationStateChanged",
    "PageActivated",
    "PageClosed",
    "PageEvent",
    "event_from_dict",
    "MonitorConfig",
    "CertBadgeException",
    "RecordValidationException",
    "AcquisitionException",
    "ConfigurationException",
    "AssetException",
    "OutputException",
    "CertificateParseException",
    "UnknownRequestException",
]
