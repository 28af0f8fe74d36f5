from typing import Any, Dict, Optional

class CertBadgeException(Exception):
    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        context_str = f" - Context: {self.context}" if self.context else ""
        return f"{self.__class__.__name__}: {self.message}{context_str}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, context={self.context!r})"


class RecordValidationException(CertBadgeException):
    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = dict(context or {})
        if field:
            ctx["field"] = field
        if value is not None:
            ctx["value"] = value
        super().__init__(message, ctx)


class AcquisitionException(CertBadgeException):
    def __init__(
        self,
        message: str,
        request_id: Optional[str] = None,
        page_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = dict(context or {})
        if request_id is not None:
            ctx["request_id"] = request_id
        if page_id is not None:
            ctx["page_id"] = page_id
        super().__init__(message, ctx)


class ConfigurationException(CertBadgeException):

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = dict(context or {})
        if config_key:
            ctx["config_key"] = config_key
        if config_value is not None:
            ctx["config_value"] = config_value
        super().__init__(message, ctx)


class AssetException(CertBadgeException):
    def __init__(
        self,
        message: str,
        variant: Optional[str] = None,
        location: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = dict(context or {})
        if variant:
            ctx["variant"] = variant
        if location:
            ctx["location"] = location
        super().__init__(message, ctx)


class OutputException(CertBadgeException):
    def __init__(
        self,
        message: str,
        output_format: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = dict(context or {})
        if output_format:
            ctx["output_format"] = output_format
        super().__init__(message, ctx)


class CertificateParseException(RecordValidationException):
    """Certificate entry could not be parsed"""
    pass


class UnknownRequestException(AcquisitionException):
    """No recorded security info for the request"""
    pass
