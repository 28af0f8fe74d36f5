import json
import logging
from pathlib import Path
from typing import Any, Dict, Protocol, Union

from ..models.connection import ConnectionRecord
from ..models.exceptions import AcquisitionException, RecordValidationException, UnknownRequestException

logger = logging.getLogger(__name__)


class HandshakeDataProvider(Protocol):
    async def get_security_info(self, request_id: str) -> ConnectionRecord: ...


class RecordedHandshakeProvider:
    """Replays security-info objects captured earlier, keyed by request id."""

    def __init__(self, records: Dict[str, Any]):
        self._records = {str(k): v for k, v in records.items()}

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "RecordedHandshakeProvider":
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise AcquisitionException(f"Cannot read recorded security info: {e}", context={"path": str(path)})
        if not isinstance(data, dict):
            raise AcquisitionException("Recorded security info must map request ids to objects",
                                       context={"path": str(path)})
        return cls(data)

    @property
    def request_ids(self):
        return sorted(self._records)

    async def get_security_info(self, request_id: str) -> ConnectionRecord:
        raw = self._records.get(str(request_id))
        if raw is None:
            raise UnknownRequestException("No security info recorded for request", request_id=str(request_id))
        try:
            return ConnectionRecord.from_dict(raw)
        except RecordValidationException as e:
            raise AcquisitionException(f"Recorded security info is malformed: {e.message}",
                                       request_id=str(request_id), context=e.context)
