import logging
from typing import Optional

from config.constants import DETAIL_MESSAGES
from ..models.detail import DetailView
from ..models.entry import PageId
from ..models.trust import SecurityState
from ..models.exceptions import CertBadgeException
from ..utils.origin import is_https
from .composer import DetailViewComposer
from .store import SecurityRecordStore

logger = logging.getLogger(__name__)


class DetailViewPresenter:
    """Decides what the detail view shows when it is opened for a page."""

    def __init__(self, store: SecurityRecordStore, composer: Optional[DetailViewComposer] = None):
        self.store = store
        self.composer = composer or DetailViewComposer()

    def present(self, page_id: Optional[PageId], current_url: Optional[str]) -> DetailView:
        if page_id is None:
            return DetailView(message=DETAIL_MESSAGES["no_page"])

        if not is_https(current_url):
            return DetailView(message=DETAIL_MESSAGES["not_https"])

        if not self.store.is_fresh(page_id, current_url):
            logger.debug(f"No fresh security info for page {page_id} at {current_url}")
            return DetailView(message=DETAIL_MESSAGES["not_captured"])

        entry = self.store.get(page_id)
        if entry.record.raw_state is SecurityState.INSECURE:
            return DetailView(message=DETAIL_MESSAGES["not_captured"])

        try:
            return DetailView(model=self.composer.compose(entry))
        except CertBadgeException as e:
            logger.error(f"Could not compose detail view for page {page_id}: {e}")
            return DetailView(message=DETAIL_MESSAGES["retrieval_failed"])
