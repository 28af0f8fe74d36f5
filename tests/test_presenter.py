from src.core.presenter import DetailViewPresenter
from src.core.store import SecurityRecordStore
from src.models.trust import TrustLevel

from conftest import make_record


def _presenter():
    store = SecurityRecordStore()
    return store, DetailViewPresenter(store)


def test_no_page():
    _, presenter = _presenter()
    view = presenter.present(None, "https://a.example/")
    assert view.message == "No active tab found."


def test_plain_http_page():
    store, presenter = _presenter()
    store.capture(1, make_record(), None, "http://a.example/")
    view = presenter.present(1, "http://a.example/")
    assert not view.has_model
    assert view.message.startswith("This page is not secure (HTTP).")


def test_nothing_captured():
    _, presenter = _presenter()
    view = presenter.present(1, "https://a.example/")
    assert view.message.startswith("No certificate information captured yet.")


def test_stale_origin_shows_no_data():
    store, presenter = _presenter()
    store.capture(1, make_record(), None, "https://a.example/")
    view = presenter.present(1, "https://b.example/")
    assert not view.has_model
    assert view.message.startswith("No certificate information captured yet.")


def test_insecure_record_shows_no_certificate():
    store, presenter = _presenter()
    store.capture(1, make_record(state="insecure"), None, "https://a.example/")
    assert not presenter.present(1, "https://a.example/").has_model


def test_fresh_entry_is_composed():
    store, presenter = _presenter()
    store.capture(1, make_record(), "HTTP/2.0 200 OK", "https://a.example/")
    view = presenter.present(1, "https://a.example/settings")
    assert view.has_model
    assert view.model.level is TrustLevel.SECURE
    assert view.model.certificates[0].label == "a.example"
