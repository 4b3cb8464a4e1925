from nre_tracker import ui
from nre_tracker.models import NetworkInfo


def test_share_links_point_ui_at_streamlit_port(monkeypatch):
    monkeypatch.setattr(ui.st, "get_option", lambda name: 8502 if name == "server.port" else None)
    ui_url, api_url = ui.share_links(NetworkInfo(ip="192.168.1.20", port=3001))
    assert ui_url == "http://192.168.1.20:8502"
    assert api_url == "http://192.168.1.20:3001"


def test_status_badge_css_class():
    assert 'class="nre-status nre-status-In-Progress"' in ui.status_badge("In Progress")
