from nre_tracker import theme


def test_set_theme():
    try:
        assert theme.set_theme(page_title="Test") is True
    except Exception as e:
        assert False, f"set_theme raised an exception: {e}"


def test_set_theme_missing_css(tmp_path):
    assert theme.set_theme(theme_file=str(tmp_path / "missing.css")) is False
