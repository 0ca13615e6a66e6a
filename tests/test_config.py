import importlib


def test_env_overrides_and_validation(monkeypatch, fresh_config):
    monkeypatch.setenv("BOXD_MAX_PAGES", "12")
    monkeypatch.setenv("BOXD_TOP_N", "0")  # should clamp to min
    monkeypatch.setenv("BOXD_HTTP_TIMEOUT", "0.1")  # min clamp
    monkeypatch.setenv("BOXD_HTTP2", "1")

    cfg = importlib.reload(fresh_config)

    assert cfg.MAX_PAGES == 12
    assert cfg.TOP_N == 1
    assert cfg.HTTP_TIMEOUT == 1.0
    assert cfg.SCRAPER_HTTP2 is True


def test_invalid_env_values_fall_back_to_defaults(monkeypatch, fresh_config):
    monkeypatch.setenv("BOXD_MAX_PAGES", "lots")
    monkeypatch.setenv("BOXD_SNIPPET_LENGTH", "long")
    monkeypatch.setenv("BOXD_HTTP_TIMEOUT", "soon")

    cfg = importlib.reload(fresh_config)

    assert cfg.MAX_PAGES == 30
    assert cfg.SNIPPET_LENGTH == 500
    assert cfg.HTTP_TIMEOUT == 30.0


def test_base_url_override_strips_trailing_slash(monkeypatch, fresh_config):
    monkeypatch.setenv("LETTERBOXD_BASE_URL", "http://localhost:9000/")

    cfg = importlib.reload(fresh_config)

    assert cfg.BASE_URL == "http://localhost:9000"


def test_stop_reason_codes(fresh_config):
    assert fresh_config.stop_http_status(429) == "diary_http_429"
    assert fresh_config.STOP_NOT_FOUND == "diary_not_found_or_private"
    assert fresh_config.STOP_NO_ENTRIES_ON_PAGE == "no_entries_on_page"
    assert fresh_config.STOP_NO_ENTRIES_COLLECTED == "no_entries_collected"
    assert fresh_config.STOP_MAX_PAGES == "max_pages_reached"
