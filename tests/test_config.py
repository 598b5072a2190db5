from navforge.config import Settings


def test_settings_defaults():
    settings = Settings()
    assert settings.max_events == 100
    assert settings.store_path is None
    assert settings.director_defaults().hysteresis_margin == 0.08


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("NAVFORGE_HYSTERESIS_MARGIN", "0.3")
    monkeypatch.setenv("NAVFORGE_PREFER_DOM_ON_TIE", "false")
    monkeypatch.setenv("NAVFORGE_VISION_SCORE_OFFSET", "4")
    settings = Settings()
    defaults = settings.director_defaults()
    assert defaults.hysteresis_margin == 0.3
    assert defaults.prefer_dom_on_tie is False
    assert defaults.vision_score_offset == 1.0
