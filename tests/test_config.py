from parking_lot.config import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("PARKING_INITIAL_SLOTS", raising=False)
    settings = Settings(_env_file=None)
    assert settings.initial_slots == 0
    assert settings.port == 8000
    assert settings.app_title == "Parking Lot API"


def test_reads_prefixed_environment(monkeypatch):
    monkeypatch.setenv("PARKING_INITIAL_SLOTS", "12")
    monkeypatch.setenv("PARKING_LOG_LEVEL", "debug")
    settings = Settings(_env_file=None)
    assert settings.initial_slots == 12
    assert settings.log_level == "debug"
