from data_logger import DataLogger


def test_events_kept_in_memory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    logger = DataLogger(echo=False)
    logger.log_event("Blink Detected", "Count=1")
    logger.log_event("Blink Detected", "Count=2")
    logger.log_event("Measurement Stopped")

    assert logger.count("Blink Detected") == 2
    assert logger.events[-1][1:] == ("Measurement Stopped", "")
    assert list(tmp_path.iterdir()) == []


def test_echo(capsys):
    DataLogger(echo=True).log_event("Measurement Started", "Duration=60s")
    assert "[LOG]" in capsys.readouterr().out


def test_quiet(capsys):
    DataLogger(echo=False).log_event("Measurement Started")
    assert capsys.readouterr().out == ""


def test_clear():
    logger = DataLogger(echo=False)
    logger.log_event("Detection Error", "boom")
    logger.clear()
    assert logger.events == []
