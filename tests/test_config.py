"""Tests for config loading and the adapter factories."""

from dataclasses import dataclass

import pytest

from unfold.adapters.reports.text_report import TextReport
from unfold.adapters.sources import CooccurrenceSource, EdgeListSource, InMemorySource
from unfold.config import (
    Settings,
    _coerce,
    build_detection_service,
    build_report,
    build_source,
    load_config,
)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestLoadConfig:
    def test_defaults_without_file(self, workdir):
        settings = load_config()
        assert settings.detection.mode == "single"
        assert settings.detection.max_levels == 10
        assert settings.detection.time_budget is None
        assert settings.source.stop_word == "Politique"
        assert settings.report.adapter == "text"
        assert settings.report.coarse is False

    def test_yaml_overrides(self, workdir):
        (workdir / "config.yaml").write_text(
            "detection:\n  mode: multilevel\n  max_levels: 3\n"
            "source:\n  stop_word: Sport\n",
            encoding="utf-8",
        )
        settings = load_config()
        assert settings.detection.mode == "multilevel"
        assert settings.detection.max_levels == 3
        assert settings.source.stop_word == "Sport"
        assert settings.report.adapter == "text"

    def test_empty_yaml(self, workdir):
        (workdir / "config.yaml").write_text("", encoding="utf-8")
        assert load_config().to_dict() == Settings().to_dict()

    def test_unknown_key_ignored(self, workdir, caplog):
        (workdir / "config.yaml").write_text("detection:\n  colour: blue\n", encoding="utf-8")
        settings = load_config()
        assert not hasattr(settings.detection, "colour")
        assert "detection.colour" in caplog.text

    def test_explicit_path(self, workdir):
        path = workdir / "other.yaml"
        path.write_text("report:\n  coarse: true\n", encoding="utf-8")
        assert load_config(str(path)).report.coarse is True

    def test_missing_explicit_path(self, workdir):
        with pytest.raises(FileNotFoundError, match="missing.yaml"):
            load_config("missing.yaml")

    def test_env_overrides_yaml(self, workdir, monkeypatch):
        (workdir / "config.yaml").write_text("detection:\n  mode: single\n", encoding="utf-8")
        monkeypatch.setenv("UNFOLD__DETECTION__MODE", "multilevel")
        monkeypatch.setenv("UNFOLD__DETECTION__MAX_LEVELS", "4")
        monkeypatch.setenv("UNFOLD__DETECTION__TIME_BUDGET", "2.5")
        monkeypatch.setenv("UNFOLD__REPORT__COARSE", "true")

        settings = load_config()
        assert settings.detection.mode == "multilevel"
        assert settings.detection.max_levels == 4
        assert settings.detection.time_budget == 2.5
        assert settings.report.coarse is True

    def test_env_none_clears_time_budget(self, workdir, monkeypatch):
        (workdir / "config.yaml").write_text("detection:\n  time_budget: 5.0\n", encoding="utf-8")
        monkeypatch.setenv("UNFOLD__DETECTION__TIME_BUDGET", "none")
        assert load_config().detection.time_budget is None

    def test_malformed_env_keys_ignored(self, workdir, monkeypatch):
        monkeypatch.setenv("UNFOLD__DETECTION", "multilevel")
        monkeypatch.setenv("UNFOLD__NOPE__MODE", "multilevel")
        monkeypatch.setenv("UNFOLD__DETECTION__NOPE", "x")
        assert load_config().detection.mode == "single"

    def test_dotenv_file(self, workdir, monkeypatch):
        # registered first so teardown removes what load_dotenv sets
        monkeypatch.setenv("UNFOLD__SOURCE__STOP_WORD", "")
        monkeypatch.delenv("UNFOLD__SOURCE__STOP_WORD")
        (workdir / ".env").write_text("UNFOLD__SOURCE__STOP_WORD=Culture\n", encoding="utf-8")
        assert load_config().source.stop_word == "Culture"


class TestFactories:
    def test_detection_service(self):
        settings = Settings()
        settings.detection.mode = "multilevel"
        assert build_detection_service(settings).mode == "multilevel"

    def test_invalid_mode_rejected(self):
        settings = Settings()
        settings.detection.mode = "louvain"
        with pytest.raises(ValueError):
            build_detection_service(settings)

    def test_sources(self, tmp_path):
        settings = Settings()
        settings.source.stop_word = "X"
        assert isinstance(build_source("edges", str(tmp_path / "g.txt"), settings), EdgeListSource)
        assert isinstance(build_source("keywords", str(tmp_path / "a.json"), settings), CooccurrenceSource)
        assert isinstance(build_source("sample", None, settings), InMemorySource)

    def test_unknown_source(self):
        with pytest.raises(ValueError, match="Unknown graph source"):
            build_source("csv", "x.csv", Settings())

    def test_report(self):
        assert isinstance(build_report(Settings()), TextReport)

    def test_unknown_report(self):
        settings = Settings()
        settings.report.adapter = "html"
        with pytest.raises(ValueError, match="Unknown report adapter"):
            build_report(settings)


@dataclass
class _Limits:
    ratio: float | None = None
    count: int = 0
    strict: bool = False
    label: str = "x"


class TestCoerce:
    def test_optional_float_from_declared_type(self):
        assert _coerce(_Limits(), "ratio", "0.5") == 0.5
        assert _coerce(_Limits(ratio=2.0), "ratio", "null") is None

    def test_plain_types(self):
        assert _coerce(_Limits(), "count", "7") == 7
        assert _coerce(_Limits(), "strict", "yes") is True
        assert _coerce(_Limits(), "label", "none") == "none"

    def test_time_budget_set_from_none(self):
        settings = Settings()
        assert settings.detection.time_budget is None
        assert _coerce(settings.detection, "time_budget", "3") == 3.0
        assert isinstance(_coerce(settings.detection, "time_budget", "3"), float)
