"""Configuration loading and adapter factory.

Reads a YAML config file, overlays environment variables, and builds the
graph source, the report adapter and the detection service from it.

Env vars take precedence over YAML values and are also read from a
``.env`` file in the working directory.  Naming: UNFOLD__{SECTION}__{KEY},
e.g. ``UNFOLD__DETECTION__MODE=multilevel`` overrides ``detection.mode``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, get_args, get_type_hints

import yaml
from dotenv import load_dotenv

from unfold.adapters.sources.cooccurrence import DEFAULT_STOP_WORD
from unfold.ports.graph_source import GraphSourcePort
from unfold.ports.report import ReportPort
from unfold.services.community_detection import CommunityDetectionService

log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.yaml"
ENV_PREFIX = "UNFOLD__"


@dataclass
class DetectionConfig:
    mode: str = "single"
    max_levels: int = 10
    time_budget: float | None = None  # seconds, checked between levels


@dataclass
class SourceConfig:
    stop_word: str = DEFAULT_STOP_WORD


@dataclass
class ReportConfig:
    adapter: str = "text"
    coarse: bool = False


@dataclass
class Settings:
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    source: SourceConfig = field(default_factory=SourceConfig)
    report: ReportConfig = field(default_factory=ReportConfig)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def load_config(path: str = DEFAULT_CONFIG_PATH) -> Settings:
    """Load settings from *path* with the env var overlay.

    The default path may be absent (defaults apply); any other path must
    exist.
    """
    load_dotenv(Path.cwd() / ".env")
    settings = Settings()

    p = Path(path)
    if p.exists():
        with open(p) as f:
            yaml_config = yaml.safe_load(f) or {}
        _apply_yaml(settings, yaml_config)
    elif path != DEFAULT_CONFIG_PATH:
        raise FileNotFoundError(f"Config file not found: {path}")
    else:
        log.debug("No %s found, using defaults", path)

    _apply_env_vars(settings)
    return settings


def _sections(settings: Settings) -> dict[str, Any]:
    return {
        "detection": settings.detection,
        "source": settings.source,
        "report": settings.report,
    }


def _apply_yaml(settings: Settings, yaml_config: dict[str, Any]) -> None:
    for name, section in _sections(settings).items():
        values = yaml_config.get(name) or {}
        for key, value in values.items():
            if hasattr(section, key):
                setattr(section, key, value)
            else:
                log.warning("Ignoring unknown config key %s.%s", name, key)


def _apply_env_vars(settings: Settings) -> None:
    """Apply environment variable overrides. Format: UNFOLD__SECTION__KEY."""
    sections = _sections(settings)
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue

        parts = key[len(ENV_PREFIX):].lower().split("__")
        if len(parts) != 2:
            continue

        section_name, field_name = parts
        section = sections.get(section_name)
        if section is None or field_name not in _field_types(section):
            continue
        setattr(section, field_name, _coerce(section, field_name, value))


def _field_types(section: Any) -> dict[str, Any]:
    hints = get_type_hints(type(section))
    return {f.name: hints[f.name] for f in fields(section)}


def _coerce(section: Any, field_name: str, value: str) -> Any:
    """Convert an env var string to the declared type of the field it overrides."""
    declared = _field_types(section)[field_name]
    args = get_args(declared)
    if type(None) in args:
        if value.lower() in ("", "none", "null"):
            return None
        declared = next(a for a in args if a is not type(None))

    if declared is bool:
        return value.lower() in ("true", "1", "yes")
    if declared in (int, float):
        return declared(value)
    return value


# ── Adapter factories ──


def build_detection_service(settings: Settings) -> CommunityDetectionService:
    det = settings.detection
    return CommunityDetectionService(
        mode=det.mode,
        max_levels=det.max_levels,
        time_budget=det.time_budget,
    )


def build_source(kind: str, path: str | None, settings: Settings) -> GraphSourcePort:
    if kind == "edges":
        from unfold.adapters.sources.edge_list import EdgeListSource
        return EdgeListSource(path)

    elif kind == "keywords":
        from unfold.adapters.sources.cooccurrence import CooccurrenceSource
        return CooccurrenceSource(path, stop_word=settings.source.stop_word)

    elif kind == "sample":
        from unfold.adapters.sources.in_memory import InMemorySource
        return InMemorySource()

    raise ValueError(f"Unknown graph source: {kind}")


def build_report(settings: Settings) -> ReportPort:
    adapter = settings.report.adapter

    if adapter == "text":
        from unfold.adapters.reports.text_report import TextReport
        return TextReport()

    raise ValueError(f"Unknown report adapter: {adapter}")
