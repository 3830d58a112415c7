from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml

DEFAULT_SUBJECT = "data structures and algorithms"


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default)


@dataclass
class GeneratorConfig:
    """Chat-completions endpoint and sampling settings.

    The API key is passed through unchecked; an empty key surfaces as an
    authorization failure from the endpoint.
    """

    api_key: str = field(default_factory=lambda: _env("OPENAI_API_KEY"))
    base_url: str = field(default_factory=lambda: _env("OPENAI_BASE_URL", "https://api.openai.com/v1"))
    model: str = field(default_factory=lambda: _env("QUIZ_MODEL", "gpt-4o"))
    subject: str = field(default_factory=lambda: _env("QUIZ_SUBJECT", DEFAULT_SUBJECT))
    temperature: float = 0.7
    max_tokens: int = 1000
    timeout: float = 60.0


@dataclass
class StoreConfig:
    coalesce: bool = False


@dataclass
class LoggingConfig:
    level: str = "INFO"
    log_dir: str = "logs"
    filename: str = "quizcache.log"
    structured: bool = False

    def file_path(self) -> Path:
        return Path(self.log_dir) / self.filename


@dataclass
class AppConfig:
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @staticmethod
    def from_dict(payload: Dict[str, Any]) -> "AppConfig":
        if not isinstance(payload, dict):
            raise ValueError(f"Config must be a mapping, got {type(payload).__name__}")
        try:
            return AppConfig(
                generator=GeneratorConfig(**(payload.get("generator") or {})),
                store=StoreConfig(**(payload.get("store") or {})),
                logging=LoggingConfig(**(payload.get("logging") or {})),
            )
        except TypeError as e:
            raise ValueError(f"Invalid config section: {e}") from e

    @staticmethod
    def from_json(path: str | Path) -> "AppConfig":
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
        return AppConfig.from_dict(payload)

    @staticmethod
    def from_yaml(path: str | Path) -> "AppConfig":
        with open(path, "r", encoding="utf-8") as f:
            try:
                payload = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
        return AppConfig.from_dict(payload)

    @staticmethod
    def from_file(path: str | Path) -> "AppConfig":
        """Load a config file, choosing the parser by suffix."""
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"Config file not found: {p}")
        if p.suffix in {".yaml", ".yml"}:
            return AppConfig.from_yaml(p)
        if p.suffix == ".json":
            return AppConfig.from_json(p)
        raise ValueError(f"Expected .json, .yaml or .yml config, got: {p.suffix}")

    def to_dict(self, redact: bool = True) -> Dict[str, Any]:
        generator = asdict(self.generator)
        if redact and generator["api_key"]:
            generator["api_key"] = "***"
        return {
            "generator": generator,
            "store": asdict(self.store),
            "logging": asdict(self.logging),
        }

    def to_json(self, path: str | Path, redact: bool = True) -> None:
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        with open(p, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(redact=redact), f, indent=2, ensure_ascii=False)


def default_app_config() -> AppConfig:
    return AppConfig()
