"""Extractor configuration management."""

import json
import os
import shutil
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from filemeta.core.enums import LogLevel, TikaMode

DEFAULT_ASSET_ROOT = Path(__file__).resolve().parent.parent / "resources" / "public"


def _tool_default(name: str, executable: str) -> Optional[str]:
    """Resolve a tool path from FILEMETA_TOOLS_<NAME> or the PATH."""
    return os.getenv(f"FILEMETA_TOOLS_{name.upper()}") or shutil.which(executable)


class StorageLocation(BaseModel):
    """A storage addressed by ``file:<id>:<path>`` references."""

    base_path: str
    base_url: str = ""
    name: Optional[str] = None

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class ExtractorConfig(BaseModel):
    """Settings shared by every extraction backend.

    The object is read-only once loaded; each backend receives it at
    construction time.
    """

    # Env-derived defaults go through the same validators as explicit values
    model_config = ConfigDict(validate_default=True)

    # Subprocess tools
    tools_exiftool: Optional[str] = Field(default_factory=lambda: _tool_default("exiftool", "exiftool"))
    tools_pdfinfo: Optional[str] = Field(default_factory=lambda: _tool_default("pdfinfo", "pdfinfo"))
    tools_java: Optional[str] = Field(default_factory=lambda: _tool_default("java", "java"))
    tools_tika: Optional[str] = Field(default_factory=lambda: os.getenv("FILEMETA_TOOLS_TIKA"))

    # Tika
    tika_mode: TikaMode = Field(
        default_factory=lambda: os.getenv("FILEMETA_TIKA_MODE", TikaMode.SERVER.value),
        description="Reach Tika through a running server or the tika-app jar",
    )
    service_tika_url: str = Field(
        default_factory=lambda: os.getenv("FILEMETA_SERVICE_TIKA_URL", "http://localhost:9998"),
    )

    timeout: float = Field(default=30.0, gt=0, description="Upper bound in seconds for any tool or service call")
    preview_width: int = Field(default=300, gt=0, description="Width of the preview image markup")

    # File resolution
    asset_root: str = Field(default_factory=lambda: str(DEFAULT_ASSET_ROOT))
    asset_base_url: str = "/_assets/filemeta"
    storages: dict[int, StorageLocation] = Field(default_factory=dict)

    debug: bool = False
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")

    @field_validator("tika_mode", mode="before")
    @classmethod
    def validate_tika_mode(cls, v):
        """Validate Tika mode."""
        if isinstance(v, str):
            try:
                return TikaMode(v.lower())
            except ValueError:
                raise ValueError(f"Invalid Tika mode: {v}")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        if isinstance(v, str):
            try:
                return LogLevel(v.upper())
            except ValueError:
                raise ValueError(f"Invalid log level: {v}")
        return v

    @field_validator("service_tika_url", "asset_base_url")
    @classmethod
    def normalize_url(cls, v: str) -> str:
        return v.rstrip("/")

    @model_validator(mode="after")
    def apply_debug_level(self):
        if self.debug:
            self.log_level = LogLevel.DEBUG
        return self

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "ExtractorConfig":
        """Create config from dictionary."""
        return cls(**config_dict)

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "ExtractorConfig":
        """Load config from file (JSON/YAML)."""
        config_path = Path(config_path)

        if config_path.suffix.lower() == ".json":
            with open(config_path) as f:
                config_dict = json.load(f)
        elif config_path.suffix.lower() in [".yaml", ".yml"]:
            with open(config_path) as f:
                config_dict = yaml.safe_load(f) or {}
        else:
            raise ValueError(f"Unsupported config file format: {config_path.suffix}")

        return cls.from_dict(config_dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to a plain, serializable dictionary."""
        return self.model_dump(mode="json")

    def save(self, config_path: Union[str, Path]) -> None:
        """Save config to file."""
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        if config_path.suffix.lower() == ".json":
            with open(config_path, "w") as f:
                json.dump(self.to_dict(), f, indent=2)
        elif config_path.suffix.lower() in [".yaml", ".yml"]:
            with open(config_path, "w") as f:
                yaml.safe_dump(self.to_dict(), f, default_flow_style=False)
        else:
            raise ValueError(f"Unsupported config file format: {config_path.suffix}")
