"""Configuration loading for the echoes visualizer."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


def _default_api_url() -> str:
    return os.environ.get("ECHOES_API_URL", "http://localhost:8000")


class ApiConfig(BaseModel):
    base_url: str = Field(default_factory=_default_api_url)
    timeout: float = 5.0  # seconds
    top_n: int = 10
    offline: bool = False  # skip the backend, use bundled datasets only


class SimulationConfig(BaseModel):
    iterations: int = 3  # sub-iterations per frame
    k_center: float = 0.001
    k_repulsion: float = 100.0
    k_link: float = 0.01
    rest_length: float = 100.0
    damping: float = 0.85
    seed: int | None = None


class RenderConfig(BaseModel):
    width: int = 600
    height: int = 400
    scale: float = 1.0  # device pixel ratio
    background: str = "#0f172a"
    edge_color: tuple[int, int, int] = (6, 182, 212)
    label_color: str = "#e2e8f0"
    hover_color: str = "#ffffff"
    fallback_node_color: str = "#06b6d4"
    font_size: int = 12
    hover_font_size: int = 14
    label_offset: int = 15
    hover_scale: float = 1.2
    glow_alpha: int = 0x40
    glow_steps: int = 12


class OutputConfig(BaseModel):
    output_dir: str = "output"
    frames: int = 120  # frames simulated before a still is captured
    frames_per_year: int = 45
    frame_duration_ms: int = 33


class Config(BaseModel):
    default_year: int = 2020
    api: ApiConfig = Field(default_factory=ApiConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @property
    def resolved_output_dir(self) -> Path:
        """Resolve output_dir relative to project root."""
        p = Path(self.output.output_dir).expanduser()
        if p.is_absolute():
            return p
        return _project_root() / p


def _project_root() -> Path:
    """Return the echoes project root directory."""
    return Path(__file__).parent.parent


def load_config(config_path: Path | None = None) -> Config:
    """Load config from YAML file. Falls back to defaults if file missing."""
    if config_path is None:
        config_path = _project_root() / "config.yaml"

    if config_path.exists():
        raw: dict[str, Any] = yaml.safe_load(config_path.read_text()) or {}
        return Config(**raw)

    return Config()
