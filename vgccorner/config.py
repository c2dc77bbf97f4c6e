"""Configuration for VGC Corner replay analysis.

Structured configs are plain dataclasses; OmegaConf handles YAML files
and command-line style overrides on top of them.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from omegaconf import OmegaConf
from loguru import logger


# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"

# Fixed scoring constants. Previously computed scores depend on these.
DEFAULT_MAX_HP = 100
HP_WEIGHT = 0.6
TEAM_WEIGHT = 0.4


# ====================
# Scoring Configuration
# ====================

@dataclass
class ScoringConfig:
    """Position score and turning point settings."""
    momentum_margin: float = 5.0
    turning_point_threshold: float = 15.0
    ko_significance: int = 8


# ====================
# Parser Configuration
# ====================

@dataclass
class ParserConfig:
    """Replay parser settings."""
    max_log_bytes: Optional[int] = None  # None = unlimited


# ====================
# Logging Configuration
# ====================

@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>"


# ====================
# Main Configuration
# ====================

@dataclass
class AnalysisConfig:
    """Root configuration for replay analysis."""
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    parser: ParserConfig = field(default_factory=ParserConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(
    path: Optional[Path] = None,
    overrides: Optional[List[str]] = None,
) -> AnalysisConfig:
    """Load configuration from an optional YAML file plus overrides.

    Args:
        path: YAML file to merge over the defaults
        overrides: Dotlist overrides (e.g., ["scoring.momentum_margin=10"])

    Returns:
        Loaded configuration as AnalysisConfig
    """
    cfg = OmegaConf.structured(AnalysisConfig())

    if path is not None:
        cfg = OmegaConf.merge(cfg, OmegaConf.load(path))
        logger.debug(f"Merged config from {path}")

    if overrides:
        cfg = OmegaConf.merge(cfg, OmegaConf.from_dotlist(list(overrides)))

    return OmegaConf.to_object(cfg)


def save_config(cfg: AnalysisConfig, path: Path):
    """Save configuration to YAML file.

    Args:
        cfg: Configuration to save
        path: Output path
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    OmegaConf.save(OmegaConf.structured(cfg), path)
    logger.info(f"Saved config to {path}")
