"""Pipeline configuration management.

Supports JSON and YAML config files for reproducible analyses.
Configuration is merged against ``DEFAULT_CONFIG`` so partial
overrides work seamlessly.

The ``analysis`` section maps one-to-one onto :class:`AnalysisConfig`,
the immutable value threaded through every analysis function.

Functions
---------
load_config
    Load pipeline config from a JSON or YAML file.
save_config
    Save pipeline config to a JSON or YAML file.
analysis_config_from
    Build an ``AnalysisConfig`` from a (merged) config dict.

Attributes
----------
DEFAULT_CONFIG : dict
    Default configuration values for all pipeline stages.
"""

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisConfig:
    """Tunable constants of the swing analysis.

    Attributes
    ----------
    momentum_window : int
        Moving-average window applied to segment momentum (samples).
    energy_window : int
        Moving-average window applied to total kinetic energy before
        contact detection.
    velocity_window : int
        Moving-average window applied to differentiated velocity.
    analysis_window_ms : float
        Length of the pre-contact window searched for segment peaks.
    peak_threshold_ratio : float
        Local maxima must exceed this fraction of the window maximum.
    min_peak_window : int
        Windows shorter than this return their start as the peak.
    decel_ratio : float
        A segment decelerates when its contact velocity is below this
        fraction of its peak velocity.
    weak_signal_ratio : float
        Torso momentum below this fraction of pelvis momentum is flagged.
    sequence_tolerance_s : float
        Peak ordering tolerance, in seconds.
    transfer_epsilon : float
        Pelvis peak velocities at or below this give a zero ratio.
    min_samples : int
        Movements with fewer samples are skipped.
    default_sample_rate : int
        Fallback sample rate (Hz) when timestamps are unusable.
    """

    momentum_window: int = 11
    energy_window: int = 9
    velocity_window: int = 7
    analysis_window_ms: float = 500.0
    peak_threshold_ratio: float = 0.3
    min_peak_window: int = 10
    decel_ratio: float = 0.5
    weak_signal_ratio: float = 0.1
    sequence_tolerance_s: float = 0.015
    transfer_epsilon: float = 0.01
    min_samples: int = 50
    default_sample_rate: int = 300
    data_quality_confidence: float = 0.9
    sequence_issue_confidence: float = 0.8
    default_confidence: float = 0.5
    decel_confidence_bonus: float = 0.1
    max_confidence: float = 0.95

    def __post_init__(self):
        for name in ("momentum_window", "energy_window", "velocity_window"):
            if int(getattr(self, name)) < 1:
                raise ValueError(f"{name} must be >= 1")
        if self.analysis_window_ms < 0:
            raise ValueError("analysis_window_ms must be non-negative")
        if self.default_sample_rate <= 0:
            raise ValueError("default_sample_rate must be positive")

    @classmethod
    def from_dict(cls, values: Optional[dict]) -> "AnalysisConfig":
        """Create a config from a dict, rejecting unknown keys."""
        if not values:
            return cls()
        if not isinstance(values, dict):
            raise TypeError("analysis config must be a dict")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown analysis config keys: {unknown}")
        return cls(**values)

    def to_dict(self) -> dict:
        return asdict(self)


DEFAULT_CONFIG = {
    "analysis": AnalysisConfig().to_dict(),
    "export": {
        "csv": False,
        "prefix": "swings",
        "indent": 2,
    },
}


def load_config(path: Union[str, Path]) -> dict:
    """Load pipeline config from a JSON or YAML file.

    The loaded configuration is merged against ``DEFAULT_CONFIG``
    so partial overrides work correctly.

    Parameters
    ----------
    path : str or Path
        Path to config file (``.json`` or ``.yaml``/``.yml``).

    Returns
    -------
    dict
        Merged configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If the config file does not exist.
    ValueError
        If the file content is not a dict.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        try:
            import yaml
            with open(path) as f:
                cfg = yaml.safe_load(f)
        except ImportError:
            raise ImportError("PyYAML required for YAML configs: pip install pyyaml")
    else:
        with open(path) as f:
            cfg = json.load(f)

    if not isinstance(cfg, dict):
        raise ValueError("Config must be a dict")

    merged = _deep_merge(DEFAULT_CONFIG.copy(), cfg)
    logger.info(f"Loaded config from {path}")
    return merged


def save_config(config: dict, path: Union[str, Path]) -> str:
    """Save pipeline config to a JSON or YAML file.

    Parameters
    ----------
    config : dict or AnalysisConfig
        Configuration dictionary. An ``AnalysisConfig`` is saved as the
        ``analysis`` section of the defaults.
    path : str or Path
        Output file path (``.json`` or ``.yaml``/``.yml``).

    Returns
    -------
    str
        Path to the saved file.
    """
    if isinstance(config, AnalysisConfig):
        config = _deep_merge(DEFAULT_CONFIG, {"analysis": config.to_dict()})

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        try:
            import yaml
            with open(path, "w") as f:
                yaml.dump(config, f, default_flow_style=False, sort_keys=False)
        except ImportError:
            raise ImportError("PyYAML required for YAML configs: pip install pyyaml")
    else:
        with open(path, "w") as f:
            json.dump(config, f, indent=2, ensure_ascii=False)

    logger.info(f"Saved config to {path}")
    return str(path)


def analysis_config_from(config: Optional[dict]) -> AnalysisConfig:
    """Build an ``AnalysisConfig`` from a full config dict.

    Accepts either a full config (with an ``analysis`` section), a bare
    analysis section, an existing ``AnalysisConfig`` or ``None``.
    """
    if config is None:
        return AnalysisConfig()
    if isinstance(config, AnalysisConfig):
        return config
    if not isinstance(config, dict):
        raise TypeError("config must be a dict or AnalysisConfig")
    if any(k in DEFAULT_CONFIG for k in config):
        # Full config: only the analysis section is relevant here
        return AnalysisConfig.from_dict(config.get("analysis"))
    return AnalysisConfig.from_dict(config)


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base."""
    result = base.copy()
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result
