"""
Control plane configuration loaded from YAML
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/config.yaml"


@dataclass
class ControlPlaneConfig:
    """Settings for store, naming, analytics, simulated latency and logging"""
    storage_backend: str = "memory"  # memory or file
    storage_path: str = "data/console"
    domain_suffix: str = "ediworks.com"
    distinguished_tenant: str = "acme"
    random_seed: Optional[int] = None
    latency_scale: float = 1.0  # 0 disables simulated waits
    default_latency_ms: int = 300
    log_level: str = "INFO"
    max_call_log_entries: int = 50

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ControlPlaneConfig":
        storage = data.get('storage', {}) or {}
        domain = data.get('domain', {}) or {}
        analytics = data.get('analytics', {}) or {}
        latency = data.get('latency', {}) or {}
        logging_config = data.get('logging', {}) or {}
        call_log = data.get('call_log', {}) or {}

        defaults = cls()
        return cls(
            storage_backend=storage.get('backend', defaults.storage_backend),
            storage_path=storage.get('path', defaults.storage_path),
            domain_suffix=domain.get('suffix', defaults.domain_suffix),
            distinguished_tenant=analytics.get('distinguished_tenant', defaults.distinguished_tenant),
            random_seed=analytics.get('seed', defaults.random_seed),
            latency_scale=float(latency.get('scale', defaults.latency_scale)),
            default_latency_ms=int(latency.get('default_ms', defaults.default_latency_ms)),
            log_level=str(logging_config.get('level', defaults.log_level)).upper(),
            max_call_log_entries=int(call_log.get('max_entries', defaults.max_call_log_entries)),
        )


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> ControlPlaneConfig:
    """Load configuration from YAML file, falling back to defaults when it is missing"""
    path = Path(config_path)
    if not path.exists():
        logger.debug(f"No config file at {config_path}, using defaults")
        return ControlPlaneConfig()

    with open(path, 'r') as f:
        data = yaml.safe_load(f) or {}
    return ControlPlaneConfig.from_dict(data)
