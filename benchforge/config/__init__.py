from .loader import load_config
from .types import BenchmarkConfig, ConfigError, HarnessConfig

__all__ = ["load_config", "HarnessConfig", "BenchmarkConfig", "ConfigError"]
