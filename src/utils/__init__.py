# Utils package for EvGroup

from .config import (
    AzureManagementConfig,
    EvGroupConfig,
    LogfireConfig,
    load_config,
)

__all__ = [
    "AzureManagementConfig",
    "EvGroupConfig",
    "LogfireConfig",
    "load_config",
]
