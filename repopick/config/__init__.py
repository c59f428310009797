from .loader import DEFAULT_CONFIG_TEMPLATE, load_config
from .models import (
    OutputConfig,
    RepopickConfig,
    ServerConfig,
    VCSConfig,
)

__all__ = [
    "DEFAULT_CONFIG_TEMPLATE",
    "OutputConfig",
    "RepopickConfig",
    "ServerConfig",
    "VCSConfig",
    "load_config",
]
