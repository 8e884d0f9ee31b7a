from .factory import build_processor, make_include_resolver
from .load import load_config
from .model import LGateConfig
from .paths import CFG_FILE, find_config

__all__ = [
    "build_processor",
    "make_include_resolver",
    "load_config",
    "LGateConfig",
    "CFG_FILE",
    "find_config",
]
