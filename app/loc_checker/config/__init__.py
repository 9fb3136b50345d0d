from .constants import *  # noqa: F401,F403
from .constants import __all__ as _constants_all
from .environment import CheckerEnvironment, get_checker_environment
from .settings import CheckerConfig, CheckerConfigSchema, load_config, validate_config

__all__ = [
    *_constants_all,
    "CheckerConfig",
    "CheckerConfigSchema",
    "CheckerEnvironment",
    "get_checker_environment",
    "load_config",
    "validate_config",
]
