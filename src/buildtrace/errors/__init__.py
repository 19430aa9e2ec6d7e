"""
errors subpackage: error taxonomy, configuration and internal logging.

Key primitives
--------------
- BuildError: reportable failure that remembers whether it was already shown
- IgnorableError: failure that must never be reported
- LoggerConfig: layout/debug settings (env + YAML file sources)
- configure_logging(): rich console handler for the "buildtrace" stdlib logger
"""

from .config import ConfigError, LoggerConfig, load_config
from .logging import configure_logging
from .types import BuildError, Diagnostic, IgnorableError, PrintLine

__all__ = [
    "BuildError",
    "IgnorableError",
    "Diagnostic",
    "PrintLine",
    "ConfigError",
    "LoggerConfig",
    "load_config",
    "configure_logging",
]
