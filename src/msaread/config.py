"""
msaread Configuration Module

Centralized configuration for the msaread command-line tool.
Supports environment variables and sensible defaults.

Configuration Priority (highest to lowest):
1. Explicit command-line arguments
2. Environment variables
3. Defaults

Environment Variables:
    MSAREAD_FORMAT         - Default input format (fasta, phylip, nexus)
    MSAREAD_EXPORT_FORMAT  - Default output format for --convert
    MSAREAD_LOG_FILE       - Path to a log file
    MSAREAD_VERBOSE        - Enable debug logging (1/true/yes)

The parsing functions never read this configuration; only the CLI does.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from msaread.formats.models import FileFormat

logger = logging.getLogger(__name__)

# Singleton config instance
_config_instance: Optional["Config"] = None

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class Config:
    """
    msaread configuration container.

    Attributes:
        default_format: Input format to force when -f is not given
        export_format: Output format for --convert when not given
        log_file: Optional log file path
        verbose: Enable debug logging
    """

    default_format: Optional[FileFormat] = None
    export_format: FileFormat = FileFormat.FASTA
    log_file: Optional[Path] = None
    verbose: bool = False

    # Internal state
    _initialized: bool = field(default=False, repr=False)

    def __post_init__(self):
        """Initialize configuration from environment."""
        if not self._initialized:
            self._load_from_environment()
            self._initialized = True

    def _load_from_environment(self) -> None:
        """Load configuration from environment variables."""

        if os.environ.get("MSAREAD_FORMAT"):
            try:
                self.default_format = FileFormat.from_name(os.environ["MSAREAD_FORMAT"])
            except ValueError:
                logger.debug("Ignoring invalid MSAREAD_FORMAT=%s", os.environ["MSAREAD_FORMAT"])

        if os.environ.get("MSAREAD_EXPORT_FORMAT"):
            try:
                self.export_format = FileFormat.from_name(os.environ["MSAREAD_EXPORT_FORMAT"])
            except ValueError:
                logger.debug("Ignoring invalid MSAREAD_EXPORT_FORMAT=%s", os.environ["MSAREAD_EXPORT_FORMAT"])

        if os.environ.get("MSAREAD_LOG_FILE"):
            self.log_file = Path(os.environ["MSAREAD_LOG_FILE"])

        if os.environ.get("MSAREAD_VERBOSE"):
            self.verbose = os.environ["MSAREAD_VERBOSE"].strip().lower() in _TRUE_VALUES

    def validate(self) -> tuple[bool, list[str]]:
        """
        Validate configuration.

        Returns:
            Tuple of (is_valid, list of error messages)
        """
        errors = []

        if self.log_file and not self.log_file.parent.exists():
            errors.append(f"Log file directory not found: {self.log_file.parent}")

        return len(errors) == 0, errors

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return {
            "default_format": self.default_format.value if self.default_format else None,
            "export_format": self.export_format.value,
            "log_file": str(self.log_file) if self.log_file else None,
            "verbose": self.verbose,
        }


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Config: The singleton configuration instance
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance


def reset_config() -> None:
    """Reset the global configuration instance (useful for testing)."""
    global _config_instance
    _config_instance = None
