"""
Configuration type definitions and exceptions for gamemaps.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List

from ..errors import ConfigError


class ConfigVersion(Enum):
    """Configuration version for migration support."""
    V1_0 = "1.0"
    V1_1 = "1.1"
    CURRENT = V1_1


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str]
    warnings: List[str]


__all__ = ["ConfigVersion", "ConfigError", "ValidationResult"]
