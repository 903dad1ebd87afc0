"""
Error types for the cable sizing engine.

SizingError subclasses are caller-input errors or legitimate domain outcomes and
are surfaced to the UI. ReferenceTableError and ConfigurationError indicate a
broken installation and are not handled per call.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Level(str, Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


@dataclass(frozen=True)
class Issue:
    level: Level
    code: str
    message: str
    field: Optional[str] = None
    hint: Optional[str] = None


class SizingError(ValueError):
    code = "SIZING_ERROR"
    field: Optional[str] = None
    level = Level.ERROR

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.hint = hint

    def to_issue(self) -> Issue:
        return Issue(level=self.level, code=self.code, message=self.message,
                     field=self.field, hint=self.hint)


class InvalidLoad(SizingError):
    code = "INVALID_LOAD"
    field = "load_amps"


class InvalidLength(SizingError):
    code = "INVALID_LENGTH"
    field = "total_length_meters"


class UnsupportedVoltage(SizingError):
    code = "UNSUPPORTED_VOLTAGE"
    field = "voltage"


class InvalidDeratingFactor(SizingError):
    code = "INVALID_DERATING_FACTOR"
    field = "derating_factor"


class UnknownMaterial(SizingError):
    code = "UNKNOWN_MATERIAL"
    field = "material"


class UnknownInstallationMethod(SizingError):
    code = "UNKNOWN_INSTALLATION_METHOD"
    field = "installation_method"


class NoFeasibleConfiguration(SizingError):
    code = "NO_FEASIBLE_CONFIGURATION"
    level = Level.WARNING


class ReferenceTableError(RuntimeError):
    """Reference data is empty or breaks the ordering the optimizer relies on."""


class ConfigurationError(RuntimeError):
    pass
