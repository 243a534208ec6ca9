"""
Settings model - validation of the merged core configuration.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, ValidationError

from easycore.errors import ConfigurationError


class CoreSettings(BaseModel):
    """
    Recognized top-level options. Unknown keys are kept so hosts can carry
    their own settings alongside.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    debug: StrictBool = False
    log_errors_via_console: StrictBool = Field(
        default=True, alias="logErrorsViaConsole"
    )
    modules: dict[str, dict[str, Any] | None] = Field(default_factory=dict)
    extensions: dict[str, Any] = Field(default_factory=dict)


def validate_settings(conf: Mapping[str, Any]) -> CoreSettings:
    """
    Validate a merged configuration.

    Raises ConfigurationError with pydantic's report when it is invalid.
    """
    try:
        return CoreSettings.model_validate(dict(conf))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid core settings:\n{exc}") from exc
