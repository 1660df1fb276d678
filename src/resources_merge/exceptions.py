from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(eq=False)
class ResourcesMergeError(Exception):
    message: str
    code: str = "resources_merge_error"
    context: dict[str, Any] = field(default_factory=dict)

    def __init__(self, message: str, *, code: str | None = None, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.code
        self.context = dict(context or {})

    def as_log_fields(self) -> dict[str, Any]:
        return {
            "error_code": self.code,
            "error_message": self.message,
            "error_context": self.context,
        }


class ConfigurationError(ResourcesMergeError):
    code = "configuration_error"


class DiscoveryError(ResourcesMergeError):
    code = "discovery_error"


class WriteError(ResourcesMergeError):
    code = "write_error"


class DeleteError(ResourcesMergeError):
    code = "delete_error"

    def __init__(self, message: str, *, path: str, attempts: int) -> None:
        super().__init__(message, context={"path": path, "attempts": attempts})


class ConfigValidationError(ConfigurationError):
    code = "config_validation_error"


class YamlParseError(ConfigurationError):
    code = "yaml_parse_error"
