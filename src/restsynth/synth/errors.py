from __future__ import annotations

from typing import Any, Optional


class RestSynthError(Exception):
    """Base exception for all restsynth errors."""

    def __init__(self, message: str, data: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.data = data or {}

    def to_dict(self) -> dict[str, Any]:
        return {"type": type(self).__name__, "message": self.message, "data": self.data}


class DescriptorError(RestSynthError):
    """A descriptor file could not be read or validated."""

    def __init__(self, message: str, path: str):
        super().__init__(f"{path}: {message}", {"path": path})
        self.path = path


class SynthesisError(RestSynthError):
    """Synthesis of an interface was aborted.

    Carries enough context (interface, method, parameter) to locate the
    offending metadata.
    """

    def __init__(
        self,
        message: str,
        interface_name: Optional[str] = None,
        method_name: Optional[str] = None,
        parameter_name: Optional[str] = None,
    ):
        self.reason = message
        self.interface_name = interface_name
        self.method_name = method_name
        self.parameter_name = parameter_name
        super().__init__(
            self._format(message),
            {
                "interface": interface_name,
                "method": method_name,
                "parameter": parameter_name,
            },
        )

    def _format(self, message: str) -> str:
        where = ".".join(p for p in (self.interface_name, self.method_name) if p)
        if self.parameter_name:
            where = f"{where}({self.parameter_name})" if where else self.parameter_name
        return f"{where}: {message}" if where else message

    def with_interface(self, interface_name: str) -> SynthesisError:
        """Return a copy of this error scoped to ``interface_name``."""
        return type(self)(
            self.reason,
            interface_name=self.interface_name or interface_name,
            method_name=self.method_name,
            parameter_name=self.parameter_name,
        )


class MalformedMetadataError(SynthesisError):
    """Route metadata that cannot be turned into a method body."""


class InvalidClientNameError(SynthesisError):
    """The interface has no usable client logical name."""
