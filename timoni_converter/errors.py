"""
Error types raised while converting manifests into a Timoni module
"""
from typing import Any, Dict, Optional


class TimonifyError(Exception):
    """Base class for all conversion errors"""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason

    def __str__(self):
        return self.reason


class ConfigError(TimonifyError):
    """Invalid converter configuration"""

    def __str__(self):
        return f"Invalid configuration: {self.reason}"


class ProcessingError(TimonifyError):
    """A resource could not be converted.

    Raised by processors for structural problems in a manifest. The whole
    run is aborted and no module is written.
    """

    def __init__(self, reason: str, resource: Optional[Dict[str, Any]] = None):
        super().__init__(reason)
        self.resource = resource

    def __str__(self):
        if not self.resource:
            return self.reason
        return f"{describe(self.resource)}: {self.reason}"


class ImageFormatError(ProcessingError):
    """Container image reference without a tag or digest separator"""

    def __init__(self, image: str):
        super().__init__(f"wrong image format: {image!r}")
        self.image = image


class ValuesConflictError(ProcessingError):
    """A values path descends through an existing leaf"""

    def __init__(self, path, existing: Any):
        super().__init__(
            f"unable to set {'.'.join(path)}: conflicts with existing value {existing!r}"
        )
        self.path = list(path)


def describe(obj: Dict[str, Any]) -> str:
    """Short human readable identity of a manifest, e.g. apps/v1 Deployment default/nginx"""
    meta = obj.get('metadata') or {}
    name = meta.get('name', '')
    if meta.get('namespace'):
        name = f"{meta['namespace']}/{name}"
    return f"{obj.get('apiVersion', '')} {obj.get('kind', '')} {name}".strip()
