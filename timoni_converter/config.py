"""
Converter configuration
"""
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .constants import DEFAULT_MODULE_NAME
from .errors import ConfigError
from .logger import log_info

# DNS-1123 subdomain
MODULE_NAME_PATTERN = re.compile(r'^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$')
MODULE_NAME_MAX_LENGTH = 253


@dataclass
class Config:
    """Settings of one conversion run"""

    module_name: str = ''
    module_dir: str = ''
    verbose: bool = False
    very_verbose: bool = False
    # place CRDs as plain YAML into the module crds/ directory
    crd: bool = False
    # inject an imagePullSecrets value into pods that define none
    image_pull_secrets: bool = False
    # expose tolerations, topologySpreadConstraints and nodeSelector on every pod
    generate_defaults: bool = False
    files: List[str] = field(default_factory=list)
    files_recursively: bool = False
    # keep resource names instead of prefixing them with the instance name
    original_name: bool = False

    def validate(self) -> None:
        """Validate settings, applying the default module name when unset

        Raises:
            ConfigError: If the module name is not a DNS-1123 subdomain
        """
        if not self.module_name:
            log_info(f"Module name is not set, using default '{DEFAULT_MODULE_NAME}'")
            self.module_name = DEFAULT_MODULE_NAME
        if len(self.module_name) > MODULE_NAME_MAX_LENGTH:
            raise ConfigError(
                f"module name '{self.module_name}' must be no more than {MODULE_NAME_MAX_LENGTH} characters")
        if not MODULE_NAME_PATTERN.match(self.module_name):
            raise ConfigError(
                f"module name '{self.module_name}' must consist of lower case alphanumeric characters, "
                f"'-' or '.', and must start and end with an alphanumeric character")

    @classmethod
    def from_file(cls, path: Path) -> 'Config':
        """Load settings from a YAML file with camelCase keys

        Example:
            moduleName: my-app
            imagePullSecrets: true
            files: [manifests/]
        """
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"unable to read config file '{path}': {e}")
        if not isinstance(data, dict):
            raise ConfigError(f"config file '{path}' must contain a mapping")

        known = {_camel(f.name): f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                raise ConfigError(f"unknown key '{key}' in config file '{path}'")
            kwargs[known[key]] = value
        if isinstance(kwargs.get('files'), str):
            kwargs['files'] = [kwargs['files']]
        return cls(**kwargs)

    def override(self, **settings: Optional[Any]) -> 'Config':
        """Apply explicitly set settings on top of this config, ignoring None and False"""
        for key, value in settings.items():
            if value is None or value is False or value == []:
                continue
            setattr(self, key, value)
        return self


def _camel(name: str) -> str:
    head, *tail = name.split('_')
    return head + ''.join(t.capitalize() for t in tail)
