"""
Manifest Reader Module

Reads Kubernetes manifests from files, directories or a stream and decodes
them into plain dicts.
"""
import re
import sys
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, TextIO

import yaml

from .logger import log_debug, log_warning

DOCUMENT_SEPARATOR = re.compile(r'^---[ \t]*(?:#.*)?$', re.MULTILINE)
MANIFEST_SUFFIXES = ('.yaml', '.yml')


class ManifestReader:
    """Reads Kubernetes manifests from files, directories or stdin"""

    def __init__(self, files: Optional[List[str]] = None, recursive: bool = False):
        """Initialize ManifestReader

        Args:
            files: Manifest files or directories, stdin is read when empty
            recursive: Descend into subdirectories of given directories
        """
        self.files = files or []
        self.recursive = recursive

    def read(self, stream: Optional[TextIO] = None) -> Iterator[Dict[str, Any]]:
        """Yield every valid manifest in input order"""
        if not self.files:
            yield from self.read_stream(stream or sys.stdin, '<stdin>')
            return
        for path in self.manifest_files():
            with open(path, 'r') as f:
                yield from self.read_stream(f, str(path))

    def manifest_files(self) -> List[Path]:
        """Expand configured files and directories into manifest files

        Raises:
            FileNotFoundError: If a configured path does not exist
        """
        result = []
        for file in self.files:
            path = Path(file)
            if not path.exists():
                raise FileNotFoundError(f"Manifest file not found: {path}")
            if path.is_file():
                result.append(path)
                continue
            pattern = '**/*' if self.recursive else '*'
            result.extend(sorted(
                p for p in path.glob(pattern) if p.is_file() and p.suffix in MANIFEST_SUFFIXES
            ))
        return result

    def read_stream(self, stream: TextIO, source: str) -> Iterator[Dict[str, Any]]:
        """Decode a multi document YAML stream.

        Documents that fail to parse or do not look like Kubernetes objects
        are skipped with a warning.
        """
        for index, document in enumerate(DOCUMENT_SEPARATOR.split(stream.read())):
            if not document.strip():
                continue
            try:
                obj = yaml.safe_load(document)
            except yaml.YAMLError as e:
                log_warning(f"Skipping malformed document {index} in {source}: {e}")
                continue
            yield from self._objects(obj, f"document {index} in {source}")

    def _objects(self, obj: Any, where: str) -> Iterator[Dict[str, Any]]:
        if obj is None:
            return
        if not isinstance(obj, dict):
            log_warning(f"Skipping {where}: not a mapping")
            return
        if not obj.get('apiVersion') or not obj.get('kind'):
            log_warning(f"Skipping {where}: apiVersion and kind are required")
            return
        # kubectl output wraps objects into a List
        if obj['kind'] == 'List' or (obj['kind'].endswith('List') and 'items' in obj):
            for item in obj.get('items') or []:
                yield from self._objects(item, where)
            return
        if not (obj.get('metadata') or {}).get('name'):
            log_warning(f"Skipping {where}: metadata.name is required")
            return
        log_debug(f"Read {obj['kind']} {obj['metadata']['name']} from {where}")
        yield obj
