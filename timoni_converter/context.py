"""
Conversion context

Collects all manifests of a run, dispatches each one to the processor that
claims it and hands the resulting templates to the module generator.
"""
import threading
from typing import Any, Dict, List, Optional

from .config import Config
from .constants import CLUSTER_DOMAIN_KEY, DEFAULT_CLUSTER_DOMAIN
from .errors import ProcessingError, describe
from .logger import log_debug, log_info, log_warning
from .metadata import AppMetadata, gvk
from .processors import BaseProcessor, Template
from .values import Values


class AppContext:
    """Processing context of one conversion run"""

    def __init__(self, config: Config, output):
        """Initialize AppContext

        Args:
            config: Converter configuration
            output: Module writer with a create(module_dir, module_name, crd, templates, values) method
        """
        self.config = config
        self.output = output
        self.app_meta = AppMetadata(config)
        self.processors: List[BaseProcessor] = []
        self.default_processor: Optional[BaseProcessor] = None
        self.objects: List[Dict[str, Any]] = []

    def with_processors(self, *processors: BaseProcessor) -> 'AppContext':
        """Register processors, tried in the given order

        Raises:
            ValueError: If two processors claim the same group/version/kind
        """
        claimed = {g: p for p in self.processors for g in p.gvks}
        for processor in processors:
            for g in processor.gvks:
                if g in claimed:
                    raise ValueError(
                        f"{type(processor).__name__} and {type(claimed[g]).__name__} both claim {g}")
                claimed[g] = processor
            self.processors.append(processor)
        return self

    def with_default_processor(self, processor: BaseProcessor) -> 'AppContext':
        """Set the processor for resources no other processor claims"""
        self.default_processor = processor
        return self

    def add(self, obj: Dict[str, Any]) -> None:
        """Add a manifest to the run.

        All manifests have to be added before the module is created since
        name templating depends on every object name.
        """
        self.app_meta.load(obj)
        self.objects.append(obj)

    def process(self, obj: Dict[str, Any]) -> Optional[Template]:
        """Convert one manifest with the first processor claiming it

        Raises:
            ProcessingError: If the claiming processor fails
        """
        processor = next((p for p in self.processors if p.matches(obj)), None)
        if processor is None:
            if self.default_processor is None:
                log_warning(f"Skipping {describe(obj)}: no suitable processor")
                return None
            processor = self.default_processor

        try:
            template = processor.process(self.app_meta, obj)
        except ProcessingError as e:
            if e.resource is None:
                e.resource = obj
            raise
        log_debug(f"Processed {describe(obj)} with {type(processor).__name__}")
        return template

    def create_module(self, stop: Optional[threading.Event] = None) -> bool:
        """Process all manifests and write the module.

        The run is all or nothing: the first processing error aborts it
        before anything is written.

        Args:
            stop: Checked after each manifest, when set the run ends without output

        Returns:
            True if the module was written
        """
        log_info(f"Creating module '{self.app_meta.module_name}' "
                 f"(namespace '{self.app_meta.namespace}', prefix '{self.app_meta.prefix}')")
        values = Values()
        values.add('string', DEFAULT_CLUSTER_DOMAIN, CLUSTER_DOMAIN_KEY)
        templates: List[Template] = []
        for obj in self.objects:
            template = self.process(obj)
            if template is not None:
                templates.append(template)
                values.merge(template.values)
            if stop is not None and stop.is_set():
                log_warning("Conversion interrupted, module not written")
                return False

        _dedupe_templates(templates)
        self.output.create(self.config.module_dir, self.config.module_name, self.config.crd, templates, values)
        return True


def _dedupe_templates(templates: List[Template]) -> None:
    """Give templates unique filenames, registry labels and definition names.

    Names that normalize to the same identifier get a numeric suffix, the
    same number for all three.
    """
    filenames, labels, object_types = set(), set(), set()
    for template in templates:
        base, dot, extension = template.filename.rpartition('.')
        filename, label, object_type = template.filename, template.object_label, template.object_type
        i = 2
        while filename in filenames or label in labels or object_type in object_types:
            filename = f"{base}-{i}{dot}{extension}"
            label = f"{template.object_label}{i}"
            object_type = f"{template.object_type}{i}"
            i += 1
        filenames.add(filename)
        labels.add(label)
        object_types.add(object_type)
        template.filename = filename
        template.object_label = label
        template.object_type = object_type


def objects_summary(objects: List[Dict[str, Any]]) -> Dict[str, int]:
    """Count manifests per kind"""
    summary: Dict[str, int] = {}
    for obj in objects:
        kind = gvk(obj)[2]
        summary[kind] = summary.get(kind, 0) + 1
    return summary
