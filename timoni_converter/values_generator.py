"""
Values Generator Module

Renders the merged values into the module's values.cue defaults and the
templates/config.cue schema with its instance object registry.
"""
from typing import Dict, List

from .constants import API_IMPORTS, TIMONI_IMPORT
from .cue import Conjunct, Expr, label, marshal, render_imports
from .processors import Template
from .values import Values

VALUES_HEADER = """// Code generated by timoni.
// Note that this file must have no imports and all values must be concrete.

@if(!debug)

package main

// Defaults
values: %s
"""

# Fields every #Config carries, the extracted schema follows them
CONFIG_PREAMBLE = """\tkubeVersion: string
\tclusterVersion: timoniv1.#SemVer & {#Version: kubeVersion, #Minimum: "1.20.0"}
\tmoduleVersion: string

\tmetadata: timoniv1.#Metadata & {#Version: moduleVersion}
\tmetadata: labels: timoniv1.#Labels & {"app.kubernetes.io/created-by": metadata.name}
\tmetadata: annotations?: timoniv1.#Annotations
\tselector: timoniv1.#Selector & {#Name: metadata.name}
"""


class ValuesGenerator:
    """Generator for values.cue and templates/config.cue"""

    def __init__(self, values: Values, templates: List[Template]):
        """Initialize ValuesGenerator

        Args:
            values: Values merged from all templates
            templates: Templates registered as instance objects
        """
        self.values = values
        self.templates = templates

    def render_values(self) -> str:
        """Render values.cue with concrete defaults"""
        return VALUES_HEADER % marshal(self.values.values, 0)

    def render_config(self) -> str:
        """Render templates/config.cue

        Returns:
            CUE source defining #Config and #Instance
        """
        schema = ''.join(
            f"\t{label(key)}: {marshal(value, 1)}\n" for key, value in self.values.config.items()
        )
        config = (
            "// Config defines the schema and defaults for the Instance values.\n"
            "#Config: {\n" + CONFIG_PREAMBLE + ("\n" + schema if schema else "") + "}\n"
        )

        objects: Dict[str, Conjunct] = {}
        for template in self.templates:
            if template.crd:
                continue
            objects[template.object_label] = Conjunct(template.object_type, {Expr('#config'): Expr('config')})
        instance = (
            "// Instance takes the config values and outputs the Kubernetes objects.\n"
            "#Instance: {\n"
            "\tconfig: #Config\n\n"
            f"\tobjects: {marshal(objects, 1)}\n"
            "}\n"
        )

        body = config + "\n" + instance
        candidates = tuple(API_IMPORTS.values()) + (TIMONI_IMPORT,)
        return "package templates\n\n" + render_imports(body, candidates) + body
