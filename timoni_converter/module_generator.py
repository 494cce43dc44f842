"""
Module Generator Module

Writes processed templates and values as a Timoni module:

    <module>/
    ├── cue.mod/
    │   ├── gen/          Kubernetes API schemas (vendored with `timoni mod vendor k8s`)
    │   ├── pkg/          Timoni API schemas
    │   └── module.cue    module metadata
    ├── crds/             CRD manifests, when CRD placement is enabled
    ├── templates/
    │   ├── config.cue    #Config schema and #Instance object registry
    │   └── *.cue         one definition per resource
    ├── timoni.cue        Timoni entry point
    ├── timoni.ignore
    ├── values.cue        default values
    └── README.md

Generated files are overwritten on every run.
"""
from pathlib import Path
from typing import List

from .logger import log_info
from .processors import Template
from .values import Values
from .values_generator import ValuesGenerator

MODULE_CUE = 'module: "timoni.sh/{name}"\nlanguage: version: "v0.9.0"\n'

TIMONI_CUE = """// Code generated by timoni.
// Note that this file is required and should contain
// the values schema and the timoni workflow.

package main

import (
\ttemplates "timoni.sh/{name}/templates"
)

// Define the schema for the user-supplied values.
// At runtime, Timoni injects the supplied values
// and validates them according to the Config schema.
values: templates.#Config

// Define how Timoni should build, validate and
// apply the Kubernetes resources.
timoni: {{
\tapiVersion: "v1alpha1"

\t// Define the instance that outputs the Kubernetes resources.
\t// At runtime, Timoni builds the instance and validates
\t// the resulting resources according to their Kubernetes schema.
\tinstance: templates.#Instance & {{
\t\t// The user-supplied values are merged with the
\t\t// default values at runtime by Timoni.
\t\tconfig: values
\t\t// These values are injected at runtime by Timoni.
\t\tconfig: {{
\t\t\tmetadata: {{
\t\t\t\tname:      string @tag(name)
\t\t\t\tnamespace: string @tag(namespace)
\t\t\t}}
\t\t\tmoduleVersion: string @tag(mv, var=moduleVersion)
\t\t\tkubeVersion:   string @tag(kv, var=kubeVersion)
\t\t}}
\t}}

\t// Pass Kubernetes resources outputted by the instance
\t// to Timoni's multi-step apply.
\tapply: app: [for obj in instance.objects {{obj}}]
}}
"""

TIMONI_IGNORE = """# VCS
.git/
.gitignore
.gitmodules
.gitattributes

# Go
vendor/
go.mod
go.sum

# CUE
*_tool.cue
"""

README = """# {name}

A [Timoni.sh](http://timoni.sh) module for deploying {name} to Kubernetes clusters.

## Install

To create an instance using the default values:

```shell
timoni -n <namespace> apply {name} oci://<container-registry-url>
```

To change the [default configuration](#configuration),
create one or more `values.cue` files and apply them to the instance.

```shell
timoni -n <namespace> apply {name} oci://<container-registry-url> \\
--values ./values-1.cue \\
--values ./values-2.cue
```

## Uninstall

```shell
timoni -n <namespace> delete {name}
```

## Configuration

The configuration schema and its defaults are defined in
[templates/config.cue](templates/config.cue), the default values in
[values.cue](values.cue).
"""


class ModuleGenerator:
    """Writes a Timoni module to disk"""

    def __init__(self, dry_run: bool = False):
        """Initialize ModuleGenerator

        Args:
            dry_run: Print the files that would be written instead of writing them
        """
        self.dry_run = dry_run

    def create(self, module_dir: str, module_name: str, crd: bool,
               templates: List[Template], values: Values) -> Path:
        """Scaffold the module and write templates and values

        Args:
            module_dir: Parent directory of the module
            module_name: Module name, also the module directory name
            crd: Write CRD templates into crds/
            templates: Processed templates with unique filenames
            values: Values merged from all templates

        Returns:
            Module directory
        """
        root = Path(module_dir or '.') / module_name
        values_gen = ValuesGenerator(values, templates)
        files = {
            root / 'cue.mod' / 'module.cue': MODULE_CUE.format(name=module_name),
            root / 'timoni.cue': TIMONI_CUE.format(name=module_name),
            root / 'timoni.ignore': TIMONI_IGNORE,
            root / 'README.md': README.format(name=module_name),
            root / 'values.cue': values_gen.render_values(),
            root / 'templates' / 'config.cue': values_gen.render_config(),
        }
        for template in templates:
            subdir = 'crds' if template.crd and crd else 'templates'
            files[root / subdir / template.filename] = template.render()

        if self.dry_run:
            self.show_plan(root, files)
            return root

        for directory in (root / 'cue.mod' / 'gen', root / 'cue.mod' / 'pkg', root / 'templates'):
            self._ensure_directory(directory)
        self._remove_stale_templates(root, files)
        for path, content in files.items():
            self._write_file(path, content)
            log_info(f"Overwritten {path}")
        return root

    def show_plan(self, root: Path, files) -> None:
        """Show what would be generated (dry run)"""
        print(f"  Would generate module in {root}")
        for path in sorted(files):
            print(f"  Would generate {path.relative_to(root)}")

    def _remove_stale_templates(self, root: Path, files) -> None:
        # templates of resources that are gone from the input
        for subdir, pattern in (('templates', '*.cue'), ('crds', '*.yaml')):
            directory = root / subdir
            if not directory.is_dir():
                continue
            for path in directory.glob(pattern):
                if path not in files:
                    path.unlink()

    def _ensure_directory(self, directory: Path) -> None:
        """Ensure directory exists with error handling

        Raises:
            OSError: If directory creation fails
        """
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OSError(f"Failed to create directory '{directory}': {e}")

    def _write_file(self, file_path: Path, content: str) -> None:
        """Write content to file with error handling

        Raises:
            OSError: If file write fails
        """
        self._ensure_directory(file_path.parent)
        try:
            with open(file_path, 'w') as f:
                f.write(content)
        except OSError as e:
            raise OSError(f"Failed to write file '{file_path}': {e}")
