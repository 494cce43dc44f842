#!/usr/bin/env python3
"""
Kubernetes manifests to Timoni module converter

This script converts Kubernetes manifests into a Timoni module, extracting
images, replicas, resources, env values and secrets into the module's config
schema and default values.

Usage:
    kustomize build config/default | python convert.py my-app
    python convert.py -f deploy/ -r --crd-dir modules/my-app

Arguments:
    MODULE_NAME: Module name or path, the last path element is the module name
    -f: Manifest file or directory, may be repeated; stdin is read when omitted
    -r: Read directories given with -f recursively
"""

import argparse
import signal
import sys
import threading
from pathlib import Path

from timoni_converter import __version__
from timoni_converter.config import Config
from timoni_converter.context import AppContext, objects_summary
from timoni_converter.errors import TimonifyError
from timoni_converter.logger import log_error, log_success, set_verbosity
from timoni_converter.manifest_reader import ManifestReader
from timoni_converter.module_generator import ModuleGenerator
from timoni_converter.processors import DefaultProcessor, default_processors


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert Kubernetes manifests to a Timoni module"
    )
    parser.add_argument(
        "module",
        nargs="?",
        metavar="MODULE_NAME",
        help="Module name or path (e.g., my-app or modules/my-app), defaults to 'timoni'",
    )
    parser.add_argument(
        "-f",
        dest="files",
        action="append",
        default=[],
        help="Manifest file or directory, may be repeated (reads stdin when omitted)",
    )
    parser.add_argument(
        "-r",
        dest="files_recursively",
        action="store_true",
        help="Scan directories given with -f recursively",
    )
    parser.add_argument(
        "-v",
        dest="verbose",
        action="store_true",
        help="Enable verbose output (prints warnings and info)",
    )
    parser.add_argument(
        "-vv",
        dest="very_verbose",
        action="store_true",
        help="Enable very verbose output (also prints debug messages)",
    )
    parser.add_argument(
        "--crd-dir",
        dest="crd",
        action="store_true",
        help="Place CRDs as plain YAML into the module crds/ directory",
    )
    parser.add_argument(
        "--image-pull-secrets",
        action="store_true",
        help="Expose imagePullSecrets in values for pods that define none",
    )
    parser.add_argument(
        "--generate-defaults",
        action="store_true",
        help="Expose tolerations, topologySpreadConstraints and nodeSelector for every pod",
    )
    parser.add_argument(
        "--original-name",
        action="store_true",
        help="Keep resource names instead of prefixing them with the instance name",
    )
    parser.add_argument(
        "--config",
        help="Path to a YAML config file with camelCase settings (e.g., moduleName: my-app)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Dry run mode - show what would be generated without creating files",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def load_config(args: argparse.Namespace) -> Config:
    """Build the run configuration from an optional config file and CLI flags"""
    config = Config.from_file(Path(args.config)) if args.config else Config()

    module_name = module_dir = None
    if args.module:
        module_path = Path(args.module)
        module_name = module_path.name
        if module_path.parent != Path('.'):
            module_dir = str(module_path.parent)

    config.override(
        module_name=module_name,
        module_dir=module_dir,
        files=args.files,
        files_recursively=args.files_recursively,
        verbose=args.verbose,
        very_verbose=args.very_verbose,
        crd=args.crd,
        image_pull_secrets=args.image_pull_secrets,
        generate_defaults=args.generate_defaults,
        original_name=args.original_name,
    )
    config.validate()
    return config


def main(argv=None):
    args = build_parser().parse_args(argv)

    stop = threading.Event()
    for sig in (signal.SIGINT, signal.SIGTERM):
        signal.signal(sig, lambda signum, frame: stop.set())

    try:
        config = load_config(args)
        set_verbosity(config.verbose, config.very_verbose)

        if not config.files and sys.stdin.isatty():
            raise TimonifyError("no data piped in stdin, use -f to read manifest files")

        print(f"Kubernetes to Timoni Module Converter")
        print(f"=" * 60)
        print(f"Module name: {config.module_name}")
        print(f"Module directory: {Path(config.module_dir or '.') / config.module_name}")
        print(f"Input: {', '.join(config.files) if config.files else '<stdin>'}")
        print(f"Dry run: {args.dry_run}")
        print(f"=" * 60)
        print()

        # Step 1: Read manifests
        print("[1/3] Reading Kubernetes manifests...")
        output = ModuleGenerator(dry_run=args.dry_run)
        ctx = AppContext(config, output)
        ctx.with_processors(*default_processors()).with_default_processor(DefaultProcessor())
        reader = ManifestReader(config.files, config.files_recursively)
        for obj in reader.read():
            ctx.add(obj)
        summary = ', '.join(f"{count} {kind}" for kind, count in objects_summary(ctx.objects).items())
        print(f"  ✓ Read {len(ctx.objects)} manifests ({summary or 'none'})")
        print()

        # Step 2: Process manifests and write the module
        print("[2/3] Generating module...")
        if not ctx.create_module(stop):
            print("  ✗ Interrupted, module not written")
            sys.exit(130)
        print(f"  ✓ Generated templates in {ctx.app_meta.module_name}/templates/")
        print()

        # Step 3: Summary
        print("[3/3] Done")
        print("=" * 60)
        log_success(f"Module {config.module_name} generated")
        print("✓ Conversion completed successfully!")
        if not args.dry_run:
            module_path = Path(config.module_dir or '.') / config.module_name
            print(f"\nNext steps:")
            print(f"  1. Vendor Kubernetes schemas: cd {module_path} && timoni mod vendor k8s")
            print(f"  2. Review values: {module_path}/values.cue")
            print(f"  3. Build the module: timoni build {config.module_name} {module_path}")

    except (TimonifyError, OSError) as e:
        log_error(str(e))
        print(f"\n✗ Error during conversion: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
