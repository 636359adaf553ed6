#!/usr/bin/env python3
"""
Validate mockseam settings files.

Usage:
    mockseam-validate-config PATH [PATH ...] [--show-settings]

PATH may be a YAML file or a directory, in which case every ``*.yaml`` and
``*.yml`` file inside it is checked. Exits with 0 when every file is valid and
1 otherwise.
"""

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import yaml

from .configuration import ConfigurationValidator, load_settings


def collect_config_files(paths: Sequence[str]) -> List[Path]:
    """Expand directories into the YAML files they contain."""
    files: List[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            files.extend(sorted(p for p in path.iterdir() if p.suffix in (".yaml", ".yml")))
        else:
            files.append(path)
    return files


def validate_and_report(paths: Sequence[str], show_settings: bool = False) -> bool:
    """Validate every settings file and print a report.

    Args:
        paths: Files or directories to check.
        show_settings: Also print the effective settings of each valid file.

    Returns:
        True if all files are valid, False otherwise.
    """
    files = collect_config_files(paths)
    if not files:
        print("No configuration files found")
        return False

    results: Dict[Path, List[str]] = {}
    for config_file in files:
        _, errors = ConfigurationValidator.validate_config_file(config_file)
        results[config_file] = errors

    print("Configuration Validation Report")
    print("=" * 50)

    for config_file, errors in results.items():
        if errors:
            print(f"\nFAIL {config_file}")
            for error in errors:
                print(f"   - {error}")
        else:
            print(f"\nOK   {config_file}")
            if show_settings:
                settings = load_settings(config_file, use_environment=False)
                print(yaml.safe_dump(settings.model_dump(), default_flow_style=False, sort_keys=True).rstrip())

    all_valid = not any(results.values())
    print("\n" + "=" * 50)
    if all_valid:
        print("All configurations are valid")
    else:
        print("Some configurations have errors")
    return all_valid


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="mockseam-validate-config",
        description="Validate mockseam settings files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check the settings file named in pytest.ini
  mockseam-validate-config tests/mockseam.yaml

  # Check every YAML file in a directory and print the merged result
  mockseam-validate-config config/ --show-settings
        """
    )
    parser.add_argument('paths', nargs='+', metavar='PATH', help='Settings file or directory')
    parser.add_argument(
        '--show-settings',
        action='store_true',
        help='Print the effective settings (defaults applied) of each valid file'
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_arguments(argv)
    return 0 if validate_and_report(args.paths, show_settings=args.show_settings) else 1


if __name__ == "__main__":
    sys.exit(main())
