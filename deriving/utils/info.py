"""
Package information utility.

This module provides a command-line utility for displaying the deriving
installation, the derivers registered by a set of plugin modules and the
active configuration.
"""

import argparse
import importlib
import platform
import sys
from typing import Dict, Any, List, Optional, Sequence

import deriving
from deriving.compiler.registry import get_registry
from deriving.utils.config import get_config


def get_system_info() -> Dict[str, Any]:
    """
    Get system information relevant to deriving.

    Returns:
        Dictionary containing system information
    """
    return {
        'python_version': sys.version,
        'platform': platform.platform(),
    }


def get_deriving_info(plugins: Sequence[str] = ()) -> Dict[str, Any]:
    """
    Get deriving-specific information.

    Args:
        plugins: Modules to import first; derivers register themselves on import

    Returns:
        Dictionary containing version, derivers and configuration
    """
    info: Dict[str, Any] = {
        'version': deriving.__version__,
        'author': deriving.__author__,
        'plugin_errors': {},
    }

    for module in plugins:
        try:
            importlib.import_module(module)
        except ImportError as e:
            info['plugin_errors'][module] = str(e)

    registry = get_registry()
    info['derivers'] = {
        name: registry.lookup(name).supported_entry_points() for name in registry.names()
    }
    info['config'] = get_config().to_dict()
    return info


def print_info(plugins: Sequence[str] = ()) -> None:
    """Print formatted information about deriving and the system."""
    print("deriving: [@@deriving] code generation engine")
    print("=" * 40)

    info = get_deriving_info(plugins)
    print(f"\nVersion: {info['version']}")
    print(f"Author: {info['author']}")

    for module, error in info['plugin_errors'].items():
        print(f"Plugin Error ({module}): {error}")

    if info['derivers']:
        print("\nRegistered Derivers:")
        for name, modes in info['derivers'].items():
            print(f"  {name}: {', '.join(modes) or 'none'}")
    else:
        print("\nRegistered Derivers: none")

    codegen = info['config']['codegen']
    print("\nCode Generation:")
    for key, value in codegen.items():
        print(f"  {key}: {value}")
    print(f"Strict Registry: {info['config']['registry']['reject_duplicates']}")

    system_info = get_system_info()
    print(f"\nPython Version: {system_info['python_version'].split()[0]}")
    print(f"Platform: {system_info['platform']}")


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the deriving-info command."""
    parser = argparse.ArgumentParser(prog="deriving-info", description=__doc__.strip().splitlines()[0])
    parser.add_argument("plugins", nargs="*", help="deriver modules to import before listing")
    args = parser.parse_args(argv)

    try:
        print_info(args.plugins)
    except Exception as e:
        print(f"Error getting deriving information: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
