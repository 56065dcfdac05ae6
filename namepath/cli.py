"""
CLI -- Command interface

Commands:
    namepath paths FILE_OR_DIR...    Resolved namepaths of documented symbols
    namepath config                  Show configuration
    namepath config --set KEY VALUE  Update project configuration
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Dict, Iterator, List

from .config import ConfigManager, Config
from .core.doclet import Doclet
from .core.resolver import NameResolver
from .parsing.javascript import DocletExtractor
from .presentation.formatters import format_doclets, safe_print
from . import __version__


logger = logging.getLogger(__name__)


class NamepathCLI:
    """Command-line interface for namepath resolution."""

    def __init__(self, project_dir: Path):
        self.project_dir = Path(project_dir)
        self.config_manager = ConfigManager(self.project_dir)
        self.config: Config = self.config_manager.load()

    def create_extractor(self) -> DocletExtractor:
        """Fresh resolver session per run."""
        resolver = NameResolver(self.config.resolver.build_dictionary())
        return DocletExtractor(resolver, max_file_size=self.config.parsing.max_file_size)

    def iter_sources(self, targets: List[str]) -> Iterator[Path]:
        """Expand files and directories into source files, sorted per directory."""
        for target in targets:
            path = Path(target)
            if not path.is_absolute():
                path = self.project_dir / path
            if path.is_dir():
                for candidate in sorted(path.rglob("*")):
                    if candidate.is_file() and self.config.parsing.matches_extension(candidate.suffix):
                        yield candidate
            elif path.exists():
                yield path
            else:
                safe_print(f"Error: {target} not found")

    def paths(self, targets: List[str], output_format: str = None) -> int:
        """Print resolved doclets for each source file."""
        extractor = self.create_extractor()
        if not extractor.is_available():
            safe_print("Error: tree-sitter JavaScript grammar not available. "
                       "Install tree-sitter-language-pack.")
            return 1

        results: Dict[str, List[Doclet]] = {}
        for source in self.iter_sources(targets):
            results[self._display_path(source)] = extractor.extract_file(source)

        if not results:
            safe_print("No source files found.")
            return 1

        safe_print(format_doclets(results, output_format or self.config.display.format))
        return 0

    def show_config(self) -> int:
        safe_print(self.config_manager.display())
        return 0

    def set_config(self, key: str, value: str, scope: str = "project") -> int:
        error = self.config_manager.set(key, value, scope)
        if error:
            safe_print(f"Error: {error}")
            return 1
        safe_print(f"Set {key} = {value} ({scope})")
        return 0

    def _display_path(self, path: Path) -> str:
        try:
            return path.relative_to(self.project_dir).as_posix()
        except ValueError:
            return path.as_posix()


def _configure_logging(verbose: bool) -> None:
    """Attach a stderr handler to the package logger."""
    root = logging.getLogger("namepath")
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)


def main(argv: List[str] = None) -> int:
    """Main entry point for the namepath CLI."""
    parser = argparse.ArgumentParser(
        description="namepath -- JSDoc namepath resolver",
        epilog="Resolves documented symbols to canonical namepaths."
    )

    parser.add_argument(
        '--project', '-p',
        default=os.environ.get("NAMEPATH_PROJECT_PATH", "."),
        help='Project directory (default: NAMEPATH_PROJECT_PATH or current)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Log resolution decisions to stderr'
    )

    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'namepath {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    paths_parser = subparsers.add_parser('paths', help='Resolve namepaths in JavaScript sources')
    paths_parser.add_argument('targets', nargs='+', help='Files or directories')
    paths_parser.add_argument(
        '--format', '-f',
        choices=['table', 'json'],
        help='Output format (default: display.format setting)'
    )

    config_parser = subparsers.add_parser('config', help='Show or change configuration')
    config_parser.add_argument('--set', nargs=2, metavar=('KEY', 'VALUE'), help='Set a value')
    config_parser.add_argument('--user', action='store_true', help='Write to user config')

    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    if not args.command:
        parser.print_help()
        return 0

    cli = NamepathCLI(Path(args.project))

    if args.command == 'paths':
        return cli.paths(args.targets, args.format)

    if args.set:
        key, value = args.set
        return cli.set_config(key, value, "user" if args.user else "project")
    return cli.show_config()


if __name__ == '__main__':
    sys.exit(main())
