#!/usr/bin/env python3
"""
Templar CLI - render templates from the command line
"""
import argparse
import asyncio
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from templar.config import TemplarConfig, get_config_from_environment
from templar.exceptions import CompileError, ConfigurationError, RenderError, StorageError, error_model
from templar.log import setup_logging
from templar.templating.service import TemplateRenderingService

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_TEMPLATE_ERROR = 2
EXIT_USAGE = 3


class CommandRegistry:
    """Registry for CLI commands with validation and execution logic"""

    def __init__(self):
        self.commands = {}

    def register(self, name: str, executor: Callable, validator: Callable = None):
        self.commands[name] = {
            'validator': validator,
            'executor': executor
        }

    def execute(self, name: str, args: Any) -> int:
        """Execute a command with validation, returning its exit code"""
        command = self.commands[name]

        if command['validator']:
            errors = command['validator'](args)
            if errors:
                print("Validation errors:", file=sys.stderr)
                for error in errors:
                    print(f"  - {error}", file=sys.stderr)
                return EXIT_USAGE

        return command['executor'](args)


class TemplarCLI:
    """Command Line Interface for Templar"""

    def __init__(self):
        self.registry = CommandRegistry()
        self.parser = self._create_parser()
        self.registry.register('render', self.cmd_render, self._validate_model_args)
        self.registry.register('error', self.cmd_error, self._validate_model_args)

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create and configure the argument parser"""
        parser = argparse.ArgumentParser(
            prog='templar',
            description="Templar template renderer",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""Examples:
  templar render hello.html --model '{"name": "World"}'
  templar render page.html --base-dir site --templates-dir views --static
  templar error --message "Something broke"
            """
        )
        parser.add_argument('--debug', action='store_true', help='Enable debug logging')

        subparsers = parser.add_subparsers(dest='command', help='Available commands')

        render_parser = subparsers.add_parser('render', help='Render a template file')
        render_parser.add_argument('name', help='Template name, relative to the templates directory')
        self._add_model_arguments(render_parser)
        render_parser.add_argument('--base-dir', help='Application base directory')
        render_parser.add_argument('--templates-dir', help='Templates directory, relative to the base directory')
        render_parser.add_argument('--cache-size', type=int, help='Maximum number of cached templates')
        mode = render_parser.add_mutually_exclusive_group()
        mode.add_argument('--static', dest='static', action='store_true', default=None,
                          help='Compile templates ahead of execution')
        mode.add_argument('--dynamic', dest='static', action='store_false',
                          help='Compile templates on every execution')
        render_parser.add_argument('--output', '-o', help='Write output to this file instead of stdout')

        error_parser = subparsers.add_parser('error', help='Render the built-in error page')
        error_parser.add_argument('--message', help='Error message to display')
        self._add_model_arguments(error_parser)
        error_parser.add_argument('--output', '-o', help='Write output to this file instead of stdout')

        return parser

    def _add_model_arguments(self, parser: argparse.ArgumentParser):
        model = parser.add_mutually_exclusive_group()
        model.add_argument('--model', help='Template model as a JSON object')
        model.add_argument('--model-file', help='Path to a JSON file holding the template model')

    def _validate_model_args(self, args) -> List[str]:
        errors = []
        try:
            args.model_data = self._load_model(args)
        except (ValueError, OSError) as e:
            errors.append(f"Invalid model: {e}")
        if getattr(args, 'cache_size', None) is not None and args.cache_size < 0:
            errors.append("--cache-size must be >= 0")
        return errors

    def _load_model(self, args) -> Dict[str, Any]:
        if args.model_file:
            raw = Path(args.model_file).read_text(encoding='utf-8')
        elif args.model:
            raw = args.model
        else:
            return {}
        model = json.loads(raw)
        if not isinstance(model, dict):
            raise ValueError("model must be a JSON object")
        return model

    def build_config(self, args) -> TemplarConfig:
        """Build a configuration from the environment and command line overrides"""
        config = get_config_from_environment()
        templating = config.templating
        layout = config.layout

        if getattr(args, 'base_dir', None):
            layout = replace(layout, base_dir=args.base_dir)
        overrides = {}
        if getattr(args, 'templates_dir', None):
            overrides['dir'] = args.templates_dir
        if getattr(args, 'cache_size', None) is not None:
            overrides['cache_size'] = args.cache_size
        if getattr(args, 'static', None) is not None:
            overrides['statically_compile'] = args.static
        if overrides:
            templating = replace(templating, **overrides)

        return TemplarConfig(debug=args.debug or config.debug, layout=layout,
                             templating=templating, logging=config.logging)

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Run the CLI"""
        args = self.parser.parse_args(argv)

        if not args.command:
            self.parser.print_help()
            return EXIT_USAGE

        return self.registry.execute(args.command, args)

    def cmd_render(self, args) -> int:
        """Render a template file"""
        try:
            service = self._create_service(args)
        except ConfigurationError as e:
            print(f"Configuration error: {e}", file=sys.stderr)
            return EXIT_USAGE

        try:
            output = asyncio.run(service.render_file_template(args.name, args.model_data))
        except StorageError as e:
            print(f"Template not found: {e}", file=sys.stderr)
            return EXIT_NOT_FOUND
        except (CompileError, RenderError) as e:
            print(f"Template error: {e}", file=sys.stderr)
            if args.debug:
                self._write(args, asyncio.run(service.render_error(error_model(e))))
            return EXIT_TEMPLATE_ERROR

        self._write(args, output)
        return EXIT_OK

    def cmd_error(self, args) -> int:
        """Render the built-in error page"""
        model = dict(args.model_data)
        if args.message:
            model['message'] = args.message

        try:
            service = self._create_service(args)
            output = asyncio.run(service.render_error(model))
        except ConfigurationError as e:
            print(f"Configuration error: {e}", file=sys.stderr)
            return EXIT_USAGE
        except (CompileError, RenderError) as e:
            print(f"Error page failed: {e}", file=sys.stderr)
            return EXIT_TEMPLATE_ERROR

        self._write(args, output)
        return EXIT_OK

    def _create_service(self, args) -> TemplateRenderingService:
        config = self.build_config(args)
        setup_logging(config.logging, debug=config.debug)
        return TemplateRenderingService(config)

    def _write(self, args, output: bytes):
        if args.output:
            Path(args.output).write_bytes(output)
        else:
            sys.stdout.buffer.write(output)
            sys.stdout.flush()


def main(argv: Optional[List[str]] = None):
    """Main entry point"""
    sys.exit(TemplarCLI().run(argv))


if __name__ == '__main__':
    main()
