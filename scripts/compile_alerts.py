#!/usr/bin/env python3
"""Compile New Relic alert conditions into a CloudFormation template.

Usage::

    # Print the merged template to stdout
    python scripts/compile_alerts.py --service serverless.yml \\
        --template .serverless/cloudformation-template-update-stack.json

    # Write it back in place, for another stage
    python scripts/compile_alerts.py --service serverless.yml \\
        --template .serverless/cloudformation-template-update-stack.json \\
        --output .serverless/cloudformation-template-update-stack.json --stage prod

    # Override log level
    python scripts/compile_alerts.py ... --log-level DEBUG
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import structlog

from src.alerts.exceptions import ConfigurationError
from src.core.config import load_settings
from src.core.logging import setup_logging
from src.plugin.compiler import NewRelicAlertsPlugin
from src.plugin.service import load_service, load_template

logger = structlog.get_logger(__name__)


def run(args: argparse.Namespace) -> int:
    """Compile alerts and write the merged template."""
    load_settings(args.config)
    setup_logging(level=args.log_level)

    service = load_service(args.service)
    template = load_template(args.template)

    try:
        plugin = NewRelicAlertsPlugin(service, template, stage=args.stage)
    except ConfigurationError as exc:
        logger.error("configuration_error", error=str(exc))
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    if not plugin.hooks:
        logger.info("nothing_to_compile", service=service.service)

    compiled = plugin.compile()
    rendered = json.dumps(compiled, indent=2)

    if args.output:
        Path(args.output).write_text(rendered + "\n")
        logger.info("template_written", path=args.output)
    else:
        print(rendered)

    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Add New Relic infrastructure alert conditions to a compiled template.",
    )
    parser.add_argument(
        "--service",
        default="serverless.yml",
        help="Path to the serverless service description (default: serverless.yml)",
    )
    parser.add_argument(
        "--template",
        required=True,
        help="Path to the compiled CloudFormation template (JSON)",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Where to write the merged template (default: stdout)",
    )
    parser.add_argument(
        "--stage",
        default=None,
        help="Deploy stage override (default: provider.stage)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level override: DEBUG, INFO, WARNING, ERROR",
    )
    args = parser.parse_args()

    code = run(args)
    sys.exit(code)


if __name__ == "__main__":
    main()
