"""
Validate Command

Check local provisioner settings without contacting a host.
"""

from typing import Any, Dict, Optional

import rich_click as click
from rich.table import Table

from masterless.base import BaseCommand
from masterless.commands.options import (
    load_provisioner_config,
    pass_options,
    provisioner_options,
)
from masterless.services.config_validator import ConfigValidator


class ValidateCommand(BaseCommand):
    """Report every problem with local paths and settings."""

    def __init__(
        self,
        config_path: Optional[str],
        options: Dict[str, Any],
        json_output: bool = False,
    ):
        super().__init__(json_output=json_output)
        self.config_path = config_path
        self.options = options

    def execute(self) -> None:
        """Execute validate command."""
        config = load_provisioner_config(self.config_path, self.options)
        result = ConfigValidator().validate(config)

        if self.json_output:
            self.output_json(
                {
                    "valid": result.is_valid,
                    "errors": result.errors,
                    "warnings": result.warnings,
                },
                exit_code=0 if result.is_valid else 1,
            )
            return

        self.show_header(
            title="Validate",
            details={"Manifest": config.manifest_file or "-"},
        )

        if result.has_errors or result.has_warnings:
            table = Table(title_justify="left", padding=(0, 1))
            table.add_column("Severity", no_wrap=True)
            table.add_column("Problem")
            for error in result.errors:
                table.add_row("[red]error[/red]", error)
            for warning in result.warnings:
                table.add_row("[yellow]warning[/yellow]", warning)
            self.console.print(table)

        if not result.is_valid:
            self.print_error(f"{len(result.errors)} problem(s) found")
            raise SystemExit(1)

        self.print_success("Configuration is valid")


@click.command()
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
@provisioner_options
@pass_options
def validate(config_path, json_output, options):
    """
    Check local paths before provisioning

    Checks:
    - Manifest exists
    - Module paths are directories
    - Hiera config and manifest dir have the right kind
    - Fact names are valid
    """
    cmd = ValidateCommand(config_path, options, json_output=json_output)
    cmd.run()
