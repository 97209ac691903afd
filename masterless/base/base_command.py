"""
Base Command Class

Abstract base for all Masterless CLI commands.
Provides common functionality and structure.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Union

from rich.console import Console

from masterless.exceptions import CleanupError, ConfigurationError, MasterlessError
from masterless.logger import ProvisionLogger
from masterless.ui_components import show_header


class BaseCommand(ABC):
    """
    Abstract base command class.

    Provides:
    - Logger initialization
    - Header display
    - Error handling
    - JSON output support
    """

    def __init__(
        self,
        verbose: bool = False,
        json_output: bool = False,
        log_dir: Optional[str] = None,
    ):
        self.verbose = verbose
        self.json_output = json_output
        self.log_dir = log_dir
        self.console = Console()
        self.logger: Optional[ProvisionLogger] = None

    def init_logger(self, host: str, command_name: str) -> ProvisionLogger:
        """
        Initialize command logger.

        Args:
            host: Host being provisioned
            command_name: Command name

        Returns:
            ProvisionLogger instance
        """
        self.logger = ProvisionLogger(
            host,
            command_name,
            verbose=self.verbose,
            log_dir=self.log_dir,
            rich_console=self.console,
        )
        return self.logger

    def output_json(self, data: Dict[str, Any], exit_code: int = 0) -> None:
        """
        Output data as JSON and exit.

        Args:
            data: Data to output as JSON
            exit_code: Exit code (0 for success, non-zero for error)
        """
        print(json.dumps(data, indent=2))
        if exit_code != 0:
            raise SystemExit(exit_code)

    def show_header(
        self,
        title: str,
        subtitle: Optional[str] = None,
        host: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> None:
        """Show command header (skip in JSON mode)."""
        if not self.json_output:
            show_header(
                title=title,
                subtitle=subtitle,
                host=host,
                details=details,
                console=self.console,
            )

    def print_success(self, message: str) -> None:
        """Print success message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[green]✓ {message}[/green]")

    def print_error(self, message: str) -> None:
        """Print error message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[red]✗ {message}[/red]", highlight=False)

    def print_warning(self, message: str) -> None:
        """Print warning message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[yellow]⚠ {message}[/yellow]")

    def print_dim(self, message: str) -> None:
        """Print dim message (skip in JSON mode)."""
        if not self.json_output:
            self.console.print(f"[dim]{message}[/dim]", highlight=False)

    def handle_error(
        self, error: Union[Exception, str], context: Optional[str] = None
    ) -> None:
        """
        Handle error with consistent formatting.

        Args:
            error: Exception object
            context: Optional context message
        """
        if self.logger:
            self.logger.log_error(str(error), context=context)
        else:
            self.print_error(str(error))
            if context:
                self.print_dim(f"Context: {context}")

    def _show_log_path(self) -> None:
        if self.logger:
            self.console.print(f"[dim]Logs saved to:[/dim] {self.logger.log_path}\n")

    @abstractmethod
    def execute(self, **kwargs) -> None:
        """
        Execute command logic.

        Must be implemented by subclasses.
        """
        pass

    def run(self, **kwargs) -> None:
        """
        Run command with error handling.

        Args:
            **kwargs: Command arguments
        """
        try:
            self._run(**kwargs)
        finally:
            if self.logger:
                self.logger.close()

    def _run(self, **kwargs) -> None:
        try:
            self.execute(**kwargs)
        except KeyboardInterrupt:
            self.console.print("\n[yellow]⚠️  Operation cancelled by user[/yellow]")
            self._show_log_path()
            raise SystemExit(130)
        except SystemExit:
            raise
        except ConfigurationError as e:
            if self.json_output:
                self.output_json({"error": e.format_message()}, exit_code=1)
            self.handle_error(e.message, context=e.context)
            raise SystemExit(1)
        except CleanupError as e:
            self.handle_error(e.message, context="Puppet already ran on the host")
            self._show_log_path()
            raise SystemExit(1)
        except MasterlessError as e:
            phase = e.phase.value if e.phase else None
            self.handle_error(e.message, context=e.context or phase)
            self._show_log_path()
            raise SystemExit(1)
        except Exception as e:
            # Generic error handling
            error_type = type(e).__name__
            self.console.print(f"\n[bold red]✗ {error_type}:[/bold red] {e}\n")
            if self.logger:
                self.logger.log_error(f"{error_type}: {e}")
            self._show_log_path()
            raise SystemExit(1)
