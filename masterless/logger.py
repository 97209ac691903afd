"""
Logging system for Masterless
Provides real-time logging to files with clean console output
"""

import re
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO, Union

from rich.console import Console

from masterless.constants import DEFAULT_LOG_DIR, LOG_DATE_FORMAT, LOG_TIME_FORMAT

console = Console()

ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


class ProvisionLogger:
    """
    Manages logging for provisioning runs
    - Writes all output to log files in real-time
    - Shows progress and streamed command output in the console
    - Captures errors with context

    emit() is the reporting sink for remote command output; it is called
    from the stdout and stderr streaming threads at the same time.
    """

    def __init__(
        self,
        host: str,
        operation: str,
        verbose: bool = False,
        log_dir: Optional[Union[str, Path]] = None,
        rich_console: Optional[Console] = None,
    ):
        """
        Initialize logger

        Args:
            host: Host being provisioned (used for the log directory)
            operation: Operation name (e.g., 'apply')
            verbose: If True, show debug lines in console
            log_dir: Root directory for log files
            rich_console: Rich console to render to (defaults to the shared one)
        """
        self.host = host
        self.operation = operation
        self.verbose = verbose
        self.console = rich_console or console
        self.log_file: Optional[TextIO] = None
        self.log_path: Optional[Path] = None
        self.current_step = ""
        self.has_errors = False
        self._lock = threading.Lock()

        # Structure: {log_dir}/{host}/{date}/{time}_{operation}.log
        now = datetime.now()
        root = Path(log_dir or DEFAULT_LOG_DIR).expanduser()
        host_logs_dir = root / host / now.strftime(LOG_DATE_FORMAT)
        host_logs_dir.mkdir(parents=True, exist_ok=True)

        self.log_path = host_logs_dir / f"{now.strftime(LOG_TIME_FORMAT)}_{operation}.log"

        # Line buffered for real-time
        self.log_file = open(self.log_path, "w", buffering=1)

        self._write_log_header()

    def _write_log_header(self):
        """Write log file header"""
        header = f"""
{"=" * 80}
Masterless Provisioning Log
{"=" * 80}
Host: {self.host}
Operation: {self.operation}
Started: {datetime.now().isoformat()}
{"=" * 80}

"""
        self.log_file.write(header)
        self.log_file.flush()

    def _write(self, text: str) -> None:
        with self._lock:
            if self.log_file:
                self.log_file.write(text)

    def log(self, message: str, level: str = "INFO"):
        """
        Log a message to file and optionally console

        Args:
            message: Message to log
            level: Log level (INFO, WARNING, ERROR, DEBUG)
        """
        timestamp = datetime.now().strftime("%H:%M:%S")
        self._write(f"[{timestamp}] [{level}] {message}\n")

        if self.verbose:
            if level == "ERROR":
                self.console.print(f"[red]{message}[/red]")
            elif level == "WARNING":
                self.console.print(f"[yellow]{message}[/yellow]")
            elif level == "DEBUG":
                self.console.print(f"[dim]{message}[/dim]")
            else:
                self.console.print(message)

    def emit(self, line: str) -> None:
        """
        Record one line of progress or command output.

        Always written to the log file; always shown in the console.
        """
        clean_line = ANSI_ESCAPE.sub("", line)
        self._write(f"  {clean_line}\n")
        with self._lock:
            self.console.print(line, markup=False, highlight=False)

    def log_error(self, error: str, context: Optional[str] = None):
        """
        Log an error with context

        Args:
            error: Error message
            context: Additional context (e.g., command that failed)
        """
        self.has_errors = True

        error_block = f"""
{"!" * 80}
ERROR OCCURRED
{"!" * 80}
{error}
"""
        if context:
            error_block += f"\nContext: {context}\n"

        error_block += f"{'!' * 80}\n\n"
        self._write(error_block)

        self.console.print()
        self.console.print(f"[bold red]✗ {error}[/bold red]", highlight=False)
        if context:
            self.console.print(f"  [color(208)]{context}[/color(208)]", highlight=False)

    def step(self, step_name: str):
        """
        Start a new step

        Args:
            step_name: Name of the step
        """
        if self.current_step:
            self.console.print()

        self.current_step = step_name
        self.log(f"Step: {step_name}", "INFO")
        self.console.print(f"[color(214)]▶[/color(214)] [white]{step_name}[/white]")

    def success(self, message: str):
        """Log a success message"""
        self.log(message, "INFO")
        self.console.print(f"  [dim]✓ {message}[/dim]")

    def warning(self, message: str):
        """Log a warning message"""
        self.log(message, "WARNING")
        self.console.print(f"  [yellow]⚠[/yellow] [dim]{message}[/dim]")

    def close(self):
        """Close log file"""
        if self.log_file:
            footer = f"""
{"=" * 80}
Completed: {datetime.now().isoformat()}
Status: {"FAILED" if self.has_errors else "SUCCESS"}
{"=" * 80}
"""
            with self._lock:
                self.log_file.write(footer)
                self.log_file.close()
                self.log_file = None

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb):
        """Context manager exit"""
        if exc_type is not None and exc_type != SystemExit:
            # Log unhandled exception (but not SystemExit - that's expected)
            self.log_error(
                str(exc_val) if exc_val else "Operation failed",
                context=f"{exc_type.__name__}",
            )
        self.close()
        return False  # Don't suppress exceptions
