"""
Masterless - UI Components
Standardized headers and UI elements
"""

from rich.console import Console

LOGO = "masterless"

BRAND_COLOR = "cyan"


def show_header(
    title: str,
    subtitle: str = None,
    host: str = None,
    details: dict = None,
    console: Console = None,
):
    """
    Display a standardized Masterless command header.

    Args:
        title: Main title (e.g., "Puppet Apply")
        subtitle: Optional subtitle line
        host: Target host (if applicable)
        details: Additional key-value pairs to display
        console: Rich Console instance (creates new if None)

    Example:
        show_header(
            title="Puppet Apply",
            host="10.0.0.5",
            details={"Manifest": "site.pp", "Staging": "/tmp/masterless"}
        )
    """
    if console is None:
        console = Console()

    prefix = f" [bold color(214)]{LOGO}[/bold color(214)] [dim]›[/dim]"

    console.print(f"{prefix} [bold white]{title}[/bold white]")

    if subtitle:
        console.print(f"{prefix} [dim]{subtitle}[/dim]")

    if host:
        console.print(f"{prefix} Host: [{BRAND_COLOR}]{host}[/{BRAND_COLOR}]")

    if details:
        for key, value in details.items():
            console.print(f"{prefix} {key}: [{BRAND_COLOR}]{value}[/{BRAND_COLOR}]")

    # Single blank line after header
    console.print()
