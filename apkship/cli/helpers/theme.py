"""Unified theme system for consistent Rich styling across CLI commands."""

from rich.console import Console
from rich.table import Table
from rich.theme import Theme


# Color scheme constants
class Colors:
    """Standardized color palette for CLI output."""

    # Status colors
    SUCCESS = "bold green"
    ERROR = "bold red"
    WARNING = "bold yellow"
    INFO = "bold blue"

    # UI element colors
    PRIMARY = "cyan"
    SECONDARY = "blue"
    ACCENT = "magenta"
    MUTED = "dim"

    # Table header
    HEADER = "bold cyan"


class Icons:
    """Status icons, with text fallbacks for terminals without emoji."""

    SUCCESS = "✅"
    ERROR = "❌"
    WARNING = "⚠️"
    INFO = "ℹ️"
    BUILD = "🔨"
    UPLOAD = "📤"
    LINK = "🔗"
    FOLDER = "📁"
    CONFIG = "⚙️"

    _TEXT_FALLBACKS = {
        "SUCCESS": "[OK]",
        "ERROR": "[ERROR]",
        "WARNING": "[WARN]",
        "INFO": "[INFO]",
        "BUILD": "",
        "UPLOAD": "",
        "LINK": "",
        "FOLDER": "",
        "CONFIG": "",
    }

    @classmethod
    def get_icon(cls, icon_name: str, icon_mode: str = "emoji") -> str:
        """Get icon based on the specified mode.

        Args:
            icon_name: Name of the icon (e.g., "SUCCESS", "ERROR")
            icon_mode: Icon mode - "emoji" or "text"

        Returns:
            The appropriate icon based on mode
        """
        if icon_mode == "emoji":
            return getattr(cls, icon_name, "")
        return cls._TEXT_FALLBACKS.get(icon_name, f"[{icon_name}]")

    @classmethod
    def format_with_icon(
        cls, icon_name: str, text: str, icon_mode: str = "emoji"
    ) -> str:
        """Format text with icon, handling empty icons gracefully."""
        icon = cls.get_icon(icon_name, icon_mode)
        if icon:
            return f"{icon} {text}"
        return text


APKSHIP_THEME = Theme(
    {
        "success": Colors.SUCCESS,
        "error": Colors.ERROR,
        "warning": Colors.WARNING,
        "info": Colors.INFO,
        "primary": Colors.PRIMARY,
        "secondary": Colors.SECONDARY,
        "accent": Colors.ACCENT,
        "muted": Colors.MUTED,
        "header": Colors.HEADER,
    }
)


class ThemedConsole:
    """Console wrapper with the apkship theme applied.

    Messages are printed without markup parsing, so text-mode icons such as
    ``[OK]`` and bracketed paths come out unchanged.
    """

    def __init__(
        self, icon_mode: str = "emoji", console: Console | None = None
    ) -> None:
        self.console = console or Console(theme=APKSHIP_THEME)
        self.icon_mode = icon_mode

    def print_with_icon(
        self, icon_name: str, message: str, style: str = "primary"
    ) -> None:
        """Print one status line prefixed with the named icon."""
        text = Icons.format_with_icon(icon_name, message, self.icon_mode)
        self.console.print(
            text,
            style=style,
            markup=False,
            emoji=False,
            highlight=False,
            soft_wrap=True,
        )

    def print_success(self, message: str) -> None:
        self.print_with_icon("SUCCESS", message, "success")

    def print_error(self, message: str) -> None:
        self.print_with_icon("ERROR", message, "error")

    def print_warning(self, message: str) -> None:
        self.print_with_icon("WARNING", message, "warning")

    def print_info(self, message: str) -> None:
        self.print_with_icon("INFO", message, "info")

    def print_link(self, label: str, url: str) -> None:
        self.print_with_icon("LINK", f"{label}: {url}", "primary")


class TableStyles:
    """Predefined table styling templates."""

    @staticmethod
    def create_basic_table(
        title: str = "", icon: str = "", icon_mode: str = "emoji"
    ) -> Table:
        """Create a basic styled table."""
        full_title = Icons.format_with_icon(icon, title, icon_mode) if icon else title
        return Table(
            title=full_title,
            show_header=True,
            header_style=Colors.HEADER,
            border_style=Colors.SECONDARY,
        )

    @staticmethod
    def create_project_table(icon_mode: str = "emoji") -> Table:
        """Create table for project listings."""
        table = TableStyles.create_basic_table("Projects", "FOLDER", icon_mode)
        table.add_column("Name", style=Colors.PRIMARY, no_wrap=True)
        table.add_column("Path", style=Colors.MUTED)
        table.add_column("Modules", style=Colors.ACCENT)
        table.add_column("Variants", style=Colors.ACCENT)
        table.add_column("Build type", style="bold")
        return table

    @staticmethod
    def create_profile_table(icon_mode: str = "emoji") -> Table:
        """Create table for publish profile listings."""
        table = TableStyles.create_basic_table("Publish profiles", "CONFIG", icon_mode)
        table.add_column("Name", style=Colors.PRIMARY, no_wrap=True)
        table.add_column("Platform", style=Colors.ACCENT)
        table.add_column("Credential", style=Colors.MUTED)
        table.add_column("Password", style="bold")
        table.add_column("Default changelog", style=Colors.MUTED)
        return table


def get_themed_console(
    icon_mode: str = "emoji", stderr: bool = False
) -> ThemedConsole:
    """Get a themed console writing to stdout, or to stderr for failures."""
    return ThemedConsole(
        icon_mode=icon_mode, console=Console(theme=APKSHIP_THEME, stderr=stderr)
    )
