"""
Command Factories
-----------------
Per-feature builders that bind host callbacks into Commands.

Each feature area has a handler record (one field per user-facing
action) and a factory that turns the record into that area's commands.
`build_commands` composes any set of records into one flat list.

Factories produce commands; they never register them.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Type

from core.errors import ValidationError

from .model import Command, CommandCategory, DangerLevel


Action = Callable[[], Any]


@dataclass(frozen=True)
class FileHandlers:
    on_new_session: Action
    on_open_file: Action
    on_save: Action
    on_export_logs: Action


@dataclass(frozen=True)
class ViewHandlers:
    on_toggle_sidebar: Action
    on_toggle_inspector: Action
    on_toggle_status_bar: Action
    on_search: Action
    on_zoom_in: Action
    on_zoom_out: Action
    on_zoom_reset: Action
    on_fullscreen: Action


@dataclass(frozen=True)
class ThemeHandlers:
    on_set_theme: Callable[[str], Any]


@dataclass(frozen=True)
class SessionHandlers:
    on_connect: Action
    on_disconnect: Action
    on_toggle_capture: Action
    on_edit_protocol: Action
    is_connected: Optional[Callable[[], bool]] = None


@dataclass(frozen=True)
class ToolsHandlers:
    on_open_toolbox: Action
    on_open_tool: Callable[[str], Any]


@dataclass(frozen=True)
class SettingsHandlers:
    on_open_settings: Callable[..., Any]


@dataclass(frozen=True)
class HelpHandlers:
    on_open_user_guide: Action
    on_open_keyboard_shortcuts: Action
    on_open_release_notes: Action
    on_report_issue: Action
    on_check_updates: Action
    on_about: Optional[Action] = None


def create_file_commands(handlers: FileHandlers) -> List[Command]:
    """Create file operation commands."""
    return [
        Command(
            id="file.new-session",
            title="New Session",
            category=CommandCategory.FILE,
            keywords=("new", "session", "create"),
            description="Create a new network session",
            shortcut="Ctrl+N",
            execute=handlers.on_new_session,
        ),
        Command(
            id="file.open",
            title="Open File",
            category=CommandCategory.FILE,
            keywords=("open", "file"),
            description="Open a file",
            shortcut="Ctrl+O",
            execute=handlers.on_open_file,
        ),
        Command(
            id="file.save",
            title="Save",
            category=CommandCategory.FILE,
            keywords=("save",),
            description="Save the current content",
            shortcut="Ctrl+S",
            execute=handlers.on_save,
        ),
        Command(
            id="file.export-logs",
            title="Export Logs",
            category=CommandCategory.FILE,
            keywords=("export", "logs"),
            description="Export the system logs",
            execute=handlers.on_export_logs,
        ),
    ]


def create_view_commands(handlers: ViewHandlers) -> List[Command]:
    """Create view operation commands."""
    return [
        Command(
            id="view.toggle-sidebar",
            title="Toggle Sidebar",
            category=CommandCategory.VIEW,
            keywords=("sidebar", "toggle"),
            description="Show or hide the sidebar",
            shortcut="Ctrl+B",
            execute=handlers.on_toggle_sidebar,
        ),
        Command(
            id="view.toggle-inspector",
            title="Toggle Inspector",
            category=CommandCategory.VIEW,
            keywords=("inspector", "toggle"),
            description="Show or hide the inspector panel",
            execute=handlers.on_toggle_inspector,
        ),
        Command(
            id="view.toggle-statusbar",
            title="Toggle Status Bar",
            category=CommandCategory.VIEW,
            keywords=("statusbar", "toggle"),
            description="Show or hide the status bar",
            execute=handlers.on_toggle_status_bar,
        ),
        Command(
            id="view.search",
            title="Search",
            category=CommandCategory.VIEW,
            keywords=("search", "find"),
            description="Search content",
            shortcut="Ctrl+F",
            execute=handlers.on_search,
        ),
        Command(
            id="view.zoom-in",
            title="Zoom In",
            category=CommandCategory.VIEW,
            keywords=("zoom", "in"),
            description="Enlarge the view",
            shortcut="Ctrl++",
            execute=handlers.on_zoom_in,
        ),
        Command(
            id="view.zoom-out",
            title="Zoom Out",
            category=CommandCategory.VIEW,
            keywords=("zoom", "out"),
            description="Shrink the view",
            shortcut="Ctrl+-",
            execute=handlers.on_zoom_out,
        ),
        Command(
            id="view.zoom-reset",
            title="Reset Zoom",
            category=CommandCategory.VIEW,
            keywords=("zoom", "reset"),
            description="Reset the zoom level",
            shortcut="Ctrl+0",
            execute=handlers.on_zoom_reset,
        ),
        Command(
            id="view.fullscreen",
            title="Fullscreen",
            category=CommandCategory.VIEW,
            keywords=("fullscreen",),
            description="Toggle fullscreen mode",
            shortcut="F11",
            execute=handlers.on_fullscreen,
        ),
    ]


def create_theme_commands(handlers: ThemeHandlers) -> List[Command]:
    """Create theme commands, one per theme mode."""
    modes = [
        ("light", "Light Theme", "Switch to the light theme"),
        ("dark", "Dark Theme", "Switch to the dark theme"),
        ("system", "Follow System Theme", "Follow the system theme setting"),
    ]
    # Default argument pins the mode for each lambda
    return [
        Command(
            id=f"theme.{mode}",
            title=title,
            category=CommandCategory.THEME,
            keywords=("theme", mode),
            description=description,
            execute=lambda mode=mode: handlers.on_set_theme(mode),
        )
        for mode, title, description in modes
    ]


def create_session_commands(handlers: SessionHandlers) -> List[Command]:
    """
    Create session operation commands.

    When `is_connected` is given, Connect is only offered while
    disconnected and Disconnect only while connected.
    """
    is_connected = handlers.is_connected
    can_connect = (lambda: not is_connected()) if is_connected else None

    return [
        Command(
            id="session.connect",
            title="Connect",
            category=CommandCategory.SESSION,
            keywords=("connect", "start"),
            description="Connect the current session",
            shortcut="Ctrl+Enter",
            is_available=can_connect,
            execute=handlers.on_connect,
        ),
        Command(
            id="session.disconnect",
            title="Disconnect",
            category=CommandCategory.SESSION,
            keywords=("disconnect", "stop"),
            description="Disconnect the current session",
            danger_level=DangerLevel.WARNING,
            is_available=is_connected,
            execute=handlers.on_disconnect,
        ),
        Command(
            id="session.toggle-capture",
            title="Toggle Capture",
            category=CommandCategory.SESSION,
            keywords=("capture", "record"),
            description="Start or stop packet capture",
            shortcut="Ctrl+R",
            execute=handlers.on_toggle_capture,
        ),
        Command(
            id="session.edit-protocol",
            title="Edit Protocol",
            category=CommandCategory.SESSION,
            keywords=("protocol", "edit"),
            description="Edit the protocol rules",
            execute=handlers.on_edit_protocol,
        ),
    ]


TOOLS = [
    ("message-generator", "Message Generator", ("message", "generator")),
    ("protocol-parser", "Protocol Parser", ("protocol", "parser")),
    ("crc-calculator", "CRC Calculator", ("crc", "calculator", "checksum")),
    ("timestamp-converter", "Timestamp Converter", ("timestamp", "converter")),
    ("data-converter", "Data Converter", ("data", "converter", "hex", "base64")),
]


def create_tools_commands(handlers: ToolsHandlers) -> List[Command]:
    """Create tool commands: the toolbox plus one command per tool."""
    commands = [
        Command(
            id="tools.toolbox",
            title="Open Toolbox",
            category=CommandCategory.TOOLS,
            keywords=("toolbox", "tools"),
            description="Open the toolbox panel",
            execute=handlers.on_open_toolbox,
        )
    ]
    for tool_id, title, keywords in TOOLS:
        commands.append(Command(
            id=f"tools.{tool_id}",
            title=title,
            category=CommandCategory.TOOLS,
            keywords=keywords,
            description=f"Open the {title.lower()} tool",
            execute=lambda tool_id=tool_id: handlers.on_open_tool(tool_id),
        ))
    return commands


SETTINGS_SECTIONS = [
    (None, "general", "Open Settings", ("settings", "preferences")),
    ("appearance", "appearance", "Appearance Settings", ("appearance", "theme")),
    ("network", "network", "Network Settings", ("network", "connection")),
    ("storage", "storage", "Storage Settings", ("storage", "database")),
    ("shortcuts", "shortcuts", "Keyboard Shortcut Settings", ("shortcuts", "keyboard")),
]


def create_settings_commands(handlers: SettingsHandlers) -> List[Command]:
    """Create settings commands; the general entry opens settings without a section."""
    commands = []
    for section, suffix, title, keywords in SETTINGS_SECTIONS:
        if section is None:
            action = lambda: handlers.on_open_settings()
        else:
            action = lambda section=section: handlers.on_open_settings(section)
        commands.append(Command(
            id=f"settings.{suffix}",
            title=title,
            category=CommandCategory.SETTINGS,
            keywords=keywords,
            description=f"Open {title.lower()}",
            execute=action,
        ))
    return commands


def create_help_commands(handlers: HelpHandlers) -> List[Command]:
    """Create help commands."""
    commands = [
        Command(
            id="help.user-guide",
            title="User Guide",
            category=CommandCategory.HELP,
            keywords=("help", "guide", "documentation"),
            description="Open the user guide",
            execute=handlers.on_open_user_guide,
        ),
        Command(
            id="help.keyboard-shortcuts",
            title="Keyboard Shortcuts",
            category=CommandCategory.HELP,
            keywords=("keyboard", "shortcuts"),
            description="List the keyboard shortcuts",
            execute=handlers.on_open_keyboard_shortcuts,
        ),
        Command(
            id="help.release-notes",
            title="Release Notes",
            category=CommandCategory.HELP,
            keywords=("release", "notes", "changelog"),
            description="Show the release notes",
            execute=handlers.on_open_release_notes,
        ),
        Command(
            id="help.report-issue",
            title="Report Issue",
            category=CommandCategory.HELP,
            keywords=("report", "issue", "bug", "feedback"),
            description="Report a problem or give feedback",
            execute=handlers.on_report_issue,
        ),
        Command(
            id="help.check-updates",
            title="Check for Updates",
            category=CommandCategory.HELP,
            keywords=("update", "check"),
            description="Check for software updates",
            execute=handlers.on_check_updates,
        ),
    ]
    if handlers.on_about is not None:
        commands.append(Command(
            id="help.about",
            title="About",
            category=CommandCategory.HELP,
            keywords=("about", "version"),
            description="Show version information",
            execute=handlers.on_about,
        ))
    return commands


FACTORIES: Dict[Type, Callable[[Any], List[Command]]] = {
    FileHandlers: create_file_commands,
    ViewHandlers: create_view_commands,
    ThemeHandlers: create_theme_commands,
    SessionHandlers: create_session_commands,
    ToolsHandlers: create_tools_commands,
    SettingsHandlers: create_settings_commands,
    HelpHandlers: create_help_commands,
}


def build_commands(handler_records: Iterable[Any]) -> List[Command]:
    """
    Build one flat command list from feature handler records.

    Raises ValidationError for a record type with no factory.
    """
    commands: List[Command] = []
    for record in handler_records:
        factory = FACTORIES.get(type(record))
        if factory is None:
            raise ValidationError(
                f"No command factory for {type(record).__name__}", field="handlers"
            )
        commands.extend(factory(record))
    return commands
