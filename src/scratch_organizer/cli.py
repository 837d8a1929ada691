"""Command line interface for scratch organizer."""

import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table
from rich.text import Text

from .core.filesystem import ScratchFileSystem
from .core.manager import ScratchManager
from .core.ports import ClipboardListener, IdePort, OpenEditorTracker, add_text
from .domain.value_objects import AppendType, DefaultScratchMeaning, Scratch
from .exceptions import FileOperationError, ScratchOrganizerError
from .models.config import DOWN, UP, ScratchConfig, ScratchConfigPersistence

console = Console()
logger = logging.getLogger(__name__)

TERMINAL_PROJECT_ID = "terminal"


class TerminalIde(IdePort):
    """IdePort for a terminal session: tables instead of popups, prompts instead of dialogs."""

    def __init__(self, persistence: ScratchConfigPersistence, console: Console = console):
        self.persistence = persistence
        self.console = console
        self.manager: Optional[ScratchManager] = None
        self.editor_tracker: Optional[OpenEditorTracker] = None

    def persist_config(self, config: ScratchConfig) -> None:
        self.persistence.persist(config)

    def display_scratches_list(self, scratches: Sequence[Scratch], context: Any = None) -> None:
        if not scratches:
            self.console.print("[yellow]No scratches yet[/yellow]")
            return

        default_scratch = self.manager.default_scratch()
        last_opened = self.manager.config.last_opened_scratch

        table = Table(title="Scratches")
        table.add_column("#", justify="right")
        table.add_column("Name", style="cyan")
        table.add_column("", justify="left")
        for index, scratch in enumerate(scratches, 1):
            marks = []
            if scratch == default_scratch:
                marks.append("default")
            if scratch == last_opened:
                marks.append("last opened")
            table.add_row(str(index), scratch.full_name_with_mnemonics, ", ".join(marks))
        self.console.print(table)

    def open_scratch(self, scratch: Scratch, context: Any = None) -> None:
        text = self.manager.file_system.read_file(scratch.file_name)
        if text is None:
            self.manager.log.failed_to_open(scratch)
            return
        self.console.print(Panel(Text(text), title=escape(scratch.file_name), expand=False))
        if self.editor_tracker is not None:
            self.editor_tracker.selection_changed(
                TERMINAL_PROJECT_ID, self.manager.file_system.file_by(scratch.file_name)
            )

    def open_new_scratch_dialog(self, suggested_scratch_name: str, context: Any = None) -> None:
        name = self._ask_name(
            "Scratch name (you can use '&' for mnemonics)",
            suggested_scratch_name,
            self.manager.check_if_user_can_create_scratch_with_name,
        )
        self.manager.user_wants_to_add_new_scratch(name, context)

    def show_rename_dialog_for(self, scratch: Scratch) -> None:
        name = self._ask_name(
            "Scratch name (you can use '&' for mnemonics)",
            scratch.full_name_with_mnemonics,
            lambda new_name: self.manager.check_if_user_can_rename_scratch(scratch, new_name),
        )
        self.manager.user_wants_to_rename(scratch, name)

    def show_delete_dialog_for(self, scratch: Scratch, context: Any = None) -> None:
        message = f"Do you want to delete '{scratch.file_name}'? (This operation cannot be undone)"
        if Confirm.ask(message, console=self.console):
            self.manager.user_wants_to_delete_scratch(scratch)

    def add_text_to(self, scratch: Scratch, text: str, append_type: AppendType) -> None:
        file_system = self.manager.file_system
        existing = file_system.read_file(scratch.file_name)
        if existing is None:
            raise FileOperationError(f"Cannot find scratch file: {scratch.file_name}")
        if not file_system.write_file(scratch.file_name, add_text(existing, text, append_type)):
            raise FileOperationError(f"Cannot write scratch file: {scratch.file_name}")

    def show_message(self, message: str) -> None:
        self.console.print(f"[yellow]{escape(message)}[/yellow]")

    def _ask_name(self, message: str, default: str, check) -> str:
        while True:
            name = Prompt.ask(message, default=default, console=self.console)
            answer = check(name)
            if answer.is_yes:
                return name
            self.console.print(f"[red]{escape(answer.explanation)}[/red]")


class App:
    """Wiring of manager, host and trackers for one CLI invocation."""

    def __init__(self, persistence: ScratchConfigPersistence, config: ScratchConfig):
        self.persistence = persistence
        self.ide = TerminalIde(self.persistence)
        self.manager = ScratchManager(self.ide, ScratchFileSystem(self.persistence.scratches_folder), config)
        self.ide.manager = self.manager
        self.editor_tracker = OpenEditorTracker(self.manager)
        self.editor_tracker.project_opened(TERMINAL_PROJECT_ID)
        self.ide.editor_tracker = self.editor_tracker
        self.clipboard_listener = ClipboardListener(self.manager)

    def migrate_if_needed(self) -> None:
        """Adopt files already in the scratches folder on first run."""
        if self.manager.needs_migration():
            file_names = sorted(self.manager.file_system.list_scratch_files())
            logger.info(f"Migrating {len(file_names)} existing scratch files")
            self.manager.migrate(file_names)

    def find_scratch(self, name: str) -> Scratch:
        config = self.manager.sync_scratches_with_file_system()
        for scratch in config.scratches:
            if name in (scratch.full_name_with_mnemonics, scratch.file_name):
                return scratch
        fail(f"No scratch named '{name}'")

    def close(self) -> None:
        self.editor_tracker.stop_tracking()


def fail(message: str) -> None:
    console.print(f"[red]Error: {escape(message)}[/red]")
    sys.exit(1)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(package_name="scratch-organizer")
@click.option(
    '--settings',
    type=click.Path(dir_okay=False, path_type=Path),
    envvar='SCRATCH_ORGANIZER_SETTINGS',
    help='Settings file path'
)
@click.option('--verbose', is_flag=True, help='Verbose output')
@click.pass_context
def cli(ctx: click.Context, settings: Optional[Path], verbose: bool):
    """Keep an ordered list of text scratches in a folder."""
    _configure_logging(verbose)
    persistence = ScratchConfigPersistence(settings)
    loaded = persistence.try_load()
    if loaded.is_failure():
        fail(str(loaded.error()))
    app = App(persistence, loaded.value())
    app.migrate_if_needed()
    ctx.obj = app
    ctx.call_on_close(app.close)


@cli.command(name='list')
@click.pass_obj
def list_scratches(app: App):
    """Show scratches in display order."""
    app.manager.user_wants_to_see_scratches_list()
    if app.manager.should_listen_to_clipboard():
        console.print("[dim]Clipboard listening is on[/dim]")


@cli.command()
@click.argument('name', required=False)
@click.option('--text', default="", help='Initial scratch content')
@click.pass_obj
def new(app: App, name: Optional[str], text: str):
    """Create a new scratch, prompting for NAME if omitted."""
    if name is None:
        app.manager.user_wants_to_enter_new_scratch_name()
        return

    answer = app.manager.check_if_user_can_create_scratch_with_name(name)
    if answer.is_no:
        fail(answer.explanation)
    if not app.manager.user_wants_to_add_new_scratch(name, text=text):
        sys.exit(1)


@cli.command(name='open')
@click.argument('name', required=False)
@click.pass_obj
def open_scratch(app: App, name: Optional[str]):
    """Print a scratch, or the default scratch if NAME is omitted."""
    if name is None:
        opened = app.manager.user_wants_to_open_default_scratch()
    else:
        opened = app.manager.user_wants_to_open_scratch(app.find_scratch(name))
    if not opened:
        sys.exit(1)


@cli.command()
@click.argument('name')
@click.argument('new_name', required=False)
@click.pass_obj
def rename(app: App, name: str, new_name: Optional[str]):
    """Rename scratch NAME, prompting for NEW_NAME if omitted."""
    scratch = app.find_scratch(name)
    if new_name is None:
        app.manager.user_wants_to_edit_scratch_name(scratch)
        return

    answer = app.manager.check_if_user_can_rename_scratch(scratch, new_name)
    if answer.is_no:
        fail(answer.explanation)
    if not app.manager.user_wants_to_rename(scratch, new_name):
        sys.exit(1)


@cli.command()
@click.argument('name')
@click.option('--yes', is_flag=True, help='Delete without asking')
@click.pass_obj
def delete(app: App, name: str, yes: bool):
    """Delete scratch NAME and its file."""
    scratch = app.find_scratch(name)
    if yes:
        if not app.manager.user_wants_to_delete_scratch(scratch):
            sys.exit(1)
    else:
        app.manager.user_attempted_to_delete_scratch(scratch)


@cli.command()
@click.argument('name')
@click.argument('direction', type=click.Choice(['up', 'down']))
@click.pass_obj
def move(app: App, name: str, direction: str):
    """Move scratch NAME one position up or down (wrapping around)."""
    scratch = app.find_scratch(name)
    app.manager.user_moved_scratch(scratch, UP if direction == 'up' else DOWN)
    app.manager.user_wants_to_see_scratches_list()


@cli.command()
@click.argument('text')
@click.pass_obj
def append(app: App, text: str):
    """Add TEXT to the default scratch using the clipboard append type."""
    if app.manager.default_scratch() is None:
        fail("There are no scratches to append to")
    try:
        app.manager.clipboard_listener_wants_to_add_text_to_scratch(text)
    except ScratchOrganizerError as e:
        fail(str(e))


@cli.command()
@click.argument('text')
@click.option('--previous', default=None, help='Clipboard content before the change')
@click.pass_obj
def clip(app: App, text: str, previous: Optional[str]):
    """Report new clipboard TEXT, e.g. from a clipboard watcher.

    Does nothing unless clipboard listening is on.
    """
    app.clipboard_listener.on_clipboard_changed(previous, text)


@cli.command()
@click.argument('state', type=click.Choice(['on', 'off']))
@click.pass_obj
def clipboard(app: App, state: str):
    """Turn clipboard listening on or off."""
    app.manager.user_wants_to_listen_to_clipboard(state == 'on')


@cli.command(name='set-folder')
@click.argument('folder', type=click.Path(file_okay=False, path_type=Path))
@click.pass_obj
def set_folder(app: App, folder: Path):
    """Move scratch files to FOLDER and keep scratches there from now on."""
    old_root = app.manager.file_system.root
    result = app.manager.user_wants_to_change_scratches_folder(folder)
    new_root = app.manager.file_system.root
    if new_root != old_root:
        app.persistence.update_scratches_folder(new_root, app.manager.config)
        console.print(f"Scratches folder: {new_root}")
    if result.is_failure():
        sys.exit(1)


def _choice_of(enum_type):
    return click.Choice([member.value for member in enum_type], case_sensitive=False)


@cli.command(name='settings')
@click.option('--clipboard-append', type=_choice_of(AppendType), default=None,
              help='Where clipboard text is added in the default scratch')
@click.option('--new-scratch-append', type=_choice_of(AppendType), default=None,
              help='Where new scratches are added in the list')
@click.option('--default-scratch', type=_choice_of(DefaultScratchMeaning), default=None,
              help='Which scratch is opened by default')
@click.pass_obj
def show_settings(app: App, clipboard_append: Optional[str], new_scratch_append: Optional[str],
                  default_scratch: Optional[str]):
    """Show settings, changing the ones given as options."""
    config = app.manager.update_config(
        lambda c: c
        .with_clipboard_append_type(AppendType.parse(clipboard_append))
        .with_new_scratch_append_type(AppendType.parse(new_scratch_append))
        .with_default_scratch_meaning(DefaultScratchMeaning.parse(default_scratch))
    )

    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Scratches folder", str(app.manager.file_system.root))
    table.add_row("Listen to clipboard", "on" if config.listen_to_clipboard else "off")
    table.add_row("Clipboard append", config.clipboard_append_type.value)
    table.add_row("New scratch append", config.new_scratch_append_type.value)
    table.add_row("Default scratch", config.default_scratch_meaning.value)
    console.print(table)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == '__main__':
    main()
