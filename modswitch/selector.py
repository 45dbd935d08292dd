"""File selectors invoked when a newer (or replacement) file can be installed."""

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from .installer import FileInstaller
from .models import RemoteMod
from .state import InstanceState, StateError
from .updates import CatalogClient, order_candidates


class ConsoleFileSelector:
    """Lists candidate files in a table and installs the one the user picks."""

    def __init__(
        self,
        catalog: CatalogClient,
        installer: FileInstaller,
        restrictions_disabled: bool = False,
        console: Console | None = None,
    ):
        self.catalog = catalog
        self.installer = installer
        self.restrictions_disabled = restrictions_disabled
        self.console = console or Console()

    def select(
        self, remote_mod: RemoteMod, instance: InstanceState, current_file_id: int
    ) -> None:
        record = instance.get_mod_by_remote_id(remote_mod.id)
        if record is None:
            raise StateError(f"{remote_mod.name} is not installed in {instance.name or instance.root}")

        files = order_candidates(
            self.catalog.get_files_for_mod(remote_mod.id),
            instance.game_version,
            self.restrictions_disabled,
        )
        if not files:
            self.console.print(f"[yellow]No compatible files for {remote_mod.name}.[/yellow]")
            return

        table = Table(title=f"Files for {remote_mod.name}")
        table.add_column("File ID", style="cyan")
        table.add_column("Name")
        table.add_column("Game versions")
        table.add_column("Released")
        for f in files:
            marker = " [green](installed)[/green]" if f.id == current_file_id else ""
            table.add_row(
                str(f.id),
                f"{f.display_name or f.file_name}{marker}",
                ", ".join(f.game_versions),
                f.file_date[:10],
            )
        self.console.print(table)

        by_id = {f.id: f for f in files}
        choice = click.prompt(
            "File ID to install (0 to cancel)", type=int, default=files[0].id
        )
        if choice == 0:
            self.console.print("[dim]Cancelled.[/dim]")
            return
        if choice not in by_id:
            self.console.print(f"[red]Error:[/red] File ID {choice} is not in the list.")
            return

        path = self.installer.install(instance, record, remote_mod, by_id[choice])
        instance.save()
        self.console.print(f"[green]Installed[/green] {path.name}")


@dataclass
class PendingSelection:
    id: str
    remote_mod: RemoteMod
    instance_root: Path
    current_file_id: int
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "mod": self.remote_mod.to_dict(),
            "instance_root": str(self.instance_root),
            "current_file_id": self.current_file_id,
            "created_at": self.created_at,
        }


class PendingSelections:
    """Queues selection requests for the web UI to resolve later."""

    def __init__(self):
        self._pending: dict[str, PendingSelection] = {}
        self._lock = threading.Lock()

    def select(
        self, remote_mod: RemoteMod, instance: InstanceState, current_file_id: int
    ) -> None:
        selection_id = str(uuid.uuid4())[:8]
        pending = PendingSelection(
            id=selection_id,
            remote_mod=remote_mod,
            instance_root=instance.root,
            current_file_id=current_file_id,
        )
        with self._lock:
            self._pending[selection_id] = pending

    def list_pending(self) -> list[PendingSelection]:
        with self._lock:
            return list(self._pending.values())

    def get(self, selection_id: str) -> PendingSelection | None:
        with self._lock:
            return self._pending.get(selection_id)

    def pop(self, selection_id: str) -> PendingSelection | None:
        with self._lock:
            return self._pending.pop(selection_id, None)
