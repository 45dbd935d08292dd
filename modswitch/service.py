"""Service layer - add-on operations for the CLI and web UI."""

import logging
from dataclasses import dataclass
from pathlib import Path

from .analytics import Analytics, NullAnalytics
from .api import CatalogAPI, CatalogError
from .config import Settings
from .installer import FileInstaller
from .models import RemoteFile
from .selector import PendingSelection, PendingSelections
from .state import AddonRecord, InstanceState, StateError
from .toggle import disable, does_file_exist, enable
from .updates import EventSink, FileSelector, UpdateResolver, order_candidates

logger = logging.getLogger(__name__)


@dataclass
class ModStatus:
    name: str
    version: str
    type: str
    file: str
    disabled: bool
    exists: bool
    from_remote: bool
    remote_mod_id: int | None = None
    remote_file_id: int | None = None


@dataclass
class ToggleResult:
    name: str
    file: str
    success: bool
    disabled: bool


@dataclass
class UpdateCheckResult:
    name: str
    file: str
    update_available: bool
    error: str = ""
    retryable: bool = False


class ModSwitchService:
    """Business logic for toggling and updating an instance's add-ons."""

    def __init__(
        self,
        settings: Settings | None = None,
        api: CatalogAPI | None = None,
        analytics: EventSink | None = None,
        selector: FileSelector | None = None,
    ):
        self.settings = settings or Settings.from_env()
        self._api = api
        self.analytics = analytics or _make_analytics(self.settings)
        self.selector = selector if selector is not None else PendingSelections()

    @property
    def api(self) -> CatalogAPI:
        if self._api is None:
            self._api = CatalogAPI(self.settings.api_key, self.settings.api_url)
        return self._api

    @property
    def resolver(self) -> UpdateResolver:
        return UpdateResolver(
            catalog=self.api,
            analytics=self.analytics,
            selector=self.selector,
            restrictions_disabled=self.settings.disable_add_mod_restrictions,
        )

    def installer(self, show_progress: bool = False) -> FileInstaller:
        return FileInstaller(self.api, show_progress=show_progress)

    def load_instance(self, instance_root: Path) -> InstanceState:
        state = InstanceState(instance_root)
        state.load()
        return state

    def list_mods(self, instance_root: Path) -> list[ModStatus]:
        """Every add-on in the manifest with its toggle state and file presence."""
        state = self.load_instance(instance_root)
        return [
            ModStatus(
                name=mod.name,
                version=mod.version,
                type=mod.type.value,
                file=mod.file,
                disabled=mod.disabled,
                exists=does_file_exist(mod, state.root, state.game_version),
                from_remote=mod.is_from_remote,
                remote_mod_id=mod.remote_mod_id,
                remote_file_id=mod.remote_file_id,
            )
            for mod in state.mods
        ]

    def enable_mod(self, instance_root: Path, file: str) -> ToggleResult:
        """Enable an add-on. The manifest is saved only if the file moved."""
        state = self.load_instance(instance_root)
        mod = state.require_mod(file)
        success = enable(mod, state.root, state.game_version)
        if success:
            state.save()
        return ToggleResult(name=mod.name, file=mod.file, success=success, disabled=mod.disabled)

    def disable_mod(self, instance_root: Path, file: str) -> ToggleResult:
        """Disable an add-on. The manifest is saved only if the file moved."""
        state = self.load_instance(instance_root)
        mod = state.require_mod(file)
        success = disable(mod, state.root, state.game_version)
        if success:
            state.save()
        return ToggleResult(name=mod.name, file=mod.file, success=success, disabled=mod.disabled)

    def check_for_update(self, instance_root: Path, file: str) -> UpdateCheckResult:
        """Check one add-on. Catalog errors propagate."""
        state = self.load_instance(instance_root)
        mod = state.require_mod(file)
        if not mod.is_from_remote:
            raise StateError(f"{mod.name} was not installed from the catalog")
        available = self.resolver.check_for_update(mod, state)
        return UpdateCheckResult(name=mod.name, file=mod.file, update_available=available)

    def check_all_updates(self, instance_root: Path) -> list[UpdateCheckResult]:
        """Check every catalog-sourced add-on, recording failures per add-on."""
        state = self.load_instance(instance_root)
        resolver = self.resolver
        results = []
        for mod in state.mods:
            if not mod.is_from_remote:
                continue
            try:
                available = resolver.check_for_update(mod, state)
                results.append(
                    UpdateCheckResult(name=mod.name, file=mod.file, update_available=available)
                )
            except CatalogError as e:
                logger.warning("Update check failed for %s: %s", mod.name, e)
                results.append(
                    UpdateCheckResult(
                        name=mod.name,
                        file=mod.file,
                        update_available=False,
                        error=str(e),
                        retryable=True,
                    )
                )
        return results

    def reinstall(self, instance_root: Path, file: str) -> bool:
        """Hand an add-on to the selector regardless of available updates."""
        state = self.load_instance(instance_root)
        mod = state.require_mod(file)
        if not mod.is_from_remote:
            raise StateError(f"{mod.name} was not installed from the catalog")
        return self.resolver.reinstall(mod, state)

    def hydrate(self, instance_root: Path, file: str) -> AddonRecord:
        """Refresh the cached catalog metadata of an add-on."""
        state = self.load_instance(instance_root)
        mod = state.require_mod(file)
        if not mod.is_from_remote:
            raise StateError(f"{mod.name} was not installed from the catalog")
        mod.remote_mod = self.api.get_mod_by_id(mod.remote_mod_id)
        mod.remote_file = self.api.get_file(mod.remote_mod_id, mod.remote_file_id)
        state.save()
        return mod

    def install_file(self, instance_root: Path, file: str, file_id: int) -> Path:
        """Replace an add-on's file with a specific catalog file."""
        state = self.load_instance(instance_root)
        mod = state.require_mod(file)
        return self._install(state, mod, file_id)

    def selection_candidates(self, selection_id: str) -> list[RemoteFile]:
        """Files a pending web selection may pick from, newest first."""
        pending, state = self._pending(selection_id)
        return self._candidates(pending, state)

    def complete_selection(self, selection_id: str, file_id: int) -> Path:
        """Resolve a pending web selection by installing the chosen file."""
        pending, state = self._pending(selection_id)
        mod = state.get_mod_by_remote_id(pending.remote_mod.id)
        if mod is None:
            raise StateError(f"{pending.remote_mod.name} is no longer installed")

        chosen = next((f for f in self._candidates(pending, state) if f.id == file_id), None)
        if chosen is None:
            raise StateError(f"File {file_id} is not a compatible choice for {mod.name}")

        path = self._install(state, mod, file_id, remote_file=chosen)
        self.selector.pop(selection_id)
        return path

    def _pending(self, selection_id: str) -> tuple[PendingSelection, InstanceState]:
        if not isinstance(self.selector, PendingSelections):
            raise StateError("No pending selections with this selector")
        pending = self.selector.get(selection_id)
        if pending is None:
            raise StateError(f"No pending selection {selection_id}")
        return pending, self.load_instance(pending.instance_root)

    def _candidates(self, pending: PendingSelection, state: InstanceState) -> list[RemoteFile]:
        return order_candidates(
            self.api.get_files_for_mod(pending.remote_mod.id),
            state.game_version,
            self.settings.disable_add_mod_restrictions,
        )

    def _install(
        self,
        state: InstanceState,
        mod: AddonRecord,
        file_id: int,
        remote_file: RemoteFile | None = None,
    ) -> Path:
        if not mod.is_from_remote:
            raise StateError(f"{mod.name} was not installed from the catalog")
        remote_mod = self.api.get_mod_by_id(mod.remote_mod_id)
        if remote_file is None:
            remote_file = self.api.get_file(mod.remote_mod_id, file_id)
        path = self.installer().install(state, mod, remote_mod, remote_file)
        state.save()
        return path


def _make_analytics(settings: Settings) -> EventSink:
    if settings.analytics_url:
        return Analytics(settings.analytics_url)
    return NullAnalytics()
