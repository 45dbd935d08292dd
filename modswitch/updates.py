"""Decide whether a newer catalog file exists for an installed add-on."""

import logging
from typing import Iterable, Protocol

from .models import RemoteFile, RemoteMod
from .state import AddonRecord, InstanceState

logger = logging.getLogger(__name__)


class CatalogClient(Protocol):
    def get_files_for_mod(self, mod_id: int) -> list[RemoteFile]: ...

    def get_mod_by_id(self, mod_id: int) -> RemoteMod: ...


class EventSink(Protocol):
    def send_event(self, category: str, action: str, label: str) -> None: ...


class FileSelector(Protocol):
    def select(
        self, remote_mod: RemoteMod, instance: InstanceState, current_file_id: int
    ) -> None: ...


def order_candidates(
    candidates: Iterable[RemoteFile],
    compatibility_target: str,
    restrictions_disabled: bool,
) -> list[RemoteFile]:
    """Newest first, limited to compatible files unless restrictions are off."""
    ordered = sorted(candidates, key=lambda f: f.id, reverse=True)
    if not restrictions_disabled:
        ordered = [f for f in ordered if f.is_compatible_with(compatibility_target)]
    return ordered


def has_update(
    current_file_id: int,
    candidates: Iterable[RemoteFile],
    compatibility_target: str,
    restrictions_disabled: bool,
) -> bool:
    """True if any eligible candidate is newer than the installed file."""
    eligible = order_candidates(candidates, compatibility_target, restrictions_disabled)
    return any(f.id > current_file_id for f in eligible)


class UpdateResolver:
    """Checks the catalog for newer files and hands off to a file selector."""

    def __init__(
        self,
        catalog: CatalogClient,
        analytics: EventSink,
        selector: FileSelector,
        restrictions_disabled: bool = False,
    ):
        self.catalog = catalog
        self.analytics = analytics
        self.selector = selector
        self.restrictions_disabled = restrictions_disabled

    def list_candidates(self, remote_mod_id: int) -> list[RemoteFile]:
        return self.catalog.get_files_for_mod(remote_mod_id)

    def check_for_update(self, record: AddonRecord, instance: InstanceState) -> bool:
        """
        Offer a newer file for the add-on if the catalog has one.

        Returns True if the selector was invoked, False if the add-on is
        already up to date. Catalog errors propagate to the caller.
        """
        _require_remote(record)
        self.analytics.send_event(instance.event_category, "UpdateMods", "Instance")

        candidates = self.list_candidates(record.remote_mod_id)
        if not has_update(
            record.remote_file_id,
            candidates,
            instance.game_version,
            self.restrictions_disabled,
        ):
            logger.info("%s is up to date", record.name)
            return False

        self._hand_off(record, instance)
        return True

    def reinstall(self, record: AddonRecord, instance: InstanceState) -> bool:
        """Offer the add-on's files for reinstallation unconditionally."""
        _require_remote(record)
        self.analytics.send_event(instance.event_category, "ReinstallMods", "Instance")
        self._hand_off(record, instance)
        return True

    def _hand_off(self, record: AddonRecord, instance: InstanceState) -> None:
        remote_mod = self.catalog.get_mod_by_id(record.remote_mod_id)
        self.selector.select(remote_mod, instance, record.remote_file_id)


def _require_remote(record: AddonRecord) -> None:
    if not record.is_from_remote:
        raise ValueError(f"{record.name} was not installed from the catalog")
