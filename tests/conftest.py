from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from modswitch.models import RemoteFile, RemoteMod
from modswitch.state import AddonRecord, AddonType, InstanceState


@dataclass
class FakeCatalog:
    files: dict[int, list[RemoteFile]] = field(default_factory=dict)
    mods: dict[int, RemoteMod] = field(default_factory=dict)
    fail: Exception | None = None
    calls: list[tuple] = field(default_factory=list)

    def get_files_for_mod(self, mod_id: int) -> list[RemoteFile]:
        self.calls.append(("files", mod_id))
        if self.fail:
            raise self.fail
        return list(self.files.get(mod_id, []))

    def get_mod_by_id(self, mod_id: int) -> RemoteMod:
        self.calls.append(("mod", mod_id))
        if self.fail:
            raise self.fail
        return self.mods.get(mod_id, RemoteMod(id=mod_id, name=f"Mod {mod_id}"))

    def get_file(self, mod_id: int, file_id: int) -> RemoteFile:
        self.calls.append(("file", mod_id, file_id))
        for f in self.files.get(mod_id, []):
            if f.id == file_id:
                return f
        return RemoteFile(id=file_id)


@dataclass
class FakeAnalytics:
    events: list[tuple[str, str, str]] = field(default_factory=list)

    def send_event(self, category: str, action: str, label: str) -> None:
        self.events.append((category, action, label))


@dataclass
class FakeSelector:
    calls: list[tuple] = field(default_factory=list)

    def select(self, remote_mod, instance, current_file_id) -> None:
        self.calls.append((remote_mod, instance, current_file_id))


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture
def analytics() -> FakeAnalytics:
    return FakeAnalytics()


@pytest.fixture
def selector() -> FakeSelector:
    return FakeSelector()


def make_record(file: str = "jei.jar", type: AddonType = AddonType.MODS, **kwargs) -> AddonRecord:
    kwargs.setdefault("name", file.rsplit(".", 1)[0])
    kwargs.setdefault("version", "1.0")
    return AddonRecord(file=file, type=type, **kwargs)


@pytest.fixture
def instance(tmp_path: Path) -> InstanceState:
    """An instance with one enabled mod, one disabled mod and one catalog mod."""
    state = InstanceState(tmp_path / "instance")
    state.set_instance_info("Test", "TestPack", "1.2.0", "1.16.5")

    (state.root / "mods").mkdir(parents=True)
    (state.root / "disabledmods").mkdir()
    (state.root / "mods" / "jei.jar").write_bytes(b"jei")
    (state.root / "disabledmods" / "optifine.jar").write_bytes(b"optifine")
    (state.root / "mods" / "journeymap.jar").write_bytes(b"journeymap")

    state.add_mod(make_record("jei.jar"))
    state.add_mod(make_record("optifine.jar", disabled=True, optional=True))
    state.add_mod(
        make_record(
            "journeymap.jar",
            name="JourneyMap",
            remote_mod_id=32274,
            remote_file_id=100,
        )
    )
    state.save()
    return state
