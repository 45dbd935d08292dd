import pytest

from modswitch.api import CatalogError
from modswitch.config import Settings
from modswitch.models import RemoteFile
from modswitch.selector import PendingSelections
from modswitch.service import ModSwitchService
from modswitch.state import AddonType, InstanceState, StateError

from .conftest import make_record


@pytest.fixture
def service(catalog, analytics, selector):
    return ModSwitchService(Settings(api_key="k"), api=catalog, analytics=analytics, selector=selector)


def reload(instance):
    state = InstanceState(instance.root)
    state.load()
    return state


def test_list_mods(service, instance):
    mods = {m.file: m for m in service.list_mods(instance.root)}
    assert mods["jei.jar"].exists and not mods["jei.jar"].disabled
    assert mods["optifine.jar"].exists and mods["optifine.jar"].disabled
    assert mods["journeymap.jar"].from_remote


def test_disable_saves_manifest(service, instance):
    result = service.disable_mod(instance.root, "jei.jar")
    assert result.success and result.disabled
    assert reload(instance).get_mod("jei.jar").disabled is True
    assert (instance.root / "disabledmods" / "jei.jar").exists()


def test_enable_saves_manifest(service, instance):
    result = service.enable_mod(instance.root, "optifine.jar")
    assert result.success and not result.disabled
    assert reload(instance).get_mod("optifine.jar").disabled is False
    assert (instance.root / "mods" / "optifine.jar").exists()


def test_failed_toggle_does_not_save(service, instance):
    (instance.root / "mods" / "jei.jar").unlink()
    before = instance.state_file.read_text()

    result = service.disable_mod(instance.root, "jei.jar")

    assert not result.success
    assert instance.state_file.read_text() == before


def test_dependency_uses_game_version(service, instance):
    (instance.root / "mods" / "1.16.5").mkdir()
    (instance.root / "mods" / "1.16.5" / "lib.jar").write_bytes(b"lib")
    instance.add_mod(make_record("lib.jar", type=AddonType.DEPENDENCY))
    instance.save()

    assert service.disable_mod(instance.root, "lib.jar").success
    assert (instance.root / "disabledmods" / "lib.jar").exists()


def test_unknown_mod(service, instance):
    with pytest.raises(StateError):
        service.enable_mod(instance.root, "missing.jar")


def test_check_for_update(service, catalog, selector, instance):
    catalog.files[32274] = [RemoteFile(id=150, game_versions=["1.16.5"])]
    result = service.check_for_update(instance.root, "journeymap.jar")
    assert result.update_available
    assert len(selector.calls) == 1


def test_check_for_update_respects_restriction_setting(catalog, analytics, selector, instance):
    catalog.files[32274] = [RemoteFile(id=150, game_versions=["1.18.2"])]

    strict = ModSwitchService(Settings(api_key="k"), api=catalog, analytics=analytics, selector=selector)
    assert not strict.check_for_update(instance.root, "journeymap.jar").update_available

    relaxed = ModSwitchService(
        Settings(api_key="k", disable_add_mod_restrictions=True),
        api=catalog, analytics=analytics, selector=selector,
    )
    assert relaxed.check_for_update(instance.root, "journeymap.jar").update_available


def test_check_for_update_local_mod(service, instance):
    with pytest.raises(StateError):
        service.check_for_update(instance.root, "jei.jar")


def test_check_all_updates_records_failures(service, catalog, instance):
    catalog.fail = CatalogError("timeout")
    [result] = service.check_all_updates(instance.root)
    assert result.file == "journeymap.jar"
    assert result.retryable
    assert "timeout" in result.error


def test_reinstall(service, selector, instance):
    assert service.reinstall(instance.root, "journeymap.jar") is True
    assert selector.calls[0][2] == 100


def test_hydrate(service, catalog, instance):
    catalog.files[32274] = [RemoteFile(id=100, display_name="JourneyMap 5.7", game_versions=["1.16.5"])]
    mod = service.hydrate(instance.root, "journeymap.jar")
    assert mod.is_fully_hydrated
    assert reload(instance).get_mod("journeymap.jar").remote_file.display_name == "JourneyMap 5.7"


def test_complete_selection(catalog, analytics, instance, monkeypatch):
    pending = PendingSelections()
    service = ModSwitchService(Settings(api_key="k"), api=catalog, analytics=analytics, selector=pending)
    catalog.files[32274] = [RemoteFile(id=150, file_name="jm-150.jar", game_versions=["1.16.5"])]
    service.check_for_update(instance.root, "journeymap.jar")
    [selection] = pending.list_pending()

    installed = []

    class StubInstaller:
        def install(self, state, mod, remote_mod, remote_file):
            installed.append(remote_file.id)
            mod.file = remote_file.file_name
            mod.remote_file_id = remote_file.id
            return state.root / "mods" / remote_file.file_name

    monkeypatch.setattr(service, "installer", lambda show_progress=False: StubInstaller())

    path = service.complete_selection(selection.id, 150)

    assert path.name == "jm-150.jar"
    assert installed == [150]
    assert pending.list_pending() == []
    assert reload(instance).get_mod("jm-150.jar").remote_file_id == 150


def test_complete_unknown_selection(catalog, analytics, instance):
    service = ModSwitchService(Settings(api_key="k"), api=catalog, analytics=analytics, selector=PendingSelections())
    with pytest.raises(StateError):
        service.complete_selection("nope", 1)


def test_complete_selection_rejects_incompatible_file(catalog, analytics, instance, monkeypatch):
    pending = PendingSelections()
    service = ModSwitchService(Settings(api_key="k"), api=catalog, analytics=analytics, selector=pending)
    catalog.files[32274] = [
        RemoteFile(id=150, file_name="jm-150.jar", game_versions=["1.16.5"]),
        RemoteFile(id=999, file_name="jm-999.jar", game_versions=["1.20.1"]),
    ]
    service.check_for_update(instance.root, "journeymap.jar")
    [selection] = pending.list_pending()
    monkeypatch.setattr(service, "installer", lambda show_progress=False: pytest.fail("installed"))

    assert [f.id for f in service.selection_candidates(selection.id)] == [150]
    with pytest.raises(StateError, match="999"):
        service.complete_selection(selection.id, 999)

    assert pending.get(selection.id) is not None
    assert reload(instance).get_mod("journeymap.jar").remote_file_id == 100


def test_complete_selection_without_restrictions(catalog, analytics, instance, monkeypatch):
    pending = PendingSelections()
    settings = Settings(api_key="k", disable_add_mod_restrictions=True)
    service = ModSwitchService(settings, api=catalog, analytics=analytics, selector=pending)
    catalog.files[32274] = [RemoteFile(id=999, file_name="jm-999.jar", game_versions=["1.20.1"])]
    service.reinstall(instance.root, "journeymap.jar")
    [selection] = pending.list_pending()

    class StubInstaller:
        def install(self, state, mod, remote_mod, remote_file):
            mod.file = remote_file.file_name
            mod.remote_file_id = remote_file.id
            return state.root / "mods" / remote_file.file_name

    monkeypatch.setattr(service, "installer", lambda show_progress=False: StubInstaller())

    assert service.complete_selection(selection.id, 999).name == "jm-999.jar"
