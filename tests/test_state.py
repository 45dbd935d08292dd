import json

import pytest

from modswitch.models import RemoteFile, RemoteMod
from modswitch.state import AddonRecord, AddonType, InstanceState, StateError

from .conftest import make_record


def test_description_never_none():
    record = make_record(description=None)
    assert record.description == ""


def test_defaults():
    record = make_record()
    assert record.was_selected is True
    assert record.user_added is False
    assert record.has_colour is False
    assert record.is_from_remote is False
    assert record.is_fully_hydrated is False


def test_remote_ids_must_be_paired():
    with pytest.raises(ValueError):
        make_record(remote_mod_id=1)
    with pytest.raises(ValueError):
        make_record(remote_file_id=1)


def test_from_remote_derives_ids():
    mod = RemoteMod(id=238222, name="JEI")
    file = RemoteFile(id=3043174, display_name="jei-1.16.5-7.6.1.75", file_name="jei-1.16.5.jar")
    record = AddonRecord.from_remote(mod, file)

    assert record.remote_mod_id == 238222
    assert record.remote_file_id == 3043174
    assert record.file == "jei-1.16.5.jar"
    assert record.name == "JEI"
    assert record.is_from_remote
    assert record.is_fully_hydrated


def test_save_and_load(instance):
    mod = instance.get_mod("journeymap.jar")
    mod.remote_mod = RemoteMod(id=32274, name="JourneyMap")
    mod.remote_file = RemoteFile(id=100, game_versions=["1.16.5"])
    mod.colour = "#00ff00"
    instance.save()

    loaded = InstanceState(instance.root)
    loaded.load()

    assert loaded.game_version == "1.16.5"
    assert loaded.event_category == "TestPack - 1.2.0"
    assert [m.file for m in loaded.mods] == ["jei.jar", "optifine.jar", "journeymap.jar"]
    assert loaded.get_mod("optifine.jar").disabled is True
    journeymap = loaded.get_mod("journeymap.jar")
    assert journeymap.is_fully_hydrated
    assert journeymap.remote_file.game_versions == ["1.16.5"]
    assert journeymap.has_colour


def test_load_missing(tmp_path):
    with pytest.raises(StateError):
        InstanceState(tmp_path).load()


def test_load_invalid_json(tmp_path):
    (tmp_path / "instance.json").write_text("{not json")
    with pytest.raises(StateError):
        InstanceState(tmp_path).load()


def test_load_unknown_type(tmp_path):
    (tmp_path / "instance.json").write_text(
        json.dumps({"mods": [{"name": "x", "file": "x.jar", "type": "bogus"}]})
    )
    with pytest.raises(StateError, match="bogus"):
        InstanceState(tmp_path).load()


def test_add_mod_replaces_same_file(instance):
    instance.add_mod(make_record("jei.jar", version="2.0"))
    assert len([m for m in instance.mods if m.file == "jei.jar"]) == 1
    assert instance.get_mod("jei.jar").version == "2.0"


def test_remove_and_lookup(instance):
    instance.remove_mod("jei.jar")
    assert instance.get_mod("jei.jar") is None
    assert instance.get_mod_by_remote_id(32274).name == "JourneyMap"
    with pytest.raises(StateError):
        instance.require_mod("jei.jar")


def test_type_values_round_trip():
    record = make_record(type=AddonType.SHADERPACK)
    assert AddonRecord.from_dict(record.to_dict()).type is AddonType.SHADERPACK


@pytest.mark.parametrize(
    "manifest",
    [
        [],
        "instance",
        {"mods": {"jei.jar": {}}},
        {"mods": ["jei.jar"]},
        {"mods": [{"name": "x", "file": "x.jar", "type": "mods", "remote_file": {"file_name": "x.jar"}}]},
        {"mods": [{"name": "x", "file": "x.jar", "type": "mods", "remote_mod": "JourneyMap"}]},
        {"mods": [{"name": "x", "file": "x.jar", "type": "mods", "remote_mod": {"id": "abc"}}]},
    ],
)
def test_load_malformed_manifest(tmp_path, manifest):
    (tmp_path / "instance.json").write_text(json.dumps(manifest))
    with pytest.raises(StateError):
        InstanceState(tmp_path).load()
