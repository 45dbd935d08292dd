"""Instance manifest and add-on records."""

import json
from enum import Enum
from pathlib import Path
from typing import Any

from .models import RemoteFile, RemoteMod

STATE_FILENAME = "instance.json"


class StateError(Exception):
    """Raised when manifest operations fail."""

    pass


class AddonType(Enum):
    """Closed set of add-on categories known to an instance manifest."""

    JAR = "jar"
    FORGE = "forge"
    MCPC = "mcpc"
    TEXTUREPACK = "texturepack"
    RESOURCEPACK = "resourcepack"
    MODS = "mods"
    IC2LIB = "ic2lib"
    DENLIB = "denlib"
    COREMODS = "coremods"
    SHADERPACK = "shaderpack"
    DEPENDENCY = "dependency"
    # Known to manifests but never toggled
    EXTRACT = "extract"
    DECOMP = "decomp"
    MILLENAIRE = "millenaire"
    PLUGINS = "plugins"


class AddonRecord:
    """One add-on installed into an instance."""

    def __init__(
        self,
        name: str,
        version: str,
        file: str,
        type: AddonType,
        optional: bool = False,
        colour: str | None = None,
        description: str | None = "",
        disabled: bool = False,
        user_added: bool = False,
        was_selected: bool = True,
        remote_mod_id: int | None = None,
        remote_file_id: int | None = None,
        remote_mod: RemoteMod | None = None,
        remote_file: RemoteFile | None = None,
    ):
        if (remote_mod_id is None) != (remote_file_id is None):
            raise ValueError(
                f"{name}: remote_mod_id and remote_file_id must be set together"
            )
        self.name = name
        self.version = version
        self.file = file
        self.type = type
        self.optional = optional
        self.colour = colour
        self.description = description or ""
        self.disabled = disabled
        self.user_added = user_added
        self.was_selected = was_selected
        self.remote_mod_id = remote_mod_id
        self.remote_file_id = remote_file_id
        self.remote_mod = remote_mod
        self.remote_file = remote_file

    @classmethod
    def from_remote(
        cls,
        remote_mod: RemoteMod,
        remote_file: RemoteFile,
        type: AddonType = AddonType.MODS,
        **kwargs: Any,
    ) -> "AddonRecord":
        """Build a record for a file installed straight from the catalog."""
        kwargs.setdefault("name", remote_mod.name)
        kwargs.setdefault("version", remote_file.display_name)
        kwargs.setdefault("file", remote_file.file_name)
        return cls(
            type=type,
            remote_mod_id=remote_mod.id,
            remote_file_id=remote_file.id,
            remote_mod=remote_mod,
            remote_file=remote_file,
            **kwargs,
        )

    @property
    def has_colour(self) -> bool:
        return self.colour is not None

    @property
    def is_from_remote(self) -> bool:
        return self.remote_mod_id is not None and self.remote_file_id is not None

    @property
    def is_fully_hydrated(self) -> bool:
        return self.remote_mod is not None and self.remote_file is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "file": self.file,
            "type": self.type.value,
            "optional": self.optional,
            "colour": self.colour,
            "description": self.description,
            "disabled": self.disabled,
            "user_added": self.user_added,
            "was_selected": self.was_selected,
            "remote_mod_id": self.remote_mod_id,
            "remote_file_id": self.remote_file_id,
            "remote_mod": self.remote_mod.to_dict() if self.remote_mod else None,
            "remote_file": self.remote_file.to_dict() if self.remote_file else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AddonRecord":
        try:
            addon_type = AddonType(data.get("type", ""))
        except ValueError:
            raise StateError(
                f"Unknown add-on type {data.get('type')!r} for {data.get('name')!r}"
            )

        remote_mod = data.get("remote_mod")
        remote_file = data.get("remote_file")
        try:
            return cls(
                name=data.get("name", ""),
                version=data.get("version", ""),
                file=data.get("file", ""),
                type=addon_type,
                optional=data.get("optional", False),
                colour=data.get("colour"),
                description=data.get("description"),
                disabled=data.get("disabled", False),
                user_added=data.get("user_added", False),
                was_selected=data.get("was_selected", True),
                remote_mod_id=data.get("remote_mod_id"),
                remote_file_id=data.get("remote_file_id"),
                remote_mod=RemoteMod.from_dict(remote_mod) if remote_mod else None,
                remote_file=RemoteFile.from_dict(remote_file) if remote_file else None,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise StateError(f"Invalid add-on record {data.get('name')!r}: {e!r}")


class InstanceState:
    """Manages the manifest file of an instance."""

    def __init__(self, root: Path):
        self.root = Path(root)
        self.state_file = self.root / STATE_FILENAME
        self.name: str = ""
        self.pack: str = ""
        self.pack_version: str = ""
        self.game_version: str = ""
        self.mods: list[AddonRecord] = []

    @property
    def event_category(self) -> str:
        """Category used when reporting usage events for this instance."""
        return f"{self.pack} - {self.pack_version}"

    def exists(self) -> bool:
        """Check if manifest file exists."""
        return self.state_file.exists()

    def load(self) -> None:
        """Load manifest from file."""
        if not self.state_file.exists():
            raise StateError(f"No instance manifest found at {self.state_file}")

        try:
            with open(self.state_file) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise StateError(f"Invalid instance manifest: {e}")
        if not isinstance(data, dict):
            raise StateError("Invalid instance manifest: expected a JSON object")

        entries = data.get("mods", [])
        if not isinstance(entries, list) or not all(isinstance(m, dict) for m in entries):
            raise StateError("Invalid instance manifest: mods must be a list of objects")

        self.name = data.get("name", "")
        self.pack = data.get("pack", "")
        self.pack_version = data.get("pack_version", "")
        self.game_version = data.get("game_version", "")
        self.mods = [AddonRecord.from_dict(m) for m in entries]

    def save(self) -> None:
        """Save manifest to file."""
        self.root.mkdir(parents=True, exist_ok=True)

        data = {
            "name": self.name,
            "pack": self.pack,
            "pack_version": self.pack_version,
            "game_version": self.game_version,
            "mods": [mod.to_dict() for mod in self.mods],
        }

        with open(self.state_file, "w") as f:
            json.dump(data, f, indent=2)

    def set_instance_info(
        self, name: str, pack: str, pack_version: str, game_version: str
    ) -> None:
        """Set instance metadata."""
        self.name = name
        self.pack = pack
        self.pack_version = pack_version
        self.game_version = game_version

    def add_mod(self, record: AddonRecord) -> None:
        """Add a record, replacing any existing one with the same file."""
        self.remove_mod(record.file)
        self.mods.append(record)

    def remove_mod(self, file: str) -> None:
        """Remove a record from the manifest."""
        self.mods = [m for m in self.mods if m.file != file]

    def get_mod(self, file: str) -> AddonRecord | None:
        """Get a record by its file name."""
        for mod in self.mods:
            if mod.file == file:
                return mod
        return None

    def get_mod_by_remote_id(self, remote_mod_id: int) -> AddonRecord | None:
        """Get the record installed from a given catalog mod."""
        for mod in self.mods:
            if mod.remote_mod_id == remote_mod_id:
                return mod
        return None

    def require_mod(self, file: str) -> AddonRecord:
        """Get a record by its file name or raise StateError."""
        mod = self.get_mod(file)
        if mod is None:
            raise StateError(f"No add-on with file {file!r} in {self.name or self.root}")
        return mod
