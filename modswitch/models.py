"""Remote catalog metadata."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class RemoteFile:
    """One release of an add-on in the remote catalog."""

    id: int
    display_name: str = ""
    file_name: str = ""
    game_versions: list[str] = field(default_factory=list)
    download_url: str | None = None
    file_date: str = ""

    def is_compatible_with(self, target: str) -> bool:
        return target in self.game_versions

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "display_name": self.display_name,
            "file_name": self.file_name,
            "game_versions": list(self.game_versions),
            "download_url": self.download_url,
            "file_date": self.file_date,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RemoteFile":
        return cls(
            id=int(data["id"]),
            display_name=data.get("display_name", ""),
            file_name=data.get("file_name", ""),
            game_versions=list(data.get("game_versions", [])),
            download_url=data.get("download_url"),
            file_date=data.get("file_date", ""),
        )

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "RemoteFile":
        """Parse a file object as returned by the catalog API."""
        return cls(
            id=int(data["id"]),
            display_name=data.get("displayName", ""),
            file_name=data.get("fileName", ""),
            game_versions=list(data.get("gameVersions") or []),
            download_url=data.get("downloadUrl"),
            file_date=data.get("fileDate", ""),
        )


@dataclass
class RemoteMod:
    """Catalog metadata for an add-on."""

    id: int
    name: str = ""
    summary: str = ""
    website_url: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "summary": self.summary,
            "website_url": self.website_url,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RemoteMod":
        return cls(
            id=int(data["id"]),
            name=data.get("name", ""),
            summary=data.get("summary", ""),
            website_url=data.get("website_url", ""),
        )

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "RemoteMod":
        """Parse a mod object as returned by the catalog API."""
        links = data.get("links") or {}
        return cls(
            id=int(data["id"]),
            name=data.get("name", ""),
            summary=data.get("summary", ""),
            website_url=links.get("websiteUrl", ""),
        )
