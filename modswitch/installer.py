"""Replace an installed add-on file with another release from the catalog."""

import logging
import os
from pathlib import Path
from typing import Callable

import requests
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)

from .api import CatalogAPI, CatalogError
from .models import RemoteFile, RemoteMod
from .state import AddonRecord, InstanceState
from .toggle import current_path

logger = logging.getLogger(__name__)


class InstallError(Exception):
    """Raised when a replacement file cannot be installed."""

    pass


class FileInstaller:
    """Downloads catalog files into an instance in place of the current file."""

    def __init__(self, api: CatalogAPI, show_progress: bool = True):
        self.api = api
        self.session = requests.Session()
        self.show_progress = show_progress

    def install(
        self,
        instance: InstanceState,
        record: AddonRecord,
        remote_mod: RemoteMod,
        remote_file: RemoteFile,
        on_progress: Callable[[int, int], None] | None = None,
    ) -> Path:
        """
        Put remote_file where record's file currently lives and update record.

        The new file lands in the active or disabled directory according to
        record.disabled, so the toggle state is preserved. The caller saves
        the manifest.

        Returns the path of the installed file.
        """
        old_path = current_path(record, instance.root, instance.game_version)
        if old_path is None:
            raise InstallError(f"Cannot locate {record.file} for {record.name}")

        filename = remote_file.file_name or record.file
        if Path(filename).name != filename or filename in (".", ".."):
            raise InstallError(f"Refusing catalog file name {filename!r}")

        owner = instance.get_mod(filename)
        if owner is not None and owner is not record:
            raise InstallError(f"{filename} already belongs to {owner.name}")
        if filename != record.file and (old_path.parent / filename).exists():
            raise InstallError(f"{filename} already exists in {old_path.parent}")

        download_url = remote_file.download_url
        if not download_url:
            try:
                download_url = self.api.get_download_url(remote_mod.id, remote_file.id)
            except CatalogError as e:
                raise InstallError(f"Failed to get download URL for {filename}: {e}")

        target_dir = old_path.parent
        target_dir.mkdir(parents=True, exist_ok=True)
        final_path = target_dir / filename
        self._download(download_url, target_dir, filename, on_progress)

        if old_path != final_path and old_path.exists():
            try:
                old_path.unlink()
            except OSError as e:
                logger.warning("Could not remove old file %s: %s", old_path, e)

        record.file = filename
        record.version = remote_file.display_name or record.version
        record.remote_mod_id = remote_mod.id
        record.remote_file_id = remote_file.id
        record.remote_mod = remote_mod
        record.remote_file = remote_file
        logger.info("Installed %s for %s", filename, record.name)
        return final_path

    def _download(
        self,
        url: str,
        target_dir: Path,
        filename: str,
        on_progress: Callable[[int, int], None] | None,
    ) -> Path:
        temp_path = target_dir / f".downloading_{filename}"
        progress = _create_download_progress() if self.show_progress else None

        try:
            response = self.session.get(url, stream=True, timeout=60)
            response.raise_for_status()

            total_size = int(response.headers.get("content-length", 0))
            bytes_downloaded = 0

            if progress:
                progress.start()
                task_id = progress.add_task("download", filename=filename[:40], total=total_size)

            with open(temp_path, "wb") as f:
                for chunk in response.iter_content(chunk_size=8192):
                    if chunk:
                        f.write(chunk)
                        bytes_downloaded += len(chunk)
                        if progress:
                            progress.update(task_id, advance=len(chunk))
                        if on_progress:
                            on_progress(bytes_downloaded, total_size)

            final_path = target_dir / filename
            os.replace(temp_path, final_path)
            return final_path

        except (requests.RequestException, OSError) as e:
            if temp_path.exists():
                temp_path.unlink()
            raise InstallError(f"Failed to download {filename}: {e}")
        finally:
            if progress:
                progress.stop()


def _create_download_progress() -> Progress:
    """Create a progress bar for downloads."""
    return Progress(
        TextColumn("[bold blue]{task.fields[filename]}", justify="right"),
        BarColumn(bar_width=30),
        "[progress.percentage]{task.percentage:>3.0f}%",
        DownloadColumn(),
        TransferSpeedColumn(),
        TimeRemainingColumn(),
    )
