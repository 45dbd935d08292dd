"""Enable and disable add-ons by moving their files in and out of disabledmods/."""

import logging
from pathlib import Path

from .fileops import ensure_parent_dir, move_file
from .state import AddonRecord, AddonType

logger = logging.getLogger(__name__)

DISABLED_DIR = "disabledmods"

# Active directory per category, relative to the instance root
ACTIVE_DIRS: dict[AddonType, str] = {
    AddonType.JAR: "jarmods",
    AddonType.FORGE: "jarmods",
    AddonType.MCPC: "jarmods",
    AddonType.TEXTUREPACK: "texturepacks",
    AddonType.RESOURCEPACK: "resourcepacks",
    AddonType.MODS: "mods",
    AddonType.IC2LIB: "mods/ic2",
    AddonType.DENLIB: "mods/denlib",
    AddonType.COREMODS: "coremods",
    AddonType.SHADERPACK: "shaderpacks",
}

# Categories whose directory is mods/<qualifier>
QUALIFIED_DIRS: dict[AddonType, str] = {
    AddonType.DEPENDENCY: "mods",
}


def resolve_active_path(
    instance_root: Path,
    addon_type: AddonType,
    file: str,
    version_qualifier: str | None = None,
) -> Path | None:
    """
    Location of an enabled add-on's file.

    Returns None when the category has no active directory, or when it needs
    a version qualifier and none was given. A warning is logged either way.
    """
    root = Path(instance_root)

    if addon_type in ACTIVE_DIRS:
        return root / ACTIVE_DIRS[addon_type] / file

    if addon_type in QUALIFIED_DIRS:
        if not version_qualifier:
            logger.warning(
                "Cannot locate %s: %s add-ons need a version qualifier",
                file,
                addon_type.value,
            )
            return None
        return root / QUALIFIED_DIRS[addon_type] / version_qualifier / file

    logger.warning("Unsupported add-on type %s for enabling/disabling %s", addon_type.value, file)
    return None


def resolve_disabled_path(instance_root: Path, file: str) -> Path:
    """Location of a disabled add-on's file."""
    return Path(instance_root) / DISABLED_DIR / file


def enable(
    record: AddonRecord, instance_root: Path, version_qualifier: str | None = None
) -> bool:
    """Move a disabled add-on back into its active directory."""
    if not record.disabled:
        return False

    active = resolve_active_path(instance_root, record.type, record.file, version_qualifier)
    if active is None:
        return False

    if not ensure_parent_dir(active):
        return False

    if not move_file(resolve_disabled_path(instance_root, record.file), active):
        return False

    record.disabled = False
    logger.info("Enabled %s", record.name)
    return True


def disable(
    record: AddonRecord, instance_root: Path, version_qualifier: str | None = None
) -> bool:
    """Move an active add-on into disabledmods/."""
    if record.disabled:
        return False

    active = resolve_active_path(instance_root, record.type, record.file, version_qualifier)
    if active is None:
        return False

    disabled = resolve_disabled_path(instance_root, record.file)
    if not ensure_parent_dir(disabled):
        return False

    if not move_file(active, disabled):
        return False

    record.disabled = True
    logger.info("Disabled %s", record.name)
    return True


def does_file_exist(
    record: AddonRecord, instance_root: Path, version_qualifier: str | None = None
) -> bool:
    """Check the add-on's file is where its disabled flag says it is."""
    if record.disabled:
        return resolve_disabled_path(instance_root, record.file).exists()

    active = resolve_active_path(instance_root, record.type, record.file, version_qualifier)
    if active is None:
        return False
    return active.exists()


def current_path(
    record: AddonRecord, instance_root: Path, version_qualifier: str | None = None
) -> Path | None:
    """Where the add-on's file lives given its current toggle state."""
    if record.disabled:
        return resolve_disabled_path(instance_root, record.file)
    return resolve_active_path(instance_root, record.type, record.file, version_qualifier)
