"""Configuration dataclasses with validation."""
from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Iterable, Optional

from .errors import ConfigurationError


class Category(Enum):
    """Top-level category a file is sorted into."""
    IMAGES = "images"
    MUSIC = "music"
    VIDEO = "video"
    OTHER = "other"


class CollisionPolicy(Enum):
    """What to do when a destination file name is already taken."""
    OVERWRITE = "overwrite"  # Later move replaces the existing file
    RENAME = "rename"        # Append " (n)" before the extension


# Files that desktops depend on directly (shortcuts, launchers, settings).
WINDOWS_PROTECTED_EXTENSIONS = frozenset({
    "ini", "lnk", "sys", "dll", "url", "msi",
    "bat", "cmd", "reg", "scr", "drv", "tmp", "config",
})

LINUX_PROTECTED_EXTENSIONS = frozenset({
    "desktop", "sh", "appimage", "conf", "cfg", "ini",
    "service", "socket", "timer", "ko", "so", "bin",
    "elf", "run", "deb", "rpm", "tmp",
})


def normalize_extensions(extensions: Iterable[str]) -> frozenset[str]:
    """Lowercase extensions and strip leading dots, dropping blanks."""
    result = set()
    for ext in extensions:
        ext = ext.strip().lstrip(".").lower()
        if ext:
            result.add(ext)
    return frozenset(result)


def default_protected_extensions(platform: Optional[str] = None) -> frozenset[str]:
    """Protected extension preset for a platform (defaults to the running one)."""
    platform = platform or sys.platform
    if platform.startswith("win"):
        return WINDOWS_PROTECTED_EXTENSIONS
    return LINUX_PROTECTED_EXTENSIONS


def _check_folder_name(label: str, name: str) -> None:
    if not name or not name.strip():
        raise ConfigurationError(f"{label} folder name must not be empty")
    if name in {".", ".."}:
        raise ConfigurationError(f"{label} folder name must not be {name!r}")
    if "/" in name or "\\" in name:
        raise ConfigurationError(
            f"{label} folder name must be a single folder, got {name!r}"
        )


@dataclass(frozen=True, slots=True)
class SortConfig:
    """Configuration for one sort run.

    Immutable; validated on construction. Folder names are used as direct
    subfolders of the target directory.
    """
    images_folder: str = "Images"
    music_folder: str = "Music"
    video_folder: str = "Videos"
    other_folder: str = "Other"
    duplicates_folder: str = "Duplicates"
    duplicates_enabled: bool = True
    protected_extensions: frozenset[str] = field(
        default_factory=default_protected_extensions
    )
    collision_policy: CollisionPolicy = CollisionPolicy.OVERWRITE

    def __post_init__(self) -> None:
        """Validate configuration."""
        names = {
            "Images": self.images_folder,
            "Music": self.music_folder,
            "Videos": self.video_folder,
            "Other": self.other_folder,
        }
        if self.duplicates_enabled:
            names["Duplicates"] = self.duplicates_folder

        for label, name in names.items():
            _check_folder_name(label, name)

        # Two categories sharing a folder would make sorting ambiguous
        seen: dict[str, str] = {}
        for label, name in names.items():
            key = name.strip().lower()
            if key in seen:
                raise ConfigurationError(
                    f"{label} and {seen[key]} folders share the name {name!r}"
                )
            seen[key] = label

        object.__setattr__(
            self,
            "protected_extensions",
            normalize_extensions(self.protected_extensions),
        )

    def folder_for(self, category: Category) -> str:
        """Main folder name for a category."""
        if category is Category.IMAGES:
            return self.images_folder
        if category is Category.MUSIC:
            return self.music_folder
        if category is Category.VIDEO:
            return self.video_folder
        return self.other_folder

    def is_protected(self, extension: str) -> bool:
        return extension.lstrip(".").lower() in self.protected_extensions

    def with_overrides(self, **kwargs) -> "SortConfig":
        """Create a new config with some values overridden."""
        return replace(self, **kwargs)

    @classmethod
    def from_dict(cls, data: dict) -> "SortConfig":
        """Build a config from a plain mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        if "protected_extensions" in kwargs:
            kwargs["protected_extensions"] = frozenset(kwargs["protected_extensions"])
        if "collision_policy" in kwargs and not isinstance(
            kwargs["collision_policy"], CollisionPolicy
        ):
            kwargs["collision_policy"] = CollisionPolicy(kwargs["collision_policy"])
        return cls(**kwargs)
