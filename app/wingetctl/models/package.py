"""Package models for winget query results.

This module defines the record type produced by parsing winget's
tabular output.
"""

from dataclasses import dataclass, field


def _normalize(value: str | None) -> str | None:
    """Strip a field value and map empty strings to None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True, slots=True)
class PackageRecord:
    """A package as reported by winget.

    Records are ephemeral: they are rebuilt from CLI output on every
    query and only their ids are ever persisted.

    Attributes:
        id: Vendor-namespaced package identifier (e.g., 'Mozilla.Firefox').
        name: Display name (e.g., 'Mozilla Firefox (x64 en-US)').
        installed_version: Installed version, if the package is installed.
        available_version: Newer version offered by the source, if any.
        source: Source the package comes from (e.g., 'winget', 'msstore').
    """

    id: str
    name: str | None = field(default=None)
    installed_version: str | None = field(default=None)
    available_version: str | None = field(default=None)
    source: str | None = field(default=None)

    def __post_init__(self) -> None:
        """Normalize and validate record data after initialization."""
        package_id = _normalize(self.id)
        if not package_id:
            msg = "Package id cannot be empty"
            raise ValueError(msg)

        # Frozen dataclass: assign through object.__setattr__
        object.__setattr__(self, "id", package_id)
        object.__setattr__(self, "name", _normalize(self.name) or package_id)
        object.__setattr__(self, "installed_version", _normalize(self.installed_version))
        object.__setattr__(self, "available_version", _normalize(self.available_version))
        object.__setattr__(self, "source", _normalize(self.source))

    @property
    def is_outdated(self) -> bool:
        """Check if the source offers a newer version."""
        return self.available_version is not None

    def matches(self, app_id: str) -> bool:
        """Check if this record is the given application id.

        winget ids are case-insensitive.
        """
        return self.id.casefold() == app_id.strip().casefold()
