"""Resolved permission set value object."""

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, Iterator, Tuple


@dataclass(frozen=True)
class EffectivePermissions:
    """Permissions reachable from a user's active roles.

    ``names`` holds permission names (what authorization checks test) and
    ``scopes`` holds the matching ``module:action`` strings.
    """

    names: FrozenSet[str] = frozenset()
    scopes: FrozenSet[str] = frozenset()

    def __post_init__(self):
        object.__setattr__(self, "names", frozenset(self.names))
        object.__setattr__(self, "scopes", frozenset(self.scopes))

    @classmethod
    def empty(cls) -> "EffectivePermissions":
        return cls()

    def has(self, name: str) -> bool:
        return name in self.names

    def has_any(self, names: Iterable[str]) -> bool:
        return any(name in self.names for name in names)

    def has_all(self, names: Iterable[str]) -> bool:
        return all(name in self.names for name in names)

    def has_module_access(self, module: str) -> bool:
        prefix = f"{module}:"
        return any(scope.startswith(prefix) for scope in self.scopes)

    def can_perform(self, module: str, action: str) -> bool:
        return f"{module}:{action}" in self.scopes

    def sorted_names(self) -> Tuple[str, ...]:
        return tuple(sorted(self.names))

    def to_dict(self) -> Dict[str, Any]:
        return {"names": sorted(self.names), "scopes": sorted(self.scopes)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EffectivePermissions":
        return cls(names=frozenset(data.get("names", ())), scopes=frozenset(data.get("scopes", ())))

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.names))

    def __len__(self) -> int:
        return len(self.names)
