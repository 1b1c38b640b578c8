"""
Code Map
Translates the short codes drivers send (from the app or by SMS) into
status changes.
"""
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Mapping, Optional, FrozenSet
import enum

from app.config import settings


class CodeActionType(str, enum.Enum):
    OFFLINE = "OFFLINE"
    BUSY = "BUSY"
    AVAILABLE = "AVAILABLE"


@dataclass(frozen=True)
class CodeAction:
    action: CodeActionType
    location: Optional[str] = None


class CodeMap:
    """
    Immutable code table.

    Lookups are exact and case-sensitive after stripping surrounding
    whitespace.
    """

    def __init__(self, locations: Mapping[str, str], offline_code: str = "0", busy_code: str = "9"):
        if offline_code == busy_code:
            raise ValueError("Offline and busy codes must differ")
        clashes = {offline_code, busy_code} & set(locations)
        if clashes:
            raise ValueError(f"Location codes clash with status codes: {sorted(clashes)}")

        self._offline_code = offline_code
        self._busy_code = busy_code
        self._locations = MappingProxyType(dict(locations))

    @property
    def offline_code(self) -> str:
        return self._offline_code

    @property
    def busy_code(self) -> str:
        return self._busy_code

    @property
    def locations(self) -> Mapping[str, str]:
        return self._locations

    @property
    def location_names(self) -> FrozenSet[str]:
        return frozenset(self._locations.values())

    def resolve(self, code) -> Optional[CodeAction]:
        """Return the action for `code`, or None if the code is not recognised."""
        if code is None:
            return None
        code = str(code).strip()

        if code == self._offline_code:
            return CodeAction(CodeActionType.OFFLINE)
        if code == self._busy_code:
            return CodeAction(CodeActionType.BUSY)

        location = self._locations.get(code)
        if location is not None:
            return CodeAction(CodeActionType.AVAILABLE, location)
        return None

    def as_dict(self) -> Dict:
        return {
            "offline": self._offline_code,
            "busy": self._busy_code,
            "locations": dict(self._locations),
        }

    def __repr__(self):
        return f"<CodeMap offline={self._offline_code} busy={self._busy_code} locations={len(self._locations)}>"


@lru_cache()
def get_code_map() -> CodeMap:
    """Dependency returning the configured code table"""
    return CodeMap(
        settings.LOCATION_CODES,
        offline_code=settings.OFFLINE_CODE,
        busy_code=settings.BUSY_CODE,
    )
