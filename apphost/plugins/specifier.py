"""Plugin specifier parsing - "path[:name]" strings from configuration."""

import posixpath
import re
from dataclasses import dataclass
from typing import List, Optional

from apphost.errors import SpecifierError

_NAME_RE = re.compile(r"^[A-Za-z0-9._-]+$")


@dataclass(frozen=True)
class PluginSpecifier:
    """Location of a plugin directory plus an optional declared name."""

    module_path: str
    declared_name: Optional[str] = None

    @property
    def name(self) -> str:
        """Declared name, or the last segment of the module path."""
        if self.declared_name:
            return self.declared_name
        return _last_segment(self.module_path)

    def __str__(self) -> str:
        if self.declared_name:
            return f"{self.module_path}:{self.declared_name}"
        return self.module_path


def _last_segment(path: str) -> str:
    return posixpath.basename(path.replace("\\", "/").rstrip("/"))


def parse_specifier(text: str) -> PluginSpecifier:
    """Parse a "path[:name]" specifier.

    The string is split on the first colon. Without a colon the name is
    derived from the final path segment.

    Raises:
        SpecifierError: if the path is empty or the specifier is malformed
    """
    if text is None or not text.strip():
        raise SpecifierError("Empty plugin specifier")

    text = text.strip()
    module_path, sep, declared_name = text.partition(":")
    module_path = module_path.strip()
    declared_name = declared_name.strip()

    if not module_path:
        raise SpecifierError(f"Plugin specifier '{text}' has an empty path")

    if sep:
        if not declared_name:
            raise SpecifierError(f"Plugin specifier '{text}' has an empty name after ':'")
        if not _NAME_RE.match(declared_name):
            raise SpecifierError(f"Plugin specifier '{text}' has an invalid name '{declared_name}'")
    elif not _last_segment(module_path):
        raise SpecifierError(f"Cannot derive a plugin name from path '{module_path}'")

    return PluginSpecifier(module_path=module_path, declared_name=declared_name or None)


def parse_specifier_list(text: str) -> List[PluginSpecifier]:
    """Parse a comma-separated list of specifiers, ignoring empty entries."""
    if not text:
        return []
    return [parse_specifier(part) for part in text.split(",") if part.strip()]
