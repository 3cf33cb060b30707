import os
from dataclasses import dataclass
from typing import Callable, Tuple

from asset_categories import CategoryTable, DEFAULT_CATEGORY_TABLE, is_code_kind

# 환경 변수로 덮어쓸 수 있음
# Example:
#   export ARRANGING_PREFAB_LOG_LEVEL=DEBUG
#   export ARRANGING_PREFAB_EXTERNAL_PREFIXES=Packages/,Library/
LOG_LEVEL = os.getenv("ARRANGING_PREFAB_LOG_LEVEL", "INFO").strip() or "INFO"

EXTERNAL_PREFIXES: Tuple[str, ...] = tuple(
    p.strip()
    for p in os.getenv("ARRANGING_PREFAB_EXTERNAL_PREFIXES", "Packages/").split(",")
    if p.strip()
)


def is_external_path(path: str, prefixes: Tuple[str, ...] = EXTERNAL_PREFIXES) -> bool:
    """Read-only / vendored locations that are never relocated."""
    return any(path.startswith(p) for p in prefixes)


@dataclass
class OrganizeSettings:
    category_table: CategoryTable = DEFAULT_CATEGORY_TABLE
    is_non_data: Callable[[str], bool] = is_code_kind
    is_external: Callable[[str], bool] = is_external_path

    @classmethod
    def default(cls) -> "OrganizeSettings":
        return cls()
