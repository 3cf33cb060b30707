import argparse
import sys
from typing import List, Optional

from asset_database import FileAssetRepository
from organize_prefab import organize
from ap_config import LOG_LEVEL
from ap_utils import configure_logging, _debug, _err


class _LogProgress:
    """Progress sink that only writes to the debug log."""

    def __init__(self):
        self.last = None

    def __call__(self, title: str, item: str, fraction: float):
        self.last = (title, item, fraction)
        _debug(f"{title}: {item} ({fraction:.0%})")

    def clear_progress(self):
        self.last = None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="arranging-prefab",
        description="Copy a prefab's dependencies into type subfolders next to it "
                    "and point the prefab at the copies. Shaders and scripts are not copied.",
    )
    parser.add_argument("prefab", help="project-relative prefab path, e.g. Assets/Hero/Hero.prefab")
    parser.add_argument("--project", default=".", help="project root directory (default: current directory)")
    parser.add_argument("--log-level", default=LOG_LEVEL, help=f"logging level (default: {LOG_LEVEL})")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    prefab_path = args.prefab.replace("\\", "/")
    if not prefab_path.endswith(".prefab"):
        _err("Invalid object. Please pass a .prefab asset path.")
        return 1

    repo = FileAssetRepository(args.project)
    result = organize(repo, prefab_path, progress=_LogProgress())

    print(result.summary())
    for w in result.warnings:
        print(f"  - {w}")
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
