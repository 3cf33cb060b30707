import posixpath

from asset_repository import AssetRepository
from ap_utils import _debug, _err


def _pkg_join(*parts: str) -> str:
    return "/".join(x.strip("/") for x in parts if x and x.strip("/"))


def _pkg_dir(path: str) -> str:
    return posixpath.dirname(path)


def _ensure_dir(repo: AssetRepository, path: str):
    if not repo.directory_exists(path):
        repo.create_directory(path)
        _debug(f"Created directory: {path}")


def already_in_category(path: str, category: str) -> bool:
    """이미 정리된 에셋인지 (현재 폴더 이름이 카테고리로 끝나는지)."""
    return _pkg_dir(path).endswith(category)


def _unique_copy_path(repo: AssetRepository, dst_dir: str, filename: str) -> str:
    return repo.generate_unique_path(_pkg_join(dst_dir, filename))


def _copy_asset(repo: AssetRepository, path: str, new_path: str) -> bool:
    """path의 에셋을 new_path로 복사. 실패는 로그만 남기고 False."""
    try:
        ok = repo.copy_asset(path, new_path)
    except OSError as e:
        _err(f"Failed to copy asset from '{path}' to '{new_path}': {e}")
        return False

    if not ok:
        _err(f"Failed to copy asset from '{path}' to '{new_path}'.")
    return ok
