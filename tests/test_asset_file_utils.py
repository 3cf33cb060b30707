from asset_model import Asset
from asset_repository import MemoryAssetRepository
from asset_file_utils import _pkg_join, _ensure_dir, _unique_copy_path, _copy_asset, already_in_category


def test_pkg_join():
    assert _pkg_join("Assets/Hero/", "/Textures") == "Assets/Hero/Textures"
    assert _pkg_join("", "Textures") == "Textures"


def test_already_in_category():
    assert already_in_category("Assets/Hero/Textures/a.png", "Textures")
    assert not already_in_category("Assets/Textures/Hero/a.png", "Textures")


def test_ensure_dir_is_safe_to_repeat():
    repo = MemoryAssetRepository()
    _ensure_dir(repo, "Assets/Hero/Materials")
    _ensure_dir(repo, "Assets/Hero/Materials")
    assert repo.directory_exists("Assets/Hero/Materials")
    assert repo.directory_exists("Assets/Hero")


def test_unique_copy_path_suffixes():
    repo = MemoryAssetRepository()
    assert _unique_copy_path(repo, "Assets/T", "wood.png") == "Assets/T/wood.png"
    repo.add_asset(Asset("Assets/T/wood.png", "Texture2D", "wood"))
    repo.add_asset(Asset("Assets/T/wood_002.png", "Texture2D", "wood"))
    assert _unique_copy_path(repo, "Assets/T", "wood.png") == "Assets/T/wood_003.png"


class RaisingRepository(MemoryAssetRepository):
    def copy_asset(self, src_path, dst_path):
        raise PermissionError("read-only volume")


def test_copy_asset_reports_failures():
    repo = MemoryAssetRepository()
    repo.add_asset(Asset("Assets/a.png", "Texture2D", "a"))
    assert not _copy_asset(repo, "Assets/a.png", "Assets/Missing/a.png")
    repo.create_directory("Assets/T")
    assert _copy_asset(repo, "Assets/a.png", "Assets/T/a.png")

    raising = RaisingRepository()
    raising.add_asset(Asset("Assets/a.png", "Texture2D", "a"))
    assert not _copy_asset(raising, "Assets/a.png", "Assets/a_002.png")
