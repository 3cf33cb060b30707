import abc
import copy
import posixpath
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Set

from asset_model import Asset, AssetKey, PrefabInstance, asset_to_dict
from ap_utils import _debug


class AssetRepositoryError(Exception):
    pass


class PrefabNotFoundError(AssetRepositoryError):
    """The root prefab is missing, unloadable, or not a prefab."""


class AssetRepository(abc.ABC):
    """
    Path-addressable asset store consumed by the organizer.

    Paths are project-relative, '/'-separated ("Assets/Hero/Hero.prefab").
    Loaded Asset objects are live: edits on them are what save_assets() persists.
    """

    def __init__(self):
        self._live_instances: List[PrefabInstance] = []

    # --- storage primitives -------------------------------------------------

    @abc.abstractmethod
    def load_all_assets(self, path: str) -> List[Asset]:
        """Main asset followed by every sub-asset stored at ``path``. Empty if nothing loads."""

    @abc.abstractmethod
    def asset_exists(self, path: str) -> bool:
        ...

    @abc.abstractmethod
    def copy_asset(self, src_path: str, dst_path: str) -> bool:
        ...

    @abc.abstractmethod
    def directory_exists(self, path: str) -> bool:
        ...

    @abc.abstractmethod
    def create_directory(self, path: str):
        ...

    @abc.abstractmethod
    def save_assets(self):
        """Persist every dirty asset."""

    def refresh(self):
        pass

    # --- derived operations -------------------------------------------------

    def load_asset(self, path: str) -> Optional[Asset]:
        for asset in self.load_all_assets(path):
            if asset.is_main:
                return asset
        return None

    def find_asset(self, key: AssetKey) -> Optional[Asset]:
        for asset in self.load_all_assets(key.path):
            if asset.kind == key.kind and asset.name == key.name:
                return asset
        return None

    def is_persistent(self, asset: Asset) -> bool:
        return any(a is asset for a in self.load_all_assets(asset.path))

    def generate_unique_path(self, path: str) -> str:
        """``path`` if unused, otherwise ``<stem>_002<ext>``, ``<stem>_003<ext>``..."""
        directory, filename = posixpath.split(path)
        base, ext = posixpath.splitext(filename)
        candidate = path
        i = 1
        while self.asset_exists(candidate):
            i += 1
            candidate = posixpath.join(directory, f"{base}_{i:03d}{ext}")
        return candidate

    def instantiate_prefab(self, path: str) -> PrefabInstance:
        prefab = self.load_asset(path)
        if prefab is None or not prefab.is_prefab:
            raise PrefabNotFoundError(f"Not a prefab asset: {path}")
        instance = PrefabInstance(path, copy.deepcopy(prefab.hierarchy))
        self._live_instances.append(instance)
        return instance

    def destroy_instance(self, instance: PrefabInstance):
        instance.destroy()
        if instance in self._live_instances:
            self._live_instances.remove(instance)

    @property
    def live_instance_count(self) -> int:
        return len(self._live_instances)

    @contextmanager
    def editable_prefab(self, path: str) -> Iterator[PrefabInstance]:
        """Instantiate ``path`` for editing; the instance is destroyed however the block exits."""
        instance = self.instantiate_prefab(path)
        try:
            yield instance
        finally:
            self.destroy_instance(instance)
            _debug(f"Destroyed editable instance of {path}")

    def save_as_prefab(self, instance: PrefabInstance, path: str) -> bool:
        """Replace the hierarchy stored at ``path`` with the instance's."""
        prefab = self.load_asset(path)
        if prefab is None or not prefab.is_prefab:
            raise PrefabNotFoundError(f"Not a prefab asset: {path}")
        prefab.hierarchy = copy.deepcopy(instance.root)
        prefab.mark_dirty()
        return True


class MemoryAssetRepository(AssetRepository):
    """
    Dict-backed repository. Copies land in the same store; directories are tracked
    explicitly so a copy into a missing or read-only directory fails like on disk.
    """

    def __init__(self, read_only_dirs=()):
        super().__init__()
        self._assets: Dict[str, List[Asset]] = {}
        self._directories: Set[str] = set()
        self._read_only: Set[str] = {d.rstrip("/") for d in read_only_dirs}
        self.save_count = 0

    def add_asset(self, asset: Asset, *sub_assets: Asset) -> Asset:
        for sub in sub_assets:
            sub.path = asset.path
            sub.is_main = False
        self._assets[asset.path] = [asset, *sub_assets]
        self.create_directory(posixpath.dirname(asset.path))
        return asset

    def mark_read_only(self, directory: str):
        self._read_only.add(directory.rstrip("/"))

    def _is_read_only(self, path: str) -> bool:
        d = posixpath.dirname(path)
        while d:
            if d in self._read_only:
                return True
            d = posixpath.dirname(d)
        return False

    def paths(self) -> List[str]:
        return sorted(self._assets)

    def load_all_assets(self, path: str) -> List[Asset]:
        return list(self._assets.get(path, ()))

    def asset_exists(self, path: str) -> bool:
        return path in self._assets

    def copy_asset(self, src_path: str, dst_path: str) -> bool:
        src = self._assets.get(src_path)
        if not src or dst_path in self._assets:
            return False
        if not self.directory_exists(posixpath.dirname(dst_path)) or self._is_read_only(dst_path):
            return False
        self._assets[dst_path] = [a.clone_to(dst_path) for a in src]
        return True

    def directory_exists(self, path: str) -> bool:
        return path.rstrip("/") in self._directories

    def create_directory(self, path: str):
        path = path.rstrip("/")
        while path and path not in self._directories:
            self._directories.add(path)
            path = posixpath.dirname(path)

    def directories(self) -> List[str]:
        return sorted(self._directories)

    def save_assets(self):
        for assets in self._assets.values():
            for asset in assets:
                asset.dirty = False
        self.save_count += 1

    def snapshot(self) -> Dict[str, list]:
        """Deep plain-data copy of the whole store, for before/after comparisons."""
        return {path: copy.deepcopy([asset_to_dict(a) for a in assets])
                for path, assets in sorted(self._assets.items())}
