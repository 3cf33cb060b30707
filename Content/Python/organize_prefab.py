import posixpath
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from asset_model import AssetKey, PrefabInstance
from asset_repository import AssetRepository, PrefabNotFoundError
from asset_categories import classify, is_material
from asset_correspondence import OrganizeWarning, ITEM_COPY_FAILURE, map_asset_and_sub_assets
from asset_file_utils import _pkg_join, _pkg_dir, _ensure_dir, _unique_copy_path, _copy_asset, already_in_category
from dependency_collector import collect_dependencies
from reference_remap import remap_object_references, remap_material_textures
from ap_config import OrganizeSettings
from ap_utils import _log, _warn, _err, _debug

PROGRESS_TITLE = "Organizing Prefab"

ProgressSink = Callable[[str, str, float], None]


class PipelineState(Enum):
    IDLE = "Idle"
    COLLECTING = "Collecting"
    COPYING = "Copying"
    REMAPPING_DEPENDENCIES = "RemappingDependencies"
    INSTANTIATING_ROOT = "InstantiatingRoot"
    REMAPPING_ROOT = "RemappingRoot"
    PERSISTING = "Persisting"
    DONE = "Done"
    FAILED = "Failed"


@dataclass
class OrganizeResult:
    success: bool
    state: PipelineState
    reason: Optional[str] = None
    warnings: List[OrganizeWarning] = field(default_factory=list)
    copied: List[Tuple[str, str]] = field(default_factory=list)

    def summary(self) -> str:
        if not self.success:
            return f"Failed: {self.reason}"
        text = f"Prefab organized successfully! ({len(self.copied)} assets copied)"
        if self.warnings:
            text += f" with {len(self.warnings)} warning(s)"
        return text


class PrefabOrganizer:
    """
    프리팹이 의존하는 에셋을 프리팹 옆의 타입별 폴더로 복사하고,
    복사본과 프리팹의 레퍼런스를 새 에셋으로 교체.

    폴더 구조 (프리팹 폴더 기준):
    - Materials/
    - Textures/
    - Meshes/
    - Animators/
    - Animations/
    - Audio/
    - Physics/
    - Fonts/
    """

    def __init__(self, repo: AssetRepository,
                 settings: Optional[OrganizeSettings] = None,
                 progress: Optional[ProgressSink] = None):
        self.repo = repo
        self.settings = settings or OrganizeSettings.default()
        self.progress = progress
        self.state = PipelineState.IDLE
        self.asset_map: Dict[AssetKey, AssetKey] = {}
        self.warnings: List[OrganizeWarning] = []
        self.copied: List[Tuple[str, str]] = []

    def _enter(self, state: PipelineState):
        _debug(f"{self.state.value} -> {state.value}")
        self.state = state

    def _report(self, item: str, fraction: float):
        if self.progress is not None:
            self.progress(PROGRESS_TITLE, item, fraction)

    def _clear_progress(self):
        clear = getattr(self.progress, "clear_progress", None)
        if callable(clear):
            clear()

    def _fail(self, reason: str) -> OrganizeResult:
        self._enter(PipelineState.FAILED)
        return OrganizeResult(False, self.state, reason, list(self.warnings), list(self.copied))

    def run(self, prefab_path: str) -> OrganizeResult:
        try:
            return self._run(prefab_path)
        except PrefabNotFoundError as e:
            _err(str(e))
            return self._fail(str(e))
        except Exception as e:
            _err(f"Organizing {prefab_path} failed during {self.state.value}: {e}")
            return self._fail(f"{self.state.value}: {e}")
        finally:
            self._clear_progress()

    def _run(self, prefab_path: str) -> OrganizeResult:
        prefab = self.repo.load_asset(prefab_path)
        if prefab is None or not prefab.is_prefab:
            raise PrefabNotFoundError(f"No prefab selected or not a prefab asset: {prefab_path}")

        prefab_dir = _pkg_dir(prefab_path)

        self._enter(PipelineState.COLLECTING)
        _log(f"=== Collecting dependencies of: {prefab_path} ===")
        dependency_paths = collect_dependencies(self.repo, prefab_path,
                                                is_external=self.settings.is_external,
                                                is_non_data=self.settings.is_non_data)
        _log(f"Found {len(dependency_paths)} dependencies")

        # --- PASS 1: 복사 + 이전/새 에셋 대응표 작성 ---
        self._enter(PipelineState.COPYING)
        self._report("Copying assets...", 0.0)
        self._copy_dependencies(prefab_dir, dependency_paths)

        # --- PASS 2: 복사된 에셋끼리의 레퍼런스 교체 (머티리얼의 텍스처 등) ---
        self._enter(PipelineState.REMAPPING_DEPENDENCIES)
        self._report("Remapping cross-asset references...", 0.9)
        self._remap_dependencies()

        # --- PASS 3: 프리팹 인스턴스의 레퍼런스 교체 ---
        self._enter(PipelineState.INSTANTIATING_ROOT)
        self._report("Updating prefab references...", 0.95)
        with self.repo.editable_prefab(prefab_path) as instance:
            self._enter(PipelineState.REMAPPING_ROOT)
            self._remap_instance(instance)
            self._remap_prefab_assets(prefab_path)

            # --- PASS 4: 저장 ---
            self._enter(PipelineState.PERSISTING)
            self.repo.save_as_prefab(instance, prefab_path)

        self.repo.save_assets()
        self.repo.refresh()
        self._enter(PipelineState.DONE)

        result = OrganizeResult(True, self.state, None, list(self.warnings), list(self.copied))
        _log(f"=== Done === copied={len(self.copied)}, warnings={len(self.warnings)}, destination={prefab_dir or '.'}")
        return result

    def _copy_dependencies(self, prefab_dir: str, dependency_paths: List[str]):
        settings = self.settings
        total = len(dependency_paths)

        for i, path in enumerate(dependency_paths):
            self._report(f"Processing: {posixpath.basename(path)}", i / total)

            asset = self.repo.load_asset(path)
            if asset is None or settings.is_non_data(asset.kind) or settings.is_external(path):
                _debug(f"[Skip] Not found, code or external asset: {path}")
                continue

            subfolder = classify(asset, settings.category_table, settings.is_non_data)
            if not subfolder:
                _debug(f"[Skip] No category for {asset.kind}: {path}")
                continue
            if already_in_category(path, subfolder):
                _debug(f"[Skip] Already organized: {path}")
                continue

            target_folder = _pkg_join(prefab_dir, subfolder)
            _ensure_dir(self.repo, target_folder)

            new_path = _unique_copy_path(self.repo, target_folder, posixpath.basename(path))
            if not _copy_asset(self.repo, path, new_path):
                self.warnings.append(OrganizeWarning(
                    ITEM_COPY_FAILURE, path, f"Failed to copy asset from '{path}' to '{new_path}'."))
                continue

            self.copied.append((path, new_path))
            warning = map_asset_and_sub_assets(self.repo, path, new_path, self.asset_map)
            if warning is not None:
                self.warnings.append(warning)

        _log(f"Copied {len(self.copied)} of {total} dependencies, {len(self.asset_map)} assets mapped")

    def _remap_dependencies(self):
        remapped = 0
        for new_key in dict.fromkeys(self.asset_map.values()):
            new_asset = self.repo.find_asset(new_key)
            if new_asset is not None and self.repo.is_persistent(new_asset):
                remapped += remap_object_references(new_asset, self.asset_map)
        _log(f"Remapped {remapped} references inside copied assets")

    def _remap_instance(self, instance: PrefabInstance):
        remapped = 0
        for component in instance.get_components_in_children(include_inactive=True):
            if component is None:
                continue
            remapped += remap_object_references(component, self.asset_map)
        _log(f"Remapped {remapped} references on prefab components")

    def _remap_prefab_assets(self, prefab_path: str):
        """프리팹 에셋 자체의 프로퍼티, 텍스처 슬롯, 서브 에셋이 가진 레퍼런스 교체."""
        remapped = 0
        for asset in self.repo.load_all_assets(prefab_path):
            remapped += remap_object_references(asset, self.asset_map)
            if asset.texture_bindings and not is_material(asset):
                remapped += remap_material_textures(asset, self.asset_map)
        _log(f"Remapped {remapped} references on the prefab asset")


def organize(repo: AssetRepository, prefab_path: str, *,
             settings: Optional[OrganizeSettings] = None,
             progress: Optional[ProgressSink] = None) -> OrganizeResult:
    """Organize ``prefab_path``'s dependencies. Partial success is still success; see ``warnings``."""
    result = PrefabOrganizer(repo, settings, progress).run(prefab_path)
    for w in result.warnings:
        _warn(str(w))
    return result
