import posixpath
from dataclasses import dataclass
from typing import Dict, List, Optional

from asset_model import Asset, AssetKey
from asset_repository import AssetRepository
from ap_utils import _warn, _debug

ITEM_COPY_FAILURE = "ItemCopyFailure"
CORRESPONDENCE_MISMATCH = "CorrespondenceMismatch"


@dataclass(frozen=True)
class OrganizeWarning:
    kind: str
    path: str
    message: str

    def __str__(self):
        return f"[{self.kind}] {self.message}"


def _find_counterpart(old: Asset, candidates: List[Asset]) -> Optional[Asset]:
    # 복사 후 순서가 보장되지 않으므로 인덱스가 아닌 (타입, 이름)으로 검색
    for new in candidates:
        if new.kind == old.kind and new.name == old.name:
            return new
    return None


def map_asset_and_sub_assets(repo: AssetRepository, old_path: str, new_path: str,
                             asset_map: Dict[AssetKey, AssetKey]) -> Optional[OrganizeWarning]:
    """
    old_path의 에셋과 서브 에셋 전부를 new_path의 대응 에셋과 짝지어 asset_map에 기록.
    개수가 다르거나 짝이 없는 에셋이 있으면 경고를 반환하고, 찾은 쌍만으로 진행.
    """
    old_assets = repo.load_all_assets(old_path)
    new_assets = repo.load_all_assets(new_path)

    warning = None
    if len(old_assets) != len(new_assets):
        msg = (f"Asset count mismatch for {posixpath.basename(old_path)} "
               f"({len(old_assets)} -> {len(new_assets)}). Remapping may be incomplete.")
        _warn(msg)
        warning = OrganizeWarning(CORRESPONDENCE_MISMATCH, old_path, msg)

    unmatched = []
    for old in old_assets:
        new = _find_counterpart(old, new_assets)
        if new is not None:
            asset_map[old.key] = new.key
        else:
            _debug(f"No counterpart for {old.key} in {new_path}")
            unmatched.append(old)

    if warning is None and unmatched:
        names = ", ".join(f"{a.kind} '{a.name}'" for a in unmatched)
        msg = (f"No counterpart in {posixpath.basename(new_path)} for {names}. "
               f"References to them were not remapped.")
        _warn(msg)
        warning = OrganizeWarning(CORRESPONDENCE_MISMATCH, old_path, msg)
    return warning
