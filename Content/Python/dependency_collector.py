from typing import Callable, Iterator, List

from asset_model import Asset, AssetKey
from asset_repository import AssetRepository
from asset_categories import is_code_kind
from ap_config import is_external_path
from reference_remap import iter_references
from ap_utils import _debug


def _asset_references(asset: Asset) -> Iterator[AssetKey]:
    yield from iter_references(asset.properties)

    for slot in asset.get_texture_property_names():
        tex = asset.get_texture(slot)
        if tex is not None:
            yield tex

    if asset.hierarchy is not None:
        for comp in asset.hierarchy.iter_components(include_inactive=True):
            if comp is not None:
                yield from iter_references(comp.properties)


def _direct_dependencies(repo: AssetRepository, path: str) -> List[str]:
    """에셋 경로 하나가 직접 참조하는 경로 목록 (중복 제거, 순서 유지)."""
    out = {}
    for asset in repo.load_all_assets(path):
        for ref in _asset_references(asset):
            if ref.path != path:
                out.setdefault(ref.path, None)
    return list(out)


def collect_dependencies(repo: AssetRepository, root_path: str, *,
                         is_external: Callable[[str], bool] = is_external_path,
                         is_non_data: Callable[[str], bool] = is_code_kind) -> List[str]:
    """
    root_path에서 도달 가능한 모든 에셋 경로를 수집 (재귀, 중복 제거, 루트 제외).
    의존 대상이 의존하는 쪽보다 먼저 나오도록 후위 순서로 반환.
    외부(읽기 전용) 경로와 스크립트/셰이더는 목록에도 넣지 않고 따라 들어가지도 않음.
    """
    seen = {root_path}
    ordered: List[str] = []
    stack = [(root_path, iter(_direct_dependencies(repo, root_path)))]

    while stack:
        path, children = stack[-1]
        for child in children:
            if child in seen:
                continue
            seen.add(child)
            if is_external(child):
                _debug(f"[Skip] External dependency: {child}")
                continue
            main = repo.load_asset(child)
            if main is not None and is_non_data(main.kind):
                _debug(f"[Skip] Code asset: {child}")
                continue
            stack.append((child, iter(_direct_dependencies(repo, child))))
            break
        else:
            stack.pop()
            if path != root_path:
                ordered.append(path)

    return ordered
