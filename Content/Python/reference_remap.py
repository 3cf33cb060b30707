from typing import Any, Dict, Iterator, Optional, Tuple, Union

from asset_model import Asset, AssetKey, AssetObject
from asset_categories import is_material

AssetMap = Dict[AssetKey, AssetKey]

# (container, key_or_index, current reference)
ReferenceSlot = Tuple[Union[dict, list], Any, AssetKey]


def iter_reference_slots(value: Any) -> Iterator[ReferenceSlot]:
    """
    직렬화된 프로퍼티 트리를 깊이 우선으로 순회하며 레퍼런스 슬롯을 반환.
    참조된 에셋 내부로는 들어가지 않음.
    """
    if isinstance(value, dict):
        items = list(value.items())
    elif isinstance(value, list):
        items = list(enumerate(value))
    else:
        return
    for key, child in items:
        if isinstance(child, AssetKey):
            yield value, key, child
        else:
            yield from iter_reference_slots(child)


def iter_references(value: Any) -> Iterator[AssetKey]:
    for _, _, ref in iter_reference_slots(value):
        yield ref


def remap_material_textures(material: Optional[Asset], asset_map: AssetMap) -> int:
    """
    머티리얼 텍스처 슬롯 재연결.
    셰이더 바인딩 슬롯은 직렬화 프로퍼티 순회에 잡히지 않으므로 이름으로 따로 처리.
    """
    if material is None:
        return 0

    changed = 0
    for slot in material.get_texture_property_names():
        old_texture = material.get_texture(slot)
        new_texture = asset_map.get(old_texture) if old_texture is not None else None
        if new_texture is not None and new_texture != old_texture:
            material.set_texture(slot, new_texture)
            changed += 1
    material.mark_dirty()
    return changed


def remap_object_references(target: Optional[AssetObject], asset_map: AssetMap) -> int:
    """
    Replace every reference on ``target`` that has an entry in ``asset_map``.
    Unmapped and empty references are left as they are. Returns the number of slots rewritten.
    """
    if target is None:
        return 0

    changed = 0
    for container, key, ref in list(iter_reference_slots(target.properties)):
        new_ref = asset_map.get(ref)
        if new_ref is not None and new_ref != ref:
            container[key] = new_ref
            changed += 1
    if changed:
        target.mark_dirty()

    if isinstance(target, Asset) and is_material(target):
        changed += remap_material_textures(target, asset_map)
    return changed
