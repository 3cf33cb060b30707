from typing import Callable, Dict, Iterable, Iterator, Optional, Tuple

from asset_model import Asset

MATERIALS = "Materials"
TEXTURES = "Textures"
MESHES = "Meshes"
ANIMATORS = "Animators"
ANIMATIONS = "Animations"
AUDIO = "Audio"
PHYSICS = "Physics"
FONTS = "Fonts"

MODEL_IMPORTER = "ModelImporter"

# 파생 타입 -> 기반 타입
KIND_BASES: Dict[str, str] = {
    "Texture2D": "Texture",
    "Texture3D": "Texture",
    "Texture2DArray": "Texture",
    "Cubemap": "Texture",
    "CubemapArray": "Texture",
    "RenderTexture": "Texture",
    "CustomRenderTexture": "RenderTexture",
    "Sprite": "Texture",
    "AnimatorController": "RuntimeAnimatorController",
    "AnimatorOverrideController": "RuntimeAnimatorController",
    "PhysicsMaterial": "PhysicMaterial",
}

NON_DATA_KINDS = frozenset({"MonoScript", "Shader", "ComputeShader", "ShaderInclude"})


def kind_lineage(kind: str) -> Iterator[str]:
    """The kind itself followed by its base kinds, nearest first."""
    seen = set()
    while kind and kind not in seen:
        seen.add(kind)
        yield kind
        kind = KIND_BASES.get(kind)


def is_kind(kind: str, base: str) -> bool:
    return base in kind_lineage(kind)


def is_code_kind(kind: str) -> bool:
    return any(k in NON_DATA_KINDS for k in kind_lineage(kind))


class CategoryTable:
    """Ordered kind -> subfolder table. Lookups follow the kind lineage."""

    def __init__(self, entries: Iterable[Tuple[str, str]] = ()):
        self._entries: Dict[str, str] = {}
        for kind, category in entries:
            self.register(kind, category)

    def register(self, kind: str, category: str):
        self._entries[kind] = category

    def lookup(self, kind: str) -> Optional[str]:
        for k in kind_lineage(kind):
            category = self._entries.get(k)
            if category:
                return category
        return None

    def categories(self):
        return list(dict.fromkeys(self._entries.values()))

    def __contains__(self, kind: str) -> bool:
        return self.lookup(kind) is not None

    def __iter__(self):
        return iter(self._entries.items())


DEFAULT_CATEGORY_TABLE = CategoryTable([
    ("Material", MATERIALS),
    ("Texture", TEXTURES),
    ("Mesh", MESHES),
    ("RuntimeAnimatorController", ANIMATORS),
    ("AnimationClip", ANIMATIONS),
    ("AudioClip", AUDIO),
    ("PhysicMaterial", PHYSICS),
    ("Font", FONTS),
])


def classify(asset: Optional[Asset],
             table: CategoryTable = DEFAULT_CATEGORY_TABLE,
             is_non_data: Callable[[str], bool] = is_code_kind) -> Optional[str]:
    """
    에셋 타입에 맞는 하위 폴더 이름을 반환.
    스크립트/셰이더 같은 코드 타입과 테이블에 없는 타입은 None.
    """
    if asset is None or is_non_data(asset.kind):
        return None

    category = table.lookup(asset.kind)
    if category:
        return category

    # fbx 등 모델 임포터로 들어온 지오메트리
    if asset.importer == MODEL_IMPORTER:
        return MESHES
    return None


def is_material(asset: Optional[Asset]) -> bool:
    return asset is not None and is_kind(asset.kind, "Material")
