import pytest

from asset_model import Asset, AssetKey, Component, GameObjectNode
from asset_repository import MemoryAssetRepository

PREFAB = "Assets/Characters/Hero/Hero.prefab"

ALBEDO = AssetKey("Assets/Art/hero_albedo.png", "Texture2D", "hero_albedo")
NORMAL = AssetKey("Assets/Art/hero_normal.png", "Texture2D", "hero_normal")
TOON = AssetKey("Assets/Shaders/Toon.shader", "Shader", "Toon")
HERO_MAT = AssetKey("Assets/Art/Hero.mat", "Material", "Hero")
FBX = AssetKey("Assets/Models/hero.fbx", "GameObject", "hero")
BODY = AssetKey("Assets/Models/hero.fbx", "Mesh", "Body")
HEAD = AssetKey("Assets/Models/hero.fbx", "Mesh", "Head")
MOVER = AssetKey("Assets/Scripts/Mover.cs", "MonoScript", "Mover")
CONTROLLER = AssetKey("Assets/Anim/Hero.controller", "AnimatorController", "Hero")
RUN = AssetKey("Assets/Anim/run.anim", "AnimationClip", "run")
IDLE = AssetKey("Assets/Anim/idle.anim", "AnimationClip", "idle")
JUMP = AssetKey("Assets/Sfx/jump.wav", "AudioClip", "jump")
VENDOR_STEP = AssetKey("Packages/com.vendor.sfx/step.wav", "AudioClip", "step")


def _asset(key: AssetKey, **kwargs) -> Asset:
    return Asset(key.path, key.kind, key.name, **kwargs)


def add_hero_dependencies(repo: MemoryAssetRepository):
    repo.add_asset(_asset(ALBEDO, importer="TextureImporter"))
    repo.add_asset(_asset(NORMAL, importer="TextureImporter"))
    repo.add_asset(_asset(TOON, properties={"defaultTextures": [NORMAL]}))
    repo.add_asset(_asset(HERO_MAT,
                          properties={"shader": TOON, "color": [1.0, 0.8, 0.8, 1.0]},
                          texture_bindings={"_MainTex": ALBEDO, "_BumpMap": NORMAL, "_DetailMap": None}))
    repo.add_asset(_asset(FBX, importer="ModelImporter"), _asset(BODY), _asset(HEAD))
    repo.add_asset(_asset(MOVER))
    repo.add_asset(_asset(RUN))
    repo.add_asset(_asset(IDLE))
    repo.add_asset(_asset(CONTROLLER, properties={
        "layers": [{"name": "Base", "states": [{"motion": RUN}, {"motion": IDLE}]}],
    }))
    repo.add_asset(_asset(JUMP, importer="AudioImporter"))
    repo.add_asset(_asset(VENDOR_STEP, importer="AudioImporter"))


def hero_hierarchy() -> GameObjectNode:
    head = GameObjectNode("Head", components=[
        Component("MeshFilter", "Head", {"mesh": HEAD}),
        Component("MeshRenderer", "Head", {"materials": [HERO_MAT]}),
    ], active=False)
    return GameObjectNode("Hero", components=[
        Component("Transform", "Hero", {"position": [0, 0, 0]}),
        Component("MeshFilter", "Hero", {"mesh": BODY}),
        Component("MeshRenderer", "Hero", {"materials": [HERO_MAT], "castShadows": True}),
        Component("Animator", "Hero", {"controller": CONTROLLER}),
        Component("MonoBehaviour", "Hero", {
            "script": MOVER,
            "sounds": {"jump": JUMP, "footstep": VENDOR_STEP, "land": None},
        }),
        None,
    ], children=[head])


@pytest.fixture
def repo():
    return MemoryAssetRepository()


@pytest.fixture
def hero_repo(repo):
    add_hero_dependencies(repo)
    repo.add_asset(Asset(PREFAB, "GameObject", "Hero", hierarchy=hero_hierarchy()))
    return repo


def prefab_components(repo, path=PREFAB):
    return list(repo.load_asset(path).hierarchy.iter_components())


def component(repo, kind, node="Hero", path=PREFAB):
    for c in prefab_components(repo, path):
        if c is not None and c.kind == kind and c.name == node:
            return c
    raise LookupError(kind)
