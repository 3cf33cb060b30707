import pytest

from asset_model import Asset
from asset_categories import (
    CategoryTable, DEFAULT_CATEGORY_TABLE, classify, is_code_kind, is_kind, is_material, kind_lineage,
)


def _a(kind, importer=None):
    return Asset("Assets/x", kind, "x", importer=importer)


@pytest.mark.parametrize("kind,expected", [
    ("Material", "Materials"),
    ("Texture2D", "Textures"),
    ("Cubemap", "Textures"),
    ("CustomRenderTexture", "Textures"),
    ("Mesh", "Meshes"),
    ("AnimatorController", "Animators"),
    ("AnimatorOverrideController", "Animators"),
    ("AnimationClip", "Animations"),
    ("AudioClip", "Audio"),
    ("PhysicMaterial", "Physics"),
    ("Font", "Fonts"),
])
def test_default_table(kind, expected):
    assert classify(_a(kind)) == expected


@pytest.mark.parametrize("kind", ["MonoScript", "Shader", "ComputeShader", "GameObject", "ScriptableObject"])
def test_unclassified_kinds(kind):
    assert classify(_a(kind)) is None


def test_model_importer_falls_back_to_meshes():
    assert classify(_a("GameObject", importer="ModelImporter")) == "Meshes"


def test_code_kind_wins_over_importer():
    assert classify(_a("Shader", importer="ModelImporter")) is None


def test_none_asset():
    assert classify(None) is None


def test_custom_table_and_predicate():
    table = CategoryTable(DEFAULT_CATEGORY_TABLE)
    table.register("VisualEffectAsset", "VFX")
    assert classify(_a("VisualEffectAsset"), table) == "VFX"
    assert classify(_a("VisualEffectAsset")) is None

    # host decides Fonts are code-like
    assert classify(_a("Font"), table, is_non_data=lambda k: k == "Font") is None


def test_lineage_and_is_kind():
    assert list(kind_lineage("CustomRenderTexture")) == ["CustomRenderTexture", "RenderTexture", "Texture"]
    assert is_kind("Texture2D", "Texture")
    assert not is_kind("Texture", "Texture2D")
    assert is_code_kind("ShaderInclude")
    assert is_material(_a("Material"))
    assert not is_material(_a("PhysicMaterial"))


def test_categories_in_registration_order():
    assert DEFAULT_CATEGORY_TABLE.categories() == [
        "Materials", "Textures", "Meshes", "Animators", "Animations", "Audio", "Physics", "Fonts",
    ]
    assert "Texture2D" in DEFAULT_CATEGORY_TABLE
    assert "MonoScript" not in DEFAULT_CATEGORY_TABLE
