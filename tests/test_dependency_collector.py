from asset_model import Asset, AssetKey
from dependency_collector import collect_dependencies

from conftest import (
    PREFAB, ALBEDO, NORMAL, TOON, HERO_MAT, FBX, MOVER, CONTROLLER, RUN, IDLE, JUMP, VENDOR_STEP,
)


def test_transitive_closure(hero_repo):
    deps = collect_dependencies(hero_repo, PREFAB)
    assert set(deps) == {
        ALBEDO.path, NORMAL.path, HERO_MAT.path, FBX.path, CONTROLLER.path, RUN.path, IDLE.path, JUMP.path,
    }
    assert len(deps) == len(set(deps))
    assert PREFAB not in deps


def test_excludes_external_and_code_assets(hero_repo):
    deps = collect_dependencies(hero_repo, PREFAB)
    assert VENDOR_STEP.path not in deps
    assert MOVER.path not in deps
    assert TOON.path not in deps


def test_dependencies_listed_before_dependents(hero_repo):
    deps = collect_dependencies(hero_repo, PREFAB)
    assert deps.index(ALBEDO.path) < deps.index(HERO_MAT.path)
    assert deps.index(NORMAL.path) < deps.index(HERO_MAT.path)
    assert deps.index(RUN.path) < deps.index(CONTROLLER.path)


def test_order_is_deterministic(hero_repo):
    assert collect_dependencies(hero_repo, PREFAB) == collect_dependencies(hero_repo, PREFAB)


def test_custom_external_predicate(hero_repo):
    deps = collect_dependencies(hero_repo, PREFAB, is_external=lambda p: p.startswith("Assets/Anim/"))
    assert CONTROLLER.path not in deps
    # only reachable through the controller
    assert RUN.path not in deps
    assert VENDOR_STEP.path in deps


def test_cycles_and_missing_paths(repo):
    a = AssetKey("Assets/a.asset", "ScriptableObject", "a")
    b = AssetKey("Assets/b.asset", "ScriptableObject", "b")
    ghost = AssetKey("Assets/ghost.mat", "Material", "ghost")
    repo.add_asset(Asset(a.path, a.kind, a.name, properties={"next": b}))
    repo.add_asset(Asset(b.path, b.kind, b.name, properties={"next": a, "lost": ghost}))
    assert collect_dependencies(repo, a.path) == [ghost.path, b.path]
