import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional


@dataclass(frozen=True, order=True)
class AssetKey:
    """Stable identity of an asset or sub-asset: where it lives, what it is, what it's called."""
    path: str
    kind: str
    name: str

    def __str__(self):
        return f"{self.path}:{self.kind}:{self.name}"


class AssetObject:
    """Anything with a serialized property surface that may hold AssetKey references."""

    def __init__(self, kind: str, name: str, properties: Optional[Dict[str, Any]] = None,
                 extra: Optional[Dict[str, Any]] = None):
        self.kind = kind
        self.name = name
        self.properties: Dict[str, Any] = properties if properties is not None else {}
        # serialized keys this model does not interpret; written back as they were read
        self.extra: Dict[str, Any] = extra if extra is not None else {}
        self.dirty = False

    def mark_dirty(self):
        self.dirty = True

    def __repr__(self):
        return f"<{type(self).__name__} {self.kind} '{self.name}'>"


class Asset(AssetObject):
    """
    An asset (or sub-asset) loaded from a repository path.

    Materials carry ``texture_bindings``: shader slot -> texture key. Those slots are
    not part of ``properties``, so a walk over the serialized surface never sees them.
    Prefabs carry a ``hierarchy`` of GameObjectNode.
    """

    def __init__(self, path: str, kind: str, name: str,
                 properties: Optional[Dict[str, Any]] = None,
                 is_main: bool = True,
                 importer: Optional[str] = None,
                 texture_bindings: Optional[Dict[str, Optional[AssetKey]]] = None,
                 hierarchy: Optional["GameObjectNode"] = None,
                 extra: Optional[Dict[str, Any]] = None):
        super().__init__(kind, name, properties, extra)
        self.path = path
        self.is_main = is_main
        self.importer = importer
        self.texture_bindings = texture_bindings
        self.hierarchy = hierarchy

    @property
    def key(self) -> AssetKey:
        return AssetKey(self.path, self.kind, self.name)

    @property
    def is_prefab(self) -> bool:
        return self.is_main and self.hierarchy is not None

    def get_texture_property_names(self) -> List[str]:
        return list(self.texture_bindings or ())

    def get_texture(self, slot: str) -> Optional[AssetKey]:
        return (self.texture_bindings or {}).get(slot)

    def set_texture(self, slot: str, texture: Optional[AssetKey]):
        if self.texture_bindings is None:
            self.texture_bindings = {}
        self.texture_bindings[slot] = texture

    def clone_to(self, path: str) -> "Asset":
        """Deep copy of this asset as it would exist at ``path``."""
        return Asset(path, self.kind, self.name,
                     properties=copy.deepcopy(self.properties),
                     is_main=self.is_main,
                     importer=self.importer,
                     texture_bindings=copy.deepcopy(self.texture_bindings),
                     hierarchy=copy.deepcopy(self.hierarchy),
                     extra=copy.deepcopy(self.extra))


class Component(AssetObject):
    """A component attached to a GameObjectNode; ``name`` is the owning node's name."""


@dataclass
class GameObjectNode:
    name: str
    components: List[Optional[Component]] = field(default_factory=list)
    children: List["GameObjectNode"] = field(default_factory=list)
    active: bool = True
    extra: Dict[str, Any] = field(default_factory=dict)

    def iter_components(self, include_inactive: bool = True) -> Iterator[Optional[Component]]:
        """Depth-first over this node and its descendants. Missing components come through as None."""
        if not self.active and not include_inactive:
            return
        yield from self.components
        for child in self.children:
            yield from child.iter_components(include_inactive)


class InstanceDestroyedError(RuntimeError):
    pass


class PrefabInstance:
    """Transient editable copy of a prefab hierarchy. Must be destroyed after use."""

    def __init__(self, source_path: str, root: GameObjectNode):
        self.source_path = source_path
        self._root: Optional[GameObjectNode] = root

    @property
    def root(self) -> GameObjectNode:
        if self._root is None:
            raise InstanceDestroyedError(f"Instance of {self.source_path} was destroyed")
        return self._root

    @property
    def destroyed(self) -> bool:
        return self._root is None

    def get_components_in_children(self, include_inactive: bool = True) -> List[Optional[Component]]:
        return list(self.root.iter_components(include_inactive))

    def destroy(self):
        self._root = None


_NODE_KEYS = ("name", "active", "components", "children")
_COMPONENT_KEYS = ("kind", "properties")
_ASSET_KEYS = ("kind", "name", "importer", "properties", "textureBindings", "hierarchy", "subAssets")


def _unknown_keys(data: Dict[str, Any], known) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if k not in known}


def _component_to_dict(comp: Component) -> Dict[str, Any]:
    out: Dict[str, Any] = {"kind": comp.kind}
    out.update(comp.extra)
    out["properties"] = comp.properties
    return out


def node_to_dict(node: GameObjectNode) -> Dict[str, Any]:
    out: Dict[str, Any] = {"name": node.name}
    if not node.active:
        out["active"] = False
    out.update(node.extra)
    out["components"] = [None if c is None else _component_to_dict(c) for c in node.components]
    if node.children:
        out["children"] = [node_to_dict(child) for child in node.children]
    return out


def node_from_dict(data: Dict[str, Any]) -> GameObjectNode:
    name = str(data.get("name", ""))
    components = [
        None if c is None else Component(c["kind"], name, c.get("properties") or {},
                                         extra=_unknown_keys(c, _COMPONENT_KEYS))
        for c in data.get("components") or ()
    ]
    return GameObjectNode(name=name,
                          components=components,
                          children=[node_from_dict(c) for c in data.get("children") or ()],
                          active=bool(data.get("active", True)),
                          extra=_unknown_keys(data, _NODE_KEYS))


def asset_to_dict(asset: Asset) -> Dict[str, Any]:
    """Plain-data view of an asset, without its path. Unknown keys read earlier come back out unchanged."""
    out: Dict[str, Any] = {"kind": asset.kind, "name": asset.name}
    if asset.importer:
        out["importer"] = asset.importer
    out.update(asset.extra)
    if asset.properties:
        out["properties"] = asset.properties
    if asset.texture_bindings is not None:
        out["textureBindings"] = asset.texture_bindings
    if asset.hierarchy is not None:
        out["hierarchy"] = node_to_dict(asset.hierarchy)
    return out


def asset_from_dict(path: str, data: Dict[str, Any], is_main: bool = True) -> Asset:
    hierarchy = data.get("hierarchy")
    bindings = data.get("textureBindings")
    return Asset(path, str(data["kind"]), str(data.get("name", "")),
                 properties=data.get("properties") or {},
                 is_main=is_main,
                 importer=data.get("importer"),
                 texture_bindings=dict(bindings) if bindings is not None else None,
                 hierarchy=node_from_dict(hierarchy) if hierarchy is not None else None,
                 extra=_unknown_keys(data, _ASSET_KEYS))
