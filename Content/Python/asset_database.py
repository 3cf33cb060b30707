"""
On-disk asset repository.

Text assets (.prefab, .mat, .controller, ...) are YAML documents::

    kind: Material
    name: Hero_Body
    properties:
      shader: !ref [Assets/Shaders/Toon.shader, Shader, Toon]
    textureBindings:
      _MainTex: !ref [Assets/Art/hero_albedo.png, Texture2D, hero_albedo]
    subAssets: []

Binary assets (.png, .fbx, .wav, ...) take their kind from the file extension;
an optional ``<file>.meta`` YAML sidecar holds name, importer, properties and
sub-assets (e.g. the meshes inside an .fbx).
"""
import os
import posixpath
import shutil
from typing import Any, Dict, List, Optional, Tuple

import yaml

from asset_model import Asset, AssetKey, asset_from_dict, asset_to_dict
from asset_repository import AssetRepository, AssetRepositoryError
from asset_categories import MODEL_IMPORTER
from ap_utils import _debug, _warn

META_SUFFIX = ".meta"

TEXT_ASSET_EXTENSIONS = frozenset({
    ".prefab", ".mat", ".asset", ".controller", ".overrideController",
    ".anim", ".physicMaterial", ".physicsMaterial", ".mask",
})

# extension -> (kind, importer)
BINARY_ASSET_KINDS: Dict[str, Tuple[str, Optional[str]]] = {
    ".png": ("Texture2D", "TextureImporter"),
    ".jpg": ("Texture2D", "TextureImporter"),
    ".jpeg": ("Texture2D", "TextureImporter"),
    ".tga": ("Texture2D", "TextureImporter"),
    ".psd": ("Texture2D", "TextureImporter"),
    ".tif": ("Texture2D", "TextureImporter"),
    ".tiff": ("Texture2D", "TextureImporter"),
    ".bmp": ("Texture2D", "TextureImporter"),
    ".exr": ("Texture2D", "TextureImporter"),
    ".hdr": ("Cubemap", "TextureImporter"),
    ".fbx": ("GameObject", MODEL_IMPORTER),
    ".obj": ("GameObject", MODEL_IMPORTER),
    ".dae": ("GameObject", MODEL_IMPORTER),
    ".blend": ("GameObject", MODEL_IMPORTER),
    ".wav": ("AudioClip", "AudioImporter"),
    ".mp3": ("AudioClip", "AudioImporter"),
    ".ogg": ("AudioClip", "AudioImporter"),
    ".aif": ("AudioClip", "AudioImporter"),
    ".aiff": ("AudioClip", "AudioImporter"),
    ".flac": ("AudioClip", "AudioImporter"),
    ".ttf": ("Font", "TrueTypeFontImporter"),
    ".otf": ("Font", "TrueTypeFontImporter"),
    ".cs": ("MonoScript", "MonoImporter"),
    ".shader": ("Shader", "ShaderImporter"),
    ".compute": ("ComputeShader", "ComputeShaderImporter"),
    ".cginc": ("ShaderInclude", "ShaderIncludeImporter"),
    ".hlsl": ("ShaderInclude", "ShaderIncludeImporter"),
}


class AssetParseError(AssetRepositoryError):
    pass


class AssetLoader(yaml.SafeLoader):
    pass


class AssetDumper(yaml.SafeDumper):
    def ignore_aliases(self, data):
        return True


def _construct_ref(loader: AssetLoader, node: yaml.Node) -> AssetKey:
    if not isinstance(node, yaml.SequenceNode) or len(node.value) != 3:
        raise yaml.constructor.ConstructorError(
            None, None, "!ref expects [path, kind, name]", node.start_mark)
    path, kind, name = loader.construct_sequence(node)
    return AssetKey(str(path), str(kind), str(name))


def _represent_ref(dumper: AssetDumper, key: AssetKey) -> yaml.Node:
    return dumper.represent_sequence("!ref", [key.path, key.kind, key.name], flow_style=True)


AssetLoader.add_constructor("!ref", _construct_ref)
AssetDumper.add_representer(AssetKey, _represent_ref)


def load_yaml(text: str) -> Any:
    return yaml.load(text, Loader=AssetLoader)


def dump_yaml(data: Any) -> str:
    return yaml.dump(data, Dumper=AssetDumper, sort_keys=False, allow_unicode=True, default_flow_style=False)


def _ext(path: str) -> str:
    return posixpath.splitext(path)[1]


def is_text_asset(path: str) -> bool:
    return _ext(path) in TEXT_ASSET_EXTENSIONS


class FileAssetRepository(AssetRepository):
    """Asset repository over a project directory. Asset paths are relative to ``project_root``."""

    def __init__(self, project_root: str):
        super().__init__()
        self.project_root = os.path.abspath(project_root)
        self._cache: Dict[str, List[Asset]] = {}

    def _fs(self, path: str) -> str:
        return os.path.join(self.project_root, *path.split("/"))

    def _read_document(self, fs_path: str) -> Dict[str, Any]:
        try:
            with open(fs_path, "r", encoding="utf-8") as f:
                data = load_yaml(f.read())
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            raise AssetParseError(f"Malformed asset document {fs_path}: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise AssetParseError(f"Asset document {fs_path} is not a mapping")
        return data

    def _write_document(self, fs_path: str, data: Dict[str, Any]):
        with open(fs_path, "w", encoding="utf-8") as f:
            f.write(dump_yaml(data))

    def _parse(self, path: str) -> List[Asset]:
        fs_path = self._fs(path)
        if is_text_asset(path):
            doc = self._read_document(fs_path)
            if "kind" not in doc:
                raise AssetParseError(f"Asset document {fs_path} has no kind")
            doc.setdefault("name", posixpath.splitext(posixpath.basename(path))[0])
        else:
            kind, importer = BINARY_ASSET_KINDS.get(_ext(path).lower(), ("DefaultAsset", None))
            meta_path = fs_path + META_SUFFIX
            doc = self._read_document(meta_path) if os.path.isfile(meta_path) else {}
            doc.setdefault("kind", kind)
            doc.setdefault("name", posixpath.splitext(posixpath.basename(path))[0])
            if importer and "importer" not in doc:
                doc["importer"] = importer

        main = asset_from_dict(path, doc, is_main=True)
        subs = [asset_from_dict(path, sub, is_main=False) for sub in doc.get("subAssets") or ()]
        return [main, *subs]

    def load_all_assets(self, path: str) -> List[Asset]:
        if path in self._cache:
            return list(self._cache[path])
        if not path or not os.path.isfile(self._fs(path)):
            return []
        try:
            assets = self._parse(path)
        except (AssetParseError, KeyError, ValueError, TypeError, AttributeError, OSError) as e:
            _warn(f"Failed to load asset {path}: {e}")
            return []
        self._cache[path] = assets
        return list(assets)

    def asset_exists(self, path: str) -> bool:
        return os.path.isfile(self._fs(path))

    def copy_asset(self, src_path: str, dst_path: str) -> bool:
        src = self._fs(src_path)
        dst = self._fs(dst_path)
        if not os.path.isfile(src) or os.path.exists(dst) or not os.path.isdir(os.path.dirname(dst)):
            return False

        try:
            # 파일 이름이 바뀌어도 에셋 이름은 유지되도록 복사본에 원본 이름을 기록
            main = self.load_asset(src_path)
            if is_text_asset(src_path):
                doc = self._read_document(src)
                if main is not None and "name" not in doc:
                    doc["name"] = main.name
                    self._write_document(dst, doc)
                else:
                    shutil.copyfile(src, dst)
            else:
                shutil.copyfile(src, dst)
                meta = self._read_document(src + META_SUFFIX) if os.path.isfile(src + META_SUFFIX) else {}
                if main is not None:
                    meta.setdefault("name", main.name)
                self._write_document(dst + META_SUFFIX, meta)
        except (OSError, AssetParseError) as e:
            _debug(f"copy {src_path} -> {dst_path}: {e}")
            self._discard_partial_copy(dst)
            return False

        self._cache.pop(dst_path, None)
        return True

    def _discard_partial_copy(self, dst: str):
        for leftover in (dst, dst + META_SUFFIX):
            try:
                if os.path.isfile(leftover):
                    os.remove(leftover)
            except OSError as e:
                _warn(f"Could not remove partial copy {leftover}: {e}")

    def directory_exists(self, path: str) -> bool:
        return os.path.isdir(self._fs(path))

    def create_directory(self, path: str):
        os.makedirs(self._fs(path), exist_ok=True)

    def _save(self, path: str, assets: List[Asset]):
        main, subs = assets[0], assets[1:]
        doc = asset_to_dict(main)
        doc["subAssets"] = [asset_to_dict(s) for s in subs]
        if is_text_asset(path):
            self._write_document(self._fs(path), doc)
        else:
            self._write_document(self._fs(path) + META_SUFFIX, doc)

    def save_assets(self):
        saved = 0
        for path, assets in self._cache.items():
            if any(a.dirty for a in assets):
                self._save(path, assets)
                for a in assets:
                    a.dirty = False
                saved += 1
        _debug(f"Saved {saved} asset file(s)")

    def refresh(self):
        self._cache = {path: assets for path, assets in self._cache.items() if any(a.dirty for a in assets)}
