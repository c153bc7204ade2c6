from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .lib.download import filename_from_url

DEFAULT_MANIFEST = Path(__file__).resolve().parent / "manifests" / "packages.yaml"


@dataclass(frozen=True)
class PackageGroup:
    group_id: str
    label: str
    urls: List[str]

    @property
    def filenames(self) -> List[str]:
        return [filename_from_url(u) for u in self.urls]


@dataclass(frozen=True)
class Manifest:
    raw: Dict[str, Any]

    @property
    def groups(self) -> List[PackageGroup]:
        out: List[PackageGroup] = []
        for i, g in enumerate(self.raw.get("groups") or []):
            if not isinstance(g, dict):
                raise ValueError(f"Manifest group #{i} must be a mapping")
            urls = g.get("urls") or []
            if not isinstance(urls, list):
                raise ValueError(f"Manifest group #{i} urls must be a list")
            gid = str(g.get("id") or f"group_{i}")
            out.append(
                PackageGroup(
                    group_id=gid,
                    label=str(g.get("label") or gid),
                    urls=[str(u).strip() for u in urls if str(u).strip()],
                )
            )
        return out

    @property
    def urls(self) -> List[str]:
        return [u for g in self.groups for u in g.urls]

    @property
    def purge_packages(self) -> List[str]:
        return [str(p) for p in (self.raw.get("purge") or [])]

    @property
    def staging_dir(self) -> str:
        return str(self.raw.get("staging_dir") or "/tmp")

    @property
    def openvino_requirement(self) -> str:
        return str(((self.raw.get("openvino") or {}).get("requirement")) or "openvino")

    @property
    def device_token(self) -> str:
        return str(((self.raw.get("verify") or {}).get("device_token")) or "NPU")

    @property
    def device_node(self) -> str:
        return str(((self.raw.get("verify") or {}).get("device_node")) or "/dev/accel/accel0")


def load_yaml_mapping(path: str) -> Dict[str, Any]:
    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("PyYAML is required to read manifests and config files") from e

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)
    data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{p} must contain a mapping/object")
    return data


def load_manifest(path: Optional[str] = None) -> Manifest:
    """Load the package manifest; the bundled one unless a path is given."""

    m = Manifest(raw=load_yaml_mapping(str(path or DEFAULT_MANIFEST)))
    if not m.urls:
        raise ValueError("Manifest lists no package URLs")
    # A URL without a basename cannot be copied into the container later.
    for url in m.urls:
        filename_from_url(url)
    return m
