"""
dependency_therapist/manifest.py
================================
Manifest 로더 (package.json)

- 파일 없음, 읽기 실패, JSON 오류, 구조 오류 → ManifestUnreadable
- 부분 파싱/복구 시도 없음
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .models import Manifest, ManifestUnreadable


logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "package.json"

_SECTIONS = {
    "dependencies": "dependencies",
    "devDependencies": "dev_dependencies",
    "peerDependencies": "peer_dependencies",
}

PathLike = Union[str, Path]


def resolve_manifest_path(path: Optional[PathLike] = None) -> Path:
    """디렉토리가 주어지면 그 안의 package.json 경로"""
    if path is None:
        return Path.cwd() / MANIFEST_FILENAME
    candidate = Path(path)
    if candidate.is_dir():
        return candidate / MANIFEST_FILENAME
    return candidate


def _read_json(manifest_path: Path) -> Any:
    try:
        with open(manifest_path, encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        raise ManifestUnreadable(manifest_path, "file not found")
    except json.JSONDecodeError as e:
        raise ManifestUnreadable(manifest_path, f"invalid JSON ({e.msg} at line {e.lineno})")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestUnreadable(manifest_path, str(e))


def _parse_section(manifest_path: Path, key: str, value: Any) -> Dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ManifestUnreadable(
            manifest_path,
            f"'{key}' must be an object, got {type(value).__name__}"
        )
    # 버전 값이 문자열이 아니면 문자열로 변환 (null은 빈 문자열)
    return {
        str(name): "" if version is None else str(version)
        for name, version in value.items()
    }


def load_manifest(path: Optional[PathLike] = None) -> Manifest:
    """
    package.json 로드

    Args:
        path: manifest 파일 또는 프로젝트 디렉토리 (기본: ./package.json)

    Returns:
        Manifest

    Raises:
        ManifestUnreadable
    """
    manifest_path = resolve_manifest_path(path)
    data = _read_json(manifest_path)

    if not isinstance(data, dict):
        raise ManifestUnreadable(
            manifest_path,
            f"expected a JSON object, got {type(data).__name__}"
        )

    sections = {
        attr: _parse_section(manifest_path, key, data.get(key))
        for key, attr in _SECTIONS.items()
    }

    name = data.get("name")
    if name is not None and not isinstance(name, str):
        logger.debug("Ignoring non-string project name in %s", manifest_path)
        name = None

    manifest = Manifest(path=manifest_path, name=name or None, **sections)
    logger.debug(
        "Loaded %s: %d dependencies, %d devDependencies, %d peerDependencies",
        manifest_path,
        len(manifest.dependencies),
        manifest.dev_count,
        manifest.peer_count,
    )
    return manifest

