"""
dependency_therapist/models.py
==============================
공통 타입 정의

설계 원칙:
- 외부 의존성 없음 (순수 Python 표준 라이브러리만)
- 순환 import 방지 (이 모듈은 다른 모듈을 import하지 않음)
- 모든 값 객체는 불변 (frozen dataclass, MappingProxyType)
"""

from enum import Enum
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import List, Dict, Optional, Any, FrozenSet, Mapping, Tuple


ANONYMOUS_PATIENT = "Anonymous Project"


# =============================================================================
# 열거형 (Enums)
# =============================================================================

class DependencyGroup(Enum):
    """의존성 그룹"""
    DIRECT = "direct"
    DEVELOPMENT = "development"
    PEER = "peer"


class FindingCategory(Enum):
    """진단 카테고리 (값은 템플릿/처방 테이블의 키)"""
    VERSION_CONFLICT = "toxic"
    PAIRED_COUPLING = "codependent"
    DEPRECATED = "ghosting"
    CYCLE = "circular"
    PEER_COUNSELING = "peer-counseling"


# =============================================================================
# 예외
# =============================================================================

class TherapistError(Exception):
    """모든 세션 오류의 기본 클래스"""


class ManifestUnreadable(TherapistError):
    """manifest 파일 없음/읽기 실패/구조 오류"""

    def __init__(self, path: Path, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Couldn't read {self.path}: {reason}")


class UnexpectedRuntimeError(TherapistError):
    """세션 도중 발생한 예상하지 못한 오류 (최상위에서 래핑)"""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(str(cause) or cause.__class__.__name__)


# =============================================================================
# Manifest 데이터 클래스
# =============================================================================

@dataclass(frozen=True)
class DependencySpec:
    """선언된 의존성 하나"""
    name: str
    version_range: str
    group: DependencyGroup

    def __str__(self) -> str:
        return f"{self.name}@{self.version_range} ({self.group.value})"


def _freeze(mapping: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class Manifest:
    """
    파싱된 package.json

    dependencies / dev_dependencies / peer_dependencies 는 읽기 전용 매핑
    """
    path: Path
    name: Optional[str] = None
    dependencies: Mapping[str, str] = field(default_factory=dict)
    dev_dependencies: Mapping[str, str] = field(default_factory=dict)
    peer_dependencies: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "dependencies", _freeze(self.dependencies))
        object.__setattr__(self, "dev_dependencies", _freeze(self.dev_dependencies))
        object.__setattr__(self, "peer_dependencies", _freeze(self.peer_dependencies))

    @property
    def patient_name(self) -> str:
        return self.name or ANONYMOUS_PATIENT

    @property
    def all_dependencies(self) -> Dict[str, str]:
        """dependencies + devDependencies (이름 충돌 시 dev 우선)"""
        merged = dict(self.dependencies)
        merged.update(self.dev_dependencies)
        return merged

    @property
    def total_count(self) -> int:
        return len(self.all_dependencies)

    @property
    def dev_count(self) -> int:
        return len(self.dev_dependencies)

    @property
    def peer_count(self) -> int:
        return len(self.peer_dependencies)

    def specs(self) -> List[DependencySpec]:
        """모든 의존성을 그룹 순서대로 DependencySpec 목록으로 반환"""
        groups = (
            (DependencyGroup.DIRECT, self.dependencies),
            (DependencyGroup.DEVELOPMENT, self.dev_dependencies),
            (DependencyGroup.PEER, self.peer_dependencies),
        )
        return [
            DependencySpec(name=name, version_range=version, group=group)
            for group, deps in groups
            for name, version in deps.items()
        ]


# =============================================================================
# 진단 결과
# =============================================================================

def version_key(token: str) -> Tuple[int, int, str]:
    """major 토큰 정렬 키 ('9' < '10', 숫자가 아니면 뒤로)"""
    if token.isdigit():
        return (0, int(token), token)
    return (1, 0, token)


@dataclass(frozen=True)
class Finding:
    """탐지된 의존성 패턴 하나"""
    category: FindingCategory
    subject: str
    related: Optional[str] = None
    observed_versions: FrozenSet[str] = frozenset()
    count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "subject": self.subject,
            "related": self.related,
            "observed_versions": sorted(self.observed_versions, key=version_key),
            "count": self.count,
        }

    def __str__(self) -> str:
        if self.related:
            return f"{self.category.value}: {self.subject} / {self.related}"
        return f"{self.category.value}: {self.subject}"


@dataclass(frozen=True)
class Report:
    """렌더링된 세션 기록 (작성 후 불변)"""
    lines: Tuple[str, ...]
    finding_count: int
    categories: Tuple[FindingCategory, ...] = ()
    findings: Tuple[Finding, ...] = ()

    def render(self) -> str:
        return "\n".join(self.lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "finding_count": self.finding_count,
            "categories": [c.value for c in self.categories],
            "findings": [f.to_dict() for f in self.findings],
            "lines": list(self.lines),
        }
