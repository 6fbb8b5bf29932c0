"""
dependency_therapist/detector.py
================================
의존성 패턴 탐지기

탐지 순서 (메시지 순서에만 영향):
1. 버전 충돌 (dependencies vs devDependencies major 버전 비교)
2. 함께 설치되는 패키지 쌍
3. deprecated 패키지
4. peer dependency 존재 여부

semver 범위 해석이나 그래프 구축은 하지 않음 (규칙 테이블 조회만)
"""

import logging
import re
from collections import defaultdict
from typing import Dict, List, Mapping, Optional, Set

from .models import Finding, FindingCategory
from .rules import RuleSet, DEFAULT_RULES


logger = logging.getLogger(__name__)

_NON_VERSION_CHARS = re.compile(r'[^0-9.]')

PEER_SUBJECT = "peerDependencies"


def major_token(version_range: str) -> str:
    """
    버전 범위에서 major 토큰 추출

    '^18.2.0' → '18', '>=1.0.0 <2.0.0' → '1', 'latest' → ''
    """
    return _NON_VERSION_CHARS.sub('', version_range).split('.')[0]


class ConflictDetector:
    """규칙 테이블 기반 탐지기"""

    def __init__(self, rules: Optional[RuleSet] = None):
        self.rules = rules or DEFAULT_RULES

    def detect(
        self,
        dependencies: Mapping[str, str],
        peer_dependencies: Optional[Mapping[str, str]] = None,
        *,
        dev_dependencies: Optional[Mapping[str, str]] = None
    ) -> List[Finding]:
        """
        전체 탐지 실행

        Args:
            dependencies: 이름 → 버전 범위
            peer_dependencies: peerDependencies (선택)
            dev_dependencies: devDependencies (선택, 버전 충돌 비교 대상)

        Returns:
            탐지 순서대로의 Finding 목록 (없으면 빈 목록)
        """
        dev_dependencies = dev_dependencies or {}
        present: Set[str] = set(dependencies) | set(dev_dependencies)

        findings: List[Finding] = []
        findings.extend(self._check_version_conflicts(dependencies, dev_dependencies))
        findings.extend(self._check_coupled_pairs(present))
        findings.extend(self._check_deprecated(present))
        findings.extend(self._check_peers(peer_dependencies))

        logger.debug("Detected %d findings", len(findings))
        return findings

    def _check_version_conflicts(
        self,
        dependencies: Mapping[str, str],
        dev_dependencies: Mapping[str, str]
    ) -> List[Finding]:
        """같은 패키지가 서로 다른 major 버전으로 선언되었는지 확인"""
        tokens: Dict[str, Set[str]] = defaultdict(set)

        for deps in (dependencies, dev_dependencies):
            for name, version in deps.items():
                token = major_token(version)
                # 숫자가 없는 범위('*', 'latest')는 비교 불가
                if token:
                    tokens[name].add(token)

        return [
            Finding(
                category=FindingCategory.VERSION_CONFLICT,
                subject=name,
                observed_versions=frozenset(versions),
            )
            for name, versions in tokens.items()
            if len(versions) > 1
        ]

    def _check_coupled_pairs(self, present: Set[str]) -> List[Finding]:
        return [
            Finding(
                category=FindingCategory.PAIRED_COUPLING,
                subject=first,
                related=second,
            )
            for first, second in self.rules.coupled_pairs
            if first in present and second in present
        ]

    def _check_deprecated(self, present: Set[str]) -> List[Finding]:
        return [
            Finding(category=FindingCategory.DEPRECATED, subject=name)
            for name in self.rules.deprecated_packages
            if name in present
        ]

    def _check_peers(self, peer_dependencies: Optional[Mapping[str, str]]) -> List[Finding]:
        if not peer_dependencies:
            return []
        return [
            Finding(
                category=FindingCategory.PEER_COUNSELING,
                subject=PEER_SUBJECT,
                count=len(peer_dependencies),
            )
        ]


def detect(
    dependencies: Mapping[str, str],
    peer_dependencies: Optional[Mapping[str, str]] = None,
    *,
    dev_dependencies: Optional[Mapping[str, str]] = None,
    rules: Optional[RuleSet] = None
) -> List[Finding]:
    """탐지 편의 함수"""
    return ConflictDetector(rules).detect(
        dependencies,
        peer_dependencies,
        dev_dependencies=dev_dependencies,
    )


__all__ = [
    'ConflictDetector',
    'detect',
    'major_token',
]
