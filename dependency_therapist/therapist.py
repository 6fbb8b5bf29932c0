"""
dependency_therapist/therapist.py
=================================
세션 실행기

파이프라인: manifest 로드 → 패턴 탐지 → 순환 probe → 리포트 작성
"""

import logging
import random
from pathlib import Path
from typing import Optional, Union

from .models import Manifest, Report
from .manifest import load_manifest, resolve_manifest_path
from .rules import RuleSet
from .detector import ConflictDetector
from .probe import CycleDetector, NpmCycleProbe, probe_cycles
from .composer import ReportComposer


logger = logging.getLogger(__name__)


class DependencyTherapist:
    """
    통합 세션 실행기

    Args:
        project_path: 프로젝트 디렉토리 또는 package.json 경로
        rules: 탐지 규칙 (기본: 프로젝트의 .therapist/rules.yaml 또는 기본 규칙)
        rng: 템플릿 선택용 난수 생성기
        cycle_detector: 순환 탐지기 (기본: NpmCycleProbe)
    """

    def __init__(
        self,
        project_path: Union[str, Path] = ".",
        rules: Optional[RuleSet] = None,
        rng: Optional[random.Random] = None,
        cycle_detector: Optional[CycleDetector] = None
    ):
        self.manifest_path = resolve_manifest_path(project_path)
        self.project = self.manifest_path.parent
        self.rules = rules or RuleSet.load(self.project)
        self.rng = rng or random.Random()
        self.cycle_detector = cycle_detector or NpmCycleProbe.from_rules(self.project, self.rules)

        self.manifest: Optional[Manifest] = None

    def run_session(self) -> Report:
        """
        전체 세션 실행

        Raises:
            ManifestUnreadable: manifest를 읽을 수 없을 때
        """
        self.manifest = load_manifest(self.manifest_path)
        manifest = self.manifest

        detector = ConflictDetector(self.rules)
        findings = detector.detect(
            manifest.dependencies,
            manifest.peer_dependencies,
            dev_dependencies=manifest.dev_dependencies,
        )
        findings.extend(probe_cycles(self.cycle_detector))

        logger.info("Session for %s: %d findings", manifest.patient_name, len(findings))

        composer = ReportComposer(rng=self.rng)
        return composer.compose(
            findings,
            patient_name=manifest.patient_name,
            total_deps=manifest.total_count,
            dev_deps=manifest.dev_count,
            peer_deps=manifest.peer_count,
        )


def run_session(
    project_path: Union[str, Path] = ".",
    seed: Optional[int] = None,
    rules: Optional[RuleSet] = None,
    cycle_detector: Optional[CycleDetector] = None
) -> Report:
    """
    세션 실행 편의 함수

    Args:
        project_path: 프로젝트 경로
        seed: 난수 시드 (같은 시드 → 같은 리포트)
        rules: 탐지 규칙
        cycle_detector: 순환 탐지기

    Returns:
        Report
    """
    therapist = DependencyTherapist(
        project_path=project_path,
        rules=rules,
        rng=random.Random(seed),
        cycle_detector=cycle_detector,
    )
    return therapist.run_session()


__all__ = [
    'DependencyTherapist',
    'run_session',
]
