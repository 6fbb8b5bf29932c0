"""
dependency_therapist - package.json 의존성 상담사
=================================================

기능:
1. 버전 충돌 탐지: dependencies vs devDependencies major 버전 비교
2. 패키지 쌍 탐지: 항상 함께 설치되는 패키지 (react + react-dom 등)
3. Deprecated 탐지: 버려진 패키지 (request, gulp-util, hoek)
4. Peer dependency / 순환 의존성 (npm ls probe)
5. 결과를 "상담 세션" 기록으로 출력

사용법:
    # CLI
    dependency-therapist
    dependency-therapist --seed 42 --no-probe

    # Python API
    from dependency_therapist import run_session

    report = run_session("./my-project", seed=42)
    print(report.render())
"""

__version__ = "1.0.0"

# 모델
from .models import (
    # Enums
    DependencyGroup, FindingCategory,

    # Errors
    TherapistError, ManifestUnreadable, UnexpectedRuntimeError,

    # Data classes
    DependencySpec, Manifest, Finding, Report,
)

# Manifest
from .manifest import load_manifest

# 규칙
from .rules import RuleSet, DEFAULT_RULES

# 탐지기
from .detector import ConflictDetector, detect, major_token
from .probe import CycleDetector, NullCycleDetector, NpmCycleProbe, probe_cycles

# 리포트
from .templates import TemplateSet, DEFAULT_TEMPLATES, fill_placeholders
from .composer import ReportComposer, compose, breakthrough_count
from .reporters import ConsoleReporter, JsonReporter

# 세션
from .therapist import DependencyTherapist, run_session

# CLI
from .cli import main as cli_main

__all__ = [
    # Version
    '__version__',

    # Enums
    'DependencyGroup', 'FindingCategory',

    # Errors
    'TherapistError', 'ManifestUnreadable', 'UnexpectedRuntimeError',

    # Models
    'DependencySpec', 'Manifest', 'Finding', 'Report',

    # Manifest
    'load_manifest',

    # Rules
    'RuleSet', 'DEFAULT_RULES',

    # Detection
    'ConflictDetector', 'detect', 'major_token',
    'CycleDetector', 'NullCycleDetector', 'NpmCycleProbe', 'probe_cycles',

    # Report
    'TemplateSet', 'DEFAULT_TEMPLATES', 'fill_placeholders',
    'ReportComposer', 'compose', 'breakthrough_count',
    'ConsoleReporter', 'JsonReporter',

    # Session
    'DependencyTherapist', 'run_session',

    # CLI
    'cli_main',
]
