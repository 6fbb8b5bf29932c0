"""
dependency_therapist/templates.py
=================================
세션 메시지 템플릿 (읽기 전용 설정)

모든 템플릿은 위치 기반 '%s' 자리표시자를 사용하며
fill_placeholders()로 채움.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Tuple

from .models import FindingCategory


PLACEHOLDER = "%s"
_PLACEHOLDER_RE = re.compile(re.escape(PLACEHOLDER))

GENERIC_INTERVENTION = "Let's unpack what %s is really feeling here."
GENERIC_ADVICE = "Keep an eye on %s. Healing is not linear."


THERAPY_SESSIONS: Mapping[FindingCategory, Tuple[str, ...]] = MappingProxyType({
    FindingCategory.VERSION_CONFLICT: (
        "I'm sensing some unresolved tension here. Have you tried telling %s and %s to use I-messages?",
        "%s is giving %s the silent treatment. Classic avoidance behavior.",
        "This relationship is giving me 'npm ERR!' vibes. %s needs to stop gaslighting %s about version compatibility.",
    ),
    FindingCategory.PAIRED_COUPLING: (
        "%s and %s are enmeshed. They need to establish some healthy boundaries.",
        "I'm prescribing some alone time. %s needs to learn it's okay to function without %s.",
        "This is textbook codependency. %s keeps saying 'I can't live without %s' but that's just fear talking.",
    ),
    FindingCategory.DEPRECATED: (
        "%s keeps leaving %s on read. Communication is key in any relationship.",
        "%s ghosted %s after version 2.5.3. That's not cool, even for a minor patch.",
        "I see abandonment issues here. %s promised to be there for %s but disappeared after the update.",
    ),
    FindingCategory.CYCLE: (
        "%s and %s are stuck in a feedback loop of emotional neediness.",
        "This circular dependency is like watching two exes keep getting back together.",
        "%s depends on %s who depends on %s... it's dependency-ception!",
    ),
    FindingCategory.PEER_COUNSELING: (
        "%s %s are like roommates - they need clear agreements.",
        "We have %s %s who all expect someone else to do the dishes.",
        "I'm hearing %s %s, and none of them want to commit to an install.",
    ),
})

# 카테고리별 진단 헤드라인
HEADLINES: Mapping[FindingCategory, str] = MappingProxyType({
    FindingCategory.VERSION_CONFLICT: "🚩 TOXIC: {subject} has multiple personalities (versions: {versions})",
    FindingCategory.PAIRED_COUPLING: "🤝 CODEPENDENT: {subject} and {related} can't function apart",
    FindingCategory.DEPRECATED: "👻 GHOSTING: {subject} might have abandoned you",
    FindingCategory.CYCLE: "🌀 CIRCULAR: Your dependencies are stuck in an infinite loop of neediness.",
    FindingCategory.PEER_COUNSELING: "👥 COUPLES COUNSELING NEEDED: {count} peer dependencies detected.",
})

BREAKTHROUGHS: Tuple[str, ...] = (
    "%s admitted it's not mad, just disappointed.",
    "%s finally acknowledged its trust issues with semver ranges.",
    "%s realized it's been projecting its insecurity onto %s.",
    "%s agreed to attend weekly dependency resolution meetings.",
    "%s discovered it's been using passive-aggressive version locking.",
)

# breakthrough에 쓰이는 유명 패키지 이름 (실제 manifest와 무관)
FAMOUS_PACKAGES: Tuple[str, ...] = (
    "Webpack", "Babel", "React", "Express", "Lodash", "TypeScript",
)

RELATIONSHIP_ADVICE: Mapping[FindingCategory, str] = MappingProxyType({
    FindingCategory.VERSION_CONFLICT: (
        "Try setting clearer boundaries with version ranges. "
        "'^1.2.3' is healthier than '>=1.0.0 <2.0.0'."
    ),
    FindingCategory.PAIRED_COUPLING: "Consider decoupling. Maybe %s doesn't need %s as a direct dependency.",
    FindingCategory.DEPRECATED: "Check if %s has moved on to a newer version. Sometimes packages outgrow each other.",
    FindingCategory.CYCLE: "Introduce a mediator package. No couple should be each other's entire world.",
    FindingCategory.PEER_COUNSELING: "Write down clear peer agreements. Pin compatible ranges and document them.",
})

TECHNICAL_INTERVENTIONS: Tuple[str, ...] = (
    "Run 'npm audit' to check for security issues",
    "Try 'npm update' for minor version fixes",
    "Consider 'npx npm-check-updates' for major updates",
    "Use 'npm ls' to visualize your dependency tree",
)

MAINTENANCE_LINES: Tuple[str, ...] = (
    "Surprisingly healthy relationships detected!",
    "(Or you're just in denial. Let's check again after npm install.)",
    "Maintenance plan: Keep communicating with your dependencies.",
    "Schedule regular check-ins with 'npm outdated'",
)


@dataclass(frozen=True)
class TemplateSet:
    """컴포저가 사용하는 템플릿 묶음"""
    sessions: Mapping[FindingCategory, Tuple[str, ...]] = field(default_factory=lambda: THERAPY_SESSIONS)
    headlines: Mapping[FindingCategory, str] = field(default_factory=lambda: HEADLINES)
    breakthroughs: Tuple[str, ...] = BREAKTHROUGHS
    famous_packages: Tuple[str, ...] = FAMOUS_PACKAGES
    advice: Mapping[FindingCategory, str] = field(default_factory=lambda: RELATIONSHIP_ADVICE)
    interventions: Tuple[str, ...] = TECHNICAL_INTERVENTIONS
    maintenance: Tuple[str, ...] = MAINTENANCE_LINES


DEFAULT_TEMPLATES = TemplateSet()


def fill_placeholders(template: str, *values: object) -> str:
    """
    '%s'를 순서대로 채움

    값보다 자리표시자가 많으면 마지막 값을 재사용하므로
    결과에 '%s'가 남지 않음. 값이 없으면 템플릿 그대로 반환.
    """
    if not values:
        return template
    remaining = iter(values)

    def _next(_match) -> str:
        return str(next(remaining, values[-1]))

    return _PLACEHOLDER_RE.sub(_next, template)
