"""
dependency_therapist/composer.py
================================
세션 기록(Report) 작성기

리포트 구조:
1. 헤더 - 환자 이름, 의존성 개수
2. 진단 (Diagnosis) - Finding마다 헤드라인 + 치료사 코멘트
3. 돌파구 (Breakthroughs) - 1~3개의 장식용 문장
4. 처방 (Treatment) - 카테고리별 조언 + 고정 기술 조치
5. 푸터

Finding이 없으면 2~4 대신 유지 관리(maintenance) 섹션만 출력.

무작위 선택은 주입 가능한 random.Random으로만 수행 (테스트에서 시드 고정).
"""

import random
from typing import Dict, List, Optional, Sequence, Tuple

from .models import Finding, FindingCategory, Report, version_key
from .templates import (
    TemplateSet, DEFAULT_TEMPLATES, GENERIC_INTERVENTION, GENERIC_ADVICE,
    fill_placeholders,
)


MAX_BREAKTHROUGHS = 3
GHOSTED_PARTY = "the community"


def breakthrough_count(finding_count: int) -> int:
    """Finding 개수에 따른 breakthrough 줄 수"""
    if finding_count <= 0:
        return 0
    return min(MAX_BREAKTHROUGHS, max(1, finding_count))


def placeholder_values(finding: Finding) -> Tuple[object, ...]:
    """카테고리별 자리표시자 치환 순서"""
    category = finding.category
    if category == FindingCategory.VERSION_CONFLICT:
        return (finding.subject, finding.subject)
    if category == FindingCategory.DEPRECATED:
        return (finding.subject, GHOSTED_PARTY)
    if category == FindingCategory.PEER_COUNSELING:
        return (finding.count, finding.subject)
    return (finding.subject, finding.related or finding.subject)


class ReportComposer:
    """Finding 목록 → Report"""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        templates: TemplateSet = DEFAULT_TEMPLATES
    ):
        self.rng = rng or random.Random()
        self.templates = templates

    def compose(
        self,
        findings: Sequence[Finding],
        patient_name: str,
        total_deps: int,
        dev_deps: int,
        peer_deps: int = 0
    ) -> Report:
        lines: List[str] = []
        self._header(lines, patient_name, total_deps, dev_deps, peer_deps)

        if findings:
            self._diagnosis(lines, findings)
            self._breakthroughs(lines, len(findings))
            self._treatment(lines, findings)
        else:
            self._maintenance(lines)

        self._footer(lines, len(findings))

        categories: List[FindingCategory] = []
        for finding in findings:
            if finding.category not in categories:
                categories.append(finding.category)

        return Report(
            lines=tuple(lines),
            finding_count=len(findings),
            categories=tuple(categories),
            findings=tuple(findings),
        )

    # =========================================================================
    # 섹션
    # =========================================================================

    def _header(self, lines: List[str], patient_name: str,
                total_deps: int, dev_deps: int, peer_deps: int):
        lines.append("")
        lines.append("🛋️  Welcome to Dependency Therapy Session")
        lines.append("")
        lines.append("Your project's emotional baggage is safe with us.")
        lines.append("")
        lines.append("📋 INITIAL ASSESSMENT:")
        lines.append(f"Patient: {patient_name}")
        lines.append(f"Total dependencies: {total_deps}")
        lines.append(f"Dependencies in denial (devDependencies): {dev_deps}")
        if peer_deps:
            lines.append(f"Roommates (peerDependencies): {peer_deps}")

    def _maintenance(self, lines: List[str]):
        lines.append("")
        lines.append("🩺 MAINTENANCE MODE:")
        lines.extend(self.templates.maintenance)

    def _diagnosis(self, lines: List[str], findings: Sequence[Finding]):
        lines.append("")
        lines.append("🔍 DIAGNOSIS:")
        for finding in findings:
            lines.append(self.headline(finding))
            lines.append(f'   💭 Therapist: "{self.intervention(finding)}"')

    def _breakthroughs(self, lines: List[str], finding_count: int):
        count = min(breakthrough_count(finding_count), len(self.templates.breakthroughs))
        if not count:
            return

        lines.append("")
        lines.append("💡 BREAKTHROUGH MOMENTS:")
        # 템플릿은 중복 없이, 패키지 이름은 독립적으로 선택
        for template in self.rng.sample(list(self.templates.breakthroughs), count):
            first = self.rng.choice(self.templates.famous_packages)
            second = self.rng.choice(self.templates.famous_packages)
            lines.append(f"   ✨ {fill_placeholders(template, first, second)}")

    def _treatment(self, lines: List[str], findings: Sequence[Finding]):
        lines.append("")
        lines.append("💊 PRESCRIBED TREATMENT:")

        first_by_category: Dict[FindingCategory, Finding] = {}
        for finding in findings:
            first_by_category.setdefault(finding.category, finding)

        for category, finding in first_by_category.items():
            advice = self.templates.advice.get(category, GENERIC_ADVICE)
            text = fill_placeholders(advice, *placeholder_values(finding))
            lines.append(f"   📝 For {category.value.upper()}: {text}")

        lines.append("")
        lines.append("   🔧 Technical interventions:")
        for i, step in enumerate(self.templates.interventions, 1):
            lines.append(f"   {i}. {step}")

    def _footer(self, lines: List[str], finding_count: int):
        lines.append("")
        lines.append("📄 SESSION TRANSCRIPT COMPLETE")
        lines.append(f"Total issues diagnosed: {finding_count}")
        lines.append("")
        lines.append("Remember: Healthy dependencies make healthy applications.")
        lines.append("Schedule your next session after your next 'npm install' crisis.")
        lines.append("")

    # =========================================================================
    # Finding 렌더링
    # =========================================================================

    def headline(self, finding: Finding) -> str:
        template = self.templates.headlines.get(finding.category)
        if template is None:
            return f"❓ {finding.category.value.upper()}: {finding.subject}"
        return template.format(
            subject=finding.subject,
            related=finding.related or "",
            versions=", ".join(sorted(finding.observed_versions, key=version_key)),
            count=finding.count,
        )

    def intervention(self, finding: Finding) -> str:
        """카테고리 템플릿 중 하나를 무작위로 골라 채움"""
        options = self.templates.sessions.get(finding.category)
        template = self.rng.choice(options) if options else GENERIC_INTERVENTION
        return fill_placeholders(template, *placeholder_values(finding))


def compose(
    findings: Sequence[Finding],
    patient_name: str,
    total_deps: int,
    dev_deps: int,
    peer_deps: int = 0,
    rng: Optional[random.Random] = None
) -> Report:
    """Report 작성 편의 함수"""
    return ReportComposer(rng=rng).compose(
        findings, patient_name, total_deps, dev_deps, peer_deps
    )


__all__ = [
    'ReportComposer',
    'compose',
    'breakthrough_count',
    'placeholder_values',
]
