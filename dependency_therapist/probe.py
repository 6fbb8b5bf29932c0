"""
dependency_therapist/probe.py
=============================
순환 의존성 probe

`npm ls --depth=0`의 실패 출력(stderr)에서 순환 표시 문자열을 찾는 휴리스틱.
외부 도구의 메시지 문구에 의존하므로 CycleDetector 인터페이스 뒤에 격리함.

probe 실패(바이너리 없음, 타임아웃 등)는 절대 세션을 실패시키지 않음.
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence

from .models import Finding, FindingCategory
from .rules import DEFAULT_CYCLE_INDICATORS, DEFAULT_PROBE_COMMAND, DEFAULT_PROBE_TIMEOUT, RuleSet


logger = logging.getLogger(__name__)

CYCLE_SUBJECT = "your dependencies"
CYCLE_RELATED = "their dependencies"


class CycleDetector(ABC):
    """순환 의존성 탐지 인터페이스"""

    @abstractmethod
    def detect_cycle(self) -> bool:
        """순환이 감지되면 True"""


class NullCycleDetector(CycleDetector):
    """항상 순환 없음 (probe 비활성화용)"""

    def detect_cycle(self) -> bool:
        return False


class NpmCycleProbe(CycleDetector):
    """
    패키지 매니저 명령 실행 후 stderr 검사

    종료 코드가 0이 아니고 stderr에 indicator가 포함되면 순환으로 판단
    (대소문자 무시)
    """

    def __init__(
        self,
        project_path: Path,
        command: Sequence[str] = DEFAULT_PROBE_COMMAND,
        indicators: Sequence[str] = DEFAULT_CYCLE_INDICATORS,
        timeout: float = DEFAULT_PROBE_TIMEOUT
    ):
        self.project = Path(project_path)
        self.command = list(command)
        self.indicators = [i.lower() for i in indicators]
        self.timeout = timeout

    @classmethod
    def from_rules(cls, project_path: Path, rules: RuleSet) -> "NpmCycleProbe":
        return cls(
            project_path,
            command=rules.probe_command,
            indicators=rules.cycle_indicators,
            timeout=rules.probe_timeout,
        )

    def detect_cycle(self) -> bool:
        try:
            res = subprocess.run(
                self.command,
                cwd=self.project,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired:
            logger.debug("%s timed out after %ss", " ".join(self.command), self.timeout)
            return False
        except Exception as e:
            logger.debug("Cycle probe unavailable: %s", e)
            return False

        if res.returncode == 0:
            return False

        stderr = (res.stderr or "").lower()
        found = any(indicator in stderr for indicator in self.indicators)
        logger.debug(
            "%s exited %d, cycle indicator %s",
            " ".join(self.command), res.returncode, "found" if found else "not found"
        )
        return found


def probe_cycles(detector: Optional[CycleDetector]) -> List[Finding]:
    """CycleDetector 결과를 Finding 목록으로 변환"""
    if detector is None or not detector.detect_cycle():
        return []
    return [
        Finding(
            category=FindingCategory.CYCLE,
            subject=CYCLE_SUBJECT,
            related=CYCLE_RELATED,
        )
    ]


__all__ = [
    'CycleDetector',
    'NullCycleDetector',
    'NpmCycleProbe',
    'probe_cycles',
]
