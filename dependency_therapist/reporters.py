"""
dependency_therapist/reporters.py
=================================
세션 기록 리포터

지원 형식:
- Console: 사람이 읽는 세션 기록
- JSON: 기계 판독용 JSON
"""

import json
import sys
from typing import IO, Optional
from abc import ABC, abstractmethod

from .models import Report


# =============================================================================
# 기본 리포터
# =============================================================================

class BaseReporter(ABC):
    """리포터 기본 클래스"""

    def __init__(self, output: Optional[IO[str]] = None):
        self.output = output or sys.stdout

    def write(self, text: str):
        """출력 스트림에 쓰기"""
        self.output.write(text)

    def writeln(self, text: str = ""):
        """줄 바꿈 포함 쓰기"""
        self.output.write(text + "\n")

    @abstractmethod
    def report(self, report: Report):
        """세션 기록 출력"""
        pass


# =============================================================================
# 콘솔 리포터
# =============================================================================

class ConsoleReporter(BaseReporter):
    """콘솔 출력 리포터"""

    def report(self, report: Report):
        for line in report.lines:
            self.writeln(line)


# =============================================================================
# JSON 리포터
# =============================================================================

class JsonReporter(BaseReporter):
    """JSON 출력 리포터"""

    def __init__(self, output: Optional[IO[str]] = None, indent: int = 2):
        super().__init__(output)
        self.indent = indent

    def report(self, report: Report):
        self.writeln(json.dumps(report.to_dict(), indent=self.indent, ensure_ascii=False))


REPORTERS = {
    "console": ConsoleReporter,
    "json": JsonReporter,
}
