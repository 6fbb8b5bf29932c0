"""
dependency_therapist/rules.py
=============================
탐지 규칙 테이블 (코드가 아닌 데이터)

- 함께 설치되는 패키지 쌍 (codependent)
- deprecated 가능성이 있는 패키지 (ghosting)
- 순환 의존성 판별 문자열 및 probe 명령

프로젝트별 확장: <project>/.therapist/rules.yaml

    coupled_pairs:
      - [vue, vue-router]
    deprecated_packages:
      - left-pad
    cycle_indicators: [circular, cycle]
    probe_command: [pnpm, ls, --depth=0]
    probe_timeout: 10
"""

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml


logger = logging.getLogger(__name__)

RULES_DIR = ".therapist"
RULES_FILENAME = "rules.yaml"

DEFAULT_COUPLED_PAIRS: Tuple[Tuple[str, str], ...] = (
    ("express", "body-parser"),
    ("react", "react-dom"),
    ("webpack", "webpack-cli"),
    ("jest", "@testing-library/react"),
)

DEFAULT_DEPRECATED_PACKAGES: Tuple[str, ...] = (
    "request",
    "gulp-util",
    "hoek",
)

DEFAULT_CYCLE_INDICATORS: Tuple[str, ...] = ("circular",)

DEFAULT_PROBE_COMMAND: Tuple[str, ...] = ("npm", "ls", "--depth=0")

DEFAULT_PROBE_TIMEOUT = 30.0


class RulesFormatError(ValueError):
    """rules.yaml 구조 오류"""


def _string_list(value: Any, key: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise RulesFormatError(f"'{key}' must be a list of strings")
    return value


def _pair_list(value: Any) -> List[Tuple[str, str]]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise RulesFormatError("'coupled_pairs' must be a list of [name, name] pairs")
    pairs = []
    for entry in value:
        if (not isinstance(entry, (list, tuple)) or len(entry) != 2
                or not all(isinstance(v, str) for v in entry)):
            raise RulesFormatError(f"Invalid coupled pair: {entry!r}")
        pairs.append((entry[0], entry[1]))
    return pairs


def _extend_unique(base: tuple, extra: list) -> tuple:
    result = list(base)
    for item in extra:
        if item not in result:
            result.append(item)
    return tuple(result)


@dataclass(frozen=True)
class RuleSet:
    """
    탐지 규칙 전체

    구조:
    - coupled_pairs: (패키지, 파트너) 쌍
    - deprecated_packages: 패키지 이름
    - cycle_indicators: probe stderr에서 찾을 문자열
    - probe_command / probe_timeout: 외부 명령 설정
    """
    coupled_pairs: Tuple[Tuple[str, str], ...] = DEFAULT_COUPLED_PAIRS
    deprecated_packages: Tuple[str, ...] = DEFAULT_DEPRECATED_PACKAGES
    cycle_indicators: Tuple[str, ...] = DEFAULT_CYCLE_INDICATORS
    probe_command: Tuple[str, ...] = DEFAULT_PROBE_COMMAND
    probe_timeout: float = DEFAULT_PROBE_TIMEOUT
    source: Optional[Path] = field(default=None, compare=False)

    @classmethod
    def load(cls, project_path: Path) -> "RuleSet":
        """
        프로젝트에서 규칙 로드

        파일이 없거나 형식이 잘못되면 기본 규칙 사용 (경고 로그)
        """
        defaults = cls()
        rules_file = Path(project_path) / RULES_DIR / RULES_FILENAME

        if not rules_file.exists():
            return defaults

        try:
            with open(rules_file, encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
            return cls.from_dict(data, source=rules_file)
        except yaml.YAMLError as e:
            logger.warning("Ignoring malformed %s: %s", rules_file, e)
        except RulesFormatError as e:
            logger.warning("Ignoring %s: %s", rules_file, e)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s: %s", rules_file, e)

        return defaults

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: Optional[Path] = None) -> "RuleSet":
        """dict → RuleSet (pairs/deprecated는 기본값에 추가, 나머지는 대체)"""
        if not isinstance(data, dict):
            raise RulesFormatError("rules file must contain a mapping")

        defaults = cls()
        pairs = _extend_unique(defaults.coupled_pairs, _pair_list(data.get("coupled_pairs")))
        deprecated = _extend_unique(
            defaults.deprecated_packages,
            _string_list(data.get("deprecated_packages"), "deprecated_packages")
        )

        indicators = tuple(_string_list(data.get("cycle_indicators"), "cycle_indicators"))
        command = tuple(_string_list(data.get("probe_command"), "probe_command"))

        timeout = data.get("probe_timeout", defaults.probe_timeout)
        if (isinstance(timeout, bool) or not isinstance(timeout, (int, float))
                or not math.isfinite(timeout) or timeout <= 0):
            raise RulesFormatError("'probe_timeout' must be a positive finite number")

        return cls(
            coupled_pairs=pairs,
            deprecated_packages=deprecated,
            cycle_indicators=indicators or defaults.cycle_indicators,
            probe_command=command or defaults.probe_command,
            probe_timeout=float(timeout),
            source=source,
        )

    def to_dict(self) -> Dict[str, Any]:
        """YAML 직렬화용"""
        return {
            "coupled_pairs": [list(pair) for pair in self.coupled_pairs],
            "deprecated_packages": list(self.deprecated_packages),
            "cycle_indicators": list(self.cycle_indicators),
            "probe_command": list(self.probe_command),
            "probe_timeout": self.probe_timeout,
        }

    def save(self, project_path: Path) -> Path:
        """규칙을 파일로 저장"""
        rules_dir = Path(project_path) / RULES_DIR
        rules_dir.mkdir(parents=True, exist_ok=True)
        rules_file = rules_dir / RULES_FILENAME

        with open(rules_file, 'w', encoding='utf-8') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, allow_unicode=True, sort_keys=False)
        return rules_file


DEFAULT_RULES = RuleSet()
