#!/usr/bin/env python3
"""
dependency_therapist/tests.py
=============================
통합 테스트

실행:
    python -m dependency_therapist.tests
    pytest
"""

import io
import json
import random
import subprocess
import sys
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest import mock

from .models import (
    DependencyGroup, Finding, FindingCategory, Manifest, ManifestUnreadable,
    ANONYMOUS_PATIENT,
)
from .manifest import load_manifest
from .rules import RuleSet, DEFAULT_RULES, RULES_DIR, RULES_FILENAME
from .detector import ConflictDetector, detect, major_token
from .probe import NullCycleDetector, NpmCycleProbe, probe_cycles, CycleDetector
from .templates import fill_placeholders, THERAPY_SESSIONS, RELATIONSHIP_ADVICE, HEADLINES
from .composer import ReportComposer, breakthrough_count
from .reporters import ConsoleReporter, JsonReporter
from .therapist import DependencyTherapist, run_session
from .cli import main


DIAGNOSIS = "🔍 DIAGNOSIS:"
TREATMENT = "💊 PRESCRIBED TREATMENT:"
BREAKTHROUGH_HEADER = "💡 BREAKTHROUGH MOMENTS:"
MAINTENANCE = "🩺 MAINTENANCE MODE:"
BREAKTHROUGH_PREFIX = "   ✨ "


class FirstChoiceRandom(random.Random):
    """항상 첫 번째 후보를 고르는 난수 생성기 (테스트용)"""

    def choice(self, seq):
        return seq[0]

    def sample(self, population, k, **kwargs):
        return list(population)[:k]


class CyclingDetector(CycleDetector):
    """항상 순환을 보고하는 탐지기 (테스트용)"""

    def detect_cycle(self) -> bool:
        return True


def write_manifest(directory: Path, data) -> Path:
    path = Path(directory) / "package.json"
    if isinstance(data, str):
        path.write_text(data)
    else:
        path.write_text(json.dumps(data))
    return path


def all_categories_findings():
    return [
        Finding(FindingCategory.VERSION_CONFLICT, "lodash", observed_versions=frozenset({"3", "4"})),
        Finding(FindingCategory.PAIRED_COUPLING, "react", "react-dom"),
        Finding(FindingCategory.DEPRECATED, "request"),
        Finding(FindingCategory.CYCLE, "your dependencies", "their dependencies"),
        Finding(FindingCategory.PEER_COUNSELING, "peerDependencies", count=2),
    ]


class TestMajorToken(unittest.TestCase):
    """major 버전 토큰 테스트"""

    def test_caret_range(self):
        self.assertEqual(major_token("^18.2.0"), "18")

    def test_compound_range(self):
        """숫자/점 이외 문자 제거 후 첫 '.' 앞부분"""
        self.assertEqual(major_token(">=1.0.0 <2.0.0"), "1")

    def test_non_numeric(self):
        self.assertEqual(major_token("latest"), "")
        self.assertEqual(major_token("*"), "")


class TestManifestLoader(unittest.TestCase):
    """Manifest 로더 테스트"""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.project = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_load_groups(self):
        """dependencies / devDependencies / peerDependencies 분리"""
        write_manifest(self.project, {
            "name": "patient-zero",
            "dependencies": {"react": "^18.0.0"},
            "devDependencies": {"jest": "^29.0.0"},
            "peerDependencies": {"react-dom": "^18.0.0"},
        })

        manifest = load_manifest(self.project)
        self.assertEqual(manifest.patient_name, "patient-zero")
        self.assertEqual(dict(manifest.dependencies), {"react": "^18.0.0"})
        self.assertEqual(dict(manifest.dev_dependencies), {"jest": "^29.0.0"})
        self.assertEqual(manifest.peer_count, 1)
        self.assertEqual(manifest.total_count, 2)

        groups = {spec.name: spec.group for spec in manifest.specs()}
        self.assertEqual(groups["react"], DependencyGroup.DIRECT)
        self.assertEqual(groups["jest"], DependencyGroup.DEVELOPMENT)
        self.assertEqual(groups["react-dom"], DependencyGroup.PEER)

    def test_file_path_accepted(self):
        path = write_manifest(self.project, {"dependencies": {}})
        self.assertEqual(load_manifest(path).path, path)

    def test_missing_file(self):
        with self.assertRaises(ManifestUnreadable) as ctx:
            load_manifest(self.project)
        self.assertIn("not found", ctx.exception.reason)

    def test_invalid_json(self):
        write_manifest(self.project, "{ not json")
        with self.assertRaises(ManifestUnreadable):
            load_manifest(self.project)

    def test_non_object_root(self):
        write_manifest(self.project, [1, 2, 3])
        with self.assertRaises(ManifestUnreadable):
            load_manifest(self.project)

    def test_non_object_section(self):
        write_manifest(self.project, {"dependencies": ["react"]})
        with self.assertRaises(ManifestUnreadable) as ctx:
            load_manifest(self.project)
        self.assertIn("dependencies", ctx.exception.reason)

    def test_null_section_and_values(self):
        """null 섹션은 빈 매핑, null/숫자 버전은 문자열"""
        write_manifest(self.project, {
            "dependencies": {"a": None, "b": 2},
            "devDependencies": None,
        })
        manifest = load_manifest(self.project)
        self.assertEqual(dict(manifest.dependencies), {"a": "", "b": "2"})
        self.assertEqual(manifest.dev_count, 0)

    def test_anonymous_patient(self):
        write_manifest(self.project, {"name": 42})
        self.assertEqual(load_manifest(self.project).patient_name, ANONYMOUS_PATIENT)

    def test_dev_wins_on_collision(self):
        manifest = Manifest(
            path=self.project / "package.json",
            dependencies={"lodash": "^3.0.0"},
            dev_dependencies={"lodash": "^4.0.0"},
        )
        self.assertEqual(manifest.all_dependencies, {"lodash": "^4.0.0"})
        self.assertEqual(manifest.total_count, 1)

    def test_manifest_is_read_only(self):
        manifest = Manifest(path=self.project, dependencies={"a": "1"})
        with self.assertRaises(TypeError):
            manifest.dependencies["b"] = "2"


class TestConflictDetector(unittest.TestCase):
    """탐지기 테스트"""

    def test_empty(self):
        self.assertEqual(detect({}, {}), [])

    def test_no_matches(self):
        self.assertEqual(detect({"express": "^4.0.0"}), [])

    def test_coupled_pair(self):
        findings = detect({"react": "^18.0.0", "react-dom": "^18.0.0"})
        self.assertEqual(findings, [
            Finding(FindingCategory.PAIRED_COUPLING, "react", "react-dom")
        ])

    def test_coupled_pair_ignores_versions(self):
        findings = detect({"react": "^15.0.0", "react-dom": "latest"})
        pairs = [f for f in findings if f.category == FindingCategory.PAIRED_COUPLING]
        self.assertEqual(len(pairs), 1)

    def test_coupled_pair_across_groups(self):
        """dependencies + devDependencies 합집합 기준"""
        findings = detect(
            {"webpack": "^5.0.0"},
            dev_dependencies={"webpack-cli": "^5.0.0"},
        )
        self.assertEqual(findings[0].subject, "webpack")
        self.assertEqual(findings[0].related, "webpack-cli")

    def test_half_pair(self):
        self.assertEqual(detect({"express": "^4.0.0", "react": "^18.0.0"}), [])

    def test_deprecated(self):
        findings = detect({"request": "^2.88.0"})
        self.assertEqual(findings, [Finding(FindingCategory.DEPRECATED, "request")])

    def test_deprecated_one_per_name(self):
        findings = detect({"hoek": "^4.0.0", "request": "^2.88.0", "gulp-util": "^3.0.0"})
        self.assertEqual(
            [f.subject for f in findings],
            ["request", "gulp-util", "hoek"]
        )

    def test_peer_single_finding(self):
        findings = detect({}, {"react": "^18.0.0", "vue": "^3.0.0", "svelte": "^4.0.0"})
        self.assertEqual(len(findings), 1)
        self.assertEqual(findings[0].category, FindingCategory.PEER_COUNSELING)
        self.assertEqual(findings[0].count, 3)

    def test_version_conflict_dev_vs_direct(self):
        findings = detect({"lodash": "^3.10.0"}, dev_dependencies={"lodash": "^4.17.0"})
        self.assertEqual(len(findings), 1)
        self.assertEqual(findings[0].category, FindingCategory.VERSION_CONFLICT)
        self.assertEqual(findings[0].observed_versions, frozenset({"3", "4"}))

    def test_same_major_no_conflict(self):
        findings = detect({"lodash": "^4.0.0"}, dev_dependencies={"lodash": "~4.17.0"})
        self.assertEqual(findings, [])

    def test_non_numeric_range_not_conflict(self):
        findings = detect({"lodash": "^4.0.0"}, dev_dependencies={"lodash": "latest"})
        self.assertEqual(findings, [])

    def test_detection_order(self):
        findings = detect(
            {"express": "^4.0.0", "body-parser": "^1.0.0", "request": "^2.0.0", "lodash": "^3.0.0"},
            {"react": "^18.0.0"},
            dev_dependencies={"lodash": "^4.0.0"},
        )
        self.assertEqual(
            [f.category for f in findings],
            [
                FindingCategory.VERSION_CONFLICT,
                FindingCategory.PAIRED_COUPLING,
                FindingCategory.DEPRECATED,
                FindingCategory.PEER_COUNSELING,
            ]
        )

    def test_custom_rules(self):
        rules = RuleSet.from_dict({
            "coupled_pairs": [["vue", "vue-router"]],
            "deprecated_packages": ["left-pad"],
        })
        findings = ConflictDetector(rules).detect({
            "vue": "^3.0.0", "vue-router": "^4.0.0", "left-pad": "^1.0.0",
        })
        self.assertEqual(
            [(f.category, f.subject) for f in findings],
            [
                (FindingCategory.PAIRED_COUPLING, "vue"),
                (FindingCategory.DEPRECATED, "left-pad"),
            ]
        )


class TestRuleSet(unittest.TestCase):
    """규칙 설정 테스트"""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.project = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def _write_rules(self, content: str):
        rules_dir = self.project / RULES_DIR
        rules_dir.mkdir()
        (rules_dir / RULES_FILENAME).write_text(content)

    def test_defaults(self):
        rules = RuleSet.load(self.project)
        self.assertEqual(rules, DEFAULT_RULES)
        self.assertIn(("react", "react-dom"), rules.coupled_pairs)
        self.assertEqual(rules.deprecated_packages, ("request", "gulp-util", "hoek"))
        self.assertEqual(rules.probe_command, ("npm", "ls", "--depth=0"))

    def test_load_extends_defaults(self):
        self._write_rules(
            "coupled_pairs:\n"
            "  - [vue, vue-router]\n"
            "  - [react, react-dom]\n"
            "deprecated_packages: [left-pad]\n"
            "probe_timeout: 5\n"
        )
        rules = RuleSet.load(self.project)
        self.assertEqual(rules.coupled_pairs[-1], ("vue", "vue-router"))
        self.assertEqual(rules.coupled_pairs.count(("react", "react-dom")), 1)
        self.assertIn("left-pad", rules.deprecated_packages)
        self.assertIn("request", rules.deprecated_packages)
        self.assertEqual(rules.probe_timeout, 5.0)

    def test_malformed_yaml_falls_back(self):
        self._write_rules("coupled_pairs: [unclosed\n")
        with self.assertLogs("dependency_therapist.rules", level="WARNING"):
            rules = RuleSet.load(self.project)
        self.assertEqual(rules, DEFAULT_RULES)

    def test_bad_shape_falls_back(self):
        self._write_rules("coupled_pairs:\n  - [only-one]\n")
        with self.assertLogs("dependency_therapist.rules", level="WARNING"):
            rules = RuleSet.load(self.project)
        self.assertEqual(rules, DEFAULT_RULES)

    def test_invalid_utf8_falls_back(self):
        rules_dir = self.project / RULES_DIR
        rules_dir.mkdir()
        (rules_dir / RULES_FILENAME).write_bytes(b"deprecated_packages: [\xff\xfe]\n")
        with self.assertLogs("dependency_therapist.rules", level="WARNING"):
            rules = RuleSet.load(self.project)
        self.assertEqual(rules, DEFAULT_RULES)

    def test_non_finite_timeout_falls_back(self):
        """.inf / .nan 타임아웃은 거부"""
        for value in (".inf", ".nan", "-1"):
            with self.subTest(value=value):
                self._write_rules(f"probe_timeout: {value}\n")
                with self.assertLogs("dependency_therapist.rules", level="WARNING"):
                    rules = RuleSet.load(self.project)
                self.assertEqual(rules, DEFAULT_RULES)
                (self.project / RULES_DIR / RULES_FILENAME).unlink()
                (self.project / RULES_DIR).rmdir()

    def test_save_then_load(self):
        rules = RuleSet.from_dict({"cycle_indicators": ["cycle", "circular"]})
        rules.save(self.project)
        self.assertEqual(RuleSet.load(self.project), rules)


class TestCycleProbe(unittest.TestCase):
    """순환 probe 테스트"""

    def setUp(self):
        self.probe = NpmCycleProbe(Path("."), timeout=3)

    def _completed(self, returncode: int, stderr: str = ""):
        return subprocess.CompletedProcess(
            args=["npm", "ls", "--depth=0"], returncode=returncode, stdout="", stderr=stderr
        )

    def test_cycle_detected(self):
        with mock.patch("dependency_therapist.probe.subprocess.run",
                        return_value=self._completed(1, "npm ERR! Circular dependency detected")) as run:
            self.assertTrue(self.probe.detect_cycle())
        self.assertEqual(run.call_args.kwargs["timeout"], 3)
        self.assertEqual(run.call_args.args[0], ["npm", "ls", "--depth=0"])

    def test_success_exit_is_not_cycle(self):
        with mock.patch("dependency_therapist.probe.subprocess.run",
                        return_value=self._completed(0, "circular")):
            self.assertFalse(self.probe.detect_cycle())

    def test_unrelated_failure(self):
        with mock.patch("dependency_therapist.probe.subprocess.run",
                        return_value=self._completed(1, "npm ERR! missing: react@18")):
            self.assertFalse(self.probe.detect_cycle())

    def test_missing_binary(self):
        with mock.patch("dependency_therapist.probe.subprocess.run",
                        side_effect=FileNotFoundError("npm")):
            self.assertFalse(self.probe.detect_cycle())

    def test_timeout(self):
        with mock.patch("dependency_therapist.probe.subprocess.run",
                        side_effect=subprocess.TimeoutExpired(["npm"], 3)):
            self.assertFalse(self.probe.detect_cycle())

    def test_invalid_utf8_stderr(self):
        """stderr가 UTF-8이 아니어도 실패하지 않음"""
        script = (
            "import sys; "
            "sys.stderr.buffer.write(b'npm ERR! circular \\xff\\xfe'); "
            "sys.exit(1)"
        )
        detector = NpmCycleProbe(Path("."), command=[sys.executable, "-c", script], timeout=30)
        self.assertTrue(detector.detect_cycle())

    def test_unexpected_run_error(self):
        with mock.patch("dependency_therapist.probe.subprocess.run",
                        side_effect=OverflowError("cannot convert float infinity to integer")):
            self.assertFalse(self.probe.detect_cycle())

    def test_probe_cycles(self):
        self.assertEqual(probe_cycles(NullCycleDetector()), [])
        self.assertEqual(probe_cycles(None), [])

        findings = probe_cycles(CyclingDetector())
        self.assertEqual(len(findings), 1)
        self.assertEqual(findings[0].category, FindingCategory.CYCLE)

    def test_from_rules(self):
        rules = RuleSet.from_dict({"probe_command": ["pnpm", "ls"], "probe_timeout": 7})
        probe = NpmCycleProbe.from_rules(Path("."), rules)
        self.assertEqual(probe.command, ["pnpm", "ls"])
        self.assertEqual(probe.timeout, 7.0)


class TestTemplates(unittest.TestCase):
    """템플릿 테스트"""

    def test_fill_in_order(self):
        self.assertEqual(fill_placeholders("%s loves %s", "a", "b"), "a loves b")

    def test_surplus_placeholders_reuse_last(self):
        self.assertEqual(fill_placeholders("%s, %s, %s", "a", "b"), "a, b, b")

    def test_no_placeholders(self):
        self.assertEqual(fill_placeholders("plain", "a"), "plain")

    def test_every_category_has_templates(self):
        for category in FindingCategory:
            self.assertTrue(THERAPY_SESSIONS[category], category)
            self.assertIn(category, RELATIONSHIP_ADVICE)
            self.assertIn(category, HEADLINES)


class TestReportComposer(unittest.TestCase):
    """리포트 작성기 테스트"""

    def test_breakthrough_count(self):
        self.assertEqual(breakthrough_count(0), 0)
        self.assertEqual(breakthrough_count(1), 1)
        self.assertEqual(breakthrough_count(2), 2)
        self.assertEqual(breakthrough_count(3), 3)
        self.assertEqual(breakthrough_count(10), 3)

    def test_maintenance_mode(self):
        report = ReportComposer(random.Random(1)).compose([], "empty", 0, 0)
        self.assertIn(MAINTENANCE, report.lines)
        self.assertNotIn(DIAGNOSIS, report.lines)
        self.assertNotIn(TREATMENT, report.lines)
        self.assertNotIn(BREAKTHROUGH_HEADER, report.lines)
        self.assertEqual(report.finding_count, 0)

    def test_header(self):
        report = ReportComposer(random.Random(1)).compose([], "patient-zero", 5, 2, 1)
        self.assertIn("Patient: patient-zero", report.lines)
        self.assertIn("Total dependencies: 5", report.lines)
        self.assertIn("Dependencies in denial (devDependencies): 2", report.lines)

    def test_breakthrough_lines(self):
        findings = all_categories_findings()
        for n in range(1, len(findings) + 1):
            report = ReportComposer(random.Random(n)).compose(findings[:n], "p", 1, 0)
            lines = [l for l in report.lines if l.startswith(BREAKTHROUGH_PREFIX)]
            self.assertEqual(len(lines), min(3, max(1, n)))
            self.assertEqual(len(set(lines)), len(lines))

    def test_no_placeholder_left(self):
        findings = all_categories_findings()
        for seed in range(50):
            report = ReportComposer(random.Random(seed)).compose(findings, "p", 5, 1, 2)
            for line in report.lines:
                self.assertNotIn("%s", line)

    def test_every_template_substituted(self):
        """모든 카테고리의 모든 템플릿"""
        composer = ReportComposer(random.Random(0))
        for finding in all_categories_findings():
            for template in THERAPY_SESSIONS[finding.category]:
                with mock.patch.object(composer.rng, "choice", return_value=template):
                    self.assertNotIn("%s", composer.intervention(finding))

    def test_seed_is_deterministic(self):
        findings = all_categories_findings()
        first = ReportComposer(random.Random(42)).compose(findings, "p", 5, 1, 2)
        second = ReportComposer(random.Random(42)).compose(findings, "p", 5, 1, 2)
        self.assertEqual(first.lines, second.lines)

    def test_stub_selector(self):
        report = ReportComposer(FirstChoiceRandom()).compose(
            [Finding(FindingCategory.PAIRED_COUPLING, "react", "react-dom")], "p", 2, 0
        )
        self.assertIn(
            '   💭 Therapist: "react and react-dom are enmeshed. They need to establish some healthy boundaries."',
            report.lines
        )
        self.assertIn(f"{BREAKTHROUGH_PREFIX}Webpack admitted it's not mad, just disappointed.", report.lines)

    def test_version_conflict_substitution(self):
        composer = ReportComposer(FirstChoiceRandom())
        finding = Finding(FindingCategory.VERSION_CONFLICT, "lodash", observed_versions=frozenset({"4", "3"}))
        self.assertEqual(
            composer.headline(finding),
            "🚩 TOXIC: lodash has multiple personalities (versions: 3, 4)"
        )
        self.assertEqual(
            composer.intervention(finding),
            "I'm sensing some unresolved tension here. Have you tried telling lodash and lodash to use I-messages?"
        )

    def test_versions_sorted_numerically(self):
        """'9'가 '10'보다 앞"""
        finding = Finding(FindingCategory.VERSION_CONFLICT, "lodash", observed_versions=frozenset({"10", "9"}))
        self.assertIn("(versions: 9, 10)", ReportComposer(FirstChoiceRandom()).headline(finding))
        self.assertEqual(finding.to_dict()["observed_versions"], ["9", "10"])

    def test_ghosting_substitution(self):
        composer = ReportComposer(FirstChoiceRandom())
        self.assertEqual(
            composer.intervention(Finding(FindingCategory.DEPRECATED, "request")),
            "request keeps leaving the community on read. Communication is key in any relationship."
        )

    def test_treatment_deduplicated(self):
        findings = [
            Finding(FindingCategory.DEPRECATED, "request"),
            Finding(FindingCategory.DEPRECATED, "hoek"),
            Finding(FindingCategory.PAIRED_COUPLING, "react", "react-dom"),
        ]
        report = ReportComposer(random.Random(3)).compose(findings, "p", 4, 0)
        advice = [l for l in report.lines if l.startswith("   📝 For ")]
        self.assertEqual(len(advice), 2)
        self.assertTrue(advice[0].startswith("   📝 For GHOSTING: Check if request"))
        self.assertIn("Maybe react doesn't need react-dom", advice[1])
        self.assertIn("   4. Use 'npm ls' to visualize your dependency tree", report.lines)
        self.assertEqual(report.categories, (FindingCategory.DEPRECATED, FindingCategory.PAIRED_COUPLING))


class TestSession(unittest.TestCase):
    """세션 테스트"""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.project = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def _run(self, data, detector=None):
        write_manifest(self.project, data)
        return run_session(self.project, seed=0, cycle_detector=detector or NullCycleDetector())

    def test_healthy_project(self):
        report = self._run({"dependencies": {"express": "^4.0.0"}, "devDependencies": {}})
        self.assertEqual(report.finding_count, 0)
        self.assertIn(MAINTENANCE, report.lines)
        self.assertNotIn(DIAGNOSIS, report.lines)

    def test_react_codependency(self):
        report = self._run({"dependencies": {"react": "^18.0.0", "react-dom": "^18.0.0"}})
        self.assertEqual(report.findings, (
            Finding(FindingCategory.PAIRED_COUPLING, "react", "react-dom"),
        ))
        advice = [l for l in report.lines if l.startswith("   📝 For CODEPENDENT:")]
        self.assertEqual(len(advice), 1)

    def test_deprecated_request(self):
        report = self._run({"dependencies": {"request": "^2.88.0"}})
        self.assertEqual(report.findings, (Finding(FindingCategory.DEPRECATED, "request"),))

    def test_cycle_appended_last(self):
        report = self._run({"dependencies": {"request": "^2.88.0"}}, detector=CyclingDetector())
        self.assertEqual(
            [f.category for f in report.findings],
            [FindingCategory.DEPRECATED, FindingCategory.CYCLE]
        )

    def test_project_rules_used(self):
        rules_dir = self.project / RULES_DIR
        rules_dir.mkdir()
        (rules_dir / RULES_FILENAME).write_text("deprecated_packages: [left-pad]\n")
        report = self._run({"dependencies": {"left-pad": "^1.3.0"}})
        self.assertEqual(report.findings, (Finding(FindingCategory.DEPRECATED, "left-pad"),))

    def test_default_cycle_detector(self):
        therapist = DependencyTherapist(self.project)
        self.assertIsInstance(therapist.cycle_detector, NpmCycleProbe)
        self.assertEqual(therapist.cycle_detector.project, self.project)

    def test_missing_manifest(self):
        with self.assertRaises(ManifestUnreadable):
            run_session(self.project, cycle_detector=NullCycleDetector())


class TestReporters(unittest.TestCase):
    """리포터 테스트"""

    def setUp(self):
        self.report = ReportComposer(random.Random(5)).compose(
            [Finding(FindingCategory.DEPRECATED, "request")], "p", 1, 0
        )

    def test_console(self):
        out = io.StringIO()
        ConsoleReporter(out).report(self.report)
        self.assertEqual(out.getvalue(), self.report.render() + "\n")

    def test_json(self):
        out = io.StringIO()
        JsonReporter(out).report(self.report)
        data = json.loads(out.getvalue())
        self.assertEqual(data["finding_count"], 1)
        self.assertEqual(data["categories"], ["ghosting"])
        self.assertEqual(data["findings"][0]["subject"], "request")


class TestCli(unittest.TestCase):
    """CLI 테스트"""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.project = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def _main(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_version(self):
        with mock.patch("dependency_therapist.cli.run_session") as session:
            for flag in ("--version", "-v"):
                code, out, _ = self._main(flag)
                self.assertEqual(code, 0)
                self.assertIn("Dependency Therapist v1.0.0", out)
        session.assert_not_called()

    def test_help(self):
        out = io.StringIO()
        with mock.patch("dependency_therapist.cli.run_session") as session:
            for flag in ("--help", "-h"):
                with redirect_stdout(out), self.assertRaises(SystemExit) as ctx:
                    main([flag])
                self.assertEqual(ctx.exception.code, 0)
        session.assert_not_called()
        self.assertIn("Emotional support for your package.json", out.getvalue())

    def test_missing_manifest(self):
        code, out, err = self._main("--manifest", str(self.project), "--no-probe")
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("emotionally unavailable", err)

    def test_healthy_session(self):
        write_manifest(self.project, {"dependencies": {"express": "^4.0.0"}})
        code, out, _ = self._main("--manifest", str(self.project), "--no-probe", "--seed", "1")
        self.assertEqual(code, 0)
        self.assertIn("MAINTENANCE MODE", out)
        self.assertIn("Total issues diagnosed: 0", out)

    def test_json_format(self):
        write_manifest(self.project, {"dependencies": {"request": "^2.88.0"}})
        code, out, _ = self._main("--manifest", str(self.project), "--no-probe", "--format", "json")
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out)["finding_count"], 1)

    def test_unexpected_error(self):
        with mock.patch("dependency_therapist.cli.run_session", side_effect=RuntimeError("boom")):
            code, out, err = self._main("--no-probe")
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("Therapy session failed", err)
        self.assertIn("boom", err)

    def test_unencodable_stdout(self):
        """stdout이 emoji를 인코딩하지 못해도 traceback 없이 종료 코드 1"""
        write_manifest(self.project, {"dependencies": {"request": "^2.88.0"}})
        stdout = io.TextIOWrapper(io.BytesIO(), encoding="ascii")
        stderr = io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            code = main(["--manifest", str(self.project), "--no-probe"])
        self.assertEqual(code, 1)
        self.assertIn("Therapy session failed", stderr.getvalue())


def run_tests():
    """테스트 실행"""
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()

    suite.addTests(loader.loadTestsFromTestCase(TestMajorToken))
    suite.addTests(loader.loadTestsFromTestCase(TestManifestLoader))
    suite.addTests(loader.loadTestsFromTestCase(TestConflictDetector))
    suite.addTests(loader.loadTestsFromTestCase(TestRuleSet))
    suite.addTests(loader.loadTestsFromTestCase(TestCycleProbe))
    suite.addTests(loader.loadTestsFromTestCase(TestTemplates))
    suite.addTests(loader.loadTestsFromTestCase(TestReportComposer))
    suite.addTests(loader.loadTestsFromTestCase(TestSession))
    suite.addTests(loader.loadTestsFromTestCase(TestReporters))
    suite.addTests(loader.loadTestsFromTestCase(TestCli))

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    return 0 if result.wasSuccessful() else 1


if __name__ == '__main__':
    raise SystemExit(run_tests())
