#!/usr/bin/env python3
"""
dependency_therapist/cli.py
===========================
Dependency Therapist CLI

Usage:
    dependency-therapist
    dependency-therapist --manifest ./frontend/package.json --seed 42
    dependency-therapist --format json --no-probe
    python -m dependency_therapist --help
"""

import argparse
import logging
import sys

from . import __version__
from .models import ManifestUnreadable, UnexpectedRuntimeError
from .probe import NullCycleDetector
from .reporters import REPORTERS
from .therapist import run_session


logger = logging.getLogger(__name__)

DESCRIPTION = "Dependency Therapist - Emotional support for your package.json"

EPILOG = """\
No arguments needed. Just run it in your project directory.
(We'll find the emotional baggage ourselves.)
"""

VERSION_TAGLINE = "(Because semver is just a suggestion anyway)"


def print_version():
    print(f"Dependency Therapist v{__version__}")
    print(VERSION_TAGLINE)


def print_manifest_error(error: ManifestUnreadable):
    print(f"\nERROR: Couldn't read {error.path.name}. Are you sure this is a Node.js project? "
          f"Or are you just emotionally unavailable?", file=sys.stderr)
    print(f"   ({error.reason})\n", file=sys.stderr)


def print_session_failure(error: UnexpectedRuntimeError):
    print("\n❌ Therapy session failed:", file=sys.stderr)
    print(f"   {error}", file=sys.stderr)
    print("\nSometimes, even therapists need therapy. Try again?\n", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='dependency-therapist',
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--version', '-v', action='store_true', help='버전 출력')
    parser.add_argument('--manifest', '-m', default=None,
                        help='package.json 또는 프로젝트 디렉토리 (기본: ./package.json)')
    parser.add_argument('--seed', type=int, default=None,
                        help='난수 시드 (같은 시드 → 같은 세션 기록)')
    parser.add_argument('--no-probe', action='store_true',
                        help="'npm ls' 순환 probe 생략")
    parser.add_argument('--format', '-f', choices=sorted(REPORTERS), default='console',
                        help='출력 형식')
    parser.add_argument('--debug', action='store_true', help='디버그 로그 (stderr)')
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print_version()
        return 0

    level = logging.DEBUG if args.debug else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", stream=sys.stderr)

    cycle_detector = NullCycleDetector() if args.no_probe else None

    try:
        report = run_session(
            project_path=args.manifest or ".",
            seed=args.seed,
            cycle_detector=cycle_detector,
        )
        REPORTERS[args.format]().report(report)
    except ManifestUnreadable as e:
        print_manifest_error(e)
        return 1
    except Exception as e:
        logger.debug("Unhandled error during session", exc_info=True)
        print_session_failure(UnexpectedRuntimeError(e))
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
