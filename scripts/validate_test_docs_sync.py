#!/usr/bin/env python3
"""
Validate that docs/test_scenarios_business_summary.md documents every billing
scenario in tests/test_integration_scenarios.py, and nothing else.

Errors: a scenario class or method is missing from the summary.
Warnings: the summary mentions a scenario that no longer exists.

Run: python scripts/validate_test_docs_sync.py
"""

import re
import sys
from dataclasses import dataclass, field
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SCENARIO_FILE = PROJECT_ROOT / 'tests' / 'test_integration_scenarios.py'
SUMMARY_FILE = PROJECT_ROOT / 'docs' / 'test_scenarios_business_summary.md'

CLASS_PATTERN = re.compile(r'^class (Test\w+)')
METHOD_PATTERN = re.compile(r'^\s+def (test_\w+)')
DOC_CLASS_PATTERN = re.compile(r'\*\*Test Class\*\*:\s*`(Test\w+)`')
DOC_METHOD_PATTERN = re.compile(r'\*\*Test Method\*\*:\s*`(test_\w+)`')


@dataclass
class SyncReport:
    """Differences between the scenario tests and their business summary."""

    scenarios: dict[str, list[str]] = field(default_factory=dict)
    missing_classes: set[str] = field(default_factory=set)
    missing_methods: set[str] = field(default_factory=set)
    stale_classes: set[str] = field(default_factory=set)
    stale_methods: set[str] = field(default_factory=set)

    @property
    def in_sync(self) -> bool:
        return not (self.missing_classes or self.missing_methods or self.stale_classes or self.stale_methods)


def collect_scenarios(test_file: Path) -> dict[str, list[str]]:
    """Map each scenario class to its test methods, in file order."""
    scenarios: dict[str, list[str]] = {}
    current = None
    for line in test_file.read_text().splitlines():
        class_match = CLASS_PATTERN.match(line)
        if class_match:
            current = class_match.group(1)
            scenarios[current] = []
        elif current:
            method_match = METHOD_PATTERN.match(line)
            if method_match:
                scenarios[current].append(method_match.group(1))
    return scenarios


def compare(test_file: Path = SCENARIO_FILE, doc_file: Path = SUMMARY_FILE) -> SyncReport:
    scenarios = collect_scenarios(test_file)
    summary = doc_file.read_text()
    doc_classes = set(DOC_CLASS_PATTERN.findall(summary))
    doc_methods = set(DOC_METHOD_PATTERN.findall(summary))

    classes = set(scenarios)
    methods = {m for ms in scenarios.values() for m in ms}
    return SyncReport(
        scenarios=scenarios,
        missing_classes=classes - doc_classes,
        missing_methods=methods - doc_methods,
        stale_classes=doc_classes - classes,
        stale_methods=doc_methods - methods,
    )


def main() -> int:
    for path in (SCENARIO_FILE, SUMMARY_FILE):
        if not path.exists():
            print(f"File not found: {path}")
            return 1

    report = compare()

    print(f"Scenario classes: {len(report.scenarios)}")
    print(f"Scenario methods: {sum(len(m) for m in report.scenarios.values())}")

    for name in sorted(report.missing_classes | report.missing_methods):
        print(f"  ERROR   undocumented scenario: {name}")
    for name in sorted(report.stale_classes | report.stale_methods):
        print(f"  WARNING documented scenario no longer exists: {name}")

    if report.in_sync:
        print("Business summary is in sync.")

    return 1 if report.missing_classes or report.missing_methods else 0


if __name__ == '__main__':
    sys.exit(main())
