"""
Keeps docs/test_scenarios_business_summary.md in step with the billing
scenarios in tests/test_integration_scenarios.py.
"""

import importlib.util
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent


def load_sync_script():
    spec = importlib.util.spec_from_file_location(
        "validate_test_docs_sync", PROJECT_ROOT / "scripts" / "validate_test_docs_sync.py"
    )
    module = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = module
    spec.loader.exec_module(module)
    return module


@pytest.fixture(scope="module")
def sync():
    return load_sync_script()


@pytest.fixture(scope="module")
def report(sync):
    return sync.compare()


class TestDocumentationSync:
    """Every billing scenario is explained for business readers."""

    def test_files_exist(self, sync):
        assert sync.SCENARIO_FILE.exists()
        assert sync.SUMMARY_FILE.exists()

    def test_scenarios_found(self, report):
        assert "TestSingleFacilityBaseline" in report.scenarios
        assert report.scenarios["TestSingleFacilityBaseline"]

    def test_no_undocumented_scenarios(self, report):
        missing = report.missing_classes | report.missing_methods
        assert not missing, (
            f"Scenarios not documented in business summary: {missing}\n"
            f"Please update docs/test_scenarios_business_summary.md"
        )

    def test_no_stale_documentation(self, report):
        stale = report.stale_classes | report.stale_methods
        assert not stale, (
            f"Documented scenarios no longer exist: {stale}\n"
            f"Please update docs/test_scenarios_business_summary.md"
        )

    def test_detects_undocumented_method(self, sync, tmp_path):
        test_file = tmp_path / "test_scenarios.py"
        test_file.write_text("class TestA:\n    def test_one(self):\n        pass\n")
        doc_file = tmp_path / "summary.md"
        doc_file.write_text("**Test Class**: `TestA`\n")

        result = sync.compare(test_file, doc_file)

        assert result.missing_methods == {"test_one"}
        assert not result.in_sync
