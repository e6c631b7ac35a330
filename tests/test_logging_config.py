"""Tests for log output produced by configure_logging.

Each test configures the root logger the way the CLI does, runs real
matching code and inspects the lines that land on stderr.
"""

import json
import logging
import math

import pytest

from app.config.models import AppConfig
from app.domain.models import PropertyCategory, PropertyRecord, ScoreBreakdown
from app.logging.config import configure_logging
from app.logging.context import log_context
from app.matching import MatchingService
from app.matching.reasons import ReasonGenerator, ReasonTemplateError
from app.pipeline import MatchPipeline
from tests.helpers import (
    InMemoryCatalogProvider,
    InMemoryProfileProvider,
    make_property,
    make_requirement,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Put back the root handlers configure_logging replaces."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def json_lines(err):
    return [json.loads(line) for line in err.splitlines() if line.strip()]


def by_event(entries, name):
    return [e for e in entries if e.get("event") == name]


def run_pipeline(raw_profile, raw_listings):
    pipeline = MatchPipeline(
        AppConfig(),
        InMemoryProfileProvider({"brand-chai": raw_profile}),
        InMemoryCatalogProvider(raw_listings),
    )
    return pipeline.run("brand-chai")


class TestJSONOutput:
    """Tests for JSON lines emitted during matching."""

    def test_configured_line_first(self, capsys):
        configure_logging(level="debug", format_type="json", environment="test")

        entries = json_lines(capsys.readouterr().err)
        assert entries[0]["event"] == "logging.configured"
        assert entries[0]["log_level"] == "DEBUG"
        assert entries[0]["log_format"] == "json"

    def test_skipped_record_line(self, capsys):
        """Test the warning written when a property cannot be scored."""
        configure_logging(format_type="json", environment="test")
        broken = PropertyRecord.model_construct(
            id="prop-nan",
            city="Koramangala",
            size=750,
            monthly_rent=math.nan,
            category=PropertyCategory.RESTAURANT,
            amenities=frozenset(),
            available=True,
            title=None,
            address=None,
        )

        with log_context(run_id="run-9", brand_id="brand-1"):
            MatchingService().evaluate(make_requirement(), [broken, make_property()])

        line = by_event(json_lines(capsys.readouterr().err), "matching.record.skipped")[0]
        assert line["level"] == "WARNING"
        assert line["logger"] == "app.matching.engine"
        assert line["record_id"] == "prop-nan"
        assert line["component"] == "matching"
        assert line["run_id"] == "run-9"
        assert line["brand_id"] == "brand-1"
        assert line["service"] == "brand-fit-index"
        assert line["environment"] == "test"
        assert line["timestamp"].endswith("Z")

    def test_pipeline_lines_share_run_fields(self, capsys, raw_profile, raw_listings):
        configure_logging(format_type="json")

        result = run_pipeline(raw_profile, raw_listings)

        entries = [e for e in json_lines(capsys.readouterr().err) if e["logger"].startswith("app.")]
        run_entries = [e for e in entries if e.get("event") != "logging.configured"]
        assert run_entries[0]["event"] == "pipeline.run.started"
        assert run_entries[-1]["event"] == "pipeline.run.completed"
        assert {e["run_id"] for e in run_entries} == {result.run_id}
        assert {e["brand_id"] for e in run_entries} == {"brand-chai"}

    def test_completed_line_counts(self, capsys, raw_profile, raw_listings):
        configure_logging(format_type="json")

        result = run_pipeline(raw_profile, raw_listings)

        completed = by_event(json_lines(capsys.readouterr().err), "pipeline.run.completed")[0]
        assert completed["matched"] == result.matched
        assert completed["total_candidates"] == result.total_candidates
        assert completed["skipped_invalid"] == len(result.skipped_invalid)
        assert isinstance(completed["duration_ms"], int)

    def test_stdout_untouched(self, capsys, raw_profile, raw_listings):
        configure_logging(format_type="json")
        run_pipeline(raw_profile, raw_listings)

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err

    def test_render_failure_carries_traceback(self, capsys):
        configure_logging(format_type="json")
        generator = ReasonGenerator(templates={"location/strong": "{{ floor_plan }}"})

        with pytest.raises(ReasonTemplateError):
            generator.generate(
                make_requirement(),
                make_property(),
                ScoreBreakdown(location=100, budget=0, size=0, category=0),
            )

        line = by_event(json_lines(capsys.readouterr().err), "matching.reason.render_failed")[0]
        assert line["template"] == "location/strong"
        assert "UndefinedError" in line["exc_info"]

    def test_amenity_set_serialized_sorted(self, capsys):
        configure_logging(format_type="json")
        logging.getLogger("app.tests").info(
            "Amenities", extra={"event": "t.amenities", "amenities": frozenset({"lift", "ac", "parking"})}
        )

        line = by_event(json_lines(capsys.readouterr().err), "t.amenities")[0]
        assert line["amenities"] == ["ac", "lift", "parking"]


class TestKeyValueOutput:
    """Tests for the developer console format."""

    def test_completed_line(self, capsys, raw_profile, raw_listings):
        configure_logging(level="INFO", format_type="key-value", environment="test")

        result = run_pipeline(raw_profile, raw_listings)

        lines = [l for l in capsys.readouterr().err.splitlines() if "event=pipeline.run.completed" in l]
        assert len(lines) == 1
        line = lines[0]
        assert "[INFO] app.pipeline.runner: Pipeline run completed" in line
        assert "brand_id=brand-chai" in line
        assert f"run_id={result.run_id}" in line
        assert f"matched={result.matched}" in line
        assert "service=" not in line
        assert "environment=" not in line

    def test_values_quoted_and_rendered(self, capsys):
        configure_logging(format_type="key-value")
        logging.getLogger("app.tests").info(
            "Values",
            extra={"event": "t.values", "city": "HSR Layout", "available": False, "industry": None},
        )

        line = capsys.readouterr().err.splitlines()[-1]
        assert 'city="HSR Layout"' in line
        assert "available=false" in line
        assert "industry=null" in line


class TestConfigureLogging:
    """Tests for configure_logging setup and validation."""

    def test_level_filters_run_lines(self, capsys, raw_profile, raw_listings):
        """Test that WARNING hides run progress but keeps skipped listings."""
        configure_logging(level="WARNING", format_type="json")

        run_pipeline(raw_profile, raw_listings)

        entries = json_lines(capsys.readouterr().err)
        assert by_event(entries, "pipeline.run.started") == []
        assert by_event(entries, "normalization.property.skipped")
        assert all(e["level"] in ("WARNING", "ERROR") for e in entries)

    def test_reconfigure_replaces_handler(self):
        configure_logging(format_type="json")
        configure_logging(format_type="key-value")

        assert len(logging.getLogger().handlers) == 1

    @pytest.mark.parametrize(
        "kwargs,message",
        [
            ({"level": "VERBOSE"}, "Invalid log level"),
            ({"format_type": "xml"}, "Invalid log format"),
        ],
    )
    def test_invalid_arguments(self, kwargs, message):
        with pytest.raises(ValueError, match=message):
            configure_logging(**kwargs)
