"""
Tests for reading record files (JSON array, single object, JSON Lines).
"""
import json

import pytest

from argus.services import RecordFileError, load_records


def _dump(record):
    return record.model_dump(mode="json")


class TestLoadRecords:
    """Accepted layouts."""

    def test_json_array(self, tmp_path, make_record):
        path = tmp_path / "records.json"
        path.write_text(json.dumps([
            _dump(make_record(tender_id="A-1")),
            _dump(make_record(tender_id="A-2")),
        ]))

        records = load_records(path)

        assert [r.tender_id for r in records] == ["A-1", "A-2"]

    def test_json_lines_skip_blank_lines(self, tmp_path, make_record):
        path = tmp_path / "records.jsonl"
        path.write_text(
            json.dumps(_dump(make_record(tender_id="L-1"))) + "\n\n"
            + json.dumps(_dump(make_record(tender_id="L-2"))) + "\n"
        )

        assert [r.tender_id for r in load_records(path)] == ["L-1", "L-2"]

    def test_pretty_printed_single_object(self, tmp_path, make_record):
        path = tmp_path / "one.json"
        path.write_text(json.dumps(_dump(make_record(tender_id="S-1")), indent=2))

        records = load_records(str(path))

        assert len(records) == 1
        assert records[0].tender_id == "S-1"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.jsonl"
        path.write_text("")
        assert load_records(path) == []


class TestLoadRecordsErrors:
    """Failures name the file and the offending line or record."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(RecordFileError, match="Cannot read"):
            load_records(tmp_path / "absent.json")

    def test_bad_json_line_reports_line_number(self, tmp_path, make_record):
        path = tmp_path / "bad.jsonl"
        path.write_text(json.dumps(_dump(make_record())) + "\n{not json\n")

        with pytest.raises(RecordFileError, match=r"bad\.jsonl:2: invalid JSON"):
            load_records(path)

    def test_invalid_record_reports_index(self, tmp_path, make_record):
        bad = _dump(make_record(tender_id="B-2"))
        bad["estimated_budget"] = "lots"
        path = tmp_path / "records.json"
        path.write_text(json.dumps([_dump(make_record(tender_id="B-1")), bad]))

        with pytest.raises(RecordFileError, match="record #1 is invalid"):
            load_records(path)

    def test_is_a_value_error(self):
        assert issubclass(RecordFileError, ValueError)
