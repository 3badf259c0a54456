"""Tests for reading datasets and saved assessments from disk."""

import pytest

from hotel_standards.loader import (
    DatasetLoadError,
    load_assessment_record,
    load_classification_dataset,
    load_compliance_dataset,
    load_json_document,
)
from hotel_standards.normalization import DatasetError, UnsupportedFormatError


class TestLoadJsonDocument:
    """Tests for raw JSON reading."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(DatasetLoadError, match="File not found"):
            load_json_document(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(DatasetLoadError, match="Invalid JSON"):
            load_json_document(path)

    def test_load_error_is_dataset_error(self):
        assert issubclass(DatasetLoadError, DatasetError)


class TestLoadDatasets:
    """Tests for dataset file loading."""

    def test_load_compliance(self, compliance_file):
        dataset = load_compliance_dataset(compliance_file)
        assert [r.id for r in dataset.iter_requirements()] == ["C1", "C2", "C3"]

    def test_load_classification(self, classification_file):
        dataset = load_classification_dataset(str(classification_file))
        assert dataset.get_star_level(3).mandatory_ids == ["1.1", "2.1"]

    def test_load_exported_classification(self, exported_classification_file):
        dataset = load_classification_dataset(exported_classification_file)
        assert "specialized" in dataset.accommodation_types

    def test_unsupported_document(self, tmp_path):
        path = tmp_path / "other.json"
        path.write_text('{"rows": []}', encoding="utf-8")
        with pytest.raises(UnsupportedFormatError):
            load_classification_dataset(path)


class TestLoadAssessmentRecord:
    """Tests for saved assessment loading."""

    def test_single_record(self, assessment_file):
        record = load_assessment_record(assessment_file)
        assert record.id == "assessment_abc_123"
        assert record.star == 3

    def test_list_uses_first_record(self, assessments_list_file):
        assert load_assessment_record(assessments_list_file).id == "assessment_new"

    def test_list_by_id(self, assessments_list_file):
        record = load_assessment_record(assessments_list_file, record_id="assessment_old")
        assert record.star == 2

    def test_list_unknown_id(self, assessments_list_file):
        with pytest.raises(DatasetLoadError, match="assessment_missing"):
            load_assessment_record(assessments_list_file, record_id="assessment_missing")

    def test_empty_list(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(DatasetLoadError):
            load_assessment_record(path)

    def test_non_object(self, tmp_path):
        path = tmp_path / "scalar.json"
        path.write_text("42", encoding="utf-8")
        with pytest.raises(DatasetLoadError):
            load_assessment_record(path)

    def test_default_types_applied(self, tmp_path):
        path = tmp_path / "bare.json"
        path.write_text('{"id": "a1"}', encoding="utf-8")
        record = load_assessment_record(
            path,
            default_accommodation_type="specialized",
            default_facility_type="hostels",
        )
        assert record.accommodation_type == "specialized"
        assert record.compliance_facility_type == "hostels"
