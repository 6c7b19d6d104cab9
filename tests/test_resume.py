"""Tests for the resume store and the rendered prompt context."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest

from resume_assistant.config import RESUME_DATA_PATH
from resume_assistant.services.resume import (
    DataLoadError,
    ResumeStore,
    render_resume_context,
)


@pytest.fixture
def resume():
    return ResumeStore(RESUME_DATA_PATH).load()


@pytest.fixture
def context(resume):
    return render_resume_context(resume)


def _minimal_record(**overrides) -> dict:
    record = {
        "profile": {
            "full_name": "Jamie Rivera",
            "current_titles": ["Data Engineer"],
            "summary": "Builds pipelines.",
        },
        "skills": {"primary": ["Python"]},
    }
    record.update(overrides)
    return record


class TestResumeStore:
    def test_loads_bundled_resume(self, resume):
        assert resume.profile.full_name == "Alex Morgan"
        assert len(resume.work_history) == 2

    def test_load_is_cached(self, tmp_path):
        path = tmp_path / "resume.json"
        path.write_text(json.dumps(_minimal_record()), encoding="utf-8")
        store = ResumeStore(path)

        first = store.load()
        path.unlink()
        second = store.load()

        assert first is second

    def test_missing_file_raises_data_load_error(self, tmp_path):
        store = ResumeStore(tmp_path / "missing.json")
        with pytest.raises(DataLoadError, match="could not be read"):
            store.load()

    def test_invalid_json_raises_data_load_error(self, tmp_path):
        path = tmp_path / "resume.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(DataLoadError, match="malformed"):
            ResumeStore(path).load()

    def test_schema_mismatch_raises_data_load_error(self, tmp_path):
        path = tmp_path / "resume.json"
        path.write_text(json.dumps({"profile": {"full_name": "No Skills"}}), encoding="utf-8")
        with pytest.raises(DataLoadError, match="malformed"):
            ResumeStore(path).load()

    def test_failed_load_is_remembered(self, tmp_path):
        path = tmp_path / "resume.json"
        store = ResumeStore(path)
        with pytest.raises(DataLoadError):
            store.load()

        # A file appearing later does not revive the store.
        path.write_text(json.dumps(_minimal_record()), encoding="utf-8")
        with patch.object(store, "_read", wraps=store._read) as mock_read:
            with pytest.raises(DataLoadError, match="could not be read"):
                store.load()
        mock_read.assert_not_called()

    @pytest.mark.parametrize("full_name", ["", "   "])
    def test_blank_full_name_raises_data_load_error(self, tmp_path, full_name):
        record = _minimal_record()
        record["profile"]["full_name"] = full_name
        path = tmp_path / "resume.json"
        path.write_text(json.dumps(record), encoding="utf-8")
        with pytest.raises(DataLoadError, match="malformed"):
            ResumeStore(path).load()

    def test_full_name_is_stripped(self, tmp_path):
        record = _minimal_record()
        record["profile"]["full_name"] = "  Jamie Rivera "
        path = tmp_path / "resume.json"
        path.write_text(json.dumps(record), encoding="utf-8")
        assert ResumeStore(path).load().profile.full_name == "Jamie Rivera"

    def test_records_are_immutable(self, resume):
        with pytest.raises(Exception):
            resume.profile.full_name = "Someone Else"


class TestRenderResumeContext:
    def test_header_uses_upper_case_name(self, context):
        assert context.startswith("COMPLETE RESUME DATA FOR ALEX MORGAN:")

    def test_sections_in_fixed_order(self, context):
        headings = [
            "PROFILE:",
            "SKILLS:",
            "WORK EXPERIENCE:",
            "PROJECTS:",
            "EDUCATION:",
            "CERTIFICATIONS:",
            "AWARDS & RECOGNITION:",
            "MOST PROUD OF:",
        ]
        positions = [context.index(heading) for heading in headings]
        assert positions == sorted(positions)

    def test_profile_and_contact(self, context):
        assert "Name: Alex Morgan" in context
        assert "Current Titles: Senior Software Engineer, Solutions Architect" in context
        assert "Location: Austin, Texas, USA" in context
        assert "Email: alex.morgan@example.com" in context
        assert "GitHub: https://github.com/alex-morgan-example" in context
        assert "Phone:" not in context

    def test_skills(self, context):
        assert "Primary Skills: TypeScript, React, React Native, Node.js, Python" in context
        assert "Tools & Platforms: AWS, Docker, Kubernetes, GitHub Actions, Terraform" in context

    def test_flat_work_entry_without_end_date_is_present(self, context):
        assert "1. Fieldline Systems" in context
        assert "   Role: Senior Software Engineer" in context
        assert "   Duration: 2021-03 - Present" in context

    def test_multi_role_work_entry_lists_every_role(self, context):
        assert "2. Brightwave Consulting" in context
        assert "   Role: Technology Analyst" in context
        assert "   Duration: 2020-01 - 2021-02" in context
        assert "   Responsibilities: Owned payments integration, Mentored junior developers" in context

    def test_project_contributions_only_when_present(self, context):
        assert "   Contributions: Designed the offline-first data layer" in context
        assert context.count("Contributions:") == 1

    def test_education(self, context):
        assert "1. Bachelor of Science in Computer Science" in context
        assert "   Duration: 2012 - 2016" in context

    def test_optional_sections_omitted_when_empty(self, tmp_path):
        path = tmp_path / "resume.json"
        path.write_text(json.dumps(_minimal_record()), encoding="utf-8")
        context = render_resume_context(ResumeStore(path).load())

        assert "CERTIFICATIONS:" not in context
        assert "AWARDS & RECOGNITION:" not in context
        assert "MOST PROUD OF:" not in context
        assert "Contact Information:" not in context

    def test_context_is_stripped(self, context):
        assert context == context.strip()
