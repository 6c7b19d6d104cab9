"""Resume data store and prompt-context rendering.

The resume is a static JSON record (``data/resume.json``) that is read once
per process, validated with pydantic and then cached for the lifetime of
the process.  There is no expiry and no invalidation: the record is
write-once, read-only afterwards, so it is safe to share between
concurrent requests without a lock on the read path.

``get_resume_context()`` flattens the record into labelled sections that
are appended to the career system prompt.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from resume_assistant.config import RESUME_DATA_PATH

logger = logging.getLogger(__name__)


class DataLoadError(Exception):
    """Raised when the resume record is missing or cannot be parsed."""


# ── Record schema ────────────────────────────────────────────────────


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Location(_Frozen):
    city: str
    state: str
    country: str
    postal_code: str | None = None
    area: str | None = None


class ContactLinks(_Frozen):
    linkedin: str | None = None
    github: str | None = None
    website: str | None = None


class Contact(_Frozen):
    phone: str | None = None
    email: str | None = None
    links: ContactLinks | None = None


class Profile(_Frozen):
    full_name: str
    current_titles: list[str]
    summary: str
    location: Location | None = None
    contact: Contact | None = None

    @field_validator("full_name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        # The persona prompts address the visitor by the first word of this name.
        value = value.strip()
        if not value:
            raise ValueError("full_name must not be blank")
        return value


class Skills(_Frozen):
    primary: list[str] = []
    secondary: list[str] = []
    domains: list[str] = []
    tools_platforms: list[str] = []


class CompanyRole(_Frozen):
    """One role inside a company entry that lists several positions."""

    title: str
    location: str
    start_date: str
    end_date: str
    responsibilities: list[str] = []


class WorkEntry(_Frozen):
    """A company entry.

    Either a flat entry (``role``/``highlights``/``tech_stack``) or a
    multi-role entry with a ``roles`` list.
    """

    company: str
    role: str | None = None
    location: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    employment_type: str | None = None
    highlights: list[str] | None = None
    tech_stack: list[str] | None = None
    roles: list[CompanyRole] | None = None


class Project(_Frozen):
    name: str
    organization: str
    domain: str
    type: str
    tech_stack: list[str] = []
    features: list[str] = []
    contributions: list[str] | None = None
    location: str
    period: str


class Education(_Frozen):
    degree: str
    discipline: str
    institution: str
    location: str
    start_year: int
    end_year: int


class ResumeProfile(_Frozen):
    """The full structured resume record."""

    profile: Profile
    skills: Skills
    work_history: list[WorkEntry] = []
    projects: list[Project] = []
    education: list[Education] = []
    certifications: list[str] = []
    awards_recognition: list[str] = []
    most_proud_of: list[str] = []


# ── Store ────────────────────────────────────────────────────────────


class ResumeStore:
    """Loads the resume record on first access and caches the outcome forever."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or RESUME_DATA_PATH
        self._profile: ResumeProfile | None = None
        self._error: DataLoadError | None = None

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> ResumeProfile:
        """Return the cached record, reading it from disk on first call.

        Raises:
            DataLoadError: if the file is missing, unreadable or does not
                match the resume schema.  The failure is remembered: later
                calls raise again without touching the file, until the
                process restarts.
        """
        if self._error is not None:
            raise DataLoadError(str(self._error)) from self._error
        if self._profile is None:
            try:
                self._profile = self._read()
            except DataLoadError as exc:
                self._error = exc
                raise
            logger.info("Loaded resume for %s from %s", self._profile.profile.full_name, self._path)
        return self._profile

    def _read(self) -> ResumeProfile:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("Resume data not readable at %s: %s", self._path, exc)
            raise DataLoadError(f"Resume data could not be read from {self._path}") from exc

        try:
            return ResumeProfile.model_validate_json(raw)
        except ValidationError as exc:
            logger.error("Resume data at %s is malformed: %s", self._path, exc)
            raise DataLoadError(f"Resume data at {self._path} is malformed") from exc


# ── Context rendering ────────────────────────────────────────────────


def _join(items: list[str] | None) -> str:
    return ", ".join(items or [])


def render_resume_context(resume: ResumeProfile) -> str:
    """Flatten *resume* into the text block injected into the system prompt.

    Sections are always emitted in the same order: profile, skills, work
    experience, projects, education, then the optional certification,
    award and most-proud-of lists.
    """
    profile = resume.profile
    lines = [f"COMPLETE RESUME DATA FOR {profile.full_name.upper()}:", ""]

    lines.append("PROFILE:")
    lines.append(f"Name: {profile.full_name}")
    lines.append(f"Current Titles: {_join(profile.current_titles)}")
    lines.append(f"Summary: {profile.summary}")
    if profile.location:
        loc = profile.location
        lines.append(f"Location: {loc.city}, {loc.state}, {loc.country}")
    if profile.contact:
        contact = profile.contact
        lines.append("Contact Information:")
        if contact.phone:
            lines.append(f"Phone: {contact.phone}")
        if contact.email:
            lines.append(f"Email: {contact.email}")
        if contact.links:
            if contact.links.linkedin:
                lines.append(f"LinkedIn: {contact.links.linkedin}")
            if contact.links.github:
                lines.append(f"GitHub: {contact.links.github}")
            if contact.links.website:
                lines.append(f"Website: {contact.links.website}")
    lines.append("")

    skills = resume.skills
    lines.append("SKILLS:")
    lines.append(f"Primary Skills: {_join(skills.primary)}")
    lines.append(f"Secondary Skills: {_join(skills.secondary)}")
    lines.append(f"Domains: {_join(skills.domains)}")
    lines.append(f"Tools & Platforms: {_join(skills.tools_platforms)}")
    lines.append("")

    lines.append("WORK EXPERIENCE:")
    for index, entry in enumerate(resume.work_history, start=1):
        lines.append(f"{index}. {entry.company}")
        if entry.roles:
            for role in entry.roles:
                lines.append(f"   Role: {role.title}")
                lines.append(f"   Duration: {role.start_date} - {role.end_date}")
                lines.append(f"   Location: {role.location}")
                lines.append(f"   Responsibilities: {_join(role.responsibilities)}")
        else:
            lines.append(f"   Role: {entry.role or 'N/A'}")
            lines.append(f"   Duration: {entry.start_date or 'N/A'} - {entry.end_date or 'Present'}")
            if entry.location:
                lines.append(f"   Location: {entry.location}")
            if entry.highlights:
                lines.append(f"   Highlights: {_join(entry.highlights)}")
            if entry.tech_stack:
                lines.append(f"   Tech Stack: {_join(entry.tech_stack)}")
        lines.append("")

    lines.append("PROJECTS:")
    for index, project in enumerate(resume.projects, start=1):
        lines.append(f"{index}. {project.name}")
        lines.append(f"   Organization: {project.organization}")
        lines.append(f"   Domain: {project.domain}")
        lines.append(f"   Type: {project.type}")
        lines.append(f"   Tech Stack: {_join(project.tech_stack)}")
        lines.append(f"   Features: {_join(project.features)}")
        if project.contributions:
            lines.append(f"   Contributions: {_join(project.contributions)}")
        lines.append(f"   Location: {project.location}")
        lines.append(f"   Period: {project.period}")
        lines.append("")

    lines.append("EDUCATION:")
    for index, edu in enumerate(resume.education, start=1):
        lines.append(f"{index}. {edu.degree} in {edu.discipline}")
        lines.append(f"   Institution: {edu.institution}")
        lines.append(f"   Location: {edu.location}")
        lines.append(f"   Duration: {edu.start_year} - {edu.end_year}")
        lines.append("")

    if resume.certifications:
        lines += ["CERTIFICATIONS:", _join(resume.certifications), ""]
    if resume.awards_recognition:
        lines += ["AWARDS & RECOGNITION:", _join(resume.awards_recognition), ""]
    if resume.most_proud_of:
        lines += ["MOST PROUD OF:", _join(resume.most_proud_of), ""]

    return "\n".join(lines).strip()


# ── Module-level singleton (thread-safe) ────────────────────────────
_store: ResumeStore | None = None
_store_lock = threading.Lock()


def get_resume_store() -> ResumeStore:
    """Return the process-wide ResumeStore (double-checked locking)."""
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = ResumeStore()
    return _store


def get_resume_context() -> str:
    """Return the complete rendered resume context for prompt injection."""
    return render_resume_context(get_resume_store().load())
