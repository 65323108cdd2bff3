"""
Cover Message Writers - Produce the cover message for agent auto-apply.

The pipeline treats the writer as opaque: whatever string it returns is
admitted like any caller-supplied cover message.
"""

from abc import ABC, abstractmethod

from database.models import JobSeeker, JobPosting


class CoverMessageWriter(ABC):
    @abstractmethod
    def write(self, seeker: JobSeeker, job: JobPosting) -> str:
        """Return the cover message for seeker applying to job."""
        pass


class TemplateCoverMessageWriter(CoverMessageWriter):
    """Plain-text message built from profile fields."""

    def write(self, seeker: JobSeeker, job: JobPosting) -> str:
        required = {s.strip().lower() for s in (job.required_skills or [])}
        relevant = [s for s in (seeker.skills or []) if s.strip().lower() in required]
        skills = relevant or list(seeker.skills or [])[:5]

        lines = [
            f"Hello {job.company_name or 'there'},",
            "",
            f"I am applying for the {job.title} role on behalf of {seeker.full_name}.",
        ]
        if skills:
            lines.append(
                f"{seeker.full_name} has {seeker.experience_years or 0} years of experience "
                f"and works with {', '.join(skills)}."
            )
        lines.append("Happy to share more details or arrange a call.")
        return "\n".join(lines)
