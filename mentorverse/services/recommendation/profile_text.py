"""
Flatten profiles into the descriptive text the suggester works from
"""

from typing import List

from mentorverse.models.models import MenteeProfile, MentorProfile, MentorshipFocus


def _join(values: List[str], sep: str = ", ") -> str:
    return sep.join(values) if values else "N/A"


def build_mentee_profile_text(mentee: MenteeProfile) -> str:
    """Describe a mentee; aspiration fields follow what they are seeking help with"""
    focus = set(mentee.seeking_mentorship_for)
    wants_university = MentorshipFocus.UNIVERSITY in focus or not focus
    wants_career = MentorshipFocus.CAREER in focus or not focus

    parts = [
        f"Name: {mentee.name}",
        f"Bio: {mentee.bio or 'N/A'}",
        f"Interests: {_join(mentee.interests)}",
        f"Learning Goals: {mentee.learning_goals or 'N/A'}",
        f"Seeking Mentorship For: {_join([f.value for f in mentee.seeking_mentorship_for])}",
    ]
    if wants_university:
        parts.extend([
            f"Current Education Level: {mentee.current_education_level or 'N/A'}",
            f"Target Degree Level: {mentee.target_degree_level or 'N/A'}",
            f"Target Fields of Study: {_join(mentee.target_fields_of_study)}",
            f"Desired Universities: {_join(mentee.desired_universities)}",
        ])
    if wants_career:
        parts.extend([
            f"Desired Job Roles: {_join(mentee.desired_job_roles)}",
            f"Desired Companies: {_join(mentee.desired_companies)}",
        ])
    return ", ".join(parts)


def build_mentor_profile_text(mentor: MentorProfile) -> str:
    universities = [f"{u.role_or_degree} at {u.institution_name}" for u in mentor.universities]
    companies = [f"{c.role_or_degree} at {c.institution_name}" for c in mentor.companies]
    return (
        f"Name: {mentor.name}, Bio: {mentor.bio or 'N/A'}, "
        f"Expertise: {_join(mentor.expertise)}, "
        f"Universities: {_join(universities, '; ')}, "
        f"Companies: {_join(companies, '; ')}, "
        f"Years of Exp: {mentor.years_of_experience or 0}"
    )
