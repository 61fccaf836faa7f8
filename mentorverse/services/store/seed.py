"""
Demo records loaded at startup: one mentor, one mentee, and a few group sessions
and webinars hosted by the mentor
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from mentorverse.models.models import (
    AvailabilitySlot, ExperienceItem, GroupSession, MenteeProfile, MentorProfile,
    MentorshipFocus, Webinar
)
from mentorverse.services.catalog.catalog_service import CatalogService
from mentorverse.services.store.profile_store import ProfileStore

logger = logging.getLogger(__name__)

PLACEHOLDER_AVATAR = "https://placehold.co/100x100.png"


def demo_mentor(now: datetime) -> MentorProfile:
    return MentorProfile(
        id="mentor1",
        email="mentor@example.com",
        name="Dr. Eleanor Vance",
        profile_image_url=PLACEHOLDER_AVATAR,
        bio=(
            "Experienced AI researcher with a passion for guiding students. "
            "Specializing in Machine Learning and Natural Language Processing."
        ),
        interests=["AI Ethics", "Deep Learning", "Academic Research"],
        expertise=["Machine Learning", "NLP", "Computer Vision"],
        universities=[
            ExperienceItem(
                id="uni1",
                institution_name="Stanford University",
                role_or_degree="PhD in AI",
                start_date=date(2010, 9, 1),
                end_date=date(2014, 6, 1),
                description="Focused on novel neural network architectures.",
            ),
            ExperienceItem(
                id="uni2",
                institution_name="MIT",
                role_or_degree="M.S. Computer Science",
                start_date=date(2008, 9, 1),
                end_date=date(2010, 6, 1),
            ),
        ],
        companies=[
            ExperienceItem(
                id="comp1",
                institution_name="Google AI",
                role_or_degree="Senior Research Scientist",
                start_date=date(2016, 7, 1),
                description="Led projects in large language model development.",
            ),
            ExperienceItem(
                id="comp2",
                institution_name="OpenAI",
                role_or_degree="Research Engineer",
                start_date=date(2014, 7, 1),
                end_date=date(2016, 6, 30),
            ),
        ],
        years_of_experience=10,
        mentorship_focus=[MentorshipFocus.CAREER, MentorshipFocus.UNIVERSITY],
        availability_slots=[
            AvailabilitySlot(
                id="slot1",
                start_time=now + timedelta(hours=24),
                end_time=now + timedelta(hours=25),
            ),
            AvailabilitySlot(
                id="slot2",
                start_time=now + timedelta(hours=48),
                end_time=now + timedelta(hours=49),
                is_booked=True,
                booked_by_mentee_id="mentee1",
            ),
        ],
    )


def demo_mentee() -> MenteeProfile:
    return MenteeProfile(
        id="mentee1",
        email="mentee@example.com",
        name="Alex Chen",
        profile_image_url=PLACEHOLDER_AVATAR,
        bio=(
            "Undergraduate student eager to learn about data science and pursue "
            "higher education in computer science."
        ),
        interests=["Data Visualization", "Python Programming", "Photography"],
        learning_goals=(
            "Get into a top M.S. program for Data Science and learn about "
            "real-world applications of ML."
        ),
        desired_universities=["Stanford University", "Carnegie Mellon University"],
        desired_job_roles=["Data Scientist", "Machine Learning Engineer"],
        desired_companies=["Google", "Meta", "Netflix"],
    )


def demo_group_sessions(host: MentorProfile):
    common = dict(
        host_id=host.id,
        host_name=host.name,
        host_profile_image_url=host.profile_image_url,
        image_url="https://placehold.co/600x400.png",
    )
    return [
        GroupSession(
            id="gs1",
            title="Mastering Data Structures & Algorithms",
            description=(
                "Join our interactive group session to tackle common DSA problems and improve "
                "your coding interview skills. Collaborative problem-solving, weekly challenges, "
                "and mock interview practice."
            ),
            date="November 5th, 2024 at 4:00 PM PST",
            tags=["DSA", "Coding Interview", "Algorithms", "Problem Solving", "Data Structures"],
            max_participants=20,
            price="$25",
            duration="90 minutes",
            **common,
        ),
        GroupSession(
            id="gs2",
            title="Startup Pitch Practice & Feedback",
            description=(
                "Refine your startup pitch in a supportive group environment. Get constructive "
                "feedback from peers and an experienced entrepreneur."
            ),
            date="November 12th, 2024 at 10:00 AM PST",
            tags=["Startup", "Pitching", "Entrepreneurship", "Feedback", "Business"],
            max_participants=12,
            price="$20",
            duration="60 minutes",
            **common,
        ),
        GroupSession(
            id="gs3",
            title="Intro to UX Design Principles",
            description=(
                "A beginner-friendly group session covering the fundamentals of UX design: "
                "user research, personas, wireframing, prototyping and usability testing."
            ),
            date="November 19th, 2024 at 1:00 PM PST",
            tags=["UX Design", "Beginner", "UI/UX", "Design Thinking", "Prototyping"],
            max_participants=30,
            price="Free",
            duration="75 minutes",
            **common,
        ),
    ]


def demo_webinars(host: MentorProfile):
    common = dict(host_id=host.id, host_name=host.name, image_url="https://placehold.co/400x250.png")
    return [
        Webinar(
            id="web1",
            title="The Future of Generative AI",
            description=(
                "Explore the latest advancements in Generative AI, its applications, "
                "and ethical considerations."
            ),
            date="November 8th, 2024 at 9:00 AM PST",
            topic="Artificial Intelligence",
            tags=["AI", "Generative AI", "Machine Learning"],
            duration="90 minutes",
            **common,
        ),
        Webinar(
            id="web2",
            title="Effective Networking in the Tech Industry",
            description=(
                "Learn strategies for building meaningful professional connections, both "
                "online and offline, to advance your career in tech."
            ),
            date="November 15th, 2024 at 12:00 PM PST",
            topic="Career Development",
            tags=["Networking", "Career"],
            duration="60 minutes",
            **common,
        ),
        Webinar(
            id="web3",
            title="Demystifying Cloud Computing",
            description=(
                "A comprehensive overview of cloud computing concepts, services (AWS, Azure, "
                "GCP), and how to get started with cloud technologies."
            ),
            date="November 22nd, 2024 at 3:00 PM PST",
            topic="Cloud Computing",
            tags=["Cloud", "AWS", "Azure", "GCP"],
            duration="75 minutes",
            **common,
        ),
    ]


def seed_demo_data(store: ProfileStore, catalog: CatalogService, now: Optional[datetime] = None) -> None:
    """Reset the store and catalog and load the demo records"""
    now = now or datetime.now(timezone.utc)
    store.reset()
    catalog.reset()

    mentor = demo_mentor(now)
    store.upsert(mentor.email, mentor)
    mentee = demo_mentee()
    store.upsert(mentee.email, mentee)

    for session in demo_group_sessions(mentor):
        catalog.add_group_session(session)
    for webinar in demo_webinars(mentor):
        catalog.add_webinar(webinar)

    logger.info("Demo data loaded: 2 profiles, 3 group sessions, 3 webinars")
