"""
Bootstrap data: an admin account, a regular test account and a handful of
sample postings so a fresh install has something to show.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from jobboard.models.job import Job
from jobboard.models.user import User
from jobboard.services.auth_service import get_user_by_email, hash_password

logger = logging.getLogger(__name__)

TEST_USER = {"name": "Test User", "email": "test@mail.com", "password": "testuser", "role": "user"}

SAMPLE_JOBS = [
    {
        "type": "Full-Time",
        "title": "Senior Vue Developer",
        "description": (
            "We are seeking a talented Front-End Developer to join our team in Boston, MA. "
            "The ideal candidate will have strong skills in HTML, CSS, and JavaScript, with "
            "expertise in Vue.js and modern web development practices."
        ),
        "salary": "$70K - $80K / Year",
        "location": "Boston, MA",
        "company_name": "NewTek Solutions",
        "company_description": (
            "NewTek Solutions is a leading technology company specializing in web development "
            "and digital solutions. We pride ourselves on creating innovative products and "
            "fostering a collaborative work environment."
        ),
        "contact_email": "contact@newteksolutions.com",
        "contact_phone": "555-555-5555",
    },
    {
        "type": "Remote",
        "title": "Front-End Engineer (Vue)",
        "description": (
            "Join our team as a Front-End Developer in sunny Miami, FL. We are looking for a "
            "motivated individual with a passion for crafting beautiful and functional web "
            "applications."
        ),
        "salary": "$70K - $80K / Year",
        "location": "Miami, FL",
        "company_name": "Veneer Solutions",
        "company_description": (
            "Veneer Solutions is a creative agency focused on delivering exceptional digital "
            "experiences. Our team is dedicated to pushing the boundaries of web design and "
            "development."
        ),
        "contact_email": "contact@veneersolutions.com",
        "contact_phone": "555-555-5556",
    },
    {
        "type": "Remote",
        "title": "Vue.js Developer",
        "description": (
            "Are you passionate about front-end development? Join our team in vibrant Brooklyn, "
            "NY, and work on exciting projects that make a difference."
        ),
        "salary": "$70K - $80K / Year",
        "location": "Brooklyn, NY",
        "company_name": "Dolor Cloud",
        "company_description": (
            "Dolor Cloud is an innovative startup specializing in cloud-based solutions. We offer "
            "a dynamic work environment where creativity and technical excellence thrive."
        ),
        "contact_email": "contact@dolorcloud.com",
        "contact_phone": "555-555-5557",
    },
    {
        "type": "Part-Time",
        "title": "Vue Front-End Developer",
        "description": (
            "Join our team as a Part-Time Front-End Developer in beautiful Phoenix, AZ. We are "
            "looking for a self-motivated individual with a passion for creating engaging user "
            "interfaces."
        ),
        "salary": "$60K - $70K / Year",
        "location": "Phoenix, AZ",
        "company_name": "Alpha Elite",
        "company_description": (
            "Alpha Elite is a premier digital agency that partners with businesses to create "
            "powerful web solutions. We value innovation and professional growth."
        ),
        "contact_email": "contact@alphaelite.com",
        "contact_phone": "555-555-5558",
    },
    {
        "type": "Full-Time",
        "title": "Full Stack Vue Developer",
        "description": (
            "Exciting opportunity for a Full-Time Front-End Developer in bustling Atlanta, GA. "
            "We are seeking a talented individual with expertise in Vue.js and full-stack "
            "development."
        ),
        "salary": "$90K - $100K / Year",
        "location": "Atlanta, GA",
        "company_name": "Browning Technologies",
        "company_description": (
            "Browning Technologies is a rapidly growing tech company focused on developing "
            "cutting-edge web applications. Join us to work on challenging projects with a "
            "talented team."
        ),
        "contact_email": "contact@browningtech.com",
        "contact_phone": "555-555-5559",
    },
    {
        "type": "Remote",
        "title": "Vue Native Developer",
        "description": (
            "Join our team as a Front-End Developer in beautiful Portland, OR. We are looking for "
            "a skilled and enthusiastic individual to help build amazing mobile and web "
            "applications."
        ),
        "salary": "$100K - $110K / Year",
        "location": "Portland, OR",
        "company_name": "Port Solutions Inc.",
        "company_description": (
            "Port Solutions Inc. is a technology company specializing in cross-platform "
            "development. We believe in empowering our team members and fostering innovation."
        ),
        "contact_email": "contact@portsolutions.com",
        "contact_phone": "555-555-5560",
    },
]


def _ensure_user(s: Session, name: str, email: str, password: str, role: str, rounds: int) -> bool:
    email = email.strip().lower()
    if get_user_by_email(s, email) is not None:
        return False
    s.add(User(name=name, email=email, password=hash_password(password, rounds), role=role))
    logger.info("Created %s account %s", role, email)
    return True


def seed_database(s: Session, admin_email: str = "admin@mail.com", admin_password: str = "admin", rounds: int = 10) -> None:
    """Insert the bootstrap accounts and sample jobs. Safe to run repeatedly."""
    _ensure_user(s, "Admin", admin_email, admin_password, "admin", rounds)
    _ensure_user(s, rounds=rounds, **TEST_USER)

    job_count = s.scalar(select(func.count()).select_from(Job))
    if not job_count:
        s.add_all(Job(**job) for job in SAMPLE_JOBS)
        logger.info("Inserted %d sample jobs", len(SAMPLE_JOBS))

    s.commit()
