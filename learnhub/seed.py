import logging

from .models import User
from .storage import storage

logger = logging.getLogger(__name__)

DEMO_USERS = (
    {'username': 'teacher', 'password': 'password', 'role': User.ROLE_TEACHER, 'name': 'Mr. Teacher'},
    {'username': 'student', 'password': 'password', 'role': User.ROLE_STUDENT, 'name': 'Alice Student'},
)


def seed_demo_users():
    """Create the demo teacher and student unless the teacher already exists."""
    if storage.users.get_by_username('teacher'):
        return 0
    for user in DEMO_USERS:
        storage.users.create(**user)
    logger.info(f"Seeded {len(DEMO_USERS)} demo users")
    return len(DEMO_USERS)
