"""
Seed a database with a demo user, project, tasks, chat message and notification.

    USE_DATABASE=true python -m scripts.seed_demo_data
"""
import logging
import sys

from core.config import settings
from core.log_config import configure_logging
from schemas.notification_schema import NotificationCreate
from schemas.user_schema import UserCreate
from schemas.validation import validate_chat_message, validate_project, validate_task
from storage import Storage, build_storage

logger = logging.getLogger(__name__)

DEMO_TASKS = [
    ("Setup project repository", "Initialize git repository and project structure", "done", "high"),
    ("Design database schema", "Create database models and relationships", "in_progress", "high"),
    ("Implement authentication", "Set up user authentication and authorization", "todo", "medium"),
]


def seed(storage: Storage, email: str = "test@example.com") -> dict:
    user = storage.get_user_by_email(email)
    if user is None:
        user = storage.create_user(UserCreate(
            email=email,
            first_name="Test",
            last_name="User",
            profile_image_url="https://ui-avatars.com/api/?name=Test+User",
        ))
        logger.info(f"Created test user with ID: {user.id}")

    project = storage.create_project(validate_project({
        "name": "Sample Project",
        "description": "This is a sample project created during database setup",
        "managerId": user.id,
    }))
    logger.info(f"Created sample project with ID: {project.id}")

    storage.add_project_member(project.id, user.id, role="manager")

    tasks = []
    for title, description, status, priority in DEMO_TASKS:
        task = storage.create_task(validate_task({
            "projectId": project.id,
            "title": title,
            "description": description,
            "assigneeId": user.id,
            "status": status,
            "priority": priority,
        }))
        tasks.append(task)
        logger.info(f"Created task with ID: {task.id}")

    message = storage.create_chat_message(validate_chat_message({
        "projectId": project.id,
        "userId": user.id,
        "content": "Project initialized successfully!",
    }))

    notification = storage.create_notification(NotificationCreate(
        user_id=user.id,
        type="welcome",
        title="Welcome to SynergySphere",
        message="Get started by exploring your first project",
    ))
    return {"user": user, "project": project, "tasks": tasks, "message": message, "notification": notification}


def main() -> int:
    configure_logging(settings.LOG_LEVEL)
    if not settings.USE_DATABASE:
        logger.error("USE_DATABASE is off; seeding in-memory storage would be lost on exit")
        return 1
    seed(build_storage(settings))
    logger.info("Database setup completed successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
