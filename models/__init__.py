from models.base import Base
from models.user import User
from models.account import Account
from models.project import Project
from models.project_member import ProjectMember
from models.task import Task
from models.chat_message import ChatMessage
from models.notification import Notification

# Children removed together with their project, by both storage backends.
PROJECT_CASCADE = (Task, ProjectMember, ChatMessage)
