# импортирует все модели, чтобы Base.metadata и строковые relationship были полными
from app.db.base import Base
from app.models.notification import Notification
from app.models.subtask import Subtask
from app.models.task import Task
from app.models.team import Team
from app.models.user import User

__all__ = ["Base", "Notification", "Subtask", "Task", "Team", "User"]
