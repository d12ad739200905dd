from .user import User
from .module import Module
from .progress import Progress
from .doubt import Doubt
from .quiz import Quiz, QuizResult
from .chat import Conversation, Message

__all__ = [
    'User',
    'Module',
    'Progress',
    'Doubt',
    'Quiz',
    'QuizResult',
    'Conversation',
    'Message',
]
