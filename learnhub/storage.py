"""
Data access for every entity.

One store per table, each method a single query or a short write followed by
a commit. Routes talk to the module-level ``storage`` object only.
"""
from datetime import datetime
import json

from sqlalchemy import case, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError

from .extensions import db
from .models import Conversation, Doubt, Message, Module, Progress, Quiz, QuizResult, User

_UPSERT_DIALECTS = {
    'sqlite': sqlite.insert,
    'postgresql': postgresql.insert,
}


class UserStore:
    def get(self, user_id):
        return db.session.get(User, user_id)

    def get_by_username(self, username):
        return User.query.filter_by(username=username).first()

    def create(self, username, password, role, name):
        user = User(username=username, password=password, role=role, name=name)
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise
        return user


class ModuleStore:
    def list(self):
        return Module.query.order_by(Module.order, Module.id).all()

    def get(self, module_id):
        return db.session.get(Module, module_id)

    def create(self, title, video_url, teacher_id, description=None, content=None, order=0):
        module = Module(
            title=title,
            description=description,
            video_url=video_url,
            teacher_id=teacher_id,
            content=content,
            order=order,
        )
        db.session.add(module)
        db.session.commit()
        return module


class ProgressStore:
    def update(self, user_id, module_id, completed, last_position=None):
        """Insert or update the single progress row of ``(user_id, module_id)``.

        Runs as one ``INSERT ... ON CONFLICT DO UPDATE`` statement against the
        ``(user_id, module_id)`` unique constraint.
        """
        dialect = db.engine.dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise RuntimeError(f"Progress upsert is not supported on {dialect}")

        values = {
            'user_id': user_id,
            'module_id': module_id,
            'completed': completed,
            'updated_at': datetime.utcnow(),
        }
        if last_position is not None:
            values['last_position'] = last_position

        stmt = insert(Progress).values(**values)
        changes = {
            'completed': stmt.excluded.completed,
            'updated_at': stmt.excluded.updated_at,
        }
        if last_position is not None:
            changes['last_position'] = stmt.excluded.last_position
        stmt = stmt.on_conflict_do_update(index_elements=['user_id', 'module_id'], set_=changes)

        db.session.execute(stmt)
        db.session.commit()
        return Progress.query.filter_by(user_id=user_id, module_id=module_id).one()

    def for_user(self, user_id):
        return Progress.query.filter_by(user_id=user_id).order_by(Progress.module_id).all()

    def completed_module_ids(self, user_id):
        rows = db.session.execute(
            select(Progress.module_id).where(
                Progress.user_id == user_id,
                Progress.completed.is_(True),
            )
        )
        return {row.module_id for row in rows}

    def student_stats(self):
        """Completion and quiz averages for every student, without per-student queries."""
        total_modules = db.session.scalar(select(func.count(Module.id))) or 0

        completed = (
            select(Progress.user_id, func.count(Progress.id).label('completed'))
            .where(Progress.completed.is_(True))
            .group_by(Progress.user_id)
            .subquery()
        )
        percentage = case(
            (QuizResult.total_questions > 0,
             QuizResult.score * 100.0 / QuizResult.total_questions),
            else_=0.0,
        )
        scores = (
            select(QuizResult.user_id, func.avg(percentage).label('average'))
            .group_by(QuizResult.user_id)
            .subquery()
        )
        query = (
            select(
                User.id,
                User.name,
                func.coalesce(completed.c.completed, 0).label('completed'),
                func.coalesce(scores.c.average, 0.0).label('average'),
            )
            .select_from(User)
            .outerjoin(completed, completed.c.user_id == User.id)
            .outerjoin(scores, scores.c.user_id == User.id)
            .where(User.role == User.ROLE_STUDENT)
            .order_by(User.name, User.id)
        )

        return [
            {
                'studentId': row.id,
                'studentName': row.name,
                'completedModules': int(row.completed),
                'totalModules': total_modules,
                'averageQuizScore': round(float(row.average), 1),
            }
            for row in db.session.execute(query)
        ]


class DoubtStore:
    def get(self, doubt_id):
        return db.session.get(Doubt, doubt_id)

    def create(self, user_id, module_id, question, ai_answer=None,
               is_resolved=False, is_escalated=False):
        doubt = Doubt(
            user_id=user_id,
            module_id=module_id,
            question=question,
            ai_answer=ai_answer,
            is_resolved=is_resolved,
            is_escalated=is_escalated,
        )
        db.session.add(doubt)
        db.session.commit()
        return doubt

    def list(self, user_id=None):
        """Return ``(doubt, student_name, module_title)`` rows, newest first.

        With ``user_id`` only that student's doubts are returned.
        """
        query = (
            db.session.query(Doubt, User.name, Module.title)
            .outerjoin(User, Doubt.user_id == User.id)
            .outerjoin(Module, Doubt.module_id == Module.id)
        )
        if user_id is not None:
            query = query.filter(Doubt.user_id == user_id)
        return query.order_by(Doubt.created_at.desc(), Doubt.id.desc()).all()

    def answer(self, doubt_id, teacher_answer):
        doubt = self.get(doubt_id)
        if doubt is None:
            return None
        doubt.teacher_answer = teacher_answer
        doubt.is_resolved = True
        doubt.is_escalated = False
        db.session.commit()
        return doubt


class QuizStore:
    def get(self, quiz_id):
        return db.session.get(Quiz, quiz_id)

    def create(self, module_id, questions, generated_by_ai=True):
        quiz = Quiz(
            module_id=module_id,
            questions_json=json.dumps(questions),
            generated_by_ai=generated_by_ai,
        )
        db.session.add(quiz)
        db.session.commit()
        return quiz

    def latest_for_module(self, module_id):
        return (
            Quiz.query.filter_by(module_id=module_id)
            .order_by(Quiz.created_at.desc(), Quiz.id.desc())
            .first()
        )

    def submit_result(self, user_id, quiz_id, score, total_questions):
        # Score is stored as submitted by the client
        result = QuizResult(
            user_id=user_id,
            quiz_id=quiz_id,
            score=score,
            total_questions=total_questions,
        )
        db.session.add(result)
        db.session.commit()
        return result

    def results(self, user_id=None):
        query = QuizResult.query
        if user_id is not None:
            query = query.filter_by(user_id=user_id)
        return query.order_by(QuizResult.created_at.desc(), QuizResult.id.desc()).all()


class ConversationStore:
    def list(self, user_id):
        return (
            Conversation.query.filter_by(user_id=user_id)
            .order_by(Conversation.created_at.desc(), Conversation.id.desc())
            .all()
        )

    def get(self, conversation_id, user_id):
        return Conversation.query.filter_by(id=conversation_id, user_id=user_id).first()

    def create(self, user_id, title):
        conversation = Conversation(user_id=user_id, title=title)
        db.session.add(conversation)
        db.session.commit()
        return conversation

    def delete(self, conversation):
        db.session.delete(conversation)
        db.session.commit()

    def add_message(self, conversation_id, role, content):
        message = Message(conversation_id=conversation_id, role=role, content=content)
        db.session.add(message)
        db.session.commit()
        return message

    def recent_messages(self, conversation_id, limit):
        rows = (
            Message.query.filter_by(conversation_id=conversation_id)
            .order_by(Message.id.desc())
            .limit(limit)
            .all()
        )
        return list(reversed(rows))


class Storage:
    def __init__(self):
        self.users = UserStore()
        self.modules = ModuleStore()
        self.progress = ProgressStore()
        self.doubts = DoubtStore()
        self.quizzes = QuizStore()
        self.conversations = ConversationStore()


storage = Storage()
