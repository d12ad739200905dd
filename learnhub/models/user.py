from datetime import datetime

from flask_login import UserMixin

from ..extensions import db


class User(db.Model, UserMixin):
    __tablename__ = 'users'

    ROLE_STUDENT = 'student'
    ROLE_TEACHER = 'teacher'
    ROLES = (ROLE_STUDENT, ROLE_TEACHER)

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    # Stored and compared as plain text
    password = db.Column(db.String(128), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=ROLE_STUDENT)
    name = db.Column(db.String(120), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    modules = db.relationship('Module', backref='teacher', lazy=True)
    progress = db.relationship('Progress', backref='user', lazy=True)
    doubts = db.relationship('Doubt', backref='user', lazy=True)
    quiz_results = db.relationship('QuizResult', backref='user', lazy=True)

    @property
    def is_teacher(self):
        return self.role == self.ROLE_TEACHER

    def check_password(self, password):
        return self.password == password

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'role': self.role,
            'name': self.name,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
