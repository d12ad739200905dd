from datetime import datetime

from ..extensions import db


class Module(db.Model):
    """A published video lecture, optionally with a transcript."""

    __tablename__ = 'modules'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    video_url = db.Column(db.String(500), nullable=False)
    teacher_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    content = db.Column(db.Text)  # transcript or summary used as AI context
    order = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    quizzes = db.relationship('Quiz', backref='module', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'videoUrl': self.video_url,
            'teacherId': self.teacher_id,
            'content': self.content,
            'order': self.order,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
