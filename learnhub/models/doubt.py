from datetime import datetime

from ..extensions import db


class Doubt(db.Model):
    __tablename__ = 'doubts'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    module_id = db.Column(db.Integer, db.ForeignKey('modules.id'), nullable=False)
    question = db.Column(db.Text, nullable=False)
    ai_answer = db.Column(db.Text)
    teacher_answer = db.Column(db.Text)
    is_resolved = db.Column(db.Boolean, nullable=False, default=False)
    # Set when the assistant could not help and a teacher has to answer
    is_escalated = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self, student_name=None, module_title=None):
        data = {
            'id': self.id,
            'userId': self.user_id,
            'moduleId': self.module_id,
            'question': self.question,
            'aiAnswer': self.ai_answer,
            'teacherAnswer': self.teacher_answer,
            'isResolved': self.is_resolved,
            'isEscalated': self.is_escalated,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
        if student_name is not None:
            data['studentName'] = student_name
        if module_title is not None:
            data['moduleTitle'] = module_title
        return data
