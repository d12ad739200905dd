from datetime import datetime

from ..extensions import db


class Progress(db.Model):
    __tablename__ = 'progress'
    __table_args__ = (
        db.UniqueConstraint('user_id', 'module_id', name='uq_progress_user_module'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    module_id = db.Column(db.Integer, db.ForeignKey('modules.id'), nullable=False)
    completed = db.Column(db.Boolean, nullable=False, default=False)
    last_position = db.Column(db.Integer, nullable=False, default=0)  # seconds
    updated_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'moduleId': self.module_id,
            'completed': self.completed,
            'lastPosition': self.last_position,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
