from datetime import datetime
import json

from ..extensions import db


class Quiz(db.Model):
    __tablename__ = 'quizzes'

    id = db.Column(db.Integer, primary_key=True)
    module_id = db.Column(db.Integer, db.ForeignKey('modules.id'), nullable=False)
    questions_json = db.Column(db.Text, nullable=False)  # [{question, options, correctIndex}]
    generated_by_ai = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    results = db.relationship('QuizResult', backref='quiz', lazy=True)

    def get_questions(self):
        return json.loads(self.questions_json)

    def to_dict(self):
        return {
            'id': self.id,
            'moduleId': self.module_id,
            'questions': self.get_questions(),
            'generatedByAi': self.generated_by_ai,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }


class QuizResult(db.Model):
    __tablename__ = 'quiz_results'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    quiz_id = db.Column(db.Integer, db.ForeignKey('quizzes.id'), nullable=False)
    score = db.Column(db.Integer, nullable=False)
    total_questions = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'quizId': self.quiz_id,
            'score': self.score,
            'totalQuestions': self.total_questions,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
