import logging

from flask import Blueprint, abort, current_app, jsonify
from flask_login import current_user, login_required

from ..permissions import teacher_required
from ..schemas import QuizGenerateRequest, QuizSubmitRequest, parse_json
from ..services.assistant import generate_quiz_questions
from ..storage import storage

logger = logging.getLogger(__name__)

quizzes_bp = Blueprint('quizzes', __name__)


@quizzes_bp.route('/quizzes/generate', methods=['POST'])
@teacher_required
def generate_quiz():
    data = parse_json(QuizGenerateRequest)
    module = storage.modules.get(data.module_id)
    if module is None:
        abort(404, description='Module not found')

    try:
        questions = generate_quiz_questions(module, current_app.config['QUIZ_QUESTION_COUNT'])
    except Exception:
        logger.exception(f"Quiz generation failed for module {module.id}")
        return jsonify({'message': 'Failed to generate quiz'}), 500

    quiz = storage.quizzes.create(module.id, questions)
    logger.info(f"Generated quiz {quiz.id} with {len(questions)} questions for module {module.id}")
    return jsonify(quiz.to_dict()), 201


@quizzes_bp.route('/modules/<id:module_id>/quiz', methods=['GET'])
@login_required
def get_module_quiz(module_id):
    quiz = storage.quizzes.latest_for_module(module_id)
    return jsonify(quiz.to_dict() if quiz else None)


@quizzes_bp.route('/quizzes/submit', methods=['POST'])
@login_required
def submit_quiz():
    data = parse_json(QuizSubmitRequest)
    if storage.quizzes.get(data.quiz_id) is None:
        abort(404, description='Quiz not found')

    # The score is computed by the client and stored unchanged
    result = storage.quizzes.submit_result(
        current_user.id, data.quiz_id, data.score, data.total_questions
    )
    return jsonify(result.to_dict()), 201


@quizzes_bp.route('/quiz-results', methods=['GET'])
@login_required
def list_results():
    user_id = None if current_user.is_teacher else current_user.id
    return jsonify([r.to_dict() for r in storage.quizzes.results(user_id)])
