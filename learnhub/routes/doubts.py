from flask import Blueprint, abort, jsonify
from flask_login import current_user, login_required

from ..permissions import teacher_required
from ..schemas import DoubtAnswerRequest, DoubtCreateRequest, parse_json
from ..services.assistant import triage_doubt
from ..storage import storage

doubts_bp = Blueprint('doubts', __name__)


@doubts_bp.route('/doubts', methods=['POST'])
@login_required
def create_doubt():
    data = parse_json(DoubtCreateRequest)
    module = storage.modules.get(data.module_id)
    if module is None:
        abort(404, description='Module not found')

    ai_answer, is_resolved, is_escalated = triage_doubt(data.question, module)
    doubt = storage.doubts.create(
        user_id=current_user.id,
        module_id=module.id,
        question=data.question,
        ai_answer=ai_answer,
        is_resolved=is_resolved,
        is_escalated=is_escalated,
    )
    return jsonify(doubt.to_dict()), 201


@doubts_bp.route('/doubts', methods=['GET'])
@login_required
def list_doubts():
    # Students only see their own doubts
    user_id = None if current_user.is_teacher else current_user.id
    rows = storage.doubts.list(user_id)
    return jsonify([
        doubt.to_dict(student_name=student_name, module_title=module_title)
        for doubt, student_name, module_title in rows
    ])


@doubts_bp.route('/doubts/<id:doubt_id>/answer', methods=['PATCH'])
@teacher_required
def answer_doubt(doubt_id):
    data = parse_json(DoubtAnswerRequest)
    doubt = storage.doubts.answer(doubt_id, data.answer)
    if doubt is None:
        abort(404, description='Doubt not found')
    return jsonify(doubt.to_dict())
