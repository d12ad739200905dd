from flask import Blueprint, abort, jsonify
from flask_login import current_user, login_required

from ..permissions import teacher_required
from ..schemas import ProgressUpdateRequest, parse_json
from ..storage import storage

progress_bp = Blueprint('progress', __name__)


@progress_bp.route('/progress', methods=['POST'])
@login_required
def update_progress():
    data = parse_json(ProgressUpdateRequest)
    if storage.modules.get(data.module_id) is None:
        abort(404, description='Module not found')

    progress = storage.progress.update(
        current_user.id,
        data.module_id,
        data.completed,
        last_position=data.last_position,
    )
    return jsonify(progress.to_dict())


@progress_bp.route('/progress', methods=['GET'])
@login_required
def my_progress():
    return jsonify([p.to_dict() for p in storage.progress.for_user(current_user.id)])


@progress_bp.route('/teacher/student-stats', methods=['GET'])
@teacher_required
def student_stats():
    return jsonify(storage.progress.student_stats())
