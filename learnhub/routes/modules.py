from flask import Blueprint, abort, jsonify
from flask_login import current_user, login_required

from ..permissions import teacher_required
from ..schemas import ModuleCreateRequest, parse_json
from ..storage import storage

modules_bp = Blueprint('modules', __name__)


@modules_bp.route('/modules', methods=['GET'])
@login_required
def list_modules():
    completed = storage.progress.completed_module_ids(current_user.id)
    modules = []
    for module in storage.modules.list():
        item = module.to_dict()
        item['completed'] = module.id in completed
        modules.append(item)
    return jsonify(modules)


@modules_bp.route('/modules', methods=['POST'])
@teacher_required
def create_module():
    data = parse_json(ModuleCreateRequest)
    teacher_id = current_user.id
    if data.teacher_id is not None:
        owner = storage.users.get(data.teacher_id)
        if owner is None or not owner.is_teacher:
            return jsonify({'message': 'Teacher not found', 'field': 'teacherId'}), 400
        teacher_id = owner.id
    module = storage.modules.create(
        title=data.title,
        description=data.description,
        video_url=data.video_url,
        teacher_id=teacher_id,
        content=data.content,
        order=data.order,
    )
    return jsonify(module.to_dict()), 201


@modules_bp.route('/modules/<id:module_id>', methods=['GET'])
@login_required
def get_module(module_id):
    module = storage.modules.get(module_id)
    if module is None:
        abort(404, description='Module not found')
    return jsonify(module.to_dict())
