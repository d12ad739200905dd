import pytest

from learnhub.extensions import db
from learnhub.models import Progress


def _progress_rows(app):
    with app.app_context():
        return db.session.query(Progress).all()


def test_progress_upsert_is_idempotent(app, student_client, module_id):
    first = student_client.post('/api/progress', json={'moduleId': module_id, 'completed': True})
    second = student_client.post('/api/progress', json={'moduleId': module_id, 'completed': True})

    assert first.status_code == 200
    assert second.status_code == 200
    assert first.get_json()['id'] == second.get_json()['id']
    rows = _progress_rows(app)
    assert len(rows) == 1
    assert rows[0].completed is True


def test_progress_update_changes_existing_row(app, student_client, module_id):
    student_client.post('/api/progress', json={'moduleId': module_id, 'completed': True})
    response = student_client.post(
        '/api/progress',
        json={'moduleId': module_id, 'completed': False, 'lastPosition': 95},
    )

    progress = response.get_json()
    assert progress['completed'] is False
    assert progress['lastPosition'] == 95
    assert len(_progress_rows(app)) == 1


def test_last_position_is_kept_when_omitted(student_client, module_id):
    student_client.post('/api/progress', json={'moduleId': module_id, 'completed': False, 'lastPosition': 30})
    response = student_client.post('/api/progress', json={'moduleId': module_id, 'completed': True})
    assert response.get_json()['lastPosition'] == 30


def test_progress_rows_are_per_user(app, teacher_client, student_client, module_id):
    student_client.post('/api/progress', json={'moduleId': module_id, 'completed': True})
    teacher_client.post('/api/progress', json={'moduleId': module_id, 'completed': True})
    assert len(_progress_rows(app)) == 2


def test_progress_for_unknown_module_is_404(student_client):
    response = student_client.post('/api/progress', json={'moduleId': 42, 'completed': True})
    assert response.status_code == 404


def test_progress_validation(student_client, module_id):
    response = student_client.post('/api/progress', json={'moduleId': module_id})
    assert response.status_code == 400
    assert response.get_json()['field'] == 'completed'


def test_list_my_progress(student_client, module_id):
    student_client.post('/api/progress', json={'moduleId': module_id, 'completed': True})
    rows = student_client.get('/api/progress').get_json()
    assert len(rows) == 1
    assert rows[0]['moduleId'] == module_id


def test_student_stats(app, teacher_client, student_client, module_id, quiz_id):
    teacher_client.post('/api/modules', json={'title': 'Respiration', 'videoUrl': 'https://example.com/r.mp4'})
    student_client.post('/api/progress', json={'moduleId': module_id, 'completed': True})
    student_client.post('/api/quizzes/submit', json={'quizId': quiz_id, 'score': 1, 'totalQuestions': 2})
    student_client.post('/api/quizzes/submit', json={'quizId': quiz_id, 'score': 2, 'totalQuestions': 2})

    idle = app.test_client()
    idle.post('/api/register', json={'username': 'zed', 'password': 'pw', 'name': 'Zed'})

    stats = teacher_client.get('/api/teacher/student-stats').get_json()
    assert [s['studentName'] for s in stats] == ['Alice Student', 'Zed']

    alice, zed = stats
    assert alice['completedModules'] == 1
    assert alice['totalModules'] == 2
    assert alice['averageQuizScore'] == 75.0
    assert zed['completedModules'] == 0
    assert zed['totalModules'] == 2
    assert zed['averageQuizScore'] == 0


@pytest.mark.parametrize('body, field', [
    ({'moduleId': True, 'completed': True}, 'moduleId'),
    ({'moduleId': '1', 'completed': True}, 'moduleId'),
    ({'moduleId': 1.5, 'completed': True}, 'moduleId'),
    ({'moduleId': 2**70, 'completed': True}, 'moduleId'),
    ({'moduleId': 0, 'completed': True}, 'moduleId'),
    ({'moduleId': 1, 'completed': 1}, 'completed'),
    ({'moduleId': 1, 'completed': 'true'}, 'completed'),
    ({'moduleId': 1, 'completed': True, 'lastPosition': 2**40}, 'lastPosition'),
])
def test_progress_rejects_loosely_typed_or_oversized_values(app, student_client, module_id, body, field):
    response = student_client.post('/api/progress', json=body)
    assert response.status_code == 400
    assert response.get_json()['field'] == field
    assert _progress_rows(app) == []
