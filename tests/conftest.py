from __future__ import annotations

import json
from pathlib import Path

import pytest

from learnhub import create_app
from learnhub.extensions import db


class FakeAssistant:
    """Stands in for the llama.cpp model; replies are queued per test."""

    def __init__(self):
        self.replies = []
        self.error = None
        self.calls = []

    def queue(self, *replies):
        self.replies.extend(replies)

    def chat(self, messages, json_mode=False):
        self.calls.append({'messages': messages, 'json_mode': json_mode})
        if self.error is not None:
            raise self.error
        if not self.replies:
            return ''
        return self.replies.pop(0)


@pytest.fixture()
def app(tmp_path: Path):
    app = create_app(
        'learnhub.config.TestingConfig',
        overrides={'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'learnhub.db'}"},
    )
    app.extensions['assistant'] = FakeAssistant()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def assistant(app) -> FakeAssistant:
    return app.extensions['assistant']


@pytest.fixture()
def client(app):
    return app.test_client()


def register(client, username, role='student', name=None, password='password'):
    return client.post(
        '/api/register',
        json={
            'username': username,
            'password': password,
            'role': role,
            'name': name or username.title(),
        },
    )


@pytest.fixture()
def teacher_client(app):
    client = app.test_client()
    response = register(client, 'teacher', role='teacher', name='Mr. Teacher')
    assert response.status_code == 201
    return client


@pytest.fixture()
def student_client(app):
    client = app.test_client()
    response = register(client, 'alice', name='Alice Student')
    assert response.status_code == 201
    return client


@pytest.fixture()
def module_id(teacher_client) -> int:
    response = teacher_client.post(
        '/api/modules',
        json={
            'title': 'Photosynthesis',
            'description': 'How plants make food',
            'videoUrl': 'https://example.com/photosynthesis.mp4',
            'content': 'Plants convert light energy into chemical energy.',
            'order': 1,
        },
    )
    assert response.status_code == 201
    return response.get_json()['id']


SAMPLE_QUESTIONS = [
    {'question': 'What do plants absorb?', 'options': ['Light', 'Sound'], 'correctIndex': 0},
    {'question': 'Where does it happen?', 'options': ['Roots', 'Leaves', 'Stem'], 'correctIndex': 1},
]


@pytest.fixture()
def quiz_id(teacher_client, assistant, module_id) -> int:
    assistant.queue(json.dumps({'questions': SAMPLE_QUESTIONS}))
    response = teacher_client.post('/api/quizzes/generate', json={'moduleId': module_id})
    assert response.status_code == 201
    return response.get_json()['id']


@pytest.fixture()
def sample_questions():
    return [dict(q) for q in SAMPLE_QUESTIONS]
