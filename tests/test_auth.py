from learnhub.extensions import db
from learnhub.models import User


def _user_count(app):
    with app.app_context():
        return db.session.query(User).count()


def test_register_logs_in_and_hides_password(client):
    response = client.post(
        '/api/register',
        json={'username': 'bob', 'password': 'secret', 'role': 'teacher', 'name': 'Bob'},
    )
    assert response.status_code == 201
    user = response.get_json()
    assert user['username'] == 'bob'
    assert user['role'] == 'teacher'
    assert 'password' not in user

    me = client.get('/api/user')
    assert me.status_code == 200
    assert me.get_json()['id'] == user['id']


def test_register_defaults_to_student(client):
    response = client.post('/api/register', json={'username': 'sam', 'password': 'pw', 'name': 'Sam'})
    assert response.status_code == 201
    assert response.get_json()['role'] == 'student'


def test_duplicate_username_is_rejected_without_new_row(app, client):
    payload = {'username': 'bob', 'password': 'secret', 'role': 'student', 'name': 'Bob'}
    assert client.post('/api/register', json=payload).status_code == 201
    before = _user_count(app)

    other = app.test_client()
    response = other.post('/api/register', json=dict(payload, name='Other Bob'))
    assert response.status_code == 400
    assert response.get_json() == {'message': 'Username already exists'}
    assert _user_count(app) == before


def test_register_validation_reports_field(client):
    response = client.post(
        '/api/register',
        json={'username': 'bob', 'password': 'secret', 'role': 'admin', 'name': 'Bob'},
    )
    assert response.status_code == 400
    body = response.get_json()
    assert body['field'] == 'role'
    assert body['message']


def test_register_without_body_is_400(client):
    response = client.post('/api/register', data='not json', content_type='text/plain')
    assert response.status_code == 400


def test_login_and_logout(app, client):
    client.post('/api/register', json={'username': 'bob', 'password': 'secret', 'name': 'Bob'})
    client.post('/api/logout')
    assert client.get('/api/user').status_code == 401

    fresh = app.test_client()
    response = fresh.post('/api/login', json={'username': 'bob', 'password': 'secret'})
    assert response.status_code == 200
    assert response.get_json()['username'] == 'bob'
    assert fresh.get('/api/user').status_code == 200

    response = fresh.post('/api/logout')
    assert response.status_code == 200
    assert response.get_json() == {'message': 'Logged out'}
    assert fresh.get('/api/user').status_code == 401


def test_login_with_bad_credentials_is_401(client):
    client.post('/api/register', json={'username': 'bob', 'password': 'secret', 'name': 'Bob'})
    client.post('/api/logout')

    wrong_password = client.post('/api/login', json={'username': 'bob', 'password': 'nope'})
    assert wrong_password.status_code == 401
    assert wrong_password.get_json()['message'] == 'Invalid username or password'

    unknown = client.post('/api/login', json={'username': 'ghost', 'password': 'secret'})
    assert unknown.status_code == 401


def test_me_without_session_is_401(client):
    response = client.get('/api/user')
    assert response.status_code == 401
    assert response.get_json() == {'message': 'Unauthorized'}


def test_protected_route_without_session_is_401(client):
    response = client.get('/api/modules')
    assert response.status_code == 401
    assert response.get_json() == {'message': 'Unauthorized'}


def test_password_whitespace_is_significant(app, client):
    response = client.post(
        '/api/register',
        json={'username': 'padded', 'password': ' secret ', 'name': 'Padded'},
    )
    assert response.status_code == 201
    client.post('/api/logout')

    trimmed = client.post('/api/login', json={'username': 'padded', 'password': 'secret'})
    assert trimmed.status_code == 401

    exact = client.post('/api/login', json={'username': 'padded', 'password': ' secret '})
    assert exact.status_code == 200


def test_all_space_password_is_accepted(client):
    response = client.post('/api/register', json={'username': 'spacey', 'password': '   ', 'name': 'Spacey'})
    assert response.status_code == 201
    client.post('/api/logout')

    assert client.post('/api/login', json={'username': 'spacey', 'password': '   '}).status_code == 200
