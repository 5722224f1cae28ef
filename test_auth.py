import pytest
from django.test import override_settings
from rest_framework.test import APIClient

from authentication.credentials import issue_credentials


def login(client, username, password, ip='10.0.0.1'):
    return client.post(
        '/auth/login/', {'username': username, 'password': password},
        format='json', HTTP_X_FORWARDED_FOR=ip,
    )


@pytest.mark.django_db
def test_login_returns_tokens_and_user(kaprog_rpl, rpl):
    response = login(APIClient(), 'kaprog_rpl', 'secret123')

    assert response.status_code == 200
    body = response.json()
    assert body['success'] is True
    assert body['user'] == {
        'id': kaprog_rpl.pk, 'name': 'kaprog_rpl', 'username': 'kaprog_rpl',
        'role': 'kaprog', 'major_name': 'RPL',
    }
    assert body['access'] and body['refresh']


@pytest.mark.django_db
def test_wrong_password_and_unknown_user_look_the_same(kaprog_rpl):
    client = APIClient()
    wrong_password = login(client, 'kaprog_rpl', 'nope')
    unknown_user = login(client, 'nobody', 'secret123')

    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json() == {
        'success': False, 'error': 'Username atau password salah',
    }


@pytest.mark.django_db
def test_malformed_input_is_rejected(db):
    client = APIClient()
    assert login(client, 'ab', 'x').status_code == 400
    assert login(client, 'bad name!', 'x').status_code == 400
    assert login(client, 'valid', 'x' * 129).status_code == 400
    assert login(client, 'valid', '').status_code == 400


@pytest.mark.django_db
def test_lockout_after_five_failures(kaprog_rpl):
    client = APIClient()
    for _ in range(5):
        assert login(client, 'kaprog_rpl', 'wrong').status_code == 401

    locked = login(client, 'kaprog_rpl', 'secret123')
    assert locked.status_code == 429
    assert 'Terlalu banyak percobaan gagal' in locked.json()['error']

    # Other clients are not affected
    assert login(client, 'kaprog_rpl', 'secret123', ip='10.0.0.2').status_code == 200


@pytest.mark.django_db
@override_settings(PRAKERIN_LOGIN_MAX_ATTEMPTS=2)
def test_success_resets_failure_count(kaprog_rpl):
    client = APIClient()
    assert login(client, 'kaprog_rpl', 'wrong').status_code == 401
    assert login(client, 'kaprog_rpl', 'secret123').status_code == 200
    assert login(client, 'kaprog_rpl', 'wrong').status_code == 401
    assert login(client, 'kaprog_rpl', 'secret123').status_code == 200


@pytest.mark.django_db
def test_teacher_logs_in_with_issued_credentials(rpl_teacher):
    issue_credentials(rpl_teacher, 'andi', '123456')
    response = login(APIClient(), 'andi', '123456')

    assert response.status_code == 200
    assert response.json()['user']['role'] == 'guru_pembimbing'
    assert response.json()['user']['major_name'] == 'RPL'


@pytest.mark.django_db
def test_token_endpoint_carries_role_claims(kaprog_rpl, rpl):
    response = APIClient().post('/auth/token/', {'username': 'kaprog_rpl', 'password': 'secret123'}, format='json')
    assert response.status_code == 200

    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.json()['access']}")
    verified = client.post('/auth/token/verify/')
    assert verified.status_code == 200
    assert verified.json()['role'] == 'kaprog'
    assert verified.json()['major_name'] == 'RPL'


@pytest.mark.django_db
def test_token_endpoint_shares_login_lockout(kaprog_rpl):
    client = APIClient()
    for _ in range(5):
        wrong = client.post(
            '/auth/token/', {'username': 'kaprog_rpl', 'password': 'wrong'},
            format='json', HTTP_X_FORWARDED_FOR='10.0.0.9',
        )
        assert wrong.status_code == 401
        assert wrong.json() == {'success': False, 'error': 'Username atau password salah'}

    locked = client.post(
        '/auth/token/', {'username': 'kaprog_rpl', 'password': 'secret123'},
        format='json', HTTP_X_FORWARDED_FOR='10.0.0.9',
    )
    assert locked.status_code == 429
    # The lockout is per IP, whichever endpoint counted the failures
    assert login(client, 'kaprog_rpl', 'secret123', ip='10.0.0.9').status_code == 429


@pytest.mark.django_db
def test_token_endpoint_refuses_teacher_without_profile(django_user_model):
    django_user_model.objects.create_user(username='orphan', password='secret123', role='guru_pembimbing')
    response = APIClient().post('/auth/token/', {'username': 'orphan', 'password': 'secret123'}, format='json')

    assert response.status_code == 401
    assert response.json()['error'] == 'Username atau password salah'


@pytest.mark.django_db
def test_session_refresh_sees_role_change(kaprog_rpl, rpl, api_client_for):
    client = api_client_for(kaprog_rpl)
    assert client.get('/auth/session/').json()['user']['major_name'] == 'RPL'

    kaprog_rpl.major_name = 'TKJ'
    kaprog_rpl.save()
    assert client.get('/auth/session/').json()['user']['major_name'] == 'TKJ'


@pytest.mark.django_db
def test_change_password(kaprog_rpl, api_client_for):
    client = api_client_for(kaprog_rpl)
    bad = client.post('/auth/password/', {'old_password': 'wrong', 'new_password': 'newsecret1'}, format='json')
    assert bad.status_code == 400
    ok = client.post('/auth/password/', {'old_password': 'secret123', 'new_password': 'newsecret1'}, format='json')
    assert ok.status_code == 200
    kaprog_rpl.refresh_from_db()
    assert kaprog_rpl.check_password('newsecret1')


@pytest.mark.django_db
def test_cookie_session_is_resolved_by_middleware(kaprog_rpl, rpl, client):
    client.force_login(kaprog_rpl)
    response = client.get('/api/dashboard/')

    assert response.status_code == 200
    assert response.wsgi_request.prakerin_session.major_name == 'RPL'
    assert response.json()['session']['role'] == 'kaprog'


@pytest.mark.django_db
def test_logout_ends_cookie_session(kaprog_rpl, client):
    client.force_login(kaprog_rpl)
    assert client.post('/auth/logout/').json() == {'success': True}
    assert client.get('/api/dashboard/').status_code in (401, 403)
