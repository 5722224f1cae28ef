import pytest
from django.core.cache import cache
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from prakerin import realtime
from prakerin.models import (
    Account, ClassSection, Major, Student, SupervisingTeacher,
    ROLE_ADMIN, ROLE_KAPROG, ROLE_PRINCIPAL,
)


@pytest.fixture(autouse=True)
def clean_state():
    cache.clear()
    realtime.clear_subscribers()
    yield
    realtime.clear_subscribers()


@pytest.fixture
def rpl(db):
    return Major.objects.create(name='RPL')


@pytest.fixture
def tkj(db):
    return Major.objects.create(name='TKJ')


@pytest.fixture
def rpl_class(rpl):
    return ClassSection.objects.create(name='XI RPL 1', grade_level=11, major=rpl)


@pytest.fixture
def tkj_class(tkj):
    return ClassSection.objects.create(name='XI TKJ 1', grade_level=11, major=tkj)


@pytest.fixture
def budi(rpl_class):
    return Student.objects.create(nis='10234567', name='Budi', classroom=rpl_class, major=rpl_class.major)


@pytest.fixture
def siti(tkj_class):
    return Student.objects.create(nis='20234567', name='Siti', classroom=tkj_class, major=tkj_class.major)


@pytest.fixture
def admin_account(db):
    return Account.objects.create_user(username='admin', password='admin123', role=ROLE_ADMIN, name='Admin')


@pytest.fixture
def kaprog_rpl(db):
    return Account.objects.create_user(username='kaprog_rpl', password='secret123', role=ROLE_KAPROG, major_name='RPL')


@pytest.fixture
def kaprog_tkj(db):
    return Account.objects.create_user(username='kaprog_tkj', password='secret123', role=ROLE_KAPROG, major_name='TKJ')


@pytest.fixture
def principal(db):
    return Account.objects.create_user(username='kepsek', password='secret123', role=ROLE_PRINCIPAL)


@pytest.fixture
def rpl_teacher(rpl):
    return SupervisingTeacher.objects.create(name='Pak Andi', employee_number='1987001', major=rpl)


@pytest.fixture
def api_client_for():
    """Factory returning an APIClient authenticated with a JWT for ``account``."""
    def make(account):
        client = APIClient()
        token = RefreshToken.for_user(account)
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {token.access_token}')
        return client
    return make
