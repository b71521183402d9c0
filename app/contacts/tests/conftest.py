"""
Fixtures for contacts tests.
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory


@pytest.fixture
def owner(db):
    return UserFactory(name="Owner")


@pytest.fixture
def friend(db):
    return UserFactory(name="Friend", mobile="5557770001")


@pytest.fixture
def another_friend(db):
    return UserFactory(name="Another Friend", mobile="5557770002")


@pytest.fixture
def authenticated_client(owner):
    """API client authenticated as `owner`."""
    client = APIClient()
    refresh = RefreshToken.for_user(owner)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client
