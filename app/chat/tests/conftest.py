"""
Test configuration and fixtures for chat tests.

This module provides:
- User fixtures (alice, bob, carol, and an outsider)
- Chat fixtures (individual and group)
- API client helpers for authenticated requests

Usage:
    def test_example(group_chat, alice_client):
        response = alice_client.get(f"/api/v1/chats/{group_chat.pk}/")
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from chat.tests.factories import GroupChatFactory, IndividualChatFactory


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def alice(db):
    """Group admin in group_chat, first member of individual_chat."""
    return UserFactory(name="Alice", mobile="5552220001")


@pytest.fixture
def bob(db):
    return UserFactory(name="Bob", mobile="5552220002")


@pytest.fixture
def carol(db):
    return UserFactory(name="Carol", mobile="5552220003")


@pytest.fixture
def outsider(db):
    """A user who is not a member of any test chat."""
    return UserFactory(name="Outsider", mobile="5552220009")


# =============================================================================
# Chat Fixtures
# =============================================================================


@pytest.fixture
def individual_chat(alice, bob):
    return IndividualChatFactory(members=[alice, bob])


@pytest.fixture
def group_chat(alice, bob, carol):
    """Group "Team" administered by alice with bob and carol."""
    return GroupChatFactory(group_name="Team", admin=alice, members=[bob, carol])


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def client_for():
    """Return a function building an API client authenticated as a user."""

    def make_client(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
        return client

    return make_client


@pytest.fixture
def alice_client(client_for, alice):
    return client_for(alice)


@pytest.fixture
def bob_client(client_for, bob):
    return client_for(bob)


@pytest.fixture
def outsider_client(client_for, outsider):
    return client_for(outsider)
