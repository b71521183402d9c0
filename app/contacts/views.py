"""
Contacts API views.

Endpoints:
    GET    /api/v1/contacts/            - List contacts with live profiles
    POST   /api/v1/contacts/            - Add a contact by mobile number
    PATCH  /api/v1/contacts/{user_id}/  - Rename a contact
    DELETE /api/v1/contacts/{user_id}/  - Remove a contact

All endpoints operate on the caller's own list only.
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.services import IdentityService
from contacts.serializers import (
    ContactCreateSerializer,
    ContactEntrySerializer,
    ContactListResponseSerializer,
    ContactRenameSerializer,
    ContactSerializer,
)
from contacts.services import ContactService
from core.services import ServiceResult
from core.views import service_failure_response


class ContactListView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="List contacts",
        tags=["Contacts"],
        responses={200: ContactListResponseSerializer},
    )
    def get(self, request):
        contacts = ContactService.list_with_profiles(request.user)
        return Response(
            {
                "contacts": ContactSerializer(contacts, many=True).data,
                "total": len(contacts),
            }
        )

    @extend_schema(
        summary="Add contact",
        description="Add a registered user to your contacts by mobile number.",
        tags=["Contacts"],
        request=ContactCreateSerializer,
        responses={201: ContactEntrySerializer},
    )
    def post(self, request):
        serializer = ContactCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        target = IdentityService.resolve_by_mobile(serializer.validated_data["mobile"])
        if target is None:
            return service_failure_response(
                ServiceResult.failure(
                    "User with this mobile number not found",
                    error_code="NOT_FOUND",
                )
            )

        result = ContactService.add(
            request.user, target, serializer.validated_data["name"]
        )
        if not result:
            return service_failure_response(result)

        return Response(
            ContactEntrySerializer(result.data).data,
            status=status.HTTP_201_CREATED,
        )


class ContactDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Rename contact",
        tags=["Contacts"],
        request=ContactRenameSerializer,
        responses={200: ContactEntrySerializer},
    )
    def patch(self, request, user_id):
        serializer = ContactRenameSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ContactService.rename(
            request.user, user_id, serializer.validated_data["name"]
        )
        if not result:
            return service_failure_response(result)

        return Response(ContactEntrySerializer(result.data).data)

    @extend_schema(
        summary="Remove contact",
        tags=["Contacts"],
        responses={204: None},
    )
    def delete(self, request, user_id):
        result = ContactService.remove(request.user, user_id)
        if not result:
            return service_failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)
