"""Account API views."""

from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from modules.accounts.dtos import AccountOutputDTO
from modules.accounts.exceptions import AccountError
from modules.accounts.repositories.django_repository import UserDjangoRepository
from modules.accounts.serializers import RegisterSerializer
from modules.accounts.services import AccountService
from modules.core.responses import error_detail, error_response, success_response


class RegisterView(APIView):
    """POST /api/v1/auth/register/

    Public.  Returns the new account and a SimpleJWT token pair.
    """

    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_scope = "registration"

    def post(self, request: Request) -> Response:
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        service = AccountService(repository=UserDjangoRepository())
        try:
            user = service.register(serializer.to_dto())
        except AccountError as exc:
            return Response(
                error_response(
                    str(exc), [error_detail(exc.code, str(exc), field=exc.field)]
                ),
                status=status.HTTP_400_BAD_REQUEST,
            )

        refresh = RefreshToken.for_user(user)
        return Response(
            success_response(
                "User registered successfully",
                {
                    "user": AccountOutputDTO.from_entity(user).model_dump(
                        mode="json", by_alias=True
                    ),
                    "access": str(refresh.access_token),
                    "refresh": str(refresh),
                },
            ),
            status=status.HTTP_201_CREATED,
        )
