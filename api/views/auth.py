"""
Signup, login and token verification.
"""
import hmac
import logging

from django.conf import settings
from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView

from apps.accounts import services as accounts
from apps.accounts.tokens import issue_token
from apps.core.exceptions import PermissionDeniedException
from ..serializers import (
    AuthResponseSerializer,
    CreateAdminSerializer,
    LoginSerializer,
    SignupSerializer,
    UserSerializer,
)
from .base import success

logger = logging.getLogger(__name__)


class SignupView(APIView):
    """
    Create a customer account and return a bearer token for it.
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        request=SignupSerializer,
        responses={201: AuthResponseSerializer},
        description="Register a new customer account",
        examples=[
            OpenApiExample(
                "Signup",
                value={"name": "Amina Benali", "email": "amina@example.com", "password": "Citrus2024"},
                request_only=True,
            ),
        ],
    )
    def post(self, request):
        serializer = SignupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        user = accounts.register_user(data['name'], data['email'], data['password'])
        return success(
            "Account created",
            status.HTTP_201_CREATED,
            token=issue_token(user),
            user=UserSerializer(user).data,
        )


class LoginView(APIView):
    """
    Exchange credentials for a bearer token.

    Repeated failures lock the account for a while (423).
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        request=LoginSerializer,
        responses={200: AuthResponseSerializer},
        description="Log in with email and password",
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        user = accounts.authenticate(data['email'], data['password'])
        return success(
            "Login successful",
            token=issue_token(user),
            user=UserSerializer(user).data,
        )


class VerifyTokenView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: UserSerializer}, description="Check the token and return its user")
    def get(self, request):
        return success(user=UserSerializer(request.user).data)


class LogoutView(APIView):
    """
    Tokens are stateless; the client discards its copy.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(request=None, responses={200: None}, description="Log out")
    def post(self, request):
        logger.info(f"User {request.user.id} logged out")
        return success("Logged out")


class CreateAdminView(APIView):
    """
    Bootstrap an admin account. Requires a logged-in caller and the
    ADMIN_SECRET configured on the server.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(
        request=CreateAdminSerializer,
        responses={201: UserSerializer},
        description="Create an admin account using the admin secret",
    )
    def post(self, request):
        serializer = CreateAdminSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        expected = settings.ADMIN_SECRET
        if not expected or not hmac.compare_digest(data['admin_secret'].encode(), expected.encode()):
            logger.warning(f"User {request.user.id} supplied a wrong admin secret")
            raise PermissionDeniedException("Invalid admin secret")

        admin = accounts.create_admin(data['name'], data['email'], data['password'])
        logger.info(f"Admin {admin.id} created by {request.user.id}")
        return success("Admin created", status.HTTP_201_CREATED, user=UserSerializer(admin).data)
