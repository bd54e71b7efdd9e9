"""
Endpoints for the logged-in customer's own account.
"""
import logging

from drf_spectacular.utils import extend_schema
from rest_framework.views import APIView

from apps.accounts import services as accounts
from ..serializers import (
    ImpactSerializer,
    ImpactUpdateSerializer,
    ProfileUpdateSerializer,
    UserSerializer,
    UserStatsSerializer,
)
from .base import success

logger = logging.getLogger(__name__)


class MeView(APIView):

    @extend_schema(responses={200: UserSerializer}, description="Current user's account")
    def get(self, request):
        return success(user=UserSerializer(request.user).data)


class ProfileView(APIView):

    @extend_schema(
        request=ProfileUpdateSerializer,
        responses={200: UserSerializer},
        description="Update name, phone or address",
    )
    def put(self, request):
        serializer = ProfileUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        user = accounts.update_profile(
            request.user,
            name=data.get('name'),
            phone=data.get('phone'),
            address=data.get('address'),
        )
        logger.info(f"Profile updated for {user.id}")
        return success("Profile updated", user=UserSerializer(user).data)


class ImpactView(APIView):
    """
    Environmental impact counters. Recording impact also earns loyalty
    points (one per kilogram of CO2).
    """

    @extend_schema(responses={200: ImpactSerializer}, description="Current impact counters")
    def get(self, request):
        return success(impact=ImpactSerializer(request.user).data)

    @extend_schema(
        request=ImpactUpdateSerializer,
        responses={200: ImpactSerializer},
        description="Add to the impact counters",
    )
    def put(self, request):
        serializer = ImpactUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        user = accounts.record_impact(
            request.user, data['co2_saved'], data['water_saved'], data['oranges_recycled']
        )
        logger.info(f"Impact recorded for {user.id}: co2={data['co2_saved']} water={data['water_saved']}")
        return success("Impact updated", impact=ImpactSerializer(user).data)


class UserStatsView(APIView):

    @extend_schema(responses={200: UserStatsSerializer}, description="Achievements and tier progress")
    def get(self, request):
        return success(stats=UserStatsSerializer(request.user).data)
