"""
General comments (blog and site-wide) and replies.
"""
import logging

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.views import APIView

from apps.catalog import services as catalog
from apps.comments import services as comments
from ..serializers import CommentCreateSerializer, CommentSerializer
from .base import success

logger = logging.getLogger(__name__)


class CommentCreateView(APIView):

    @extend_schema(
        request=CommentCreateSerializer,
        responses={201: CommentSerializer},
        description="Post a comment, optionally on a product or as a reply",
    )
    def post(self, request):
        serializer = CommentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        product = None
        if data.get('product_id'):
            product = catalog.get_product(data['product_id'], active_only=True)

        comment = comments.create_comment(
            request.user,
            data['content'],
            product=product,
            parent_id=data.get('parent_id'),
            rating=data['rating'],
            type=data['type'],
        )
        return success("Comment posted", status.HTTP_201_CREATED, comment=CommentSerializer(comment).data)
