"""
Comment threads and moderation.
"""
import logging
from typing import Optional

from django.db.models import Prefetch, QuerySet

from apps.core.exceptions import NotFoundException, ValidationException
from .models import Comment

logger = logging.getLogger(__name__)


def visible_comments() -> QuerySet:
    return Comment.objects.filter(is_approved=True, is_spam=False)


def comments_for_product(product) -> QuerySet:
    """Approved top-level comments on ``product`` with their visible replies."""
    replies = Prefetch(
        'replies',
        queryset=visible_comments().select_related('user').order_by('created_at'),
    )
    return (
        visible_comments()
        .filter(product=product, parent__isnull=True)
        .select_related('user')
        .prefetch_related(replies)
    )


def create_comment(
    user,
    content: str,
    product=None,
    parent_id=None,
    rating: int = 5,
    type: str = 'product_review',
) -> Comment:
    """
    Post a comment. A reply must target an existing comment and always
    belongs to the same product as its parent.
    """
    content = (content or '').strip()
    if not content:
        raise ValidationException("Comment content is required", field="content")

    parent: Optional[Comment] = None
    if parent_id:
        parent = Comment.objects.filter(pk=parent_id).first()
        if parent is None:
            raise NotFoundException("Parent comment")
        if product is not None and parent.product_id != product.id:
            raise ValidationException("Parent comment belongs to another product", field="parent_id")
        product = parent.product

    comment = Comment.objects.create(
        user=user,
        product=product,
        parent=parent,
        content=content,
        rating=rating,
        type=type,
    )
    logger.info(f"Comment {comment.id} posted by {user.id}" + (f" in reply to {parent.id}" if parent else ""))
    return comment


def all_comments() -> QuerySet:
    return Comment.objects.select_related('user', 'product').order_by('-created_at')


def get_comment(comment_id) -> Comment:
    comment = Comment.objects.filter(pk=comment_id).first()
    if comment is None:
        raise NotFoundException("Comment")
    return comment


def set_approved(comment_id, is_approved: bool) -> Comment:
    comment = get_comment(comment_id)
    comment.is_approved = is_approved
    comment.save(update_fields=['is_approved', 'updated_at'])
    logger.info(f"Comment {comment.id} {'approved' if is_approved else 'unapproved'}")
    return comment


def set_spam(comment_id, is_spam: bool) -> Comment:
    comment = get_comment(comment_id)
    comment.is_spam = is_spam
    comment.save(update_fields=['is_spam', 'updated_at'])
    logger.info(f"Comment {comment.id} spam flag set to {is_spam}")
    return comment


def delete_comment(comment_id) -> None:
    """Delete a comment together with its replies."""
    comment = get_comment(comment_id)
    comment.delete()
    logger.info(f"Comment {comment_id} deleted")
