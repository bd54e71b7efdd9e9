"""
Comment Models - public discussion on products and the blog
Tables: Comments
"""
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from apps.core.models import BaseModel


class Comment(BaseModel):
    """
    User comment, optionally attached to a product and optionally a reply to
    another comment. Hidden from public listings once unapproved or flagged.
    """
    TYPE_CHOICES = [
        ('product_review', 'Product review'),
        ('general_comment', 'General comment'),
        ('blog_comment', 'Blog comment'),
    ]

    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='comments')
    product = models.ForeignKey(
        'catalog.Product', on_delete=models.CASCADE, related_name='comments', blank=True, null=True
    )
    parent = models.ForeignKey(
        'self', on_delete=models.CASCADE, related_name='replies', blank=True, null=True
    )
    content = models.CharField(max_length=1000)
    rating = models.PositiveSmallIntegerField(
        default=5, validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='product_review')
    is_approved = models.BooleanField(default=True)
    is_spam = models.BooleanField(default=False)

    class Meta:
        db_table = 'comments_comments'
        verbose_name = 'Comment'
        verbose_name_plural = 'Comments'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['product', '-created_at'], name='comments_product_idx'),
            models.Index(fields=['user', '-created_at'], name='comments_user_idx'),
            models.Index(fields=['is_approved'], name='comments_approved_idx'),
        ]

    def __str__(self):
        return f"{self.user_id}: {self.content[:40]}"

    @property
    def is_visible(self) -> bool:
        return self.is_approved and not self.is_spam
