"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
"""

import uuid

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone


class StudySession(models.Model):
    """Persistence model for study sessions."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    subject = models.CharField(max_length=255, blank=True, null=True)
    host = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="hosted_study_sessions",
    )
    participants = models.ManyToManyField(
        settings.AUTH_USER_MODEL, related_name="study_sessions", blank=True
    )
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="studysession_created_idx"),
        ]

    def __str__(self) -> str:
        return self.title


class TimeSlot(models.Model):
    """Persistence model for proposed time slots."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    session = models.ForeignKey(
        StudySession, on_delete=models.CASCADE, related_name="time_slots"
    )
    position = models.PositiveIntegerField()
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    location = models.CharField(max_length=255, blank=True, null=True)
    proposed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="+"
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["position"]

    def __str__(self) -> str:
        return f"{self.session.title} - {self.start_time}"


class Vote(models.Model):
    """Persistence model for a vote on a time slot."""

    time_slot = models.ForeignKey(TimeSlot, on_delete=models.CASCADE, related_name="votes")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="+"
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(fields=["time_slot", "user"], name="unique_vote_per_slot"),
        ]


class FinalizedSlot(models.Model):
    """Snapshot of the time slot the host confirmed."""

    session = models.OneToOneField(
        StudySession, on_delete=models.CASCADE, related_name="finalized_slot"
    )
    slot_id = models.UUIDField()
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    location = models.CharField(max_length=255, blank=True, null=True)
    proposed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="+"
    )
    created_at = models.DateTimeField(default=timezone.now)

    def __str__(self) -> str:
        return f"{self.session.title} @ {self.start_time}"


class FinalizedVote(models.Model):
    """Vote frozen into a finalized slot snapshot."""

    finalized_slot = models.ForeignKey(
        FinalizedSlot, on_delete=models.CASCADE, related_name="votes"
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="+"
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["id"]


class Resource(models.Model):
    """Persistence model for shared study material."""

    class Type(models.TextChoices):
        LINK = "link"
        NOTE = "note"
        PDF = "pdf"
        OTHER = "other"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    session = models.ForeignKey(
        StudySession, on_delete=models.CASCADE, related_name="resources"
    )
    position = models.PositiveIntegerField()
    title = models.CharField(max_length=255)
    type = models.CharField(max_length=10, choices=Type.choices, default=Type.LINK)
    url = models.URLField(max_length=500, blank=True, null=True)
    description = models.TextField(blank=True, null=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="+"
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["position"]

    def __str__(self) -> str:
        return self.title


class Feedback(models.Model):
    """Persistence model for post-session feedback."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    session = models.ForeignKey(
        StudySession, on_delete=models.CASCADE, related_name="feedback"
    )
    position = models.PositiveIntegerField()
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    comment = models.TextField(blank=True, null=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="+"
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(fields=["session", "user"], name="unique_feedback_per_user"),
        ]

    def __str__(self) -> str:
        return f"{self.rating} - {self.session.title}"
