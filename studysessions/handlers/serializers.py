"""Serializers for transforming domain models to API responses.

Output field names are the stable camelCase keys the frontend reads.
Input serializers only check payload shape; domain rules (time ranges,
rating bounds, resource requirements) are enforced by the services.
"""

from django.utils import timezone
from rest_framework import serializers

from studysessions.domain.lifecycle import derive_state
from studysessions.domain.models import Resource


class UserRefSerializer(serializers.Serializer):
    """Serializer for UserRef value objects."""

    id = serializers.IntegerField()
    name = serializers.CharField()
    email = serializers.CharField()


class VoteSerializer(serializers.Serializer):
    user = UserRefSerializer()
    createdAt = serializers.DateTimeField(source="created_at")


class TimeSlotSerializer(serializers.Serializer):
    """Serializer for TimeSlot domain model."""

    id = serializers.UUIDField(source="id.value")
    startTime = serializers.DateTimeField(source="start_time")
    endTime = serializers.DateTimeField(source="end_time")
    location = serializers.CharField(allow_null=True)
    proposedBy = UserRefSerializer(source="proposed_by")
    votes = VoteSerializer(many=True)
    createdAt = serializers.DateTimeField(source="created_at")


class ResourceSerializer(serializers.Serializer):
    """Serializer for Resource domain model."""

    id = serializers.UUIDField(source="id.value")
    title = serializers.CharField()
    type = serializers.SerializerMethodField()
    url = serializers.CharField(allow_null=True)
    description = serializers.CharField(allow_null=True)
    user = UserRefSerializer()
    createdAt = serializers.DateTimeField(source="created_at")

    def get_type(self, obj: Resource) -> str:
        return obj.type.value


class FeedbackSerializer(serializers.Serializer):
    """Serializer for Feedback domain model."""

    id = serializers.UUIDField(source="id.value")
    rating = serializers.IntegerField()
    comment = serializers.CharField(allow_null=True)
    user = UserRefSerializer()
    createdAt = serializers.DateTimeField(source="created_at")


class SessionSerializer(serializers.Serializer):
    """Serializer for Session domain model.

    ``state`` is derived at render time from the ``now`` in the context.
    """

    id = serializers.UUIDField(source="id.value")
    title = serializers.CharField()
    description = serializers.CharField()
    subject = serializers.CharField(allow_null=True)
    host = UserRefSerializer()
    participants = UserRefSerializer(many=True)
    timeSlots = TimeSlotSerializer(source="time_slots", many=True)
    finalizedSlot = TimeSlotSerializer(source="finalized_slot", allow_null=True)
    resources = ResourceSerializer(many=True)
    feedback = FeedbackSerializer(many=True)
    state = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at", allow_null=True)

    def get_state(self, obj) -> str:
        now = self.context.get("now") or timezone.now()
        return derive_state(obj, now).value


class SubjectCountSerializer(serializers.Serializer):
    subject = serializers.CharField()
    count = serializers.IntegerField()


class MonthlyActivitySerializer(serializers.Serializer):
    month = serializers.CharField()
    count = serializers.IntegerField()


class AnalyticsSummarySerializer(serializers.Serializer):
    """Serializer for AnalyticsSummary."""

    totalSessions = serializers.IntegerField(source="total_sessions")
    completedSessions = serializers.IntegerField(source="completed_sessions")
    averageRating = serializers.FloatField(source="average_rating")
    topSubjects = SubjectCountSerializer(source="top_subjects", many=True)
    averageDuration = serializers.FloatField(source="average_duration")
    participationRate = serializers.IntegerField(source="participation_rate")
    monthlyActivity = MonthlyActivitySerializer(source="monthly_activity", many=True)


class DashboardSerializer(serializers.Serializer):
    upcoming = SessionSerializer(many=True)
    pending = SessionSerializer(many=True)
    new = SessionSerializer(many=True)


class CalendarDaySerializer(serializers.Serializer):
    day = serializers.IntegerField()
    sessions = SessionSerializer(many=True)


class CalendarMonthSerializer(serializers.Serializer):
    year = serializers.IntegerField()
    month = serializers.IntegerField()
    days = CalendarDaySerializer(many=True)
    upcoming = SessionSerializer(many=True)


class CreateSessionSerializer(serializers.Serializer):
    """Payload for POST /api/sessions."""

    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    subject = serializers.CharField(
        max_length=255, required=False, allow_blank=True, allow_null=True, default=None
    )
    participants = serializers.ListField(
        child=serializers.EmailField(), required=False, default=list
    )


class ProposeTimeSlotSerializer(serializers.Serializer):
    """Payload for POST /api/sessions/{id}/timeslots."""

    startTime = serializers.DateTimeField()
    endTime = serializers.DateTimeField()
    location = serializers.CharField(
        max_length=255, required=False, allow_blank=True, allow_null=True, default=None
    )


class AddResourceSerializer(serializers.Serializer):
    """Payload for POST /api/sessions/{id}/resources."""

    title = serializers.CharField(max_length=255, allow_blank=True)
    type = serializers.CharField(required=False, default="link")
    url = serializers.CharField(
        max_length=500, required=False, allow_blank=True, allow_null=True, default=None
    )
    description = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=None
    )


class SubmitFeedbackSerializer(serializers.Serializer):
    """Payload for POST /api/sessions/{id}/feedback."""

    rating = serializers.IntegerField()
    comment = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=None
    )


class CalendarQuerySerializer(serializers.Serializer):
    """Query string for GET /api/calendar."""

    year = serializers.IntegerField(required=False, min_value=1, max_value=9999)
    month = serializers.IntegerField(required=False, min_value=1, max_value=12)
