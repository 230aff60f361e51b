from django.contrib import admin

from studysessions.models import Feedback, Resource, StudySession, TimeSlot, Vote


class TimeSlotInline(admin.TabularInline):
    model = TimeSlot
    extra = 0


class ResourceInline(admin.TabularInline):
    model = Resource
    extra = 0


class FeedbackInline(admin.TabularInline):
    model = Feedback
    extra = 0


class VoteInline(admin.TabularInline):
    model = Vote
    extra = 0


@admin.register(StudySession)
class StudySessionAdmin(admin.ModelAdmin):
    list_display = ["title", "subject", "host", "created_at"]
    search_fields = ["title", "subject"]
    inlines = [TimeSlotInline, ResourceInline, FeedbackInline]


@admin.register(TimeSlot)
class TimeSlotAdmin(admin.ModelAdmin):
    list_display = ["session", "start_time", "end_time", "location"]
    list_filter = ["session"]
    inlines = [VoteInline]


@admin.register(Feedback)
class FeedbackAdmin(admin.ModelAdmin):
    list_display = ["session", "user", "rating", "created_at"]
    list_filter = ["rating"]
