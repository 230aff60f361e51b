from django.urls import path

from studysessions.handlers.views import (
    AnalyticsView,
    CalendarView,
    DashboardView,
    FeedbackListView,
    ResourceListView,
    SessionDetailView,
    SessionListView,
    TimeSlotFinalizeView,
    TimeSlotListView,
    TimeSlotVoteView,
    UserDetailView,
    UserListView,
    UserSearchView,
    UserSessionListView,
)

urlpatterns = [
    path("sessions", SessionListView.as_view(), name="session-list"),
    path("sessions/user", UserSessionListView.as_view(), name="user-session-list"),
    path("sessions/<str:session_id>", SessionDetailView.as_view(), name="session-detail"),
    path(
        "sessions/<str:session_id>/timeslots",
        TimeSlotListView.as_view(),
        name="timeslot-list",
    ),
    path(
        "sessions/<str:session_id>/timeslots/<str:slot_id>/vote",
        TimeSlotVoteView.as_view(),
        name="timeslot-vote",
    ),
    path(
        "sessions/<str:session_id>/timeslots/<str:slot_id>/finalize",
        TimeSlotFinalizeView.as_view(),
        name="timeslot-finalize",
    ),
    path(
        "sessions/<str:session_id>/resources",
        ResourceListView.as_view(),
        name="resource-list",
    ),
    path(
        "sessions/<str:session_id>/feedback",
        FeedbackListView.as_view(),
        name="feedback-list",
    ),
    path("analytics", AnalyticsView.as_view(), name="analytics"),
    path("dashboard", DashboardView.as_view(), name="dashboard"),
    path("calendar", CalendarView.as_view(), name="calendar"),
    path("users", UserListView.as_view(), name="user-list"),
    path("users/search/<str:email>", UserSearchView.as_view(), name="user-search"),
    path("users/<str:user_id>", UserDetailView.as_view(), name="user-detail"),
]
