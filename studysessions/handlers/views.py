"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Let domain errors propagate to the exception handler
- Never contain business logic
- Never expose internal error details
"""

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from studysessions.handlers.serializers import (
    AddResourceSerializer,
    AnalyticsSummarySerializer,
    CalendarMonthSerializer,
    CalendarQuerySerializer,
    CreateSessionSerializer,
    DashboardSerializer,
    ProposeTimeSlotSerializer,
    SessionSerializer,
    SubmitFeedbackSerializer,
    UserRefSerializer,
)
from studysessions.services import SessionService, UserService
from studysessions.stores.django_store import DjangoSessionStore, DjangoUserStore, to_user_ref


class SessionAPIView(APIView):
    """Base view wiring the session service to the Django stores."""

    def get_service(self) -> SessionService:
        return SessionService(DjangoSessionStore(), DjangoUserStore())

    def render_session(self, service: SessionService, session, status_code=status.HTTP_200_OK) -> Response:
        data = SessionSerializer(session, context={"now": service.now()}).data
        return Response(data, status=status_code)


class SessionListView(SessionAPIView):
    """Handler for GET/POST /api/sessions"""

    def get(self, request: Request) -> Response:
        service = self.get_service()
        sessions = service.list_sessions()
        return Response(SessionSerializer(sessions, many=True, context={"now": service.now()}).data)

    def post(self, request: Request) -> Response:
        payload = CreateSessionSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        service = self.get_service()
        session = service.create_session(
            host=to_user_ref(request.user),
            title=payload.validated_data["title"],
            description=payload.validated_data["description"],
            subject=payload.validated_data["subject"],
            participant_emails=payload.validated_data["participants"],
        )
        return self.render_session(service, session, status.HTTP_201_CREATED)


class UserSessionListView(SessionAPIView):
    """Handler for GET /api/sessions/user"""

    def get(self, request: Request) -> Response:
        service = self.get_service()
        sessions = service.list_sessions_for_user(to_user_ref(request.user))
        return Response(SessionSerializer(sessions, many=True, context={"now": service.now()}).data)


class SessionDetailView(SessionAPIView):
    """Handler for GET /api/sessions/{session_id}"""

    def get(self, request: Request, session_id: str) -> Response:
        service = self.get_service()
        return self.render_session(service, service.get_session(session_id))


class TimeSlotListView(SessionAPIView):
    """Handler for POST /api/sessions/{session_id}/timeslots"""

    def post(self, request: Request, session_id: str) -> Response:
        payload = ProposeTimeSlotSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        service = self.get_service()
        session = service.propose_time_slot(
            session_id,
            to_user_ref(request.user),
            start_time=payload.validated_data["startTime"],
            end_time=payload.validated_data["endTime"],
            location=payload.validated_data["location"],
        )
        return self.render_session(service, session, status.HTTP_201_CREATED)


class TimeSlotVoteView(SessionAPIView):
    """Handler for POST /api/sessions/{session_id}/timeslots/{slot_id}/vote"""

    def post(self, request: Request, session_id: str, slot_id: str) -> Response:
        service = self.get_service()
        session = service.vote_for_time_slot(session_id, to_user_ref(request.user), slot_id)
        return self.render_session(service, session)


class TimeSlotFinalizeView(SessionAPIView):
    """Handler for POST /api/sessions/{session_id}/timeslots/{slot_id}/finalize"""

    def post(self, request: Request, session_id: str, slot_id: str) -> Response:
        service = self.get_service()
        session = service.finalize_time_slot(session_id, to_user_ref(request.user), slot_id)
        return self.render_session(service, session)


class ResourceListView(SessionAPIView):
    """Handler for POST /api/sessions/{session_id}/resources"""

    def post(self, request: Request, session_id: str) -> Response:
        payload = AddResourceSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        service = self.get_service()
        session = service.add_resource(
            session_id,
            to_user_ref(request.user),
            title=payload.validated_data["title"],
            resource_type=payload.validated_data["type"],
            url=payload.validated_data["url"],
            description=payload.validated_data["description"],
        )
        return self.render_session(service, session, status.HTTP_201_CREATED)


class FeedbackListView(SessionAPIView):
    """Handler for POST /api/sessions/{session_id}/feedback"""

    def post(self, request: Request, session_id: str) -> Response:
        payload = SubmitFeedbackSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        service = self.get_service()
        session = service.submit_feedback(
            session_id,
            to_user_ref(request.user),
            rating=payload.validated_data["rating"],
            comment=payload.validated_data["comment"],
        )
        return self.render_session(service, session, status.HTTP_201_CREATED)


class AnalyticsView(SessionAPIView):
    """Handler for GET /api/analytics"""

    def get(self, request: Request) -> Response:
        summary = self.get_service().get_analytics(to_user_ref(request.user))
        return Response(AnalyticsSummarySerializer(summary).data)


class DashboardView(SessionAPIView):
    """Handler for GET /api/dashboard"""

    def get(self, request: Request) -> Response:
        service = self.get_service()
        groups = service.get_dashboard(to_user_ref(request.user))
        return Response(DashboardSerializer(groups, context={"now": service.now()}).data)


class CalendarView(SessionAPIView):
    """Handler for GET /api/calendar?year=&month="""

    def get(self, request: Request) -> Response:
        query = CalendarQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        service = self.get_service()
        today = service.now()
        month = service.get_calendar(
            to_user_ref(request.user),
            year=query.validated_data.get("year", today.year),
            month=query.validated_data.get("month", today.month),
        )
        return Response(CalendarMonthSerializer(month, context={"now": today}).data)


class UserListView(APIView):
    """Handler for GET /api/users"""

    def get(self, request: Request) -> Response:
        users = UserService(DjangoUserStore()).list_users()
        return Response(UserRefSerializer(users, many=True).data)


class UserDetailView(APIView):
    """Handler for GET /api/users/{user_id}"""

    def get(self, request: Request, user_id: str) -> Response:
        user = UserService(DjangoUserStore()).get_user(user_id)
        return Response(UserRefSerializer(user).data)


class UserSearchView(APIView):
    """Handler for GET /api/users/search/{email}"""

    def get(self, request: Request, email: str) -> Response:
        users = UserService(DjangoUserStore()).search_users(email)
        return Response(UserRefSerializer(users, many=True).data)
