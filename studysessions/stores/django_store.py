"""Django ORM implementation of the session and user stores."""

from collections.abc import Callable, Iterable

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import Q

from studysessions import models
from studysessions.domain import (
    Feedback,
    FeedbackId,
    Resource,
    ResourceId,
    ResourceType,
    Session,
    SessionId,
    TimeSlot,
    TimeSlotId,
    UserRef,
    Vote,
)
from studysessions.domain.errors import DuplicateFeedbackError
from studysessions.stores.interfaces import SessionStore, UserStore


def to_user_ref(user) -> UserRef:
    return UserRef(id=user.pk, name=user.get_full_name() or user.username, email=user.email)


def _to_votes(records) -> tuple[Vote, ...]:
    return tuple(Vote(user=to_user_ref(v.user), created_at=v.created_at) for v in records)


def _to_time_slot(record: models.TimeSlot) -> TimeSlot:
    return TimeSlot(
        id=TimeSlotId(value=record.id),
        start_time=record.start_time,
        end_time=record.end_time,
        proposed_by=to_user_ref(record.proposed_by),
        created_at=record.created_at,
        location=record.location,
        votes=_to_votes(record.votes.all()),
    )


def _to_finalized_slot(record: models.FinalizedSlot) -> TimeSlot:
    return TimeSlot(
        id=TimeSlotId(value=record.slot_id),
        start_time=record.start_time,
        end_time=record.end_time,
        proposed_by=to_user_ref(record.proposed_by),
        created_at=record.created_at,
        location=record.location,
        votes=_to_votes(record.votes.all()),
    )


def _to_session(record: models.StudySession) -> Session:
    try:
        finalized = _to_finalized_slot(record.finalized_slot)
    except models.FinalizedSlot.DoesNotExist:
        finalized = None

    return Session(
        id=SessionId(value=record.id),
        title=record.title,
        host=to_user_ref(record.host),
        created_at=record.created_at,
        description=record.description,
        subject=record.subject,
        participants=tuple(to_user_ref(user) for user in record.participants.all()),
        time_slots=tuple(_to_time_slot(slot) for slot in record.time_slots.all()),
        finalized_slot=finalized,
        resources=tuple(
            Resource(
                id=ResourceId(value=r.id),
                title=r.title,
                type=ResourceType(r.type),
                user=to_user_ref(r.user),
                created_at=r.created_at,
                url=r.url,
                description=r.description,
            )
            for r in record.resources.all()
        ),
        feedback=tuple(
            Feedback(
                id=FeedbackId(value=f.id),
                rating=f.rating,
                user=to_user_ref(f.user),
                created_at=f.created_at,
                comment=f.comment,
            )
            for f in record.feedback.all()
        ),
        updated_at=record.updated_at,
    )


class DjangoSessionStore(SessionStore):
    """Relational session store using the Django ORM."""

    def _queryset(self):
        return models.StudySession.objects.select_related(
            "host", "finalized_slot__proposed_by"
        ).prefetch_related(
            "participants",
            "time_slots__proposed_by",
            "time_slots__votes__user",
            "finalized_slot__votes__user",
            "resources__user",
            "feedback__user",
        )

    def list_sessions(self) -> list[Session]:
        return [_to_session(record) for record in self._queryset()]

    def list_sessions_for_user(self, user_id: int) -> list[Session]:
        records = self._queryset().filter(Q(host_id=user_id) | Q(participants__id=user_id)).distinct()
        return [_to_session(record) for record in records]

    def get_session(self, session_id: SessionId) -> Session | None:
        record = self._queryset().filter(pk=session_id.value).first()
        return _to_session(record) if record is not None else None

    def create_session(
        self,
        title: str,
        description: str,
        subject: str | None,
        host: UserRef,
        participants: Iterable[UserRef],
    ) -> Session:
        with transaction.atomic():
            record = models.StudySession.objects.create(
                title=title,
                description=description,
                subject=subject,
                host_id=host.id,
            )
            record.participants.set([user.id for user in participants])
        return self.get_session(SessionId(value=record.id))

    def save_session(self, session: Session) -> Session:
        with transaction.atomic():
            record = models.StudySession.objects.select_for_update().get(pk=session.id.value)
            self._write(record, session)
        return self.get_session(session.id)

    def update_session(
        self, session_id: SessionId, change: Callable[[Session], Session]
    ) -> Session | None:
        with transaction.atomic():
            record = models.StudySession.objects.select_for_update().filter(pk=session_id.value).first()
            if record is None:
                return None
            updated = change(self.get_session(session_id))
            self._write(record, updated)
        return self.get_session(session_id)

    def _write(self, record: models.StudySession, session: Session) -> None:
        record.title = session.title
        record.description = session.description
        record.subject = session.subject
        record.save(update_fields=["title", "description", "subject", "updated_at"])
        record.participants.set([user.id for user in session.participants])

        self._save_time_slots(record, session.time_slots)
        self._save_finalized_slot(record, session.finalized_slot)
        self._save_resources(record, session.resources)
        self._save_feedback(record, session.feedback)

    def _save_time_slots(self, record: models.StudySession, slots: tuple[TimeSlot, ...]) -> None:
        # Stored slots keep their position; new ones are appended after them.
        positions = dict(record.time_slots.values_list("id", "position"))
        next_position = max(positions.values(), default=-1) + 1
        for slot in slots:
            position = positions.get(slot.id.value)
            if position is None:
                position, next_position = next_position, next_position + 1
            slot_record, _ = models.TimeSlot.objects.update_or_create(
                id=slot.id.value,
                defaults={
                    "session": record,
                    "position": position,
                    "start_time": slot.start_time,
                    "end_time": slot.end_time,
                    "location": slot.location,
                    "proposed_by_id": slot.proposed_by.id,
                    "created_at": slot.created_at,
                },
            )
            slot_record.votes.all().delete()
            models.Vote.objects.bulk_create(
                models.Vote(time_slot=slot_record, user_id=vote.user.id, created_at=vote.created_at)
                for vote in slot.votes
            )

    def _save_finalized_slot(self, record: models.StudySession, slot: TimeSlot | None) -> None:
        # No operation clears a finalized slot, so None leaves the stored one alone.
        if slot is None:
            return
        models.FinalizedSlot.objects.filter(session=record).delete()
        snapshot = models.FinalizedSlot.objects.create(
            session=record,
            slot_id=slot.id.value,
            start_time=slot.start_time,
            end_time=slot.end_time,
            location=slot.location,
            proposed_by_id=slot.proposed_by.id,
            created_at=slot.created_at,
        )
        models.FinalizedVote.objects.bulk_create(
            models.FinalizedVote(finalized_slot=snapshot, user_id=vote.user.id, created_at=vote.created_at)
            for vote in slot.votes
        )

    def _save_resources(self, record: models.StudySession, resources: tuple[Resource, ...]) -> None:
        # Resources are append-only; only rows not yet stored are inserted.
        stored = set(record.resources.values_list("id", flat=True))
        new = [resource for resource in resources if resource.id.value not in stored]
        models.Resource.objects.bulk_create(
            models.Resource(
                id=resource.id.value,
                session=record,
                position=position,
                title=resource.title,
                type=resource.type.value,
                url=resource.url,
                description=resource.description,
                user_id=resource.user.id,
                created_at=resource.created_at,
            )
            for position, resource in enumerate(new, start=len(stored))
        )

    def _save_feedback(self, record: models.StudySession, feedback: tuple[Feedback, ...]) -> None:
        stored = set(record.feedback.values_list("id", flat=True))
        new = [entry for entry in feedback if entry.id.value not in stored]
        try:
            with transaction.atomic():
                models.Feedback.objects.bulk_create(
                    models.Feedback(
                        id=entry.id.value,
                        session=record,
                        position=position,
                        rating=entry.rating,
                        comment=entry.comment,
                        user_id=entry.user.id,
                        created_at=entry.created_at,
                    )
                    for position, entry in enumerate(new, start=len(stored))
                )
        except IntegrityError:
            raise DuplicateFeedbackError() from None


class DjangoUserStore(UserStore):
    """User lookups backed by Django's auth user model."""

    def __init__(self) -> None:
        self._users = get_user_model()

    def get_user(self, user_id: int) -> UserRef | None:
        user = self._users.objects.filter(pk=user_id).first()
        return to_user_ref(user) if user is not None else None

    def list_users(self) -> list[UserRef]:
        return [to_user_ref(user) for user in self._users.objects.order_by("id")]

    def search_users(self, email_fragment: str, limit: int = 10) -> list[UserRef]:
        users = self._users.objects.filter(email__icontains=email_fragment).order_by("email")[:limit]
        return [to_user_ref(user) for user in users]

    def get_or_create_by_email(self, emails: Iterable[str]) -> list[UserRef]:
        resolved: dict[str, UserRef] = {}
        for raw in emails:
            email = raw.strip().lower()
            if not email or email in resolved:
                continue
            user = self._users.objects.filter(email__iexact=email).first()
            if user is None:
                # Placeholder account for an invitee who has not signed up yet.
                user = self._users.objects.create_user(
                    username=email[:150],
                    email=email,
                    first_name=email.split("@")[0][:150],
                )
            resolved[email] = to_user_ref(user)
        return list(resolved.values())
