import logging
from dataclasses import dataclass

from django.db import transaction

from .models import AuditLog

logger = logging.getLogger(__name__)

NO_SUBJECT = 'N/A'


@dataclass(frozen=True)
class Actor:
    """Who is performing a workflow, as written into the audit trail."""

    name: str
    role: str = ''
    user: object = None

    @classmethod
    def from_user(cls, user) -> 'Actor':
        if user is None or not getattr(user, 'is_authenticated', False):
            return cls(name='Anonymous', role='')
        return cls(
            name=getattr(user, 'username', '') or 'Unknown',
            role=getattr(user, 'role', '') or '',
            user=user,
        )

    @classmethod
    def from_request(cls, request) -> 'Actor':
        return cls.from_user(getattr(request, 'user', None))


SYSTEM = Actor(name='System', role='System')


def record_action(actor, action_type, subject=NO_SUBJECT, details='', *, using='default'):
    """Append one audit entry. Never raises.

    Runs in its own savepoint so a failed insert cannot poison an enclosing
    transaction; the caller's primary write is already committed when this runs.
    """
    try:
        with transaction.atomic(using=using):
            AuditLog.objects.using(using).create(
                user=actor.user if getattr(actor.user, 'pk', None) else None,
                user_name=(actor.name or '')[:150],
                user_role=(actor.role or '')[:64],
                action_type=action_type,
                subject=(subject or NO_SUBJECT)[:255],
                details=details or '',
            )
    except Exception:
        logger.exception(
            'AuditLog write failed (action=%s, actor=%s, subject=%s)',
            action_type,
            actor.name,
            subject,
        )
