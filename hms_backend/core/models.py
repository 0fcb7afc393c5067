from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Staff account.

    Extends Django's AbstractUser with:
    - role: free-form role name (Admin, Receptionist, Pharmacist, Doctor, ...).
      Stored verbatim; what a role may do is decided by ``core.access``.
    - full_name: display name shown on the dashboard and in the audit trail
    """

    role = models.CharField(max_length=64, blank=True, default='', db_index=True)
    full_name = models.CharField(max_length=255, blank=True, default='')

    class Meta:
        db_table = 'users'
        ordering = ['username']
        verbose_name = 'User'
        verbose_name_plural = 'Users'


class AuditLogQuerySet(models.QuerySet):
    def delete(self):
        raise TypeError('Audit log entries are append-only and cannot be deleted.')


class AuditLog(models.Model):
    """Append-only record of who did what to which subject and when.

    user_name/user_role are copied at write time so the entry stays readable
    after the account changes or disappears. Failed logins are recorded with
    the submitted username even when no such account exists.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs',
    )
    user_name = models.CharField(max_length=150, db_index=True)
    user_role = models.CharField(max_length=64, blank=True, default='')
    action_type = models.CharField(max_length=64, db_index=True)
    subject = models.CharField(max_length=255, blank=True, default='')
    details = models.TextField(blank=True, default='')
    action_timestamp = models.DateTimeField(auto_now_add=True, db_index=True)

    objects = AuditLogQuerySet.as_manager()

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-action_timestamp', '-id']
        verbose_name = 'Audit Log'
        verbose_name_plural = 'Audit Logs'
        indexes = [
            models.Index(fields=['action_type', 'action_timestamp'], name='audit_logs_action_ts_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.action_timestamp} {self.action_type} by {self.user_name}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise TypeError('Audit log entries are immutable once written.')
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise TypeError('Audit log entries are append-only and cannot be deleted.')
