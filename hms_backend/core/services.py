"""
Access Gate: credential verification and staff registration.

Rules:
- Unknown username and wrong password raise the same InvalidCredentials.
- Hashed credentials are checked with Django's password hashers.
- Bare bcrypt hashes ($2a$/$2b$/$2y$) written by the previous server are
  rewritten in place to Django's ``bcrypt$`` form, never re-hashed.
- Plaintext (legacy) credentials are rejected unless
  HMS_ALLOW_LEGACY_PLAINTEXT_PASSWORDS is on; then they are compared in
  constant time and re-hashed on the spot.
- Every attempt is audited (Login / Failed Login).
- New registrations are always stored hashed.
"""

from __future__ import annotations

import logging
import re

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.hashers import UNUSABLE_PASSWORD_PREFIX, identify_hasher, make_password
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone
from django.utils.crypto import constant_time_compare

from .audit import NO_SUBJECT, SYSTEM, Actor, record_action
from .exceptions import DuplicateUsername, InvalidCredentials, InvalidInput, StorageError

logger = logging.getLogger(__name__)

User = get_user_model()

BARE_BCRYPT_PATTERN = re.compile(r"^\$2[aby]\$\d{2}\$[./A-Za-z0-9]{53}$")


def is_hashed_password(encoded: str | None) -> bool:
    """True if ``encoded`` is in a format one of the configured hashers understands."""
    if not encoded:
        return False
    try:
        identify_hasher(encoded)
    except ValueError:
        return False
    return True


def is_bare_bcrypt(encoded: str | None) -> bool:
    return bool(encoded) and BARE_BCRYPT_PATTERN.fullmatch(encoded) is not None


def wrap_bare_bcrypt(encoded: str) -> str:
    """``$2b$10$...`` -> ``bcrypt$$2b$10$...`` (BCryptPasswordHasher format).

    $2y$ is the same algorithm under another prefix; it is stored as $2b$.
    """
    if encoded.startswith('$2y$'):
        encoded = '$2b$' + encoded[4:]
    return f'bcrypt${encoded}'


def _verify_password(user, raw_password: str, *, using: str) -> bool:
    if not user.password or user.password.startswith(UNUSABLE_PASSWORD_PREFIX):
        return False

    if is_bare_bcrypt(user.password):
        user.password = wrap_bare_bcrypt(user.password)
        user.save(using=using, update_fields=['password'])
        logger.info('Rewrote bare bcrypt credential for user_id=%s', user.pk)

    if is_hashed_password(user.password):
        # check_password also upgrades outdated hashes.
        return user.check_password(raw_password)

    if not getattr(settings, 'HMS_ALLOW_LEGACY_PLAINTEXT_PASSWORDS', False):
        logger.warning(
            'Rejected login for user_id=%s: stored credential is not hashed '
            '(run manage.py hash_legacy_passwords)',
            user.pk,
        )
        return False

    if not constant_time_compare(raw_password, user.password):
        return False

    user.set_password(raw_password)
    user.save(using=using, update_fields=['password'])
    logger.info('Upgraded legacy plaintext credential for user_id=%s', user.pk)
    return True


def authenticate(*, username: str, password: str, using: str = 'default'):
    """Verify credentials and return the active user.

    Raises:
        InvalidInput: username or password missing
        InvalidCredentials: unknown user, wrong password, inactive account
    """
    if not username or not password:
        raise InvalidInput('Username and password are required')

    user = User.objects.using(using).filter(username=username).first()

    if user is None:
        # Equalize timing with the known-user path.
        make_password(password)
        record_action(
            Actor(name=username, role='Unknown'),
            'Failed Login',
            NO_SUBJECT,
            'Invalid username',
            using=using,
        )
        raise InvalidCredentials()

    if not _verify_password(user, password, using=using) or not user.is_active:
        record_action(
            Actor(name=username, role=user.role or 'User', user=user),
            'Failed Login',
            NO_SUBJECT,
            'Invalid password' if user.is_active else 'Inactive account',
            using=using,
        )
        raise InvalidCredentials()

    user.last_login = timezone.now()
    user.save(using=using, update_fields=['last_login'])

    record_action(Actor.from_user(user), 'Login', NO_SUBJECT, 'Successful login', using=using)
    return user


def register_user(
    *,
    username: str,
    password: str,
    role: str,
    full_name: str = '',
    actor: Actor | None = None,
    using: str = 'default',
):
    """Create a staff account with a hashed password.

    Raises:
        InvalidInput: username, password or role missing
        DuplicateUsername: username already taken
        StorageError: datastore failure
    """
    username = (username or '').strip()
    role = (role or '').strip()
    if not username or not password or not role:
        raise InvalidInput('Username, password, and role are required')

    if User.objects.using(using).filter(username=username).exists():
        raise DuplicateUsername()

    try:
        with transaction.atomic(using=using):
            user = User.objects.db_manager(using).create_user(
                username=username,
                password=password,
                role=role,
                full_name=full_name or '',
            )
    except IntegrityError as exc:
        # Lost a race against a concurrent registration of the same username.
        raise DuplicateUsername() from exc
    except DatabaseError as exc:
        logger.exception('User registration failed (username=%s)', username)
        raise StorageError('Registration Error') from exc

    logger.info('Registered user_id=%s role=%s', user.pk, role)
    record_action(actor or SYSTEM, 'User Registration', username, f'New {role} user created', using=using)
    return user


def hash_legacy_passwords(*, dry_run: bool = False, using: str = 'default') -> list[str]:
    """Bring every stored credential into a Django hasher format. Returns affected usernames.

    Plaintext values are hashed; bare bcrypt hashes are rewritten to the
    ``bcrypt$`` form. Values that already are hashes are never hashed again.
    """
    migrated: list[str] = []
    with transaction.atomic(using=using):
        for user in User.objects.using(using).select_for_update().order_by('id'):
            if not user.password or user.password.startswith(UNUSABLE_PASSWORD_PREFIX):
                continue
            if is_hashed_password(user.password):
                continue
            migrated.append(user.username)
            if dry_run:
                continue
            if is_bare_bcrypt(user.password):
                user.password = wrap_bare_bcrypt(user.password)
            else:
                user.password = make_password(user.password)
            user.save(using=using, update_fields=['password'])

    if migrated and not dry_run:
        record_action(
            SYSTEM,
            'Credential Migration',
            NO_SUBJECT,
            f'Hashed {len(migrated)} legacy credential(s)',
            using=using,
        )
    return migrated
