from django.contrib.auth import get_user_model
from django.db import transaction

User = get_user_model()

SEED_PASSWORD = "test1234"

STAFF = [
    ("admin", "Admin", "System Administrator"),
    ("reception1", "Receptionist", "Grace Mensah"),
    ("reception2", "Receptionist", "Tom Okafor"),
    ("dr.hassan", "Doctor", "Dr. Amina Hassan"),
    ("dr.smith", "Doctor", "Dr. John Smith"),
    ("pharma1", "Pharmacist", "Leila Noor"),
]


def seed_core(flush: bool = False) -> dict:
    """
    Seeds one account per clinic role.

    With flush=True, accounts whose e-mail ends in '@seed.local' are removed
    first. Superusers are never touched. Audit entries are append-only and
    are not flushed.
    """
    stats: dict[str, int] = {}

    with transaction.atomic():
        if flush:
            User.objects.filter(is_superuser=False, email__endswith="@seed.local").delete()

        users = _seed_users()
        stats["core_users"] = len(users)

    return stats


def _seed_users() -> list:
    users = []
    for username, role, full_name in STAFF:
        user = User.objects.filter(username=username).first()
        if user is None:
            user = User.objects.create_user(
                username=username,
                email=f"{username}@seed.local",
                password=SEED_PASSWORD,
                role=role,
                full_name=full_name,
            )
        else:
            user.role = role
            user.full_name = full_name
            user.save(update_fields=["role", "full_name"])
        users.append(user)
    return users
