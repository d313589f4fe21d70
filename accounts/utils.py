# accounts/utils.py
import re

from django.utils.text import slugify

from .models import User


def username_from_email(email: str, max_len: int = 30) -> str:
    """
    Build a unique, URL-safe username from the email's local-part.
    Login is by email; the username only satisfies AbstractUser.
    """
    local = (email or "").split("@")[0]
    base = slugify(local).lower()
    base = re.sub(r"[^a-z0-9._-]", "", base) or "user"
    base = base[: max_len - 4]

    candidate = base
    i = 0
    while User.objects.filter(username__iexact=candidate).exists():
        i += 1
        candidate = f"{base}{i}"
    return candidate
