"""Application session carrying the WordPress JWT and a denormalized profile.

The object is stored under a single key of the Django session, which is a
signed cookie (see ``SESSION_ENGINE``). It is created at login, read by the
views that need an authenticated caller, and dropped at logout. Only the
presence of the token is checked; it is never validated against WordPress.
"""

from dataclasses import asdict, dataclass, fields
from typing import Optional

SESSION_KEY = "identity"


@dataclass(frozen=True)
class IdentitySession:
    """Session object built from the WordPress login exchange.

    Attributes:
        jwt: Bearer token issued by WordPress.
        user_id: WordPress/WooCommerce user id (string).
        username: Login name.
        email: Account email.
        name: Display name.
        first_name: Customer first name, empty when unknown.
        last_name: Customer last name, empty when unknown.
    """

    jwt: str
    user_id: str
    username: str = ""
    email: str = ""
    name: str = ""
    first_name: str = ""
    last_name: str = ""

    def public_user(self) -> dict:
        """Profile fields safe to return to the browser."""
        return {
            "id": self.user_id,
            "username": self.username,
            "email": self.email,
            "name": self.name,
            "first_name": self.first_name,
            "last_name": self.last_name,
        }


def store_identity(session, identity: IdentitySession) -> None:
    session.cycle_key()
    session[SESSION_KEY] = asdict(identity)


def load_identity(session) -> Optional[IdentitySession]:
    """Return the stored identity, or None when there is no usable token."""
    raw = session.get(SESSION_KEY)
    if not isinstance(raw, dict) or not raw.get("jwt") or not raw.get("user_id"):
        return None
    known = {f.name for f in fields(IdentitySession)}
    return IdentitySession(**{k: v for k, v in raw.items() if k in known})


def clear_identity(session) -> None:
    session.flush()
