from __future__ import annotations

import sys

from sqlalchemy import select

from murabaat.db.session import SessionLocal
from murabaat.models.enums import UserRole
from murabaat.models.users import UserAuth

ASSIGNABLE = [r.value for r in UserRole if r is not UserRole.anonymous]


def main() -> int:
    if len(sys.argv) != 3:
        print(f"Usage: python scripts/set_role.py <email> <role: {'|'.join(ASSIGNABLE)}>")
        return 2

    email, role = sys.argv[1], sys.argv[2]
    if role not in ASSIGNABLE:
        print(f"Unknown role: {role}")
        return 2

    db = SessionLocal()
    try:
        user = db.scalar(select(UserAuth).where(UserAuth.email == email))
        if not user:
            print("User not found")
            return 1
        user.role = role
        db.add(user)
        db.commit()
        print(f"Role updated: {email} -> {role}")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
