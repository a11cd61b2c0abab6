"""Create the superadmin account, or reset its password if it exists."""
import getpass
import sys

from coupongen.database import SessionLocal
from coupongen.models.user import User, UserRole
from coupongen.routers.auth import get_password_hash


def create_user(username: str, password: str):
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.username == username).first()
        if not user:
            print("Creating superadmin...")
            user = User(
                username=username,
                hashed_password=get_password_hash(password),
                tenant_id=None,
                role=UserRole.SUPERADMIN.value,
                is_active=True,
            )
            db.add(user)
            db.commit()
            print("User created successfully")
        elif user.role != UserRole.SUPERADMIN.value:
            print(f"Error: {username} exists with role {user.role}")
            sys.exit(1)
        else:
            print("User already exists, updating password...")
            user.hashed_password = get_password_hash(password)
            user.is_active = True
            db.commit()
            print("User updated")
    finally:
        db.close()


if __name__ == "__main__":
    name = sys.argv[1] if len(sys.argv) > 1 else "superadmin"
    create_user(name, getpass.getpass(f"Password for {name}: "))
