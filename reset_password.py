"""
Account utility for tickmypax
Run this script to list accounts, reset a password or add a guide/admin login.

Usage:
    python reset_password.py
    python reset_password.py <email> <new_password>
    python reset_password.py --create <email> <password> [Admin|Guide] [display name]

Example:
    python reset_password.py admin@tickmypax.com NewPassword123!
    python reset_password.py --create anna@tickmypax.com Secret99 Guide "Anna K."
"""

import sys

from tickmypax.database import SessionLocal, create_tables
from tickmypax.models.user import User, UserRole
from tickmypax.utils.security import hash_password, validate_password_strength


def reset_password(email: str, new_password: str) -> bool:
    """Reset a user's password"""

    # Validate password strength
    is_valid, error_msg = validate_password_strength(new_password)
    if not is_valid:
        print(f"❌ Password error: {error_msg}")
        return False

    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == email).first()

        if not user:
            print(f"❌ User '{email}' not found in database")
            print("\n📋 Existing users:")
            for u in db.query(User).order_by(User.email).all():
                print(f"   - {u.email} ({u.display_name})")
            return False

        user.hashed_password = hash_password(new_password)
        db.commit()

        print(f"✅ Password reset successfully for user: {email}")
        return True

    finally:
        db.close()


def create_user(email: str, password: str, role: str = UserRole.GUIDE.value, name: str = None) -> bool:
    """Add a login; the display name is what check-ins are attributed to"""
    try:
        role = UserRole(role).value
    except ValueError:
        print(f"❌ Unknown role '{role}', expected one of: {', '.join(r.value for r in UserRole)}")
        return False

    is_valid, error_msg = validate_password_strength(password)
    if not is_valid:
        print(f"❌ Password error: {error_msg}")
        return False

    create_tables()
    db = SessionLocal()
    try:
        if db.query(User).filter(User.email == email).first():
            print(f"❌ User '{email}' already exists")
            return False

        db.add(User(
            email=email,
            user_name=name or email,
            hashed_password=hash_password(password),
            role=role,
            is_active=True,
        ))
        db.commit()

        print(f"✅ Created {role} account: {email}")
        return True

    finally:
        db.close()


def list_users():
    """List all users in database"""
    db = SessionLocal()
    try:
        users = db.query(User).order_by(User.email).all()
        print("\n📋 All users in database:")
        print("-" * 72)
        for u in users:
            status = "🟢 Active" if u.is_active else "🔴 Inactive"
            admin = "👑" if u.is_admin else "  "
            print(f"{admin} {u.email:30} | {u.display_name:20} | {u.role or '':6} | {status}")
        print("-" * 72)
    finally:
        db.close()


if __name__ == "__main__":
    args = sys.argv[1:]

    if not args:
        # No args - just list users
        list_users()
        print("\n💡 To reset a password, run:")
        print("   python reset_password.py <email> <new_password>")

    elif args[0] == "--create" and 3 <= len(args) <= 5:
        ok = create_user(*args[1:])
        sys.exit(0 if ok else 1)

    elif len(args) == 2:
        ok = reset_password(args[0], args[1])
        sys.exit(0 if ok else 1)

    else:
        print("Usage: python reset_password.py <email> <new_password>")
        print("   or: python reset_password.py --create <email> <password> [Admin|Guide] [name]")
        print("   or: python reset_password.py  (to list users)")
        sys.exit(2)
