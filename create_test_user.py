"""
Create test user (and optionally an admin)

Usage:
    python create_test_user.py            # test@gmail.com / password123
    python create_test_user.py --admin    # admin@gmail.com / password123, is_admin=True
"""
import sys

from app.application.users import RegisterUserUseCase
from app.auth import get_user_by_email
from app.infrastructure.db.session import get_db

admin = "--admin" in sys.argv
email = "admin@gmail.com" if admin else "test@gmail.com"

db = next(get_db())

# Check if user exists
existing = get_user_by_email(db, email)
if existing:
    print(f"User already exists: {email} (ID: {existing.id})")
else:
    user = RegisterUserUseCase(db).execute(
        name="Admin" if admin else "Test User",
        email=email,
        password="password123",
        is_admin=admin,
    )
    print("Created user:")
    print(f"  Email: {email}")
    print("  Password: password123")
    print(f"  Admin: {user.is_admin}")

db.close()
