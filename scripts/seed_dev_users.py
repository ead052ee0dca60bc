"""
Script to write the development bootstrap accounts to the users file.

Creates admin/password (role admin) and user/password (role user).
DEVELOPMENT ONLY: refuses to run in production and refuses to touch an
existing users file.
"""
import sys
import os

# Add the parent directory to the path so we can import credlocker modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from credlocker.core.config import USERS_FILE, is_production
from credlocker.auth.store import UserStore
from credlocker.core.errors import PersistenceError


def seed_dev_users(path=USERS_FILE):
    """Write the seeded store to disk. Returns True on success."""
    if is_production():
        print("ERROR: refusing to seed default credentials in production.")
        return False

    if os.path.exists(path):
        print(f"ERROR: {path} already exists, not overwriting it.")
        return False

    try:
        store = UserStore(path, seed_dev_users=True)
    except PersistenceError as e:
        print(f"ERROR: Failed to prepare users file: {e}")
        return False

    store.save()
    if store.last_persistence_error:
        print(f"ERROR: {store.last_persistence_error}")
        return False

    for user in store.get_all_users():
        print(f"SUCCESS: '{user.username}' (ID: {user.id}, role: {user.role})")
    return True


if __name__ == "__main__":
    print("Seeding development users...")
    print(f"Users file: {USERS_FILE}")
    print("-" * 50)

    if seed_dev_users():
        print("-" * 50)
        print("Done. Default password is 'password' - change it before sharing this instance!")
    else:
        print("-" * 50)
        print("Seeding failed!")
        sys.exit(1)
