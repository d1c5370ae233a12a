"""Print a long-lived access token for an existing user.

Usage:
    python create_token.py alice
"""
import sys

from rental_listings_api.app.core.backend import get_backend
from rental_listings_api.app.core.security import create_access_token

if len(sys.argv) != 2:
    print("usage: create_token.py <username>", file=sys.stderr)
    sys.exit(1)

rows = get_backend().select("user", {"username": sys.argv[1]}, columns="username,email")
if not rows:
    print(f"[!] No user found with username: {sys.argv[1]}", file=sys.stderr)
    sys.exit(2)

# 365 days, in seconds
token = create_access_token({"id": rows[0]["username"], "email": rows[0]["email"]}, expires_delta=365 * 24 * 60 * 60)
print(token)
