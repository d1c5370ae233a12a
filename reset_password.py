#!/usr/bin/env python3
"""
Reset a user's password in the hosted backend.

This script DOES NOT read or reveal any existing passwords.  It sets a
new password hash (PBKDF2-HMAC-SHA256, format "salthex$hashhex") for
the user with the given email.  With ``--mode`` it also sets the
user's mode, which is the only way to create the first admin.

Backend location and key are taken from BACKEND_URL and BACKEND_API_KEY.

Usage:
    python reset_password.py --email admin@example.com --password "NewStrongPass!234" --mode admin

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import sys

from rental_listings_api.app.core.backend import BackendError, get_backend
from rental_listings_api.app.core.security import hash_password
from rental_listings_api.app.core.session import USER_MODES


def main():
    ap = argparse.ArgumentParser(description="Reset a rental listings user's password.")
    ap.add_argument("--email", required=True, help="User email to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    ap.add_argument("--mode", choices=USER_MODES, help="Also set the user's mode (guest, host or admin)")
    args = ap.parse_args()

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        sys.exit(1)

    email = args.email.strip().lower()
    backend = get_backend()
    try:
        rows = backend.select("user", {"email": email}, columns="username,email")
        if not rows:
            print(f"[!] No user found with email: {email}", file=sys.stderr)
            sys.exit(2)

        values = {"password": hash_password(new_password)}
        if args.mode:
            values["mode"] = args.mode
        backend.update("user", values, {"email": email})
    except BackendError as e:
        print(f"[!] Backend error: {e.message}", file=sys.stderr)
        sys.exit(3)
    print(f"[+] Password updated for user: {rows[0]['username']} <{email}>")


if __name__ == "__main__":
    main()
