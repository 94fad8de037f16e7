#!/usr/bin/env python3
"""Example: Quickstart — permissioned-store

Minimal working example: declare a store with restricted fields, read and
write through colon-delimited paths, and take a snapshot.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install permissioned-store
"""
from __future__ import annotations

import permissioned_store as ps


class Preferences(ps.PermissionedStore):
    theme = "dark"
    locale = ps.Restrict("r")("en-GB")


class Account(ps.PermissionedStore):
    owner = ps.Restrict("r")("alice")
    api_key = ps.Restrict("none")("k-123")

    @ps.Restrict("r")
    def preferences(self) -> ps.PermissionedStore:
        return Preferences()


def main() -> None:
    print(f"permissioned-store version: {ps.__version__}")

    account = Account()

    # Step 1: Read through plain fields and a lazy child store
    print(f"owner           = {account.read('owner')}")
    print(f"preferences     = {account.read('preferences:theme')}")

    # Step 2: Write nested values
    account.write("limits:daily", 10)
    print(f"limits:daily    = {account.read('limits:daily')}")

    # Step 3: Denied operations raise AccessDenied
    for action, call in [
        ("write owner", lambda: account.write("owner", "bob")),
        ("read api_key", lambda: account.read("api_key")),
        ("write locale", lambda: account.read("preferences").write("locale", "fr")),
    ]:
        try:
            call()
            print(f"  [ALLOW] {action}")
        except ps.AccessDenied as exc:
            print(f"  [DENY]  {action}: {exc.message}")

    # Step 4: Snapshot honours read permissions
    print(f"\nentries: {sorted(account.entries())}")


if __name__ == "__main__":
    main()
