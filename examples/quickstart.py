#!/usr/bin/env python3
"""
VoxAi Quickstart: register, log in, browse schemes, ask the chatbot.

Run with: python examples/quickstart.py

Backend must be running: voxai serve  (http://localhost:5000)
"""

import sys
import tempfile
import uuid
from pathlib import Path

from voxai.client import ApiError, SessionManager, SessionStorage, VoxAiClient

BASE = "http://localhost:5000/api"


def main():
    run_id = uuid.uuid4().hex[:6]
    email = f"demo-{run_id}@example.com"
    password = "demo-password-123"

    session_file = Path(tempfile.mkdtemp()) / "session.json"
    manager = SessionManager(SessionStorage(session_file), base_url=BASE)
    manager.subscribe(lambda s: print(f"   [session] {'logged in as ' + s.user.name if s else 'logged out'}"))
    client = VoxAiClient(manager)

    # ── Register ──────────────────────────────────────────────────
    print("1. Registering...")
    try:
        print(f"   {client.register(f'Demo {run_id}', email, password, ['education'])}")
    except ApiError as e:
        print(f"   Registration failed: {e.message}")
        sys.exit(1)

    # ── Login ─────────────────────────────────────────────────────
    print("\n2. Logging in...")
    session = client.login(email, password)
    print(f"   Token expires {session.expires_at:%Y-%m-%d %H:%M} UTC")

    # ── Schemes ───────────────────────────────────────────────────
    print("\n3. Adding and listing schemes...")
    client.create_scheme(
        "PM Scholarship Scheme",
        description="Financial assistance for meritorious students.",
        category="Education",
    )
    for scheme in client.list_schemes():
        print(f"   - {scheme['title']} [{scheme.get('category') or '—'}]")

    # ── Chat ──────────────────────────────────────────────────────
    print("\n4. Asking the chatbot...")
    for question in ["hello", "I need a scholarship", "what schemes are available?"]:
        answer = client.send_message(question)
        print(f"   you: {question}")
        print(f"   bot: {answer['reply']}")

    # ── Logout ────────────────────────────────────────────────────
    print("\n5. Logging out...")
    client.logout()
    manager.close()


if __name__ == "__main__":
    main()
