#!/usr/bin/env python3
"""
Basic WACS client usage example.

Runs the whole workflow against an in-process fake server, so it needs
nothing but a local git executable.
Run with: python examples/basic_usage.py
"""

import logging
import tempfile
from pathlib import Path

from wacs import AuthenticationError, Credentials, MergeStrategy, WacsClient, configure_logging
from wacs.testing import FakeWacsServer, append_file_text

configure_logging(logging.INFO)

print("=== WACS Client Basic Usage Example ===\n")

workspace = Path(tempfile.mkdtemp(prefix="wacs-example-"))
server = FakeWacsServer(workspace / "server")
server.add_user("alice", "correct-horse", full_name="Alice Example")

with WacsClient(server.base_url, http_transport=server.transport()) as client:
    # 1. Login
    print("1. Logging in...")
    try:
        client.login(Credentials("alice", "wrong"), "example-token")
    except AuthenticationError as e:
        print(f"   Bad password rejected: {e}")

    user = client.login(Credentials("alice", "correct-horse"), "example-token")
    print(f"   Logged in as {user.username} ({user!r})")
    print("\n   OK: Login working\n")

    # 2. Repositories
    print("2. Creating and listing repositories...")
    repo = client.repos.create("example-repo", description="Example content")
    print(f"   Created {repo.full_name}, clone URL {repo.clone_url}")
    names = [r.name for r in client.repos.list_mine()]
    print(f"   My repositories: {names}")
    assert repo.name in names
    print("\n   OK: Repositories working\n")

    # 3. Two contributors, one conflict
    print("3. Cloning, committing and pushing...")
    git = client.git(user)
    mine, theirs = workspace / "mine", workspace / "theirs"

    git.clone(repo.clone_url, mine)
    append_file_text(mine, "1.txt", "Initial file contents\n")
    git.commit_and_push(mine, "Initial commit")

    git.clone(repo.clone_url, theirs)
    append_file_text(theirs, "1.txt", "Other contributor file update\n")
    git.commit_and_push(theirs, "Other contributor")

    append_file_text(mine, "1.txt", "Conflicting file update\n")
    result = git.commit_and_push(mine, "Conflicting push", MergeStrategy.MINE)
    print(f"   Push status={result.status} merged={result.merged} attempts={result.attempts}")
    print((mine / "1.txt").read_text(), end="")
    print("\n   OK: Git workflow working\n")

print("=== All examples completed successfully! ===")
