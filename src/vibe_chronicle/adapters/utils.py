"""Naming heuristics shared by the session adapters."""

SUMMARY_LENGTH = 200


def extract_project_name(dir_name: str) -> str:
    """Derive a project name from Claude Code's encoded directory name.

    ``-Users-alice-dev-myapp`` splits into ``["", "Users", "alice", "dev",
    "myapp"]``; the first three segments are the home prefix and are dropped.
    """
    parts = dir_name.split("-")
    if len(parts) > 3:
        return "/".join(parts[3:])
    return dir_name


def generate_message_id(session_id: str, index: int) -> str:
    return f"{session_id}_{index}"


def truncate(text: str | None, length: int = SUMMARY_LENGTH) -> str:
    if not text:
        return ""
    return text[:length] + "..." if len(text) > length else text
