import uuid
from pathlib import Path


def generate_transfer_id() -> str:
    """Generate a new identifier for one traced transfer."""
    return uuid.uuid4().hex


def get_app_dir() -> Path:
    return Path.home() / '.curltrace'
