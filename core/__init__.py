"""
Issue Tracker Core Library.

Shared by the REST API and the command-line client: configuration, constants,
database management, models, repositories, security and logging.

Usage:
    # Database
    from core.db import db, get_db
    from core.models import User, Issue
    from core.repositories import IssueRepository, UserRepository

    # Config
    from core.config import get_settings, Settings

    # Logging
    from core.logging import get_logger, configure_logging
"""

__version__ = "1.0.0"

# Lazy imports to avoid circular dependencies
# Users should import directly from submodules:
#   from core.db import db
#   from core.config import get_settings
#   from core.logging import get_logger
