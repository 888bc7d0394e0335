import logging
import sys


def setup_logging(loglevel):
    """Setup basic logging

    Args:
      loglevel (int): minimum loglevel for emitting messages
    """
    logformat = "[%(asctime)s] %(levelname)s:%(name)s:%(message)s"
    logging.basicConfig(
        level=loglevel, stream=sys.stdout, format=logformat, datefmt="%Y-%m-%d %H:%M:%S"
    )


def mask_token(token: str | None) -> str:
    """Short, log-safe prefix of a credential"""
    if not token:
        return "<none>"
    return token[:8] + "..."


def mask_email(email: str | None) -> str:
    if not email:
        return "<none>"
    return email[:6] + "xxx"
