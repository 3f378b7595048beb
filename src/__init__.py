"""Dropbox Media Functions Package."""

__version__ = "1.0.0"
__description__ = (
    "Serverless functions for compressing listing images and storing "
    "a JSON record in Dropbox"
)

__all__ = ["handlers", "core"]
