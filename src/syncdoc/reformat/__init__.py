"""Post-merge line reformatting."""

from syncdoc.reformat.bookend import BookendReformatter

__all__ = ["BookendReformatter"]
