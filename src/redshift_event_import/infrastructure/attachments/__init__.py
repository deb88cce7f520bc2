"""Attachment loaders."""

from redshift_event_import.infrastructure.attachments.attachment_loader import AttachmentLoader

__all__ = ["AttachmentLoader"]
