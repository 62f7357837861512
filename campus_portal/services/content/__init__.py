"""内容记录服务."""

from campus_portal.services.content.attachments import AttachmentField, attachment_fields
from campus_portal.services.content.record_service import ContentRecordService

__all__ = ["AttachmentField", "ContentRecordService", "attachment_fields"]
