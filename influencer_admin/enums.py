from enum import Enum


class InfluencerStatusEnum(str, Enum):
    PendingApproval = "PendingApproval"
    Approved = "Approved"
    Rejected = "Rejected"
    OrderCreated = "OrderCreated"
    PendingVideoUpload = "PendingVideoUpload"
    Completed = "Completed"


class OrderStatusEnum(str, Enum):
    Created = "Created"
    InTransit = "InTransit"
    Delivered = "Delivered"
    Cancelled = "Cancelled"
    Completed = "Completed"


class ContentTypeEnum(str, Enum):
    Video = "Video"
    Image = "Image"
    Story = "Story"
    Reel = "Reel"


class ContentStatusEnum(str, Enum):
    PendingUpload = "PendingUpload"
    PendingEditing = "PendingEditing"
    PendingReview = "PendingReview"
    Approved = "Approved"
    Reassigned = "Reassigned"
    Scheduled = "Scheduled"
