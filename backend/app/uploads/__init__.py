from .models import ItemStatus, UploadItem
from .session import UploadSession

__all__ = ["ItemStatus", "UploadItem", "UploadSession"]
