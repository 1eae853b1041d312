from portal.models.admin import Admin
from portal.models.notification_log import NotificationLog
from portal.models.submission import Submission
