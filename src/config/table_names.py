from enum import Enum


class TableNames(str, Enum):
    LOCAL_STORE = "local_store"
    EMAIL_LOGS = "email_logs"
