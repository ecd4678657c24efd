import enum


class ColumnType(str, enum.Enum):
    # mandatory column
    NAME = "name"

    # regular columns
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    CHECKBOX = "checkbox"
    INTERVAL = "interval"
    PHONE = "phone"
    EMAIL = "email"
    ADDRESS = "address"
    RATING_STARS = "rating-stars"
    REMINDER_DATE = "erneut-kontaktieren"
    LINK = "link"
    PERSON_NAME = "personName"
    TIME_TRACKING = "zeitauswertung"
    FORMULA = "formel"

    # columns with options
    STATUS = "status"
    DOCUMENT = "dokument"

    # project special columns
    CUSTOMER = "kunde"
    TEAM_MEMBER = "teamMember"
    TASKS = "aufgaben"
    CLOUD = "cloud"
    WAREHOUSE = "lager"


class FieldType(str, enum.Enum):
    STRING = "string"
    NUMBER = "number"
    DATE_TIME = "dateTime"
    BOOLEAN = "boolean"
    URL = "url"
    ENUMERATED = "options"
    UNSUPPORTED = "unsupported"


class ColumnTypeFilter(str, enum.Enum):
    STATUS_ONLY = "status-only"
    NON_STATUS = "non-status"
    ALL = "all"


class SubscriptionState(str, enum.Enum):
    ABSENT = "absent"
    PROVISIONED = "provisioned"
    STALE = "stale"


class TriggerMatchMode(str, enum.Enum):
    ALL = "all"
    ANY = "any"
