import enum


class EventType(str, enum.Enum):
    """Closed set of tracked event kinds."""
    PAGE_VIEW = "PAGE_VIEW"
    CLICK = "CLICK"
    CONVERSION = "CONVERSION"


class ExperimentStatus(str, enum.Enum):
    """Lifecycle of an experiment."""
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
