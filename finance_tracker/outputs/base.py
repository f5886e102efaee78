# finance_tracker/outputs/base.py
from abc import ABC, abstractmethod

EXPORT_PREFIX = "financial-data"


class BaseOutput(ABC):
    @abstractmethod
    def write(self, state, today):
        """Export *state* and return the path of the written document."""
        pass

    def filename(self, today, extension):
        return f"{EXPORT_PREFIX}-{today.isoformat()}.{extension}"
