from careerai.models.application import ApplicationRecord

__all__ = [
    "ApplicationRecord",
]
