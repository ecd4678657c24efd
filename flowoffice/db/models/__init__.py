from flowoffice.db.models.static_data import WorkflowStaticData

__all__ = [
    "WorkflowStaticData",
]
