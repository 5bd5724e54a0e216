# folio/taskflow/__init__.py
from folio.taskflow.service import MemoryTaskStore, TaskProjectService, TaskService
from folio.taskflow.sync import InMemoryBroker, RedisBroker, SyncBroker, create_broker

__all__ = [
    "MemoryTaskStore",
    "TaskService",
    "TaskProjectService",
    "SyncBroker",
    "InMemoryBroker",
    "RedisBroker",
    "create_broker",
]
