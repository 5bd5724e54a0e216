# folio/taskflow/service.py
import logging
import time
import uuid
from datetime import timedelta
from typing import Dict, List, Optional

from folio.taskflow.models import (
    SubTask,
    SyncEvent,
    Task,
    TaskCreate,
    TaskFilters,
    TaskProject,
    TaskProjectCreate,
    TaskProjectUpdate,
    TaskStatus,
    TaskUpdate,
    utcnow,
)
from folio.taskflow.sync import SyncBroker, channel_for

logger = logging.getLogger(__name__)


class TaskNotFound(LookupError):
    pass


class ProjectNotFound(LookupError):
    pass


def generate_id(prefix: str) -> str:
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


class MemoryTaskStore:
    """Per-user task and project collections held in process memory."""

    def __init__(self):
        self._tasks: Dict[str, List[Task]] = {}
        self._projects: Dict[str, List[TaskProject]] = {}

    def has_tasks(self, user_id: str) -> bool:
        return user_id in self._tasks

    def has_projects(self, user_id: str) -> bool:
        return user_id in self._projects

    def get_tasks(self, user_id: str) -> List[Task]:
        return list(self._tasks.get(user_id, []))

    def set_tasks(self, user_id: str, tasks: List[Task]) -> None:
        self._tasks[user_id] = list(tasks)

    def get_projects(self, user_id: str) -> List[TaskProject]:
        return list(self._projects.get(user_id, []))

    def set_projects(self, user_id: str, projects: List[TaskProject]) -> None:
        self._projects[user_id] = list(projects)


def sort_tasks(tasks: List[Task]) -> List[Task]:
    """Important first, then tasks with a due date (soonest first), then newest first."""
    newest_first = sorted(tasks, key=lambda t: t.created_at, reverse=True)
    return sorted(
        newest_first,
        key=lambda t: (
            not t.is_important,
            t.due_date is None,
            t.due_date.timestamp() if t.due_date else 0.0,
        ),
    )


class TaskService:
    def __init__(self, store: MemoryTaskStore, broker: SyncBroker):
        self.store = store
        self.broker = broker

    async def _save(self, user_id: str, tasks: List[Task]) -> None:
        self.store.set_tasks(user_id, tasks)
        event = SyncEvent(type='tasks', user_id=user_id, data=[t.model_dump(mode='json') for t in tasks])
        await self.broker.publish(channel_for(user_id), event)

    def get_tasks(self, user_id: str) -> List[Task]:
        if not self.store.has_tasks(user_id):
            self.initialize_sample_data(user_id)
        return self.store.get_tasks(user_id)

    def get_task(self, user_id: str, task_id: str) -> Task:
        for task in self.get_tasks(user_id):
            if task.id == task_id:
                return task
        raise TaskNotFound(task_id)

    def get_filtered_tasks(self, user_id: str, filters: Optional[TaskFilters] = None) -> List[Task]:
        filters = filters or TaskFilters()
        tasks = self.get_tasks(user_id)

        if filters.status is not None:
            tasks = [t for t in tasks if t.status == filters.status]
        if filters.is_important is not None:
            tasks = [t for t in tasks if t.is_important == filters.is_important]
        if filters.is_my_day is not None:
            tasks = [t for t in tasks if t.is_my_day == filters.is_my_day]
        if filters.project_id:
            tasks = [t for t in tasks if t.project_id == filters.project_id]
        if filters.search_query:
            query = filters.search_query.lower()
            tasks = [
                t for t in tasks
                if query in t.title.lower() or query in (t.description or '').lower()
            ]

        return sort_tasks(tasks)

    async def create_task(self, user_id: str, data: TaskCreate) -> Task:
        tasks = self.get_tasks(user_id)
        now = utcnow()
        task = Task(
            **data.model_dump(),
            id=generate_id('task'),
            created_by=user_id,
            created_at=now,
            updated_at=now,
        )
        tasks.append(task)
        await self._save(user_id, tasks)
        logger.info(f"Created task {task.id} for {user_id}")
        return task

    async def update_task(self, user_id: str, task_id: str, updates: TaskUpdate) -> Task:
        return await self._apply(user_id, task_id, updates.model_dump(exclude_unset=True))

    async def _apply(self, user_id: str, task_id: str, changes: dict) -> Task:
        tasks = self.get_tasks(user_id)
        for index, task in enumerate(tasks):
            if task.id == task_id:
                changes = {k: v for k, v in changes.items() if k not in ('id', 'created_at', 'created_by')}
                updated = Task.model_validate({**task.model_dump(), **changes, 'updated_at': utcnow()})
                tasks[index] = updated
                await self._save(user_id, tasks)
                return updated
        raise TaskNotFound(task_id)

    async def delete_task(self, user_id: str, task_id: str) -> None:
        tasks = self.get_tasks(user_id)
        remaining = [t for t in tasks if t.id != task_id]
        if len(remaining) == len(tasks):
            raise TaskNotFound(task_id)
        await self._save(user_id, remaining)

    async def toggle_complete(self, user_id: str, task_id: str) -> Task:
        task = self.get_task(user_id, task_id)
        status = TaskStatus.PENDING if task.status == TaskStatus.COMPLETED else TaskStatus.COMPLETED
        return await self._apply(user_id, task_id, {'status': status})

    async def toggle_important(self, user_id: str, task_id: str) -> Task:
        task = self.get_task(user_id, task_id)
        return await self._apply(user_id, task_id, {'is_important': not task.is_important})

    async def toggle_my_day(self, user_id: str, task_id: str) -> Task:
        task = self.get_task(user_id, task_id)
        return await self._apply(user_id, task_id, {'is_my_day': not task.is_my_day})

    async def add_sub_task(self, user_id: str, task_id: str, title: str) -> Task:
        task = self.get_task(user_id, task_id)
        sub_task = SubTask(id=generate_id('subtask'), title=title)
        sub_tasks = [st.model_dump() for st in task.sub_tasks] + [sub_task.model_dump()]
        return await self._apply(user_id, task_id, {'sub_tasks': sub_tasks})

    async def toggle_sub_task(self, user_id: str, task_id: str, sub_task_id: str) -> Task:
        task = self.get_task(user_id, task_id)
        if not any(st.id == sub_task_id for st in task.sub_tasks):
            raise TaskNotFound(sub_task_id)

        sub_tasks = [
            st.model_copy(update={'is_completed': not st.is_completed}) if st.id == sub_task_id else st
            for st in task.sub_tasks
        ]
        changes = {'sub_tasks': [st.model_dump() for st in sub_tasks]}
        # Finishing the last open sub-task completes the task
        if sub_tasks and all(st.is_completed for st in sub_tasks):
            changes['status'] = TaskStatus.COMPLETED
        return await self._apply(user_id, task_id, changes)

    async def delete_sub_task(self, user_id: str, task_id: str, sub_task_id: str) -> Task:
        task = self.get_task(user_id, task_id)
        sub_tasks = [st.model_dump() for st in task.sub_tasks if st.id != sub_task_id]
        if len(sub_tasks) == len(task.sub_tasks):
            raise TaskNotFound(sub_task_id)
        return await self._apply(user_id, task_id, {'sub_tasks': sub_tasks})

    async def delete_project_tasks(self, user_id: str, project_id: str) -> int:
        tasks = self.get_tasks(user_id)
        remaining = [t for t in tasks if t.project_id != project_id]
        removed = len(tasks) - len(remaining)
        if removed:
            await self._save(user_id, remaining)
        return removed

    def initialize_sample_data(self, user_id: str) -> None:
        if self.store.has_tasks(user_id):
            return

        now = utcnow()
        sample = [
            Task(
                id='task_1',
                title='Welcome to TaskFlow!',
                description='Get started by creating your first task or project.',
                due_date=now,
                is_important=True,
                is_my_day=True,
                sub_tasks=[
                    SubTask(id='st_1', title='Explore the interface'),
                    SubTask(id='st_2', title='Create a new task'),
                    SubTask(id='st_3', title='Mark tasks as important'),
                ],
                created_by=user_id,
            ),
            Task(
                id='task_hamaco_1',
                title='Review Q4 business performance',
                description='Analyze sales data and prepare quarterly report',
                project_id='project_hamaco',
                status=TaskStatus.IN_PROGRESS,
                sub_tasks=[
                    SubTask(id='st_h1', title='Collect sales data', is_completed=True),
                    SubTask(id='st_h2', title='Create presentation'),
                ],
                created_by=user_id,
            ),
            Task(
                id='task_hamaco_2',
                title='Update client database',
                description='Sync customer information with CRM system',
                project_id='project_hamaco',
                is_important=True,
                created_by=user_id,
            ),
            Task(
                id='task_herbalife_1',
                title='Plan nutrition workshop',
                description='Organize monthly wellness event for members',
                project_id='project_herbalife',
                due_date=now + timedelta(days=7),
                is_important=True,
                is_my_day=True,
                sub_tasks=[
                    SubTask(id='st_hb1', title='Book venue'),
                    SubTask(id='st_hb2', title='Prepare materials'),
                    SubTask(id='st_hb3', title='Send invitations'),
                ],
                created_by=user_id,
            ),
            Task(
                id='task_herbalife_2',
                title='Order product inventory',
                description='Restock popular nutrition supplements',
                project_id='project_herbalife',
                status=TaskStatus.COMPLETED,
                created_by=user_id,
            ),
        ]
        self.store.set_tasks(user_id, sample)
        logger.info(f"Seeded {len(sample)} sample tasks for {user_id}")


class TaskProjectService:
    def __init__(self, store: MemoryTaskStore, broker: SyncBroker, tasks: TaskService):
        self.store = store
        self.broker = broker
        self.tasks = tasks

    async def _save(self, user_id: str, projects: List[TaskProject]) -> None:
        self.store.set_projects(user_id, projects)
        event = SyncEvent(type='projects', user_id=user_id, data=[p.model_dump(mode='json') for p in projects])
        await self.broker.publish(channel_for(user_id), event)

    def get_projects(self, user_id: str) -> List[TaskProject]:
        if not self.store.has_projects(user_id):
            self.initialize_sample_data(user_id)
        return self.store.get_projects(user_id)

    def get_project(self, user_id: str, project_id: str) -> TaskProject:
        for project in self.get_projects(user_id):
            if project.id == project_id:
                return project
        raise ProjectNotFound(project_id)

    async def create_project(self, user_id: str, data: TaskProjectCreate) -> TaskProject:
        projects = self.get_projects(user_id)
        project = TaskProject(
            **data.model_dump(),
            id=generate_id('project'),
            created_by=user_id,
        )
        if user_id not in project.members:
            project.members.append(user_id)
        projects.append(project)
        await self._save(user_id, projects)
        logger.info(f"Created project {project.id} for {user_id}")
        return project

    async def update_project(self, user_id: str, project_id: str, updates: TaskProjectUpdate) -> TaskProject:
        projects = self.get_projects(user_id)
        changes = updates.model_dump(exclude_unset=True)
        for index, project in enumerate(projects):
            if project.id == project_id:
                updated = TaskProject.model_validate({**project.model_dump(), **changes})
                projects[index] = updated
                await self._save(user_id, projects)
                return updated
        raise ProjectNotFound(project_id)

    async def delete_project(self, user_id: str, project_id: str) -> int:
        """Delete a project and its tasks; returns the number of tasks removed."""
        projects = self.get_projects(user_id)
        remaining = [p for p in projects if p.id != project_id]
        if len(remaining) == len(projects):
            raise ProjectNotFound(project_id)

        removed = await self.tasks.delete_project_tasks(user_id, project_id)
        await self._save(user_id, remaining)
        if removed:
            logger.info(f"Deleted {removed} tasks with project {project_id}")
        return removed

    def get_project_tasks(self, user_id: str, project_id: str) -> List[Task]:
        self.get_project(user_id, project_id)
        return self.tasks.get_filtered_tasks(user_id, TaskFilters(project_id=project_id))

    def get_project_task_count(self, user_id: str, project_id: str) -> int:
        return sum(1 for t in self.tasks.get_tasks(user_id) if t.project_id == project_id)

    def initialize_sample_data(self, user_id: str) -> None:
        if self.store.has_projects(user_id):
            return

        sample = [
            TaskProject(
                id='project_hamaco',
                name='Hamaco Project',
                description='Hamaco business development and operations',
                color='#3b82f6',
                icon='🏢',
                members=[user_id],
                created_by=user_id,
            ),
            TaskProject(
                id='project_herbalife',
                name='Herbalife',
                description='Herbalife nutrition and wellness program',
                color='#22c55e',
                icon='🌿',
                members=[user_id],
                created_by=user_id,
            ),
        ]
        self.store.set_projects(user_id, sample)
