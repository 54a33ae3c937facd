"""
Task Index for TodoPro.

Keeps a set of in-memory structures beside the task store so that common
queries avoid a table scan or a database round trip:

- cache: task id -> latest Task snapshot (HashTable)
- command history for undo (Stack)
- pending notifications (Queue)
- activity history (LinkedList)
- autocomplete over titles and tags (Trie)
- dependency graph, prerequisite -> dependent (Graph)
- related-task groups (DisjointSet)
- importance-ordered snapshots (BinaryHeap)

Every mutation is written to the store first and only then mirrored into
the structures. The store stays authoritative.
"""

import asyncio
import logging
from typing import Any, Callable, Optional

from todopro.config import IndexSettings
from todopro.dsa import (
    BinaryHeap,
    DisjointSet,
    Graph,
    HashTable,
    LinkedList,
    Queue,
    Stack,
    Trie,
)
from todopro.dsa.algorithms import check_bit, clear_bit, merge_sort, quick_sort, set_bit
from todopro.errors import ValidationError
from todopro.models.history import ActivityRecord, CommandRecord, Notification
from todopro.models.task import (
    FLAG_BITS,
    Task,
    compare_due_date,
    compare_importance,
    compare_priority,
)
from todopro.services.analytics import productivity_report
from todopro.services.tasks import TaskStore

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 10


def _check_flag_position(position) -> None:
    if isinstance(position, bool) or not isinstance(position, int) or not 0 <= position < FLAG_BITS:
        raise ValidationError(f"Invalid flag position {position!r}. Must be 0-{FLAG_BITS - 1}")


class TaskIndex:
    """
    In-memory index over the task store.

    Build one per process and hand it to whatever serves requests.
    Mutations hold an asyncio lock across the store write and the index
    refresh, so concurrent requests on the same event loop always see the
    structures in a state matching some sequence of completed operations.
    """

    def __init__(self, store: Optional[TaskStore] = None, settings: Optional[IndexSettings] = None):
        """
        Initialize the task index.

        Args:
            store: Optional TaskStore. If not provided, uses one over the global adapter.
            settings: Optional IndexSettings for cache and trie sizing.
        """
        self._store = store
        self.settings = settings or IndexSettings()
        self._lock = asyncio.Lock()

        self._cache: HashTable[str, Task] = HashTable(self.settings.cache_buckets)
        self._commands: Stack[CommandRecord] = Stack()
        self._notifications: Queue[Notification] = Queue()
        self._activity: LinkedList[ActivityRecord] = LinkedList()
        self._trie = Trie(self.settings.suggestion_limit)
        self._dependencies: Graph[str] = Graph()
        self._groups: DisjointSet[str] = DisjointSet()
        self._queue: BinaryHeap[Task] = BinaryHeap(compare_importance)

    @property
    def store(self) -> TaskStore:
        """Get the task store."""
        if self._store is None:
            self._store = TaskStore()
        return self._store

    def _best_effort(self, action: str, task_id: str, refresh: Callable[[], None]) -> None:
        """Run an index refresh; a failure leaves the index stale, not the store."""
        try:
            refresh()
        except Exception:
            logger.exception(f"Index refresh failed after {action} of task {task_id}")

    def _record(self, action: str, task: Task, data: Any) -> None:
        past = f"{action.lower()}d"
        self._commands.push(CommandRecord(action=action, task_id=task.id, data=data))
        self._activity.append(ActivityRecord(task_id=task.id, action=past))
        self._notifications.enqueue(
            Notification(task_id=task.id, message=f"Task {past}: {task.title}", type=past)
        )

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def create(self, data: dict) -> Task:
        """
        Persist a new task and index it.

        Args:
            data: Task fields (title and user_id required)

        Returns:
            The persisted Task
        """
        async with self._lock:
            task = await self.store.create(data)

            def refresh():
                self._cache.set(task.id, task)
                self._record("CREATE", task, dict(data))
                for tag in task.tags:
                    self._trie.insert(tag)
                self._trie.insert(task.title)
                self._dependencies.add_vertex(task.id)
                for dependency in task.dependencies:
                    self._dependencies.add_edge(dependency, task.id)
                self._queue.insert(task)

            self._best_effort("CREATE", task.id, refresh)
            return task

    async def update(self, task_id: str, fields: dict) -> Task | None:
        """
        Apply a partial update and refresh the index.

        Returns:
            Updated Task, or None if the id is unknown
        """
        async with self._lock:
            return await self._update(task_id, fields)

    async def _update(self, task_id: str, fields: dict) -> Task | None:
        task = await self.store.update(task_id, fields)
        if task is None:
            return None

        def refresh():
            self._cache.set(task.id, task)
            self._record("UPDATE", task, dict(fields))
            if "tags" in fields:
                for tag in task.tags:
                    self._trie.insert(tag)
            self._queue.insert(task)
            self._compact_queue()

        self._best_effort("UPDATE", task.id, refresh)
        return task

    async def delete(self, task_id: str) -> bool:
        """
        Delete a task from the store and evict it from the index.

        Returns:
            True if a task was deleted
        """
        async with self._lock:
            task = await self._get(task_id)
            if task is None:
                return False

            if not await self.store.delete(task_id):
                # Cached copy outlived the stored row
                self._cache.delete(task_id)
                return False

            def refresh():
                self._cache.delete(task_id)
                self._record("DELETE", task, task)
                self._dependencies.remove_vertex(task_id)
                self._compact_queue()

            self._best_effort("DELETE", task_id, refresh)
            return True

    async def set_flag(self, task_id: str, position: int, value: bool) -> Task | None:
        """
        Set or clear one bit of a task's flags.

        Raises:
            ValidationError: If position is outside 0..31
        """
        _check_flag_position(position)

        async with self._lock:
            task = await self._get(task_id)
            if task is None:
                return None
            flags = set_bit(task.flags, position) if value else clear_bit(task.flags, position)
            return await self._update(task_id, {"flags": flags})

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def get(self, task_id: str) -> Task | None:
        """
        Get a task, from the cache when possible.

        A cache miss reads the store under the index lock, so a row read
        before a concurrent delete or update can never land in the cache
        after it.
        """
        cached = self._cache.get(task_id)
        if cached is not None:
            return cached
        async with self._lock:
            return await self._get(task_id)

    async def _get(self, task_id: str) -> Task | None:
        # Caller holds self._lock
        cached = self._cache.get(task_id)
        if cached is not None:
            return cached

        task = await self.store.find_by_id(task_id)
        if task is not None:
            self._cache.set(task_id, task)
        return task

    async def list_for_user(
        self,
        user_id: str,
        status: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> list[Task]:
        """
        A user's tasks, newest first, optionally filtered; refreshes the cache.

        Runs under the index lock for the same reason as get().
        """
        async with self._lock:
            tasks = await self.store.find_by_user(user_id, status=status, priority=priority)
            for task in tasks:
                self._cache.set(task.id, task)
        return tasks

    async def search(self, user_id: str, query: str) -> list[Task]:
        """
        Ranked full-text results followed by substring matches.

        A task found by both searches appears once, at its full-text rank.

        Raises:
            ValidationError: If the query is blank
        """
        query = query.strip() if isinstance(query, str) else ""
        if not query:
            raise ValidationError("Search query required")

        limit = self.settings.search_limit
        ranked = await self.store.full_text_search(user_id, query, limit)
        matched = await self.store.substring_search(user_id, query, limit)

        seen: HashTable[str, Task] = HashTable(self.settings.cache_buckets)
        results = []
        for task in ranked + matched:
            if not seen.has(task.id):
                seen.set(task.id, task)
                results.append(task)
        return results

    def autocomplete(self, prefix: str) -> list[str]:
        """Recently indexed titles and tags starting with prefix."""
        return self._trie.search(prefix)[:MAX_SUGGESTIONS]

    async def sort_by_priority(self, user_id: str) -> list[Task]:
        """User's tasks, highest priority first (quicksort, not stable)."""
        return quick_sort(await self.list_for_user(user_id), compare_priority)

    async def sort_by_deadline(self, user_id: str) -> list[Task]:
        """User's tasks, earliest due first (merge sort, stable)."""
        return merge_sort(await self.list_for_user(user_id), compare_due_date)

    async def next_important(self, user_id: str) -> Task | None:
        """The user's most important open task, answered by the store."""
        return await self.store.find_next_important(user_id)

    def peek_next(self) -> Task | None:
        """
        Most important open task across all users known to this index.

        Snapshots that were deleted, superseded by a later update, or
        completed are dropped from the heap as they surface.
        """
        while not self._queue.is_empty():
            candidate = self._queue.peek()
            if self._is_live(candidate):
                return candidate
            self._queue.extract_min()
        return None

    def _is_live(self, snapshot: Task) -> bool:
        current = self._cache.get(snapshot.id)
        return (
            current is not None
            and current.updated_at == snapshot.updated_at
            and not snapshot.is_completed
        )

    def _compact_queue(self) -> None:
        # Dead snapshots outnumber live tasks two to one: sweep them out
        if self._queue.size() > 2 * max(self._cache.size(), 1):
            dropped = self._queue.retain(self._is_live)
            logger.debug(f"Dropped {dropped} stale snapshots from the priority queue")

    async def dependency_order(self) -> list[str]:
        """
        Every stored task id, prerequisites before dependents.

        Cycles are not reported; their members come out in DFS order.
        """
        for task_id in await self.store.find_all_ids():
            self._dependencies.add_vertex(task_id)
        return self._dependencies.topological_sort()

    def group(self, task_ids: list[str]) -> None:
        """
        Mark every listed task as related to the first one.

        Raises:
            ValidationError: If fewer than two ids are given
        """
        if len(task_ids) < 2:
            raise ValidationError("At least two task ids are required to form a group")
        hub = task_ids[0]
        for task_id in task_ids[1:]:
            self._groups.union(hub, task_id)

    def related(self, first_id: str, second_id: str) -> bool:
        """True if both ids were grouped together (directly or transitively)."""
        return self._groups.connected(first_id, second_id)

    def history(self) -> list[ActivityRecord]:
        """Activity records, oldest first."""
        return self._activity.to_list()

    async def productivity_analysis(self, user_id: str) -> dict:
        """Status counts, overdue count and time trend for a user."""
        tasks = await self.store.find_by_user(user_id, oldest_first=True)
        return productivity_report(tasks)

    def undo_last(self) -> CommandRecord | None:
        """
        Pop the most recent command record.

        The store is not touched; the caller decides how to reverse it.
        """
        return self._commands.pop()

    def is_flagged(self, task: Task, position: int) -> bool:
        _check_flag_position(position)
        return check_bit(task.flags, position)

    async def categories(self, user_id: str) -> list[str]:
        return await self.store.distinct_categories(user_id)

    def next_notification(self) -> Notification | None:
        """Oldest pending notification, or None."""
        return self._notifications.dequeue()

    def stats(self) -> dict:
        """Sizes of the in-memory structures."""
        return {
            "cached_tasks": self._cache.size(),
            "commands": self._commands.size(),
            "notifications": self._notifications.size(),
            "activity": self._activity.size(),
            "graph_vertices": len(self._dependencies),
            "queued": self._queue.size(),
        }
