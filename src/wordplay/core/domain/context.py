"""
Execution Context

Per-session mutable state owned by exactly one agent session. Every mutation
goes through an explicit method on ExecutionContext so each field has a single
writer: `update()` for UI-provided state, and the record/goal/memory/editor
methods for the executor and the tool bodies.

The context is not safe to share between concurrent sessions; each session
must own a private instance.
"""

from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any

import structlog

from wordplay.core.domain.models import (
    EditorState,
    ExecutionStep,
    Goal,
    GoalStatus,
    MemoryEntry,
)
from wordplay.core.domain.text_ops import count_words
from wordplay.core.interfaces.persistence import PersistenceProtocol

DEFAULT_HISTORY_LIMIT = 100


class AutonomyLevel(str, Enum):
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"


@dataclass(frozen=True)
class AutonomyProfile:
    """Preset bundling iteration cap, chain-length cap and reflection toggle."""

    max_iterations: int
    max_tool_chain_length: int
    reflection_enabled: bool


DEFAULT_AUTONOMY_PROFILES: dict[AutonomyLevel, AutonomyProfile] = {
    AutonomyLevel.CONSERVATIVE: AutonomyProfile(10, 5, True),
    AutonomyLevel.MODERATE: AutonomyProfile(20, 10, True),
    AutonomyLevel.AGGRESSIVE: AutonomyProfile(50, 20, False),
}


def _as_record(value: Any) -> dict[str, Any] | None:
    if value is None:
        return None
    if isinstance(value, dict):
        return dict(value)
    if hasattr(value, "to_dict"):
        return value.to_dict()
    return asdict(value)


@dataclass
class ExecutionContext:
    """
    Live session state read by the planner and mutated by tools and the loop.

    Attributes:
        user_id: Owner of the session
        current_project: Active project record (id, name, type, ...)
        current_document: Active document record (id, title, content, ...)
        editor_state: Latest editor snapshot; mirrored into current_document
        project_documents: Documents of the active project
        project_sources: Sources of the active project
        execution_history: Chronological ExecutionSteps, capped at history_limit
        persistent_memory: Key/value memory store
        current_goals: Goals created during the session
        autonomy_level: Active autonomy preset name
        autonomy: Resolved preset values
    """

    user_id: int = 1
    current_project: dict[str, Any] | None = None
    current_document: dict[str, Any] | None = None
    editor_state: EditorState | None = None
    project_documents: list[dict[str, Any]] = field(default_factory=list)
    project_sources: list[dict[str, Any]] = field(default_factory=list)
    execution_history: list[ExecutionStep] = field(default_factory=list)
    persistent_memory: dict[str, MemoryEntry] = field(default_factory=dict)
    current_goals: list[Goal] = field(default_factory=list)
    autonomy_level: AutonomyLevel = AutonomyLevel.MODERATE
    autonomy: AutonomyProfile = DEFAULT_AUTONOMY_PROFILES[AutonomyLevel.MODERATE]
    llm_provider: str | None = None
    llm_model: str | None = None
    history_limit: int = DEFAULT_HISTORY_LIMIT
    persistence: PersistenceProtocol | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.logger = structlog.get_logger().bind(component="execution_context")

    # ------------------------------------------------------------------
    # Autonomy
    # ------------------------------------------------------------------

    @property
    def max_tool_chain_length(self) -> int:
        return self.autonomy.max_tool_chain_length

    @property
    def reflection_enabled(self) -> bool:
        return self.autonomy.reflection_enabled

    def set_autonomy_level(
        self,
        level: AutonomyLevel | str,
        profiles: dict[AutonomyLevel, AutonomyProfile] | None = None,
    ) -> None:
        level = AutonomyLevel(level)
        self.autonomy_level = level
        self.autonomy = (profiles or DEFAULT_AUTONOMY_PROFILES)[level]
        self.logger.debug(
            "autonomy_level_set",
            level=level.value,
            max_iterations=self.autonomy.max_iterations,
            reflection=self.autonomy.reflection_enabled,
        )

    # ------------------------------------------------------------------
    # UI-provided state
    # ------------------------------------------------------------------

    async def update(self, changes: dict[str, Any]) -> None:
        """
        Merge UI-provided state into the live context.

        A new current_project triggers a reload of its documents and sources
        from persistence. An editor snapshot arriving while a document is held
        is mirrored into that document so the orchestrator always sees the
        latest editor text.
        """
        if "llm_provider" in changes:
            self.llm_provider = changes["llm_provider"]
        if "llm_model" in changes:
            self.llm_model = changes["llm_model"]

        if "current_document" in changes:
            self.current_document = _as_record(changes["current_document"])

        if "editor_state" in changes and changes["editor_state"] is not None:
            editor = changes["editor_state"]
            if isinstance(editor, dict):
                content = editor.get("content", "")
                editor = EditorState(
                    title=editor.get("title", ""),
                    content=content,
                    word_count=editor.get("word_count", count_words(content)),
                    has_unsaved_changes=editor.get("has_unsaved_changes", False),
                )
            self.editor_state = editor
            self._mirror_editor_into_document()

        if "current_project" in changes:
            self.current_project = _as_record(changes["current_project"])
            if self.current_project:
                await self.refresh_project_data()

        ignored = set(changes) - {
            "llm_provider",
            "llm_model",
            "current_document",
            "editor_state",
            "current_project",
        }
        if ignored:
            self.logger.debug("context_update_ignored_keys", keys=sorted(ignored))

    async def refresh_project_data(self) -> None:
        """Bulk reload the active project's documents and sources."""
        if not self.current_project or self.persistence is None:
            return
        project_id = self.current_project.get("id")
        if project_id is None:
            return
        documents = await self.persistence.list_documents(project_id)
        sources = await self.persistence.list_sources(project_id)
        self.project_documents = [d.to_dict() for d in documents]
        self.project_sources = [s.to_dict() for s in sources]
        self.logger.info(
            "project_data_refreshed",
            project_id=project_id,
            documents=len(self.project_documents),
            sources=len(self.project_sources),
        )

    def set_editor_content(self, content: str, title: str | None = None) -> EditorState:
        """Replace the editor text (used by editor tools) and mirror it into the document."""
        current = self.editor_state or EditorState(
            title=(self.current_document or {}).get("title", "")
        )
        self.editor_state = replace(
            current,
            title=title if title is not None else current.title,
            content=content,
            word_count=count_words(content),
            has_unsaved_changes=True,
        )
        self._mirror_editor_into_document()
        return self.editor_state

    def current_text(self) -> str:
        """Latest text of the active document, preferring the editor snapshot."""
        if self.editor_state is not None:
            return self.editor_state.content
        if self.current_document:
            return self.current_document.get("content", "") or ""
        return ""

    def _mirror_editor_into_document(self) -> None:
        if self.current_document is None or self.editor_state is None:
            return
        self.current_document["content"] = self.editor_state.content
        self.current_document["word_count"] = self.editor_state.word_count
        if self.editor_state.title:
            self.current_document["title"] = self.editor_state.title

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def record_step(self, step: ExecutionStep) -> None:
        self.execution_history.append(step)
        overflow = len(self.execution_history) - self.history_limit
        if overflow > 0:
            del self.execution_history[:overflow]

    def recent_results(self, limit: int = 10) -> list[ExecutionStep]:
        """Last `limit` completed (result) steps, oldest first."""
        results = [s for s in self.execution_history if s.is_result]
        return results[-limit:]

    # ------------------------------------------------------------------
    # Goals
    # ------------------------------------------------------------------

    def add_goal(self, goal: Goal) -> Goal:
        self.current_goals.append(goal)
        return goal

    def get_goal(self, goal_id: str) -> Goal | None:
        """Find a goal by id, including sub-goals."""
        pending = list(self.current_goals)
        while pending:
            goal = pending.pop(0)
            if goal.id == goal_id:
                return goal
            pending.extend(goal.sub_goals)
        return None

    def update_goal_status(
        self,
        goal_id: str,
        status: GoalStatus | str,
        notes: str | None = None,
        actual_steps: int | None = None,
    ) -> Goal:
        """
        Move a goal forward in its lifecycle.

        Raises:
            KeyError: If the goal does not exist
            ValueError: If the transition would move backwards
        """
        goal = self.get_goal(goal_id)
        if goal is None:
            raise KeyError(f"Goal '{goal_id}' not found")
        status = GoalStatus(status)
        if status.rank <= goal.status.rank:
            raise ValueError(
                f"Cannot move goal from {goal.status.value} to {status.value}"
            )
        goal.status = status
        if status in (GoalStatus.COMPLETED, GoalStatus.FAILED):
            goal.completion_time = datetime.now()
        if notes:
            goal.notes = notes
        if actual_steps is not None:
            goal.actual_steps = actual_steps
        return goal

    # ------------------------------------------------------------------
    # Memory
    # ------------------------------------------------------------------

    def store_memory(self, key: str, value: Any, category: str = "general") -> MemoryEntry:
        entry = MemoryEntry(key=key, value=value, category=category)
        self.persistent_memory[key] = entry
        return entry

    def recall_memory(self, key: str) -> MemoryEntry | None:
        entry = self.persistent_memory.get(key)
        if entry is not None:
            entry.access_count += 1
        return entry

    # ------------------------------------------------------------------
    # Summaries
    # ------------------------------------------------------------------

    def summary(self) -> dict[str, Any]:
        """Compact view of the context handed to the planner prompt."""
        project = self.current_project
        document = self.current_document
        return {
            "current_project": {
                "id": project.get("id"),
                "name": project.get("name"),
                "type": project.get("type"),
            }
            if project
            else None,
            "current_document": {
                "id": document.get("id"),
                "title": document.get("title"),
                "word_count": document.get("word_count"),
            }
            if document
            else None,
            "editor": {
                "title": self.editor_state.title,
                "word_count": self.editor_state.word_count,
                "has_unsaved_changes": self.editor_state.has_unsaved_changes,
            }
            if self.editor_state
            else None,
            "document_count": len(self.project_documents),
            "source_count": len(self.project_sources),
            "active_goals": [
                g.description
                for g in self.current_goals
                if g.status in (GoalStatus.PENDING, GoalStatus.IN_PROGRESS)
            ],
            "memory_keys": sorted(self.persistent_memory),
            "autonomy_level": self.autonomy_level.value,
        }

    def describe(self) -> str:
        project = self.current_project
        label = f'Project "{project.get("name")}"' if project else "No project selected"
        return (
            f"Current context: {label}, {len(self.project_documents)} documents, "
            f"{len(self.project_sources)} sources"
        )
