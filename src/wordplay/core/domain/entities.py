"""
Persistence Entities

Project, Document and Source records as exchanged with the persistence
collaborator. These are plain data holders; storage durability is not a
concern of the orchestrator.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class Project:
    id: int
    user_id: int
    name: str
    type: str
    style: str
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class Document:
    id: int
    project_id: int
    title: str
    content: str = ""
    word_count: int = 0
    style_metrics: dict[str, Any] | None = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class Source:
    id: int
    project_id: int
    type: str
    name: str
    url: str | None = None
    content: str | None = None
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
