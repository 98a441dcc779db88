"""Unified metadata records for automation artifacts.

Records arrive from the ingestion layer already normalized and discriminated
by ``type``. Field names follow Python conventions; the camelCase spelling
used by upstream sources (``qualityScore``, ``nodeCount``, ...) is accepted
as an alias on input.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel


class ArtifactType(str, Enum):
    WORKFLOW = "workflow"
    AI_AGENT = "ai_agent"
    TOOL = "tool"


class Complexity(str, Enum):
    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"
    ENTERPRISE = "enterprise"


class ExecutionMode(str, Enum):
    MANUAL = "manual"
    SCHEDULED = "scheduled"
    TRIGGERED = "triggered"
    WEBHOOK = "webhook"


class ToolType(str, Enum):
    UTILITY = "utility"
    INTEGRATION = "integration"
    AUTOMATION = "automation"
    ANALYSIS = "analysis"
    CONVERSION = "conversion"


class BaseMetadata(BaseModel):
    """Fields shared by every artifact record"""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
    )

    # Identification
    id: str = Field(..., min_length=1)
    name: str = ""
    description: str = ""
    version: Optional[str] = None

    # Provenance
    source: str = ""

    # Categorization
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    # Quality
    quality_score: float = Field(0.0, ge=0.0, le=100.0)
    is_verified: bool = False
    updated_at: Optional[datetime] = None

    @field_validator("name", "description", "source", mode="before")
    @classmethod
    def empty_string_for_null(cls, v: Any) -> Any:
        """Sources send null for absent values; treat it as empty."""
        return "" if v is None else v

    @field_validator("tags", mode="before")
    @classmethod
    def empty_tags_for_null(cls, v: Any) -> Any:
        return [] if v is None else v


class WorkflowMetadata(BaseMetadata):
    """Workflow record (n8n, Zapier, Make, ...)"""

    type: Literal["workflow"] = "workflow"

    integrations: List[str] = Field(default_factory=list)
    triggers: List[str] = Field(default_factory=list)
    actions: List[str] = Field(default_factory=list)
    node_count: Optional[int] = Field(None, ge=0)
    complexity: Optional[Complexity] = None
    execution_mode: Optional[ExecutionMode] = None

    @field_validator("integrations", "triggers", "actions", mode="before")
    @classmethod
    def empty_lists_for_null(cls, v: Any) -> Any:
        return [] if v is None else v


class AIAgentMetadata(BaseMetadata):
    """AI agent record"""

    type: Literal["ai_agent"] = "ai_agent"

    model: Optional[str] = None
    provider: Optional[str] = None
    capabilities: List[str] = Field(default_factory=list)
    use_cases: List[str] = Field(default_factory=list)
    industries: List[str] = Field(default_factory=list)

    @field_validator("capabilities", "use_cases", "industries", mode="before")
    @classmethod
    def empty_lists_for_null(cls, v: Any) -> Any:
        return [] if v is None else v


class ToolMetadata(BaseMetadata):
    """Tool record"""

    type: Literal["tool"] = "tool"

    tool_type: Optional[ToolType] = None
    platform: Optional[str] = None
    features: List[str] = Field(default_factory=list)
    capabilities: List[str] = Field(default_factory=list)
    integrations: List[str] = Field(default_factory=list)

    @field_validator("features", "capabilities", "integrations", mode="before")
    @classmethod
    def empty_lists_for_null(cls, v: Any) -> Any:
        return [] if v is None else v


UnifiedMetadata = Annotated[
    Union[WorkflowMetadata, AIAgentMetadata, ToolMetadata],
    Field(discriminator="type"),
]

# Validates raw dicts into the matching record class
RECORD_LIST_ADAPTER: TypeAdapter[List[UnifiedMetadata]] = TypeAdapter(
    List[UnifiedMetadata]
)
