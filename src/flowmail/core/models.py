"""
Data exchanged with the workflow runner.

Request models mirror what the runner sends to a plugin; update models
mirror what the execution-tracking API accepts for a step.
"""

from datetime import datetime
from enum import StrEnum, auto
from typing import Any, Callable, Dict, List, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Param(BaseModel):
    key: str
    value: str = ""


class Action(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    params: List[Param] = Field(default_factory=list)


class Step(BaseModel):
    id: str
    action: Action = Field(default_factory=Action)


class Execution(BaseModel):
    id: UUID


class RunnerConfig(BaseModel):
    """Where and how to reach the execution-tracking API."""

    api_url: str = Field(description="Base URL of the execution-tracking API")
    api_key: Optional[str] = Field(default=None, description="Runner API key")
    runner_id: Optional[str] = Field(default=None, description="Runner identifier")


class ExecuteTaskRequest(BaseModel):
    config: RunnerConfig
    execution: Execution
    step: Step


class AlertHandlerRequest(BaseModel):
    config: RunnerConfig
    body: Dict[str, Any] = Field(default_factory=dict)


class PluginResponse(BaseModel):
    success: bool
    data: Optional[Dict[str, Any]] = None


class StepStatus(StrEnum):
    """Step states reported by this plugin"""

    pending = auto()
    running = auto()
    success = auto()
    error = auto()


class ExecutionStepUpdate(BaseModel):
    """Status-shaped step update (RPC variant)."""

    id: str
    messages: List[str] = Field(default_factory=list)
    status: StepStatus
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None


class ActionStepUpdate(BaseModel):
    """Flag-shaped step update (linked variant)."""

    id: str
    action_id: Optional[str] = None
    action_messages: List[str] = Field(default_factory=list)
    pending: Optional[bool] = None
    running: Optional[bool] = None
    finished: Optional[bool] = None
    error: Optional[bool] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None


StepUpdate = Union[ExecutionStepUpdate, ActionStepUpdate]


class ParamSpec(BaseModel):
    """Parameter declaration shown in the runner's action editor."""

    key: str
    type: str
    default: Union[str, int]
    required: bool
    description: str


class PluginActionInfo(BaseModel):
    name: str
    description: str
    plugin: str
    icon: str
    category: str
    params: List[ParamSpec]


class PluginInfo(BaseModel):
    name: str
    type: str
    version: str
    author: str
    actions: PluginActionInfo
    endpoints: Dict[str, Any] = Field(default_factory=dict)


class PluginMeta(BaseModel):
    name: str
    type: str
    version: str
    creator: str


class ActionDetails(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str
    name: str
    description: str
    icon: str
    type: str
    category: str
    function: Optional[Callable[..., Any]] = Field(default=None, exclude=True)
    params: str = Field(description="JSON-encoded list of parameter declarations")


class PluginDetails(BaseModel):
    action: ActionDetails


class ExecuteOutcome(BaseModel):
    """Result flags returned to the runner by the linked variant."""

    data: Optional[Dict[str, Any]] = None
    finished: bool = False
    canceled: bool = False
    no_pattern_match: bool = False
    failed: bool = False


__all__ = [
    "Param",
    "Action",
    "Step",
    "Execution",
    "RunnerConfig",
    "ExecuteTaskRequest",
    "AlertHandlerRequest",
    "PluginResponse",
    "StepStatus",
    "ExecutionStepUpdate",
    "ActionStepUpdate",
    "StepUpdate",
    "ParamSpec",
    "PluginActionInfo",
    "PluginInfo",
    "PluginMeta",
    "ActionDetails",
    "PluginDetails",
    "ExecuteOutcome",
]
