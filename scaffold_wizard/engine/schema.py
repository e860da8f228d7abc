"""Pydantic models for declarative wizard specs."""

from typing import Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class PromptStepSpec(BaseModel):
    """
    A single question in a declarative wizard.

    Answers land in the context under state_key. The step is skipped when
    the context already holds a value for that key.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., description="Unique step identifier")
    type: Literal['string', 'boolean', 'integer', 'enum'] = Field('string', description="Answer type")
    prompt: str = Field(..., description="Prompt text; {key} placeholders are filled from context")
    state_key: str = Field(..., description="Context key to store the answer")
    default_value: Optional[Any] = Field(None, description="Default value if no input")
    default_from: Optional[str] = Field(None, description="Context key to read default from")
    validator: Optional[str] = Field(None, description="Registered validator name (e.g., 'scaffold.validate_folder')")
    options: Optional[List[Union[str, Dict[str, str]]]] = Field(None, description="Options for enum type")


class ExecuteStepSpec(BaseModel):
    """An effect applied after prompting, ordered by priority."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., description="Unique step identifier")
    action: str = Field(..., description="Registered action name (e.g., 'scaffold.write_dockerfile')")
    priority: int = Field(100, description="Lower runs first; ties keep declaration order")
    when: Optional[str] = Field(None, description="Context key that must be truthy for the step to run")


class WizardSpec(BaseModel):
    """A complete declarative wizard: questions first, then effects."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., description="Wizard identifier")
    version: Union[str, float] = Field("1.0", description="Spec version")
    description: str = Field("", description="Human-readable description")
    title: Optional[str] = Field(None, description="Shown once when prompting starts")
    prompt_steps: List[PromptStepSpec] = Field(default_factory=list)
    execute_steps: List[ExecuteStepSpec] = Field(default_factory=list)
