"""Pydantic models for pipeline configuration, stages and results.

All data structures live here. No business logic, just shapes.
Stages, entries and deploy styles use discriminated unions on the
``kind`` field so invalid configurations fail at parse time.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class _Config(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


# ── Entries ──────────────────────────────────────────────────────


class JavaOptsEntry(_Config):
    kind: Literal["java_opts"]
    text: str


class K8sEnvEntry(_Config):
    kind: Literal["k8s_env"]
    text: str  # KEY=VALUE lines


class VariableEntry(_Config):
    kind: Literal["variable"]
    key: str
    value: str = ""


Entry = Annotated[
    JavaOptsEntry | K8sEnvEntry | VariableEntry,
    Field(discriminator="kind"),
]


# ── Deploy styles ────────────────────────────────────────────────


class TemplateDeployStyle(_Config):
    kind: Literal["template"] = "template"
    template: str = "k8s-deploy-template.yaml"
    template_url: str | None = None
    output: str = "deploy.yaml"


class FileDeployStyle(_Config):
    kind: Literal["file"]
    path: str


DeployStyle = Annotated[
    TemplateDeployStyle | FileDeployStyle,
    Field(discriminator="kind"),
]


class ServiceConfig(_Config):
    namespace: str | None = None
    name: str | None = None
    port: str | None = None
    template: str = "k8s-service-template.yaml"
    output: str = "service.yaml"


# ── Persisted configuration sections ─────────────────────────────


class MavenConfig(_Config):
    disabled: bool = False
    command: str = ""
    java_home: str | None = None


class PushConfig(_Config):
    disabled: bool = False
    push_image: bool = False
    registry: str | None = None


class DockerConfig(_Config):
    disabled: bool = False
    build_image: bool = False
    dockerfile: str = "Dockerfile"
    delete_image_after_build: bool = False
    push: PushConfig | None = None


class DeployConfig(_Config):
    disabled: bool = False
    kubeconfig: str | None = None
    namespace: str | None = None
    port: str | None = None
    replicas: str | None = None
    memory: str | None = None
    node_pool: str | None = None
    entries: list[Entry] = Field(default_factory=list)
    style: DeployStyle = Field(default_factory=TemplateDeployStyle)
    service: ServiceConfig | None = None


class PipelineDefinition(_Config):
    parameters: dict[str, Any] | None = None
    maven: MavenConfig | None = None
    docker: DockerConfig | None = None
    deploy: DeployConfig | None = None
    description: str = "author: {{ args.author }}, branch: {{ args.branch }}"
    strict_templates: bool = False


# ── Stage configurations ─────────────────────────────────────────


class MavenStage(_Config):
    kind: Literal["maven"] = "maven"
    disabled: bool = False
    command: str = ""
    java_home: str | None = None


class DockerBuildStage(_Config):
    kind: Literal["docker_build"] = "docker_build"
    disabled: bool = False
    build_image: bool = False
    dockerfile: str = "Dockerfile"
    registry: str | None = None


class DockerPushStage(_Config):
    kind: Literal["docker_push"] = "docker_push"
    disabled: bool = False
    push_image: bool = False


class DeployStage(_Config):
    kind: Literal["deploy"] = "deploy"
    disabled: bool = False
    kubeconfig: str | None = None
    namespace: str | None = None
    port: str | None = None
    replicas: str | None = None
    memory: str | None = None
    node_pool: str | None = None
    entries: list[Entry] = Field(default_factory=list)
    style: DeployStyle = Field(default_factory=TemplateDeployStyle)
    service: ServiceConfig | None = None
    strict_templates: bool = False


class PruneStage(_Config):
    kind: Literal["prune"] = "prune"
    disabled: bool = False


class DeleteImageStage(_Config):
    kind: Literal["delete_image"] = "delete_image"
    disabled: bool = False
    delete_image_after_build: bool = False


Stage = Annotated[
    MavenStage
    | DockerBuildStage
    | DockerPushStage
    | DeployStage
    | PruneStage
    | DeleteImageStage,
    Field(discriminator="kind"),
]


# ── Runtime results ──────────────────────────────────────────────


class StageStatus(str, Enum):
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


class StageResult(BaseModel):
    stage_name: str
    phase: Literal["main", "cleanup"]
    status: StageStatus
    detail: str | None = None
    duration_ms: float = 0.0


class PipelineResult(BaseModel):
    success: bool
    stage_results: list[StageResult]
    environment: dict[str, str]
    description: str | None = None
    error: str | None = None
    total_duration_ms: float
