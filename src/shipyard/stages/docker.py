"""docker stages: build, push, prune and delete the run's image."""

from __future__ import annotations

from shipyard import constants
from shipyard.context import BuildContext, Skip
from shipyard.environment import EnvironmentStore
from shipyard.errors import ConfigurationError
from shipyard.files import lookup_file, to_relative_path
from shipyard.models import DeleteImageStage, DockerBuildStage, DockerPushStage, PruneStage


def full_image_name(
    registry: str | None, env: EnvironmentStore, build_number: int
) -> str:
    """Return ``registry/appName:version-buildNumber``.

    An explicit *registry* wins over the ``REGISTRY`` environment key.

    Raises:
        ConfigurationError: If neither source provides a registry.
    """
    if not registry or not registry.strip():
        registry = env.get(constants.REGISTRY)
    if not registry.strip():
        raise ConfigurationError(
            "docker registry is not configured and REGISTRY is not set"
        )
    app_name = env.get(constants.APP_NAME)
    version = env.get(constants.VERSION)
    return f"{registry.strip()}/{app_name}:{version}-{build_number}"


async def execute_docker_build(
    stage: DockerBuildStage, context: BuildContext
) -> Skip | None:
    if stage.disabled:
        return context.skip("docker build is not checked")
    if not stage.build_image:
        return context.skip("docker build image is not enabled")

    dockerfile = lookup_file(context.workspace, stage.dockerfile, context.log)
    if dockerfile is None:
        return context.skip(f"{stage.dockerfile} not found in workspace")

    image = full_image_name(stage.registry, context.env, context.build_number)
    context.env.set(constants.IMAGE, image)

    relative = to_relative_path(context.workspace, dockerfile)
    await context.execute(f"docker build -t {image} -f {relative} .")
    context.built_image = image
    return None


async def execute_docker_push(
    stage: DockerPushStage, context: BuildContext
) -> Skip | None:
    if stage.disabled:
        return context.skip("docker push is not checked")
    if not stage.push_image:
        return context.skip("docker push image is not enabled")

    image = context.env.get(constants.IMAGE)
    if not image:
        return context.skip("no image was built in this run")

    await context.execute(f"docker push {image}")
    return None


async def execute_prune(stage: PruneStage, context: BuildContext) -> Skip | None:
    if stage.disabled:
        return context.skip("docker is not checked")
    await context.execute("docker image prune -f")
    return None


async def execute_delete_image(
    stage: DeleteImageStage, context: BuildContext
) -> Skip | None:
    if stage.disabled:
        return context.skip("docker is not checked")
    if not stage.delete_image_after_build:
        return context.skip("delete image after build is not enabled")
    if context.built_image is None:
        return context.skip("no image was built in this run")

    await context.execute(f"docker rmi -f {context.built_image}")
    return None
