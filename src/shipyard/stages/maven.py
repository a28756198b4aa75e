"""maven stage: run the project build, then pick up its published build info."""

from __future__ import annotations

from shipyard import constants
from shipyard.context import BuildContext, Skip
from shipyard.environment import MergePolicy
from shipyard.files import lookup_file, read_properties
from shipyard.models import MavenStage


async def execute_maven(stage: MavenStage, context: BuildContext) -> Skip | None:
    if stage.disabled:
        return context.skip("maven build is not checked")
    if not stage.command.strip():
        return context.skip("maven command is empty")

    if stage.java_home and stage.java_home.strip():
        context.env.set(constants.JAVA_HOME, stage.java_home)

    await context.execute(stage.command)
    return None


def merge_build_info(context: BuildContext) -> list[str]:
    """Merge ``dockerBuildInfo`` into the store without overwriting.

    Values a stage (or the build parameters) already set always win over
    the file. Returns the keys that were written.
    """
    path = lookup_file(context.workspace, constants.BUILD_INFO_FILE, context.log)
    if path is None:
        context.log.notice("%s file not found, nothing to merge", constants.BUILD_INFO_FILE)
        return []

    written = context.env.merge(read_properties(path), MergePolicy.IF_ABSENT)
    context.log.notice(
        "merged %s: %s",
        constants.BUILD_INFO_FILE,
        ", ".join(written) if written else "no new keys",
    )
    return written
