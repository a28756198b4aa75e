"""description step: summarise VCS metadata for the build record."""

from __future__ import annotations

from shipyard import constants
from shipyard.context import BuildContext
from shipyard.files import lookup_file, read_properties
from shipyard.templates import render_template


def discover_vcs_metadata(context: BuildContext) -> dict[str, str]:
    """Return ``author`` and ``branch`` from git.properties or the environment.

    Either key may be missing from the result.
    """
    metadata: dict[str, str] = {}
    path = lookup_file(context.workspace, constants.GIT_PROPERTIES_FILE, context.log)
    if path is not None:
        props = read_properties(path)
        if props.get(constants.GIT_PROPERTY_AUTHOR):
            metadata["author"] = props[constants.GIT_PROPERTY_AUTHOR]
        if props.get(constants.GIT_PROPERTY_BRANCH):
            metadata["branch"] = props[constants.GIT_PROPERTY_BRANCH]

    if "author" not in metadata and context.env.get(constants.GIT_AUTHOR):
        metadata["author"] = context.env.get(constants.GIT_AUTHOR)
    if "branch" not in metadata and context.env.get(constants.GIT_BRANCH):
        metadata["branch"] = context.env.get(constants.GIT_BRANCH)
    return metadata


def build_description(template: str, context: BuildContext) -> str | None:
    """Render the build description, or None when no VCS metadata exists."""
    metadata = discover_vcs_metadata(context)
    if not metadata:
        context.log.notice("no vcs metadata found, build description not set")
        return None

    variables = {
        "author": metadata.get("author", ""),
        "branch": metadata.get("branch", ""),
        "env": context.env.as_dict(),
    }
    description = render_template(template, variables).strip()
    context.log.notice("build description: %s", description)
    return description
