"""Tests for the maven stage and build-info merging."""

from __future__ import annotations

import pytest

from shipyard.context import Skip
from shipyard.errors import ProcessFailure
from shipyard.models import MavenStage
from shipyard.stages.maven import execute_maven, merge_build_info


@pytest.mark.asyncio
async def test_runs_configured_command(context, runner):
    stage = MavenStage(command="mvn -B clean package", java_home="/opt/jdk17")
    outcome = await execute_maven(stage, context)
    assert outcome is None
    assert runner.commands == ["mvn -B clean package"]
    assert runner.envs[0]["JAVA_HOME"] == "/opt/jdk17"


@pytest.mark.asyncio
async def test_blank_java_home_not_set(context, runner):
    await execute_maven(MavenStage(command="mvn package", java_home="  "), context)
    assert "JAVA_HOME" not in context.env


@pytest.mark.asyncio
async def test_disabled_skips(context, runner):
    outcome = await execute_maven(MavenStage(disabled=True, command="mvn package"), context)
    assert isinstance(outcome, Skip)
    assert runner.commands == []


@pytest.mark.asyncio
async def test_blank_command_skips(context, runner):
    outcome = await execute_maven(MavenStage(command="   "), context)
    assert outcome == Skip("maven command is empty")
    assert runner.commands == []


@pytest.mark.asyncio
async def test_failed_command_raises(context, runner):
    runner.fail_on["mvn"] = 1
    context.current_stage = "maven"
    with pytest.raises(ProcessFailure, match="exited with status 1"):
        await execute_maven(MavenStage(command="mvn package"), context)


def test_merge_build_info_does_not_overwrite(context):
    (context.workspace / "target").mkdir()
    (context.workspace / "target" / "dockerBuildInfo").write_text(
        "APP_NAME=orders\nVERSION=1.4.0\nREGISTRY=file-registry\n"
    )
    context.env.set("REGISTRY", "param-registry")

    written = merge_build_info(context)

    assert sorted(written) == ["APP_NAME", "VERSION"]
    assert context.env.get("REGISTRY") == "param-registry"
    assert context.env.get("APP_NAME") == "orders"
    assert context.env.get("VERSION") == "1.4.0"


def test_merge_build_info_missing_file(context, log_stream):
    assert merge_build_info(context) == []
    assert "dockerBuildInfo file not found" in log_stream.getvalue()
