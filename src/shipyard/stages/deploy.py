"""deploy stage: render Kubernetes manifests and apply them with kubectl.

Variables are layered in a fixed order before rendering: whatever
earlier stages and build info put in the store, then this stage's own
settings, then the configured entries. Later layers overwrite earlier
ones, so an entry is how an operator overrides a single value without
editing the template file.
"""

from __future__ import annotations

from pathlib import Path

from shipyard import constants
from shipyard.context import BuildContext, Skip
from shipyard.environment import EnvironmentStore
from shipyard.files import lookup_file, to_relative_path
from shipyard.models import DeployStage, FileDeployStyle, ServiceConfig, TemplateDeployStyle
from shipyard.stages.entries import contribute
from shipyard.templates import resolve


def render_manifest(
    template_path: Path,
    output_path: Path,
    env: EnvironmentStore,
    *,
    strict: bool = False,
) -> str:
    """Render *template_path* against *env* and write it to *output_path*."""
    rendered = resolve(template_path.read_text(encoding="utf-8"), env, strict=strict)
    output_path.write_text(rendered, encoding="utf-8")
    return rendered


def apply_stage_variables(stage: DeployStage, env: EnvironmentStore) -> None:
    settings = {
        constants.NAMESPACE: stage.namespace,
        constants.PORT: stage.port,
        constants.REPLICAS: stage.replicas,
        constants.MEMORY: stage.memory,
        constants.NODE_POOL: stage.node_pool,
    }
    for key, value in settings.items():
        if value is not None and value.strip():
            env.set(key, value)
    for entry in stage.entries:
        contribute(entry, env)


def apply_service_variables(service: ServiceConfig, env: EnvironmentStore) -> None:
    """Service settings fall back to the deployment's namespace, app name and port."""
    fallbacks = {
        constants.K8S_SERVICE_NAMESPACE: (service.namespace, constants.NAMESPACE),
        constants.K8S_SERVICE_NAME: (service.name, constants.APP_NAME),
        constants.K8S_SERVICE_PORT: (service.port, constants.PORT),
    }
    for key, (value, fallback_key) in fallbacks.items():
        if value is not None and value.strip():
            env.set(key, value)
        else:
            env.set(key, env.get(fallback_key))


def _manifest_argument(context: BuildContext, path: Path) -> str:
    try:
        return to_relative_path(context.workspace, path)
    except ValueError:
        return str(path)


def kubectl_apply(manifest: str, kubeconfig: str | None) -> str:
    command = f"kubectl apply -f {manifest}"
    if kubeconfig and kubeconfig.strip():
        command += f" --kubeconfig {kubeconfig.strip()}"
    return command


async def _template_manifest(
    style: TemplateDeployStyle, stage: DeployStage, context: BuildContext
) -> Path | None:
    template = lookup_file(context.workspace, style.template, context.log)
    if template is None and style.template_url:
        context.log.notice("fetching deploy template from %s", style.template_url)
        await context.execute(f"wget -O {style.template} {style.template_url}")
        template = lookup_file(context.workspace, style.template, context.log)
    if template is None:
        return None

    output = template.parent / style.output
    rendered = render_manifest(
        template, output, context.env, strict=stage.strict_templates
    )
    context.log.notice("resolved k8s deploy file %s", _manifest_argument(context, output))
    context.log.line(rendered)
    return output


def _service_manifest(
    service: ServiceConfig, stage: DeployStage, context: BuildContext
) -> Path | None:
    apply_service_variables(service, context.env)
    template = lookup_file(context.workspace, service.template, context.log)
    if template is None:
        context.log.notice("service template %s not found, skip service deploy", service.template)
        return None

    output = template.parent / service.output
    rendered = render_manifest(
        template, output, context.env, strict=stage.strict_templates
    )
    context.log.notice("resolved k8s service file %s", _manifest_argument(context, output))
    context.log.line(rendered)
    return output


async def execute_deploy(stage: DeployStage, context: BuildContext) -> Skip | None:
    if stage.disabled:
        return context.skip("k8s deploy is not checked")

    if not context.env.get(constants.IMAGE):
        return context.skip("image name is empty")

    apply_stage_variables(stage, context.env)

    match stage.style:
        case TemplateDeployStyle() as style:
            manifest = await _template_manifest(style, stage, context)
            if manifest is None:
                return context.skip(f"deploy template {style.template} not found")
        case FileDeployStyle() as style:
            manifest = context.workspace / style.path
            if not manifest.is_file():
                return context.skip(f"deploy file {style.path} not found")
        case _:
            raise TypeError(f"Unknown deploy style: {getattr(stage.style, 'kind', 'unknown')}")

    if stage.kubeconfig is None or not stage.kubeconfig.strip():
        context.log.notice("kubeconfig not specified, kubectl will use its default config")

    await context.execute(kubectl_apply(_manifest_argument(context, manifest), stage.kubeconfig))

    if stage.service is not None:
        service_manifest = _service_manifest(stage.service, stage, context)
        if service_manifest is not None:
            await context.execute(
                kubectl_apply(_manifest_argument(context, service_manifest), stage.kubeconfig)
            )
    return None
