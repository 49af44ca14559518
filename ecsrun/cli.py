import logging
import shlex
import sys

from .aws_sessions import AWSSessions
from .checker import ConfigChecker
from .config_loader import ConfigLoader
from .exceptions import EcsRunError
from .instance_selector import InstanceSelector
from .invoker import RemoteInvoker
from .models import RunRequest
from .options import USAGE, build_config, parse_args
from .reconstructor import environment_bindings, volume_bindings
from .task_resolver import TaskResolver

logger = logging.getLogger("ecsrun")


def configure_logging(debug=False):
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.propagate = False


def build_run_request(config, ecs_client, ec2_client, rng=None):
    """Resolve the task, container and instance and assemble the docker run."""
    resolver = TaskResolver(ecs_client)
    task_definition = resolver.describe(config.task)
    container = resolver.select_container(task_definition, config.container)
    image = resolver.image_of(container)
    logger.debug(f"Using container '{container.name}' ({image}) of {task_definition.identifier}")

    environment = environment_bindings(container) if config.copy_environment else []
    volumes = volume_bindings(task_definition, container) if config.copy_volumes else []

    instance = InstanceSelector(ecs_client, ec2_client, rng=rng).select(
        config.cluster, config.instance
    )
    logger.info(f"Selected instance {instance.name} ({instance.ec2_instance_id})")

    return RunRequest(
        image=image,
        host=instance.name,
        command=config.command,
        environment=tuple(environment),
        volumes=tuple(volumes),
        docker_options=config.docker_options,
        ssh_options=config.ssh_options,
        ssh_user=config.ssh_user,
        sudo=config.sudo,
        label=container.name,
    )


def run(argv, environ=None, aws_sessions=None, checker=None):
    parsed = parse_args(argv)
    if parsed.get("help"):
        print(USAGE, end="")
        return 0

    file_config = ConfigLoader(parsed.get("config_path"), environ=environ).load_config()
    config = build_config(parsed, file_config)
    configure_logging(config.debug)

    aws_sessions = aws_sessions or AWSSessions()
    ecs_client, ec2_client = aws_sessions.clients(
        profile_name=config.profile, region_name=config.region
    )
    request = build_run_request(config, ecs_client, ec2_client)

    invoker = RemoteInvoker(logger, label=request.label)
    if config.dry_run:
        print(shlex.join(invoker.build_command(request)))
        return 0

    missing = (checker or ConfigChecker()).missing()
    if missing:
        raise EcsRunError(f"Missing required tools: {', '.join(missing)}", exit_code=127)
    return invoker.run(request)


def main(argv=None):
    configure_logging()
    try:
        return run(sys.argv[1:] if argv is None else argv)
    except EcsRunError as e:
        logger.error(e)
        return e.exit_code


if __name__ == "__main__":
    sys.exit(main())
