import re
from dataclasses import dataclass

from .exceptions import (
    InvalidCluster,
    MissingCluster,
    MissingCommand,
    MissingTask,
    UsageError,
)


USAGE = """\
usage: ecs-run [+e] [+v] [--sudo] --task TASK [--cluster CLUSTER]
               [--container INDEX|NAME] [--instance INDEX|REGEX]
               [--ssh-user USER] [--ssh-X [ARG]]... [--profile PROFILE]
               [--region REGION] [--config PATH] [--dry-run] [--debug]
               [DOCKER_OPTION]... -- [DOCKER_OPTION... --] COMMAND...

Start a container from an ECS task definition on one of the cluster's
instances, over ssh, with the task's environment and volumes.

  +e                 do not copy the container's environment variables
  +v                 do not copy the container's volume mounts
  --sudo             run docker through sudo on the instance
  --task TASK        task definition family, family:revision or ARN
  --cluster CLUSTER  defaults to TASK without its "ecscompose-" prefix
  --container SEL    container index or name (default 0)
  --instance SEL     instance index or name regex (default -1, random)
  --ssh-user USER    log in to the instance as USER
  --ssh-X [ARG]      pass -X [ARG] to ssh
  --profile PROFILE  AWS profile
  --region REGION    AWS region
  --config PATH      JSON configuration file (default ~/.ecs-run.json)
  --dry-run          print the ssh command instead of running it
  --debug            verbose logging
  -h, --help         show this help

Any other option is passed on to docker run.
"""

CLUSTER_PREFIX = "ecscompose-"
VALID_CLUSTER = re.compile(r"-(alpha|staging|local|production)$|-qa.*$")

# ssh flags that take no argument
SSH_BOOLEAN_FLAGS = "46AaCfGgKkMNnqsTtVvXxYy"
SSH_FLAG = re.compile(r"--ssh-([A-Za-z0-9])")

VALUE_OPTIONS = {
    "--task": "task",
    "--container": "container",
    "--instance": "instance",
    "--cluster": "cluster",
    "--ssh-user": "ssh_user",
    "--profile": "profile",
    "--region": "region",
    "--config": "config_path",
}

SWITCHES = {
    "+e": ("copy_environment", False),
    "+v": ("copy_volumes", False),
    "--sudo": ("sudo", True),
    "--dry-run": ("dry_run", True),
    "--debug": ("debug", True),
    "-h": ("help", True),
    "--help": ("help", True),
}

DEFAULTS = {
    "task": None,
    "cluster": None,
    "container": "0",
    "instance": "-1",
    "ssh_user": None,
    "profile": None,
    "region": None,
    "config_path": None,
    "sudo": False,
    "copy_environment": True,
    "copy_volumes": True,
    "dry_run": False,
    "debug": False,
    "help": False,
}


@dataclass(frozen=True)
class RunConfig:
    task: str
    cluster: str
    command: tuple[str, ...]
    container: str = "0"
    instance: str = "-1"
    ssh_user: str | None = None
    ssh_options: tuple[str, ...] = ()
    docker_options: tuple[str, ...] = ()
    sudo: bool = False
    copy_environment: bool = True
    copy_volumes: bool = True
    profile: str | None = None
    region: str | None = None
    dry_run: bool = False
    debug: bool = False


def parse_args(argv):
    """
    Split the command line into the options that were given explicitly.

    Returns a dict holding only the keys that appeared on the command line,
    plus "ssh_options", "docker_options" and "command" lists.
    """
    parsed = {"ssh_options": [], "docker_options": [], "command": []}
    tokens = list(argv)
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token in SWITCHES:
            key, value = SWITCHES[token]
            parsed[key] = value
        elif token in VALUE_OPTIONS:
            parsed[VALUE_OPTIONS[token]] = _option_value(tokens, i)
            i += 1
        elif SSH_FLAG.fullmatch(token):
            flag = SSH_FLAG.fullmatch(token).group(1)
            if flag in SSH_BOOLEAN_FLAGS:
                parsed["ssh_options"].append(f"-{flag}")
            else:
                parsed["ssh_options"] += [f"-{flag}", _option_value(tokens, i)]
                i += 1
        elif token == "--":
            rest = tokens[i + 1:]
            if "--" in rest:
                split = len(rest) - 1 - rest[::-1].index("--")
                parsed["docker_options"] += rest[:split]
                parsed["command"] = rest[split + 1:]
            else:
                parsed["command"] = rest
            break
        else:
            parsed["docker_options"].append(token)
        i += 1
    return parsed


def _option_value(tokens, i):
    if i + 1 >= len(tokens):
        raise UsageError(f"Option {tokens[i]} requires an argument")
    return tokens[i + 1]


def derive_cluster(task):
    if task.startswith(CLUSTER_PREFIX):
        return task[len(CLUSTER_PREFIX):]
    return task


def validate_cluster(cluster):
    if not VALID_CLUSTER.search(cluster):
        raise InvalidCluster(
            f"Invalid cluster '{cluster}', expected a name ending in -alpha, "
            "-staging, -local, -production or -qa*"
        )


def build_config(parsed, defaults=None):
    """Merge command line values over configured defaults and validate the result."""
    values = dict(DEFAULTS)
    values.update(defaults or {})
    values.update({k: v for k, v in parsed.items() if k in DEFAULTS})

    if not parsed.get("command"):
        raise MissingCommand("No command given, put it after --")
    if not values["task"]:
        raise MissingTask("No task given, use --task")
    cluster = values["cluster"] or derive_cluster(values["task"])
    if not cluster:
        raise MissingCluster("No cluster given, use --cluster")
    validate_cluster(cluster)

    ssh_options = list((defaults or {}).get("ssh_options", [])) + parsed.get(
        "ssh_options", []
    )
    return RunConfig(
        task=values["task"],
        cluster=cluster,
        command=tuple(parsed["command"]),
        container=str(values["container"]),
        instance=str(values["instance"]),
        ssh_user=values["ssh_user"],
        ssh_options=tuple(ssh_options),
        docker_options=tuple(parsed.get("docker_options", [])),
        sudo=values["sudo"],
        copy_environment=values["copy_environment"],
        copy_volumes=values["copy_volumes"],
        profile=values["profile"],
        region=values["region"],
        dry_run=values["dry_run"],
        debug=values["debug"],
    )
