from dataclasses import dataclass, field

import jsonschema

from .exceptions import ApiError


TASK_DEFINITION_SCHEMA = {
    "type": "object",
    "properties": {
        "taskDefinition": {
            "type": "object",
            "properties": {
                "family": {"type": "string"},
                "revision": {"type": "integer"},
                "containerDefinitions": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "name": {"type": "string"},
                            "image": {"type": "string"},
                            "environment": {
                                "type": "array",
                                "items": {
                                    "type": "object",
                                    "properties": {
                                        "name": {"type": "string"},
                                        "value": {"type": "string"},
                                    },
                                    "required": ["name"],
                                },
                            },
                            "mountPoints": {
                                "type": "array",
                                "items": {
                                    "type": "object",
                                    "properties": {
                                        "sourceVolume": {"type": "string"},
                                        "containerPath": {"type": "string"},
                                        "readOnly": {"type": "boolean"},
                                    },
                                    "required": ["sourceVolume", "containerPath"],
                                },
                            },
                        },
                        "required": ["name"],
                    },
                },
                "volumes": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "name": {"type": "string"},
                            "host": {
                                "type": "object",
                                "properties": {"sourcePath": {"type": "string"}},
                            },
                        },
                        "required": ["name"],
                    },
                },
            },
            "required": ["family", "containerDefinitions"],
        },
    },
    "required": ["taskDefinition"],
}


def validate_response(response, schema, what):
    try:
        jsonschema.validate(instance=response, schema=schema)
    except jsonschema.exceptions.ValidationError as e:
        raise ApiError(f"Unexpected {what} response: {e.message}")


@dataclass(frozen=True)
class EnvironmentEntry:
    name: str
    value: str


@dataclass(frozen=True)
class MountPoint:
    container_path: str
    source_volume: str
    read_only: bool = False


@dataclass(frozen=True)
class VolumeDeclaration:
    name: str
    host_source_path: str | None


@dataclass(frozen=True)
class ContainerDefinition:
    name: str
    image: str
    environment: tuple[EnvironmentEntry, ...] = ()
    mount_points: tuple[MountPoint, ...] = ()

    @classmethod
    def from_api(cls, data):
        return cls(
            name=data["name"],
            image=data.get("image", ""),
            environment=tuple(
                EnvironmentEntry(name=e["name"], value=e.get("value", ""))
                for e in data.get("environment", [])
            ),
            mount_points=tuple(
                MountPoint(
                    container_path=m["containerPath"],
                    source_volume=m["sourceVolume"],
                    read_only=m.get("readOnly", False),
                )
                for m in data.get("mountPoints", [])
            ),
        )


@dataclass(frozen=True)
class TaskDefinition:
    identifier: str
    containers: tuple[ContainerDefinition, ...]
    volumes: tuple[VolumeDeclaration, ...] = ()

    @classmethod
    def from_api(cls, response):
        """Build a TaskDefinition from a describe_task_definition response."""
        validate_response(response, TASK_DEFINITION_SCHEMA, "describe_task_definition")
        data = response["taskDefinition"]
        identifier = data["family"]
        if "revision" in data:
            identifier = f"{identifier}:{data['revision']}"
        return cls(
            identifier=identifier,
            containers=tuple(
                ContainerDefinition.from_api(c) for c in data["containerDefinitions"]
            ),
            volumes=tuple(
                VolumeDeclaration(
                    name=v["name"],
                    host_source_path=v.get("host", {}).get("sourcePath"),
                )
                for v in data.get("volumes", [])
            ),
        )


@dataclass(frozen=True)
class ClusterInstance:
    arn: str
    ec2_instance_id: str
    name: str


@dataclass(frozen=True)
class RunRequest:
    image: str
    host: str
    command: tuple[str, ...]
    environment: tuple[str, ...] = ()
    volumes: tuple[str, ...] = ()
    docker_options: tuple[str, ...] = ()
    ssh_options: tuple[str, ...] = ()
    ssh_user: str | None = None
    sudo: bool = False
    label: str = field(default="", compare=False)
