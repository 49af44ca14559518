"""
Rebuild the docker run settings a container of a task definition gets from ECS.
"""
from .exceptions import UnknownVolume


def environment_bindings(container):
    """NAME=VALUE per environment entry, in order. Duplicates are kept."""
    return [f"{entry.name}={entry.value}" for entry in container.environment]


def volume_sources(task_definition):
    sources = {}
    for volume in task_definition.volumes:
        sources[volume.name] = volume.host_source_path
    return sources


def volume_bindings(task_definition, container):
    """HOST:CONTAINER per mount point, in order, with :ro for read-only mounts."""
    sources = volume_sources(task_definition)
    bindings = []
    for mount in container.mount_points:
        if mount.source_volume not in sources:
            raise UnknownVolume(
                f"Mount point {mount.container_path} of container '{container.name}' "
                f"references undeclared volume '{mount.source_volume}'"
            )
        host_path = sources[mount.source_volume]
        if not host_path:
            raise UnknownVolume(
                f"Volume '{mount.source_volume}' of task "
                f"'{task_definition.identifier}' has no host source path"
            )
        binding = f"{host_path}:{mount.container_path}"
        if mount.read_only:
            binding += ":ro"
        bindings.append(binding)
    return bindings
