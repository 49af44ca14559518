import logging

from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import (
    ApiError,
    ContainerNotFound,
    InvalidContainerSelector,
    MissingImage,
)
from .models import TaskDefinition

logger = logging.getLogger(__name__)


class TaskResolver:
    def __init__(self, ecs_client):
        self.ecs = ecs_client

    def describe(self, task_name):
        """Fetch a task definition by family, family:revision or ARN."""
        logger.debug(f"Describing task definition {task_name}")
        try:
            response = self.ecs.describe_task_definition(taskDefinition=task_name)
        except (BotoCoreError, ClientError) as e:
            raise ApiError(f"Failed to describe task definition '{task_name}': {e}")
        return TaskDefinition.from_api(response)

    @staticmethod
    def select_container(task_definition, selector):
        """
        Pick a container definition by zero-based index ("0", "2") or by exact
        name ("web"). Names must start with a letter.
        """
        containers = task_definition.containers
        if selector.isascii() and selector.isdigit():
            index = int(selector)
            if index >= len(containers):
                raise ContainerNotFound(
                    f"Container index {index} out of range, task "
                    f"'{task_definition.identifier}' has {len(containers)} container(s)"
                )
            return containers[index]

        if selector[:1].isascii() and selector[:1].isalpha():
            for container in containers:
                if container.name == selector:
                    return container
            names = ", ".join(c.name for c in containers)
            raise ContainerNotFound(
                f"Container '{selector}' not found in task "
                f"'{task_definition.identifier}'. Available containers: {names}"
            )

        raise InvalidContainerSelector(
            f"Invalid container selector '{selector}', expected an index or a name"
        )

    @staticmethod
    def image_of(container):
        if not container.image:
            raise MissingImage(f"Container '{container.name}' has no image")
        return container.image
