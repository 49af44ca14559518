import logging
import random
import re

from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import (
    ApiError,
    InstanceNotFound,
    InvalidInstanceSelector,
    ResolutionError,
)
from .models import ClusterInstance

logger = logging.getLogger(__name__)

RANDOM_INSTANCE = "-1"


class InstanceSelector:
    def __init__(self, ecs_client, ec2_client, rng=None):
        self.ecs = ecs_client
        self.ec2 = ec2_client
        self.rng = rng or random.Random()

    def list_instance_arns(self, cluster):
        arns = []
        try:
            paginator = self.ecs.get_paginator("list_container_instances")
            for page in paginator.paginate(cluster=cluster):
                arns.extend(page.get("containerInstanceArns", []))
        except (BotoCoreError, ClientError) as e:
            raise ApiError(f"Failed to list container instances in '{cluster}': {e}")
        if not arns:
            raise ApiError(f"No container instances found in cluster '{cluster}'")
        return arns

    def resolve_ec2_instance_id(self, cluster, arn):
        try:
            response = self.ecs.describe_container_instances(
                cluster=cluster, containerInstances=[arn]
            )
        except (BotoCoreError, ClientError) as e:
            raise ApiError(f"Failed to describe container instance '{arn}': {e}")
        for description in response.get("containerInstances", []):
            if description.get("ec2InstanceId"):
                return description["ec2InstanceId"]
        raise ResolutionError(f"Container instance '{arn}' has no EC2 instance id")

    def resolve_name(self, instance_id):
        try:
            response = self.ec2.describe_instances(InstanceIds=[instance_id])
        except (BotoCoreError, ClientError) as e:
            raise ApiError(f"Failed to describe EC2 instance '{instance_id}': {e}")
        for reservation in response.get("Reservations", []):
            for instance in reservation.get("Instances", []):
                for tag in instance.get("Tags", []):
                    if tag.get("Key") == "Name" and tag.get("Value"):
                        return tag["Value"]
        raise ResolutionError(f"EC2 instance '{instance_id}' has no Name tag")

    def candidates(self, cluster, shuffle=False):
        """Yield resolved ClusterInstances, one describe round trip at a time."""
        arns = self.list_instance_arns(cluster)
        if shuffle:
            self.rng.shuffle(arns)
        for arn in arns:
            instance_id = self.resolve_ec2_instance_id(cluster, arn)
            name = self.resolve_name(instance_id)
            logger.debug(f"Candidate {arn} -> {instance_id} ({name})")
            yield ClusterInstance(arn=arn, ec2_instance_id=instance_id, name=name)

    def select(self, cluster, selector=RANDOM_INSTANCE):
        """
        Select one instance of the cluster.

        The default selector "-1" picks a random instance. A numeric selector
        matches the zero-based position in the listing, any selector also
        matches instance names as a regular expression. The first match wins.
        """
        if selector == RANDOM_INSTANCE:
            for instance in self.candidates(cluster, shuffle=True):
                return instance
            raise InstanceNotFound(f"No instance available in cluster '{cluster}'")

        try:
            pattern = re.compile(selector)
        except re.error as e:
            raise InvalidInstanceSelector(f"Invalid instance selector '{selector}': {e}")
        index = int(selector) if selector.isascii() and selector.isdigit() else None

        for position, instance in enumerate(self.candidates(cluster)):
            if position == index or pattern.search(instance.name):
                return instance
        raise InstanceNotFound(
            f"No instance matching '{selector}' in cluster '{cluster}'"
        )
