class EcsRunError(Exception):
    """Base error. Carries the exit code the command line tool reports."""

    exit_code = 1

    def __init__(self, message, exit_code=None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class UsageError(EcsRunError):
    pass


class MissingCommand(UsageError):
    pass


class MissingTask(UsageError):
    pass


class MissingCluster(UsageError):
    pass


class InvalidCluster(UsageError):
    pass


class InvalidContainerSelector(UsageError):
    pass


class InvalidInstanceSelector(UsageError):
    pass


class ConfigError(EcsRunError):
    pass


class ApiError(EcsRunError):
    pass


class ContainerNotFound(EcsRunError):
    pass


class MissingImage(EcsRunError):
    pass


class InstanceNotFound(EcsRunError):
    pass


class ResolutionError(EcsRunError):
    pass


class UnknownVolume(ResolutionError):
    pass
