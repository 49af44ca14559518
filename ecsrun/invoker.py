import shlex
import subprocess

from .exceptions import EcsRunError


class RemoteInvoker:
    """Runs a docker container on a cluster instance over an interactive ssh session."""

    def __init__(self, logger, label: str = None):
        self.logger = logger
        self.label = label

    def _log(self, message):
        prefix = f"[{self.label}] " if self.label else ""
        self.logger.info(f"{prefix}{message}")

    @staticmethod
    def build_command(request):
        target = f"{request.ssh_user}@{request.host}" if request.ssh_user else request.host

        command = ["ssh", "-t", *request.ssh_options, target]
        if request.sudo:
            command.append("sudo")
        command += ["docker", "run", "-it"]
        for binding in request.environment:
            command += ["-e", shlex.quote(binding)]
        for binding in request.volumes:
            command += ["-v", shlex.quote(binding)]
        command += list(request.docker_options)
        command.append(shlex.quote(request.image))
        command.append(" ".join(request.command))
        return command

    def run(self, request):
        """Run the session in the foreground and return its exit code."""
        command = self.build_command(request)
        self._log(f"Starting {request.image} on {request.host}")
        self.logger.debug(f"Running: {shlex.join(command)}")
        try:
            completed = subprocess.run(command)
        except FileNotFoundError:
            raise EcsRunError("The ssh client is required.", exit_code=127)
        except KeyboardInterrupt:
            self._log("Interrupted")
            return 130
        returncode = completed.returncode
        if returncode < 0:
            # killed by a signal, report it the way a shell does
            returncode = 128 - returncode
        self._log(f"Session ended with exit code {returncode}")
        return returncode
