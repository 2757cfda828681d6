import io
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

import paramiko

from constants import DEFAULT_CONNECT_TIMEOUT, DEFAULT_SSH_PORT
from core import RemoteCommandError

logger = logging.getLogger(__name__)

KEY_CLASSES = (paramiko.RSAKey, paramiko.ECDSAKey, paramiko.Ed25519Key)


@dataclass(frozen=True)
class CommandResult:
    address: str
    command: str
    exit_status: int
    stdout: str = ""
    stderr: str = ""

    @property
    def succeeded(self) -> bool:
        return self.exit_status == 0

    def describe(self) -> str:
        return f"{self.address}: {self.stdout}"


def load_private_key(key_material: str) -> paramiko.PKey:
    """Parse an RSA, ECDSA or Ed25519 private key from its text form."""
    if not key_material:
        raise paramiko.SSHException("no private key configured")

    for key_class in KEY_CLASSES:
        try:
            return key_class.from_private_key(io.StringIO(key_material))
        except (paramiko.SSHException, ValueError):
            continue
    raise paramiko.SSHException("unable to parse private key")


class RemoteCommandRunner:
    """Runs one command per SSH session on a remote host.

    Without a known_hosts file any host key is accepted. Set one to pin the
    expected host keys; unknown hosts are then rejected.
    """

    def __init__(
        self,
        username: str,
        private_key: str,
        port: int = DEFAULT_SSH_PORT,
        connect_timeout: Optional[float] = DEFAULT_CONNECT_TIMEOUT,
        command_timeout: Optional[float] = None,
        known_hosts_file: Optional[str] = None,
    ):
        self.username = username
        self._private_key = private_key
        self.port = port
        self.connect_timeout = connect_timeout
        self.command_timeout = command_timeout
        self.known_hosts_file = known_hosts_file

        if not known_hosts_file:
            logger.warning(
                "Host key verification is disabled; set SSH_KNOWN_HOSTS_FILE to pin host keys"
            )

    @classmethod
    def from_config(cls, config) -> "RemoteCommandRunner":
        return cls(
            username=config.os_user,
            private_key=config.private_key,
            port=config.ssh_port,
            connect_timeout=config.connect_timeout,
            command_timeout=config.command_timeout,
            known_hosts_file=config.known_hosts_file,
        )

    def _new_client(self) -> paramiko.SSHClient:
        client = paramiko.SSHClient()
        if self.known_hosts_file:
            client.load_host_keys(self.known_hosts_file)
            client.set_missing_host_key_policy(paramiko.RejectPolicy())
        else:
            client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        return client

    def run(self, command: str, address: str) -> CommandResult:
        """Run ``command`` on ``address`` and capture its output.

        Raises:
            RemoteCommandError: the key, connection, authentication or session failed.
        """
        try:
            pkey = load_private_key(self._private_key)
        except paramiko.SSHException as e:
            raise RemoteCommandError(address, str(e)) from e

        client = None
        try:
            client = self._new_client()
            client.connect(
                hostname=address,
                port=self.port,
                username=self.username,
                pkey=pkey,
                timeout=self.connect_timeout,
                banner_timeout=self.connect_timeout,
                auth_timeout=self.connect_timeout,
                allow_agent=False,
                look_for_keys=False,
            )
            logger.debug(f"Connected to {address}:{self.port} as {self.username}")

            _, stdout, stderr = client.exec_command(command, timeout=self.command_timeout)
            # stderr is drained alongside stdout so neither stream stalls the channel window
            with ThreadPoolExecutor(max_workers=1) as executor:
                stderr_future = executor.submit(stderr.read)
                out = stdout.read().decode(errors="replace")
                err = stderr_future.result().decode(errors="replace")
            exit_status = stdout.channel.recv_exit_status()
        except paramiko.AuthenticationException as e:
            raise RemoteCommandError(
                address, f"authentication failed for {self.username}: {e}"
            ) from e
        except (paramiko.SSHException, OSError) as e:
            raise RemoteCommandError(address, f"ssh failure on port {self.port}: {e}") from e
        finally:
            if client is not None:
                client.close()

        if exit_status != 0:
            logger.warning(f"{address}: '{command}' exited with {exit_status}: {err.strip()}")
        return CommandResult(
            address=address,
            command=command,
            exit_status=exit_status,
            stdout=out,
            stderr=err,
        )
