from .runner import CommandResult, RemoteCommandRunner, load_private_key

__all__ = ["CommandResult", "RemoteCommandRunner", "load_private_key"]
