import argparse
from typing import List, NamedTuple, Optional


class CliArgs(NamedTuple):
    event_file: str
    dry_run: bool
    log_level: Optional[str]


class CliParser:
    @staticmethod
    def parse_arguments(argv: Optional[List[str]] = None) -> CliArgs:
        parser = argparse.ArgumentParser(
            description="Replay an SNS alarm event through the target group remediation"
        )
        parser.add_argument(
            "--event-file",
            "-e",
            type=str,
            required=True,
            help="Path to a Lambda SNS event in JSON (with Records[].Sns.Message).",
        )
        parser.add_argument(
            "--dry-run",
            "-dr",
            action="store_true",
            help="Resolve unhealthy targets but do not run any remote command.",
        )
        parser.add_argument(
            "--log-level",
            "-l",
            type=str.upper,
            choices=["DEBUG", "INFO", "WARNING", "ERROR"],
            help="Override the configured log level.",
        )
        args = parser.parse_args(argv)
        return CliArgs(
            event_file=args.event_file,
            dry_run=args.dry_run,
            log_level=args.log_level,
        )
