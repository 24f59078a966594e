"""
Command-line interface.

Reads one text file, pulls the last bracketed URL out of it, fetches the page
and prints a JSON record. Diagnostics go to stderr so stdout only carries
records.
"""
import argparse
import logging
import os
import sys
from typing import List, Optional

from parseurl.config import Config, ConfigurationError
from parseurl.orchestrator import Orchestrator


# Initialize logger
log = logging.getLogger(__name__)

PLAIN_FORMAT = "%(message)s"
VERBOSE_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)-20s | %(message)s"


class CLIError(Exception):
    """Exception raised for CLI errors."""
    pass


class CLI:
    """Command-line front end for the orchestrator."""

    def __init__(self, cfg: Optional[Config] = None):
        self.config = cfg
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="parseurl",
            description="Fetch the last URL found in the outermost brackets of a text file",
            formatter_class=argparse.ArgumentDefaultsHelpFormatter
        )

        parser.add_argument(
            "input_file",
            nargs="?",
            help="Text file to scan"
        )

        parser.add_argument(
            "-v", "--verbose",
            action="store_true",
            help="Enable verbose logging"
        )

        parser.add_argument(
            "--log-file",
            help="Also write the log to this file"
        )

        parser.add_argument(
            "--config",
            help="Path to custom .env configuration file"
        )

        parser.add_argument(
            "--delay",
            type=float,
            help="Seconds to wait before the request (default: REQUEST_DELAY)"
        )

        parser.add_argument(
            "--retry-delay",
            type=float,
            help="Seconds to wait before the single retry (default: RETRY_DELAY)"
        )

        parser.add_argument(
            "--timeout",
            type=int,
            help="Read timeout in seconds (default: READ_TIMEOUT)"
        )

        return parser

    def setup_logging(self, verbose: bool, logfile: Optional[str] = None) -> None:
        """
        Send log records to stderr.

        Without ``--verbose`` only the bare message is written, so a
        diagnostic like "No input provided." is the whole stderr output.
        """
        level = logging.DEBUG if verbose else logging.INFO
        fmt = VERBOSE_FORMAT if verbose else PLAIN_FORMAT

        handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
        if logfile:
            handlers.append(logging.FileHandler(logfile, encoding="utf-8"))

        logging.basicConfig(level=level, format=fmt, handlers=handlers, force=True)

        # Set lower level for external libraries
        logging.getLogger("urllib3").setLevel(logging.WARNING)
        logging.getLogger("requests").setLevel(logging.WARNING)

    def load_config(self, args: argparse.Namespace) -> Config:
        if args.config or self.config is None:
            cfg = Config(args.config)
        else:
            cfg = self.config
        if args.delay is not None:
            cfg.request_delay = max(0.0, args.delay)
        if args.retry_delay is not None:
            cfg.retry_delay = max(0.0, args.retry_delay)
        if args.timeout is not None:
            cfg.request_timeout = (cfg.request_timeout[0], max(1, args.timeout))
        cfg.validate_or_raise()
        return cfg

    def read_input(self, file_path: Optional[str], max_size: int) -> str:
        """
        Load the input file.

        Raises:
            CLIError: If the path is missing, does not exist or is too large
        """
        if not file_path:
            raise CLIError("No file path provided.")

        path = os.path.abspath(file_path)
        if not os.path.isfile(path):
            raise CLIError(f"File not found: {path}")
        if os.path.getsize(path) > max_size:
            raise CLIError(f"Input file too large: {path}")

        with open(path, encoding="utf-8-sig") as fh:
            return fh.read()

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run the CLI with the given arguments.

        Args:
            args: Command-line arguments (defaults to sys.argv[1:])

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        parsed_args = self.parser.parse_args(args)
        self.setup_logging(parsed_args.verbose, parsed_args.log_file)

        try:
            cfg = self.load_config(parsed_args)
            text = self.read_input(parsed_args.input_file, cfg.max_input_size)
        except ConfigurationError:
            # already reported by validate_or_raise
            return 1
        except CLIError as e:
            log.error("%s", e)
            return 1
        except (OSError, UnicodeDecodeError) as e:
            log.error("Error reading input file: %s", e)
            return 1

        log.debug("Configuration: %s", cfg.as_dict())
        orchestrator = Orchestrator(cfg)
        try:
            orchestrator.run_text(text)
            orchestrator.wait()
        except KeyboardInterrupt:
            orchestrator.cancel()
            raise
        finally:
            orchestrator.http_client.close()

        return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    cli = CLI()

    try:
        return cli.run(argv)

    except KeyboardInterrupt:
        log.warning("Execution interrupted by user")
        return 130

    except Exception as e:
        log.error("Execution failed: %s", e, exc_info=True)
        return 1
