import logging
import sys
from typing import List, Optional

from config import get_config
from csv_io import write_accounts
from errors import RecordDecodeError
from payments_engine import PaymentsEngine

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    config = get_config()

    logging.basicConfig(
        level=config.log_level.upper(),
        format=config.log_format,
        stream=sys.stderr,
    )

    if len(args) != 1:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        return 1

    filepath = args[0]
    engine = PaymentsEngine(config)
    try:
        accounts = engine.process_file(filepath)
    except OSError as e:
        logger.error(f"Cannot read {filepath}: {e}")
        return 1
    except RecordDecodeError as e:
        logger.error(f"Malformed input in {filepath}, {e}")
        return 1

    write_accounts(accounts, sys.stdout)
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
